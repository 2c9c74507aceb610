"""Core configuration and security primitives."""

from .config import Settings, settings
from .security import (
    create_access_token,
    create_nonce,
    decode_token,
    verify_nonce,
)

__all__ = [
    "Settings",
    "settings",
    "create_access_token",
    "decode_token",
    "create_nonce",
    "verify_nonce",
]
