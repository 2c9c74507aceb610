"""SQLModel models package."""

from .user import User
from .user_meta import UserMeta

__all__ = [
    "User",
    "UserMeta",
]
