"""Access tokens and anti-forgery nonces."""

from __future__ import annotations

import hashlib
import hmac
import math
import time
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from .config import settings

ACCESS_TOKEN_TYPE = "access"
NONCE_LENGTH = 10


def create_access_token(subject: str, *, expires_minutes: int | None = None) -> str:
    """Issue a signed access token for the given user identifier."""
    issued_at = datetime.now(timezone.utc)
    lifetime = timedelta(
        minutes=expires_minutes
        if expires_minutes is not None
        else settings.access_token_expire_minutes
    )
    payload = {
        "sub": subject,
        "type": ACCESS_TOKEN_TYPE,
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + lifetime).timestamp()),
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict[str, Any]:
    """Decode and validate a token, raising ValueError when it is unusable."""
    try:
        return jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except jwt.PyJWTError as exc:
        raise ValueError("Invalid token") from exc


def _nonce_tick(now: float | None = None) -> int:
    half_life = max(settings.nonce_lifetime_seconds, 2) / 2
    current = time.time() if now is None else now
    return math.ceil(current / half_life)


def _nonce_hash(tick: int, action: str, user_id: str | None) -> str:
    message = f"{tick}|{action}|{user_id or '0'}"
    digest = hmac.new(
        settings.secret_key.encode("utf-8"),
        message.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()
    return digest[-12:-2]


def create_nonce(action: str, user_id: str | None, *, now: float | None = None) -> str:
    """Mint a short-lived token bound to an action and a user."""
    return _nonce_hash(_nonce_tick(now), action, user_id)


def verify_nonce(
    nonce: str,
    action: str,
    user_id: str | None,
    *,
    now: float | None = None,
) -> int:
    """Check a nonce.

    Returns 1 when it was minted in the current half of its lifetime, 2 when
    it comes from the previous half, and 0 when it is invalid or expired.
    """
    if not nonce or len(nonce) != NONCE_LENGTH:
        return 0

    tick = _nonce_tick(now)
    for age, candidate_tick in enumerate((tick, tick - 1), start=1):
        expected = _nonce_hash(candidate_tick, action, user_id)
        if hmac.compare_digest(nonce, expected):
            return age
    return 0
