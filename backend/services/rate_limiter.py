"""Redis-backed rate limiting utilities."""

from __future__ import annotations

import logging
import time
from functools import lru_cache
from typing import Callable, Iterable, Protocol, runtime_checkable

from fastapi import status
from fastapi.responses import JSONResponse
from redis.asyncio import Redis
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from core import decode_token, settings

ACCESS_COOKIE_NAME = "access_token"
logger = logging.getLogger(__name__)


@runtime_checkable
class SupportsRateLimitClient(Protocol):
    async def incr(self, key: str) -> int: ...

    async def expire(self, key: str, ttl: int) -> None: ...


def _extract_subject(request: Request) -> str | None:
    token = request.cookies.get(ACCESS_COOKIE_NAME)
    if not token:
        scheme, _, value = request.headers.get("authorization", "").partition(" ")
        if scheme.lower() == "bearer":
            token = value.strip()
    if not token:
        return None

    try:
        payload = decode_token(token)
    except ValueError:
        return None

    subject = payload.get("sub")
    if isinstance(subject, str) and subject.strip():
        return subject.strip()
    return None


def default_client_identifier(request: Request) -> str:
    """Resolve a stable client identifier for rate limiting."""
    subject = _extract_subject(request)
    if subject is not None:
        return f"user:{subject}"

    if request.client and request.client.host:
        return request.client.host
    return "anonymous"


def too_many_requests_response(request: Request) -> Response:
    return JSONResponse(
        {"detail": "Too Many Requests"},
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
    )


class RateLimiter:
    """Simple fixed-window rate limiter backed by Redis."""

    def __init__(
        self,
        redis_client: SupportsRateLimitClient,
        limit: int,
        window_seconds: int,
        prefix: str = "rate-limit",
    ) -> None:
        self.redis = redis_client
        self.limit = max(limit, 0)
        self.window_seconds = max(window_seconds, 0)
        self.prefix = prefix

    async def allow(self, key: str) -> bool:
        """Return True when the request should be allowed, False if limited."""
        if self.limit == 0 or self.window_seconds == 0:
            return True

        bucket = int(time.time()) // self.window_seconds
        redis_key = f"{self.prefix}:{key}:{bucket}"

        count = await self.redis.incr(redis_key)
        if count == 1:
            await self.redis.expire(redis_key, self.window_seconds)
        return count <= self.limit


@lru_cache
def get_redis_client() -> SupportsRateLimitClient:
    """Return a cached async Redis client."""
    return Redis.from_url(settings.redis_url, decode_responses=False)


_cached_rate_limiter: RateLimiter | None = None


def get_rate_limiter() -> RateLimiter:
    """Singleton accessor for the shared rate limiter."""
    global _cached_rate_limiter
    if _cached_rate_limiter is None:
        _cached_rate_limiter = RateLimiter(
            redis_client=get_redis_client(),
            limit=settings.rate_limit_requests,
            window_seconds=settings.rate_limit_window_seconds,
        )
    return _cached_rate_limiter


def set_rate_limiter(limiter: RateLimiter | None) -> None:
    """Override the cached rate limiter (primarily for tests)."""
    global _cached_rate_limiter
    _cached_rate_limiter = limiter


class RateLimitMiddleware(BaseHTTPMiddleware):
    """ASGI middleware that enforces the configured rate limits.

    Limiter failures let the request through.
    """

    def __init__(
        self,
        app: ASGIApp,
        limiter_factory: Callable[[], RateLimiter],
        exempt_paths: Iterable[str] | None = None,
        exempt_prefixes: Iterable[str] | None = None,
        client_identifier: Callable[[Request], str] | None = None,
        limited_response: Callable[[Request], Response] | None = None,
    ) -> None:
        super().__init__(app)
        self.limiter_factory = limiter_factory
        self.exempt_paths = set(exempt_paths or ())
        self.exempt_prefixes = tuple(exempt_prefixes or ())
        self.client_identifier = client_identifier or default_client_identifier
        self.limited_response = limited_response or too_many_requests_response

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint):
        path = request.url.path
        if path in self.exempt_paths or any(
            path.startswith(prefix) for prefix in self.exempt_prefixes
        ):
            return await call_next(request)

        override = getattr(request.app.state, "rate_limiter_override", None)
        limiter = override if override is not None else self._get_limiter()
        if limiter is None:
            return await call_next(request)

        client_key = self.client_identifier(request) or "anonymous"
        try:
            is_allowed = await limiter.allow(client_key)
        except Exception as limiter_error:  # pragma: no cover - Redis outage
            logger.warning(
                "Rate limiter unavailable",
                extra={"path": path},
                exc_info=limiter_error,
            )
            return await call_next(request)

        if not is_allowed:
            return self.limited_response(request)

        return await call_next(request)

    def _get_limiter(self) -> RateLimiter | None:
        try:
            return self.limiter_factory()
        except Exception as factory_error:  # pragma: no cover - misconfiguration
            logger.warning("Rate limiter could not be created", exc_info=factory_error)
            return None
