"""Business logic services."""

from .capabilities import (
    ROLE_CAPABILITIES,
    AuthorizationGate,
    UserCapabilityGate,
)
from .rate_limiter import (
    RateLimitMiddleware,
    RateLimiter,
    get_rate_limiter,
    set_rate_limiter,
)

__all__ = [
    "AuthorizationGate",
    "UserCapabilityGate",
    "ROLE_CAPABILITIES",
    "RateLimiter",
    "RateLimitMiddleware",
    "get_rate_limiter",
    "set_rate_limiter",
]
