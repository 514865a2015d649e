"""Application rate limiting – per-user fixed windows."""
from secure_ingest.application.rate_limit.local import FixedWindowRateLimiter
from secure_ingest.application.rate_limit.rate_limiter import (
    RateLimitDecision,
    RateLimitResult,
    RateWindow,
    WindowState,
)

__all__ = [
    "FixedWindowRateLimiter",
    "RateLimitDecision",
    "RateLimitResult",
    "RateWindow",
    "WindowState",
]
