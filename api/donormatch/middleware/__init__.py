"""Middleware for FastAPI application."""
from __future__ import annotations

from donormatch.middleware.rate_limit import (
    RateLimitExceeded,
    SlowAPIMiddleware,
    _rate_limit_exceeded_handler,
    get_limiter,
)
from donormatch.middleware.security import SecurityHeadersMiddleware

__all__ = [
    "SecurityHeadersMiddleware",
    "get_limiter",
    "RateLimitExceeded",
    "SlowAPIMiddleware",
    "_rate_limit_exceeded_handler",
]
