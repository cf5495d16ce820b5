"""Rate limiting middleware for FastAPI application."""
from __future__ import annotations

from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from donormatch.core.config import get_settings


def get_limiter() -> Limiter:
    """
    Create and configure rate limiter.

    Uses client IP address as the key. The default limit and the storage
    backend come from settings (``RATE_LIMIT_DEFAULT``,
    ``RATE_LIMIT_STORAGE_URI``); in-memory storage is only correct for a
    single instance.
    """
    settings = get_settings()

    limiter = Limiter(
        key_func=get_remote_address,
        default_limits=[settings.rate_limit_default],
        storage_uri=settings.rate_limit_storage_uri,
    )
    return limiter


__all__ = ["get_limiter", "RateLimitExceeded", "SlowAPIMiddleware", "_rate_limit_exceeded_handler"]
