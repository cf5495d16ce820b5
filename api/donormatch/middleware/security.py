"""Security middleware for FastAPI application."""
from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from donormatch.core.config import get_settings


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Middleware to add security headers to all responses.

    The API only serves JSON, so the content policy denies everything except
    the interactive docs in development.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        settings = get_settings()

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"

        # Enforce HTTPS for 1 year in production
        if settings.environment == "production":
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
            response.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none'"
        else:
            # /docs loads swagger assets from a CDN
            response.headers["Content-Security-Policy"] = "; ".join(
                [
                    "default-src 'self'",
                    "script-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net",
                    "style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net",
                    "img-src 'self' data: https:",
                    "frame-ancestors 'none'",
                ]
            )

        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        # Seeker location is sent as query parameters, never read from the browser
        response.headers["Permissions-Policy"] = "geolocation=(), microphone=(), camera=()"

        return response


__all__ = ["SecurityHeadersMiddleware"]
