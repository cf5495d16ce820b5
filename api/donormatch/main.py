from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from donormatch.core.config import get_settings
from donormatch.core.errors import DataSourceFailure, InvalidCoordinate
from donormatch.core.logging import configure_logging
from donormatch.db.session import dispose_engines
from donormatch.middleware import (
    RateLimitExceeded,
    SecurityHeadersMiddleware,
    SlowAPIMiddleware,
    _rate_limit_exceeded_handler,
    get_limiter,
)
from donormatch.routes import blood_banks, health, matches

configure_logging()
logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    yield
    await dispose_engines()


app = FastAPI(title=settings.app_name, lifespan=lifespan)

# Rate limiting
limiter = get_limiter()
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
# Applies the default limit to every route; it reads app.state.limiter per request
app.add_middleware(SlowAPIMiddleware)

app.include_router(health.router)
app.include_router(matches.router)
app.include_router(blood_banks.router)

app.add_middleware(SecurityHeadersMiddleware)

# Development: allow local dev servers; production: only configured domains
if settings.environment == "development":
    cors_origins = [
        "http://localhost:8081",  # Expo dev server
        "http://localhost:19006",  # Expo web
        "http://localhost:3000",
        "http://127.0.0.1:8081",
        "http://127.0.0.1:19006",
        "http://127.0.0.1:3000",
    ]
else:
    cors_origins = settings.cors_origin_list
    if "*" in cors_origins:
        logger.error("SECURITY ERROR: Cannot use wildcard CORS origins with credentials in production!")
        raise ValueError("Invalid CORS configuration: wildcard origins with credentials not allowed")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    request.state.request_id = request.headers.get("x-request-id", datetime.now(timezone.utc).isoformat())
    response = await call_next(request)
    response.headers["x-request-id"] = request.state.request_id
    return response


@app.exception_handler(ValidationError)
async def validation_exception_handler(_: Request, exc: ValidationError) -> JSONResponse:
    """Handle Pydantic validation errors and return 422 with details."""
    return JSONResponse(
        status_code=422,
        content={"detail": exc.errors(include_url=False, include_context=False, include_input=False)},
    )


@app.exception_handler(InvalidCoordinate)
async def invalid_coordinate_handler(_: Request, exc: InvalidCoordinate) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(DataSourceFailure)
async def data_source_failure_handler(_: Request, exc: DataSourceFailure) -> JSONResponse:
    logger.error("Candidate data source unavailable: %s", exc)
    return JSONResponse(status_code=503, content={"detail": "Candidate data source unavailable"})


@app.exception_handler(Exception)
async def generic_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error: %s", exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


__all__ = ["app"]
