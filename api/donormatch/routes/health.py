from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from donormatch.db.session import async_transaction

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/healthz")
async def healthcheck() -> dict[str, str]:
    """
    Basic liveness check - returns OK if the application is running.
    """
    return {"status": "ok"}


@router.get("/health")
async def health() -> JSONResponse:
    """
    Health check that verifies the candidate database is reachable.
    Returns 200 when it is, 503 otherwise.
    """
    health_status: Dict[str, Any] = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": {},
    }

    try:
        async with async_transaction() as session:
            result = await session.execute(text("SELECT 1"))
            result.scalar()
        health_status["checks"]["database"] = {
            "status": "healthy",
            "message": "Database connection successful",
        }
    except (SQLAlchemyError, OSError) as e:
        logger.error("Database health check failed: %s", e)
        health_status["checks"]["database"] = {
            "status": "unhealthy",
            "message": f"Database connection failed: {e}",
        }
        health_status["status"] = "unhealthy"
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=health_status,
        )

    return JSONResponse(status_code=status.HTTP_200_OK, content=health_status)
