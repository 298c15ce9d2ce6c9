"""
Health check endpoint.
"""

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from bizzleap.api.dependencies import get_settings
from bizzleap.core.clock import utcnow
from bizzleap.core.config import Settings
from bizzleap.db.session import get_database

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", summary="Service and database health check.")
def health_check(request: Request, settings: Settings = Depends(get_settings)):
    """Report healthy only while the database answers."""
    timestamp = utcnow().isoformat()
    try:
        get_database(request).ping()
    except (SQLAlchemyError, RuntimeError) as exc:
        logger.error("Health check failed: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"status": "ERROR", "timestamp": timestamp, "error": "Database connection failed"},
        )

    return {
        "status": "OK",
        "timestamp": timestamp,
        "database": "connected",
        "version": settings.VERSION,
    }
