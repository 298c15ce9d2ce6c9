"""
Exception handlers.

Translate domain and store errors into ``{"error", "message"}`` JSON
responses with the right status code.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from bizzleap.core.exceptions import BizzLeapError, TokenError

logger = logging.getLogger(__name__)


def _error_response(status_code: int, error: str, message: str, headers: Optional[dict] = None,
                    **extra) -> JSONResponse:
    headers = dict(headers or {})
    if status_code == status.HTTP_401_UNAUTHORIZED:
        headers["WWW-Authenticate"] = "Bearer"
    return JSONResponse(status_code=status_code, content={"error": error, "message": message, **extra},
                        headers=headers or None)


def _field_name(loc: tuple) -> str:
    # Drop the "body"/"query" prefix FastAPI puts in front of the field path
    parts = [str(part) for part in loc if part not in ("body", "query", "path", "header")]
    return ".".join(parts) or "body"


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers on an application."""

    @app.exception_handler(BizzLeapError)
    async def handle_domain_error(request: Request, exc: BizzLeapError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        elif isinstance(exc, TokenError):
            logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
        return _error_response(exc.status_code, exc.error, exc.message, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        details = [{"field": _field_name(tuple(err.get("loc", ()))), "message": err.get("msg", "")}
                   for err in exc.errors()]
        message = details[0]["message"] if details else "Invalid request"
        return _error_response(status.HTTP_400_BAD_REQUEST, "Validation failed", message, details=details)

    @app.exception_handler(SQLAlchemyError)
    async def handle_store_error(request: Request, exc: SQLAlchemyError):
        logger.exception("Database error on %s %s", request.method, request.url.path)
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error",
                               "The request could not be completed")
