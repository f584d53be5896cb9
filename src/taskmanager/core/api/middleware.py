"""Error handlers and request logging middleware."""

from __future__ import annotations

import time
import uuid
from collections.abc import Awaitable, Callable
from typing import cast

from fastapi import FastAPI, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from taskmanager.core.exceptions import TaskManagerError
from taskmanager.core.logging import add_request_context, get_logger, reset_request_context

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


async def taskmanager_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Map TaskManagerError subclasses to their HTTP status."""
    error = cast(TaskManagerError, exc)
    return JSONResponse(status_code=error.status_code, content={"detail": error.detail})


async def validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle Pydantic validation errors raised outside request parsing."""
    errors = cast(ValidationError, exc).errors(include_url=False, include_context=False)
    logger.warning("validation.failed", path=request.url.path, error_count=len(errors))
    return JSONResponse(
        status_code=422,
        content={"detail": jsonable_encoder(errors)},
    )


async def database_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle SQLAlchemy errors; constraint violations become 409."""
    if isinstance(exc, IntegrityError):
        logger.warning("database.integrity_error", path=request.url.path, error=str(exc.orig))
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"detail": "Database constraint violated"},
        )

    logger.error("database.error", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Database error"},
    )


def add_error_handlers(app: FastAPI) -> None:
    """Install the exception handlers on an app."""
    app.add_exception_handler(TaskManagerError, taskmanager_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)


def add_logging_middleware(app: FastAPI) -> None:
    """Log every request with a request id bound to the logging context."""

    @app.middleware("http")
    async def log_requests(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        add_request_context(request_id=request_id, method=request.method, path=request.url.path)
        start = time.perf_counter()
        try:
            response = await call_next(request)
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            response.headers[REQUEST_ID_HEADER] = request_id
            logger.info("http.request.completed", status_code=response.status_code, duration_ms=duration_ms)
            return response
        except Exception:
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            logger.exception("http.request.failed", duration_ms=duration_ms)
            raise
        finally:
            reset_request_context("request_id", "method", "path")
