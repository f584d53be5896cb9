"""Structured logging configuration built on structlog."""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog

LOG_FORMAT_ENV = "TASKMANAGER_LOG_FORMAT"
LOG_LEVEL_ENV = "TASKMANAGER_LOG_LEVEL"


def _resolve_level(level: str | int | None) -> int:
    """Resolve a level name or number, falling back to INFO."""
    if isinstance(level, int):
        return level
    name = (level or os.getenv(LOG_LEVEL_ENV, "INFO")).upper()
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(*, log_format: str | None = None, level: str | int | None = None) -> None:
    """Configure structlog and stdlib logging.

    Args:
        log_format: "console" for human-readable output or "json" for one JSON object per line.
            Defaults to the TASKMANAGER_LOG_FORMAT environment variable, then "console".
        level: Minimum log level. Defaults to TASKMANAGER_LOG_LEVEL, then INFO.
    """
    fmt = (log_format or os.getenv(LOG_FORMAT_ENV, "console")).lower()
    log_level = _resolve_level(level)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]
    if fmt == "json":
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )

    # Route stdlib loggers (uvicorn, sqlalchemy) to the same stream and level
    logging.basicConfig(level=log_level, format="%(message)s", stream=sys.stdout, force=True)


def get_logger(name: str | None = None) -> Any:
    """Return a structlog logger, optionally named after its module."""
    return structlog.get_logger(name)


def add_request_context(**values: Any) -> None:
    """Bind values to the logging context of the current request."""
    structlog.contextvars.bind_contextvars(**values)


def reset_request_context(*keys: str) -> None:
    """Remove specific keys from the logging context."""
    structlog.contextvars.unbind_contextvars(*keys)


def clear_request_context() -> None:
    """Clear the whole logging context."""
    structlog.contextvars.clear_contextvars()
