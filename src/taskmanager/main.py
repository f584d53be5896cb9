"""Application entry point configured from TASKMANAGER_* environment variables."""

from __future__ import annotations

import os

from fastapi import FastAPI

from taskmanager.api import ServiceBuilder, ServiceInfo, run_app

DATABASE_URL_ENV = "TASKMANAGER_DATABASE_URL"
CORS_ORIGINS_ENV = "TASKMANAGER_CORS_ORIGINS"
HOST_ENV = "TASKMANAGER_HOST"
PORT_ENV = "TASKMANAGER_PORT"

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./taskmanager.db"
DEFAULT_CORS_ORIGINS = "http://localhost:5173"


def _split_origins(raw: str) -> list[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def create_app(*, database_url: str | None = None, cors_origins: list[str] | None = None) -> FastAPI:
    """Build the task service; arguments override the environment."""
    url = database_url or os.getenv(DATABASE_URL_ENV, DEFAULT_DATABASE_URL)
    if cors_origins is None:
        cors_origins = _split_origins(os.getenv(CORS_ORIGINS_ENV, DEFAULT_CORS_ORIGINS))

    builder = (
        ServiceBuilder(
            info=ServiceInfo(
                display_name="Task Manager",
                version="0.1.0",
                summary="Create, list, update and delete to-do tasks",
            )
        )
        .with_database(url)
        .with_logging()
        .with_health()
        .with_tasks()
    )
    if cors_origins:
        builder.with_cors(cors_origins)
    return builder.build()


app = create_app()


def main() -> None:
    """Run the service with uvicorn."""
    run_app(
        "taskmanager.main:app",
        host=os.getenv(HOST_ENV, "127.0.0.1"),
        port=int(os.getenv(PORT_ENV, "8080")),
    )


if __name__ == "__main__":
    main()
