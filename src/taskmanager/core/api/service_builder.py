"""Fluent builder assembling the FastAPI app around a Database."""

from __future__ import annotations

import re
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncContextManager, AsyncIterator, Awaitable, Callable, Dict, List, Self

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict
from sqlalchemy import text

from taskmanager.core import Database
from taskmanager.core.logging import configure_logging, get_logger

from .dependencies import get_database, set_database
from .middleware import REQUEST_ID_HEADER, add_error_handlers, add_logging_middleware
from .routers import HealthRouter
from .routers.health import HealthCheck, HealthState

logger = get_logger(__name__)

IN_MEMORY_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
INFO_PATH = "/api/v1/info"

_CHECK_NAME = re.compile(r"^[A-Za-z0-9_-]+$")

AppHook = Callable[[FastAPI], Awaitable[None]]


class ServiceInfo(BaseModel):
    """Metadata published in the OpenAPI document and at the info endpoint."""

    display_name: str
    version: str = "1.0.0"
    summary: str | None = None
    description: str | None = None
    contact: dict[str, str] | None = None
    license_info: dict[str, str] | None = None

    model_config = ConfigDict(extra="forbid")


@dataclass(slots=True)
class _HealthOptions:
    prefix: str
    tags: List[str]
    checks: Dict[str, HealthCheck] = field(default_factory=dict)


@dataclass(slots=True)
class _CorsOptions:
    origins: List[str]
    allow_credentials: bool = True


class BaseServiceBuilder:
    """Builds a FastAPI app with database lifecycle, error mapping and optional health, CORS and logging.

    Feature modules plug in by subclassing and overriding `_validate_module_configuration`
    and `_register_module_routers`.
    """

    def __init__(
        self,
        *,
        info: ServiceInfo,
        database_url: str = IN_MEMORY_DATABASE_URL,
        include_error_handlers: bool = True,
        include_logging: bool = False,
    ) -> None:
        # FastAPI shows description, not summary, on the docs page
        self.info = info if info.description is not None else info.model_copy(update={"description": info.summary})
        self._database_url = database_url
        self._database: Database | None = None
        self._include_error_handlers = include_error_handlers
        self._include_logging = include_logging
        self._health: _HealthOptions | None = None
        self._cors: _CorsOptions | None = None
        self._routers: List[APIRouter] = []
        self._overrides: Dict[Callable[..., object], Callable[..., object]] = {}
        self._startup_hooks: List[AppHook] = []
        self._shutdown_hooks: List[AppHook] = []

    # --------------------------------------------------------------------- Fluent configuration

    def with_database(self, url: str) -> Self:
        """Use a database created from this URL when the app starts."""
        self._database_url = url
        return self

    def with_database_instance(self, database: Database) -> Self:
        """Use an existing Database; the caller stays responsible for disposing it."""
        self._database = database
        return self

    def with_logging(self, enabled: bool = True) -> Self:
        """Configure structlog at startup and log every request with its request id."""
        self._include_logging = enabled
        return self

    def with_health(
        self,
        *,
        prefix: str = "/api/v1/health",
        tags: List[str] | None = None,
        checks: dict[str, HealthCheck] | None = None,
        include_database_check: bool = True,
    ) -> Self:
        """Expose a health endpoint running the given checks, plus a database ping by default."""
        options = _HealthOptions(prefix=prefix, tags=list(tags) if tags is not None else ["health"])
        options.checks.update(checks or {})
        if include_database_check:
            options.checks["database"] = self._create_database_health_check()
        self._health = options
        return self

    def with_cors(self, origins: List[str], *, allow_credentials: bool = True) -> Self:
        """Allow browsers on the given origins (e.g. a separately served frontend) to call the API."""
        if not origins:
            raise ValueError("with_cors() requires at least one origin")
        self._cors = _CorsOptions(origins=list(origins), allow_credentials=allow_credentials)
        return self

    def include_router(self, router: APIRouter) -> Self:
        self._routers.append(router)
        return self

    def override_dependency(self, dependency: Callable[..., object], override: Callable[..., object]) -> Self:
        """Replace a FastAPI dependency in the built app."""
        self._overrides[dependency] = override
        return self

    def on_startup(self, hook: AppHook) -> Self:
        """Run hook after the database is initialized."""
        self._startup_hooks.append(hook)
        return self

    def on_shutdown(self, hook: AppHook) -> Self:
        """Run hook before the database is released."""
        self._shutdown_hooks.append(hook)
        return self

    # --------------------------------------------------------------------- Build

    def build(self) -> FastAPI:
        """Validate the configuration and assemble the app."""
        self._validate_configuration()
        self._validate_module_configuration()

        app = FastAPI(
            title=self.info.display_name,
            summary=self.info.summary,
            description=self.info.description or "",
            version=self.info.version,
            contact=self.info.contact,
            license_info=self.info.license_info,
            lifespan=self._build_lifespan(),
        )
        app.state.database_url = self._database_url

        if self._include_error_handlers:
            add_error_handlers(app)
        if self._include_logging:
            add_logging_middleware(app)
        # Added last so it wraps everything, including error responses
        if self._cors is not None:
            app.add_middleware(
                CORSMiddleware,
                allow_origins=self._cors.origins,
                allow_credentials=self._cors.allow_credentials,
                allow_methods=["*"],
                allow_headers=["*"],
                expose_headers=["Location", REQUEST_ID_HEADER],
            )

        if self._health is not None:
            app.include_router(
                HealthRouter.create(prefix=self._health.prefix, tags=self._health.tags, checks=self._health.checks)
            )
        self._register_module_routers(app)
        for router in self._routers:
            app.include_router(router)

        app.dependency_overrides.update(self._overrides)
        self._install_info_endpoint(app, info=self.info)
        return app

    @classmethod
    def create(cls, *, info: ServiceInfo, **kwargs: Any) -> FastAPI:
        """Build an app with default options in one call."""
        return cls(info=info, **kwargs).build()

    # --------------------------------------------------------------------- Extension points

    def _validate_module_configuration(self) -> None:
        """Hook for subclasses to reject inconsistent module options."""

    def _register_module_routers(self, app: FastAPI) -> None:
        """Hook for subclasses to mount their feature routers."""

    # --------------------------------------------------------------------- Internals

    def _validate_configuration(self) -> None:
        if self._health is not None:
            for name in self._health.checks:
                if not _CHECK_NAME.match(name):
                    raise ValueError(
                        f"Health check name '{name}' contains invalid characters. "
                        "Only alphanumeric characters, underscores, and hyphens are allowed."
                    )

        if self._cors is not None and self._cors.allow_credentials and "*" in self._cors.origins:
            raise ValueError("CORS wildcard origin '*' cannot be combined with allow_credentials=True")

    def _build_lifespan(self) -> Callable[[FastAPI], AsyncContextManager[None]]:
        """Capture the current options in a lifespan that owns the database lifecycle."""
        injected = self._database
        database_url = self._database_url
        include_logging = self._include_logging
        startup_hooks = tuple(self._startup_hooks)
        shutdown_hooks = tuple(self._shutdown_hooks)
        service = self.info.display_name

        @asynccontextmanager
        async def lifespan(app: FastAPI) -> AsyncIterator[None]:
            if include_logging:
                configure_logging()

            database = injected if injected is not None else Database(database_url)
            # init() is idempotent, so injected databases may already be initialized
            await database.init()
            set_database(database)
            app.state.database = database
            logger.info("service.started", service=service, database=database.display_url)

            try:
                for hook in startup_hooks:
                    await hook(app)
                yield
            finally:
                for hook in shutdown_hooks:
                    await hook(app)
                app.state.database = None
                set_database(None)
                if injected is None:
                    await database.dispose()
                logger.info("service.stopped", service=service)

        return lifespan

    @staticmethod
    def _create_database_health_check() -> HealthCheck:
        async def check_database() -> tuple[HealthState, str | None]:
            try:
                async with get_database().session() as session:
                    await session.execute(text("SELECT 1"))
            except Exception as e:
                return (HealthState.UNHEALTHY, f"Database connection failed: {e}")
            return (HealthState.HEALTHY, None)

        return check_database

    @staticmethod
    def _install_info_endpoint(app: FastAPI, *, info: ServiceInfo) -> None:
        @app.get(INFO_PATH, include_in_schema=False, response_model=type(info))
        async def get_info() -> ServiceInfo:
            return info
