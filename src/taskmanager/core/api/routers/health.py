"""Health check router."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

from ..router import Router


class HealthState(StrEnum):
    """Health state enumeration, ordered from best to worst."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


_SEVERITY = {HealthState.HEALTHY: 0, HealthState.DEGRADED: 1, HealthState.UNHEALTHY: 2}

HealthCheck = Callable[[], Awaitable[tuple[HealthState, str | None]]]


class CheckResult(BaseModel):
    """Result of an individual health check."""

    state: HealthState = Field(description="Health state of this check")
    message: str | None = Field(default=None, description="Optional message or error detail")


class HealthStatus(BaseModel):
    """Overall health status response."""

    status: HealthState = Field(description="Worst state across all checks")
    checks: dict[str, CheckResult] | None = Field(default=None, description="Per-check results, when configured")


async def _run_check(check: HealthCheck) -> CheckResult:
    try:
        state, message = await check()
    except Exception as e:
        return CheckResult(state=HealthState.UNHEALTHY, message=f"Check failed: {e}")
    return CheckResult(state=state, message=message)


class HealthRouter(Router):
    """Health endpoint running the configured checks concurrently."""

    def __init__(
        self,
        prefix: str,
        tags: list[str],
        checks: dict[str, HealthCheck] | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize health router with optional named checks."""
        self.checks = dict(checks or {})
        super().__init__(prefix=prefix, tags=tags, **kwargs)

    def _register_routes(self) -> None:
        checks = self.checks

        @self.router.get("", summary="Health check", response_model=HealthStatus, response_model_exclude_none=True)
        async def health_check() -> HealthStatus:
            if not checks:
                return HealthStatus(status=HealthState.HEALTHY)

            results = await asyncio.gather(*(_run_check(check) for check in checks.values()))
            by_name = dict(zip(checks.keys(), results))
            overall = max((result.state for result in results), key=_SEVERITY.__getitem__)
            return HealthStatus(status=overall, checks=by_name)
