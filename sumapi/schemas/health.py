from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict

from sumapi.core.constants import CHECK_OK

HealthStatus = Literal["healthy", "unhealthy", "alive", "ready", "not_ready"]


class HealthResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: HealthStatus
    timestamp: datetime
    version: str | None = None
    uptime: str | None = None
    checks: dict[str, str] | None = None
    request_id: str | None = None

    @property
    def is_healthy(self) -> bool:
        return self.status == "healthy"


def all_checks_ok(checks: Mapping[str, str]) -> bool:
    return all(outcome == CHECK_OK for outcome in checks.values())


def build_health_response(
    version: str | None,
    uptime: str | None,
    checks: Mapping[str, str],
    request_id: str | None,
) -> HealthResponse:
    """Aggregate named check outcomes; a single non-"ok" value makes the service unhealthy."""

    return HealthResponse(
        status="healthy" if all_checks_ok(checks) else "unhealthy",
        timestamp=datetime.now(UTC),
        version=version,
        uptime=uptime,
        checks=dict(checks),
        request_id=request_id or None,
    )


def build_probe_response(
    status: HealthStatus,
    request_id: str | None,
    checks: Mapping[str, str] | None = None,
) -> HealthResponse:
    return HealthResponse(
        status=status,
        timestamp=datetime.now(UTC),
        checks=dict(checks) if checks is not None else None,
        request_id=request_id or None,
    )
