from __future__ import annotations

import asyncio
import logging
import time

from prometheus_client import ProcessCollector

from sumapi import __version__
from sumapi.core.config import Settings
from sumapi.core.constants import CHECK_OK
from sumapi.schemas.health import HealthResponse, all_checks_ok, build_health_response, build_probe_response

logger = logging.getLogger(__name__)

_RESIDENT_MEMORY_METRIC = "process_resident_memory_bytes"

# Unregistered; only read on demand by the memory check.
_PROCESS_COLLECTOR = ProcessCollector(registry=None)


def format_uptime(seconds: float) -> str:
    """Render a duration the way operators read it: ``1h2m3.5s``, ``12.3s``, ``250ms``."""

    if seconds < 1:
        return f"{seconds * 1000:g}ms"

    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    parts = []
    if hours:
        parts.append(f"{int(hours)}h")
    if hours or minutes:
        parts.append(f"{int(minutes)}m")
    parts.append(f"{round(secs, 3):g}s")
    return "".join(parts)


def resident_memory_bytes() -> int | None:
    """Current RSS of this process, or None where /proc is unavailable."""

    for family in _PROCESS_COLLECTOR.collect():
        if family.name == _RESIDENT_MEMORY_METRIC and family.samples:
            return int(family.samples[0].value)
    return None


def running_task_count() -> int:
    try:
        return len(asyncio.all_tasks())
    except RuntimeError:
        # Called outside an event loop.
        return 0


class HealthService:
    """Stateless probes over process counters; only the start instant is remembered."""

    def __init__(self, settings: Settings, *, version: str = __version__) -> None:
        self.settings = settings
        self.version = version
        self.started_at = time.monotonic()

    @property
    def uptime_seconds(self) -> float:
        return time.monotonic() - self.started_at

    def check_memory(self) -> str:
        rss = resident_memory_bytes()
        if rss is not None and rss > self.settings.health_memory_limit_bytes:
            return "high_memory_usage"
        return CHECK_OK

    def check_tasks(self) -> str:
        count = running_task_count()
        if count > self.settings.health_max_tasks:
            return f"high_task_count_{count}"
        return CHECK_OK

    def check_uptime(self) -> str:
        if self.uptime_seconds < self.settings.health_min_uptime_seconds:
            return "starting"
        return CHECK_OK

    def check_configuration(self) -> str:
        problems = self.settings.problems()
        if problems:
            logger.warning("configuration check failed", extra={"problems": problems})
            return "invalid_configuration"
        return CHECK_OK

    def health_checks(self) -> dict[str, str]:
        return {
            "memory": self.check_memory(),
            "tasks": self.check_tasks(),
            "uptime": self.check_uptime(),
        }

    def readiness_checks(self) -> dict[str, str]:
        return {
            "service": CHECK_OK,
            "configuration": self.check_configuration(),
        }

    def health(self, request_id: str | None) -> HealthResponse:
        checks = self.health_checks()
        response = build_health_response(self.version, format_uptime(self.uptime_seconds), checks, request_id)
        logger.info(
            "Health check performed",
            extra={"component": "health", "check_type": "health", "status": response.status, "checks": checks},
        )
        return response

    def liveness(self, request_id: str | None) -> HealthResponse:
        logger.info("Liveness check performed", extra={"component": "health", "check_type": "liveness"})
        return build_probe_response("alive", request_id)

    def readiness(self, request_id: str | None) -> HealthResponse:
        checks = self.readiness_checks()
        status = "ready" if all_checks_ok(checks) else "not_ready"
        logger.info(
            "Readiness check performed",
            extra={"component": "health", "check_type": "readiness", "status": status, "checks": checks},
        )
        return build_probe_response(status, request_id, checks)
