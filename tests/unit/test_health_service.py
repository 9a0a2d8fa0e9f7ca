"""Unit tests for HealthService probes."""

import asyncio

import pytest

from sumapi.application import health as health_module
from sumapi.application.health import HealthService, format_uptime, running_task_count
from sumapi.core.config import Settings


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


class TestFormatUptime:
    """Tests for format_uptime."""

    @pytest.mark.parametrize(
        ("seconds", "expected"),
        [
            (0.25, "250ms"),
            (12.5, "12.5s"),
            (62.0, "1m2s"),
            (3723.5, "1h2m3.5s"),
            (7200.0, "2h0m0s"),
        ],
    )
    def test_formats(self, seconds: float, expected: str):
        """Durations render as compact h/m/s strings."""
        assert format_uptime(seconds) == expected


class TestHealthChecks:
    """Tests for the full health probe."""

    def test_healthy_under_normal_conditions(self, health_service: HealthService):
        """Default thresholds pass in a test process."""
        response = health_service.health("rid")

        assert response.status == "healthy"
        assert response.checks == {"memory": "ok", "tasks": "ok", "uptime": "ok"}
        assert response.version == "9.9.9"
        assert response.uptime
        assert response.request_id == "rid"

    def test_memory_above_limit(self, monkeypatch: pytest.MonkeyPatch):
        """Resident memory above the ceiling is reported."""
        monkeypatch.setattr(health_module, "resident_memory_bytes", lambda: 4096)
        service = HealthService(_settings(HEALTH_MEMORY_LIMIT_BYTES=1024))

        assert service.check_memory() == "high_memory_usage"
        assert service.health(None).status == "unhealthy"

    def test_memory_unknown_is_ok(self, monkeypatch: pytest.MonkeyPatch):
        """Platforms without /proc do not fail the memory check."""
        monkeypatch.setattr(health_module, "resident_memory_bytes", lambda: None)
        service = HealthService(_settings(HEALTH_MEMORY_LIMIT_BYTES=1))

        assert service.check_memory() == "ok"

    def test_task_count_above_limit_embeds_count(self, monkeypatch: pytest.MonkeyPatch):
        """Task outcome carries the observed count."""
        monkeypatch.setattr(health_module, "running_task_count", lambda: 1500)
        service = HealthService(_settings())

        assert service.check_tasks() == "high_task_count_1500"

    def test_uptime_below_minimum_is_starting(self):
        """A freshly started service below the uptime floor reports starting."""
        service = HealthService(_settings(HEALTH_MIN_UPTIME_SECONDS=3600))

        assert service.check_uptime() == "starting"
        assert service.health(None).status == "unhealthy"


class TestProbes:
    """Tests for liveness and readiness."""

    def test_liveness_is_always_alive(self, monkeypatch: pytest.MonkeyPatch):
        """Liveness ignores failing health checks."""
        monkeypatch.setattr(health_module, "resident_memory_bytes", lambda: 10**12)
        service = HealthService(_settings(HEALTH_MEMORY_LIMIT_BYTES=1))
        response = service.liveness("rid")

        assert response.status == "alive"
        assert response.checks is None

    def test_ready_with_valid_configuration(self, health_service: HealthService):
        """Readiness passes with default settings."""
        response = health_service.readiness("rid")

        assert response.status == "ready"
        assert response.checks == {"service": "ok", "configuration": "ok"}

    def test_not_ready_with_invalid_configuration(self):
        """An unknown log format fails the configuration check."""
        service = HealthService(_settings(LOG_FORMAT="xml"))
        response = service.readiness(None)

        assert response.status == "not_ready"
        assert response.checks["configuration"] == "invalid_configuration"


class TestRunningTaskCount:
    """Tests for running_task_count."""

    def test_outside_loop_is_zero(self):
        """No running loop means no tasks."""
        assert running_task_count() == 0

    def test_inside_loop_counts_tasks(self):
        """Tasks of the running loop are counted."""

        async def scenario() -> int:
            blocker = asyncio.Event()
            tasks = [asyncio.create_task(blocker.wait()) for _ in range(3)]
            await asyncio.sleep(0)
            count = running_task_count()
            blocker.set()
            await asyncio.gather(*tasks)
            return count

        assert asyncio.run(scenario()) >= 4
