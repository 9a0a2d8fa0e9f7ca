"""Prometheus instrumentation for the HTTP surface.

One ``HTTPMetrics`` instance is created per application and stored on
``app.state.metrics``. It owns its own ``CollectorRegistry`` so several
apps (for example one per test) never collide on metric names. The
prometheus_client primitives are internally locked, which makes concurrent
``observe`` calls from many request tasks safe.
"""

from __future__ import annotations

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    GCCollector,
    Histogram,
    PlatformCollector,
    ProcessCollector,
    generate_latest,
)

SIZE_BUCKETS = (100.0, 1_000.0, 10_000.0, 100_000.0, 1_000_000.0)


class HTTPMetrics:
    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry or CollectorRegistry()

        ProcessCollector(registry=self.registry)
        PlatformCollector(registry=self.registry)
        GCCollector(registry=self.registry)

        self.request_duration = Histogram(
            "http_request_duration_seconds",
            "Duration of HTTP requests in seconds",
            ["method", "endpoint", "status_code"],
            registry=self.registry,
        )
        self.requests_total = Counter(
            "http_requests",
            "Total number of HTTP requests",
            ["method", "endpoint", "status_code"],
            registry=self.registry,
        )
        self.request_size = Histogram(
            "http_request_size_bytes",
            "Size of HTTP requests in bytes",
            ["method", "endpoint"],
            buckets=SIZE_BUCKETS,
            registry=self.registry,
        )
        self.response_size = Histogram(
            "http_response_size_bytes",
            "Size of HTTP responses in bytes",
            ["method", "endpoint", "status_code"],
            buckets=SIZE_BUCKETS,
            registry=self.registry,
        )
        self.active_requests = Gauge(
            "http_active_connections",
            "Number of in-flight HTTP requests",
            registry=self.registry,
        )
        self.app_info = Gauge(
            "app_info",
            "Application information",
            ["version", "environment"],
            registry=self.registry,
        )

    def set_app_info(self, version: str, environment: str) -> None:
        self.app_info.labels(version=version, environment=environment).set(1)

    def observe(
        self,
        *,
        method: str,
        endpoint: str,
        status_code: int,
        duration_seconds: float,
        request_size: int,
        response_size: int | None,
    ) -> None:
        status = str(status_code)
        self.request_duration.labels(method, endpoint, status).observe(duration_seconds)
        self.requests_total.labels(method, endpoint, status).inc()
        self.request_size.labels(method, endpoint).observe(request_size)
        if response_size is not None:
            self.response_size.labels(method, endpoint, status).observe(response_size)

    def exposition(self) -> tuple[bytes, str]:
        return generate_latest(self.registry), CONTENT_TYPE_LATEST
