from __future__ import annotations

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.cors import CORSMiddleware

from sumapi import __version__
from sumapi.api.routers import health_router, meta_router, metrics_router, sum_router
from sumapi.application.health import HealthService
from sumapi.core.config import Settings, get_settings
from sumapi.core.errors import AppError
from sumapi.core.handlers import handle_app_error, handle_http_error, handle_validation_error
from sumapi.core.lifespan import lifespan
from sumapi.core.logging import setup_logging
from sumapi.core.metrics import HTTPMetrics
from sumapi.core.middleware import log_requests, observe_metrics, parse_networks, recover_faults


def create_app(settings: Settings | None = None, metrics: HTTPMetrics | None = None) -> FastAPI:
    """
    Application factory for creating FastAPI instances.

    Args:
        settings: Optional settings override. If None, loads from environment.
                  Useful for testing with custom configuration.
        metrics: Optional metrics service. A fresh one with its own registry
                 is created when metrics are enabled and none is given.
    """
    if settings is None:
        settings = get_settings()

    middleware: list[Middleware] = []
    if settings.cors_allow_origins:
        middleware.append(
            Middleware(
                CORSMiddleware,
                allow_origins=settings.cors_allow_origins,
                allow_credentials=True,
                allow_methods=["*"],
                allow_headers=["*"],
                expose_headers=["X-Request-ID"],
            )
        )

    app = FastAPI(
        title="Sum API",
        description="Health probes, a numeric sum endpoint and Prometheus metrics",
        version=__version__,
        middleware=middleware,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.health = HealthService(settings)
    app.state.trusted_networks = parse_networks(settings.trusted_proxies)

    app.include_router(meta_router)
    app.include_router(health_router, prefix=settings.health_path)
    app.include_router(sum_router)

    # add_middleware prepends, so the last one added runs outermost:
    # recover_faults -> log_requests -> observe_metrics -> routes.
    if settings.metrics_enabled:
        app.state.metrics = metrics or HTTPMetrics()
        app.include_router(metrics_router, prefix=settings.metrics_path)
        app.add_middleware(BaseHTTPMiddleware, dispatch=observe_metrics)
    app.add_middleware(BaseHTTPMiddleware, dispatch=log_requests)
    app.add_middleware(BaseHTTPMiddleware, dispatch=recover_faults)

    app.add_exception_handler(AppError, handle_app_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, handle_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, handle_http_error)  # type: ignore[arg-type]

    return app


# Initialize logging once at module load
_settings = get_settings()
setup_logging(log_level=_settings.log_level, log_format=_settings.log_format)

# Default app instance for uvicorn (uvicorn sumapi.api.app:app)
app = create_app(_settings)
