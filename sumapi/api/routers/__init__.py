"""API routers."""

from sumapi.api.routers.health import router as health_router
from sumapi.api.routers.meta import router as meta_router
from sumapi.api.routers.metrics import router as metrics_router
from sumapi.api.routers.sum import router as sum_router

__all__ = ["health_router", "meta_router", "metrics_router", "sum_router"]
