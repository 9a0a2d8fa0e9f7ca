from typing import Annotated, Any

from fastapi import APIRouter, Depends

from sumapi import __version__
from sumapi.api.deps.request import get_app_settings
from sumapi.application.sum import SUM_ENDPOINT_PATH
from sumapi.core.config import Settings
from sumapi.core.constants import SERVICE_NAME

router = APIRouter(tags=["meta"])


@router.get("/")
async def root(settings: Annotated[Settings, Depends(get_app_settings)]) -> dict[str, Any]:
    endpoints: dict[str, Any] = {
        "health": settings.health_path,
        "api": {"v1": {"sum": SUM_ENDPOINT_PATH}},
    }
    if settings.metrics_enabled:
        endpoints["metrics"] = settings.metrics_path

    return {
        "service": SERVICE_NAME,
        "version": __version__,
        "environment": settings.environment,
        "endpoints": endpoints,
    }
