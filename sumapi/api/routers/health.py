from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from sumapi.api.deps.request import get_health_service, get_request_id
from sumapi.application.health import HealthService
from sumapi.schemas.health import HealthResponse

router = APIRouter(tags=["health"])


@router.get(
    "",
    response_model=HealthResponse,
    response_model_exclude_none=True,
    responses={503: {"model": HealthResponse, "description": "At least one check failed."}},
)
async def health(
    response: Response,
    service: Annotated[HealthService, Depends(get_health_service)],
    request_id: Annotated[str, Depends(get_request_id)],
) -> HealthResponse:
    result = service.health(request_id)
    if not result.is_healthy:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return result


@router.get("/live", response_model=HealthResponse, response_model_exclude_none=True)
async def liveness(
    service: Annotated[HealthService, Depends(get_health_service)],
    request_id: Annotated[str, Depends(get_request_id)],
) -> HealthResponse:
    return service.liveness(request_id)


@router.get(
    "/ready",
    response_model=HealthResponse,
    response_model_exclude_none=True,
    responses={503: {"model": HealthResponse, "description": "Service is not ready to serve traffic."}},
)
async def readiness(
    response: Response,
    service: Annotated[HealthService, Depends(get_health_service)],
    request_id: Annotated[str, Depends(get_request_id)],
) -> HealthResponse:
    result = service.readiness(request_id)
    if result.status != "ready":
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return result
