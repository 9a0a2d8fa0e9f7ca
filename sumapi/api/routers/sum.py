from typing import Annotated, Any

from fastapi import APIRouter, Depends

from sumapi.api.deps.request import get_request_id, get_sum_request
from sumapi.application.sum import calculate_sum, describe_sum_endpoint
from sumapi.schemas.errors import ErrorResponse
from sumapi.schemas.sum import SumRequest, SumResponse

router = APIRouter(prefix="/api/v1", tags=["sum"])


@router.post(
    "/sum",
    response_model=SumResponse,
    response_model_exclude_none=True,
    responses={
        400: {
            "model": ErrorResponse,
            "description": "Malformed body (INVALID_REQUEST_BODY) or out-of-range input (VALIDATION_ERROR).",
        },
        500: {"model": ErrorResponse, "description": "Unexpected server error."},
    },
    # The body is decoded by get_sum_request, so document it here.
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": SumRequest.model_json_schema()}},
        }
    },
)
async def create_sum(
    payload: Annotated[SumRequest, Depends(get_sum_request)],
    request_id: Annotated[str, Depends(get_request_id)],
) -> SumResponse:
    return calculate_sum(payload, request_id)


@router.get("/sum")
async def sum_info(request_id: Annotated[str, Depends(get_request_id)]) -> dict[str, Any]:
    return describe_sum_endpoint(request_id)
