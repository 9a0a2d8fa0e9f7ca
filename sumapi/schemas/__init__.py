"""Request and response payloads."""

from sumapi.schemas.errors import ErrorResponse, build_error_response
from sumapi.schemas.health import HealthResponse, build_health_response, build_probe_response
from sumapi.schemas.sum import SumRequest, SumResponse, build_sum_response

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "SumRequest",
    "SumResponse",
    "build_error_response",
    "build_health_response",
    "build_probe_response",
    "build_sum_response",
]
