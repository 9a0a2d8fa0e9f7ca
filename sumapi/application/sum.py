from __future__ import annotations

import logging
from typing import Any

from sumapi.core.constants import MAX_NUMBERS, MIN_NUMBERS
from sumapi.core.errors import ValidationError
from sumapi.schemas.sum import SumRequest, SumResponse, build_sum_response
from sumapi.validators import validate_numbers, validate_total

logger = logging.getLogger(__name__)

SUM_ENDPOINT_PATH = "/api/v1/sum"


def calculate_sum(request: SumRequest, request_id: str | None) -> SumResponse:
    try:
        validate_numbers(request.numbers)
    except ValidationError:
        logger.warning(
            "Request validation failed",
            extra={"component": "sum_handler", "operation": "validate_request", "count": len(request.numbers)},
        )
        raise

    logger.info(
        "Processing sum calculation",
        extra={"component": "sum_handler", "operation": "calculate_sum", "number_count": len(request.numbers)},
    )
    response = build_sum_response(request.numbers, request_id)
    try:
        validate_total(response.sum)
    except ValidationError:
        logger.warning(
            "Sum overflowed the float range",
            extra={"component": "sum_handler", "operation": "calculate_sum", "count": response.count},
        )
        raise

    logger.info(
        "Sum calculation completed",
        extra={"component": "sum_handler", "operation": "sum_calculated", "sum": response.sum, "count": response.count},
    )
    return response


def describe_sum_endpoint(request_id: str | None) -> dict[str, Any]:
    logger.info("Sum endpoint info requested", extra={"component": "sum_handler", "operation": "get_info"})
    return {
        "endpoint": SUM_ENDPOINT_PATH,
        "method": "POST",
        "description": "Calculate the sum of an array of numbers",
        "request_format": {
            "numbers": f"array of numbers (min: {MIN_NUMBERS}, max: {MAX_NUMBERS})",
        },
        "example_request": {"numbers": [1.5, 2.5, 3.0]},
        "example_response": {
            "sum": 7.0,
            "count": 3,
            "numbers": [1.5, 2.5, 3.0],
            "timestamp": "2024-01-01T00:00:00Z",
        },
        "request_id": request_id,
    }
