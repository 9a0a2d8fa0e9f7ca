from __future__ import annotations

import logging

from fastapi import Request
from pydantic import ValidationError as PydanticValidationError

from sumapi.application.health import HealthService
from sumapi.core.config import Settings
from sumapi.core.errors import InvalidRequestBodyError
from sumapi.core.handlers import field_errors
from sumapi.schemas.sum import SumRequest

logger = logging.getLogger(__name__)


def get_request_id(request: Request) -> str:
    """Correlation id assigned by the logging middleware."""

    return getattr(request.state, "request_id", "")


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_health_service(request: Request) -> HealthService:
    return request.app.state.health


async def get_sum_request(request: Request) -> SumRequest:
    """
    Decode the body as JSON whatever Content-Type the client declared.

    Malformed bytes (bad JSON, invalid UTF-8) and wrong shapes both raise
    InvalidRequestBodyError with per-field details.
    """
    body = await request.body()
    try:
        return SumRequest.model_validate_json(body)
    except PydanticValidationError as exc:
        details = field_errors(exc.errors())
        logger.warning(
            "Failed to decode request body",
            extra={"component": "sum_handler", "operation": "decode_request", "fields": details},
        )
        raise InvalidRequestBodyError("invalid request body", details=details) from exc
