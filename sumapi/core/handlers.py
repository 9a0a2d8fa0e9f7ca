from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from sumapi.core.errors import AppError, InvalidRequestBodyError, MethodNotAllowedError, NotFoundError
from sumapi.core.logging import log_context
from sumapi.schemas.errors import build_error_response

logger = logging.getLogger(__name__)

_HTTP_ERRORS: dict[int, type[AppError]] = {
    400: InvalidRequestBodyError,
    404: NotFoundError,
    405: MethodNotAllowedError,
}


def _error_json(
    request: Request,
    *,
    status_code: int,
    message: str,
    code: str,
    details: dict[str, str] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None)
    error = build_error_response(message, code, request.url.path, request_id, details)
    return JSONResponse(
        status_code=status_code,
        content=error.model_dump(mode="json", exclude_none=True),
        headers=headers,
    )


async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None)
    # Log only server-side failures here. Client errors should be logged at the source.
    if exc.status_code >= 500:
        with log_context(request_id=request_id, method=request.method, path=request.url.path):
            logger.error(
                "%s",
                exc.detail,
                extra={
                    "error_code": exc.code,
                    "status_code": exc.status_code,
                    "error_type": type(exc).__name__,
                },
            )
    return _error_json(
        request,
        status_code=exc.status_code,
        message=exc.detail,
        code=exc.code,
        details=exc.details,
    )


def field_errors(errors: Iterable[Mapping[str, Any]]) -> dict[str, str]:
    """Flatten pydantic errors into ``{"numbers.0": message}`` pairs."""

    details: dict[str, str] = {}
    for error in errors:
        # Drop the leading "body" segment so keys read like JSON paths.
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        if error.get("type") == "json_invalid":
            location = []
        key = ".".join(location) or "body"
        details.setdefault(key, error.get("msg", "invalid value"))
    return details


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = field_errors(exc.errors())
    with log_context(method=request.method, path=request.url.path):
        logger.warning(
            "Failed to decode request body",
            extra={"error_code": InvalidRequestBodyError.code, "status_code": 400, "fields": details},
        )
    return _error_json(
        request,
        status_code=InvalidRequestBodyError.status_code,
        message="invalid request body",
        code=InvalidRequestBodyError.code,
        details=details,
    )


async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    error_cls = _HTTP_ERRORS.get(exc.status_code)
    code = error_cls.code if error_cls is not None else "HTTP_ERROR"
    message = str(exc.detail).lower()
    if error_cls is InvalidRequestBodyError:
        message = "invalid request body"
    return _error_json(
        request,
        status_code=exc.status_code,
        message=message,
        code=code,
        headers=getattr(exc, "headers", None),
    )
