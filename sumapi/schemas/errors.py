from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict


class ErrorResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    error: str
    code: str
    details: dict[str, str] | None = None
    timestamp: datetime
    request_id: str | None = None
    path: str | None = None


def build_error_response(
    message: str,
    code: str,
    path: str,
    request_id: str | None,
    details: Mapping[str, str] | None = None,
) -> ErrorResponse:
    return ErrorResponse(
        error=message,
        code=code,
        details=dict(details) if details else None,
        timestamp=datetime.now(UTC),
        request_id=request_id or None,
        path=path or None,
    )
