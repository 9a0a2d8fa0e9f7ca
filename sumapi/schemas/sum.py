from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, StrictFloat


class SumRequest(BaseModel):
    # NaN, Infinity and literals past the float range (1e400) do not decode.
    model_config = ConfigDict(allow_inf_nan=False)

    numbers: list[StrictFloat]


class SumResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    sum: float
    count: int
    numbers: list[float]
    timestamp: datetime
    request_id: str | None = None


def build_sum_response(numbers: Sequence[float], request_id: str | None) -> SumResponse:
    # Plain left-to-right accumulation. builtins.sum uses compensated
    # summation for floats on 3.12+, which changes the result.
    total = 0.0
    for number in numbers:
        total += number

    return SumResponse(
        sum=total,
        count=len(numbers),
        numbers=list(numbers),
        timestamp=datetime.now(UTC),
        request_id=request_id or None,
    )
