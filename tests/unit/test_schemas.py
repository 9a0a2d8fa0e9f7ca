"""Unit tests for response construction."""

from datetime import UTC

import pytest
from pydantic import ValidationError as PydanticValidationError

from sumapi.schemas.errors import build_error_response
from sumapi.schemas.health import build_health_response, build_probe_response
from sumapi.schemas.sum import SumRequest, build_sum_response


def _left_to_right(numbers: list[float]) -> float:
    total = 0.0
    for number in numbers:
        total += number
    return total


class TestBuildSumResponse:
    """Tests for build_sum_response."""

    def test_basic_sum(self):
        """Scenario values produce sum, count and echo."""
        response = build_sum_response([1.5, 2.5, 3.0], "req-1")

        assert response.sum == pytest.approx(7.0)
        assert response.count == 3
        assert response.numbers == [1.5, 2.5, 3.0]
        assert response.request_id == "req-1"

    def test_accumulates_left_to_right(self):
        """The result matches sequential float addition in input order."""
        numbers = [0.1] * 10 + [1e16, -1e16, 0.3]
        response = build_sum_response(numbers, None)

        assert response.sum == _left_to_right(numbers)

    def test_preserves_order_of_echo(self):
        """Echoed numbers keep the input order."""
        numbers = [5.0, -1.0, 3.25, 0.0]
        response = build_sum_response(numbers, None)

        assert response.numbers == numbers

    def test_timestamp_is_utc(self):
        """Timestamps are timezone-aware UTC."""
        response = build_sum_response([1.0, 2.0], None)

        assert response.timestamp.tzinfo == UTC

    def test_empty_request_id_is_omitted(self):
        """An empty correlation id is not serialized."""
        response = build_sum_response([1.0, 2.0], "")

        assert "request_id" not in response.model_dump(exclude_none=True)

    def test_response_is_frozen(self):
        """Responses cannot be mutated after construction."""
        response = build_sum_response([1.0, 2.0], None)

        with pytest.raises(PydanticValidationError):
            response.sum = 10.0


class TestSumRequest:
    """Tests for SumRequest decoding."""

    def test_accepts_integers_as_numbers(self):
        """JSON integers are valid numbers."""
        request = SumRequest.model_validate_json('{"numbers": [1, 2.5]}')

        assert request.numbers == [1.0, 2.5]

    @pytest.mark.parametrize(
        "body",
        ['{"numbers": ["1", 2]}', '{"numbers": [true, 2]}', '{"numbers": null}', "{}", '"invalid json"'],
    )
    def test_rejects_wrong_shapes(self, body: str):
        """Strings, booleans, null and missing fields are decode failures."""
        with pytest.raises(PydanticValidationError):
            SumRequest.model_validate_json(body)

    @pytest.mark.parametrize(
        "body",
        ['{"numbers": [NaN, 1]}', '{"numbers": [Infinity, 1]}', '{"numbers": [1e400, 1]}'],
    )
    def test_rejects_non_finite_numbers(self, body: str):
        """NaN, Infinity and literals past the float range do not decode."""
        with pytest.raises(PydanticValidationError):
            SumRequest.model_validate_json(body)

    def test_empty_list_decodes(self):
        """An empty array decodes; the length rule is applied later."""
        request = SumRequest.model_validate_json('{"numbers": []}')

        assert request.numbers == []


class TestBuildHealthResponse:
    """Tests for health aggregation."""

    def test_all_ok_is_healthy(self):
        """Every check "ok" yields healthy."""
        response = build_health_response("1.0.0", "1s", {"memory": "ok", "tasks": "ok"}, "req")

        assert response.status == "healthy"
        assert response.is_healthy

    @pytest.mark.parametrize("outcome", ["high_memory_usage", "starting", "OK", ""])
    def test_any_other_value_is_unhealthy(self, outcome: str):
        """Anything other than exactly "ok" flips the aggregate."""
        response = build_health_response("1.0.0", "1s", {"memory": "ok", "uptime": outcome}, "req")

        assert response.status == "unhealthy"
        assert not response.is_healthy

    def test_probe_response_omits_unset_fields(self):
        """Liveness-style responses serialize only status, timestamp and request id."""
        response = build_probe_response("alive", "abc")

        assert set(response.model_dump(exclude_none=True)) == {"status", "timestamp", "request_id"}


class TestBuildErrorResponse:
    """Tests for build_error_response."""

    def test_fields(self):
        """Message, code, path and request id are carried through."""
        response = build_error_response("boom", "INTERNAL_SERVER_ERROR", "/x", "rid")
        data = response.model_dump(mode="json", exclude_none=True)

        assert data["error"] == "boom"
        assert data["code"] == "INTERNAL_SERVER_ERROR"
        assert data["path"] == "/x"
        assert data["request_id"] == "rid"
        assert "details" not in data

    def test_details_included_when_given(self):
        """Field details are serialized when present."""
        response = build_error_response("bad", "VALIDATION_ERROR", "/x", "rid", {"numbers": "bad"})

        assert response.details == {"numbers": "bad"}
