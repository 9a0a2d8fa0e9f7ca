"""Unit tests for numeric input validation."""

import pytest

from sumapi.core.errors import ValidationError
from sumapi.validators import validate_numbers, validate_total


class TestValidateNumbers:
    """Tests for validate_numbers."""

    @pytest.mark.parametrize("count", [2, 3, 50, 100])
    def test_accepts_lengths_within_bounds(self, count: int):
        """Lengths 2..100 inclusive pass without raising."""
        validate_numbers([1.0] * count)

    @pytest.mark.parametrize("count", [0, 1])
    def test_rejects_too_few(self, count: int):
        """Fewer than 2 numbers raises with the lower-bound message."""
        with pytest.raises(ValidationError) as exc_info:
            validate_numbers([1.0] * count)

        assert exc_info.value.detail == f"at least 2 numbers are required, got {count}"
        assert exc_info.value.code == "VALIDATION_ERROR"
        assert exc_info.value.status_code == 400

    @pytest.mark.parametrize("count", [101, 250])
    def test_rejects_too_many(self, count: int):
        """More than 100 numbers raises with the upper-bound message."""
        with pytest.raises(ValidationError) as exc_info:
            validate_numbers([1.0] * count)

        assert exc_info.value.detail == f"maximum 100 numbers allowed, got {count}"

    def test_error_details_name_the_field(self):
        """The raised error carries a field-level detail for the response."""
        with pytest.raises(ValidationError) as exc_info:
            validate_numbers([])

        assert exc_info.value.details == {"numbers": "at least 2 numbers are required, got 0"}

    def test_does_not_mutate_input(self):
        """Validation has no side effects on the sequence."""
        numbers = [3.0, 1.0, 2.0]
        validate_numbers(numbers)

        assert numbers == [3.0, 1.0, 2.0]


class TestValidateTotal:
    """Tests for validate_total."""

    @pytest.mark.parametrize("total", [0.0, -1.5, 1.7976931348623157e308])
    def test_accepts_finite_totals(self, total: float):
        """Any finite sum is representable in the response."""
        validate_total(total)

    @pytest.mark.parametrize("total", [float("inf"), float("-inf"), float("nan")])
    def test_rejects_overflowed_totals(self, total: float):
        """An overflowed sum raises a validation error naming the field."""
        with pytest.raises(ValidationError) as exc_info:
            validate_total(total)

        assert exc_info.value.code == "VALIDATION_ERROR"
        assert exc_info.value.details == {"numbers": "sum of numbers is out of range"}
