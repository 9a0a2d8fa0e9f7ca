import math
from collections.abc import Sequence

from sumapi.core.constants import MAX_NUMBERS, MIN_NUMBERS
from sumapi.core.errors import ValidationError


def _fail(message: str) -> ValidationError:
    return ValidationError(message, details={"numbers": message})


def validate_numbers(numbers: Sequence[float]) -> None:
    count = len(numbers)
    if count < MIN_NUMBERS:
        raise _fail(f"at least {MIN_NUMBERS} numbers are required, got {count}")
    if count > MAX_NUMBERS:
        raise _fail(f"maximum {MAX_NUMBERS} numbers allowed, got {count}")


def validate_total(total: float) -> None:
    """Reject a sum of finite inputs that overflowed the float range."""

    if not math.isfinite(total):
        raise _fail("sum of numbers is out of range")
