"""Currency helpers. All money is Decimal, rounded half-up to cents."""
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_decimal(value: Any) -> Decimal:
    """Coerce ints, floats, strings and Decimals to Decimal.

    Floats go through ``str`` so ``0.1`` becomes ``Decimal("0.1")``.
    Raises InvalidOperation for values that are not numbers.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, int):
        return Decimal(value)
    if value is None:
        raise InvalidOperation("Cannot convert None to Decimal")
    return Decimal(str(value).strip())


def round_currency(value: Any) -> Decimal:
    """Round to two decimal places, half-up."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def sum_currency(values: Iterable[Any]) -> Decimal:
    """Sum amounts and round the total."""
    total = ZERO
    for value in values:
        total += to_decimal(value)
    return round_currency(total)
