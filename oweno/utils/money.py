"""Money helpers.

Amounts cross the public boundary as ``Decimal`` and are computed on as
integer cents. Quantisation is half-up, to ``settings.CURRENCY_PLACES``.
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Iterable

from oweno.core.config import settings
from oweno.utils.split_validation import InvalidSplitInputError


CENT_FACTOR = 10 ** settings.CURRENCY_PLACES
QUANTUM = Decimal(1).scaleb(-settings.CURRENCY_PLACES)


def parse_decimal(value: Any, field: str = "value") -> Decimal:
    """Parse user input into a Decimal. Missing or blank input counts as zero."""
    if value is None:
        return Decimal(0)
    if isinstance(value, Decimal):
        parsed = value
    elif isinstance(value, bool):
        raise InvalidSplitInputError(f"{field} must be a number, got {value!r}")
    elif isinstance(value, (int, float)):
        parsed = Decimal(str(value))
    else:
        text = str(value).strip()
        if not text:
            return Decimal(0)
        try:
            parsed = Decimal(text)
        except InvalidOperation:
            raise InvalidSplitInputError(f"{field} must be a number, got {value!r}")
    if not parsed.is_finite():
        raise InvalidSplitInputError(f"{field} must be a finite number, got {value!r}")
    return parsed


def quantize(amount: Decimal) -> Decimal:
    return amount.quantize(QUANTUM, rounding=ROUND_HALF_UP)


def to_cents(amount: Any) -> int:
    """Convert an amount to integer cents, rounding half-up."""
    value = parse_decimal(amount, "amount")
    return int((value * CENT_FACTOR).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def from_cents(cents: int) -> Decimal:
    return (Decimal(cents) / CENT_FACTOR).quantize(QUANTUM)


def round_cents(value: Decimal) -> int:
    """Round a fractional cent value to a whole cent, half-up."""
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def sum_cents(amounts: Iterable[Any]) -> int:
    return sum(to_cents(amount) for amount in amounts)
