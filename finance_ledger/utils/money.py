"""Decimal money helpers - amounts are exact to the cent, never binary floats"""

from decimal import Decimal, InvalidOperation
from typing import Union

from finance_ledger.domain.exceptions import InvalidArgumentError

CENT = Decimal("0.01")

MoneyInput = Union[Decimal, int, str]


def to_money(value: MoneyInput) -> Decimal:
    """
    Parse a monetary value into a two-place Decimal.

    Values finer than a cent are rejected rather than rounded, so the
    amount stored is always the amount the caller sent ("10.000" is fine,
    "10.005" is not).
    """
    if isinstance(value, (bool, float)):
        # floats carry binary rounding error; callers must pass str or Decimal
        raise InvalidArgumentError(f"Invalid monetary amount: {value!r}")
    try:
        amount = Decimal(value)
        if not amount.is_finite():
            raise InvalidArgumentError(f"Invalid monetary amount: {value!r}")
        quantized = amount.quantize(CENT)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise InvalidArgumentError(f"Invalid monetary amount: {value!r}") from e
    if quantized != amount:
        raise InvalidArgumentError(f"Monetary amount has more than two decimal places: {value!r}")
    return quantized


def require_positive(value: MoneyInput, field: str = "Amount") -> Decimal:
    amount = to_money(value)
    if amount <= 0:
        raise InvalidArgumentError(f"{field} must be greater than 0")
    return amount
