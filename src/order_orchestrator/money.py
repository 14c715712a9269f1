"""
order_orchestrator.money

Currency amounts are `Decimal` with two fractional digits, rounded half-up.
Amounts must fit the `Numeric(12, 2)` columns they are stored in.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
MAX_AMOUNT = Decimal("9999999999.99")


def to_money(value: object) -> Decimal:
    """
    Coerce a wire value (str, int, float, Decimal) to a 2dp amount.

    Floats go through `str()` so 10.5 becomes Decimal("10.50"), not the binary expansion.
    Anything that is not a finite amount within `MAX_AMOUNT` raises `ValueError`.
    """

    if isinstance(value, bool):
        raise ValueError(f"not a currency amount: {value!r}")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
        if not amount.is_finite() or abs(amount) > MAX_AMOUNT:
            raise ValueError(f"not a currency amount: {value!r}")
        return amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        raise ValueError(f"not a currency amount: {value!r}") from e


def line_total(unit_price: Decimal, quantity: int) -> Decimal:
    return (unit_price * quantity).quantize(CENT, rounding=ROUND_HALF_UP)


def sum_money(amounts: Iterable[Decimal]) -> Decimal:
    return sum(amounts, ZERO).quantize(CENT, rounding=ROUND_HALF_UP)
