"""Fixed-point money helpers.

All monetary amounts are ``Decimal`` values quantized to two places.
Floats are rejected so repeated arithmetic never drifts.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Union

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

MoneyLike = Union[Decimal, int, str]


def to_money(value: MoneyLike) -> Decimal:
    """Convert *value* to a two-place ``Decimal``.

    Raises:
        TypeError: if *value* is a ``float``.
    """
    if isinstance(value, float):
        raise TypeError("Monetary amounts must not be floats.")
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def line_total(unit_price: MoneyLike, qty: int) -> Decimal:
    return to_money(to_money(unit_price) * qty)


def money_sum(amounts: Iterable[MoneyLike]) -> Decimal:
    total = ZERO
    for amount in amounts:
        total += to_money(amount)
    return to_money(total)
