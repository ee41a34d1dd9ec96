"""Currency arithmetic helpers.

Amounts are carried as :class:`decimal.Decimal` so that sums of prices
stay exact. Rounding happens once, when a value is presented.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

CURRENCY_PLACES = 2
_QUANTUM = Decimal(1).scaleb(-CURRENCY_PLACES)


def to_decimal(value: Any) -> Decimal:
    """Convert an int, float, str or Decimal amount to Decimal.

    Floats go through ``str`` so that ``0.1`` becomes ``Decimal("0.1")``
    rather than its binary expansion.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_currency(value: Any) -> Decimal | None:
    """Round an amount to two decimal places, half away from zero.

    ``None`` passes through unchanged so that null aggregates stay null.

    Example:
        >>> round_currency(Decimal("2.345"))
        Decimal('2.35')
        >>> round_currency(Decimal("-2.345"))
        Decimal('-2.35')
    """
    if value is None:
        return None
    return to_decimal(value).quantize(_QUANTUM, rounding=ROUND_HALF_UP)
