"""Category-keyed discount table used for seasonal pricing.

The table is data, not control flow: adding a category means adding an
entry, never touching the code that applies it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Mapping

from rental_analytics.domain.value_objects.money import round_currency, to_decimal


@dataclass(frozen=True, slots=True)
class Discount:
    """Fractional discounts for hourly and daily rental prices.

    Attributes:
        hourly: Fraction taken off the hourly price (0.1 means 10% off)
        daily: Fraction taken off the daily price
    """

    hourly: Decimal
    daily: Decimal

    def __post_init__(self) -> None:
        object.__setattr__(self, "hourly", to_decimal(self.hourly))
        object.__setattr__(self, "daily", to_decimal(self.daily))
        for label, rate in (("hourly", self.hourly), ("daily", self.daily)):
            if not Decimal(0) <= rate <= Decimal(1):
                raise ValueError(f"{label} discount must be within [0, 1], got {rate}")

    def apply_hourly(self, price: Any) -> Decimal | None:
        return _discounted(price, self.hourly)

    def apply_daily(self, price: Any) -> Decimal | None:
        return _discounted(price, self.daily)


def _discounted(price: Any, rate: Decimal) -> Decimal | None:
    if price is None:
        return None
    return round_currency(to_decimal(price) * (Decimal(1) - rate))


@dataclass(frozen=True)
class DiscountTable:
    """Mapping from bike category to its discount, with a fallback.

    Example:
        >>> table = DiscountTable({"electric": Discount(Decimal("0.1"), Decimal("0.2"))},
        ...                       default=Discount(Decimal("0.5"), Decimal("0.5")))
        >>> table.for_category("electric").hourly
        Decimal('0.1')
        >>> table.for_category("hybrid").hourly
        Decimal('0.5')
    """

    rules: Mapping[str, Discount] = field(default_factory=dict)
    default: Discount = field(default_factory=lambda: Discount(Decimal("0.5"), Decimal("0.5")))

    def __post_init__(self) -> None:
        object.__setattr__(self, "rules", MappingProxyType(dict(self.rules)))

    def for_category(self, category: str | None) -> Discount:
        """Return the discount for a category, or the default one."""
        if category is None:
            return self.default
        return self.rules.get(category, self.default)

    def with_rule(self, category: str, discount: Discount) -> DiscountTable:
        """Return a new table with ``category`` added or replaced."""
        rules = dict(self.rules)
        rules[category] = discount
        return DiscountTable(rules=rules, default=self.default)

    @property
    def categories(self) -> tuple[str, ...]:
        return tuple(self.rules)


WINTER_DISCOUNTS = DiscountTable(
    rules={
        "electric": Discount(Decimal("0.10"), Decimal("0.20")),
        "mountain bike": Discount(Decimal("0.20"), Decimal("0.50")),
    },
    default=Discount(Decimal("0.50"), Decimal("0.50")),
)
"""The winter special offer: electric 10%/20%, mountain 20%/50%, others 50%/50%."""
