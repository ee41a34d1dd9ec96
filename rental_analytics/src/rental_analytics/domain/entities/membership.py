"""Membership plans and purchased memberships."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any

from rental_analytics.domain.value_objects import (
    CustomerId,
    MembershipId,
    MembershipTypeId,
    to_decimal,
)


@dataclass(frozen=True, slots=True)
class MembershipType:
    """A membership plan, e.g. "Basic Monthly"."""

    id: MembershipTypeId
    name: str
    description: str = ""
    price: Decimal = Decimal(0)

    def __post_init__(self) -> None:
        object.__setattr__(self, "price", to_decimal(self.price))

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": self.price,
        }


@dataclass(frozen=True, slots=True)
class Membership:
    """A membership bought by a customer for a date range.

    Raises:
        ValueError: If end_date precedes start_date or total_paid is negative.
    """

    id: MembershipId
    membership_type_id: MembershipTypeId
    customer_id: CustomerId
    start_date: date
    end_date: date
    total_paid: Decimal

    def __post_init__(self) -> None:
        object.__setattr__(self, "total_paid", to_decimal(self.total_paid))
        if self.end_date < self.start_date:
            raise ValueError(
                f"Membership {self.id} ends ({self.end_date}) before it starts ({self.start_date})"
            )
        if self.total_paid < 0:
            raise ValueError(f"Membership {self.id} total_paid must be non-negative")

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "membership_type_id": self.membership_type_id,
            "customer_id": self.customer_id,
            "start_date": self.start_date,
            "end_date": self.end_date,
            "total_paid": self.total_paid,
        }
