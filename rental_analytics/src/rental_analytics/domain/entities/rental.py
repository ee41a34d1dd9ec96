"""Rental entity."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

from rental_analytics.domain.value_objects import BikeId, CustomerId, RentalId, to_decimal


@dataclass(frozen=True, slots=True)
class Rental:
    """One bike rented by one customer.

    Attributes:
        id: Primary key
        customer_id: Renting customer
        bike_id: Rented bike
        start_timestamp: When the rental started
        duration: Length in minutes, strictly positive
        total_paid: Amount paid, non-negative

    Raises:
        ValueError: If duration or total_paid is out of range.
    """

    id: RentalId
    customer_id: CustomerId
    bike_id: BikeId
    start_timestamp: datetime
    duration: int
    total_paid: Decimal

    def __post_init__(self) -> None:
        object.__setattr__(self, "total_paid", to_decimal(self.total_paid))
        if self.duration <= 0:
            raise ValueError(f"Rental {self.id} duration must be positive, got {self.duration}")
        if self.total_paid < 0:
            raise ValueError(f"Rental {self.id} total_paid must be non-negative")

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "customer_id": self.customer_id,
            "bike_id": self.bike_id,
            "start_timestamp": self.start_timestamp,
            "duration": self.duration,
            "total_paid": self.total_paid,
        }
