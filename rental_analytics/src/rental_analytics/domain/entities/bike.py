"""Bike entity and its rental status."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any

from rental_analytics.domain.value_objects import BikeId, to_decimal


class BikeStatus(Enum):
    """Availability of a bike in the shop."""

    AVAILABLE = "available"
    RENTED = "rented"
    OUT_OF_SERVICE = "out of service"


@dataclass(frozen=True, slots=True)
class Bike:
    """A bike offered for rent.

    Attributes:
        id: Primary key
        model: Model name, e.g. "Road Bike 1"
        category: Free-form category, e.g. "road bike" or "electric"
        price_per_hour: Hourly rental price
        price_per_day: Daily rental price
        status: Current availability

    Raises:
        ValueError: If a price is negative or the status is unknown.
    """

    id: BikeId
    model: str
    category: str
    price_per_hour: Decimal
    price_per_day: Decimal
    status: BikeStatus = BikeStatus.AVAILABLE

    def __post_init__(self) -> None:
        object.__setattr__(self, "price_per_hour", to_decimal(self.price_per_hour))
        object.__setattr__(self, "price_per_day", to_decimal(self.price_per_day))
        if not isinstance(self.status, BikeStatus):
            object.__setattr__(self, "status", BikeStatus(self.status))
        if self.price_per_hour < 0 or self.price_per_day < 0:
            raise ValueError(f"Bike {self.id} has a negative price")

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "model": self.model,
            "category": self.category,
            "price_per_hour": self.price_per_hour,
            "price_per_day": self.price_per_day,
            "status": self.status.value,
        }
