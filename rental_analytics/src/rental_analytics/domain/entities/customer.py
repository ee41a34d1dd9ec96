"""Customer entity."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from rental_analytics.domain.value_objects import CustomerId


@dataclass(frozen=True, slots=True)
class Customer:
    """A person who rents bikes or buys memberships."""

    id: CustomerId
    name: str
    email: str | None = None

    def to_record(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "email": self.email}
