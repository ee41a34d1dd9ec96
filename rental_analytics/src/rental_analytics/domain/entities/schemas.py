"""Column lists of the standard relations, derived from the entities."""

from __future__ import annotations

from dataclasses import fields

from rental_analytics.domain.entities.bike import Bike
from rental_analytics.domain.entities.customer import Customer
from rental_analytics.domain.entities.membership import Membership, MembershipType
from rental_analytics.domain.entities.rental import Rental
from rental_analytics.domain.value_objects import (
    BIKE,
    CUSTOMER,
    MEMBERSHIP,
    MEMBERSHIP_TYPE,
    RENTAL,
)

ENTITY_TYPES: dict[str, type] = {
    CUSTOMER: Customer,
    BIKE: Bike,
    RENTAL: Rental,
    MEMBERSHIP_TYPE: MembershipType,
    MEMBERSHIP: Membership,
}

RELATION_SCHEMAS: dict[str, tuple[str, ...]] = {
    name: tuple(f.name for f in fields(entity_type))
    for name, entity_type in ENTITY_TYPES.items()
}
