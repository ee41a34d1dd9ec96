"""Domain entities for the rental dataset.

Entities are immutable snapshots of the rows supplied by the relation
store. Each validates its own row-level invariants on construction and
converts to a plain record with ``to_record()``.

Exports:
    - Customer
    - Bike, BikeStatus
    - Rental
    - MembershipType, Membership
    - RELATION_SCHEMAS: Column names of each standard relation
"""

from rental_analytics.domain.entities.bike import Bike, BikeStatus
from rental_analytics.domain.entities.customer import Customer
from rental_analytics.domain.entities.membership import Membership, MembershipType
from rental_analytics.domain.entities.rental import Rental
from rental_analytics.domain.entities.schemas import ENTITY_TYPES, RELATION_SCHEMAS

__all__ = [
    "Customer",
    "Bike",
    "BikeStatus",
    "Rental",
    "MembershipType",
    "Membership",
    "ENTITY_TYPES",
    "RELATION_SCHEMAS",
]
