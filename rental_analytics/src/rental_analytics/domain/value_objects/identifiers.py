"""Type-safe identifiers for the rental dataset.

Every entity is keyed by an integer primary key. NewType keeps the keys
apart for the type checker at zero runtime cost, so a bike id cannot be
passed where a customer id is expected.
"""

from __future__ import annotations

from typing import NewType

CustomerId = NewType("CustomerId", int)
"""Primary key of a customer."""

BikeId = NewType("BikeId", int)
"""Primary key of a bike."""

RentalId = NewType("RentalId", int)
"""Primary key of a rental."""

MembershipTypeId = NewType("MembershipTypeId", int)
"""Primary key of a membership type (plan)."""

MembershipId = NewType("MembershipId", int)
"""Primary key of a purchased membership."""


# Relation names as exposed by the relation store
CUSTOMER = "customer"
BIKE = "bike"
RENTAL = "rental"
MEMBERSHIP_TYPE = "membership_type"
MEMBERSHIP = "membership"

RELATION_NAMES: tuple[str, ...] = (CUSTOMER, BIKE, RENTAL, MEMBERSHIP_TYPE, MEMBERSHIP)
