"""Outbound ports - interfaces for the data the reports depend on."""

from rental_analytics.ports.outbound.relation_store import (
    JoinKind,
    JoinPredicate,
    RelationStore,
    UnknownRelationError,
    key_equals,
)

__all__ = [
    "RelationStore",
    "JoinKind",
    "JoinPredicate",
    "UnknownRelationError",
    "key_equals",
]
