"""Ports layer - interface definitions following Hexagonal Architecture.

The reporting core depends on a single outbound port, the RelationStore.
Adapters implement it; the application layer consumes it.
"""

from rental_analytics.ports.outbound import (
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
