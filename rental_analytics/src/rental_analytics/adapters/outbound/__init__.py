"""Outbound adapters - implementations of the RelationStore port."""

from rental_analytics.adapters.outbound.memory_relation_store import (
    DuplicateKeyError,
    InMemoryRelationStore,
)

__all__ = [
    "InMemoryRelationStore",
    "DuplicateKeyError",
]
