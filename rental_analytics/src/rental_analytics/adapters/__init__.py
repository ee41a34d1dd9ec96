"""Adapters layer - concrete implementations of port interfaces.

- Outbound adapters: relation snapshots the reports read from
"""

from rental_analytics.adapters.outbound import (
    DuplicateKeyError,
    InMemoryRelationStore,
)

__all__ = [
    "InMemoryRelationStore",
    "DuplicateKeyError",
]
