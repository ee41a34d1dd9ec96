"""Relation Store port supplying in-memory relation snapshots.

This outbound port is the only way the reporting core reads data. It
exposes two operations:

- ``get``: all records of one relation
- ``join``: records of two relations combined by a predicate

Storage, loading, transactions and schema evolution belong to the
implementation, not to the core.
"""

from __future__ import annotations

from abc import abstractmethod
from enum import Enum
from typing import Any, Callable, Mapping, Protocol, Sequence

Record = Mapping[str, Any]
JoinPredicate = Callable[[Record, Record], bool]


class JoinKind(Enum):
    """Join semantics."""

    INNER = "inner"
    LEFT = "left"
    FULL = "full"


class UnknownRelationError(KeyError):
    """The requested relation does not exist in the store."""
    pass


def key_equals(left_field: str, right_field: str) -> JoinPredicate:
    """Build an equi-join predicate ``left[left_field] == right[right_field]``.

    Null keys never match, as in SQL.
    """

    def predicate(left: Record, right: Record) -> bool:
        value = left.get(left_field)
        return value is not None and value == right.get(right_field)

    predicate.__name__ = f"{left_field}={right_field}"
    return predicate


class RelationStore(Protocol):
    """Protocol for read-only access to relation snapshots.

    Records returned by either operation must not change for the lifetime
    of the store, so that reports running side by side see the same data.

    Joined records carry qualified field names, ``<relation>.<field>``,
    for both sides: ``membership.total_paid``, ``membership_type.name``.

    The left relation is the referencing side: its records hold the
    foreign key (``membership.customer_id``) and the right relation is
    the one referenced (``customer``). A left record that matches nothing
    is a referential gap. A right record that nothing references is an
    optional relationship, such as a customer without memberships, and
    is not a gap.
    """

    @abstractmethod
    def get(self, entity_name: str) -> Sequence[Record]:
        """Return every record of a relation.

        Args:
            entity_name: Relation name, e.g. "bike".

        Raises:
            UnknownRelationError: If the relation does not exist.
        """
        ...

    @abstractmethod
    def join(
        self,
        left: str,
        right: str,
        predicate: JoinPredicate,
        kind: JoinKind = JoinKind.INNER,
    ) -> Sequence[Record]:
        """Join two relations.

        For a LEFT or FULL join, a left record with no match appears once
        with every right-side field set to ``None``. For an INNER join it
        is dropped. Either way the unmatched record is a referential gap,
        which implementations report but never raise.

        A FULL join also keeps each right record that no left record
        matched, once, with every left-side field set to ``None``.

        Args:
            left: Left relation name.
            right: Right relation name.
            predicate: Called as ``predicate(left_record, right_record)``
                with unqualified records.
            kind: INNER, LEFT or FULL.

        Returns:
            Combined records with qualified field names.

        Raises:
            UnknownRelationError: If either relation does not exist.
        """
        ...
