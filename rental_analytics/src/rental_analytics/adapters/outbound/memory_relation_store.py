"""In-memory Relation Store adapter.

Holds an immutable snapshot of the five rental relations. Records are
stored as read-only mappings inside tuples, so the snapshot can be
shared by concurrent report runs without locking.

Joins are nested loops: the relations are small and the predicate is an
arbitrary callable, so there is no key to hash on in general.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Iterable, Mapping, Sequence

from rental_analytics.domain.entities import (
    RELATION_SCHEMAS,
    Bike,
    Customer,
    Membership,
    MembershipType,
    Rental,
)
from rental_analytics.domain.value_objects import (
    BIKE,
    CUSTOMER,
    MEMBERSHIP,
    MEMBERSHIP_TYPE,
    RENTAL,
    ReferentialGap,
)
from rental_analytics.infrastructure.logging import get_logger
from rental_analytics.ports.outbound.relation_store import (
    JoinKind,
    JoinPredicate,
    Record,
    UnknownRelationError,
)

if TYPE_CHECKING:
    from rental_analytics.infrastructure.metrics import MetricsRegistry

logger = get_logger(__name__)

class DuplicateKeyError(ValueError):
    """Two records of one relation share a primary key."""
    pass


class InMemoryRelationStore:
    """Relation store backed by tuples of read-only records.

    Args:
        relations: Relation name to records.
        columns: Optional relation name to column names. Needed to pad
            outer joins against empty relations; defaults to the standard
            entity columns, or to the keys of the first record.
        metrics: Optional metrics registry for referential gap counts.
        key_field: Primary-key field checked for uniqueness.

    Raises:
        DuplicateKeyError: If a primary key repeats within a relation.
    """

    def __init__(
        self,
        relations: Mapping[str, Iterable[Record]],
        columns: Mapping[str, Sequence[str]] | None = None,
        metrics: MetricsRegistry | None = None,
        key_field: str = "id",
    ) -> None:
        self._key_field = key_field
        self._metrics = metrics
        self._rows: dict[str, tuple[Record, ...]] = {}
        self._columns: dict[str, tuple[str, ...]] = {}

        declared = dict(columns or {})
        for name, records in relations.items():
            rows = tuple(MappingProxyType(dict(record)) for record in records)
            self._check_unique(name, rows)
            self._rows[name] = rows
            if name in declared:
                self._columns[name] = tuple(declared[name])
            elif name in RELATION_SCHEMAS:
                self._columns[name] = RELATION_SCHEMAS[name]
            else:
                self._columns[name] = tuple(rows[0].keys()) if rows else ()

        logger.debug(
            "relation_store_loaded",
            relations={name: len(rows) for name, rows in self._rows.items()},
        )

    @classmethod
    def from_entities(
        cls,
        customers: Iterable[Customer] = (),
        bikes: Iterable[Bike] = (),
        rentals: Iterable[Rental] = (),
        membership_types: Iterable[MembershipType] = (),
        memberships: Iterable[Membership] = (),
        metrics: MetricsRegistry | None = None,
    ) -> InMemoryRelationStore:
        """Build a snapshot from validated domain entities."""
        return cls(
            relations={
                CUSTOMER: [c.to_record() for c in customers],
                BIKE: [b.to_record() for b in bikes],
                RENTAL: [r.to_record() for r in rentals],
                MEMBERSHIP_TYPE: [t.to_record() for t in membership_types],
                MEMBERSHIP: [m.to_record() for m in memberships],
            },
            metrics=metrics,
        )

    @property
    def relation_names(self) -> tuple[str, ...]:
        return tuple(self._rows)

    def columns(self, entity_name: str) -> tuple[str, ...]:
        """Return the column names of a relation."""
        self._require(entity_name)
        return self._columns[entity_name]

    def get(self, entity_name: str) -> tuple[Record, ...]:
        self._require(entity_name)
        return self._rows[entity_name]

    def join(
        self,
        left: str,
        right: str,
        predicate: JoinPredicate,
        kind: JoinKind = JoinKind.INNER,
    ) -> tuple[Record, ...]:
        self._require(left)
        self._require(right)
        if left == right:
            raise ValueError(f"Self-join on '{left}' would produce colliding field names")

        right_rows = self._rows[right]
        null_left = {f"{left}.{column}": None for column in self._columns[left]}
        null_right = {f"{right}.{column}": None for column in self._columns[right]}
        referenced: set[int] = set()

        joined: list[Record] = []
        gaps = 0
        for left_row in self._rows[left]:
            qualified_left = {f"{left}.{k}": v for k, v in left_row.items()}
            matched = False
            for index, right_row in enumerate(right_rows):
                if predicate(left_row, right_row):
                    matched = True
                    referenced.add(index)
                    merged = dict(qualified_left)
                    merged.update((f"{right}.{k}", v) for k, v in right_row.items())
                    joined.append(MappingProxyType(merged))
            if matched:
                continue

            gaps += 1
            self._report_gap(
                ReferentialGap(left=left, right=right, left_key=left_row.get(self._key_field)),
                kind,
            )
            if kind is not JoinKind.INNER:
                merged = dict(qualified_left)
                merged.update(null_right)
                joined.append(MappingProxyType(merged))

        # Unreferenced right records are optional relationships, not gaps
        if kind is JoinKind.FULL:
            for index, right_row in enumerate(right_rows):
                if index in referenced:
                    continue
                merged = dict(null_left)
                merged.update((f"{right}.{k}", v) for k, v in right_row.items())
                joined.append(MappingProxyType(merged))

        logger.debug(
            "relations_joined",
            left=left,
            right=right,
            kind=kind.value,
            rows=len(joined),
            gaps=gaps,
        )
        return tuple(joined)

    def _report_gap(self, gap: ReferentialGap, kind: JoinKind) -> None:
        logger.warning(
            "referential_gap",
            left=gap.left,
            right=gap.right,
            left_key=gap.left_key,
            kind=kind.value,
            dropped=kind is JoinKind.INNER,
        )
        if self._metrics is not None:
            self._metrics.referential_gaps_total.labels(left=gap.left, right=gap.right).inc()

    def _require(self, entity_name: str) -> None:
        if entity_name not in self._rows:
            raise UnknownRelationError(
                f"Unknown relation '{entity_name}'; available: {sorted(self._rows)}"
            )

    def _check_unique(self, name: str, rows: Sequence[Record]) -> None:
        seen: set[Any] = set()
        for row in rows:
            key = row.get(self._key_field)
            if key is None:
                continue
            if key in seen:
                raise DuplicateKeyError(f"Duplicate {self._key_field}={key!r} in relation '{name}'")
            seen.add(key)
