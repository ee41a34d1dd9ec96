"""Grouping and aggregation specifications.

A :class:`GroupingSpec` describes *what* to aggregate: the grouping keys,
which subsets of them form result partitions, and the named reducers.
It is validated on construction so that a badly composed report fails
before any data is read.

Grouping modes mirror the SQL extensions they replace:

    SIMPLE          GROUP BY k1, k2
    GROUPING_SETS   GROUP BY GROUPING SETS ((k1, k2), (k1), ())
    CUBE            GROUP BY CUBE (k1, k2)      -> every subset of the keys
    ROLLUP          GROUP BY ROLLUP (k1, k2)    -> every prefix of the keys
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from itertools import combinations
from typing import Any, Callable, Iterable, Mapping, Sequence

Record = Mapping[str, Any]


class AggregationError(Exception):
    """Base class for report composition errors."""
    pass


class InvalidGroupingSpec(AggregationError):
    """A grouping references a field or key that does not exist."""
    pass


class EmptyAggregateSet(AggregationError):
    """A grouping was composed without any aggregate reducer."""
    pass


class AggregateFunc(Enum):
    """Supported reducer functions."""

    COUNT = "count"
    SUM = "sum"
    AVG = "avg"
    MIN = "min"
    MAX = "max"


class GroupingMode(Enum):
    """How grouping keys are expanded into result partitions."""

    SIMPLE = "simple"
    GROUPING_SETS = "grouping_sets"
    CUBE = "cube"
    ROLLUP = "rollup"


@dataclass(frozen=True)
class GroupKey:
    """A grouping dimension extracted from each record.

    Attributes:
        name: Output column name of the dimension
        source: Record field to read (defaults to ``name``)
        transform: Optional function applied to non-null source values,
            e.g. ``lambda ts: ts.year``
    """

    name: str
    source: str | None = None
    transform: Callable[[Any], Any] | None = field(default=None, compare=False)

    @property
    def source_field(self) -> str:
        return self.source or self.name

    def extract(self, record: Record) -> Any:
        value = record.get(self.source_field)
        if value is None or self.transform is None:
            return value
        return self.transform(value)


@dataclass(frozen=True)
class Aggregate:
    """A named reducer over the records of one group.

    The reducer input is, in order of precedence, ``expression(record)``,
    ``record[source]``, or, for COUNT only, the row itself (``count(*)``).
    Null inputs are skipped by every reducer.

    Attributes:
        name: Output column name
        func: Reducer function
        source: Record field to reduce
        expression: Callable computing the reducer input from a record
        coalesce: Value reported when no non-null input was seen
        currency: Round the result to cents when the row is materialized
    """

    name: str
    func: AggregateFunc
    source: str | None = None
    expression: Callable[[Record], Any] | None = field(default=None, compare=False)
    coalesce: Any = None
    currency: bool = False

    def __post_init__(self) -> None:
        if self.func is not AggregateFunc.COUNT and self.source is None and self.expression is None:
            raise InvalidGroupingSpec(
                f"Aggregate '{self.name}' ({self.func.value}) needs a source field or expression"
            )

    def input_of(self, record: Record) -> Any:
        if self.expression is not None:
            return self.expression(record)
        if self.source is not None:
            return record.get(self.source)
        return 1

    @classmethod
    def count(
        cls,
        name: str,
        source: str | None = None,
        expression: Callable[[Record], Any] | None = None,
    ) -> Aggregate:
        return cls(name=name, func=AggregateFunc.COUNT, source=source, expression=expression)

    @classmethod
    def sum(
        cls,
        name: str,
        source: str | None = None,
        expression: Callable[[Record], Any] | None = None,
        coalesce: Any = 0,
        currency: bool = False,
    ) -> Aggregate:
        return cls(
            name=name,
            func=AggregateFunc.SUM,
            source=source,
            expression=expression,
            coalesce=coalesce,
            currency=currency,
        )

    @classmethod
    def avg(cls, name: str, source: str, currency: bool = False) -> Aggregate:
        return cls(name=name, func=AggregateFunc.AVG, source=source, currency=currency)


@dataclass(frozen=True)
class SortKey:
    """One ORDER BY term. Nulls sort last regardless of direction."""

    column: str
    ascending: bool = True


@dataclass(frozen=True)
class GroupingSpec:
    """Complete description of one aggregation.

    Use the constructors :meth:`simple`, :meth:`grouping_sets`,
    :meth:`cube` and :meth:`rollup` rather than building partitions by hand.

    Raises:
        EmptyAggregateSet: If ``aggregates`` is empty.
        InvalidGroupingSpec: If keys are duplicated or a grouping set
            names an undeclared key.
    """

    keys: tuple[GroupKey, ...]
    aggregates: tuple[Aggregate, ...]
    mode: GroupingMode = GroupingMode.SIMPLE
    sets: tuple[tuple[str, ...], ...] = ()
    having: Callable[[Mapping[str, Any]], bool] | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "keys", tuple(self.keys))
        object.__setattr__(self, "aggregates", tuple(self.aggregates))
        object.__setattr__(self, "sets", tuple(tuple(s) for s in self.sets))

        if not self.aggregates:
            raise EmptyAggregateSet("At least one aggregate is required")

        names = [key.name for key in self.keys]
        if len(set(names)) != len(names):
            raise InvalidGroupingSpec(f"Duplicate grouping keys: {names}")

        output = names + [agg.name for agg in self.aggregates]
        if len(set(output)) != len(output):
            raise InvalidGroupingSpec(f"Output columns collide: {output}")

        if self.mode is GroupingMode.GROUPING_SETS:
            if not self.sets:
                raise InvalidGroupingSpec("GROUPING SETS requires at least one set")
            for grouping_set in self.sets:
                unknown = [name for name in grouping_set if name not in names]
                if unknown:
                    raise InvalidGroupingSpec(
                        f"Grouping set {grouping_set} references undeclared keys {unknown}"
                    )
        elif self.sets:
            raise InvalidGroupingSpec(f"Explicit sets are only valid for GROUPING SETS, not {self.mode.value}")

    @property
    def key_names(self) -> tuple[str, ...]:
        return tuple(key.name for key in self.keys)

    @property
    def columns(self) -> tuple[str, ...]:
        return self.key_names + tuple(agg.name for agg in self.aggregates)

    def check_fields(self, schema: Iterable[str]) -> None:
        """Check that every field the keys and aggregates read is in ``schema``.

        Raises:
            InvalidGroupingSpec: Naming the first missing field.
        """
        available = set(schema)
        for key in self.keys:
            if key.source_field not in available:
                raise InvalidGroupingSpec(
                    f"Grouping key '{key.name}' reads unknown field '{key.source_field}'; "
                    f"available: {sorted(available)}"
                )
        for agg in self.aggregates:
            if agg.source is not None and agg.source not in available:
                raise InvalidGroupingSpec(
                    f"Aggregate '{agg.name}' reads unknown field '{agg.source}'; "
                    f"available: {sorted(available)}"
                )

    def partitions(self) -> list[tuple[str, ...]]:
        """Expand the mode into the list of key subsets to aggregate over.

        Each subset keeps declaration order. CUBE lists the full set first
        and the grand total last.
        """
        names = self.key_names
        if self.mode is GroupingMode.SIMPLE:
            return [names]
        if self.mode is GroupingMode.GROUPING_SETS:
            return [tuple(name for name in names if name in s) for s in self.sets]
        if self.mode is GroupingMode.ROLLUP:
            return [names[:size] for size in range(len(names), -1, -1)]
        # CUBE: power set, largest subsets first
        return [
            subset
            for size in range(len(names), -1, -1)
            for subset in combinations(names, size)
        ]

    @classmethod
    def simple(
        cls,
        keys: Sequence[GroupKey],
        aggregates: Sequence[Aggregate],
        having: Callable[[Mapping[str, Any]], bool] | None = None,
    ) -> GroupingSpec:
        return cls(keys=tuple(keys), aggregates=tuple(aggregates), having=having)

    @classmethod
    def grouping_sets(
        cls,
        keys: Sequence[GroupKey],
        sets: Sequence[Sequence[str]],
        aggregates: Sequence[Aggregate],
        having: Callable[[Mapping[str, Any]], bool] | None = None,
    ) -> GroupingSpec:
        return cls(
            keys=tuple(keys),
            aggregates=tuple(aggregates),
            mode=GroupingMode.GROUPING_SETS,
            sets=tuple(tuple(s) for s in sets),
            having=having,
        )

    @classmethod
    def cube(
        cls,
        keys: Sequence[GroupKey],
        aggregates: Sequence[Aggregate],
        having: Callable[[Mapping[str, Any]], bool] | None = None,
    ) -> GroupingSpec:
        return cls(keys=tuple(keys), aggregates=tuple(aggregates), mode=GroupingMode.CUBE, having=having)

    @classmethod
    def rollup(
        cls,
        keys: Sequence[GroupKey],
        aggregates: Sequence[Aggregate],
        having: Callable[[Mapping[str, Any]], bool] | None = None,
    ) -> GroupingSpec:
        return cls(keys=tuple(keys), aggregates=tuple(aggregates), mode=GroupingMode.ROLLUP, having=having)
