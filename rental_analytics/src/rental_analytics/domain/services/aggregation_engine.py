"""Aggregation engine with GROUP BY, GROUPING SETS, CUBE and ROLLUP.

The engine is a single hash-aggregation pass per result partition:

    for each partition (a subset of the grouping keys):
        for each record:
            key = values of the partition's keys
            feed every reducer of groups[key]
        emit one row per key, rolled-up keys set to null

Partitions are independent, so GROUPING SETS, CUBE and ROLLUP are all the
same loop over a different list of key subsets (see
:meth:`GroupingSpec.partitions`). The engine never sorts; output order is
partition order, then first appearance of each key within the partition.

References:
    - Gray et al., "Data Cube: A Relational Aggregation Operator" (1997)
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Sequence

from rental_analytics.domain.value_objects import (
    Aggregate,
    AggregateFunc,
    GroupingSpec,
    Record,
    round_currency,
)

logger = logging.getLogger(__name__)


@dataclass
class Row:
    """A result row, accessible by column name or position.

    ``rolled_up`` names the grouping keys that were aggregated away in
    this row. Their values are ``None`` but, unlike a genuine null key,
    they mark a subtotal or grand total.
    """

    columns: list[str]
    values: list[Any]
    rolled_up: tuple[str, ...] = field(default_factory=tuple)

    def __getitem__(self, key: str | int) -> Any:
        if isinstance(key, int):
            return self.values[key]
        try:
            idx = self.columns.index(key)
            return self.values[idx]
        except ValueError as e:
            raise KeyError(f"Column '{key}' not found") from e

    def get(self, key: str, default: Any = None) -> Any:
        try:
            return self[key]
        except KeyError:
            return default

    def keys(self) -> list[str]:
        return list(self.columns)

    def is_rolled_up(self, column: str) -> bool:
        return column in self.rolled_up

    @property
    def is_total(self) -> bool:
        """True for subtotal and grand-total rows."""
        return bool(self.rolled_up)

    def as_dict(self) -> dict[str, Any]:
        return dict(zip(self.columns, self.values))

    def __repr__(self) -> str:
        pairs = ", ".join(f"{c}={v!r}" for c, v in zip(self.columns, self.values))
        return f"Row({pairs})"


class Reducer(ABC):
    """Running state of one aggregate within one group."""

    def __init__(self, aggregate: Aggregate) -> None:
        self._aggregate = aggregate
        self._seen = 0

    def add(self, record: Record) -> None:
        value = self._aggregate.input_of(record)
        if value is None:
            return
        self._seen += 1
        self.accumulate(value)

    @abstractmethod
    def accumulate(self, value: Any) -> None:
        """Fold one non-null input into the state."""
        pass

    @abstractmethod
    def current(self) -> Any:
        """Unrounded result, only called once at least one input was seen."""
        pass

    def result(self) -> Any:
        """Presentation value: coalesced when empty, rounded if currency."""
        if self._seen == 0:
            value = self.empty()
        else:
            value = self.current()
        if self._aggregate.currency:
            return round_currency(value)
        return value

    def empty(self) -> Any:
        return self._aggregate.coalesce


class CountReducer(Reducer):
    def accumulate(self, value: Any) -> None:
        pass

    def current(self) -> int:
        return self._seen

    def empty(self) -> int:
        return 0


class SumReducer(Reducer):
    def __init__(self, aggregate: Aggregate) -> None:
        super().__init__(aggregate)
        self._total: Any = 0

    def accumulate(self, value: Any) -> None:
        self._total += value

    def current(self) -> Any:
        return self._total


class AvgReducer(SumReducer):
    def current(self) -> Any:
        return self._total / self._seen


class MinReducer(Reducer):
    def __init__(self, aggregate: Aggregate) -> None:
        super().__init__(aggregate)
        self._best: Any = None

    def accumulate(self, value: Any) -> None:
        if self._best is None or value < self._best:
            self._best = value

    def current(self) -> Any:
        return self._best


class MaxReducer(MinReducer):
    def accumulate(self, value: Any) -> None:
        if self._best is None or value > self._best:
            self._best = value


_REDUCERS: dict[AggregateFunc, type[Reducer]] = {
    AggregateFunc.COUNT: CountReducer,
    AggregateFunc.SUM: SumReducer,
    AggregateFunc.AVG: AvgReducer,
    AggregateFunc.MIN: MinReducer,
    AggregateFunc.MAX: MaxReducer,
}


class AggregationEngine:
    """Computes grouped aggregate rows from a sequence of records.

    The engine is stateless: one instance can serve any number of
    concurrent callers over shared, read-only record sequences.

    Example:
        >>> spec = GroupingSpec.simple(
        ...     keys=[GroupKey("category")],
        ...     aggregates=[Aggregate.count("number_of_bikes")],
        ... )
        >>> rows = AggregationEngine().aggregate(bikes, spec)
    """

    def aggregate(
        self,
        records: Iterable[Record],
        spec: GroupingSpec,
        schema: Iterable[str] | None = None,
    ) -> list[Row]:
        """Aggregate ``records`` according to ``spec``.

        Args:
            records: Input records, all sharing one schema.
            spec: Grouping keys, mode and aggregates.
            schema: Field names of the input. Taken from the first record
                when omitted; with neither, field checks are skipped.

        Returns:
            One row per (partition, distinct key combination), in
            partition order. Rows rejected by ``spec.having`` are dropped.

        Raises:
            InvalidGroupingSpec: If a key or aggregate reads a field that
                is not in the schema.
        """
        rows_in = list(records)
        if schema is None and rows_in:
            schema = rows_in[0].keys()
        if schema is not None:
            self.validate(spec, schema)

        rows: list[Row] = []
        partitions = spec.partitions()
        for partition in partitions:
            rows.extend(self._aggregate_partition(rows_in, spec, partition))

        if spec.having is not None:
            rows = [row for row in rows if spec.having(row)]

        logger.debug(
            "aggregated %d records into %d rows over %d partitions (%s)",
            len(rows_in),
            len(rows),
            len(partitions),
            spec.mode.value,
        )
        return rows

    def validate(self, spec: GroupingSpec, schema: Iterable[str]) -> None:
        """Check that every field the spec reads exists in ``schema``.

        Raises:
            InvalidGroupingSpec: Naming the first missing field.
        """
        spec.check_fields(schema)

    def _aggregate_partition(
        self,
        records: Sequence[Record],
        spec: GroupingSpec,
        partition: tuple[str, ...],
    ) -> Iterator[Row]:
        active = [key for key in spec.keys if key.name in partition]
        rolled_up = tuple(name for name in spec.key_names if name not in partition)

        groups: dict[tuple[Any, ...], list[Reducer]] = {}
        for record in records:
            group_key = tuple(key.extract(record) for key in active)
            reducers = groups.get(group_key)
            if reducers is None:
                reducers = self._new_reducers(spec)
                groups[group_key] = reducers
            for reducer in reducers:
                reducer.add(record)

        # GROUP BY () over no input still yields the grand-total row
        if not groups and not active:
            groups[()] = self._new_reducers(spec)

        columns = list(spec.columns)
        for group_key, reducers in groups.items():
            by_name = dict(zip((key.name for key in active), group_key))
            values = [by_name.get(name) for name in spec.key_names]
            values.extend(reducer.result() for reducer in reducers)
            yield Row(columns=columns, values=values, rolled_up=rolled_up)

    @staticmethod
    def _new_reducers(spec: GroupingSpec) -> list[Reducer]:
        return [_REDUCERS[agg.func](agg) for agg in spec.aggregates]
