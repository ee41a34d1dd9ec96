"""ORDER BY over result rows.

Presentation order is a separate step from aggregation. Rows are sorted
one key at a time, last key first, relying on the stability of
``sorted`` to keep earlier passes intact. Within each key, nulls and
rolled-up markers go after every concrete value whatever the direction,
which puts subtotals after their detail rows and grand totals last.
"""

from __future__ import annotations

from typing import Any, Sequence, TypeVar

from rental_analytics.domain.services.aggregation_engine import Row
from rental_analytics.domain.value_objects import SortKey

R = TypeVar("R", bound=Row)


def _is_last(row: Row, column: str) -> bool:
    return row.is_rolled_up(column) or row.get(column) is None


def order_rows(rows: Sequence[R], order_by: Sequence[SortKey]) -> list[R]:
    """Return ``rows`` sorted by ``order_by``.

    Args:
        rows: Rows to sort; not modified.
        order_by: Sort terms, most significant first.

    Raises:
        KeyError: If a sort column is not present in the rows.
    """
    result = list(rows)
    if result:
        columns = set(result[0].columns)
        for key in order_by:
            if key.column not in columns:
                raise KeyError(f"Cannot sort by unknown column '{key.column}'")

    for key in reversed(order_by):
        present = [row for row in result if not _is_last(row, key.column)]
        missing = [row for row in result if _is_last(row, key.column)]

        def value_of(row: R, column: str = key.column) -> Any:
            return row[column]

        present = sorted(present, key=value_of, reverse=not key.ascending)
        result = present + missing
    return result
