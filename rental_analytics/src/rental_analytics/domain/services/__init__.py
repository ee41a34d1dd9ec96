"""Domain services - stateless operations over domain data.

Exports:
    - AggregationEngine: GROUP BY / GROUPING SETS / CUBE / ROLLUP
    - Row: Result row with rolled-up markers
    - Reducer: Base class for aggregate reducers
    - order_rows: Null-last, multi-key ORDER BY
"""

from rental_analytics.domain.services.aggregation_engine import (
    AggregationEngine,
    Reducer,
    Row,
)
from rental_analytics.domain.services.ordering import order_rows

__all__ = [
    "AggregationEngine",
    "Reducer",
    "Row",
    "order_rows",
]
