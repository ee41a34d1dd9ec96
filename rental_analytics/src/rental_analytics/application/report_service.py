"""Reporting service - entry point for running catalog reports.

Usage:
    from rental_analytics.adapters import InMemoryRelationStore
    from rental_analytics.application import ReportingService

    store = InMemoryRelationStore.from_entities(customers=..., bikes=..., ...)
    service = ReportingService(store)

    result = service.run("rental_revenue_rollup")
    for row in result.as_dicts():
        print(row)

Every run is traced, timed, counted and logged. Failures are recorded
and re-raised unchanged; nothing is retried.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Iterator

from rental_analytics.application.report_catalog import ReportCatalog, ReportDefinition
from rental_analytics.domain.services import AggregationEngine, Row
from rental_analytics.infrastructure.logging import get_logger
from rental_analytics.infrastructure.metrics import MetricsRegistry, get_metrics
from rental_analytics.infrastructure.tracing import trace_span
from rental_analytics.ports.outbound import RelationStore

logger = get_logger(__name__)


@dataclass
class ReportResult:
    """Rows produced by one report run."""

    report: str
    columns: list[str]
    rows: list[Row] = field(default_factory=list)
    duration_seconds: float = 0.0

    def as_dicts(self) -> list[dict[str, Any]]:
        return [row.as_dict() for row in self.rows]

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows)


class ReportingService:
    """Runs named reports from a catalog against a relation store.

    The service holds no per-run state, so one instance may serve
    concurrent callers over the same immutable snapshot.
    """

    def __init__(
        self,
        store: RelationStore,
        catalog: ReportCatalog | None = None,
        engine: AggregationEngine | None = None,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Initialize the reporting service.

        Args:
            store: Snapshot the reports read from.
            catalog: Reports to serve. Defaults to the standard catalog.
            engine: Aggregation engine. A new one is created if None.
            metrics: Metrics registry. The process-wide one if None.
        """
        self._store = store
        self._catalog = catalog or ReportCatalog.standard()
        self._engine = engine or AggregationEngine()
        self._metrics = metrics or get_metrics()

    @property
    def catalog(self) -> ReportCatalog:
        return self._catalog

    def available_reports(self) -> dict[str, str]:
        """Map each report name to its description."""
        return {definition.name: definition.description for definition in self._catalog}

    def run(self, name: str) -> ReportResult:
        """Compute one report.

        Raises:
            UnknownReportError: If the catalog has no such report.
            AggregationError: If the report is badly composed for the data.
        """
        definition = self._catalog.get(name)
        return self._execute(definition)

    def run_all(self) -> dict[str, ReportResult]:
        """Compute every report, in catalog order."""
        return {definition.name: self._execute(definition) for definition in self._catalog}

    def _execute(self, definition: ReportDefinition) -> ReportResult:
        log = logger.bind(report=definition.name)
        start = time.perf_counter()

        with trace_span("report.run", {"report": definition.name}) as span:
            try:
                rows = definition.run(self._store, self._engine)
            except Exception as e:
                self._metrics.reports_total.labels(report=definition.name, status="error").inc()
                log.error("report_failed", error=str(e), error_type=type(e).__name__)
                raise
            span.set_attribute("rows", len(rows))

        elapsed = time.perf_counter() - start
        self._metrics.reports_total.labels(report=definition.name, status="success").inc()
        self._metrics.report_latency_seconds.labels(report=definition.name).observe(elapsed)
        self._metrics.report_rows.labels(report=definition.name).set(len(rows))

        grouping = definition.query.grouping
        if grouping is not None:
            self._metrics.aggregation_partitions_total.labels(mode=grouping.mode.value).inc(
                len(grouping.partitions())
            )

        log.info("report_completed", rows=len(rows), duration_ms=round(elapsed * 1000, 3))
        return ReportResult(
            report=definition.name,
            columns=list(definition.columns),
            rows=rows,
            duration_seconds=elapsed,
        )
