"""Prometheus metrics for the reporting engine."""

from __future__ import annotations

from prometheus_client import (
    REGISTRY,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    Info,
    start_http_server,
)


class MetricsRegistry:
    """Registry of all reporting metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics registry."""
        self._registry = registry or REGISTRY

        # Report metrics
        self.reports_total = Counter(
            "rental_reports_total",
            "Total number of report runs",
            ["report", "status"],  # status: success, error
            registry=self._registry,
        )

        self.report_latency_seconds = Histogram(
            "rental_report_latency_seconds",
            "Report computation latency in seconds",
            ["report"],
            buckets=(0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
            registry=self._registry,
        )

        self.report_rows = Gauge(
            "rental_report_rows",
            "Number of rows produced by the last run of a report",
            ["report"],
            registry=self._registry,
        )

        # Engine metrics
        self.aggregation_partitions_total = Counter(
            "rental_aggregation_partitions_total",
            "Total grouping-set partitions computed",
            ["mode"],  # simple, grouping_sets, cube, rollup
            registry=self._registry,
        )

        # Store metrics
        self.referential_gaps_total = Counter(
            "rental_referential_gaps_total",
            "Join records with no matching row on the right side",
            ["left", "right"],
            registry=self._registry,
        )

        self.info = Info(
            "rental_analytics",
            "Reporting engine information",
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry


# Global metrics registry
_metrics: MetricsRegistry | None = None


def setup_metrics(port: int = 8001, registry: CollectorRegistry | None = None) -> MetricsRegistry:
    """
    Set up the Prometheus metrics server.

    Args:
        port: Port for the metrics HTTP server
        registry: Optional custom registry

    Returns:
        The metrics registry
    """
    global _metrics
    _metrics = MetricsRegistry(registry)

    from rental_analytics import __version__
    _metrics.info.info({
        "version": __version__,
    })

    start_http_server(port, registry=registry or REGISTRY)

    return _metrics


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics
