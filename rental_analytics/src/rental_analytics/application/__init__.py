"""Application layer for the reporting engine.

The application layer composes domain services into use cases: each
report is a query over the relation store, and the reporting service
runs them with observability around every run.

Exports:
    Catalog:
        - ReportCatalog: Ordered registry of report definitions
        - ReportDefinition: Named, described report query
        - ReportQuery: Source, derive, where, grouping, order by, select
        - UnknownReportError: Lookup of an unregistered report
    Service:
        - ReportingService: Runs reports with logging, metrics and tracing
        - ReportResult: Rows of one report run
"""

from rental_analytics.application.report_catalog import (
    ReportCatalog,
    ReportDefinition,
    ReportQuery,
    UnknownReportError,
)
from rental_analytics.application.report_service import ReportingService, ReportResult

__all__ = [
    "ReportCatalog",
    "ReportDefinition",
    "ReportQuery",
    "UnknownReportError",
    "ReportingService",
    "ReportResult",
]
