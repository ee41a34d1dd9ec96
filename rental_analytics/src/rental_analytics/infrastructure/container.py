"""Dependency injection container and application wiring."""

from __future__ import annotations

from typing import Any, Callable, TypeVar

from rental_analytics.application import ReportCatalog, ReportingService
from rental_analytics.domain.services import AggregationEngine
from rental_analytics.infrastructure.config import Config, get_config
from rental_analytics.infrastructure.logging import get_logger, setup_logging
from rental_analytics.infrastructure.metrics import MetricsRegistry, get_metrics, setup_metrics
from rental_analytics.infrastructure.tracing import setup_tracing
from rental_analytics.ports.outbound import RelationStore

T = TypeVar("T")


class Container:
    """
    Minimal dependency injection container.

    Instances are registered directly or built lazily by a factory on
    first resolve; factory results are cached.
    """

    def __init__(self) -> None:
        self._instances: dict[type, Any] = {}
        self._factories: dict[type, Callable[[Container], Any]] = {}

    def register_instance(self, interface: type[T], instance: T) -> None:
        self._instances[interface] = instance

    def register_factory(self, interface: type[T], factory: Callable[[Container], T]) -> None:
        """
        Register a factory called with the container on first resolve.

        A later registration for the same interface replaces the earlier one.
        """
        self._instances.pop(interface, None)
        self._factories[interface] = factory

    def resolve(self, interface: type[T]) -> T:
        """
        Resolve a dependency.

        Raises:
            KeyError: If nothing is registered for the interface
        """
        if interface in self._instances:
            return self._instances[interface]
        if interface in self._factories:
            instance = self._factories[interface](self)
            self._instances[interface] = instance
            return instance
        raise KeyError(f"No registration found for {interface}")

    def has(self, interface: type) -> bool:
        return interface in self._instances or interface in self._factories

    def clear(self) -> None:
        self._instances.clear()
        self._factories.clear()


def bootstrap(
    store: RelationStore,
    config: Config | None = None,
    metrics: MetricsRegistry | None = None,
    configure_observability: bool = False,
) -> Container:
    """
    Wire the reporting engine around a relation store.

    Args:
        store: Snapshot the reports read from
        config: Configuration, the cached environment config if None
        metrics: Metrics registry, the process-wide one if None
        configure_observability: Also set up logging, tracing and, when
            enabled in config, the metrics HTTP server

    Returns:
        A container resolving Config, MetricsRegistry, RelationStore,
        AggregationEngine, ReportCatalog and ReportingService
    """
    config = config or get_config()
    obs = config.observability

    if configure_observability:
        setup_logging(obs.log_level, obs.log_format)
        setup_tracing(service_name=obs.otel_service_name, otlp_endpoint=obs.otel_endpoint)
        if metrics is None and obs.metrics_enabled:
            metrics = setup_metrics(port=obs.metrics_port)

    container = Container()
    container.register_instance(Config, config)
    container.register_instance(MetricsRegistry, metrics or get_metrics())
    container.register_instance(RelationStore, store)
    container.register_factory(AggregationEngine, lambda c: AggregationEngine())
    container.register_factory(
        ReportCatalog,
        lambda c: ReportCatalog.standard(
            min_bikes_per_category=config.reporting.min_bikes_per_category,
            cube_year=config.reporting.cube_year,
            segment_bounds=(
                config.reporting.segment_lower_bound,
                config.reporting.segment_upper_bound,
            ),
            discounts=config.pricing.to_discount_table(),
        ),
    )
    container.register_factory(
        ReportingService,
        lambda c: ReportingService(
            store=c.resolve(RelationStore),
            catalog=c.resolve(ReportCatalog),
            engine=c.resolve(AggregationEngine),
            metrics=c.resolve(MetricsRegistry),
        ),
    )

    get_logger(__name__).info(
        "rental_analytics_container_initialized",
        store=type(store).__name__,
        cube_year=config.reporting.cube_year,
        discount_categories=sorted(config.pricing.discounts),
    )
    return container

