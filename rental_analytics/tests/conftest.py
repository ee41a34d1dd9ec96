"""Pytest configuration and fixtures for rental_analytics tests."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest
from prometheus_client import CollectorRegistry

from rental_analytics.adapters import InMemoryRelationStore
from rental_analytics.application import ReportingService
from rental_analytics.domain.entities import (
    Bike,
    BikeStatus,
    Customer,
    Membership,
    MembershipType,
    Rental,
)
from rental_analytics.domain.services import AggregationEngine
from rental_analytics.infrastructure.config import Config
from rental_analytics.infrastructure.metrics import MetricsRegistry


CUSTOMER_NAMES = [
    "John Doe",
    "Alice Smith",
    "Bob Johnson",
    "Eva Brown",
    "Michael Lee",
    "Sarah White",
    "David Wilson",
    "Emily Davis",
    "Daniel Miller",
    "Olivia Taylor",
]

# (category, model prefix, hourly, daily, status)
BIKE_ROWS = [
    ("mountain bike", "Mountain Bike 1", "10.00", "50.00", BikeStatus.AVAILABLE),
    ("road bike", "Road Bike 1", "12.00", "60.00", BikeStatus.AVAILABLE),
    ("hybrid", "Hybrid Bike 1", "8.00", "40.00", BikeStatus.RENTED),
    ("electric", "Electric Bike 1", "15.00", "75.00", BikeStatus.AVAILABLE),
    ("mountain bike", "Mountain Bike 2", "10.00", "50.00", BikeStatus.OUT_OF_SERVICE),
    ("road bike", "Road Bike 2", "12.00", "60.00", BikeStatus.AVAILABLE),
    ("hybrid", "Hybrid Bike 2", "8.00", "40.00", BikeStatus.OUT_OF_SERVICE),
    ("electric", "Electric Bike 2", "15.00", "75.00", BikeStatus.AVAILABLE),
    ("mountain bike", "Mountain Bike 3", "10.00", "50.00", BikeStatus.RENTED),
    ("road bike", "Road Bike 3", "12.00", "60.00", BikeStatus.AVAILABLE),
]

# (customer_id, bike_id, start, duration, total_paid)
RENTAL_ROWS = [
    (1, 1, "2022-11-01 10:00:00", 240, "50.00"),
    (1, 1, "2022-11-02 10:00:00", 245, "50.00"),
    (1, 1, "2022-11-03 10:00:00", 250, "50.00"),
    (1, 1, "2022-11-04 10:00:00", 235, "50.00"),
    (1, 1, "2022-12-05 10:00:00", 155, "50.00"),
    (2, 2, "2022-12-08 11:00:00", 250, "60.00"),
    (3, 3, "2022-12-13 12:00:00", 245, "40.00"),
    (1, 1, "2023-01-05 10:00:00", 240, "50.00"),
    (2, 2, "2023-01-08 11:00:00", 235, "60.00"),
    (3, 3, "2023-02-13 12:00:00", 245, "40.00"),
    (1, 1, "2023-03-05 10:00:00", 250, "50.00"),
    (2, 2, "2023-03-08 11:00:00", 355, "60.00"),
    (3, 3, "2023-04-13 12:00:00", 240, "40.00"),
    (1, 1, "2023-04-01 10:00:00", 235, "50.00"),
    (1, 6, "2023-05-01 10:00:00", 245, "60.00"),
    (1, 2, "2023-05-01 10:00:00", 250, "60.00"),
    (1, 3, "2023-06-01 10:00:00", 235, "40.00"),
    (1, 4, "2023-06-01 10:00:00", 255, "75.00"),
    (1, 5, "2023-07-01 10:00:00", 240, "50.00"),
    (2, 2, "2023-07-02 11:00:00", 445, "60.00"),
    (3, 3, "2023-07-03 12:00:00", 250, "40.00"),
    (4, 4, "2023-08-04 13:00:00", 235, "75.00"),
    (5, 5, "2023-08-05 14:00:00", 555, "50.00"),
    (6, 6, "2023-09-06 15:00:00", 240, "60.00"),
    (7, 7, "2023-09-07 16:00:00", 245, "40.00"),
    (8, 8, "2023-09-08 17:00:00", 250, "75.00"),
    (9, 9, "2023-10-09 18:00:00", 335, "50.00"),
    (10, 10, "2023-10-10 19:00:00", 255, "60.00"),
    (10, 1, "2023-10-10 19:00:00", 240, "50.00"),
    (10, 2, "2023-10-10 19:00:00", 245, "60.00"),
    (10, 3, "2023-10-10 19:00:00", 250, "40.00"),
    (10, 4, "2023-10-10 19:00:00", 235, "75.00"),
]

MEMBERSHIP_TYPE_ROWS = [
    ("Basic Monthly", "Unlimited rides with non-electric bikes. Renews monthly.", "100.00"),
    ("Basic Annual", "Unlimited rides with non-electric bikes. Renews annually.", "500.00"),
    ("Premium Monthly", "Unlimited rides with all bikes. Renews monthly.", "200.00"),
]

# (membership_type_id, customer_id, start, end, total_paid)
MEMBERSHIP_ROWS = [
    (2, 3, "2023-08-01", "2023-08-31", "500.00"),
    (1, 2, "2023-08-01", "2023-08-31", "100.00"),
    (3, 4, "2023-08-01", "2023-08-31", "200.00"),
    (1, 1, "2023-09-01", "2023-09-30", "100.00"),
    (2, 2, "2023-09-01", "2023-09-30", "500.00"),
    (3, 3, "2023-09-01", "2023-09-30", "200.00"),
    (1, 4, "2023-10-01", "2023-10-31", "100.00"),
    (2, 5, "2023-10-01", "2023-10-31", "500.00"),
    (3, 3, "2023-10-01", "2023-10-31", "200.00"),
    (3, 1, "2023-11-01", "2023-11-30", "200.00"),
    (2, 5, "2023-11-01", "2023-11-30", "500.00"),
    (1, 2, "2023-11-01", "2023-11-30", "100.00"),
]


def make_customers() -> list[Customer]:
    return [
        Customer(id=i, name=name, email=name.lower().replace(" ", ".") + "@example.com")
        for i, name in enumerate(CUSTOMER_NAMES, start=1)
    ]


def make_bikes() -> list[Bike]:
    return [
        Bike(
            id=i,
            model=model,
            category=category,
            price_per_hour=Decimal(hourly),
            price_per_day=Decimal(daily),
            status=status,
        )
        for i, (category, model, hourly, daily, status) in enumerate(BIKE_ROWS, start=1)
    ]


def make_rentals() -> list[Rental]:
    return [
        Rental(
            id=i,
            customer_id=customer_id,
            bike_id=bike_id,
            start_timestamp=datetime.fromisoformat(start),
            duration=duration,
            total_paid=Decimal(paid),
        )
        for i, (customer_id, bike_id, start, duration, paid) in enumerate(RENTAL_ROWS, start=1)
    ]


def make_membership_types() -> list[MembershipType]:
    return [
        MembershipType(id=i, name=name, description=description, price=Decimal(price))
        for i, (name, description, price) in enumerate(MEMBERSHIP_TYPE_ROWS, start=1)
    ]


def make_memberships() -> list[Membership]:
    return [
        Membership(
            id=i,
            membership_type_id=type_id,
            customer_id=customer_id,
            start_date=date.fromisoformat(start),
            end_date=date.fromisoformat(end),
            total_paid=Decimal(paid),
        )
        for i, (type_id, customer_id, start, end, paid) in enumerate(MEMBERSHIP_ROWS, start=1)
    ]


@pytest.fixture
def metrics_registry() -> MetricsRegistry:
    """Provide a fresh metrics registry for each test."""
    # Separate registry so metric names do not collide between tests
    return MetricsRegistry(registry=CollectorRegistry(auto_describe=True))


@pytest.fixture
def store(metrics_registry: MetricsRegistry) -> InMemoryRelationStore:
    """Provide the shop snapshot used throughout the reports."""
    return InMemoryRelationStore.from_entities(
        customers=make_customers(),
        bikes=make_bikes(),
        rentals=make_rentals(),
        membership_types=make_membership_types(),
        memberships=make_memberships(),
        metrics=metrics_registry,
    )


@pytest.fixture
def engine() -> AggregationEngine:
    return AggregationEngine()


@pytest.fixture
def service(store: InMemoryRelationStore, metrics_registry: MetricsRegistry) -> ReportingService:
    return ReportingService(store, metrics=metrics_registry)


@pytest.fixture
def test_config() -> Config:
    """Provide a configuration with defaults only."""
    return Config()


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
