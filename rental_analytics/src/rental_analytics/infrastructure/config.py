"""Configuration management for the reporting engine."""

from __future__ import annotations

from decimal import Decimal
from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from rental_analytics.domain.value_objects import Discount, DiscountTable


class ReportingConfig(BaseModel):
    """Thresholds used by the report catalog."""

    min_bikes_per_category: int = Field(
        default=2, ge=0, description="Categories need strictly more bikes than this to be listed"
    )
    cube_year: int = Field(
        default=2023, ge=1900, le=9999, description="Year covered by the membership revenue cube"
    )
    segment_lower_bound: int = Field(
        default=5, ge=1, description="Fewest rentals in the middle customer segment"
    )
    segment_upper_bound: int = Field(
        default=10, ge=1, description="Most rentals in the middle customer segment"
    )

    @model_validator(mode="after")
    def _check_segments(self) -> ReportingConfig:
        if self.segment_lower_bound > self.segment_upper_bound:
            raise ValueError("segment_lower_bound must not exceed segment_upper_bound")
        return self


class DiscountConfig(BaseModel):
    """Discount fractions for one category."""

    hourly: Decimal = Field(ge=0, le=1, description="Fraction off the hourly price")
    daily: Decimal = Field(ge=0, le=1, description="Fraction off the daily price")

    def to_discount(self) -> Discount:
        return Discount(hourly=self.hourly, daily=self.daily)


class PricingConfig(BaseModel):
    """Seasonal discount table."""

    discounts: dict[str, DiscountConfig] = Field(
        default_factory=lambda: {
            "electric": DiscountConfig(hourly=Decimal("0.10"), daily=Decimal("0.20")),
            "mountain bike": DiscountConfig(hourly=Decimal("0.20"), daily=Decimal("0.50")),
        },
        description="Category to discount",
    )
    default_discount: DiscountConfig = Field(
        default_factory=lambda: DiscountConfig(hourly=Decimal("0.50"), daily=Decimal("0.50")),
        description="Discount for categories not listed",
    )

    def to_discount_table(self) -> DiscountTable:
        return DiscountTable(
            rules={category: rule.to_discount() for category, rule in self.discounts.items()},
            default=self.default_discount.to_discount(),
        )


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(default="json", description="Log format")
    metrics_enabled: bool = Field(default=False, description="Serve Prometheus metrics over HTTP")
    metrics_port: int = Field(default=8001, ge=1, le=65535, description="Prometheus metrics port")
    otel_endpoint: str | None = Field(
        default=None, description="OpenTelemetry collector endpoint"
    )
    otel_service_name: str = Field(default="rental_analytics", description="Service name for tracing")


class Config(BaseSettings):
    """Main configuration for the reporting engine."""

    model_config = SettingsConfigDict(
        env_prefix="RENTAL_ANALYTICS_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    reporting: ReportingConfig = Field(default_factory=ReportingConfig)
    pricing: PricingConfig = Field(default_factory=PricingConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


@lru_cache
def get_config() -> Config:
    """Get the global configuration instance."""
    return Config()
