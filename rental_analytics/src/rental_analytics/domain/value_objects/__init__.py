"""Domain value objects - immutable objects defined by their attributes.

Exports:
    Identifiers:
        - CustomerId, BikeId, RentalId, MembershipTypeId, MembershipId
        - RELATION_NAMES and the individual relation name constants

    Money:
        - round_currency: Round to cents, half away from zero
        - to_decimal: Exact conversion of numeric amounts

    Pricing:
        - Discount: Hourly and daily discount fractions
        - DiscountTable: Category-keyed discounts with a default
        - WINTER_DISCOUNTS: The standard winter offer

    Grouping:
        - GroupKey, Aggregate, AggregateFunc, GroupingMode, GroupingSpec, SortKey
        - AggregationError, InvalidGroupingSpec, EmptyAggregateSet

    Joins:
        - ReferentialGap: Unmatched left record in a join
"""

from rental_analytics.domain.value_objects.gaps import ReferentialGap
from rental_analytics.domain.value_objects.grouping import (
    Aggregate,
    AggregateFunc,
    AggregationError,
    EmptyAggregateSet,
    GroupingMode,
    GroupingSpec,
    GroupKey,
    InvalidGroupingSpec,
    Record,
    SortKey,
)
from rental_analytics.domain.value_objects.identifiers import (
    BIKE,
    CUSTOMER,
    MEMBERSHIP,
    MEMBERSHIP_TYPE,
    RELATION_NAMES,
    RENTAL,
    BikeId,
    CustomerId,
    MembershipId,
    MembershipTypeId,
    RentalId,
)
from rental_analytics.domain.value_objects.money import round_currency, to_decimal
from rental_analytics.domain.value_objects.pricing import (
    WINTER_DISCOUNTS,
    Discount,
    DiscountTable,
)

__all__ = [
    # Identifiers
    "CustomerId",
    "BikeId",
    "RentalId",
    "MembershipTypeId",
    "MembershipId",
    "CUSTOMER",
    "BIKE",
    "RENTAL",
    "MEMBERSHIP_TYPE",
    "MEMBERSHIP",
    "RELATION_NAMES",
    # Money
    "round_currency",
    "to_decimal",
    # Pricing
    "Discount",
    "DiscountTable",
    "WINTER_DISCOUNTS",
    # Grouping
    "Record",
    "GroupKey",
    "Aggregate",
    "AggregateFunc",
    "GroupingMode",
    "GroupingSpec",
    "SortKey",
    "AggregationError",
    "InvalidGroupingSpec",
    "EmptyAggregateSet",
    # Joins
    "ReferentialGap",
]
