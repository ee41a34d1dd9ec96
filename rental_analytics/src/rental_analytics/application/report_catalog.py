"""Report Catalog - the named reports over the rental snapshot.

Each report is a declarative :class:`ReportQuery` evaluated as

    source -> derive -> where -> group/aggregate -> order by -> select

with the grouping step delegated to the :class:`AggregationEngine`.
Reports carry no bespoke aggregation code: a new report is a new query
value, registered in a :class:`ReportCatalog`.

The standard catalog holds the eight shop reports:

    bikes_per_category              count per category, HAVING count > N
    memberships_per_customer        FULL JOIN count, 0 for no memberships
    discounted_pricing              category-keyed discount table
    availability_counts             conditional counts per category
    rental_revenue_rollup           GROUPING SETS (year, month), (year), ()
    membership_revenue_by_period    year, month, membership type
    membership_revenue_cube         CUBE (membership type, month) for one year
    rental_segmentation             two-stage: rentals per customer, then
                                    customers per rental-count band
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Iterator, Mapping, Sequence

from rental_analytics.domain.entities import RELATION_SCHEMAS, BikeStatus
from rental_analytics.domain.services import AggregationEngine, Row, order_rows
from rental_analytics.domain.value_objects import (
    BIKE,
    CUSTOMER,
    MEMBERSHIP,
    MEMBERSHIP_TYPE,
    RENTAL,
    WINTER_DISCOUNTS,
    Aggregate,
    DiscountTable,
    GroupingSpec,
    GroupKey,
    InvalidGroupingSpec,
    Record,
    SortKey,
)
from rental_analytics.ports.outbound import JoinKind, JoinPredicate, RelationStore, key_equals

BIKES_PER_CATEGORY = "bikes_per_category"
MEMBERSHIPS_PER_CUSTOMER = "memberships_per_customer"
DISCOUNTED_PRICING = "discounted_pricing"
AVAILABILITY_COUNTS = "availability_counts"
RENTAL_REVENUE_ROLLUP = "rental_revenue_rollup"
MEMBERSHIP_REVENUE_BY_PERIOD = "membership_revenue_by_period"
MEMBERSHIP_REVENUE_CUBE = "membership_revenue_cube"
RENTAL_SEGMENTATION = "rental_segmentation"


class UnknownReportError(KeyError):
    """No report with the requested name is registered."""
    pass


@dataclass(frozen=True)
class Source:
    """Produces the input records of a report.

    Attributes:
        fetch: Called with the store and engine to read the records
        schema: Fields every record carries, when known before reading,
            so a report can be checked as soon as it is composed
    """

    fetch: Callable[[RelationStore, AggregationEngine], Sequence[Record]]
    schema: tuple[str, ...] | None = None

    def __call__(self, store: RelationStore, engine: AggregationEngine) -> Sequence[Record]:
        return self.fetch(store, engine)


def relation(name: str) -> Source:
    """Every record of one relation."""

    def fetch(store: RelationStore, engine: AggregationEngine) -> Sequence[Record]:
        return store.get(name)

    return Source(fetch, RELATION_SCHEMAS.get(name))


def joined(left: str, right: str, predicate: JoinPredicate, kind: JoinKind = JoinKind.INNER) -> Source:
    """Records of a join, with qualified field names.

    ``left`` is the referencing relation, the one holding the foreign key.
    """

    def fetch(store: RelationStore, engine: AggregationEngine) -> Sequence[Record]:
        return store.join(left, right, predicate, kind)

    left_columns = RELATION_SCHEMAS.get(left)
    right_columns = RELATION_SCHEMAS.get(right)
    schema = None
    if left_columns is not None and right_columns is not None:
        schema = tuple(f"{left}.{c}" for c in left_columns) + tuple(f"{right}.{c}" for c in right_columns)
    return Source(fetch, schema)


def subquery(query: ReportQuery) -> Source:
    """Output rows of another query, as records (a CTE)."""

    def fetch(store: RelationStore, engine: AggregationEngine) -> Sequence[Record]:
        return [row.as_dict() for row in query.run(store, engine)]

    return Source(fetch, query.select)


def first_present(*fields: str) -> Callable[[Record], Any]:
    """Derive-expression returning the first non-null of ``fields`` (COALESCE)."""

    def expression(record: Record) -> Any:
        for name in fields:
            value = record.get(name)
            if value is not None:
                return value
        return None

    return expression


def year_of(value: Any) -> int:
    return value.year


def month_of(value: Any) -> int:
    return value.month


def status_is(status: BikeStatus) -> Callable[[Record], Any]:
    """Count-expression that is non-null only for bikes in ``status``."""

    def expression(record: Record) -> Any:
        return 1 if record.get("status") == status.value else None

    return expression


def rental_count_band(lower: int, upper: int) -> Callable[[Record], str]:
    """Classify a ``rental_count`` into one of three bands.

    Bands: more than ``upper``; between ``lower`` and ``upper`` inclusive;
    fewer than ``lower`` (which includes customers with no rentals).
    """

    def classify(record: Record) -> str:
        count = record.get("rental_count") or 0
        if count > upper:
            return f"more than {upper}"
        if count >= lower:
            return f"between {lower} and {upper}"
        return f"fewer than {lower}"

    return classify


@dataclass(frozen=True)
class ReportQuery:
    """Declarative report: source, derive, where, grouping, order by, select.

    Attributes:
        source: Input records
        select: Output columns, in order
        derive: Computed columns added to every input record, in order
        where: Record filter applied before grouping
        grouping: Aggregation to run; None for a plain projection
        order_by: Sort terms applied to the output rows

    Raises:
        InvalidGroupingSpec: If ``select`` or ``order_by`` names a column
            the grouping does not produce, or, when the source schema is
            known, if the grouping or projection reads an unknown field.
    """

    source: Source
    select: tuple[str, ...]
    derive: Mapping[str, Callable[[Record], Any]] = field(default_factory=dict)
    where: Callable[[Record], bool] | None = None
    grouping: GroupingSpec | None = None
    order_by: tuple[SortKey, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "select", tuple(self.select))
        object.__setattr__(self, "order_by", tuple(self.order_by))
        if not self.select:
            raise InvalidGroupingSpec("A report must select at least one column")
        if self.grouping is not None:
            produced = set(self.grouping.columns)
            wanted = list(self.select) + [key.column for key in self.order_by]
            unknown = [column for column in wanted if column not in produced]
            if unknown:
                raise InvalidGroupingSpec(
                    f"Columns {unknown} are not produced by the grouping {self.grouping.columns}"
                )

        schema = self.schema
        if schema is None:
            return
        if self.grouping is not None:
            self.grouping.check_fields(schema)
        else:
            missing = [column for column in self.select if column not in schema]
            if missing:
                raise InvalidGroupingSpec(f"Selected columns {missing} are not in the source {schema}")

    @property
    def schema(self) -> tuple[str, ...] | None:
        """Fields of the records reaching the grouping step, if known."""
        if self.source.schema is None:
            return None
        derived = tuple(column for column in self.derive if column not in self.source.schema)
        return self.source.schema + derived

    def run(self, store: RelationStore, engine: AggregationEngine) -> list[Row]:
        records: Iterable[Record] = self.source(store, engine)
        if self.derive:
            records = [self._with_derived(record) for record in records]
        if self.where is not None:
            records = [record for record in records if self.where(record)]

        if self.grouping is not None:
            rows = engine.aggregate(records, self.grouping, schema=self.schema)
        else:
            rows = [Row(columns=list(r.keys()), values=list(r.values())) for r in records]

        rows = order_rows(rows, self.order_by)
        return [self._project(row) for row in rows]

    def _with_derived(self, record: Record) -> dict[str, Any]:
        extended = dict(record)
        for column, compute in self.derive.items():
            extended[column] = compute(extended)
        return extended

    def _project(self, row: Row) -> Row:
        return Row(
            columns=list(self.select),
            values=[row[column] for column in self.select],
            rolled_up=tuple(name for name in row.rolled_up if name in self.select),
        )


@dataclass(frozen=True)
class ReportDefinition:
    """A named, described report query."""

    name: str
    description: str
    query: ReportQuery

    @property
    def columns(self) -> tuple[str, ...]:
        return self.query.select

    def run(self, store: RelationStore, engine: AggregationEngine | None = None) -> list[Row]:
        """Compute the report over a store snapshot."""
        return self.query.run(store, engine or AggregationEngine())


class ReportCatalog:
    """Ordered registry of report definitions."""

    def __init__(self, definitions: Iterable[ReportDefinition] = ()) -> None:
        self._definitions: dict[str, ReportDefinition] = {}
        for definition in definitions:
            self.register(definition)

    def register(self, definition: ReportDefinition) -> None:
        """Add a report.

        Raises:
            ValueError: If a report with the same name is registered.
        """
        if definition.name in self._definitions:
            raise ValueError(f"Report '{definition.name}' is already registered")
        self._definitions[definition.name] = definition

    def get(self, name: str) -> ReportDefinition:
        try:
            return self._definitions[name]
        except KeyError:
            raise UnknownReportError(
                f"Unknown report '{name}'; available: {list(self._definitions)}"
            ) from None

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._definitions)

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def __iter__(self) -> Iterator[ReportDefinition]:
        return iter(self._definitions.values())

    def __len__(self) -> int:
        return len(self._definitions)

    @classmethod
    def standard(
        cls,
        min_bikes_per_category: int = 2,
        cube_year: int = 2023,
        segment_bounds: tuple[int, int] = (5, 10),
        discounts: DiscountTable = WINTER_DISCOUNTS,
    ) -> ReportCatalog:
        """Build the catalog of the eight shop reports."""
        return cls(
            [
                bikes_per_category(min_bikes_per_category),
                memberships_per_customer(),
                discounted_pricing(discounts),
                availability_counts(),
                rental_revenue_rollup(),
                membership_revenue_by_period(),
                membership_revenue_cube(cube_year),
                rental_segmentation(*segment_bounds),
            ]
        )


def bikes_per_category(min_bikes: int = 2) -> ReportDefinition:
    return ReportDefinition(
        name=BIKES_PER_CATEGORY,
        description=f"Number of bikes in each category owning more than {min_bikes}",
        query=ReportQuery(
            source=relation(BIKE),
            grouping=GroupingSpec.simple(
                keys=[GroupKey("category")],
                aggregates=[Aggregate.count("number_of_bikes")],
                having=lambda row: row["number_of_bikes"] > min_bikes,
            ),
            order_by=(SortKey("category"),),
            select=("category", "number_of_bikes"),
        ),
    )


def memberships_per_customer() -> ReportDefinition:
    # Grouped on id as well as name so namesakes stay separate rows. A
    # membership naming an unknown customer keeps its customer_id and a
    # null name; a customer without memberships counts 0.
    return ReportDefinition(
        name=MEMBERSHIPS_PER_CUSTOMER,
        description="Memberships purchased by each customer, zero included",
        query=ReportQuery(
            source=joined(MEMBERSHIP, CUSTOMER, key_equals("customer_id", "id"), JoinKind.FULL),
            derive={"customer_id": first_present("customer.id", "membership.customer_id")},
            grouping=GroupingSpec.simple(
                keys=[
                    GroupKey("customer_id"),
                    GroupKey("name", source="customer.name"),
                ],
                aggregates=[Aggregate.count("membership_count", source="membership.id")],
            ),
            order_by=(
                SortKey("membership_count", ascending=False),
                SortKey("name"),
                SortKey("customer_id"),
            ),
            select=("name", "membership_count"),
        ),
    )


def discounted_pricing(discounts: DiscountTable = WINTER_DISCOUNTS) -> ReportDefinition:
    def hourly(record: Record) -> Any:
        return discounts.for_category(record.get("category")).apply_hourly(record.get("price_per_hour"))

    def daily(record: Record) -> Any:
        return discounts.for_category(record.get("category")).apply_daily(record.get("price_per_day"))

    return ReportDefinition(
        name=DISCOUNTED_PRICING,
        description="Old and discounted hourly and daily prices of every bike",
        query=ReportQuery(
            source=relation(BIKE),
            derive={
                "old_price_per_hour": lambda record: record.get("price_per_hour"),
                "new_price_per_hour": hourly,
                "old_price_per_day": lambda record: record.get("price_per_day"),
                "new_price_per_day": daily,
            },
            order_by=(SortKey("id"),),
            select=(
                "id",
                "category",
                "old_price_per_hour",
                "new_price_per_hour",
                "old_price_per_day",
                "new_price_per_day",
            ),
        ),
    )


def availability_counts() -> ReportDefinition:
    return ReportDefinition(
        name=AVAILABILITY_COUNTS,
        description="Available and rented bikes in each category",
        query=ReportQuery(
            source=relation(BIKE),
            grouping=GroupingSpec.simple(
                keys=[GroupKey("category")],
                aggregates=[
                    Aggregate.count("available_bikes_count", expression=status_is(BikeStatus.AVAILABLE)),
                    Aggregate.count("rented_bikes_count", expression=status_is(BikeStatus.RENTED)),
                ],
            ),
            order_by=(SortKey("category"),),
            select=("category", "available_bikes_count", "rented_bikes_count"),
        ),
    )


def rental_revenue_rollup() -> ReportDefinition:
    return ReportDefinition(
        name=RENTAL_REVENUE_ROLLUP,
        description="Rental revenue per month, per year and all-time",
        query=ReportQuery(
            source=relation(RENTAL),
            grouping=GroupingSpec.grouping_sets(
                keys=[
                    GroupKey("year", source="start_timestamp", transform=year_of),
                    GroupKey("month", source="start_timestamp", transform=month_of),
                ],
                sets=[("year", "month"), ("year",), ()],
                aggregates=[Aggregate.sum("revenue", source="total_paid", currency=True)],
            ),
            order_by=(SortKey("year"), SortKey("month")),
            select=("year", "month", "revenue"),
        ),
    )


def _membership_with_type() -> Source:
    return joined(MEMBERSHIP, MEMBERSHIP_TYPE, key_equals("membership_type_id", "id"), JoinKind.LEFT)


def membership_revenue_by_period() -> ReportDefinition:
    return ReportDefinition(
        name=MEMBERSHIP_REVENUE_BY_PERIOD,
        description="Membership revenue per year, month and membership type",
        query=ReportQuery(
            source=_membership_with_type(),
            grouping=GroupingSpec.simple(
                keys=[
                    GroupKey("year", source="membership.start_date", transform=year_of),
                    GroupKey("month", source="membership.start_date", transform=month_of),
                    GroupKey("membership_type_name", source="membership_type.name"),
                ],
                aggregates=[
                    Aggregate.sum("total_revenue", source="membership.total_paid", currency=True)
                ],
            ),
            order_by=(SortKey("year"), SortKey("month"), SortKey("membership_type_name")),
            select=("year", "month", "membership_type_name", "total_revenue"),
        ),
    )


def membership_revenue_cube(year: int = 2023) -> ReportDefinition:
    def in_year(record: Record) -> bool:
        start = record.get("membership.start_date")
        return start is not None and start.year == year

    return ReportDefinition(
        name=MEMBERSHIP_REVENUE_CUBE,
        description=f"Membership revenue in {year} with subtotals by type and month",
        query=ReportQuery(
            source=_membership_with_type(),
            where=in_year,
            grouping=GroupingSpec.cube(
                keys=[
                    GroupKey("membership_type_name", source="membership_type.name"),
                    GroupKey("month", source="membership.start_date", transform=month_of),
                ],
                aggregates=[
                    Aggregate.sum("total_revenue", source="membership.total_paid", currency=True)
                ],
            ),
            order_by=(SortKey("membership_type_name"), SortKey("month")),
            select=("membership_type_name", "month", "total_revenue"),
        ),
    )


def rental_segmentation(lower: int = 5, upper: int = 10) -> ReportDefinition:
    # Rentals of an unknown customer still count towards that customer_id
    rentals_per_customer = ReportQuery(
        source=joined(RENTAL, CUSTOMER, key_equals("customer_id", "id"), JoinKind.FULL),
        derive={"customer_id": first_present("customer.id", "rental.customer_id")},
        grouping=GroupingSpec.simple(
            keys=[GroupKey("customer_id")],
            aggregates=[Aggregate.count("rental_count", source="rental.id")],
        ),
        select=("customer_id", "rental_count"),
    )
    return ReportDefinition(
        name=RENTAL_SEGMENTATION,
        description="Number of customers in each rental-count band",
        query=ReportQuery(
            source=subquery(rentals_per_customer),
            derive={"rental_count_category": rental_count_band(lower, upper)},
            grouping=GroupingSpec.simple(
                keys=[GroupKey("rental_count_category")],
                aggregates=[Aggregate.count("customer_count")],
            ),
            order_by=(SortKey("customer_count"), SortKey("rental_count_category")),
            select=("rental_count_category", "customer_count"),
        ),
    )
