"""
Metric models for seller analytics.

This module defines the daily metric record received from the analytics
backend, the static metric descriptor registry, and the derived period
summary and comparison value objects.
"""

import datetime as dt
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .enums import AggregationKind, FormatKind, MetricCategory


class DailyMetricRecord(BaseModel):
    """
    One calendar day of metrics for one entity (product or campaign).

    Every metric field is optional: ``None`` means the backend did not
    report a value for that day, which is distinct from a reported zero.
    Records are immutable once received.

    Attributes:
        date: Calendar day the values belong to
        transitions: Product card visits
        cart: Units added to cart
        orders: Units ordered
        orders_amount: Order amount in currency
        cart_conversion: Cart adds per transition, percent
        order_conversion: Orders per cart add, percent
        views: Advertising impressions
        clicks: Advertising clicks
        costs: Advertising spend
        cpc: Cost per click
        ctr: Click-through rate, percent
        cpo: Cost per order
        drr: Advertising spend to revenue ratio, percent
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    date: dt.date = Field(description="Calendar day the values belong to")

    # General funnel
    transitions: Optional[float] = None
    cart: Optional[float] = None
    orders: Optional[float] = None
    orders_amount: Optional[float] = None
    cart_conversion: Optional[float] = None
    order_conversion: Optional[float] = None

    # Advertising funnel
    views: Optional[float] = None
    clicks: Optional[float] = None
    costs: Optional[float] = None
    cpc: Optional[float] = None
    ctr: Optional[float] = None
    cpo: Optional[float] = None
    drr: Optional[float] = None

    # Pricing
    price_before_discount: Optional[float] = None
    seller_discount: Optional[float] = None
    price_with_discount: Optional[float] = None
    wb_club_discount: Optional[float] = None
    price_with_wb_club: Optional[float] = None
    price_with_spp: Optional[float] = None
    spp_amount: Optional[float] = None
    spp_percent: Optional[float] = None


class MetricDescriptor(BaseModel):
    """Static description of how a raw metric key is rolled up and shown."""

    model_config = ConfigDict(frozen=True)

    key: str
    aggregation: AggregationKind
    format: FormatKind
    category: MetricCategory


def _descriptor(
    key: str,
    aggregation: AggregationKind,
    fmt: FormatKind,
    category: MetricCategory,
) -> tuple[str, MetricDescriptor]:
    return key, MetricDescriptor(key=key, aggregation=aggregation, format=fmt, category=category)


_SUM = AggregationKind.SUM
_AVG = AggregationKind.AVERAGE

METRIC_DESCRIPTORS: dict[str, MetricDescriptor] = dict(
    [
        _descriptor("transitions", _SUM, FormatKind.COUNT, MetricCategory.FUNNEL),
        _descriptor("cart", _SUM, FormatKind.COUNT, MetricCategory.FUNNEL),
        _descriptor("orders", _SUM, FormatKind.COUNT, MetricCategory.FUNNEL),
        _descriptor("orders_amount", _SUM, FormatKind.CURRENCY, MetricCategory.FUNNEL),
        _descriptor("cart_conversion", _AVG, FormatKind.PERCENT, MetricCategory.FUNNEL),
        _descriptor("order_conversion", _AVG, FormatKind.PERCENT, MetricCategory.FUNNEL),
        _descriptor("views", _SUM, FormatKind.COUNT, MetricCategory.ADVERTISING),
        _descriptor("clicks", _SUM, FormatKind.COUNT, MetricCategory.ADVERTISING),
        _descriptor("costs", _SUM, FormatKind.CURRENCY, MetricCategory.ADVERTISING),
        _descriptor("cpc", _AVG, FormatKind.CURRENCY, MetricCategory.ADVERTISING),
        _descriptor("ctr", _AVG, FormatKind.PERCENT, MetricCategory.ADVERTISING),
        _descriptor("cpo", _AVG, FormatKind.CURRENCY, MetricCategory.ADVERTISING),
        _descriptor("drr", _AVG, FormatKind.PERCENT, MetricCategory.ADVERTISING),
        _descriptor("price_before_discount", _AVG, FormatKind.CURRENCY, MetricCategory.PRICING),
        _descriptor("seller_discount", _AVG, FormatKind.PERCENT, MetricCategory.PRICING),
        _descriptor("price_with_discount", _AVG, FormatKind.CURRENCY, MetricCategory.PRICING),
        _descriptor("wb_club_discount", _AVG, FormatKind.PERCENT, MetricCategory.PRICING),
        _descriptor("price_with_wb_club", _AVG, FormatKind.CURRENCY, MetricCategory.PRICING),
        _descriptor("price_with_spp", _AVG, FormatKind.CURRENCY, MetricCategory.PRICING),
        _descriptor("spp_amount", _AVG, FormatKind.CURRENCY, MetricCategory.PRICING),
        _descriptor("spp_percent", _AVG, FormatKind.PERCENT, MetricCategory.PRICING),
    ]
)

FUNNEL_METRICS = [
    key for key, d in METRIC_DESCRIPTORS.items() if d.category == MetricCategory.FUNNEL
]
ADVERTISING_METRICS = [
    key for key, d in METRIC_DESCRIPTORS.items() if d.category == MetricCategory.ADVERTISING
]

# Summed counters of a PeriodSummary; ratios are always re-derived from these.
RAW_COUNTERS = ("transitions", "cart", "orders", "orders_amount", "views", "clicks", "costs")


def _ratio(numerator: float, denominator: float, scale: float = 1.0) -> Optional[float]:
    if denominator > 0:
        return numerator / denominator * scale
    return None


class PeriodSummary(BaseModel):
    """
    Totals and derived ratios for one entity (or a group of entities) over one period.

    Raw counters are sums over the period's daily records, with missing days
    contributing zero. Ratios are derived from the sums, never averaged, and
    are ``None`` when their denominator is zero.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    transitions: float = 0.0
    cart: float = 0.0
    orders: float = 0.0
    orders_amount: float = 0.0
    views: float = 0.0
    clicks: float = 0.0
    costs: float = 0.0

    cart_conversion: Optional[float] = None
    order_conversion: Optional[float] = None
    cpc: Optional[float] = None
    ctr: Optional[float] = None
    cpo: Optional[float] = None
    drr: Optional[float] = None

    @classmethod
    def from_totals(
        cls,
        transitions: float = 0.0,
        cart: float = 0.0,
        orders: float = 0.0,
        orders_amount: float = 0.0,
        views: float = 0.0,
        clicks: float = 0.0,
        costs: float = 0.0,
    ) -> "PeriodSummary":
        """
        Build a summary from raw counter sums, deriving every ratio.

        Args:
            transitions: Summed card visits
            cart: Summed cart adds
            orders: Summed orders
            orders_amount: Summed order amount
            views: Summed impressions
            clicks: Summed clicks
            costs: Summed advertising spend

        Returns:
            PeriodSummary with ratios guarded against zero denominators
        """
        return cls(
            transitions=transitions,
            cart=cart,
            orders=orders,
            orders_amount=orders_amount,
            views=views,
            clicks=clicks,
            costs=costs,
            cart_conversion=_ratio(cart, transitions, 100),
            order_conversion=_ratio(orders, cart, 100),
            cpc=_ratio(costs, clicks),
            ctr=_ratio(clicks, views, 100),
            cpo=_ratio(costs, orders),
            drr=_ratio(costs, orders_amount, 100),
        )

    def counters(self) -> dict[str, float]:
        """Raw counter sums keyed by metric name."""
        return {key: getattr(self, key) for key in RAW_COUNTERS}


class MetricComparison(BaseModel):
    """One metric compared between two period summaries."""

    metric: str
    first: Optional[float] = None
    second: Optional[float] = None
    change_percent: Optional[float] = Field(
        default=None,
        description="Signed relative change; None when undefined or below the noise threshold",
    )


class EntityAggregation(BaseModel):
    """Per-entity summaries for one period together with their combined total."""

    by_entity: dict[int, Optional[PeriodSummary]] = Field(default_factory=dict)
    total: Optional[PeriodSummary] = None


class DailyTableRow(BaseModel):
    """
    One row of a per-day metric table.

    Attributes:
        label: ISO date for day rows, "total" for the period row
        date: The day, or None for the period row
        values: Metric key to value (None when not reported)
    """

    label: str
    date: Optional[dt.date] = None
    values: dict[str, Optional[float]] = Field(default_factory=dict)
