"""
Pydantic v2 data models for seller analytics.

Model Organization:
    - enums: Aggregation, format and category enumerations
    - metrics: Daily records, metric descriptors, period summaries
    - periods: Comparison periods and validation results
    - responses: Backend payloads consumed by the core

Wire names are camelCase (``dateFrom``, ``ordersAmount``); Python attributes
are snake_case. Both are accepted on input.

Usage:
    >>> from seller_analytics.models import DailyMetricRecord
    >>> record = DailyMetricRecord.model_validate(
    ...     {"date": "2026-10-01", "orders": 3, "ordersAmount": 4500.0}
    ... )
"""

from .enums import AggregationKind, FormatKind, MetricCategory
from .metrics import (
    ADVERTISING_METRICS,
    FUNNEL_METRICS,
    METRIC_DESCRIPTORS,
    RAW_COUNTERS,
    DailyMetricRecord,
    DailyTableRow,
    EntityAggregation,
    MetricComparison,
    MetricDescriptor,
    PeriodSummary,
)
from .periods import DateWindow, Period, PeriodValidationResult
from .responses import ArticleDetail, ArticleResponse, ArticleSummary, CampaignDetail

__all__ = [
    # Enumerations
    "AggregationKind",
    "FormatKind",
    "MetricCategory",
    # Metric models
    "ADVERTISING_METRICS",
    "FUNNEL_METRICS",
    "METRIC_DESCRIPTORS",
    "RAW_COUNTERS",
    "DailyMetricRecord",
    "DailyTableRow",
    "EntityAggregation",
    "MetricComparison",
    "MetricDescriptor",
    "PeriodSummary",
    # Period models
    "DateWindow",
    "Period",
    "PeriodValidationResult",
    # Backend responses
    "ArticleDetail",
    "ArticleResponse",
    "ArticleSummary",
    "CampaignDetail",
]
