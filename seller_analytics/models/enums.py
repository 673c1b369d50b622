"""
Enumeration types for seller analytics.

All enums inherit from str to ensure JSON serialization compatibility.
"""

from enum import Enum


class AggregationKind(str, Enum):
    """
    How a metric rolls up across days.

    Counts and currency amounts are summed; rates, ratios and prices are
    averaged over the days that actually reported a value.
    """

    SUM = "sum"
    AVERAGE = "average"


class FormatKind(str, Enum):
    """Display family of a metric value."""

    COUNT = "count"
    CURRENCY = "currency"
    PERCENT = "percent"


class MetricCategory(str, Enum):
    """Funnel a metric belongs to."""

    FUNNEL = "funnel"
    ADVERTISING = "advertising"
    PRICING = "pricing"
