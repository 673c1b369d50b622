"""
Metric Aggregation Engine: daily records to period numbers and deltas.

Turns an entity's daily metric records into per-day values, period totals,
period summaries with derived ratios, and noise-suppressed percentage
changes between two periods.

Every function here is pure and synchronous; results are recomputed on
each call. ``None`` is the universal "cannot determine" result: a missing
day, an all-missing range, or a zero denominator never becomes 0, NaN or
infinity.
"""

import datetime as dt
import math
from typing import Iterable, Mapping, Optional, Sequence, Union

from seller_analytics.engine.periods import dates_in_range, parse_day
from seller_analytics.models.enums import AggregationKind, FormatKind
from seller_analytics.models.metrics import (
    ADVERTISING_METRICS,
    FUNNEL_METRICS,
    METRIC_DESCRIPTORS,
    RAW_COUNTERS,
    DailyMetricRecord,
    DailyTableRow,
    EntityAggregation,
    MetricComparison,
    PeriodSummary,
)

DayLike = Union[dt.date, str]

# Differences below these are reported as "no change".
ABSOLUTE_CHANGE_THRESHOLD = 0.001
PERCENT_CHANGE_THRESHOLD = 0.01

# Decimal places currency values are rounded to before comparison.
CURRENCY_COMPARISON_DECIMALS = 2

COMPARISON_METRICS = ("transitions", "cart", "orders", "orders_amount", "clicks", "costs")

TOTAL_ROW_LABEL = "total"


def aggregation_kind(metric_key: str) -> AggregationKind:
    """Roll-up kind for a metric; unknown keys are summed."""
    descriptor = METRIC_DESCRIPTORS.get(metric_key)
    return descriptor.aggregation if descriptor else AggregationKind.SUM


def _index_by_date(records: Sequence[DailyMetricRecord]) -> dict[dt.date, DailyMetricRecord]:
    index: dict[dt.date, DailyMetricRecord] = {}
    for record in records:
        # First record wins for duplicated dates
        index.setdefault(record.date, record)
    return index


def _field_value(record: Optional[DailyMetricRecord], metric_key: str) -> Optional[float]:
    if record is None or metric_key not in METRIC_DESCRIPTORS:
        return None
    return getattr(record, metric_key)


def get_value_for_date(
    records: Sequence[DailyMetricRecord],
    metric_key: str,
    day: DayLike,
) -> Optional[float]:
    """
    Value of one metric on one day.

    Args:
        records: Daily records of one entity
        metric_key: Metric name (e.g. "orders_amount")
        day: Calendar day as date or "YYYY-MM-DD"

    Returns:
        The reported value, or None if the day, the field, or the metric
        key is unknown. A reported zero stays 0.
    """
    if not records:
        return None
    target = parse_day(day)
    for record in records:
        if record.date == target:
            return _field_value(record, metric_key)
    return None


def get_total_for_period(
    records: Sequence[DailyMetricRecord],
    dates: Iterable[DayLike],
    metric_key: str,
) -> Optional[float]:
    """
    Roll a metric up over a list of days.

    Days without a value are skipped entirely: they add nothing to a sum and
    do not count toward an average's denominator.

    Args:
        records: Daily records of one entity
        dates: Days to include
        metric_key: Metric name

    Returns:
        Mean of the available values for AVERAGE metrics, their sum
        otherwise, or None if no day has a value
    """
    if not records:
        return None

    index = _index_by_date(records)
    values = []
    for day in dates:
        value = _field_value(index.get(parse_day(day)), metric_key)
        if value is not None:
            values.append(value)

    if not values:
        return None

    total = sum(values)
    if aggregation_kind(metric_key) == AggregationKind.AVERAGE:
        return total / len(values)
    return total


def aggregate_period(
    records: Sequence[DailyMetricRecord],
    start: DayLike,
    end: DayLike,
) -> Optional[PeriodSummary]:
    """
    Summarize one entity's records between start and end inclusive.

    Raw counters are summed with missing values counted as zero; ratios are
    derived from the sums.

    Args:
        records: Daily records of one entity
        start: First day of the period
        end: Last day of the period

    Returns:
        PeriodSummary, or None if no record falls inside the period
    """
    first, last = parse_day(start), parse_day(end)
    in_period = [record for record in records if first <= record.date <= last]
    if not in_period:
        return None

    totals = {
        key: sum(getattr(record, key) or 0.0 for record in in_period) for key in RAW_COUNTERS
    }
    return PeriodSummary.from_totals(**totals)


def combine_summaries(summaries: Iterable[Optional[PeriodSummary]]) -> Optional[PeriodSummary]:
    """
    Combine several entities' summaries for the same period.

    Raw counters are re-summed and ratios re-derived from the combined sums;
    per-entity ratios are never averaged.

    Returns:
        Combined PeriodSummary, or None if every input is None
    """
    present = [summary for summary in summaries if summary is not None]
    if not present:
        return None

    totals = {key: sum(getattr(summary, key) for summary in present) for key in RAW_COUNTERS}
    return PeriodSummary.from_totals(**totals)


def aggregate_entities(
    records_by_entity: Mapping[int, Sequence[DailyMetricRecord]],
    start: DayLike,
    end: DayLike,
) -> EntityAggregation:
    """
    Summarize several entities over one period, plus their combined total.

    Args:
        records_by_entity: Entity id (nmId or campaign id) to its daily records
        start: First day of the period
        end: Last day of the period

    Returns:
        EntityAggregation with a summary (or None) per entity and the total
    """
    by_entity = {
        entity_id: aggregate_period(records, start, end)
        for entity_id, records in records_by_entity.items()
    }
    return EntityAggregation(by_entity=by_entity, total=combine_summaries(by_entity.values()))


def _round_half_up(value: float, decimals: int) -> float:
    factor = 10**decimals
    return math.floor(value * factor + 0.5) / factor


def percent_difference(
    value1: Optional[float],
    value2: Optional[float],
    round_to: Optional[int] = None,
) -> Optional[float]:
    """
    Signed percentage change from value1 to value2, with noise suppression.

    Steps, in order:
        1. None if either value is None or value1 is 0.
        2. If round_to is given, round both values half-up to that many decimals.
        3. None if the absolute difference is below 0.001.
        4. None if the relative change is below 0.01 percent in magnitude.

    Args:
        value1: Baseline value
        value2: Compared value
        round_to: Decimal places to round both values to first

    Returns:
        ((value2 - value1) / value1) * 100, or None for "no meaningful change"

    Example:
        >>> percent_difference(100, 110)
        10.0
        >>> percent_difference(100.001, 100.002, 2) is None
        True
    """
    if value1 is None or value2 is None or value1 == 0:
        return None

    v1, v2 = value1, value2
    if round_to is not None:
        v1 = _round_half_up(value1, round_to)
        v2 = _round_half_up(value2, round_to)
        if v1 == 0:
            return None

    if abs(v2 - v1) < ABSOLUTE_CHANGE_THRESHOLD:
        return None

    diff = ((v2 - v1) / v1) * 100
    if abs(diff) < PERCENT_CHANGE_THRESHOLD:
        return None
    return diff


def compare_summaries(
    first: Optional[PeriodSummary],
    second: Optional[PeriodSummary],
    metric_keys: Sequence[str] = COMPARISON_METRICS,
) -> list[MetricComparison]:
    """
    Compare two period summaries metric by metric.

    Currency metrics are rounded to kopecks before comparing so float
    jitter in sums does not show up as a change.

    Args:
        first: Baseline period summary (may be None)
        second: Compared period summary (may be None)
        metric_keys: PeriodSummary fields to compare

    Returns:
        One MetricComparison per key, in the given order

    Raises:
        ValueError: If a key is not a PeriodSummary field
    """
    comparisons = []
    for key in metric_keys:
        if key not in PeriodSummary.model_fields:
            raise ValueError(f"Unknown summary metric: {key}")

        value1 = getattr(first, key) if first is not None else None
        value2 = getattr(second, key) if second is not None else None
        descriptor = METRIC_DESCRIPTORS.get(key)
        round_to = (
            CURRENCY_COMPARISON_DECIMALS
            if descriptor is not None and descriptor.format == FormatKind.CURRENCY
            else None
        )
        comparisons.append(
            MetricComparison(
                metric=key,
                first=value1,
                second=value2,
                change_percent=percent_difference(value1, value2, round_to),
            )
        )
    return comparisons


def build_daily_table(
    records: Sequence[DailyMetricRecord],
    start: DayLike,
    end: DayLike,
    metric_keys: Optional[Sequence[str]] = None,
) -> list[DailyTableRow]:
    """
    Per-day metric rows for a date range, newest first, plus a total row.

    The total row uses get_total_for_period, so ratio metrics show the mean
    of reported days while counters show their sum.

    Args:
        records: Daily records of one entity
        start: First day of the range
        end: Last day of the range
        metric_keys: Metrics to include (default: funnel then advertising)

    Returns:
        Day rows in descending date order followed by the "total" row
    """
    keys = list(metric_keys) if metric_keys is not None else [*FUNNEL_METRICS, *ADVERTISING_METRICS]
    days = dates_in_range(start, end)
    index = _index_by_date(records)

    rows = [
        DailyTableRow(
            label=day.isoformat(),
            date=day,
            values={key: _field_value(index.get(day), key) for key in keys},
        )
        for day in reversed(days)
    ]
    rows.append(
        DailyTableRow(
            label=TOTAL_ROW_LABEL,
            values={key: get_total_for_period(records, days, key) for key in keys},
        )
    )
    return rows
