"""
Seller analytics core engines.

- Request queue: bounded-concurrency FIFO scheduling of backend fetches
- Periods: default comparison windows, validation and interactive edits
- Aggregation: per-day values, period totals and summaries, noise-suppressed deltas

Aggregation and period functions are pure and synchronous; the request queue
runs on the asyncio event loop.
"""

__all__ = [
    "RequestQueue",
    "get_analytics_request_queue",
    "add_period",
    "check_periods",
    "dates_in_range",
    "generate_default_periods",
    "remove_period",
    "renumber_periods",
    "update_period",
    "validate_periods",
    "aggregate_entities",
    "aggregate_period",
    "build_daily_table",
    "combine_summaries",
    "compare_summaries",
    "get_total_for_period",
    "get_value_for_date",
    "percent_difference",
]

from seller_analytics.engine.aggregation import (
    aggregate_entities,
    aggregate_period,
    build_daily_table,
    combine_summaries,
    compare_summaries,
    get_total_for_period,
    get_value_for_date,
    percent_difference,
)
from seller_analytics.engine.periods import (
    add_period,
    check_periods,
    dates_in_range,
    generate_default_periods,
    remove_period,
    renumber_periods,
    update_period,
    validate_periods,
)
from seller_analytics.engine.request_queue import RequestQueue, get_analytics_request_queue
