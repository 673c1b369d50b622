"""
Analytics backend connector.

Main Components:
    AnalyticsClient: Async client for article and campaign detail endpoints
    AnalyticsAPIError: Raised on failed or malformed backend responses

Usage:
    >>> from seller_analytics.connectors import AnalyticsClient
    >>> from seller_analytics.engine import aggregate_entities
    >>>
    >>> async with AnalyticsClient() as client:
    ...     daily = await client.fetch_daily_data([101, 102], cabinet_id=7)
    ...     combined = aggregate_entities(daily, "2026-10-01", "2026-10-07").total
"""

from seller_analytics.connectors.analytics_client import AnalyticsAPIError, AnalyticsClient

__all__ = [
    "AnalyticsClient",
    "AnalyticsAPIError",
]
