"""
Pytest configuration and shared fixtures for the seller analytics test suite.

Provides data factories for daily records and periods, environment
isolation for settings, and a fresh shared request queue per test.
"""

import datetime as dt
from typing import Optional

import pytest

from seller_analytics.config import get_settings
from seller_analytics.engine.request_queue import reset_analytics_request_queue
from seller_analytics.models import DailyMetricRecord, Period

REFERENCE_TODAY = dt.date(2026, 10, 18)


# ---------------------------------------------------------------------------
# Model factories reusable across all test suites
# ---------------------------------------------------------------------------


def make_record(day, **fields) -> DailyMetricRecord:
    """Factory for a DailyMetricRecord; ``day`` may be a date or ISO string."""
    return DailyMetricRecord(date=day, **fields)


def make_records(start: dt.date, days: int, **fields) -> list[DailyMetricRecord]:
    """Factory for ``days`` consecutive records sharing the same field values."""
    return [make_record(start + dt.timedelta(days=offset), **fields) for offset in range(days)]


def make_period(
    date_from,
    date_to,
    period_id: int = 1,
    name: Optional[str] = None,
) -> Period:
    """Factory for a Period; dates may be date objects or ISO strings."""
    return Period(
        id=period_id,
        name=name or f"период №{period_id}",
        date_from=date_from,
        date_to=date_to,
    )


def make_article_payload(nm_id: int, daily: Optional[list[dict]] = None) -> dict:
    """Factory for an article detail payload as the backend sends it (camelCase)."""
    return {
        "article": {
            "nmId": nm_id,
            "imtId": None,
            "title": f"Article {nm_id}",
            "brand": "Brand",
            "subjectName": "Subject",
            "vendorCode": f"VC-{nm_id}",
            "photoTm": None,
            "rating": 4.7,
            "reviewsCount": 12,
            "productUrl": f"https://example.test/{nm_id}",
        },
        "periods": [],
        "metrics": [],
        "dailyData": daily
        if daily is not None
        else [
            {"date": "2026-10-15", "transitions": 100, "cart": 20, "orders": 5, "ordersAmount": 5000.0},
            {"date": "2026-10-16", "transitions": 80, "cart": 10, "orders": None, "ordersAmount": None},
        ],
        "campaigns": [],
        "stocks": [],
    }


# ---------------------------------------------------------------------------
# Pytest fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Fresh settings and shared queue for each test."""
    monkeypatch.delenv("API_TOKEN", raising=False)
    get_settings.cache_clear()
    reset_analytics_request_queue()
    yield
    get_settings.cache_clear()
    reset_analytics_request_queue()


@pytest.fixture
def today() -> dt.date:
    return REFERENCE_TODAY


@pytest.fixture
def funnel_records() -> list[DailyMetricRecord]:
    """Three days of funnel and advertising data, one day with gaps."""
    return [
        make_record(
            "2026-10-10",
            transitions=100, cart=20, orders=5, orders_amount=5000.0,
            cart_conversion=20.0, order_conversion=25.0,
            views=1000, clicks=50, costs=250.0, cpc=5.0, ctr=5.0, cpo=50.0, drr=5.0,
        ),
        make_record(
            "2026-10-11",
            transitions=100, cart=30, orders=5, orders_amount=5000.0,
            cart_conversion=30.0, order_conversion=16.0,
            views=1000, clicks=0, costs=250.0, cpc=None, ctr=0.0, cpo=50.0, drr=5.0,
        ),
        make_record("2026-10-12", transitions=None, cart=None, orders=0),
    ]


@pytest.fixture
def default_periods(today) -> list[Period]:
    from seller_analytics.engine.periods import generate_default_periods

    return generate_default_periods(today=today)
