"""
Comparison Periods: default windows, validation and interactive edits.

A comparison set holds 2 to 5 named, non-overlapping, closed date windows.
The default set is four back-to-back 3-day windows ending yesterday, so the
possibly-incomplete current day is never compared.

Add/remove/edit helpers return a new list and never mutate their input.
Requests outside the 2..5 bounds and edits that would break the set are
ignored by returning the input unchanged.
"""

import datetime as dt
from itertools import combinations
from typing import Any, Mapping, Optional, Sequence, Union

from pydantic import ValidationError

from seller_analytics.models.periods import DateWindow, Period, PeriodValidationResult

PERIOD_COUNT = 4
PERIOD_DAYS = 3
MIN_PERIODS = 2
MAX_PERIODS = 5

PeriodLike = Union[Period, Mapping[str, Any]]


def period_name(number: int) -> str:
    return f"период №{number}"


def parse_day(value: Union[dt.date, str]) -> dt.date:
    """
    Coerce a calendar day from a date, datetime or "YYYY-MM-DD" string.

    Raises:
        ValueError: If the string is not an ISO date
    """
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    return dt.date.fromisoformat(value)


def dates_in_range(start: Union[dt.date, str], end: Union[dt.date, str]) -> list[dt.date]:
    """Every calendar day from start to end inclusive; empty if start > end."""
    first, last = parse_day(start), parse_day(end)
    return [first + dt.timedelta(days=offset) for offset in range((last - first).days + 1)]


def generate_default_periods(today: Optional[dt.date] = None) -> list[Period]:
    """
    Generate the default comparison set.

    Window i (0 = most recent) ends ``i * PERIOD_DAYS`` days before
    yesterday and spans ``PERIOD_DAYS`` days. The result is ordered
    oldest-first and numbered 1..PERIOD_COUNT in that order.

    Args:
        today: Reference day (default: local current date)

    Returns:
        PERIOD_COUNT contiguous, non-overlapping periods
    """
    yesterday = (today or dt.date.today()) - dt.timedelta(days=1)

    windows = []
    for i in range(PERIOD_COUNT):
        end = yesterday - dt.timedelta(days=i * PERIOD_DAYS)
        start = end - dt.timedelta(days=PERIOD_DAYS - 1)
        windows.append((start, end))
    windows.reverse()

    return [
        Period(id=number, name=period_name(number), date_from=start, date_to=end)
        for number, (start, end) in enumerate(windows, start=1)
    ]


def _coerce_window(item: PeriodLike) -> Optional[DateWindow]:
    # Only the dates matter here; id and name are not checked
    try:
        return DateWindow.model_validate(item)
    except ValidationError:
        return None


def check_periods(periods: Sequence[PeriodLike]) -> PeriodValidationResult:
    """
    Validate a comparison set and report why it fails.

    Sets of 0 or 1 periods are always valid. Otherwise every period's
    dates must parse and satisfy ``date_from <= date_to``, and no two
    closed intervals may share a day. Ids and names are not checked.
    Pairs are checked exhaustively; sets are small.

    Args:
        periods: Period models or wire mappings (``dateFrom``/``dateTo``)

    Returns:
        PeriodValidationResult with offending indices or conflicting pairs
    """
    items = list(periods)
    if len(items) <= 1:
        return PeriodValidationResult(valid=True)

    parsed: list[Optional[DateWindow]] = [_coerce_window(item) for item in items]
    invalid = [
        index
        for index, period in enumerate(parsed)
        if period is None or period.date_from > period.date_to
    ]
    if invalid:
        return PeriodValidationResult(
            valid=False, reason="invalid_dates", invalid_indices=invalid
        )

    conflicts = [
        (i, j) for i, j in combinations(range(len(parsed)), 2) if parsed[i].overlaps(parsed[j])
    ]
    if conflicts:
        return PeriodValidationResult(valid=False, reason="overlap", conflicts=conflicts)

    return PeriodValidationResult(valid=True)


def validate_periods(periods: Sequence[PeriodLike]) -> bool:
    """True if the period set is usable for comparison."""
    return check_periods(periods).valid


def renumber_periods(periods: Sequence[Period]) -> list[Period]:
    """Reassign ids 1..k and names in positional order."""
    return [
        period.model_copy(update={"id": number, "name": period_name(number)})
        for number, period in enumerate(periods, start=1)
    ]


def add_period(periods: Sequence[Period], today: Optional[dt.date] = None) -> list[Period]:
    """
    Append a window of PERIOD_DAYS days ending the day before the earliest start.

    At MAX_PERIODS the set is returned unchanged.

    Args:
        periods: Current comparison set
        today: Reference day used only when the set is empty

    Returns:
        Renumbered comparison set
    """
    if len(periods) >= MAX_PERIODS:
        return list(periods)

    if periods:
        earliest = min(period.date_from for period in periods)
    else:
        earliest = today or dt.date.today()

    end = earliest - dt.timedelta(days=1)
    start = end - dt.timedelta(days=PERIOD_DAYS - 1)
    new_period = Period(
        id=len(periods) + 1,
        name=period_name(len(periods) + 1),
        date_from=start,
        date_to=end,
    )
    return renumber_periods([*periods, new_period])


def remove_period(periods: Sequence[Period], period_id: int) -> list[Period]:
    """Drop the period with ``period_id`` and renumber; no-op at MIN_PERIODS."""
    if len(periods) <= MIN_PERIODS:
        return list(periods)
    return renumber_periods([period for period in periods if period.id != period_id])


def update_period(
    periods: Sequence[Period],
    period_id: int,
    date_from: Union[dt.date, str],
    date_to: Union[dt.date, str],
) -> list[Period]:
    """
    Change the dates of one period.

    The edit is kept only if the resulting set still validates; otherwise
    the input set is returned unchanged.
    """
    updated = []
    for period in periods:
        if period.id != period_id:
            updated.append(period)
            continue
        try:
            updated.append(
                Period(id=period.id, name=period.name, date_from=date_from, date_to=date_to)
            )
        except ValidationError:
            return list(periods)

    if validate_periods(updated):
        return updated
    return list(periods)
