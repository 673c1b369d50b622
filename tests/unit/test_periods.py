"""
Unit tests for comparison period generation, validation and edits.
"""

import datetime as dt

import pytest

from seller_analytics.engine.periods import (
    MAX_PERIODS,
    MIN_PERIODS,
    add_period,
    check_periods,
    dates_in_range,
    generate_default_periods,
    parse_day,
    remove_period,
    renumber_periods,
    update_period,
    validate_periods,
)
from tests.conftest import make_period

D = dt.date


class TestGenerateDefaultPeriods:
    """Test generate_default_periods."""

    def test_returns_four_periods(self, default_periods):
        assert len(default_periods) == 4

    def test_oldest_first_with_expected_windows(self, default_periods):
        windows = [(p.date_from, p.date_to) for p in default_periods]
        assert windows == [
            (D(2026, 10, 6), D(2026, 10, 8)),
            (D(2026, 10, 9), D(2026, 10, 11)),
            (D(2026, 10, 12), D(2026, 10, 14)),
            (D(2026, 10, 15), D(2026, 10, 17)),
        ]

    def test_ids_and_names_follow_oldest_first_order(self, default_periods):
        assert [p.id for p in default_periods] == [1, 2, 3, 4]
        assert [p.name for p in default_periods] == [
            "период №1",
            "период №2",
            "период №3",
            "период №4",
        ]

    def test_last_period_ends_yesterday(self, default_periods, today):
        assert default_periods[-1].date_to == today - dt.timedelta(days=1)

    def test_each_period_spans_three_days(self, default_periods):
        assert all(p.days == 3 for p in default_periods)

    def test_defaults_are_valid(self, default_periods):
        assert validate_periods(default_periods) is True

    def test_crosses_month_boundary(self):
        periods = generate_default_periods(today=D(2026, 3, 2))
        assert periods[-1].date_to == D(2026, 3, 1)
        assert periods[-1].date_from == D(2026, 2, 27)
        assert periods[0].date_from == D(2026, 2, 18)

    def test_uses_current_date_when_not_given(self):
        periods = generate_default_periods()
        assert periods[-1].date_to == dt.date.today() - dt.timedelta(days=1)


class TestValidatePeriods:
    """Test validate_periods and check_periods."""

    def test_empty_set_is_valid(self):
        assert validate_periods([]) is True

    def test_single_period_is_valid(self):
        assert validate_periods([make_period("2026-10-01", "2026-10-03")]) is True

    def test_single_inverted_period_is_trivially_valid(self):
        assert validate_periods([make_period("2026-10-05", "2026-10-01")]) is True

    def test_disjoint_periods_are_valid(self):
        periods = [
            make_period("2026-10-01", "2026-10-03", 1),
            make_period("2026-10-04", "2026-10-06", 2),
        ]
        assert validate_periods(periods) is True

    def test_sharing_one_day_is_invalid(self):
        periods = [
            make_period("2026-10-01", "2026-10-03", 1),
            make_period("2026-10-03", "2026-10-06", 2),
        ]
        result = check_periods(periods)
        assert result.valid is False
        assert result.reason == "overlap"
        assert result.conflicts == [(0, 1)]

    def test_containment_is_overlap(self):
        periods = [
            make_period("2026-10-01", "2026-10-10", 1),
            make_period("2026-10-04", "2026-10-05", 2),
        ]
        assert validate_periods(periods) is False

    def test_overlap_detected_regardless_of_order(self):
        periods = [
            make_period("2026-10-04", "2026-10-06", 1),
            make_period("2026-10-01", "2026-10-04", 2),
        ]
        assert validate_periods(periods) is False

    def test_all_conflicting_pairs_reported(self):
        periods = [
            make_period("2026-10-01", "2026-10-05", 1),
            make_period("2026-10-10", "2026-10-12", 2),
            make_period("2026-10-05", "2026-10-10", 3),
        ]
        assert check_periods(periods).conflicts == [(0, 2), (1, 2)]

    def test_inverted_period_is_invalid(self):
        periods = [
            make_period("2026-10-01", "2026-10-03", 1),
            make_period("2026-10-09", "2026-10-06", 2),
        ]
        result = check_periods(periods)
        assert result.valid is False
        assert result.reason == "invalid_dates"
        assert result.invalid_indices == [1]

    def test_wire_mappings_accepted(self):
        periods = [
            {"id": 1, "name": "период №1", "dateFrom": "2026-10-01", "dateTo": "2026-10-03"},
            {"id": 2, "name": "период №2", "dateFrom": "2026-10-04", "dateTo": "2026-10-06"},
        ]
        assert validate_periods(periods) is True

    def test_unparsable_date_is_invalid(self):
        periods = [
            {"id": 1, "name": "период №1", "dateFrom": "2026-10-01", "dateTo": "2026-10-03"},
            {"id": 2, "name": "период №2", "dateFrom": "not-a-date", "dateTo": "2026-10-06"},
        ]
        result = check_periods(periods)
        assert result.valid is False
        assert result.invalid_indices == [1]

    def test_ids_and_names_are_not_part_of_date_validation(self):
        periods = [
            {"id": 0, "dateFrom": "2026-10-01", "dateTo": "2026-10-03"},
            {"dateFrom": "2026-10-04", "dateTo": "2026-10-06"},
        ]
        assert check_periods(periods).valid is True

    def test_unnamed_mappings_still_checked_for_overlap(self):
        periods = [
            {"id": 0, "dateFrom": "2026-10-01", "dateTo": "2026-10-04"},
            {"dateFrom": "2026-10-04", "dateTo": "2026-10-06"},
        ]
        result = check_periods(periods)
        assert result.reason == "overlap"
        assert result.conflicts == [(0, 1)]

    def test_result_is_truthy_only_when_valid(self, default_periods):
        assert check_periods(default_periods)
        assert not check_periods([default_periods[0], default_periods[0]])


class TestPeriodEdits:
    """Test add_period, remove_period, update_period and renumber_periods."""

    def test_add_period_prepends_window_before_earliest(self, default_periods):
        periods = add_period(default_periods)
        assert len(periods) == 5
        added = periods[-1]
        assert added.date_to == D(2026, 10, 5)
        assert added.date_from == D(2026, 10, 3)
        assert validate_periods(periods) is True

    def test_add_period_renumbers(self, default_periods):
        periods = add_period(default_periods)
        assert [p.id for p in periods] == [1, 2, 3, 4, 5]
        assert periods[-1].name == "период №5"

    def test_add_period_at_ceiling_is_ignored(self, default_periods):
        full = add_period(default_periods)
        assert len(full) == MAX_PERIODS
        assert add_period(full) == full

    def test_add_period_to_empty_set(self, today):
        periods = add_period([], today=today)
        assert len(periods) == 1
        assert periods[0].date_to == D(2026, 10, 17)

    def test_add_period_does_not_mutate_input(self, default_periods):
        snapshot = [p.model_copy() for p in default_periods]
        add_period(default_periods)
        assert default_periods == snapshot

    def test_remove_period_renumbers_positionally(self, default_periods):
        periods = remove_period(default_periods, 2)
        assert [p.id for p in periods] == [1, 2, 3]
        assert [p.name for p in periods] == ["период №1", "период №2", "период №3"]
        assert periods[1].date_from == D(2026, 10, 12)

    def test_remove_period_at_floor_is_ignored(self):
        periods = [
            make_period("2026-10-01", "2026-10-03", 1),
            make_period("2026-10-04", "2026-10-06", 2),
        ]
        assert len(periods) == MIN_PERIODS
        assert remove_period(periods, 1) == periods

    def test_remove_unknown_id_keeps_all_periods(self, default_periods):
        assert remove_period(default_periods, 99) == default_periods

    def test_update_period_applies_valid_edit(self, default_periods):
        periods = update_period(default_periods, 1, "2026-10-01", "2026-10-05")
        assert periods[0].date_from == D(2026, 10, 1)
        assert periods[0].date_to == D(2026, 10, 5)
        assert periods[0].name == "период №1"

    def test_update_period_rejects_overlap(self, default_periods):
        periods = update_period(default_periods, 1, "2026-10-08", "2026-10-09")
        assert periods == default_periods

    def test_update_period_rejects_inverted_range(self, default_periods):
        periods = update_period(default_periods, 1, D(2026, 10, 5), D(2026, 10, 1))
        assert periods == default_periods

    def test_update_period_rejects_unparsable_date(self, default_periods):
        periods = update_period(default_periods, 1, "2026-13-01", "2026-10-05")
        assert periods == default_periods

    def test_renumber_is_total_reassignment(self):
        periods = [
            make_period("2026-10-07", "2026-10-09", 7, name="custom"),
            make_period("2026-10-01", "2026-10-03", 3),
        ]
        renumbered = renumber_periods(periods)
        assert [(p.id, p.name) for p in renumbered] == [(1, "период №1"), (2, "период №2")]
        assert renumbered[0].date_from == D(2026, 10, 7)


class TestDateHelpers:
    """Test parse_day and dates_in_range."""

    def test_dates_in_range_inclusive(self):
        assert dates_in_range("2026-10-30", "2026-11-01") == [
            D(2026, 10, 30),
            D(2026, 10, 31),
            D(2026, 11, 1),
        ]

    def test_dates_in_range_single_day(self):
        assert dates_in_range(D(2026, 10, 1), D(2026, 10, 1)) == [D(2026, 10, 1)]

    def test_dates_in_range_inverted_is_empty(self):
        assert dates_in_range("2026-10-05", "2026-10-01") == []

    def test_parse_day_accepts_datetime(self):
        assert parse_day(dt.datetime(2026, 10, 1, 23, 59)) == D(2026, 10, 1)

    def test_parse_day_rejects_garbage(self):
        with pytest.raises(ValueError):
            parse_day("yesterday")
