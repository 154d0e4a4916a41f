"""Tests for weekly-hours aggregation and the advisory rules."""

from datetime import date

import pytest

from life_organizer.core.errors import InvalidInput
from life_organizer.services.hours import (
    LOW_STUDY_HOURS,
    WEEKLY_LIMIT_EXCEEDED,
    TimedEntry,
    ensure_study_session_length,
    ensure_work_shift_length,
    low_study_reminder,
    over_hours_warning,
    weekly_total_minutes,
)
from life_organizer.utils.timeutils import duration_minutes, week_window

WEEK = week_window(date(2024, 1, 1))  # Mon Jan 1 .. Sun Jan 7


class TestWeeklyTotal:
    def test_empty_week_is_zero(self):
        assert weekly_total_minutes([], WEEK) == 0

    def test_sums_entries_in_window(self):
        entries = [
            TimedEntry(date(2024, 1, 1), "09:00", "17:00"),
            TimedEntry(date(2024, 1, 3), "10:00", "12:30"),
        ]
        assert weekly_total_minutes(entries, WEEK) == 480 + 150

    def test_ignores_entries_outside_window(self):
        entries = [
            TimedEntry(date(2023, 12, 31), "09:00", "17:00"),
            TimedEntry(date(2024, 1, 8), "09:00", "17:00"),
            TimedEntry(date(2024, 1, 7), "09:00", "10:00"),
        ]
        assert weekly_total_minutes(entries, WEEK) == 60

    def test_overnight_entry_on_sunday_counts_fully(self):
        entries = [TimedEntry(date(2024, 1, 7), "22:00", "06:00")]
        assert weekly_total_minutes(entries, WEEK) == 480

    @pytest.mark.parametrize(
        "start,end",
        [("09:00", "17:00"), ("22:00", "06:00"), ("09:00", "09:00"), ("23:30", "00:15"), ("bad", "01:00")],
    )
    def test_matches_per_entry_duration(self, start, end):
        entry = TimedEntry(date(2024, 1, 2), start, end)
        assert weekly_total_minutes([entry], WEEK) == duration_minutes(start, end)


class TestLowStudyReminder:
    def test_fires_on_empty_week(self):
        adv = low_study_reminder(WEEK, 0)
        assert adv is not None
        assert adv.code == LOW_STUDY_HOURS
        assert adv.total_minutes == 0

    def test_fires_just_under_ten_hours(self):
        assert low_study_reminder(WEEK, 599) is not None

    def test_silent_at_ten_hours(self):
        assert low_study_reminder(WEEK, 600) is None

    def test_dict_shape(self):
        d = low_study_reminder(WEEK, 90).to_dict()
        assert d == {
            "code": "LOW_STUDY_HOURS",
            "message": "Reminder: Your study hours this week are 1h 30m. Try to reach 10h+ for good progress.",
            "weekStart": "2024-01-01",
            "weekEnd": "2024-01-07",
            "weeklyTotalMinutes": 90,
            "weeklyTotalText": "1h 30m",
        }


class TestOverHoursWarning:
    def test_fires_above_limit(self):
        adv = over_hours_warning(WEEK, 1450)
        assert adv.code == WEEKLY_LIMIT_EXCEEDED
        assert adv.to_dict()["weeklyTotalMinutes"] == 1450
        assert "24h 10m" in adv.message

    def test_silent_at_limit(self):
        assert over_hours_warning(WEEK, 1440) is None

    def test_silent_below_limit(self):
        assert over_hours_warning(WEEK, 1400) is None


class TestEntryLength:
    def test_work_shift_at_cap_is_allowed(self):
        assert ensure_work_shift_length("06:00", "22:00") == 960

    def test_work_shift_over_cap_is_rejected(self):
        with pytest.raises(InvalidInput):
            ensure_work_shift_length("06:00", "22:01")

    def test_equal_times_is_a_full_day_and_rejected(self):
        with pytest.raises(InvalidInput):
            ensure_work_shift_length("09:00", "09:00")

    def test_study_session_over_cap_is_rejected(self):
        with pytest.raises(InvalidInput):
            ensure_study_session_length("08:00", "20:30")

    def test_overnight_study_session_allowed(self):
        assert ensure_study_session_length("23:00", "01:00") == 120
