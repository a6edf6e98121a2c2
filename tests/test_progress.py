"""
Tests for the habit progress engine.

NOW is Monday 2026-10-19 15:00 UTC throughout.
"""

import pytest
from datetime import datetime, timezone

from cashflow.habits.periods import ConfigurationError
from cashflow.habits.progress import (
    HabitProgressEngine,
    compute_stats,
    current_progress,
    habit_progress,
    period_label,
)
from cashflow.models.habit import Habit, HabitPeriod, HabitStats


UTC = timezone.utc


def ms(year, month, day, hour=0, minute=0):
    return int(datetime(year, month, day, hour, minute, tzinfo=UTC).timestamp() * 1000)


NOW = ms(2026, 10, 19, 15)
CREATED = ms(2026, 9, 1, 8)


def make_habit(logs=(), **overrides):
    fields = {
        "name": "Read",
        "target_count": 1,
        "period": HabitPeriod.DAILY,
        "created_at": CREATED,
        "logs": logs,
    }
    fields.update(overrides)
    return Habit(**fields)


class TestCurrentProgress:
    """Progress counts logs in the period containing now."""

    def test_counts_only_current_day(self):
        """[yesterday, yesterday, today] with target 3 gives progress 1."""
        habit = make_habit(
            logs=[ms(2026, 10, 18, 9), ms(2026, 10, 18, 20), ms(2026, 10, 19, 7)],
            target_count=3,
        )
        assert current_progress(habit, NOW, UTC) == 1

    def test_no_logs(self):
        assert current_progress(make_habit(), NOW, UTC) == 0

    def test_anchor_boundary_is_inclusive(self):
        habit = make_habit(logs=[ms(2026, 10, 19), ms(2026, 10, 18, 23, 59)])
        assert current_progress(habit, NOW, UTC) == 1

    def test_logs_after_now_still_count(self):
        """Only the lower bound is applied."""
        habit = make_habit(logs=[ms(2026, 10, 19, 10), ms(2026, 10, 25, 10)])
        assert current_progress(habit, NOW, UTC) == 2

    def test_weekly_counts_whole_week(self):
        habit = make_habit(
            logs=[ms(2026, 10, 18, 10), ms(2026, 10, 19, 8), ms(2026, 10, 19, 9)],
            period=HabitPeriod.WEEKLY,
            target_count=3,
        )
        assert current_progress(habit, NOW, UTC) == 2
        assert current_progress(habit, ms(2026, 10, 18, 23), UTC) == 3

    def test_monthly(self):
        habit = make_habit(
            logs=[ms(2026, 9, 30, 10), ms(2026, 10, 1, 8), ms(2026, 10, 12, 9)],
            period=HabitPeriod.MONTHLY,
        )
        assert current_progress(habit, NOW, UTC) == 2

    def test_custom_cycle(self):
        """Created 2026-09-01 with 7-day cycles: now falls in the cycle starting 10-13."""
        habit = make_habit(
            logs=[ms(2026, 10, 12, 10), ms(2026, 10, 13, 9), ms(2026, 10, 19, 9)],
            period=HabitPeriod.CUSTOM,
            custom_interval=7,
        )
        assert current_progress(habit, NOW, UTC) == 2


class TestComputeStats:
    """Streaks and totals."""

    def test_empty_logs(self):
        assert compute_stats(make_habit(), NOW, UTC) == HabitStats(streak=0, total_accumulated=0)

    def test_incomplete_today_does_not_break_streak(self):
        """Three successful days before today, nothing today yet."""
        habit = make_habit(logs=[
            ms(2026, 10, 16, 10),
            ms(2026, 10, 17, 10),
            ms(2026, 10, 18, 10),
        ])
        stats = compute_stats(habit, NOW, UTC)
        assert stats.streak == 3
        assert stats.total_accumulated == 3

    def test_partial_today_does_not_break_streak(self):
        habit = make_habit(
            logs=[ms(2026, 10, 17, 10)] * 2 + [ms(2026, 10, 18, 10)] * 2 + [ms(2026, 10, 19, 9)],
            target_count=2,
        )
        assert compute_stats(habit, NOW, UTC).streak == 2

    def test_completed_today_counts(self):
        habit = make_habit(logs=[ms(2026, 10, 18, 10), ms(2026, 10, 19, 10)])
        assert compute_stats(habit, NOW, UTC).streak == 2

    def test_streak_stops_at_gap(self):
        """Days N-3 and N-1 successful, N-2 missed: streak is 1, not 3."""
        habit = make_habit(logs=[ms(2026, 10, 16, 10), ms(2026, 10, 18, 10)])
        stats = compute_stats(habit, NOW, UTC)
        assert stats.streak == 1
        assert stats.total_accumulated == 2

    def test_unsuccessful_day_breaks_streak(self):
        """A past day below target is a break even though it has logs."""
        habit = make_habit(
            logs=[ms(2026, 10, 16, 9)] * 2 + [ms(2026, 10, 17, 9)] + [ms(2026, 10, 18, 9)] * 2,
            target_count=2,
        )
        stats = compute_stats(habit, NOW, UTC)
        assert stats.streak == 1
        assert stats.total_accumulated == 2

    def test_total_independent_of_streak(self):
        """Five non-consecutive successful days."""
        habit = make_habit(logs=[ms(2026, 10, day, 12) for day in (1, 3, 5, 7, 9)])
        stats = compute_stats(habit, NOW, UTC)
        assert stats.total_accumulated == 5
        assert stats.streak == 0

    def test_exceeding_target_counts_once(self):
        """Ten logs in one day with target 3 is one successful period."""
        habit = make_habit(
            logs=[ms(2026, 10, 19, 8, minute) for minute in range(10)],
            target_count=3,
        )
        stats = compute_stats(habit, NOW, UTC)
        assert stats.total_accumulated == 1
        assert stats.streak == 1

    def test_log_order_does_not_matter(self):
        logs = [ms(2026, 10, 18, 10), ms(2026, 10, 16, 10), ms(2026, 10, 17, 10)]
        assert compute_stats(make_habit(logs=logs), NOW, UTC) == \
            compute_stats(make_habit(logs=sorted(logs)), NOW, UTC)

    def test_weekly_streak(self):
        """Two full weeks before the current (empty) week."""
        habit = make_habit(
            logs=[
                ms(2026, 10, 5, 9), ms(2026, 10, 11, 9),
                ms(2026, 10, 13, 9), ms(2026, 10, 18, 9),
            ],
            period=HabitPeriod.WEEKLY,
            target_count=2,
        )
        stats = compute_stats(habit, NOW, UTC)
        assert stats.streak == 2
        assert stats.total_accumulated == 2

    def test_monthly_streak_across_year(self):
        now = ms(2026, 1, 15, 12)
        habit = make_habit(
            logs=[ms(2025, 11, 20), ms(2025, 12, 3), ms(2026, 1, 2)],
            period=HabitPeriod.MONTHLY,
            created_at=ms(2025, 11, 1),
        )
        stats = compute_stats(habit, now, UTC)
        assert stats.streak == 3
        assert stats.total_accumulated == 3

    def test_custom_streak(self):
        """Created 2026-10-01 with 3-day cycles starting 10-07, 10-10, 10-13, 10-16, 10-19."""
        habit = make_habit(
            logs=[ms(2026, 10, 8, 9), ms(2026, 10, 14, 9), ms(2026, 10, 18, 9)],
            period=HabitPeriod.CUSTOM,
            custom_interval=3,
            created_at=ms(2026, 10, 1, 8),
        )
        stats = compute_stats(habit, NOW, UTC)
        assert stats.streak == 2
        assert stats.total_accumulated == 3

    def test_habit_is_not_modified(self):
        logs = [ms(2026, 10, 18, 10), ms(2026, 10, 16, 10)]
        habit = make_habit(logs=logs)
        compute_stats(habit, NOW, UTC)
        current_progress(habit, NOW, UTC)
        assert habit.logs == tuple(logs)

    def test_misconfigured_habit_raises(self):
        habit = Habit.model_construct(
            id="h1",
            name="Broken",
            target_count=1,
            period="yearly",
            custom_interval=None,
            logs=(ms(2026, 10, 18),),
            created_at=CREATED,
        )
        with pytest.raises(ConfigurationError):
            compute_stats(habit, NOW, UTC)


class TestHabitProgress:
    """Progress ring snapshot."""

    def test_partial(self):
        habit = make_habit(logs=[ms(2026, 10, 19, 8)], target_count=4)
        progress = habit_progress(habit, NOW, UTC)
        assert progress.progress == 1
        assert progress.percentage == 25.0
        assert progress.remaining == 3
        assert progress.is_completed is False
        assert progress.is_locked is False

    def test_completed_locks_without_allow_exceed(self):
        habit = make_habit(logs=[ms(2026, 10, 19, 8)])
        progress = habit_progress(habit, NOW, UTC)
        assert progress.is_completed is True
        assert progress.is_locked is True

    def test_allow_exceed_never_locks(self):
        habit = make_habit(logs=[ms(2026, 10, 19, 8)] * 3, allow_exceed=True)
        progress = habit_progress(habit, NOW, UTC)
        assert progress.is_locked is False
        assert progress.percentage == 100.0
        assert progress.remaining == 0


class TestPeriodLabel:
    """Recurrence labels."""

    def test_calendar_periods(self):
        assert period_label(make_habit()) == "Daily"
        assert period_label(make_habit(period=HabitPeriod.WEEKLY)) == "Weekly"
        assert period_label(make_habit(period=HabitPeriod.MONTHLY)) == "Monthly"

    def test_custom(self):
        habit = make_habit(period=HabitPeriod.CUSTOM, custom_interval=3)
        assert period_label(habit) == "Every 3 days"


class TestHabitProgressEngine:
    """Engine bound to a timezone."""

    def test_explicit_timezone(self):
        engine = HabitProgressEngine(tz=UTC)
        habit = make_habit(logs=[ms(2026, 10, 18, 10), ms(2026, 10, 19, 10)])
        assert engine.tz is UTC
        assert engine.current_progress(habit, NOW) == 1
        assert engine.compute_stats(habit, NOW) == HabitStats(streak=2, total_accumulated=2)
        assert engine.progress(habit, NOW).is_locked is True

    def test_anchor_helpers(self):
        engine = HabitProgressEngine(tz=UTC)
        habit = make_habit(period=HabitPeriod.WEEKLY)
        anchor = engine.period_anchor(habit, NOW)
        assert anchor == ms(2026, 10, 19)
        assert engine.previous_anchor(habit, anchor) == ms(2026, 10, 12)

    def test_timezone_from_settings(self, monkeypatch):
        from cashflow.config import get_settings

        monkeypatch.setenv("HABITS_TIMEZONE", "Asia/Tokyo")
        get_settings.cache_clear()
        try:
            engine = HabitProgressEngine()
            assert str(engine.tz) == "Asia/Tokyo"
        finally:
            get_settings.cache_clear()

    def test_without_settings_uses_local_time(self):
        assert HabitProgressEngine(use_settings=False).tz is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
