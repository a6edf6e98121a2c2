"""
Habit Progress Engine

Derives progress, streaks and totals from a habit's completion log.

GUARANTEES:
- Pure: the habit is only read, never modified
- Deterministic: `now` is always passed in, never read from the clock
- Logs are treated as an unordered set of instants

STREAK POLICY: the current period counts toward the streak once it is
successful, but an unfinished current period never breaks the streak.
Only a past period that missed its target ends it.
"""

from collections import Counter
from datetime import tzinfo
from typing import Optional

import structlog

from cashflow.config import get_settings
from cashflow.habits.periods import period_anchor, previous_anchor, resolve_period
from cashflow.models.habit import Habit, HabitPeriod, HabitProgress, HabitStats


logger = structlog.get_logger(__name__)


def _anchor(habit: Habit, instant: int, tz: Optional[tzinfo]) -> int:
    return period_anchor(
        instant,
        habit.period,
        custom_interval=habit.custom_interval,
        created_at=habit.created_at,
        tz=tz,
    )


def current_progress(habit: Habit, now: int, tz: Optional[tzinfo] = None) -> int:
    """
    Number of logs in the period containing `now`.

    Only the lower bound (the period anchor) is applied; logs after
    `now` still count.
    """
    anchor = _anchor(habit, now, tz)
    return sum(1 for ts in habit.logs if ts >= anchor)


def compute_stats(habit: Habit, now: int, tz: Optional[tzinfo] = None) -> HabitStats:
    """
    Compute the streak and the number of successful periods.

    A period is successful when it holds at least `target_count` logs.
    Extra logs beyond the target do not make a period count twice.
    """
    if not habit.logs:
        return HabitStats(streak=0, total_accumulated=0)

    buckets = Counter(_anchor(habit, ts, tz) for ts in habit.logs)
    successful = {
        anchor for anchor, count in buckets.items()
        if count >= habit.target_count
    }

    anchor = _anchor(habit, now, tz)
    streak = 1 if anchor in successful else 0

    # successful is finite, so the walk ends at the first gap.
    anchor = previous_anchor(anchor, habit.period, habit.custom_interval, tz=tz)
    while anchor in successful:
        streak += 1
        anchor = previous_anchor(anchor, habit.period, habit.custom_interval, tz=tz)

    return HabitStats(streak=streak, total_accumulated=len(successful))


def habit_progress(habit: Habit, now: int, tz: Optional[tzinfo] = None) -> HabitProgress:
    """Progress snapshot for the period containing `now`."""
    return HabitProgress(
        progress=current_progress(habit, now, tz),
        target_count=habit.target_count,
        allow_exceed=habit.allow_exceed,
    )


def period_label(habit: Habit) -> str:
    """Short human-readable description of the habit's recurrence."""
    period = resolve_period(habit.period)
    if period == HabitPeriod.DAILY:
        return "Daily"
    if period == HabitPeriod.WEEKLY:
        return "Weekly"
    if period == HabitPeriod.MONTHLY:
        return "Monthly"
    return f"Every {habit.custom_interval or 1} days"


class HabitProgressEngine:
    """
    Progress engine bound to a timezone.

    Wraps the module functions so callers don't have to pass the
    timezone around. By default the timezone comes from settings.
    """

    def __init__(self, tz: Optional[tzinfo] = None, use_settings: bool = True):
        """
        Initialize engine.

        Args:
            tz: Timezone for period boundaries.
            use_settings: When tz is None, read it from HABITS_TIMEZONE.
                          If that is unset too, system local time is used.
        """
        if tz is None and use_settings:
            tz = get_settings().habits.tzinfo
        self._tz = tz

    @property
    def tz(self) -> Optional[tzinfo]:
        return self._tz

    def period_anchor(self, habit: Habit, instant: int) -> int:
        return _anchor(habit, instant, self._tz)

    def previous_anchor(self, habit: Habit, anchor: int) -> int:
        return previous_anchor(anchor, habit.period, habit.custom_interval, tz=self._tz)

    def current_progress(self, habit: Habit, now: int) -> int:
        return current_progress(habit, now, self._tz)

    def progress(self, habit: Habit, now: int) -> HabitProgress:
        return habit_progress(habit, now, self._tz)

    def compute_stats(self, habit: Habit, now: int) -> HabitStats:
        stats = compute_stats(habit, now, self._tz)
        logger.debug(
            "habit_stats_computed",
            habit_id=habit.id,
            period=habit.period.value,
            streak=stats.streak,
            total_accumulated=stats.total_accumulated,
        )
        return stats
