"""
Period Anchors

Every habit period (a day, an ISO week, a calendar month or a fixed
N-day cycle) is identified by its ANCHOR: the epoch-millisecond instant
at which it starts. Completions are bucketed by anchor.

DESIGN DECISION: Calendar periods start at local midnight in the given
timezone (None means the host's local time). Custom cycles are a pure
millisecond grid counted from local midnight of the creation day, so
they ignore calendar and DST boundaries.

An unknown period, or a custom period missing its interval or creation
time, is a ConfigurationError. We never fall back to daily.
"""

from datetime import date, datetime, timedelta, tzinfo
from typing import Optional, Union

from cashflow.models.habit import DAY_MS, HabitPeriod


class ConfigurationError(Exception):
    """Habit recurrence settings cannot produce a period anchor."""
    pass


def resolve_period(period: Union[HabitPeriod, str]) -> HabitPeriod:
    """Coerce a raw period value into HabitPeriod."""
    try:
        return HabitPeriod(period)
    except ValueError:
        raise ConfigurationError(f"Unknown habit period: {period!r}")


def _interval_ms(custom_interval: Optional[int]) -> int:
    if custom_interval is None:
        raise ConfigurationError("Custom period requires a custom interval")
    if custom_interval < 1:
        raise ConfigurationError(
            f"Custom interval must be at least 1 day, got {custom_interval}"
        )
    return custom_interval * DAY_MS


def _local_date(instant: int, tz: Optional[tzinfo]) -> date:
    # Floor to whole seconds; only the calendar day matters here.
    return datetime.fromtimestamp(instant // 1000, tz).date()


def _local_midnight(day: date, tz: Optional[tzinfo]) -> int:
    midnight = datetime(day.year, day.month, day.day, tzinfo=tz)
    return round(midnight.timestamp() * 1000)


def start_of_day(instant: int, tz: Optional[tzinfo] = None) -> int:
    """Local midnight of the calendar day containing `instant`."""
    return _local_midnight(_local_date(instant, tz), tz)


def period_anchor(
    instant: int,
    period: Union[HabitPeriod, str],
    custom_interval: Optional[int] = None,
    created_at: Optional[int] = None,
    tz: Optional[tzinfo] = None,
) -> int:
    """
    Map an instant to the anchor of the period it belongs to.

    Args:
        instant: Epoch milliseconds.
        period: Recurrence policy.
        custom_interval: Cycle length in days (custom only).
        created_at: Habit creation time in epoch ms (custom only).
        tz: Timezone for calendar boundaries. None = system local time.

    Returns:
        Epoch milliseconds of the period start.

    Raises:
        ConfigurationError: Unknown period, or custom period without
            a usable interval or creation time.
    """
    period = resolve_period(period)

    if period == HabitPeriod.DAILY:
        return start_of_day(instant, tz)

    if period == HabitPeriod.WEEKLY:
        day = _local_date(instant, tz)
        # Monday is weekday 0, so Sunday steps back six days.
        return _local_midnight(day - timedelta(days=day.weekday()), tz)

    if period == HabitPeriod.MONTHLY:
        day = _local_date(instant, tz)
        return _local_midnight(day.replace(day=1), tz)

    interval_ms = _interval_ms(custom_interval)
    if created_at is None:
        raise ConfigurationError("Custom period requires the habit creation time")

    start = start_of_day(created_at, tz)
    # Floor division: instants before creation land in negative cycles.
    index = (instant - start) // interval_ms
    return start + index * interval_ms


def previous_anchor(
    anchor: int,
    period: Union[HabitPeriod, str],
    custom_interval: Optional[int] = None,
    tz: Optional[tzinfo] = None,
) -> int:
    """
    Anchor of the period immediately before the one starting at `anchor`.

    `anchor` must already be on the period's grid (a period_anchor result).
    Daily and weekly steps move by calendar days, so across a DST change
    the result is still a local midnight rather than anchor - 24h.

    Raises:
        ConfigurationError: Unknown period, or custom period without
            a usable interval.
    """
    period = resolve_period(period)

    if period == HabitPeriod.DAILY:
        day = _local_date(anchor, tz)
        return _local_midnight(day - timedelta(days=1), tz)

    if period == HabitPeriod.WEEKLY:
        day = _local_date(anchor, tz)
        return _local_midnight(day - timedelta(days=7), tz)

    if period == HabitPeriod.MONTHLY:
        day = _local_date(anchor, tz)
        if day.month == 1:
            return _local_midnight(date(day.year - 1, 12, 1), tz)
        return _local_midnight(date(day.year, day.month - 1, 1), tz)

    return anchor - _interval_ms(custom_interval)
