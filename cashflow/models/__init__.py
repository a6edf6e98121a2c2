"""
Data Models Package

This package contains all Pydantic models used by CashFlow Habits.
Habit records and derived statistics must conform to these schemas.
"""

from cashflow.models.habit import (
    DAY_MS,
    Habit,
    HabitPeriod,
    HabitProgress,
    HabitStats,
)
from cashflow.models.activity import (
    ActivityEvent,
    ActivityEventBuilder,
    ActivityEventType,
    ActivitySeverity,
)

__all__ = [
    # Habit models
    "DAY_MS",
    "Habit",
    "HabitPeriod",
    "HabitProgress",
    "HabitStats",
    # Activity models
    "ActivityEvent",
    "ActivityEventBuilder",
    "ActivityEventType",
    "ActivitySeverity",
]
