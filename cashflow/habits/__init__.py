"""
Habits Package

The habit period-accounting engine and the tracker that applies
increment/undo actions to habit snapshots.
"""

from cashflow.habits.periods import (
    ConfigurationError,
    period_anchor,
    previous_anchor,
    start_of_day,
)
from cashflow.habits.progress import (
    HabitProgressEngine,
    compute_stats,
    current_progress,
    habit_progress,
    period_label,
)
from cashflow.habits.tracker import (
    HabitActionError,
    HabitArchivedError,
    HabitLockedError,
    HabitTracker,
    NothingToUndoError,
)

__all__ = [
    # Anchors
    "ConfigurationError",
    "period_anchor",
    "previous_anchor",
    "start_of_day",
    # Progress engine
    "HabitProgressEngine",
    "compute_stats",
    "current_progress",
    "habit_progress",
    "period_label",
    # Tracker
    "HabitActionError",
    "HabitArchivedError",
    "HabitLockedError",
    "HabitTracker",
    "NothingToUndoError",
]
