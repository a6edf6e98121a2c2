"""
Habit Tracker

Applies user actions (log a completion, undo the last one) to a habit
snapshot and returns the updated snapshot. Persisting it is the
caller's job.

RULES:
- Increment is rejected once the current period reached its target,
  unless the habit allows exceeding it
- Undo is rejected when the current period has nothing logged
- Undo removes the LAST APPENDED log, not the latest instant
- Archived habits cannot be logged
"""

from typing import Optional
from uuid import UUID

from cashflow.audit import ActivityLogger
from cashflow.habits.periods import ConfigurationError
from cashflow.habits.progress import HabitProgressEngine
from cashflow.models.habit import Habit


class HabitActionError(Exception):
    """A user action on a habit was rejected."""
    pass


class HabitLockedError(HabitActionError):
    """Target reached for this period and exceeding is not allowed."""
    pass


class NothingToUndoError(HabitActionError):
    """No log in the current period to undo."""
    pass


class HabitArchivedError(HabitActionError):
    """Archived habits do not accept new logs."""
    pass


class HabitTracker:
    """
    Increment/undo operations on habit snapshots.

    The input habit is never modified; each operation returns a copy.
    """

    def __init__(
        self,
        engine: Optional[HabitProgressEngine] = None,
        activity_logger: Optional[ActivityLogger] = None,
    ):
        self._engine = engine or HabitProgressEngine()
        self._activity = activity_logger or ActivityLogger()

    @property
    def engine(self) -> HabitProgressEngine:
        return self._engine

    def increment(
        self,
        habit: Habit,
        now: int,
        correlation_id: Optional[UUID] = None,
    ) -> Habit:
        """
        Record one completion at `now`.

        Raises:
            HabitArchivedError: The habit is archived.
            HabitLockedError: Target reached and allow_exceed is off.
            ConfigurationError: The habit's recurrence is unusable.
        """
        if habit.archived:
            self._activity.log_increment_rejected(habit.id, "habit archived", correlation_id)
            raise HabitArchivedError(f"Habit {habit.id} is archived")

        progress = self._progress(habit, now, correlation_id)
        if progress.is_locked:
            self._activity.log_increment_rejected(habit.id, "target reached", correlation_id)
            raise HabitLockedError(
                f"Habit {habit.id} already reached {habit.target_count} this period"
            )

        updated = habit.model_copy(update={"logs": habit.logs + (now,)})
        self._activity.log_habit_incremented(
            habit_id=habit.id,
            logged_at=now,
            progress=progress.progress + 1,
            target_count=habit.target_count,
            correlation_id=correlation_id,
        )
        return updated

    def decrement(
        self,
        habit: Habit,
        now: int,
        correlation_id: Optional[UUID] = None,
    ) -> Habit:
        """
        Undo the most recently appended completion.

        Raises:
            NothingToUndoError: Nothing logged in the current period.
            ConfigurationError: The habit's recurrence is unusable.
        """
        progress = self._progress(habit, now, correlation_id)
        if progress.progress == 0:
            self._activity.log_decrement_rejected(habit.id, "no logs this period", correlation_id)
            raise NothingToUndoError(f"Habit {habit.id} has nothing to undo this period")

        removed = habit.logs[-1]
        updated = habit.model_copy(update={"logs": habit.logs[:-1]})
        self._activity.log_habit_decremented(
            habit_id=habit.id,
            removed_log=removed,
            progress=self._engine.current_progress(updated, now),
            target_count=habit.target_count,
            correlation_id=correlation_id,
        )
        return updated

    def _progress(self, habit: Habit, now: int, correlation_id: Optional[UUID]):
        try:
            return self._engine.progress(habit, now)
        except ConfigurationError as e:
            self._activity.log_configuration_error(habit.id, str(e), correlation_id)
            raise
