"""
Activity Logger

DESIGN DECISION: Every change to a habit's log is recorded.
This provides:
1. Traceability of increments and undos
2. Debugging capability when a streak looks wrong
3. User can see history of their interactions

The activity logger:
- Writes structured events through structlog
- Keeps a bounded in-memory history for the presentation layer
- Supports correlation IDs to trace related events
"""

from collections import deque
from typing import Optional
from uuid import UUID, uuid4

import structlog

from cashflow.config import get_settings
from cashflow.models.activity import (
    ActivityEvent,
    ActivityEventBuilder,
    ActivitySeverity,
)


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class ActivityLogger:
    """
    Central activity logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. A bounded in-memory history (for display)
    """

    def __init__(self, history_limit: Optional[int] = None):
        """
        Initialize activity logger.

        Args:
            history_limit: How many recent events to keep.
                           If None, taken from settings.
        """
        if history_limit is None:
            history_limit = get_settings().app.activity_history_limit
        self._history: deque[ActivityEvent] = deque(maxlen=history_limit)
        self._logger = structlog.get_logger(__name__)

    def log(self, event: ActivityEvent) -> None:
        """Log an activity event locally and remember it."""
        log_dict = event.to_log_dict()

        if event.severity == ActivitySeverity.ERROR:
            self._logger.error("activity_event", **log_dict)
        elif event.severity == ActivitySeverity.WARNING:
            self._logger.warning("activity_event", **log_dict)
        elif event.severity == ActivitySeverity.DEBUG:
            self._logger.debug("activity_event", **log_dict)
        else:
            self._logger.info("activity_event", **log_dict)

        self._history.append(event)

    def recent_events(self, habit_id: Optional[str] = None) -> list[ActivityEvent]:
        """Recorded events, oldest first, optionally for one habit."""
        if habit_id is None:
            return list(self._history)
        return [e for e in self._history if e.habit_id == habit_id]

    def log_habit_incremented(
        self,
        habit_id: str,
        logged_at: int,
        progress: int,
        target_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a completion being recorded."""
        self.log(ActivityEventBuilder.habit_incremented(
            habit_id=habit_id,
            logged_at=logged_at,
            progress=progress,
            target_count=target_count,
            correlation_id=correlation_id,
        ))

    def log_habit_decremented(
        self,
        habit_id: str,
        removed_log: int,
        progress: int,
        target_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an undo."""
        self.log(ActivityEventBuilder.habit_decremented(
            habit_id=habit_id,
            removed_log=removed_log,
            progress=progress,
            target_count=target_count,
            correlation_id=correlation_id,
        ))

    def log_increment_rejected(
        self,
        habit_id: str,
        reason: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(ActivityEventBuilder.increment_rejected(
            habit_id=habit_id,
            reason=reason,
            correlation_id=correlation_id,
        ))

    def log_decrement_rejected(
        self,
        habit_id: str,
        reason: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(ActivityEventBuilder.decrement_rejected(
            habit_id=habit_id,
            reason=reason,
            correlation_id=correlation_id,
        ))

    def log_configuration_error(
        self,
        habit_id: Optional[str],
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(ActivityEventBuilder.configuration_error(
            habit_id=habit_id,
            error_message=error_message,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a user action and pass it through.
    """
    return uuid4()
