"""
Activity Models for Habits

Every habit log change (and every rejected attempt) is recorded.
This provides:
1. Traceability of what the user did and when
2. Debugging information when progress looks wrong
3. The ability to reconstruct a habit's log history

DESIGN DECISION: Activity events are append-only. We never modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class ActivityEventType(str, Enum):
    """Types of events we record."""
    # Log changes
    HABIT_INCREMENTED = "habit_incremented"
    HABIT_DECREMENTED = "habit_decremented"

    # Rejected actions
    INCREMENT_REJECTED = "increment_rejected"
    DECREMENT_REJECTED = "decrement_rejected"

    # Engine
    CONFIGURATION_ERROR = "configuration_error"


class ActivitySeverity(str, Enum):
    """Severity level for activity events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class ActivityEvent(BaseModel):
    """
    A single activity event.

    Every habit action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event was recorded (UTC)"
    )

    # Event classification
    event_type: ActivityEventType
    severity: ActivitySeverity = ActivitySeverity.INFO

    # Context
    habit_id: Optional[str] = Field(
        default=None,
        description="Habit this event relates to"
    )
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "habit_id": self.habit_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class ActivityEventBuilder:
    """
    Helper class to build activity events with common patterns.

    Usage:
        event = ActivityEventBuilder.habit_incremented(habit_id, logged_at, progress, target)
        event = ActivityEventBuilder.increment_rejected(habit_id, reason)
    """

    @staticmethod
    def habit_incremented(
        habit_id: str,
        logged_at: int,
        progress: int,
        target_count: int,
        correlation_id: Optional[UUID] = None
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.HABIT_INCREMENTED,
            habit_id=habit_id,
            correlation_id=correlation_id,
            description=f"Habit logged: {progress}/{target_count}",
            details={
                "logged_at": logged_at,
                "progress": progress,
                "target_count": target_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def habit_decremented(
        habit_id: str,
        removed_log: int,
        progress: int,
        target_count: int,
        correlation_id: Optional[UUID] = None
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.HABIT_DECREMENTED,
            habit_id=habit_id,
            correlation_id=correlation_id,
            description=f"Habit log undone: {progress}/{target_count}",
            details={
                "removed_log": removed_log,
                "progress": progress,
                "target_count": target_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def increment_rejected(
        habit_id: str,
        reason: str,
        correlation_id: Optional[UUID] = None
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.INCREMENT_REJECTED,
            severity=ActivitySeverity.WARNING,
            habit_id=habit_id,
            correlation_id=correlation_id,
            description=f"Increment rejected: {reason}",
            details={"reason": reason},
            is_user_action=True,
        )

    @staticmethod
    def decrement_rejected(
        habit_id: str,
        reason: str,
        correlation_id: Optional[UUID] = None
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.DECREMENT_REJECTED,
            severity=ActivitySeverity.WARNING,
            habit_id=habit_id,
            correlation_id=correlation_id,
            description=f"Undo rejected: {reason}",
            details={"reason": reason},
            is_user_action=True,
        )

    @staticmethod
    def configuration_error(
        habit_id: Optional[str],
        error_message: str,
        correlation_id: Optional[UUID] = None
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.CONFIGURATION_ERROR,
            severity=ActivitySeverity.ERROR,
            habit_id=habit_id,
            correlation_id=correlation_id,
            description="Habit recurrence is misconfigured",
            error_message=error_message,
        )
