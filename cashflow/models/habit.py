"""
Core Data Models for Habits

These models define the schemas for habit records and the statistics
derived from them. They are designed to:
1. Accept records exactly as the storage layer keeps them (camelCase keys)
2. Make invalid recurrence settings unconstructible
3. Stay immutable, so the engine can never alter what it reads

DESIGN DECISION: A habit's recurrence is a closed enum. The custom
interval exists only on the CUSTOM variant and is required there.
"""

from enum import Enum
from typing import Annotated, Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)
from pydantic.alias_generators import to_camel


# One day in milliseconds. All habit instants are epoch milliseconds.
DAY_MS = 86_400_000


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class HabitPeriod(str, Enum):
    """
    Recurrence policy of a habit.

    DAILY, WEEKLY and MONTHLY follow the local calendar (weeks start on
    Monday). CUSTOM is a fixed N-day cycle counted from the day the habit
    was created, so two custom habits are generally not aligned.
    """
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    CUSTOM = "custom"


Timestamp = Annotated[int, Field(ge=0)]


# =============================================================================
# HABIT MODEL
# =============================================================================

class Habit(BaseModel):
    """
    A tracked habit and its completion log.

    Owned by the habit-management layer. The progress engine only reads it.

    `logs` holds one epoch-millisecond timestamp per completion, in the
    order they were appended. Undo removes the last appended entry, which
    is the chronologically latest one only as long as entries are appended
    in non-decreasing order (the normal case).
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    # Identity
    id: str = Field(
        default_factory=lambda: uuid4().hex,
        min_length=1,
        description="Opaque habit identifier"
    )

    # Display metadata
    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Habit name"
    )
    icon: str = Field(
        default="check",
        description="Icon key"
    )
    color: str = Field(
        default="#3B82F6",
        description="Display color"
    )

    # Recurrence
    target_count: int = Field(
        default=1,
        ge=1,
        description="Completions required in one period for it to count"
    )
    period: HabitPeriod = Field(
        default=HabitPeriod.DAILY,
        description="Recurrence policy"
    )
    custom_interval: Optional[int] = Field(
        default=None,
        ge=1,
        description="Cycle length in days (custom period only)"
    )
    allow_exceed: bool = Field(
        default=False,
        description="Allow logging past the target within a period"
    )

    # Completion log
    logs: tuple[Timestamp, ...] = Field(
        default_factory=tuple,
        description="Completion timestamps (epoch ms) in append order"
    )

    created_at: Timestamp = Field(
        ...,
        description="Creation time (epoch ms), origin of custom cycles"
    )
    archived: bool = False

    @model_validator(mode='after')
    def validate_recurrence(self) -> 'Habit':
        """A custom interval is required for, and only valid on, custom periods."""
        if self.period == HabitPeriod.CUSTOM:
            if self.custom_interval is None:
                raise ValueError("Custom period requires a custom interval")
        elif self.custom_interval is not None:
            raise ValueError("Custom interval is only valid for custom periods")
        return self

    @property
    def interval_ms(self) -> Optional[int]:
        """Length of one custom cycle in milliseconds."""
        if self.custom_interval is None:
            return None
        return self.custom_interval * DAY_MS

    def to_record(self) -> dict:
        """Serialize back to the camelCase shape the storage layer keeps."""
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# DERIVED STATISTICS
# =============================================================================

class HabitStats(BaseModel):
    """Streak and trophy numbers for a habit."""
    model_config = ConfigDict(frozen=True)

    streak: int = Field(
        default=0,
        ge=0,
        description="Consecutive successful periods ending at the current one"
    )
    total_accumulated: int = Field(
        default=0,
        ge=0,
        description="Number of distinct successful periods"
    )


class HabitProgress(BaseModel):
    """
    Progress of a habit within the period containing `now`.

    Drives the progress ring and the "limit reached" lock.
    """
    model_config = ConfigDict(frozen=True)

    progress: int = Field(ge=0)
    target_count: int = Field(ge=1)
    allow_exceed: bool = False

    @property
    def percentage(self) -> float:
        """Completion percentage, capped at 100."""
        return min(100.0, self.progress / self.target_count * 100)

    @property
    def is_completed(self) -> bool:
        return self.progress >= self.target_count

    @property
    def is_locked(self) -> bool:
        """True when further logging in this period must be rejected."""
        return self.is_completed and not self.allow_exceed

    @property
    def remaining(self) -> int:
        return max(0, self.target_count - self.progress)
