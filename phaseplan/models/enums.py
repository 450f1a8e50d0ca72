"""
Enum definitions for the engine.

These enums are used across models and provide type-safe pattern/action values.
"""

from enum import Enum


class Weekday(str, Enum):
    """Day of week as used by weekly work schedules."""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def from_date(cls, value) -> "Weekday":
        """Weekday of a date (Python's Monday=0 numbering)."""
        return _PY_ORDER[value.weekday()]

    @classmethod
    def from_index(cls, index: int) -> "Weekday":
        """Weekday from the Sunday=0 ... Saturday=6 numbering used by recurrence configs."""
        return _SUNDAY_FIRST_ORDER[index]

    @property
    def sunday_index(self) -> int:
        """Sunday=0 ... Saturday=6."""
        return _SUNDAY_FIRST_ORDER.index(self)


_PY_ORDER = [
    Weekday.MONDAY,
    Weekday.TUESDAY,
    Weekday.WEDNESDAY,
    Weekday.THURSDAY,
    Weekday.FRIDAY,
    Weekday.SATURDAY,
    Weekday.SUNDAY,
]

_SUNDAY_FIRST_ORDER = [Weekday.SUNDAY] + _PY_ORDER[:6]


class RecurrenceType(str, Enum):
    """Supported recurrence frequencies for phase templates."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class MonthlyPattern(str, Enum):
    """How a monthly recurrence picks its day."""

    DATE = "date"  # fixed day of month
    DAY_OF_WEEK = "dayOfWeek"  # Nth weekday of month


class PhaseKind(str, Enum):
    """Discriminant of the phase tagged union."""

    FIXED = "fixed"
    RECURRING = "recurring"


class EventType(str, Enum):
    """Calendar event time type."""

    PLANNED = "planned"
    TRACKED = "tracked"
    COMPLETED = "completed"


class EventCategory(str, Enum):
    """Calendar event category. Only EVENT counts toward project time."""

    EVENT = "event"
    HABIT = "habit"
    TASK = "task"


class DragAction(str, Enum):
    """Boundary being dragged."""

    RESIZE_START = "resize-start"
    RESIZE_END = "resize-end"
    MOVE = "move"


class TimelineMode(str, Enum):
    """Timeline zoom level."""

    DAYS = "days"
    WEEKS = "weeks"


class DragStatus(str, Enum):
    """Drag state machine status."""

    IDLE = "idle"
    RESIZING = "resizing"
    COMMITTED = "committed"
    CANCELLED = "cancelled"


class EstimateSource(str, Enum):
    """Origin of a per-day estimate."""

    PHASE_ALLOCATION = "phase-allocation"
    REMAINING_BUDGET = "remaining-budget"
