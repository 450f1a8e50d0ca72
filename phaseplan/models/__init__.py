"""Pydantic models (schemas) for the engine."""

from phaseplan.models.enums import (
    DragAction,
    DragStatus,
    EstimateSource,
    EventCategory,
    EventType,
    MonthlyPattern,
    PhaseKind,
    RecurrenceType,
    TimelineMode,
    Weekday,
)
from phaseplan.models.schedule import DateRange, Holiday, WeeklySchedule, WorkSlot
from phaseplan.models.phase import (
    FixedPhase,
    Phase,
    PhaseUpdate,
    RecurrenceConfig,
    RecurringPhase,
)
from phaseplan.models.project import CalendarEvent, Project
from phaseplan.models.budget import BudgetValidation
from phaseplan.models.segment import DayEstimate, ProjectPlan, Segment
from phaseplan.models.drag import DragState, PhaseBounds

__all__ = [
    # Enums
    "DragAction",
    "DragStatus",
    "EstimateSource",
    "EventCategory",
    "EventType",
    "MonthlyPattern",
    "PhaseKind",
    "RecurrenceType",
    "TimelineMode",
    "Weekday",
    # Schedule
    "DateRange",
    "Holiday",
    "WeeklySchedule",
    "WorkSlot",
    # Phase
    "FixedPhase",
    "Phase",
    "PhaseUpdate",
    "RecurrenceConfig",
    "RecurringPhase",
    # Project
    "CalendarEvent",
    "Project",
    # Outputs
    "BudgetValidation",
    "DayEstimate",
    "ProjectPlan",
    "Segment",
    "DragState",
    "PhaseBounds",
]
