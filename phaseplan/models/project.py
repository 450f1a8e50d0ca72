"""
Project and calendar event model definitions.

Projects own phases and carry the total budget phases allocate against.
Calendar events represent time already committed ("planned") to a project.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from phaseplan.models.enums import EventCategory, EventType, Weekday
from phaseplan.models.schedule import DateRange, Day
from phaseplan.utils.datetime_utils import add_days


class Project(BaseModel):
    """Project snapshot."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: Optional[str] = Field(None, max_length=200)
    start_date: Day
    end_date: Day = Field(..., description="Ignored when continuous is true")
    continuous: bool = False
    estimated_hours: float = Field(default=0.0, ge=0, description="Total budget in hours")
    auto_estimate_days: Optional[dict[Weekday, bool]] = Field(
        None, description="Days included in auto-estimation (default: all)"
    )

    def effective_end(self, as_of: date, forward_days: int) -> date:
        """End date, or a forward-looking window end for continuous projects."""
        if not self.continuous:
            return self.end_date
        return max(self.start_date, add_days(as_of, forward_days))

    def window(self, as_of: date, forward_days: int) -> DateRange:
        """
        Effective project window.

        Raises:
            InvalidRangeError: If a fixed project's end precedes its start
        """
        return DateRange.create(self.start_date, self.effective_end(as_of, forward_days))

    def excluded_weekdays(self) -> frozenset[Weekday]:
        """Weekdays switched off for auto-estimation."""
        if not self.auto_estimate_days:
            return frozenset()
        return frozenset(day for day, enabled in self.auto_estimate_days.items() if not enabled)


class CalendarEvent(BaseModel):
    """Scheduled or tracked block of time."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: Optional[str] = None
    project_id: Optional[str] = None
    start_time: datetime
    end_time: datetime
    type: EventType = EventType.PLANNED
    category: EventCategory = EventCategory.EVENT

    @property
    def counts_as_project_time(self) -> bool:
        """Habits and tasks never count toward project time."""
        return self.project_id is not None and self.category == EventCategory.EVENT

    @property
    def duration_hours(self) -> float:
        return max(0.0, (self.end_time - self.start_time).total_seconds() / 3600)
