"""
Segment models for allocation outputs.

Segments are derived, never persisted: one per gap between consecutive phase
deadlines (or recurrence occurrences), plus an optional trailing segment for
budget left after the last phase.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from phaseplan.models.budget import BudgetValidation
from phaseplan.models.enums import EstimateSource


class Segment(BaseModel):
    """Allocation summary for one span of the project window."""

    model_config = ConfigDict(frozen=True)

    id: str
    start_date: date
    end_date: date
    phase_id: Optional[str] = None
    occurrence_number: Optional[int] = Field(None, description="1-based, recurring templates only")
    allocated_hours: float
    planned_hours: float = 0.0
    remaining_hours: float = 0.0
    working_days: tuple[date, ...] = ()
    hours_per_day: float = 0.0
    is_trailing: bool = False

    @property
    def working_day_count(self) -> int:
        return len(self.working_days)

    @property
    def is_empty(self) -> bool:
        """Zero-length span (deadline not after the previous segment end)."""
        return self.start_date > self.end_date

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


class DayEstimate(BaseModel):
    """Auto-estimated hours for a project on one working day."""

    model_config = ConfigDict(frozen=True)

    date: date
    project_id: Optional[str] = None
    phase_id: Optional[str] = None
    hours: float = Field(..., ge=0)
    source: EstimateSource = EstimateSource.PHASE_ALLOCATION


class ProjectPlan(BaseModel):
    """Everything the timeline needs to draw one project."""

    model_config = ConfigDict(frozen=True)

    project_id: str
    window_start: date
    window_end: date
    segments: list[Segment] = Field(default_factory=list)
    day_estimates: list[DayEstimate] = Field(default_factory=list)
    budget: BudgetValidation
