"""
Phase model definitions.

Phases are budgeted checkpoints within a project. A project holds either
ordinary (fixed) phases or a single recurring template whose rule is expanded
into occurrences, never both. The two shapes form a tagged union on `kind`.
"""

from __future__ import annotations

from datetime import date
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from phaseplan.models.enums import MonthlyPattern, RecurrenceType
from phaseplan.models.schedule import Day


class RecurrenceConfig(BaseModel):
    """Recurrence rule of a template phase.

    Weekday numbers follow the Sunday=0 ... Saturday=6 convention.
    """

    model_config = ConfigDict(frozen=True)

    type: RecurrenceType
    interval: int = Field(default=1, ge=1)
    weekly_day_of_week: Optional[int] = Field(None, ge=0, le=6)
    monthly_pattern: Optional[MonthlyPattern] = None
    monthly_date: Optional[int] = Field(None, ge=1, le=31)
    monthly_week_of_month: Optional[int] = Field(
        None, ge=1, le=5, description="1-4 for first..fourth, 5 for last"
    )
    monthly_day_of_week: Optional[int] = Field(None, ge=0, le=6)


class PhaseBase(BaseModel):
    """Fields shared by both phase shapes."""

    model_config = ConfigDict(frozen=True)

    id: str
    project_id: str
    name: Optional[str] = Field(None, max_length=200)
    start_date: Optional[Day] = None
    time_allocation: float = Field(default=0.0, ge=0, description="Hours")


class FixedPhase(PhaseBase):
    """Ordinary phase with a deadline."""

    kind: Literal["fixed"] = "fixed"
    end_date: Day

    @property
    def due_date(self) -> date:
        """Deadline; mirrors end_date."""
        return self.end_date

    @property
    def is_recurring(self) -> bool:
        return False


class RecurringPhase(PhaseBase):
    """Template phase; allocates time_allocation per occurrence."""

    kind: Literal["recurring"] = "recurring"
    end_date: Optional[Day] = None
    config: RecurrenceConfig

    @property
    def is_recurring(self) -> bool:
        return True


Phase = Annotated[Union[FixedPhase, RecurringPhase], Field(discriminator="kind")]


class PhaseUpdate(BaseModel):
    """Boundary change emitted on drag commit."""

    model_config = ConfigDict(frozen=True)

    start_date: Optional[date] = None
    end_date: Optional[date] = None
    due_date: Optional[date] = None

    def as_fields(self) -> dict:
        """Only the fields that actually change."""
        return self.model_dump(exclude_none=True)
