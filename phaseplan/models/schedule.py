"""
Schedule model definitions.

Weekly work-hour schedules, holidays and the inclusive DateRange every
calculation is bounded by.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Annotated, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator

from phaseplan.core.exceptions import InvalidRangeError
from phaseplan.models.enums import Weekday
from phaseplan.utils.datetime_utils import iter_days, normalize_to_date

# A calendar day; datetimes are normalized to midnight on input.
Day = Annotated[date, BeforeValidator(normalize_to_date)]

HHMM_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class DateRange(BaseModel):
    """Inclusive range of calendar days."""

    model_config = ConfigDict(frozen=True)

    start: Day
    end: Day

    @model_validator(mode="after")
    def _check_order(self) -> "DateRange":
        if self.start > self.end:
            raise InvalidRangeError(self.start, self.end)
        return self

    @classmethod
    def create(cls, start: date | datetime, end: date | datetime) -> "DateRange":
        """
        Build a range, failing fast when start is after end.

        Raises:
            InvalidRangeError: If the normalized start falls after the end
        """
        start_day = normalize_to_date(start)
        end_day = normalize_to_date(end)
        if start_day > end_day:
            raise InvalidRangeError(start_day, end_day)
        return cls(start=start_day, end=end_day)

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def days(self) -> list[date]:
        return list(iter_days(self.start, self.end))

    @property
    def length_days(self) -> int:
        return (self.end - self.start).days + 1


class WorkSlot(BaseModel):
    """A block of working time within a day."""

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    start_time: str = Field(..., pattern=HHMM_PATTERN, description="HH:MM")
    end_time: str = Field(..., pattern=HHMM_PATTERN, description="HH:MM")
    duration: Optional[float] = Field(None, ge=0, description="Duration in hours")

    @model_validator(mode="after")
    def _fill_duration(self) -> "WorkSlot":
        if self.duration is None:
            start_h, start_m = (int(part) for part in self.start_time.split(":"))
            end_h, end_m = (int(part) for part in self.end_time.split(":"))
            minutes = max(0, (end_h * 60 + end_m) - (start_h * 60 + start_m))
            object.__setattr__(self, "duration", minutes / 60)
        return self


class WeeklySchedule(BaseModel):
    """Work slots per weekday, in chronological order within each day."""

    model_config = ConfigDict(frozen=True)

    monday: list[WorkSlot] = Field(default_factory=list)
    tuesday: list[WorkSlot] = Field(default_factory=list)
    wednesday: list[WorkSlot] = Field(default_factory=list)
    thursday: list[WorkSlot] = Field(default_factory=list)
    friday: list[WorkSlot] = Field(default_factory=list)
    saturday: list[WorkSlot] = Field(default_factory=list)
    sunday: list[WorkSlot] = Field(default_factory=list)

    def slots_for(self, weekday: Weekday) -> list[WorkSlot]:
        return getattr(self, weekday.value)

    def hours_for(self, weekday: Weekday) -> float:
        """Total scheduled hours for a weekday."""
        return sum(slot.duration or 0 for slot in self.slots_for(weekday))

    def working_weekdays(self) -> set[Weekday]:
        return {weekday for weekday in Weekday if self.hours_for(weekday) > 0}


class Holiday(BaseModel):
    """Days off; every date in the range is excluded regardless of schedule."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: Optional[str] = None
    start_date: Day
    end_date: Day

    @model_validator(mode="after")
    def _check_order(self) -> "Holiday":
        if self.start_date > self.end_date:
            raise InvalidRangeError(self.start_date, self.end_date)
        return self

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date
