"""
Working day calculator.

A date is a working day when no holiday covers it, its weekday is not
excluded for the project, and the weekly schedule has hours on that weekday.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from phaseplan.core.logger import setup_logger
from phaseplan.models.enums import Weekday
from phaseplan.models.schedule import DateRange, Holiday, WeeklySchedule
from phaseplan.services.calculation_cache import CalculationCache
from phaseplan.utils import cache_keys
from phaseplan.utils.datetime_utils import iter_days

logger = setup_logger(__name__)


class WorkingDayCalculator:
    """Computes the working days of a range."""

    def __init__(self, cache: Optional[CalculationCache] = None):
        self.cache = cache

    def is_working_day(
        self,
        day: date,
        schedule: WeeklySchedule,
        holidays: Iterable[Holiday],
        exclusions: Optional[Iterable[Weekday]] = None,
    ) -> bool:
        if any(holiday.contains(day) for holiday in holidays):
            return False
        weekday = Weekday.from_date(day)
        if exclusions and weekday in set(exclusions):
            return False
        return schedule.hours_for(weekday) > 0

    def working_days(
        self,
        window: DateRange,
        schedule: WeeklySchedule,
        holidays: Iterable[Holiday],
        exclusions: Optional[Iterable[Weekday]] = None,
    ) -> list[date]:
        """
        Working days of the window, ascending.

        Args:
            window: Inclusive range (use DateRange.create to validate order)
            schedule: Weekly work-hour schedule
            holidays: Holiday ranges
            exclusions: Weekdays switched off for this project

        Returns:
            New list of dates on every call
        """
        holidays = list(holidays)
        excluded = frozenset(exclusions or ())

        if self.cache is None:
            return self._compute(window, schedule, holidays, excluded)

        key = (
            "working_days",
            cache_keys.range_key(window),
            cache_keys.schedule_key(schedule),
            cache_keys.holidays_key(holidays),
            cache_keys.exclusions_key(excluded),
        )
        cached = self.cache.get(key)
        if cached is not None:
            return list(cached)
        result = self._compute(window, schedule, holidays, excluded)
        self.cache.set(key, result)
        return list(result)

    def count_working_days(
        self,
        window: DateRange,
        schedule: WeeklySchedule,
        holidays: Iterable[Holiday],
        exclusions: Optional[Iterable[Weekday]] = None,
    ) -> int:
        return len(self.working_days(window, schedule, holidays, exclusions))

    def _compute(
        self,
        window: DateRange,
        schedule: WeeklySchedule,
        holidays: list[Holiday],
        excluded: frozenset[Weekday],
    ) -> list[date]:
        working_weekdays = schedule.working_weekdays() - excluded
        days = [
            day
            for day in iter_days(window.start, window.end)
            if Weekday.from_date(day) in working_weekdays
            and not any(holiday.contains(day) for holiday in holidays)
        ]
        logger.debug(
            f"{len(days)} working days in {window.start}..{window.end} "
            f"({len(holidays)} holidays, {len(excluded)} excluded weekdays)"
        )
        return days
