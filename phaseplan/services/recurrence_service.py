"""
Recurrence expander.

Expands a recurring phase template's rule into concrete occurrence dates
bounded by a window, and derives the work periods between occurrences.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Optional

from phaseplan.core.config import get_settings
from phaseplan.core.exceptions import InvalidRecurrenceConfigError
from phaseplan.core.logger import setup_logger
from phaseplan.models.enums import MonthlyPattern, RecurrenceType, Weekday
from phaseplan.models.phase import RecurrenceConfig, RecurringPhase
from phaseplan.models.schedule import DateRange
from phaseplan.utils.datetime_utils import (
    add_days,
    day_in_month,
    month_index,
    nth_weekday_of_month,
)

logger = setup_logger(__name__)

_WEEK_NAMES = ["1st", "2nd", "3rd", "4th", "last"]


def _to_python_weekday(sunday_index: int) -> int:
    """Sunday=0..Saturday=6 to Python's Monday=0..Sunday=6."""
    return (sunday_index + 6) % 7


def _ordinal_suffix(num: int) -> str:
    if num % 10 == 1 and num % 100 != 11:
        return "st"
    if num % 10 == 2 and num % 100 != 12:
        return "nd"
    if num % 10 == 3 and num % 100 != 13:
        return "rd"
    return "th"


class RecurrenceExpander:
    """Expands recurrence rules into occurrence dates."""

    def __init__(self, default_cap: Optional[int] = None):
        self.default_cap = (
            default_cap
            if default_cap is not None
            else get_settings().RECURRENCE_MAX_OCCURRENCES
        )

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate_config(
        self, config: Optional[RecurrenceConfig], time_allocation: float
    ) -> list[str]:
        """Collect every problem with a template's rule and allocation."""
        errors = self._rule_errors(config)
        if time_allocation <= 0:
            errors.append(
                "Recurring phase must have positive time allocation per occurrence"
            )
        return errors

    def ensure_valid(self, config: Optional[RecurrenceConfig]) -> RecurrenceConfig:
        """
        Raises:
            InvalidRecurrenceConfigError: If the rule lacks a field its pattern requires
        """
        errors = self._rule_errors(config)
        if errors:
            raise InvalidRecurrenceConfigError(errors[0], errors=errors)
        return config

    @staticmethod
    def _rule_errors(config: Optional[RecurrenceConfig]) -> list[str]:
        if config is None:
            return ["Recurring phase must have recurrence configuration"]

        errors: list[str] = []
        if config.interval < 1:
            errors.append("Recurrence interval must be at least 1")

        if config.type == RecurrenceType.WEEKLY:
            if config.weekly_day_of_week is None:
                errors.append("Weekly recurrence must specify day of week (0-6)")
        elif config.type == RecurrenceType.MONTHLY:
            if config.monthly_pattern is None:
                errors.append("Monthly recurrence must specify pattern (date or dayOfWeek)")
            elif config.monthly_pattern == MonthlyPattern.DATE:
                if config.monthly_date is None:
                    errors.append("Monthly date pattern must specify date (1-31)")
            elif (
                config.monthly_week_of_month is None
                or config.monthly_day_of_week is None
            ):
                errors.append(
                    "Monthly dayOfWeek pattern must specify week of month and day of week"
                )
        return errors

    # ------------------------------------------------------------------
    # Expansion
    # ------------------------------------------------------------------

    def expand(
        self,
        config: RecurrenceConfig,
        window: DateRange,
        cap: Optional[int] = None,
    ) -> list[date]:
        """
        Occurrence dates inside the window, strictly ascending.

        Args:
            config: Recurrence rule
            window: Inclusive bounding range
            cap: Maximum number of occurrences (defaults to the configured safety bound)

        Raises:
            InvalidRecurrenceConfigError: If the rule is incomplete
        """
        self.ensure_valid(config)
        limit = self.default_cap if cap is None else cap
        occurrences: list[date] = []
        if limit <= 0:
            return occurrences

        if config.type == RecurrenceType.DAILY:
            current = window.start
            while current <= window.end and len(occurrences) < limit:
                occurrences.append(current)
                current = add_days(current, config.interval)

        elif config.type == RecurrenceType.WEEKLY:
            target = _to_python_weekday(config.weekly_day_of_week)
            current = add_days(window.start, (target - window.start.weekday()) % 7)
            while current <= window.end and len(occurrences) < limit:
                occurrences.append(current)
                current += timedelta(days=7 * config.interval)

        else:
            base = month_index(window.start)
            first = self._monthly_date(config, base)
            if first is not None and first < window.start:
                base += 1
            index = base
            while len(occurrences) < limit:
                if day_in_month(index, 1) > window.end:
                    break
                current = self._monthly_date(config, index)
                index += config.interval
                if current is None:
                    continue
                if current > window.end:
                    break
                occurrences.append(current)

        if len(occurrences) >= limit:
            logger.warning(
                f"Recurrence capped at {limit} occurrences for window "
                f"{window.start}..{window.end}"
            )
        return occurrences

    @staticmethod
    def _monthly_date(config: RecurrenceConfig, index: int) -> Optional[date]:
        """Occurrence within the month given by a month index; None if the month lacks the day."""
        if config.monthly_pattern == MonthlyPattern.DATE:
            return day_in_month(index, config.monthly_date)
        return nth_weekday_of_month(
            index // 12,
            index % 12 + 1,
            _to_python_weekday(config.monthly_day_of_week),
            config.monthly_week_of_month,
        )

    def occurrence_ranges(
        self, occurrences: list[date], project_start: date
    ) -> list[DateRange]:
        """
        Work periods between consecutive occurrences.

        The first period starts at the project start so days before the first
        occurrence are covered; each period ends the day before the next
        occurrence. Periods with no days are skipped.
        """
        ranges: list[DateRange] = []
        previous = project_start
        for occurrence in occurrences:
            end = add_days(occurrence, -1)
            if previous <= end:
                ranges.append(DateRange(start=previous, end=end))
            previous = max(previous, occurrence)
        return ranges

    # ------------------------------------------------------------------
    # Summaries
    # ------------------------------------------------------------------

    def total_allocation(
        self,
        template: RecurringPhase,
        window: DateRange,
        cap: Optional[int] = None,
    ) -> float:
        """Occurrence count times the per-occurrence allocation."""
        return len(self.expand(template.config, window, cap)) * template.time_allocation

    def has_excessive_occurrences(
        self,
        config: RecurrenceConfig,
        window: DateRange,
        threshold: Optional[int] = None,
    ) -> bool:
        limit = (
            threshold
            if threshold is not None
            else get_settings().RECURRENCE_WARNING_THRESHOLD
        )
        return len(self.expand(config, window)) >= limit

    @staticmethod
    def estimate_occurrence_count(config: RecurrenceConfig, duration_days: int) -> int:
        """Quick estimate without generating dates."""
        if config.type == RecurrenceType.DAILY:
            return duration_days // config.interval
        if config.type == RecurrenceType.WEEKLY:
            return duration_days // (7 * config.interval)
        if config.type == RecurrenceType.MONTHLY:
            return duration_days // (30 * config.interval)
        return 0

    @staticmethod
    def describe(config: RecurrenceConfig) -> str:
        """
        Human-readable rule, e.g. "Every 2 weeks on Monday".
        """
        interval = config.interval
        prefix = "Every " if interval == 1 else f"Every {interval} "
        plural = "s" if interval > 1 else ""

        if config.type == RecurrenceType.DAILY:
            return f"{prefix}day{plural}"

        if config.type == RecurrenceType.WEEKLY:
            day_name = (
                Weekday.from_index(config.weekly_day_of_week).value.capitalize()
                if config.weekly_day_of_week is not None
                else "week"
            )
            return f"{prefix}week{plural} on {day_name}"

        if config.monthly_pattern == MonthlyPattern.DATE and config.monthly_date:
            suffix = _ordinal_suffix(config.monthly_date)
            return f"{prefix}month{plural} on the {config.monthly_date}{suffix}"
        if (
            config.monthly_pattern == MonthlyPattern.DAY_OF_WEEK
            and config.monthly_week_of_month is not None
            and config.monthly_day_of_week is not None
        ):
            week_name = _WEEK_NAMES[config.monthly_week_of_month - 1]
            day_name = Weekday.from_index(config.monthly_day_of_week).value.capitalize()
            return f"{prefix}month{plural} on the {week_name} {day_name}"
        return f"{prefix}month{plural}"
