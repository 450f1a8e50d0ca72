"""
Segment allocator.

Partitions a project window into contiguous segments, one per phase deadline
(or per recurrence occurrence period), and spreads each segment's remaining
allocation evenly over its working days.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Sequence

from phaseplan.core.logger import setup_logger
from phaseplan.models.enums import EstimateSource, Weekday
from phaseplan.models.phase import Phase, RecurringPhase
from phaseplan.models.project import CalendarEvent
from phaseplan.models.schedule import DateRange, Holiday, WeeklySchedule
from phaseplan.models.segment import DayEstimate, Segment
from phaseplan.services.calculation_cache import CalculationCache
from phaseplan.services.recurrence_service import RecurrenceExpander
from phaseplan.services.working_day_service import WorkingDayCalculator
from phaseplan.utils import cache_keys
from phaseplan.utils.datetime_utils import add_days, overlap_hours_on_date
from phaseplan.utils.phase_mapper import partition_phases

logger = setup_logger(__name__)


class SegmentAllocator:
    """Allocates phase budgets across working days."""

    def __init__(
        self,
        working_days: Optional[WorkingDayCalculator] = None,
        recurrence: Optional[RecurrenceExpander] = None,
        cache: Optional[CalculationCache] = None,
    ):
        self.cache = cache
        self.working_days = working_days or WorkingDayCalculator(cache=cache)
        self.recurrence = recurrence or RecurrenceExpander()

    def allocate(
        self,
        phases: Sequence[Phase],
        project_window: DateRange,
        project_budget: float,
        schedule: WeeklySchedule,
        holidays: Iterable[Holiday],
        events: Iterable[CalendarEvent],
        exclusions: Optional[Iterable[Weekday]] = None,
        project_id: Optional[str] = None,
    ) -> list[Segment]:
        """
        Compute segments for a project.

        Args:
            phases: Fixed phases, or a single recurring template
            project_window: Effective project range
            project_budget: Total project budget in hours
            schedule: Weekly work-hour schedule
            holidays: Holiday ranges
            events: Calendar events; only the project's `event` category counts
            exclusions: Weekdays switched off for this project
            project_id: Project whose events count (defaults to the phases' project)

        Returns:
            Segments in chronological order

        Raises:
            ValidationError: If a template is mixed with fixed phases
            InvalidRecurrenceConfigError: If the template's rule is incomplete
        """
        phases = list(phases)
        holidays = list(holidays)
        events = list(events)
        excluded = frozenset(exclusions or ())
        if project_id is None and phases:
            project_id = phases[0].project_id

        if self.cache is None:
            return self._allocate(
                phases, project_window, project_budget, schedule,
                holidays, events, excluded, project_id,
            )

        key = (
            "allocate",
            project_id,
            cache_keys.range_key(project_window),
            project_budget,
            cache_keys.schedule_key(schedule),
            cache_keys.holidays_key(holidays),
            cache_keys.phases_key(phases),
            cache_keys.events_key(events),
            cache_keys.exclusions_key(excluded),
        )
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        segments = self._allocate(
            phases, project_window, project_budget, schedule,
            holidays, events, excluded, project_id,
        )
        self.cache.set(key, segments)
        return segments

    def _allocate(
        self,
        phases: list[Phase],
        window: DateRange,
        budget: float,
        schedule: WeeklySchedule,
        holidays: list[Holiday],
        events: list[CalendarEvent],
        excluded: frozenset[Weekday],
        project_id: Optional[str],
    ) -> list[Segment]:
        fixed, template = partition_phases(phases)
        project_events = [
            event
            for event in events
            if event.counts_as_project_time
            and (project_id is None or event.project_id == project_id)
        ]

        def build(
            segment_id: str,
            start: date,
            end: date,
            allocation: float,
            phase_id: Optional[str] = None,
            occurrence_number: Optional[int] = None,
            is_trailing: bool = False,
        ) -> Segment:
            if start <= end:
                days = self.working_days.working_days(
                    DateRange(start=start, end=end), schedule, holidays, excluded
                )
                planned = self._planned_hours(start, end, project_events)
            else:
                days, planned = [], 0.0
            remaining = max(0.0, allocation - planned)
            per_day = remaining / len(days) if days else 0.0
            logger.debug(
                f"Segment {segment_id}: {start}..{end} allocated={allocation} "
                f"planned={planned:.2f} working_days={len(days)} per_day={per_day:.2f}"
            )
            return Segment(
                id=segment_id,
                start_date=start,
                end_date=end,
                phase_id=phase_id,
                occurrence_number=occurrence_number,
                allocated_hours=allocation,
                planned_hours=planned,
                remaining_hours=remaining,
                working_days=tuple(days),
                hours_per_day=per_day,
                is_trailing=is_trailing,
            )

        if template is not None:
            return self._allocate_template(template, window, build)

        if not fixed:
            return []

        segments: list[Segment] = []
        current_start = window.start
        ordered = sorted(fixed, key=lambda phase: phase.end_date)
        for phase in ordered:
            segments.append(
                build(
                    f"segment-{phase.id}",
                    current_start,
                    phase.end_date,
                    phase.time_allocation,
                    phase_id=phase.id,
                )
            )
            current_start = add_days(phase.end_date, 1)

        total_allocated = sum(phase.time_allocation for phase in ordered)
        if current_start <= window.end and budget > total_allocated:
            segments.append(
                build(
                    f"segment-remaining-{project_id}",
                    current_start,
                    window.end,
                    budget - total_allocated,
                    is_trailing=True,
                )
            )
        return segments

    def _allocate_template(self, template: RecurringPhase, window: DateRange, build) -> list[Segment]:
        occurrences = self.recurrence.expand(template.config, window)
        ranges = self.recurrence.occurrence_ranges(occurrences, window.start)
        return [
            build(
                f"segment-{template.id}-{number}",
                period.start,
                period.end,
                template.time_allocation,
                phase_id=template.id,
                occurrence_number=number,
            )
            for number, period in enumerate(ranges, start=1)
        ]

    @staticmethod
    def _planned_hours(
        start: date, end: date, events: list[CalendarEvent]
    ) -> float:
        """Time of events starting inside [start, end], clipped to the start day."""
        total = 0.0
        for event in events:
            day = event.start_time.date()
            if start <= day <= end:
                total += overlap_hours_on_date(event.start_time, event.end_time, day)
        return total

    @staticmethod
    def day_estimates(
        segments: Iterable[Segment], project_id: Optional[str] = None
    ) -> list[DayEstimate]:
        """Spread each segment's hours_per_day over its working days."""
        estimates: list[DayEstimate] = []
        for segment in segments:
            if segment.hours_per_day <= 0:
                continue
            source = (
                EstimateSource.REMAINING_BUDGET
                if segment.is_trailing
                else EstimateSource.PHASE_ALLOCATION
            )
            for day in segment.working_days:
                estimates.append(
                    DayEstimate(
                        date=day,
                        project_id=project_id,
                        phase_id=segment.phase_id,
                        hours=segment.hours_per_day,
                        source=source,
                    )
                )
        return estimates

    @staticmethod
    def segment_for_date(segments: Iterable[Segment], day: date) -> Optional[Segment]:
        for segment in segments:
            if segment.contains(day):
                return segment
        return None
