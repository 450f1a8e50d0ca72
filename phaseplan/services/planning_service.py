"""
Planning service.

Loads the snapshots a project's timeline needs (phases, schedule, holidays,
events) and runs allocation and budget validation over them.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from phaseplan.core.config import get_settings
from phaseplan.core.logger import setup_logger
from phaseplan.interfaces.calendar_event_repository import ICalendarEventRepository
from phaseplan.interfaces.phase_repository import IPhaseRepository
from phaseplan.interfaces.schedule_settings_repository import IScheduleSettingsRepository
from phaseplan.models.project import Project
from phaseplan.models.segment import ProjectPlan
from phaseplan.services.budget_service import BudgetValidator
from phaseplan.services.segment_allocator import SegmentAllocator

logger = setup_logger(__name__)


class PlanningService:
    """Builds ProjectPlan snapshots for the timeline."""

    def __init__(
        self,
        phase_repo: IPhaseRepository,
        schedule_repo: IScheduleSettingsRepository,
        event_repo: ICalendarEventRepository,
        allocator: Optional[SegmentAllocator] = None,
        budget_validator: Optional[BudgetValidator] = None,
    ):
        self.phase_repo = phase_repo
        self.schedule_repo = schedule_repo
        self.event_repo = event_repo
        self.allocator = allocator or SegmentAllocator()
        self.budget_validator = budget_validator or BudgetValidator()

    async def plan_project(self, project: Project, as_of: Optional[date] = None) -> ProjectPlan:
        """
        Compute segments, per-day estimates and budget status for a project.

        Args:
            project: Project snapshot
            as_of: Reference date for continuous projects (defaults to today)

        Returns:
            ProjectPlan

        Raises:
            InvalidRangeError: If the project's end precedes its start
            ValidationError: If the project mixes a recurring template with fixed phases
        """
        as_of = as_of or date.today()
        window = project.window(as_of, get_settings().CONTINUOUS_WINDOW_FORWARD_DAYS)

        phases = await self.phase_repo.list_by_project(project.id)
        schedule = await self.schedule_repo.get_weekly_schedule()
        holidays = await self.schedule_repo.list_holidays()
        events = await self.event_repo.list_by_project(project.id, window)

        segments = self.allocator.allocate(
            phases,
            window,
            project.estimated_hours,
            schedule,
            holidays,
            events,
            exclusions=project.excluded_weekdays(),
            project_id=project.id,
        )
        budget = self.budget_validator.validate(
            phases, project.estimated_hours, window=window
        )

        logger.info(
            f"Planned project {project.id}: {len(segments)} segments over "
            f"{window.start}..{window.end}, utilization {budget.utilization:.1f}%"
        )
        return ProjectPlan(
            project_id=project.id,
            window_start=window.start,
            window_end=window.end,
            segments=segments,
            day_estimates=self.allocator.day_estimates(segments, project.id),
            budget=budget,
        )
