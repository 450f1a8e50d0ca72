"""
Tests for PlanningService snapshot loading and plan assembly.
"""

from datetime import date, datetime
from unittest.mock import AsyncMock

import pytest

from phaseplan.interfaces.calendar_event_repository import ICalendarEventRepository
from phaseplan.interfaces.phase_repository import IPhaseRepository
from phaseplan.interfaces.schedule_settings_repository import IScheduleSettingsRepository
from phaseplan.models.enums import EstimateSource
from phaseplan.models.phase import FixedPhase, RecurrenceConfig, RecurringPhase
from phaseplan.models.project import CalendarEvent, Project
from phaseplan.models.schedule import Holiday, WeeklySchedule, WorkSlot
from phaseplan.services.calculation_cache import CalculationCache
from phaseplan.services.planning_service import PlanningService
from phaseplan.services.segment_allocator import SegmentAllocator
from phaseplan.utils.phase_mapper import load_phases


def make_schedule() -> WeeklySchedule:
    slot = WorkSlot(start_time="09:00", end_time="17:00")
    return WeeklySchedule(
        monday=[slot], tuesday=[slot], wednesday=[slot], thursday=[slot], friday=[slot]
    )


def make_project(**overrides) -> Project:
    data = {
        "id": "p1",
        "name": "Website",
        "start_date": date(2025, 1, 1),
        "end_date": date(2025, 1, 31),
        "estimated_hours": 80,
    }
    data.update(overrides)
    return Project(**data)


def make_service(phases, events=None, holidays=None, allocator=None):
    phase_repo = AsyncMock(spec=IPhaseRepository)
    phase_repo.list_by_project.return_value = phases
    schedule_repo = AsyncMock(spec=IScheduleSettingsRepository)
    schedule_repo.get_weekly_schedule.return_value = make_schedule()
    schedule_repo.list_holidays.return_value = holidays or []
    event_repo = AsyncMock(spec=ICalendarEventRepository)
    event_repo.list_by_project.return_value = events or []
    service = PlanningService(phase_repo, schedule_repo, event_repo, allocator=allocator)
    return service, event_repo


@pytest.mark.asyncio
async def test_plan_fixed_phases():
    phase = FixedPhase(
        id="m1", project_id="p1", end_date=date(2025, 1, 15), time_allocation=40
    )
    service, _ = make_service([phase])

    plan = await service.plan_project(make_project(), as_of=date(2025, 1, 1))

    assert plan.window_start == date(2025, 1, 1)
    assert plan.window_end == date(2025, 1, 31)
    assert len(plan.segments) == 2
    assert plan.segments[1].is_trailing
    assert plan.budget.is_valid is True
    assert plan.budget.utilization == pytest.approx(50.0)
    assert len(plan.day_estimates) == 23
    assert sum(e.hours for e in plan.day_estimates) == pytest.approx(80)


@pytest.mark.asyncio
async def test_planned_events_and_exclusions_applied():
    phase = FixedPhase(
        id="m1", project_id="p1", end_date=date(2025, 1, 15), time_allocation=40
    )
    events = [
        CalendarEvent(
            id="e1",
            project_id="p1",
            start_time=datetime(2025, 1, 6, 9),
            end_time=datetime(2025, 1, 6, 17),
        )
    ]
    holidays = [Holiday(id="h1", start_date=date(2025, 1, 2), end_date=date(2025, 1, 2))]
    service, _ = make_service([phase], events=events, holidays=holidays)
    project = make_project(auto_estimate_days={"friday": False})

    plan = await service.plan_project(project, as_of=date(2025, 1, 1))

    first = plan.segments[0]
    # Jan 1-15 weekdays minus Jan 2 holiday and Fridays Jan 3 and 10
    assert first.working_day_count == 8
    assert first.planned_hours == pytest.approx(8.0)
    assert first.hours_per_day == pytest.approx(32 / 8)


@pytest.mark.asyncio
async def test_continuous_project_uses_forward_window():
    service, event_repo = make_service([])
    project = make_project(continuous=True, estimated_hours=0)

    plan = await service.plan_project(project, as_of=date(2025, 2, 1))

    assert plan.window_end == date(2025, 5, 2)
    window = event_repo.list_by_project.await_args.args[1]
    assert window.end == date(2025, 5, 2)
    assert plan.segments == []


@pytest.mark.asyncio
async def test_recurring_template_plan():
    template = RecurringPhase(
        id="tpl",
        project_id="p1",
        time_allocation=5,
        config=RecurrenceConfig(type="weekly", weekly_day_of_week=1),
    )
    service, _ = make_service([template])

    plan = await service.plan_project(make_project(estimated_hours=10), as_of=date(2025, 1, 1))

    assert len(plan.segments) == 4
    assert plan.budget.is_valid is True
    assert plan.budget.recurring_commitment == pytest.approx(20.0)
    assert all(e.source == EstimateSource.PHASE_ALLOCATION for e in plan.day_estimates)


@pytest.mark.asyncio
async def test_cached_allocator_returns_same_plan():
    phase = FixedPhase(
        id="m1", project_id="p1", end_date=date(2025, 1, 15), time_allocation=40
    )
    allocator = SegmentAllocator(cache=CalculationCache())
    service, _ = make_service([phase], allocator=allocator)

    first = await service.plan_project(make_project(), as_of=date(2025, 1, 1))
    second = await service.plan_project(make_project(), as_of=date(2025, 1, 1))

    assert first == second
    assert allocator.cache.stats()["hits"] >= 1


@pytest.mark.asyncio
async def test_plan_from_stored_records():
    records = [
        {"id": "m1", "projectId": "p1", "dueDate": "2025-01-15", "timeAllocationHours": 40},
        {"id": "m2", "projectId": "p1", "endDate": "2025-01-24", "timeAllocationHours": 20},
    ]
    service, _ = make_service(load_phases(records))

    plan = await service.plan_project(make_project(), as_of=date(2025, 1, 1))

    assert [s.phase_id for s in plan.segments] == ["m1", "m2", None]
    assert plan.budget.total_allocated == pytest.approx(60)


@pytest.mark.asyncio
async def test_project_without_phases_has_no_segments():
    service, _ = make_service([])

    plan = await service.plan_project(make_project(), as_of=date(2025, 1, 1))

    assert plan.segments == []
    assert plan.day_estimates == []
    assert any("No phases defined" in r for r in plan.budget.recommendations)
