"""
Unit tests for BoundaryResolver bounds and drag state machine.
"""

from datetime import date

import pytest

from phaseplan.core.exceptions import NotFoundError, OverlapViolationError, ValidationError
from phaseplan.models.enums import DragAction, DragStatus, TimelineMode
from phaseplan.models.drag import PhaseBounds
from phaseplan.models.phase import FixedPhase, RecurrenceConfig, RecurringPhase
from phaseplan.models.schedule import DateRange
from phaseplan.services.boundary_resolver import BoundaryResolver


def make_phase(phase_id: str, start: date, end: date, hours: float = 10) -> FixedPhase:
    return FixedPhase(
        id=phase_id, project_id="p1", start_date=start, end_date=end, time_allocation=hours
    )


def make_phases() -> list[FixedPhase]:
    return [
        make_phase("a", date(2025, 1, 1), date(2025, 1, 10)),
        make_phase("b", date(2025, 1, 11), date(2025, 1, 19)),
        make_phase("c", date(2025, 1, 20), date(2025, 1, 31)),
    ]


PROJECT = DateRange.create(date(2025, 1, 1), date(2025, 2, 28))


class TestBounds:
    def test_resize_end_capped_by_next_start(self):
        phases = make_phases()
        bounds = BoundaryResolver().bounds(phases, phases[1], DragAction.RESIZE_END)
        assert bounds.max_date == date(2025, 1, 19)
        assert bounds.min_date == date(2025, 1, 12)
        assert BoundaryResolver.clamp(date(2025, 1, 20), bounds) == date(2025, 1, 19)
        assert BoundaryResolver.clamp(date(2025, 1, 25), bounds) == date(2025, 1, 19)

    def test_resize_start(self):
        phases = make_phases()
        bounds = BoundaryResolver().bounds(phases, phases[1], DragAction.RESIZE_START)
        assert bounds.min_date == date(2025, 1, 11)
        assert bounds.max_date == date(2025, 1, 18)

    def test_first_phase_has_no_min(self):
        phases = make_phases()
        bounds = BoundaryResolver().bounds(phases, phases[0], DragAction.RESIZE_START)
        assert bounds.min_date is None
        assert bounds.max_date == date(2025, 1, 9)

    def test_last_phase_has_no_max(self):
        phases = make_phases()
        bounds = BoundaryResolver().bounds(phases, phases[2], DragAction.RESIZE_END)
        assert bounds.max_date is None

    def test_move_keeps_duration_between_neighbours(self):
        phases = [
            make_phase("a", date(2025, 1, 1), date(2025, 1, 5)),
            make_phase("b", date(2025, 1, 10), date(2025, 1, 14)),
            make_phase("c", date(2025, 1, 25), date(2025, 1, 31)),
        ]
        bounds = BoundaryResolver().bounds(phases, phases[1], DragAction.MOVE)
        assert bounds.min_date == date(2025, 1, 6)
        assert bounds.max_date == date(2025, 1, 20)

    def test_unknown_phase(self):
        phases = make_phases()
        stranger = make_phase("x", date(2025, 3, 1), date(2025, 3, 5))
        with pytest.raises(NotFoundError):
            BoundaryResolver().bounds(phases, stranger, DragAction.RESIZE_END)

    def test_phase_without_start_follows_previous_deadline(self):
        phases = [
            FixedPhase(id="a", project_id="p1", end_date=date(2025, 1, 10)),
            FixedPhase(id="b", project_id="p1", end_date=date(2025, 1, 20)),
        ]
        bounds = BoundaryResolver().bounds(
            phases, phases[1], DragAction.RESIZE_END, project_start=date(2025, 1, 1)
        )
        assert bounds.min_date == date(2025, 1, 12)

    def test_clamp_unbounded(self):
        assert BoundaryResolver.clamp(date(2030, 1, 1), PhaseBounds()) == date(2030, 1, 1)


class TestPixelConversion:
    def test_days_mode(self):
        resolver = BoundaryResolver()
        assert resolver.days_delta_from_pixels(104, TimelineMode.DAYS) == 2
        assert resolver.days_delta_from_pixels(26, TimelineMode.DAYS) == 1
        assert resolver.days_delta_from_pixels(25, TimelineMode.DAYS) == 0
        assert resolver.days_delta_from_pixels(-26, TimelineMode.DAYS) == 0
        assert resolver.days_delta_from_pixels(-27, TimelineMode.DAYS) == -1

    def test_weeks_mode(self):
        resolver = BoundaryResolver()
        assert resolver.days_delta_from_pixels(154, TimelineMode.WEEKS) == 7
        assert resolver.days_delta_from_pixels(22, TimelineMode.WEEKS) == 1

    def test_custom_column_widths(self):
        resolver = BoundaryResolver(column_width_days=10)
        assert resolver.days_delta_from_pixels(30, TimelineMode.DAYS) == 3


class TestDragStateMachine:
    def test_resize_end_sequence(self):
        resolver = BoundaryResolver()
        phases = make_phases()
        state = resolver.start(phases, "b", DragAction.RESIZE_END, TimelineMode.DAYS, origin_x=500)
        assert state.status == DragStatus.RESIZING
        assert state.original_end == date(2025, 1, 19)

        shrunk = resolver.move(state, 500 - 52 * 3)
        assert shrunk.candidate_end == date(2025, 1, 16)
        assert shrunk.last_days_delta == -3
        assert state.last_days_delta == 0

        committed, update = resolver.commit(shrunk, phases)
        assert committed.status == DragStatus.COMMITTED
        assert update.as_fields() == {
            "end_date": date(2025, 1, 16),
            "due_date": date(2025, 1, 16),
        }

    def test_drag_back_to_origin_commits_nothing(self):
        resolver = BoundaryResolver()
        phases = make_phases()
        state = resolver.start(phases, "b", DragAction.RESIZE_END, TimelineMode.DAYS, origin_x=500)
        shrunk = resolver.move(state, 500 - 52 * 3)
        assert shrunk.has_changed is True

        restored = resolver.move(shrunk, 500)
        assert restored.has_changed is False
        committed, update = resolver.commit(restored, phases)
        assert committed.status == DragStatus.COMMITTED
        assert update is None

    def test_move_past_neighbour_is_clamped(self):
        resolver = BoundaryResolver()
        phases = make_phases()
        state = resolver.start(phases, "b", DragAction.RESIZE_END, TimelineMode.DAYS, origin_x=0)
        state = resolver.move(state, 52 * 10)
        assert state.candidate_end == date(2025, 1, 19)
        assert state.last_days_delta == 0
        committed, update = resolver.commit(state, phases)
        assert committed.status == DragStatus.COMMITTED
        assert update is None

    def test_resize_start_emits_start_only(self):
        resolver = BoundaryResolver()
        phases = make_phases()
        state = resolver.start(phases, "c", DragAction.RESIZE_START, TimelineMode.DAYS, origin_x=0)
        state = resolver.move(state, 52 * 2)
        _, update = resolver.commit(state, phases)
        assert update.as_fields() == {"start_date": date(2025, 1, 22)}

    def test_move_shifts_both_dates(self):
        resolver = BoundaryResolver()
        phases = [
            make_phase("a", date(2025, 1, 1), date(2025, 1, 5)),
            make_phase("b", date(2025, 1, 10), date(2025, 1, 14)),
        ]
        state = resolver.start(phases, "b", DragAction.MOVE, TimelineMode.DAYS, origin_x=0)
        state = resolver.move(state, -52 * 10)
        assert state.candidate_start == date(2025, 1, 6)
        assert state.candidate_end == date(2025, 1, 10)
        _, update = resolver.commit(state, phases)
        assert update.as_fields() == {
            "start_date": date(2025, 1, 6),
            "end_date": date(2025, 1, 10),
            "due_date": date(2025, 1, 10),
        }

    def test_project_window_locks_edges(self):
        resolver = BoundaryResolver()
        phases = make_phases()
        state = resolver.start(
            phases, "c", DragAction.RESIZE_END, TimelineMode.DAYS, origin_x=0, project_window=PROJECT
        )
        assert state.bounds.max_date == date(2025, 2, 28)
        state = resolver.move(state, 52 * 100)
        assert state.candidate_end == date(2025, 2, 28)

        first = resolver.start(
            phases, "a", DragAction.RESIZE_START, TimelineMode.DAYS, origin_x=0, project_window=PROJECT
        )
        assert first.bounds.min_date == date(2025, 1, 1)

    def test_cancel_restores_original(self):
        resolver = BoundaryResolver()
        phases = make_phases()
        state = resolver.start(phases, "b", DragAction.RESIZE_END, TimelineMode.DAYS, origin_x=0)
        state = resolver.move(state, -52)
        cancelled = resolver.cancel(state)
        assert cancelled.status == DragStatus.CANCELLED
        assert cancelled.candidate_end == date(2025, 1, 19)
        assert resolver.commit(cancelled) == (cancelled, None)
        assert resolver.move(cancelled, 1000) is cancelled

    def test_template_cannot_be_dragged(self):
        template = RecurringPhase(
            id="tpl",
            project_id="p1",
            time_allocation=2,
            config=RecurrenceConfig(type="daily"),
        )
        with pytest.raises(ValidationError):
            BoundaryResolver().start([template], "tpl", DragAction.RESIZE_END, TimelineMode.DAYS, 0)

    def test_unknown_phase_id(self):
        with pytest.raises(NotFoundError):
            BoundaryResolver().start(make_phases(), "zzz", DragAction.RESIZE_END, TimelineMode.DAYS, 0)

    def test_no_overlap_after_any_commit(self):
        resolver = BoundaryResolver()
        for offset in range(-20, 21):
            phases = make_phases()
            for phase_id in ("a", "b", "c"):
                for action in (DragAction.RESIZE_START, DragAction.RESIZE_END, DragAction.MOVE):
                    state = resolver.start(
                        phases, phase_id, action, TimelineMode.DAYS, 0, project_window=PROJECT
                    )
                    state = resolver.move(state, offset * 52)
                    _, update = resolver.commit(state, phases)
                    if update is None:
                        continue
                    fields = update.as_fields()
                    fields.pop("due_date", None)
                    updated = [
                        p.model_copy(update=fields) if p.id == phase_id else p for p in phases
                    ]
                    resolver.validate_no_overlap(updated)


class TestValidateNoOverlap:
    def test_valid(self):
        BoundaryResolver().validate_no_overlap(make_phases())

    def test_overlap_raises(self):
        phases = [
            make_phase("a", date(2025, 1, 1), date(2025, 1, 10)),
            make_phase("b", date(2025, 1, 10), date(2025, 1, 19)),
        ]
        with pytest.raises(OverlapViolationError):
            BoundaryResolver().validate_no_overlap(phases)

    def test_zero_duration_phase_raises(self):
        with pytest.raises(OverlapViolationError):
            BoundaryResolver().validate_no_overlap(
                [make_phase("a", date(2025, 1, 5), date(2025, 1, 5))]
            )
