"""
Boundary resolver.

Derives the permissible range for a dragged phase boundary and runs the drag
state machine (idle -> resizing -> committed | cancelled). Each transition
takes the current DragState and returns a new one, so a whole drag sequence
can be replayed without any UI.
"""

from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from phaseplan.core.config import get_settings
from phaseplan.core.exceptions import NotFoundError, OverlapViolationError, ValidationError
from phaseplan.core.logger import setup_logger
from phaseplan.models.drag import DragState, PhaseBounds
from phaseplan.models.enums import DragAction, DragStatus, TimelineMode
from phaseplan.models.phase import FixedPhase, Phase, PhaseUpdate
from phaseplan.models.schedule import DateRange
from phaseplan.utils.datetime_utils import add_days, days_between, round_half_up
from phaseplan.utils.phase_mapper import partition_phases

logger = setup_logger(__name__)

# (phase, effective start, end)
Span = tuple[FixedPhase, date, date]


def _spans(phases: Sequence[Phase], project_start: Optional[date] = None) -> list[Span]:
    """
    Fixed phases with their effective start, ordered by start.

    A phase without an explicit start begins the day after the previous
    deadline (or at the project start for the first phase).
    """
    fixed, _ = partition_phases(phases)
    ordered = sorted(fixed, key=lambda phase: (phase.start_date or phase.end_date, phase.end_date))
    spans: list[Span] = []
    previous_end: Optional[date] = None
    for phase in ordered:
        start = phase.start_date
        if start is None:
            if previous_end is not None:
                start = add_days(previous_end, 1)
            elif project_start is not None:
                start = project_start
            else:
                start = phase.end_date
        spans.append((phase, start, phase.end_date))
        previous_end = phase.end_date
    return spans


class BoundaryResolver:
    """Computes drag bounds and drives the drag state machine."""

    def __init__(
        self,
        column_width_days: Optional[float] = None,
        column_width_weeks: Optional[float] = None,
    ):
        settings = get_settings()
        self.column_width_days = column_width_days or settings.COLUMN_WIDTH_DAYS
        self.column_width_weeks = column_width_weeks or settings.COLUMN_WIDTH_WEEKS

    # ------------------------------------------------------------------
    # Bounds
    # ------------------------------------------------------------------

    def bounds(
        self,
        phases: Sequence[Phase],
        target: FixedPhase,
        action: DragAction,
        project_start: Optional[date] = None,
    ) -> PhaseBounds:
        """
        Permissible range for the boundary being dragged.

        resize-start: previous end + 1 .. target end - 1
        resize-end: target start + 1 .. next start - 1
        move: bounds on the new start so the whole phase fits between neighbours

        A missing neighbour yields None (the caller locks it to the project edge).
        """
        spans = _spans(phases, project_start)
        index = next(
            (i for i, (phase, _, _) in enumerate(spans) if phase.id == target.id), None
        )
        if index is None:
            raise NotFoundError(f"Phase {target.id} not found", details={"phase_id": target.id})

        _, start, end = spans[index]
        previous = spans[index - 1] if index > 0 else None
        following = spans[index + 1] if index < len(spans) - 1 else None

        if action == DragAction.RESIZE_START:
            return PhaseBounds(
                min_date=add_days(previous[2], 1) if previous else None,
                max_date=add_days(end, -1),
            )
        if action == DragAction.RESIZE_END:
            return PhaseBounds(
                min_date=add_days(start, 1),
                max_date=add_days(following[1], -1) if following else None,
            )

        length = days_between(start, end)
        return PhaseBounds(
            min_date=add_days(previous[2], 1) if previous else None,
            max_date=add_days(following[1], -1 - length) if following else None,
        )

    @staticmethod
    def clamp(candidate: date, bounds: PhaseBounds) -> date:
        if bounds.min_date is not None and candidate < bounds.min_date:
            candidate = bounds.min_date
        if bounds.max_date is not None and candidate > bounds.max_date:
            candidate = bounds.max_date
        return candidate

    def days_delta_from_pixels(self, delta_x: float, mode: TimelineMode) -> int:
        """Pixel offset to whole days; a weeks-view column spans 7 days."""
        if mode == TimelineMode.WEEKS:
            return round_half_up(delta_x / self.column_width_weeks * 7)
        return round_half_up(delta_x / self.column_width_days)

    def validate_no_overlap(
        self, phases: Sequence[Phase], project_start: Optional[date] = None
    ) -> None:
        """
        Raises:
            OverlapViolationError: If two phases overlap or one is shorter than a day
        """
        spans = _spans(phases, project_start)
        for phase, start, end in spans:
            if phase.start_date is not None and start >= end:
                raise OverlapViolationError(
                    f"Phase {phase.id} must span at least one day",
                    details={"phase_id": phase.id, "start": str(start), "end": str(end)},
                )
        for (previous, _, previous_end), (current, current_start, _) in zip(spans, spans[1:]):
            if current_start <= previous_end:
                raise OverlapViolationError(
                    f"Phase {current.id} overlaps phase {previous.id}",
                    details={"phase_ids": [previous.id, current.id]},
                )

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------

    def start(
        self,
        phases: Sequence[Phase],
        phase_id: str,
        action: DragAction,
        mode: TimelineMode,
        origin_x: float,
        project_window: Optional[DateRange] = None,
    ) -> DragState:
        """
        Begin a drag on one boundary of a fixed phase.

        Raises:
            NotFoundError: If the phase is not in the list
            ValidationError: If the phase is a recurring template
        """
        target = next((phase for phase in phases if phase.id == phase_id), None)
        if target is None:
            raise NotFoundError(f"Phase {phase_id} not found", details={"phase_id": phase_id})
        if target.kind != "fixed":
            raise ValidationError(
                "Recurring templates have no draggable boundaries",
                details={"phase_id": phase_id},
            )

        project_start = project_window.start if project_window else None
        spans = _spans(phases, project_start)
        _, original_start, original_end = next(s for s in spans if s[0].id == phase_id)
        bounds = self.bounds(phases, target, action, project_start)

        if project_window is not None:
            length = days_between(original_start, original_end)
            min_date = bounds.min_date
            max_date = bounds.max_date
            if min_date is None:
                min_date = project_window.start
            if max_date is None:
                max_date = (
                    add_days(project_window.end, -length)
                    if action == DragAction.MOVE
                    else project_window.end
                )
            bounds = PhaseBounds(min_date=min_date, max_date=max_date)

        logger.debug(f"Drag start {action.value} on {phase_id}: bounds {bounds.min_date}..{bounds.max_date}")
        return DragState(
            status=DragStatus.RESIZING,
            project_id=target.project_id,
            phase_id=phase_id,
            action=action,
            mode=mode,
            origin_x=origin_x,
            original_start=original_start,
            original_end=original_end,
            bounds=bounds,
            candidate_start=original_start,
            candidate_end=original_end,
        )

    def move(self, state: DragState, client_x: float) -> DragState:
        """Apply a pointer position; returns the state unchanged when no drag is active."""
        if not state.is_active:
            return state

        requested = self.days_delta_from_pixels(client_x - state.origin_x, state.mode)
        anchor = (
            state.original_end
            if state.action == DragAction.RESIZE_END
            else state.original_start
        )
        constrained = self.clamp(add_days(anchor, requested), state.bounds)
        delta = days_between(anchor, constrained)

        candidate_start = state.original_start
        candidate_end = state.original_end
        if state.action in (DragAction.RESIZE_START, DragAction.MOVE):
            candidate_start = add_days(state.original_start, delta)
        if state.action in (DragAction.RESIZE_END, DragAction.MOVE):
            candidate_end = add_days(state.original_end, delta)

        return state.model_copy(
            update={
                "last_days_delta": delta,
                "candidate_start": candidate_start,
                "candidate_end": candidate_end,
            }
        )

    def commit(
        self,
        state: DragState,
        phases: Optional[Sequence[Phase]] = None,
    ) -> tuple[DragState, Optional[PhaseUpdate]]:
        """
        Finish the drag.

        Returns the committed state and the update to persist, or None when
        the boundary did not move. Moving a deadline keeps end_date and
        due_date in sync.

        Raises:
            OverlapViolationError: If phases are given and the update would overlap
        """
        if not state.is_active:
            return state, None

        committed = state.model_copy(update={"status": DragStatus.COMMITTED})
        if not state.has_changed:
            return committed, None

        update = PhaseUpdate(
            start_date=(
                state.candidate_start
                if state.action in (DragAction.RESIZE_START, DragAction.MOVE)
                else None
            ),
            end_date=(
                state.candidate_end
                if state.action in (DragAction.RESIZE_END, DragAction.MOVE)
                else None
            ),
            due_date=(
                state.candidate_end
                if state.action in (DragAction.RESIZE_END, DragAction.MOVE)
                else None
            ),
        )

        if phases is not None:
            fields = update.as_fields()
            fields.pop("due_date", None)
            updated = [
                phase.model_copy(update=fields) if phase.id == state.phase_id else phase
                for phase in phases
            ]
            self.validate_no_overlap(updated)

        logger.debug(f"Drag commit on {state.phase_id}: {update.as_fields()}")
        return committed, update

    @staticmethod
    def cancel(state: DragState) -> DragState:
        if not state.is_active:
            return state
        return state.model_copy(
            update={
                "status": DragStatus.CANCELLED,
                "last_days_delta": 0,
                "candidate_start": state.original_start,
                "candidate_end": state.original_end,
            }
        )
