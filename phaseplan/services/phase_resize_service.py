"""
Phase resize service.

Connects the drag state machine to the phase repository: a drag is started
against the project's current phases and its commit is persisted only when a
boundary actually moved.
"""

from __future__ import annotations

from typing import Optional

from phaseplan.core.exceptions import BusinessLogicError
from phaseplan.core.logger import setup_logger
from phaseplan.interfaces.phase_repository import IPhaseRepository
from phaseplan.models.drag import DragState
from phaseplan.models.enums import DragAction, TimelineMode
from phaseplan.models.phase import Phase
from phaseplan.models.schedule import DateRange
from phaseplan.services.boundary_resolver import BoundaryResolver

logger = setup_logger(__name__)


class PhaseResizeService:
    """Service for interactive phase boundary changes."""

    def __init__(
        self,
        phase_repo: IPhaseRepository,
        resolver: Optional[BoundaryResolver] = None,
    ):
        self.phase_repo = phase_repo
        self.resolver = resolver or BoundaryResolver()

    async def begin(
        self,
        project_id: str,
        phase_id: str,
        action: DragAction,
        mode: TimelineMode,
        origin_x: float,
        project_window: Optional[DateRange] = None,
    ) -> DragState:
        """
        Start a drag on a phase boundary.

        Raises:
            BusinessLogicError: If the project is driven by a recurring template
            NotFoundError: If the phase does not belong to the project
        """
        phases = await self.phase_repo.list_by_project(project_id)
        if any(phase.kind == "recurring" for phase in phases):
            raise BusinessLogicError(
                "Phases of a recurring project cannot be resized",
                details={"project_id": project_id, "phase_id": phase_id},
            )
        return self.resolver.start(
            phases, phase_id, action, mode, origin_x, project_window
        )

    def move(self, state: DragState, client_x: float) -> DragState:
        return self.resolver.move(state, client_x)

    def cancel(self, state: DragState) -> DragState:
        return self.resolver.cancel(state)

    async def commit(
        self,
        state: DragState,
        phases: Optional[list[Phase]] = None,
    ) -> tuple[DragState, Optional[Phase]]:
        """
        Finish a drag and persist the boundary change.

        Args:
            state: Active drag state
            phases: Current phases of the project (loaded when omitted)

        Returns:
            Tuple of (committed state, updated phase or None when nothing moved)

        Raises:
            OverlapViolationError: If the change would overlap a neighbour
        """
        if not state.is_active:
            return state, None

        if phases is None and state.project_id is not None:
            phases = await self.phase_repo.list_by_project(state.project_id)

        committed, update = self.resolver.commit(state, phases)
        if update is None:
            return committed, None

        updated = await self.phase_repo.update(state.phase_id, update)
        logger.info(
            f"Phase {state.phase_id} {state.action.value} committed: {update.as_fields()}"
        )
        return committed, updated
