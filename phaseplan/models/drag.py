"""
Drag models for phase boundary resizing.

A drag is an explicit finite-state value passed through start/move/commit;
each transition returns a new DragState.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict

from phaseplan.models.enums import DragAction, DragStatus, TimelineMode


class PhaseBounds(BaseModel):
    """Permissible range for the active boundary. None means unbounded."""

    model_config = ConfigDict(frozen=True)

    min_date: Optional[date] = None
    max_date: Optional[date] = None


class DragState(BaseModel):
    """Single in-flight drag."""

    model_config = ConfigDict(frozen=True)

    status: DragStatus = DragStatus.IDLE
    project_id: Optional[str] = None
    phase_id: Optional[str] = None
    action: Optional[DragAction] = None
    mode: TimelineMode = TimelineMode.DAYS
    origin_x: float = 0.0
    original_start: Optional[date] = None
    original_end: Optional[date] = None
    bounds: PhaseBounds = PhaseBounds()
    last_days_delta: int = 0
    candidate_start: Optional[date] = None
    candidate_end: Optional[date] = None

    @property
    def is_active(self) -> bool:
        return self.status == DragStatus.RESIZING

    @property
    def has_changed(self) -> bool:
        return (
            self.candidate_start != self.original_start
            or self.candidate_end != self.original_end
        )
