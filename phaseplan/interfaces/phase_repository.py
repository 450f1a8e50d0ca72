"""
Phase repository interface.

Defines the contract for phase data operations.
"""

from abc import ABC, abstractmethod

from phaseplan.models.phase import Phase, PhaseUpdate


class IPhaseRepository(ABC):
    """Interface for phase repository operations."""

    @abstractmethod
    async def list_by_project(self, project_id: str) -> list[Phase]:
        """
        List all phases (or the recurring template) of a project.

        Implementations build the result from stored records with
        `phaseplan.utils.phase_mapper.load_phases`.
        """
        pass

    @abstractmethod
    async def update(self, phase_id: str, update: PhaseUpdate) -> Phase:
        """Apply a boundary change. Raises NotFoundError if the phase is gone."""
        pass
