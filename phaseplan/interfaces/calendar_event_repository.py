"""
Calendar event repository interface.

Defines the contract for reading events that count as planned project time.
"""

from abc import ABC, abstractmethod

from phaseplan.models.project import CalendarEvent
from phaseplan.models.schedule import DateRange


class ICalendarEventRepository(ABC):
    """Interface for calendar event lookups."""

    @abstractmethod
    async def list_by_project(
        self, project_id: str, window: DateRange
    ) -> list[CalendarEvent]:
        """List a project's events overlapping the window."""
        pass
