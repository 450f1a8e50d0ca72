"""
Schedule settings repository interface.

Defines the contract for reading the weekly work schedule and holidays.
"""

from abc import ABC, abstractmethod

from phaseplan.models.schedule import Holiday, WeeklySchedule


class IScheduleSettingsRepository(ABC):
    """Interface for schedule settings lookups."""

    @abstractmethod
    async def get_weekly_schedule(self) -> WeeklySchedule:
        """Get the weekly work-hour schedule."""
        pass

    @abstractmethod
    async def list_holidays(self) -> list[Holiday]:
        """List all holiday ranges."""
        pass
