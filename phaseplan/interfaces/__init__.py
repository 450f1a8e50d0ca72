"""Abstract interfaces for the collaborators the engine reads from."""

from phaseplan.interfaces.calendar_event_repository import ICalendarEventRepository
from phaseplan.interfaces.phase_repository import IPhaseRepository
from phaseplan.interfaces.schedule_settings_repository import IScheduleSettingsRepository

__all__ = [
    "ICalendarEventRepository",
    "IPhaseRepository",
    "IScheduleSettingsRepository",
]
