"""
Fingerprints of calculation inputs.

Cache keys must change whenever an input that affects the result changes, so
each input is reduced to a short sha1 digest of its canonical JSON form.
"""

import hashlib
import json
from typing import Any, Iterable, Optional

from pydantic import BaseModel

from phaseplan.models.enums import Weekday
from phaseplan.models.project import CalendarEvent
from phaseplan.models.schedule import DateRange, Holiday, WeeklySchedule


def _digest(payload: Any) -> str:
    raw = json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha1(raw.encode("utf-8")).hexdigest()[:16]


def _dump(model: BaseModel) -> dict:
    return model.model_dump(mode="json")


def range_key(window: DateRange) -> str:
    return f"{window.start.isoformat()}..{window.end.isoformat()}"


def schedule_key(schedule: WeeklySchedule) -> str:
    """Only per-weekday hours affect working-day results."""
    return _digest({weekday.value: schedule.hours_for(weekday) for weekday in Weekday})


def holidays_key(holidays: Iterable[Holiday]) -> str:
    spans = sorted(
        (h.id, h.start_date.isoformat(), h.end_date.isoformat()) for h in holidays
    )
    return _digest(spans)


def exclusions_key(exclusions: Optional[Iterable[Weekday]]) -> str:
    if not exclusions:
        return "-"
    return ",".join(sorted(weekday.value for weekday in exclusions))


def phases_key(phases: Iterable[BaseModel]) -> str:
    return _digest(sorted((_dump(p) for p in phases), key=lambda item: item["id"]))


def events_key(events: Iterable[CalendarEvent]) -> str:
    return _digest(
        sorted(
            (e.id, e.project_id or "", e.start_time.isoformat(), e.end_time.isoformat(), e.category.value)
            for e in events
        )
    )
