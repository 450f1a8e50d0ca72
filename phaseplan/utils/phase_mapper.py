"""
Phase record mapping.

Resolves raw phase records (as stored by the application, camelCase or
snake_case) into the FixedPhase / RecurringPhase tagged union once, at the
data-loading boundary. Downstream code switches on `kind` only.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

from pydantic import TypeAdapter

from phaseplan.core.exceptions import ValidationError
from phaseplan.models.phase import FixedPhase, Phase, RecurringPhase

_phase_adapter = TypeAdapter(Phase)

_CONFIG_FIELDS = {
    "type": "type",
    "interval": "interval",
    "weeklyDayOfWeek": "weekly_day_of_week",
    "monthlyPattern": "monthly_pattern",
    "monthlyDate": "monthly_date",
    "monthlyWeekOfMonth": "monthly_week_of_month",
    "monthlyDayOfWeek": "monthly_day_of_week",
}


def _pick(record: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if record.get(key) is not None:
            return record[key]
    return None


def _map_config(raw: dict[str, Any]) -> dict[str, Any]:
    config: dict[str, Any] = {}
    for camel, snake in _CONFIG_FIELDS.items():
        value = _pick(raw, snake, camel)
        if value is not None:
            config[snake] = value
    return config


def load_phase(record: dict[str, Any]) -> Phase:
    """
    Convert a stored phase record into a typed phase.

    `endDate` and `dueDate` are interchangeable deadlines; `endDate` wins when
    both are present. A record is a recurring template only when
    `isRecurring` is true.

    Raises:
        ValidationError: If a recurring record has no recurrence config
        pydantic.ValidationError: If field values are malformed
    """
    is_recurring = bool(_pick(record, "is_recurring", "isRecurring"))
    data: dict[str, Any] = {
        "id": str(_pick(record, "id")),
        "project_id": str(_pick(record, "project_id", "projectId")),
        "name": _pick(record, "name"),
        "start_date": _pick(record, "start_date", "startDate"),
        "end_date": _pick(record, "end_date", "endDate", "due_date", "dueDate"),
        "time_allocation": _pick(
            record, "time_allocation", "timeAllocationHours", "timeAllocation"
        )
        or 0.0,
    }

    if is_recurring:
        raw_config = _pick(record, "config", "recurring_config", "recurringConfig")
        if not raw_config:
            raise ValidationError(
                "Recurring phase must have recurrence configuration",
                details={"phase_id": data["id"]},
            )
        data["kind"] = "recurring"
        data["config"] = _map_config(raw_config)
    else:
        data["kind"] = "fixed"

    return _phase_adapter.validate_python(data)


def load_phases(records: Iterable[dict[str, Any]]) -> list[Phase]:
    """
    Convert a project's stored records, checking the per-project template invariant.

    This is the entry point for IPhaseRepository implementations; services
    receive already-typed phases from the repository.
    """
    phases = [load_phase(record) for record in records]
    partition_phases(phases)
    return phases


def partition_phases(
    phases: Iterable[Phase],
) -> tuple[list[FixedPhase], Optional[RecurringPhase]]:
    """
    Split phases into fixed phases and the recurring template.

    Raises:
        ValidationError: If a project has more than one template, or mixes a
            template with fixed phases
    """
    fixed: list[FixedPhase] = []
    templates: list[RecurringPhase] = []
    for phase in phases:
        if phase.kind == "recurring":
            templates.append(phase)
        else:
            fixed.append(phase)

    if len(templates) > 1:
        raise ValidationError(
            "A project can have at most one recurring template",
            details={"template_ids": [t.id for t in templates]},
        )
    if templates and fixed:
        raise ValidationError(
            "Recurring templates and fixed phases cannot be mixed within a project",
            details={"template_id": templates[0].id},
        )
    return fixed, (templates[0] if templates else None)
