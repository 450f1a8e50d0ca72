"""
Budget validator.

Checks phase allocations against the project budget and produces advisory
recommendations. Overage is reported in the result, never raised.
"""

from __future__ import annotations

from typing import Iterable, Optional

from phaseplan.core.config import get_settings
from phaseplan.models.budget import BudgetValidation
from phaseplan.models.phase import Phase
from phaseplan.models.schedule import DateRange
from phaseplan.services.recurrence_service import RecurrenceExpander
from phaseplan.utils.phase_mapper import partition_phases


class BudgetValidator:
    """Validates phase allocations against a project budget."""

    def __init__(self, recurrence: Optional[RecurrenceExpander] = None):
        self.recurrence = recurrence or RecurrenceExpander()
        self.settings = get_settings()

    def validate(
        self,
        phases: Iterable[Phase],
        project_budget: float,
        exclude_phase_id: Optional[str] = None,
        window: Optional[DateRange] = None,
    ) -> BudgetValidation:
        """
        Validate allocations.

        Args:
            phases: Project phases
            project_budget: Total budget in hours
            exclude_phase_id: Phase left out of the sum (the one being edited)
            window: Project window, used to size a recurring template's commitment

        Returns:
            BudgetValidation
        """
        relevant = [p for p in phases if p.id != exclude_phase_id]
        fixed, template = partition_phases(relevant)

        if template is not None:
            # Recurring commitments are open-ended; the fixed budget does not bind them.
            commitment = (
                self.recurrence.total_allocation(template, window)
                if window is not None
                else None
            )
            return BudgetValidation(
                is_valid=True,
                total_allocated=0.0,
                project_budget=project_budget,
                utilization=0.0,
                remaining=0.0,
                recommendations=[],
                recurring_commitment=commitment,
            )

        total = sum(phase.time_allocation for phase in fixed)
        overage = total - project_budget
        utilization = (total / project_budget * 100) if project_budget > 0 else 0.0

        return BudgetValidation(
            is_valid=total <= project_budget,
            total_allocated=total,
            project_budget=project_budget,
            utilization=utilization,
            remaining=project_budget - total,
            overage=overage if overage > 0 else None,
            recommendations=self._recommendations(fixed, project_budget, total, utilization),
        )

    def _recommendations(
        self,
        phases: list[Phase],
        project_budget: float,
        total: float,
        utilization: float,
    ) -> list[str]:
        settings = self.settings
        recommendations: list[str] = []

        if total > project_budget:
            recommendations.append(
                f"Budget exceeded by {total - project_budget:.1f}h. "
                "Consider reducing phase allocations or increasing project budget."
            )
        elif utilization > settings.BUDGET_HIGH_UTILIZATION_PERCENT:
            recommendations.append(
                f"Budget utilization high (>{settings.BUDGET_HIGH_UTILIZATION_PERCENT:g}%). "
                "Consider adding buffer time for unexpected work."
            )
        elif (
            project_budget > 0
            and utilization < settings.BUDGET_LOW_UTILIZATION_PERCENT
        ):
            recommendations.append(
                f"Budget utilization low (<{settings.BUDGET_LOW_UTILIZATION_PERCENT:g}%). "
                "Consider adding more phases or increasing detail."
            )

        if not phases:
            if project_budget > 0:
                recommendations.append(
                    "No phases defined. Consider breaking the project into phases."
                )
            return recommendations

        average = total / len(phases)
        largest = max(phase.time_allocation for phase in phases)
        if average < settings.MIN_AVERAGE_PHASE_HOURS:
            recommendations.append(
                "Very small phase allocations detected. Consider consolidating phases."
            )
        elif largest > project_budget * settings.PHASE_DOMINANCE_RATIO:
            recommendations.append(
                "Large phase allocations detected. Consider breaking down into smaller phases."
            )
        return recommendations

    def can_accommodate(
        self,
        phases: Iterable[Phase],
        project_budget: float,
        additional_hours: float,
    ) -> bool:
        """Whether the remaining budget covers another allocation."""
        fixed, template = partition_phases(phases)
        if template is not None:
            return True
        return self.validate(fixed, project_budget).remaining >= additional_hours

    def suggest_phase_allocation(
        self, phases: Iterable[Phase], project_budget: float
    ) -> float:
        """Remaining budget spread evenly over the existing phases."""
        phases = list(phases)
        result = self.validate(phases, project_budget)
        return max(0.0, result.remaining / max(1, len(phases)))
