"""
Unit tests for BudgetValidator.
"""

from datetime import date

import pytest

from phaseplan.models.phase import FixedPhase, RecurrenceConfig, RecurringPhase
from phaseplan.models.schedule import DateRange
from phaseplan.services.budget_service import BudgetValidator


def make_phase(phase_id: str, hours: float) -> FixedPhase:
    return FixedPhase(
        id=phase_id, project_id="p1", end_date=date(2025, 1, 15), time_allocation=hours
    )


def make_template(hours: float = 3.0) -> RecurringPhase:
    return RecurringPhase(
        id="tpl",
        project_id="p1",
        time_allocation=hours,
        config=RecurrenceConfig(type="weekly", weekly_day_of_week=1),
    )


class TestValidate:
    def test_within_budget(self):
        result = BudgetValidator().validate(
            [make_phase("a", 20), make_phase("b", 30), make_phase("c", 20)], 100
        )
        assert result.is_valid is True
        assert result.total_allocated == 70
        assert result.utilization == pytest.approx(70.0)
        assert result.remaining == 30
        assert result.overage is None
        assert result.recommendations == []

    def test_overage_reported_not_raised(self):
        result = BudgetValidator().validate([make_phase("a", 60), make_phase("b", 50)], 100)
        assert result.is_valid is False
        assert result.overage == pytest.approx(10)
        assert result.remaining == pytest.approx(-10)
        assert result.recommendations[0].startswith("Budget exceeded by 10.0h.")

    def test_exclude_phase(self):
        result = BudgetValidator().validate(
            [make_phase("a", 60), make_phase("b", 50)], 100, exclude_phase_id="b"
        )
        assert result.is_valid is True
        assert result.total_allocated == 60

    def test_high_utilization(self):
        result = BudgetValidator().validate(
            [make_phase("a", 30), make_phase("b", 32), make_phase("c", 33)], 100
        )
        assert any("utilization high" in r for r in result.recommendations)

    def test_low_utilization(self):
        result = BudgetValidator().validate([make_phase("a", 10), make_phase("b", 10)], 100)
        assert any("utilization low" in r for r in result.recommendations)

    def test_small_allocations(self):
        result = BudgetValidator().validate([make_phase("a", 0.5), make_phase("b", 0.5)], 1.2)
        assert any("Very small phase allocations" in r for r in result.recommendations)

    def test_dominant_phase(self):
        result = BudgetValidator().validate([make_phase("a", 60), make_phase("b", 10)], 100)
        assert any("Large phase allocations" in r for r in result.recommendations)

    def test_no_phases(self):
        result = BudgetValidator().validate([], 40)
        assert result.is_valid is True
        assert result.utilization == 0.0
        assert any("No phases defined" in r for r in result.recommendations)

    def test_zero_budget(self):
        result = BudgetValidator().validate([], 0)
        assert result.utilization == 0.0
        assert result.recommendations == []

    def test_recurring_template_bypasses_budget(self):
        result = BudgetValidator().validate([make_template()], 10)
        assert result.is_valid is True
        assert result.remaining == 0
        assert result.recommendations == []
        assert result.recurring_commitment is None

    def test_recurring_commitment_with_window(self):
        window = DateRange.create(date(2025, 1, 1), date(2025, 1, 31))
        result = BudgetValidator().validate([make_template(3.0)], 10, window=window)
        assert result.recurring_commitment == pytest.approx(12.0)


class TestHelpers:
    def test_can_accommodate(self):
        validator = BudgetValidator()
        phases = [make_phase("a", 60)]
        assert validator.can_accommodate(phases, 100, 40) is True
        assert validator.can_accommodate(phases, 100, 41) is False

    def test_can_accommodate_recurring(self):
        assert BudgetValidator().can_accommodate([make_template()], 0, 100) is True

    def test_suggest_phase_allocation(self):
        validator = BudgetValidator()
        assert validator.suggest_phase_allocation([make_phase("a", 20), make_phase("b", 20)], 100) == 30
        assert validator.suggest_phase_allocation([], 50) == 50
        assert validator.suggest_phase_allocation([make_phase("a", 120)], 100) == 0
