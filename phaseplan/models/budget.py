"""
Budget validation result model.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class BudgetValidation(BaseModel):
    """Budget feasibility of a project's phase allocations.

    Overage is reported here, never raised: users may knowingly over-allocate.
    """

    model_config = ConfigDict(frozen=True)

    is_valid: bool
    total_allocated: float
    project_budget: float
    utilization: float = Field(..., description="Percent of budget allocated")
    remaining: float
    overage: Optional[float] = None
    recommendations: list[str] = Field(default_factory=list)
    recurring_commitment: Optional[float] = Field(
        None, description="Occurrence count x per-occurrence hours, recurring templates only"
    )
