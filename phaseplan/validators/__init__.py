"""Validation package for generated phase plans."""

from .base import PlanCheck, PlanValidation
from .phase_plan import (
    CycleCheck,
    FeatureCoverageCheck,
    NumberingCheck,
    PhaseCountCheck,
    PhasePlanValidator,
    TokenBudgetCheck,
)

__all__ = [
    "CycleCheck",
    "FeatureCoverageCheck",
    "NumberingCheck",
    "PhaseCountCheck",
    "PhasePlanValidator",
    "PlanCheck",
    "PlanValidation",
    "TokenBudgetCheck",
]
