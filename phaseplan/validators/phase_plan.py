"""Validators that enforce the structural invariants of a phase plan."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from ..config import PlannerConfig
from ..logging import get_logger
from ..models import DynamicPhase
from ..planning.dependencies import find_cycles
from .base import PlanCheck, PlanValidation

# Phases may run over the soft token budget by this factor before a warning.
_CONTEXT_OVERRUN_FACTOR = 1.5


class PhaseCountCheck:
    name = "phase_count"

    def __init__(self, config: PlannerConfig) -> None:
        self.config = config

    def check(self, phases: Sequence[DynamicPhase]) -> PlanValidation:
        errors: List[str] = []
        warnings: List[str] = []
        count = len(phases)
        if count < self.config.min_phases:
            errors.append(f"Too few phases: {count} (minimum: {self.config.min_phases})")
        if count > self.config.max_phases:
            warnings.append(f"High phase count: {count} (recommended max: {self.config.max_phases})")
        return PlanValidation(is_valid=not errors, errors=errors, warnings=warnings)


class CycleCheck:
    name = "cycles"

    def check(self, phases: Sequence[DynamicPhase]) -> PlanValidation:
        errors = [
            f"Circular dependency detected involving phase {number}"
            for number in find_cycles(phases)
        ]
        return PlanValidation(is_valid=not errors, errors=errors)


class NumberingCheck:
    """Phase numbers run 1..N and every dependency points strictly backwards."""

    name = "numbering"

    def check(self, phases: Sequence[DynamicPhase]) -> PlanValidation:
        errors: List[str] = []
        numbers = [phase.number for phase in phases]
        if numbers != list(range(1, len(phases) + 1)):
            errors.append(f"Phase numbers are not contiguous from 1: {numbers}")
        for phase in phases:
            forward = [dep for dep in phase.dependencies if dep >= phase.number]
            if forward:
                joined = ", ".join(str(dep) for dep in forward)
                errors.append(
                    f"Phase {phase.number} ({phase.name}) depends on non-preceding phases: {joined}"
                )
        return PlanValidation(is_valid=not errors, errors=errors)


class TokenBudgetCheck:
    name = "token_budget"

    def __init__(self, config: PlannerConfig) -> None:
        self.config = config

    def check(self, phases: Sequence[DynamicPhase]) -> PlanValidation:
        limit = self.config.max_tokens_per_phase * _CONTEXT_OVERRUN_FACTOR
        warnings = [
            f"Phase {phase.number} ({phase.name}) may exceed context limits: "
            f"{phase.estimated_tokens} tokens"
            for phase in phases
            if phase.estimated_tokens > limit
        ]
        return PlanValidation(is_valid=True, warnings=warnings)


class FeatureCoverageCheck:
    """Warns when no phase carries a classified feature."""

    name = "feature_coverage"

    def check(self, phases: Sequence[DynamicPhase]) -> PlanValidation:
        if any(phase.feature_details for phase in phases):
            return PlanValidation(is_valid=True)
        return PlanValidation(
            is_valid=True, warnings=["No features were included in the phase plan"]
        )


class PhasePlanValidator:
    """Runs every plan check and folds the results into one outcome."""

    def __init__(
        self,
        config: PlannerConfig | None = None,
        *,
        checks: Optional[Iterable[PlanCheck]] = None,
    ) -> None:
        self.config = config or PlannerConfig()
        self.logger = get_logger("validators.phase_plan")
        if checks is None:
            checks = (
                PhaseCountCheck(self.config),
                CycleCheck(),
                NumberingCheck(),
                TokenBudgetCheck(self.config),
                FeatureCoverageCheck(),
            )
        self.checks: List[PlanCheck] = list(checks)

    def validate(self, phases: Sequence[DynamicPhase]) -> PlanValidation:
        result = PlanValidation(is_valid=True)
        for check in self.checks:
            outcome = check.check(phases)
            if outcome.errors:
                self.logger.debug("Check %s reported %d errors", check.name, len(outcome.errors))
            result = result.merge(outcome)
        return result


__all__ = [
    "CycleCheck",
    "FeatureCoverageCheck",
    "NumberingCheck",
    "PhaseCountCheck",
    "PhasePlanValidator",
    "TokenBudgetCheck",
]
