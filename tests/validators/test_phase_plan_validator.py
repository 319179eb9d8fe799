"""Tests for the phase plan validator."""

from __future__ import annotations

from typing import List

from phaseplan.config import PlannerConfig
from phaseplan.models import DynamicPhase, Feature, FeatureClassification
from phaseplan.validators import (
    FeatureCoverageCheck,
    PhasePlanValidator,
    PlanValidation,
    TokenBudgetCheck,
)


def _phase(number: int, dependencies: List[int] | None = None, tokens: int = 1000) -> DynamicPhase:
    return DynamicPhase(
        number=number,
        name=f"Phase {number}",
        description="",
        domain="feature",
        dependencies=dependencies or [],
        estimated_tokens=tokens,
    )


def _with_feature(phase: DynamicPhase) -> DynamicPhase:
    phase.feature_details = [
        FeatureClassification(
            feature=Feature(id="f1", name="Calendar View"),
            domain="feature",
            complexity="moderate",
            estimated_tokens=2000,
            requires_own_phase=False,
            suggested_phase_name="Calendar View",
        )
    ]
    return phase


def test_valid_plan_passes() -> None:
    phases = [_phase(1), _with_feature(_phase(2, [1])), _phase(3, [2])]

    result = PhasePlanValidator().validate(phases)

    assert result.is_valid is True
    assert result.errors == []
    assert result.warnings == []


def test_too_few_phases_is_an_error() -> None:
    config = PlannerConfig(min_phases=3)

    result = PhasePlanValidator(config).validate([_phase(1), _with_feature(_phase(2, [1]))])

    assert result.is_valid is False
    assert result.errors == ["Too few phases: 2 (minimum: 3)"]


def test_high_phase_count_is_a_warning() -> None:
    config = PlannerConfig(max_phases=2)
    phases = [_phase(1), _with_feature(_phase(2, [1])), _phase(3, [2])]

    result = PhasePlanValidator(config).validate(phases)

    assert result.is_valid is True
    assert result.warnings == ["High phase count: 3 (recommended max: 2)"]


def test_cycle_and_forward_dependency_are_errors() -> None:
    phases = [_phase(1, [2]), _with_feature(_phase(2, [1]))]

    result = PhasePlanValidator().validate(phases)

    assert result.is_valid is False
    assert "Circular dependency detected involving phase 1" in result.errors
    assert "Phase 1 (Phase 1) depends on non-preceding phases: 2" in result.errors


def test_numbering_gap_is_an_error() -> None:
    phases = [_phase(1), _with_feature(_phase(3, [1]))]

    result = PhasePlanValidator().validate(phases)

    assert result.errors == ["Phase numbers are not contiguous from 1: [1, 3]"]


def test_token_budget_warns_above_one_and_a_half_times_cap() -> None:
    check = TokenBudgetCheck(PlannerConfig(max_tokens_per_phase=8000))

    result = check.check([_phase(1, tokens=12000), _phase(2, [1], tokens=12001)])

    assert result.is_valid is True
    assert result.warnings == ["Phase 2 (Phase 2) may exceed context limits: 12001 tokens"]


def test_feature_coverage_warning() -> None:
    result = FeatureCoverageCheck().check([_phase(1), _phase(2, [1])])

    assert result.warnings == ["No features were included in the phase plan"]


def test_custom_checks_are_merged() -> None:
    class _AlwaysFails:
        name = "always_fails"

        def check(self, phases):
            return PlanValidation(is_valid=False, errors=["nope"], warnings=["careful"])

    validator = PhasePlanValidator(checks=[_AlwaysFails(), FeatureCoverageCheck()])

    result = validator.validate([_phase(1)])

    assert result.is_valid is False
    assert result.errors == ["nope"]
    assert result.warnings == ["careful", "No features were included in the phase plan"]
