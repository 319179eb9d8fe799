"""Planning entry point: concept in, validated phase plan out."""

from __future__ import annotations

import math
import random
import re
import string
from datetime import UTC, datetime
from typing import Callable, List, Mapping, Sequence

from .config import ContextConfig, PlannerConfig
from .errors import PlanValidationError
from .failsafe import build_failure_result
from .logging import get_logger
from .models import (
    AnalysisDetails,
    AppConcept,
    DynamicPhase,
    DynamicPhasePlan,
    FeatureClassification,
    PlanResult,
)
from .planning import DependencyResolver, FeatureClassifier, PhaseBuilder, group_by_domain
from .rag import ContextEnricher
from .validators import PhasePlanValidator

_LEADING_NUMBER = re.compile(r"(\d+)")
_DEFAULT_PHASE_MINUTES = 3
_ID_ALPHABET = string.ascii_lowercase + string.digits


def plan_complexity(phase_count: int) -> str:
    """Overall tier, derived from the number of phases only."""
    if phase_count <= 3:
        return "simple"
    if phase_count <= 6:
        return "moderate"
    if phase_count <= 12:
        return "complex"
    return "enterprise"


def estimate_total_time(phases: Sequence[DynamicPhase]) -> str:
    total = 0
    for phase in phases:
        match = _LEADING_NUMBER.search(phase.estimated_time or "")
        total += int(match.group(1)) if match else _DEFAULT_PHASE_MINUTES
    return f"{total}-{total + len(phases) * 2} min"


def analysis_details(
    classifications: Sequence[FeatureClassification],
    grouped: Mapping[str, Sequence[FeatureClassification]],
) -> AnalysisDetails:
    total_tokens = sum(item.estimated_tokens for item in classifications)
    # +2 accounts for the setup and polish phases.
    per_phase = total_tokens / max(1, len(grouped) + 2)
    return AnalysisDetails(
        total_features=len(classifications),
        complex_features=sum(1 for item in classifications if item.complexity == "complex"),
        domain_breakdown={domain: len(items) for domain, items in grouped.items()},
        estimated_context_per_phase=int(math.floor(per_phase + 0.5)),
    )


class PhasePlanner:
    """Runs classification through validation and assembles the final plan.

    The planner holds configuration only; every call to :meth:`generate_plan`
    builds its own intermediate state, so one instance can serve concurrent
    requests.
    """

    def __init__(
        self,
        config: PlannerConfig | None = None,
        context_config: ContextConfig | None = None,
        *,
        clock: Callable[[], datetime] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.config = config or PlannerConfig()
        self.context_config = context_config or ContextConfig()
        self.classifier = FeatureClassifier(self.config)
        self.builder = PhaseBuilder(self.config)
        self.resolver = DependencyResolver()
        self.validator = PhasePlanValidator(self.config)
        self.enricher = ContextEnricher(self.context_config)
        self.logger = get_logger("planner")
        self._clock = clock or (lambda: datetime.now(UTC))
        self._rng = rng or random.Random()

    def generate_plan(self, concept: AppConcept) -> PlanResult:
        """Return a ``PlanResult``; failures are reported, never raised."""
        warnings: List[str] = []
        try:
            self.logger.info("Planning phases for %s", concept.name)
            classifications = self.classifier.classify_all(concept.core_features)
            implicit = self.classifier.implicit_features(concept.technical)
            from_layout = self.classifier.layout_features(concept.layout_manifest)
            everything = classifications + implicit + from_layout
            self.logger.debug(
                "Classified %d explicit, %d implicit, %d layout features",
                len(classifications),
                len(implicit),
                len(from_layout),
            )

            grouped = group_by_domain(everything)
            details = analysis_details(everything, grouped)
            self.logger.debug("Grouped features into %d domains", len(grouped))

            phases = self.builder.build(grouped, concept)
            self.resolver.resolve(phases)

            validation = self.validator.validate(phases)
            for warning in validation.warnings:
                self.logger.warning(warning)
            if not validation.is_valid:
                self.logger.error("Phase plan failed validation: %s", "; ".join(validation.errors))
                return PlanResult(
                    success=False,
                    error="; ".join(validation.errors),
                    warnings=list(validation.warnings),
                    analysis_details=details,
                )
            warnings.extend(validation.warnings)

            for phase in phases:
                self.enricher.enrich_phase(phase, concept)

            plan = self._create_plan(phases, concept)
            self.logger.info(
                "Planned %d phases (%s, ~%d tokens)",
                plan.total_phases,
                plan.complexity,
                plan.estimated_total_tokens,
            )
            return PlanResult(success=True, plan=plan, warnings=warnings, analysis_details=details)
        except Exception as exc:  # noqa: BLE001 - reported through PlanResult
            self.logger.exception("Phase planning failed for %s", getattr(concept, "name", "?"))
            return build_failure_result(concept, exc, warnings)

    def require_plan(self, concept: AppConcept) -> DynamicPhasePlan:
        """Like :meth:`generate_plan` but raises ``PlanValidationError`` on failure."""
        result = self.generate_plan(concept)
        if not result.success or result.plan is None:
            raise PlanValidationError(
                result.error or "Phase planning failed",
                errors=[result.error] if result.error else [],
                warnings=result.warnings,
            )
        return result.plan

    def _create_plan(self, phases: List[DynamicPhase], concept: AppConcept) -> DynamicPhasePlan:
        now = self._clock()
        timestamp = isoformat_utc(now)
        return DynamicPhasePlan(
            id=self._plan_id(now),
            app_name=concept.name,
            app_description=concept.description,
            total_phases=len(phases),
            phases=phases,
            estimated_total_time=estimate_total_time(phases),
            estimated_total_tokens=sum(phase.estimated_tokens for phase in phases),
            complexity=plan_complexity(len(phases)),
            created_at=timestamp,
            updated_at=timestamp,
            concept=concept,
        )

    def _plan_id(self, now: datetime) -> str:
        millis = int(now.timestamp() * 1000)
        suffix = "".join(self._rng.choice(_ID_ALPHABET) for _ in range(7))
        return f"plan-{millis}-{suffix}"


def generate_phase_plan(
    concept: AppConcept,
    config: PlannerConfig | None = None,
    context_config: ContextConfig | None = None,
) -> PlanResult:
    """Plan ``concept`` with a throwaway planner."""
    return PhasePlanner(config, context_config).generate_plan(concept)


def isoformat_utc(moment: datetime) -> str:
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


__all__ = [
    "PhasePlanner",
    "analysis_details",
    "estimate_total_time",
    "generate_phase_plan",
    "isoformat_utc",
    "plan_complexity",
]
