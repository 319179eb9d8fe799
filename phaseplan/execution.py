"""Tracks execution of a phase plan, one phase at a time."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Callable, List, Optional, Sequence

from .codegen import extract_file_paths, parse_generated_files
from .context import IncrementalCodeContextBuilder
from .errors import PhaseNotFoundError, PhasePlanError
from .logging import get_logger
from .models import (
    AccumulatedFile,
    APIContract,
    DynamicPhase,
    DynamicPhasePlan,
    PhaseExecutionResult,
    TechnicalRequirements,
)
from .planner import isoformat_utc
from .prompting import PhasePrompt, PhasePromptBuilder

_DONE_STATUSES = ("completed", "skipped")


@dataclass
class ExecutionProgress:
    completed: int
    total: int
    percentage: int
    current_phase: Optional[DynamicPhase] = None


@dataclass
class PhaseExecutionContext:
    """Everything the external driver needs to run one phase."""

    phase: DynamicPhase
    total_phases: int
    app_name: str
    app_description: str
    app_type: str
    technical: TechnicalRequirements
    completed_phases: List[int] = field(default_factory=list)
    cumulative_features: List[str] = field(default_factory=list)
    cumulative_files: List[str] = field(default_factory=list)
    previous_phase_code: Optional[str] = None
    code_context: str = ""
    accumulated_files: List[AccumulatedFile] = field(default_factory=list)
    api_contracts: List[APIContract] = field(default_factory=list)
    established_patterns: List[str] = field(default_factory=list)

    @property
    def phase_number(self) -> int:
        return self.phase.number


class PhaseExecutionManager:
    """Applies driver-reported results to a plan and serves per-phase context.

    The manager never runs anything itself; scheduling, retries and timeouts
    stay with the caller.
    """

    def __init__(
        self,
        plan: DynamicPhasePlan,
        context_builder: IncrementalCodeContextBuilder | None = None,
        *,
        prompt_builder: PhasePromptBuilder | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.plan = plan
        self.context_builder = context_builder or IncrementalCodeContextBuilder()
        self.prompt_builder = prompt_builder or PhasePromptBuilder()
        self.logger = get_logger("execution")
        self._clock = clock or (lambda: datetime.now(UTC))
        self._previous_code: Optional[str] = None

    # ------------------------------------------------------------------
    # Lookup

    def get_phase(self, number: int) -> DynamicPhase:
        phase = self.plan.get_phase(number)
        if phase is None:
            raise PhaseNotFoundError(number)
        return phase

    def dependencies_met(self, phase: DynamicPhase) -> bool:
        return all(self.get_phase(dep).status == "completed" for dep in phase.dependencies)

    def next_phase(self) -> Optional[DynamicPhase]:
        """First pending phase whose dependencies have all completed."""
        for phase in self.plan.phases:
            if phase.status == "pending" and self.dependencies_met(phase):
                return phase
        return None

    # ------------------------------------------------------------------
    # State transitions

    def start_phase(self, number: int) -> DynamicPhase:
        phase = self.get_phase(number)
        if phase.status != "pending":
            raise PhasePlanError(f"Phase {number} is {phase.status}, not pending")
        if not self.dependencies_met(phase):
            waiting = [
                dep for dep in phase.dependencies if self.get_phase(dep).status != "completed"
            ]
            raise PhasePlanError(f"Phase {number} is waiting on phases {waiting}")
        phase.status = "in-progress"
        self.plan.current_phase_number = number
        self._touch()
        self.logger.info("Started phase %d: %s", number, phase.name)
        return phase

    def record_phase_result(self, result: PhaseExecutionResult) -> DynamicPhase:
        phase = self.get_phase(result.phase_number)
        if not result.success:
            phase.status = "failed"
            phase.errors = list(result.errors)
            if result.phase_number not in self.plan.failed_phase_numbers:
                self.plan.failed_phase_numbers.append(result.phase_number)
            self._touch()
            self.logger.warning(
                "Phase %d (%s) failed: %s",
                phase.number,
                phase.name,
                "; ".join(result.errors) or "no error detail",
            )
            return phase

        generated = parse_generated_files(result.generated_code)
        file_paths = list(result.generated_files) or extract_file_paths(result.generated_code)
        features = list(result.implemented_features) or extract_implemented_features(
            result.generated_code, phase.features
        )

        phase.status = "completed"
        phase.completed_at = isoformat_utc(self._clock())
        phase.generated_code = result.generated_code
        phase.errors = []

        if result.phase_number not in self.plan.completed_phase_numbers:
            self.plan.completed_phase_numbers.append(result.phase_number)
        if result.phase_number in self.plan.failed_phase_numbers:
            self.plan.failed_phase_numbers.remove(result.phase_number)
        self.plan.accumulated_files.extend(file_paths)
        self.plan.accumulated_features.extend(features)
        self.plan.current_phase_number = result.phase_number + 1
        self._previous_code = result.generated_code or None

        if generated:
            self.context_builder.record_phase(result.phase_number, generated)
        self._touch()
        self.logger.info(
            "Completed phase %d (%s): %d files, %d features",
            phase.number,
            phase.name,
            len(file_paths),
            len(features),
        )
        return phase

    def skip_phase(self, number: int) -> DynamicPhase:
        phase = self.get_phase(number)
        phase.status = "skipped"
        self._touch()
        return phase

    def reset_phase(self, number: int) -> DynamicPhase:
        """Make a phase pending again so it can be retried."""
        phase = self.get_phase(number)
        phase.status = "pending"
        phase.errors = []
        self.plan.failed_phase_numbers = [n for n in self.plan.failed_phase_numbers if n != number]
        self._touch()
        return phase

    # ------------------------------------------------------------------
    # Reporting

    def is_complete(self) -> bool:
        return all(phase.status in _DONE_STATUSES for phase in self.plan.phases)

    def progress(self) -> ExecutionProgress:
        completed = len(self.plan.completed_phase_numbers)
        total = self.plan.total_phases
        current = next((p for p in self.plan.phases if p.status == "in-progress"), None)
        percentage = int(completed * 100 / total + 0.5) if total else 0
        return ExecutionProgress(
            completed=completed, total=total, percentage=percentage, current_phase=current
        )

    def execution_context(self, number: int) -> PhaseExecutionContext:
        phase = self.get_phase(number)
        technical = self.plan.concept.technical
        return PhaseExecutionContext(
            phase=phase,
            total_phases=self.plan.total_phases,
            app_name=self.plan.app_name,
            app_description=self.plan.app_description,
            app_type="full-stack" if technical.needs_database else "frontend",
            technical=technical,
            completed_phases=list(self.plan.completed_phase_numbers),
            cumulative_features=list(self.plan.accumulated_features),
            cumulative_files=list(self.plan.accumulated_files),
            previous_phase_code=self._previous_code,
            code_context=self.context_builder.build_phase_context(),
            accumulated_files=self.context_builder.accumulated_files,
            api_contracts=self.context_builder.api_contracts,
            established_patterns=self.context_builder.established_patterns,
        )

    def build_prompt(self, number: int) -> PhasePrompt:
        context = self.execution_context(number)
        return self.prompt_builder.build(
            self.plan,
            context.phase,
            code_context=context.code_context,
            accumulated_files=context.accumulated_files,
            api_contracts=context.api_contracts,
            patterns=context.established_patterns,
        )

    def _touch(self) -> None:
        self.plan.updated_at = isoformat_utc(self._clock())


def extract_implemented_features(code: str, expected: Sequence[str]) -> List[str]:
    """Features whose name has a word longer than three characters in ``code``."""
    lowered = code.lower()
    return [
        feature
        for feature in expected
        if any(len(word) > 3 and word in lowered for word in feature.lower().split())
    ]


__all__ = [
    "ExecutionProgress",
    "PhaseExecutionContext",
    "PhaseExecutionManager",
    "extract_implemented_features",
]
