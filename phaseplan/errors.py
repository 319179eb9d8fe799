"""Exception hierarchy for phaseplan."""

from __future__ import annotations

from typing import Sequence


class PhasePlanError(RuntimeError):
    """Base class for all phaseplan failures."""


class ConfigError(PhasePlanError):
    """Raised when the configuration file cannot be parsed."""


class ConceptError(PhasePlanError):
    """Raised when a concept document is malformed."""


class PhaseNotFoundError(PhasePlanError, LookupError):
    """Raised when a phase number does not exist in the plan."""

    def __init__(self, number: int) -> None:
        super().__init__(f"Phase {number} not found in plan")
        self.number = number


class PlanValidationError(PhasePlanError):
    """Raised by the strict planner API when a plan fails validation."""

    def __init__(
        self,
        message: str,
        errors: Sequence[str] = (),
        warnings: Sequence[str] = (),
    ) -> None:
        super().__init__(message)
        self.errors = list(errors)
        self.warnings = list(warnings)


__all__ = [
    "ConceptError",
    "ConfigError",
    "PhaseNotFoundError",
    "PhasePlanError",
    "PlanValidationError",
]
