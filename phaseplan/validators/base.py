"""Core validation data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Protocol, Sequence

from ..models import DynamicPhase


@dataclass
class PlanValidation:
    """Outcome of validating a phase list: errors are fatal, warnings are not."""

    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def merge(self, other: "PlanValidation") -> "PlanValidation":
        errors = self.errors + other.errors
        return PlanValidation(
            is_valid=not errors,
            errors=errors,
            warnings=self.warnings + other.warnings,
        )


class PlanCheck(Protocol):
    """Protocol implemented by individual plan checks."""

    name: str

    def check(self, phases: Sequence[DynamicPhase]) -> PlanValidation:
        """Inspect the phases and report errors/warnings."""


__all__ = ["PlanCheck", "PlanValidation"]
