"""Phase dependency derivation and cycle detection."""

from __future__ import annotations

from typing import Dict, List, Sequence, Set

from ..logging import get_logger
from ..models import DynamicPhase
from .constants import AUTH_DEPENDENT_DOMAINS, AUTH_PHASE_NAME, DATABASE_PHASE_NAME, SETUP_PHASE_NAME


class DependencyResolver:
    """Fills ``dependencies``/``dependency_names`` on an ordered phase list."""

    def __init__(self) -> None:
        self.logger = get_logger("planning.dependencies")

    def resolve(self, phases: Sequence[DynamicPhase]) -> None:
        by_name: Dict[str, int] = {}
        for phase in phases:
            by_name[phase.name] = phase.number
            by_name[phase.domain] = phase.number

        database = next((p for p in phases if p.domain == "database"), None)
        auth = next((p for p in phases if p.domain == "auth"), None)

        for phase in sorted(phases, key=lambda p: p.number):
            # Setup has no dependencies; polish keeps its single-predecessor edge.
            if phase.number == 1 or phase.domain == "polish":
                continue

            deps: Set[int] = set(d for d in phase.dependencies if d < phase.number)
            names: Dict[str, None] = dict.fromkeys(phase.dependency_names)

            deps.add(1)
            names.setdefault(SETUP_PHASE_NAME, None)

            for item in phase.feature_details:
                for dep_name in item.dependencies:
                    target = by_name.get(dep_name)
                    if target is not None and target < phase.number:
                        deps.add(target)
                        names.setdefault(dep_name, None)

            if phase.domain not in ("setup", "database"):
                if database is not None and database.number < phase.number:
                    deps.add(database.number)
                    names.setdefault(DATABASE_PHASE_NAME, None)

            if phase.domain in AUTH_DEPENDENT_DOMAINS:
                if auth is not None and auth.number < phase.number:
                    deps.add(auth.number)
                    names.setdefault(AUTH_PHASE_NAME, None)

            phase.dependencies = sorted(deps)
            phase.dependency_names = list(names)

        self.logger.debug("Resolved dependencies for %d phases", len(phases))


def find_cycles(phases: Sequence[DynamicPhase]) -> List[int]:
    """Return phase numbers from which a back edge was found during DFS."""
    lookup = {phase.number: phase for phase in phases}
    visited: Set[int] = set()
    on_stack: Set[int] = set()

    def has_cycle(number: int) -> bool:
        visited.add(number)
        on_stack.add(number)
        phase = lookup.get(number)
        if phase is not None:
            for dep in phase.dependencies:
                if dep not in visited:
                    if has_cycle(dep):
                        return True
                elif dep in on_stack:
                    return True
        on_stack.discard(number)
        return False

    involved: List[int] = []
    for phase in phases:
        if phase.number not in visited and has_cycle(phase.number):
            involved.append(phase.number)
    return involved


__all__ = ["DependencyResolver", "find_cycles"]
