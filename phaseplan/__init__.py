"""Phase planning and context budgeting for multi-phase code generation."""

from .config import ContextConfig, PhasePlanConfig, PlannerConfig, TokenEstimates, load_config
from .concept import concept_from_dict, load_concept
from .errors import (
    ConceptError,
    ConfigError,
    PhaseNotFoundError,
    PhasePlanError,
    PlanValidationError,
)
from .execution import PhaseExecutionManager
from .models import AppConcept, DynamicPhase, DynamicPhasePlan, Feature, PlanResult
from .planner import PhasePlanner, generate_phase_plan

__version__ = "0.1.0"

__all__ = [
    "AppConcept",
    "ConceptError",
    "ConfigError",
    "ContextConfig",
    "DynamicPhase",
    "DynamicPhasePlan",
    "Feature",
    "PhaseExecutionManager",
    "PhaseNotFoundError",
    "PhasePlanConfig",
    "PhasePlanError",
    "PhasePlanner",
    "PlanResult",
    "PlanValidationError",
    "PlannerConfig",
    "TokenEstimates",
    "concept_from_dict",
    "generate_phase_plan",
    "load_concept",
    "load_config",
]
