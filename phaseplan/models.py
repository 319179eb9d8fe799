"""Core data models shared across phaseplan components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

PRIORITIES = ("high", "medium", "low")
COMPLEXITIES = ("simple", "moderate", "complex")
PHASE_STATUSES = ("pending", "in-progress", "completed", "failed", "skipped")


# ---------------------------------------------------------------------------
# Concept input


@dataclass(frozen=True)
class Feature:
    """One user-stated capability of the application."""

    id: str
    name: str
    description: str = ""
    priority: str = "medium"


@dataclass
class UserRole:
    """A user role and what it is allowed to do."""

    name: str
    capabilities: List[str] = field(default_factory=list)
    permissions: List[str] = field(default_factory=list)


@dataclass
class Workflow:
    """A named user journey described as ordered plain-text steps."""

    name: str
    description: str = ""
    steps: List[str] = field(default_factory=list)
    involved_roles: List[str] = field(default_factory=list)


@dataclass
class DataField:
    name: str
    type: str = "string"
    required: bool = False


@dataclass
class DataModel:
    name: str
    fields: List[DataField] = field(default_factory=list)


@dataclass
class UIPreferences:
    """Styling hints carried through as descriptive metadata only."""

    style: Optional[str] = None
    color_scheme: Optional[str] = None
    layout: Optional[str] = None
    primary_color: Optional[str] = None
    inspiration: Optional[str] = None


@dataclass
class TechnicalRequirements:
    """Boolean/enum flags describing the technical shape of the app."""

    needs_auth: bool = False
    auth_type: Optional[str] = None
    needs_database: bool = False
    needs_realtime: bool = False
    needs_file_upload: bool = False
    needs_api: bool = False
    needs_i18n: bool = False
    i18n_languages: List[str] = field(default_factory=list)
    needs_offline_support: bool = False
    needs_caching: bool = False
    needs_state_history: bool = False
    needs_context_persistence: bool = False
    state_complexity: Optional[str] = None
    data_models: List[DataModel] = field(default_factory=list)


@dataclass
class LayoutManifest:
    """Output of the layout builder: detected tags plus the node tree."""

    detected_features: List[str] = field(default_factory=list)
    root: Optional[Dict[str, Any]] = None
    design_system: Dict[str, Any] = field(default_factory=dict)


@dataclass
class AppConcept:
    """Natural-language description of the application to generate."""

    name: str
    description: str = ""
    purpose: str = ""
    target_users: str = ""
    core_features: List[Feature] = field(default_factory=list)
    technical: TechnicalRequirements = field(default_factory=TechnicalRequirements)
    ui_preferences: UIPreferences = field(default_factory=UIPreferences)
    roles: List[UserRole] = field(default_factory=list)
    conversation_context: str = ""
    layout_design: Optional[Dict[str, Any]] = None
    layout_manifest: Optional[LayoutManifest] = None
    workflows: List[Workflow] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Planning records


@dataclass(frozen=True)
class FeatureClassification:
    """A feature plus the planning metadata derived from it."""

    feature: Feature
    domain: str
    complexity: str
    estimated_tokens: int
    requires_own_phase: bool
    suggested_phase_name: str
    dependencies: tuple[str, ...] = ()
    keywords: tuple[str, ...] = ()


@dataclass
class FeatureSpecification:
    name: str
    user_stories: List[str] = field(default_factory=list)
    acceptance_criteria: List[str] = field(default_factory=list)
    technical_notes: List[str] = field(default_factory=list)
    priority: str = "medium"


@dataclass
class WorkflowStep:
    action: str
    actor: str = "User"


@dataclass
class WorkflowSpecification:
    """A workflow restated as trigger plus actor-attributed steps."""

    name: str
    trigger: str
    steps: List[WorkflowStep] = field(default_factory=list)
    error_handling: Optional[str] = None


@dataclass
class PhaseConceptContext:
    """The slice of the concept a single phase needs to stay consistent."""

    purpose: str = ""
    target_users: str = ""
    ui_preferences: Optional[UIPreferences] = None
    roles: List[UserRole] = field(default_factory=list)
    data_models: List[DataModel] = field(default_factory=list)
    layout_manifest: Optional[LayoutManifest] = None
    conversation_context: str = ""
    feature_specs: List[FeatureSpecification] = field(default_factory=list)
    technical_constraints: List[str] = field(default_factory=list)
    workflow_specs: List[WorkflowSpecification] = field(default_factory=list)


@dataclass
class DynamicPhase:
    """One bounded unit of planned generation work."""

    number: int
    name: str
    description: str
    domain: str
    features: List[str] = field(default_factory=list)
    feature_details: List[FeatureClassification] = field(default_factory=list)
    estimated_tokens: int = 0
    estimated_time: str = ""
    dependencies: List[int] = field(default_factory=list)
    dependency_names: List[str] = field(default_factory=list)
    test_criteria: List[str] = field(default_factory=list)
    status: str = "pending"
    concept_context: Optional[PhaseConceptContext] = None
    relevant_roles: List[str] = field(default_factory=list)
    generated_code: Optional[str] = None
    completed_at: Optional[str] = None
    errors: List[str] = field(default_factory=list)


@dataclass
class DynamicPhasePlan:
    """The full ordered plan plus execution-tracking state."""

    id: str
    app_name: str
    app_description: str
    total_phases: int
    phases: List[DynamicPhase]
    estimated_total_time: str
    estimated_total_tokens: int
    complexity: str
    created_at: str
    updated_at: str
    concept: AppConcept
    current_phase_number: int = 0
    completed_phase_numbers: List[int] = field(default_factory=list)
    failed_phase_numbers: List[int] = field(default_factory=list)
    accumulated_files: List[str] = field(default_factory=list)
    accumulated_features: List[str] = field(default_factory=list)

    def get_phase(self, number: int) -> Optional[DynamicPhase]:
        for phase in self.phases:
            if phase.number == number:
                return phase
        return None


@dataclass
class AnalysisDetails:
    total_features: int = 0
    complex_features: int = 0
    domain_breakdown: Dict[str, int] = field(default_factory=dict)
    estimated_context_per_phase: int = 0


@dataclass
class PlanResult:
    """Uniform outcome of a planning run; never raised, always returned."""

    success: bool
    plan: Optional[DynamicPhasePlan] = None
    error: Optional[str] = None
    warnings: List[str] = field(default_factory=list)
    analysis_details: AnalysisDetails = field(default_factory=AnalysisDetails)


# ---------------------------------------------------------------------------
# Generated code records


@dataclass(frozen=True)
class GeneratedFile:
    """A single `===FILE:<path>===` block from the code generator."""

    path: str
    content: str


@dataclass
class ImportInfo:
    symbols: List[str]
    source: str
    is_relative: bool


@dataclass
class AccumulatedFile:
    """Metadata derived from one generated file."""

    path: str
    type: str
    exports: List[str] = field(default_factory=list)
    dependencies: List[str] = field(default_factory=list)
    imports: List[ImportInfo] = field(default_factory=list)
    summary: str = ""
    phase_number: Optional[int] = None


@dataclass
class APIContract:
    """HTTP contract inferred heuristically from an API route file."""

    endpoint: str
    method: str
    authentication: bool
    request_schema: Optional[str] = None
    response_schema: Optional[str] = None
    source_file: Optional[str] = None


@dataclass
class PhaseExecutionResult:
    """Outcome reported by the external driver after running one phase."""

    phase_number: int
    phase_name: str
    success: bool
    generated_code: str = ""
    generated_files: List[str] = field(default_factory=list)
    implemented_features: List[str] = field(default_factory=list)
    duration: float = 0.0
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
