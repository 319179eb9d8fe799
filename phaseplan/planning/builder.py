"""Phase assembly: turns grouped classifications into an ordered phase list."""

from __future__ import annotations

import math
from typing import Dict, List, Mapping, Optional, Sequence

from ..config import PlannerConfig
from ..logging import get_logger
from ..models import (
    AppConcept,
    DynamicPhase,
    FeatureClassification,
    PhaseConceptContext,
    UserRole,
)
from .constants import (
    AUTH_PHASE_NAME,
    COMPLEXITY_ORDER,
    DATABASE_PHASE_NAME,
    DESIGN_SYSTEM_PHASE_NAME,
    DOMAIN_LABELS,
    DOMAIN_PRIORITY,
    POLISH_PHASE_NAME,
    PRIORITY_ORDER,
    SETUP_PHASE_NAME,
)

_TOKENS_PER_MINUTE = 1500
_MAX_FEATURE_CRITERIA = 6
_FIXED_PHASE_TIME = "2-3 min"

_DOMAIN_CRITERIA: Dict[str, Sequence[str]] = {
    "auth": (
        "Login flow works correctly",
        "Logout clears session",
        "Protected routes redirect unauthenticated users",
    ),
    "database": (
        "Schema is valid",
        "Types are generated",
        "Queries execute without errors",
    ),
    "storage": (
        "Files can be uploaded",
        "Files can be retrieved",
        "Invalid files are rejected",
    ),
    "real-time": (
        "WebSocket connection establishes",
        "Real-time updates are received",
        "Reconnection works on disconnect",
    ),
}


class PhaseBuilder:
    """Builds the fixed-structure phase sequence for a concept."""

    def __init__(self, config: PlannerConfig | None = None) -> None:
        self.config = config or PlannerConfig()
        self.logger = get_logger("planning.builder")

    def build(
        self,
        grouped: Mapping[str, Sequence[FeatureClassification]],
        concept: AppConcept,
    ) -> List[DynamicPhase]:
        remaining: Dict[str, List[FeatureClassification]] = {
            domain: list(items) for domain, items in grouped.items()
        }
        phases: List[DynamicPhase] = [self._setup_phase(1, concept)]

        if concept.layout_design:
            phases.append(self._design_system_phase(len(phases) + 1, concept))

        database = remaining.pop("database", None)
        if database:
            models = concept.technical.data_models
            description = "Set up database tables, types, and configuration"
            if models:
                description += f". Data models: {', '.join(m.name for m in models)}"
            phases.append(
                self._feature_phase(
                    len(phases) + 1, DATABASE_PHASE_NAME, description, "database", database, concept
                )
            )

        auth = remaining.pop("auth", None)
        if auth:
            description = f"Implement {concept.technical.auth_type or 'email'} authentication"
            if concept.roles:
                description += f". User roles: {', '.join(r.name for r in concept.roles)}"
            phases.append(
                self._feature_phase(
                    len(phases) + 1, AUTH_PHASE_NAME, description, "auth", auth, concept
                )
            )

        walk = [domain for domain in DOMAIN_PRIORITY if domain in remaining]
        walk += [domain for domain in remaining if domain not in DOMAIN_PRIORITY]
        for domain in walk:
            features = remaining[domain]
            if not features:
                continue
            for name, description, bucket in self.split_features_into_phases(features, domain):
                phases.append(
                    self._feature_phase(len(phases) + 1, name, description, domain, bucket, concept)
                )

        phases.append(self._polish_phase(len(phases) + 1, concept))
        self.logger.debug("Built %d phases", len(phases))
        return phases

    def split_features_into_phases(
        self,
        features: Sequence[FeatureClassification],
        domain: str,
    ) -> List[tuple[str, str, List[FeatureClassification]]]:
        """Greedily pack features into sub-phases of bounded size.

        Returns ``(name, description, features)`` tuples. The caps are checked
        before a feature is added, so one oversized feature still gets a
        sub-phase of its own.
        """
        ordered = sorted(features, key=_sort_key)
        buckets: List[List[FeatureClassification]] = []
        current: List[FeatureClassification] = []
        tokens = 0
        for item in ordered:
            over_tokens = tokens + item.estimated_tokens > self.config.max_tokens_per_phase
            over_count = len(current) >= self.config.max_features_per_phase
            if (over_tokens or over_count) and current:
                buckets.append(current)
                current = []
                tokens = 0
            current.append(item)
            tokens += item.estimated_tokens
        if current:
            buckets.append(current)

        total = len(buckets)
        return [
            (
                phase_name(domain, bucket, index, total),
                phase_description(bucket),
                bucket,
            )
            for index, bucket in enumerate(buckets, start=1)
        ]

    # ------------------------------------------------------------------
    # Phase factories

    def _setup_phase(self, number: int, concept: AppConcept) -> DynamicPhase:
        prefs = concept.ui_preferences
        style = prefs.style or "modern"
        scheme = prefs.color_scheme or "neutral"
        features = [
            "Folder structure and organization",
            "Package.json with dependencies",
            "TypeScript configuration",
            f"Base styling (Tailwind setup with {scheme} theme, {style} style)",
            "Core layout components",
            "Routing configuration",
        ]
        if prefs.layout == "dashboard":
            features.append("Dashboard layout skeleton")
        description = (
            f'Initialize project structure, dependencies, and base configuration for "{concept.name}".'
        )
        design = build_design_context(concept)
        if design:
            description = f"{description} {design}"
        return DynamicPhase(
            number=number,
            name=SETUP_PHASE_NAME,
            description=description,
            domain="setup",
            features=features,
            estimated_tokens=self.config.token_estimates.setup_phase,
            estimated_time=_FIXED_PHASE_TIME,
            test_criteria=[
                "Project runs without errors",
                "Base layout renders correctly",
                f"Theme matches {style} style with {scheme} colors",
                "Navigation works between routes",
                "No console errors",
            ],
            concept_context=PhaseConceptContext(
                purpose=concept.purpose,
                target_users=concept.target_users,
                ui_preferences=prefs,
                roles=list(concept.roles),
                layout_manifest=concept.layout_manifest,
            ),
        )

    def _design_system_phase(self, number: int, concept: AppConcept) -> DynamicPhase:
        layout = concept.layout_design or {}
        features = [
            "Design tokens (colors, typography, spacing)",
            "Reusable base components matching the layout design",
            "Responsive breakpoints",
        ]
        sections = [str(key) for key in layout if isinstance(key, str)]
        if sections:
            features.append(f"Layout sections: {', '.join(sections[:6])}")
        return DynamicPhase(
            number=number,
            name=DESIGN_SYSTEM_PHASE_NAME,
            description=(
                f'Translate the layout design for "{concept.name}" into shared design tokens '
                "and base components."
            ),
            domain="setup",
            features=features,
            estimated_tokens=self.config.token_estimates.setup_phase,
            estimated_time=_FIXED_PHASE_TIME,
            dependencies=[1],
            dependency_names=[SETUP_PHASE_NAME],
            test_criteria=[
                "Design tokens are applied consistently",
                "Base components render in every breakpoint",
                "No console errors",
            ],
            concept_context=PhaseConceptContext(
                purpose=concept.purpose,
                target_users=concept.target_users,
                ui_preferences=concept.ui_preferences,
                roles=list(concept.roles),
                layout_manifest=concept.layout_manifest,
            ),
        )

    def _polish_phase(self, number: int, concept: AppConcept) -> DynamicPhase:
        style = concept.ui_preferences.style or "modern"
        features = [
            "Loading states and skeletons",
            "Error handling and error states",
            "Empty states with helpful messages",
            f"Micro-interactions and animations ({style} style)",
            "README.md with setup instructions",
            "Final code cleanup",
        ]
        if concept.roles:
            features.append(
                f"Role-specific UX polish for: {', '.join(r.name for r in concept.roles)}"
            )
        description = (
            f'Final touches, animations, error states, and documentation for "{concept.name}".'
        )
        design = build_design_context(concept)
        if design:
            description = f"{description} {design}"
        return DynamicPhase(
            number=number,
            name=POLISH_PHASE_NAME,
            description=description,
            domain="polish",
            features=features,
            estimated_tokens=self.config.token_estimates.polish_phase,
            estimated_time=_FIXED_PHASE_TIME,
            # Only the immediate predecessor, not every earlier phase.
            dependencies=[number - 1] if number > 1 else [],
            dependency_names=["All previous phases"],
            test_criteria=[
                "All states have appropriate feedback",
                f"Animations match {style} style",
                "Documentation is complete",
                f"App serves {concept.target_users or 'its users'} effectively",
                "No console warnings or errors",
            ],
            concept_context=PhaseConceptContext(
                purpose=concept.purpose,
                target_users=concept.target_users,
                ui_preferences=concept.ui_preferences,
                roles=list(concept.roles),
                layout_manifest=concept.layout_manifest,
                conversation_context=concept.conversation_context,
            ),
            relevant_roles=[r.name for r in concept.roles],
        )

    def _feature_phase(
        self,
        number: int,
        name: str,
        description: str,
        domain: str,
        features: Sequence[FeatureClassification],
        concept: AppConcept,
    ) -> DynamicPhase:
        tokens = sum(item.estimated_tokens for item in features)
        roles = find_relevant_roles(features, concept.roles)

        enriched = description
        design = build_design_context(concept)
        if design:
            enriched = f"{enriched}. {design}"
        if roles:
            enriched += f" For users: {', '.join(roles)}."

        return DynamicPhase(
            number=number,
            name=name,
            description=enriched,
            domain=domain,
            features=[item.feature.name for item in features],
            feature_details=list(features),
            estimated_tokens=tokens,
            estimated_time=estimate_time(tokens),
            test_criteria=generate_test_criteria(features, domain),
            concept_context=PhaseConceptContext(
                purpose=concept.purpose,
                target_users=concept.target_users,
                ui_preferences=concept.ui_preferences,
                roles=list(concept.roles),
                data_models=list(concept.technical.data_models),
                layout_manifest=concept.layout_manifest,
            ),
            relevant_roles=roles,
        )


def phase_name(
    domain: str,
    features: Sequence[FeatureClassification],
    part: int,
    total_parts: int,
) -> str:
    if len(features) == 1:
        return features[0].suggested_phase_name
    base = DOMAIN_LABELS.get(domain, "Features")
    if total_parts > 1:
        return f"{base} (Part {part})"
    return base


def phase_description(features: Sequence[FeatureClassification]) -> str:
    if len(features) == 1:
        return features[0].feature.description
    names = [item.feature.name for item in features]
    if len(names) <= 3:
        return f"Implement {', '.join(names)}"
    return f"Implement {', '.join(names[:2])}, and {len(names) - 2} more features"


def estimate_time(tokens: int) -> str:
    minutes = math.ceil(tokens / _TOKENS_PER_MINUTE)
    return f"{minutes}-{minutes + 2} min"


def build_design_context(concept: AppConcept) -> str:
    """Summarise styling preferences as one descriptive sentence."""
    prefs = concept.ui_preferences
    parts: List[str] = []
    if prefs.style and prefs.style != "custom":
        parts.append(f"{prefs.style} design style")
    if prefs.color_scheme and prefs.color_scheme != "auto":
        parts.append(f"{prefs.color_scheme} color scheme")
    if prefs.primary_color:
        parts.append(f"primary color: {prefs.primary_color}")
    if prefs.layout and prefs.layout != "custom":
        parts.append(f"{prefs.layout} layout")
    if concept.target_users:
        parts.append(f"designed for {concept.target_users}")
    return f"Design: {', '.join(parts)}." if parts else ""


def find_relevant_roles(
    features: Sequence[FeatureClassification],
    roles: Optional[Sequence[UserRole]],
) -> List[str]:
    """Return role names mentioned by name or capability in the features."""
    if not roles:
        return []
    found: Dict[str, None] = {}
    for item in features:
        text = f"{item.feature.name} {item.feature.description}".lower()
        for role in roles:
            if role.name.lower() in text:
                found.setdefault(role.name, None)
            if any(cap.lower() in text for cap in role.capabilities if cap):
                found.setdefault(role.name, None)
    return list(found)


def generate_test_criteria(features: Sequence[FeatureClassification], domain: str) -> List[str]:
    criteria = list(_DOMAIN_CRITERIA.get(domain, ()))
    if not criteria:
        criteria = [
            f"{item.feature.name} works as expected" for item in features[:_MAX_FEATURE_CRITERIA]
        ]
        if len(features) > _MAX_FEATURE_CRITERIA:
            criteria.append(f"All {len(features)} features are functional")
    criteria.append("No console errors")
    return criteria


def _sort_key(item: FeatureClassification) -> tuple[int, int]:
    return (
        PRIORITY_ORDER.get(item.feature.priority, 1),
        COMPLEXITY_ORDER.get(item.complexity, 1),
    )


__all__ = [
    "PhaseBuilder",
    "build_design_context",
    "estimate_time",
    "find_relevant_roles",
    "generate_test_criteria",
    "phase_description",
    "phase_name",
]
