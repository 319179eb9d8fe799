"""Feature classification: domain, complexity and token cost per feature."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from ..config import PlannerConfig
from ..logging import get_logger
from ..models import Feature, FeatureClassification, LayoutManifest, TechnicalRequirements
from .constants import (
    COMPLEX_PATTERNS,
    IMPLICIT_FEATURES,
    MEMORY_KEYWORDS,
    MODERATE_PATTERNS,
    STATE_COMPLEXITY_KEYWORDS,
    ImplicitFeature,
)

_AUTH_TAG_MARKERS = ("login", "auth", "password")
_DEFAULT_AUTH_TYPE = "email"
_DEFAULT_LANGUAGES = "English, Spanish"


@dataclass
class LayoutComplexity:
    """Summary of a layout node tree."""

    total_nodes: int = 0
    max_depth: int = 0
    has_auth_components: bool = False
    has_video: bool = False
    component_types: List[str] = field(default_factory=list)


class FeatureClassifier:
    """Maps features, technical flags and layout tags to classifications."""

    def __init__(self, config: PlannerConfig | None = None) -> None:
        self.config = config or PlannerConfig()
        self.logger = get_logger("planning.classifier")

    def classify(self, feature: Feature) -> FeatureClassification:
        combined = f"{feature.name.lower()} {feature.description.lower()}"

        for row in COMPLEX_PATTERNS:
            matched = tuple(p for p in row.patterns if p in combined)
            if matched:
                return FeatureClassification(
                    feature=feature,
                    domain=row.domain,
                    complexity="complex",
                    estimated_tokens=row.base_token_estimate,
                    requires_own_phase=row.requires_own_phase,
                    suggested_phase_name=row.suggested_name,
                    dependencies=tuple(infer_dependencies(feature)),
                    keywords=matched,
                )

        for row in MODERATE_PATTERNS:
            matched = tuple(p for p in row.patterns if p in combined)
            if matched:
                return FeatureClassification(
                    feature=feature,
                    domain=row.domain,
                    complexity="moderate",
                    estimated_tokens=row.base_token_estimate,
                    requires_own_phase=False,
                    suggested_phase_name=feature.name,
                    dependencies=tuple(infer_dependencies(feature)),
                    keywords=matched,
                )

        return FeatureClassification(
            feature=feature,
            domain="feature",
            complexity="simple",
            estimated_tokens=self.config.token_estimates.simple_feature,
            requires_own_phase=False,
            suggested_phase_name=feature.name,
        )

    def classify_all(self, features: Iterable[Feature]) -> List[FeatureClassification]:
        results = [self.classify(feature) for feature in features]
        self.logger.debug("Classified %d features", len(results))
        return results

    def implicit_features(self, tech: TechnicalRequirements) -> List[FeatureClassification]:
        """Return one classification per enabled technical flag, in table order."""
        implicit: List[FeatureClassification] = []
        for row in IMPLICIT_FEATURES:
            if not _flag_enabled(tech, row.flag):
                continue
            implicit.append(_implicit_classification(row, tech))
        return implicit

    def layout_features(self, manifest: LayoutManifest | None) -> List[FeatureClassification]:
        """Derive classifications from layout builder tags and the node tree."""
        if manifest is None:
            return []
        tags = set(manifest.detected_features or ())
        analysis = analyze_layout_complexity(manifest.root)
        features: List[FeatureClassification] = []

        if "Authentication" in tags or analysis.has_auth_components:
            features.append(
                FeatureClassification(
                    feature=Feature(
                        id="layout-auth",
                        name="Authentication System",
                        description="Detected from layout design (login/signup forms)",
                        priority="high",
                    ),
                    domain="auth",
                    complexity="complex",
                    estimated_tokens=4000,
                    requires_own_phase=True,
                    suggested_phase_name="Authentication Setup",
                    keywords=("auth", "login"),
                )
            )

        if "FileUpload" in tags:
            features.append(
                FeatureClassification(
                    feature=Feature(
                        id="layout-file-upload",
                        name="File Upload System",
                        description="Detected from layout design (upload zones)",
                        priority="medium",
                    ),
                    domain="storage",
                    complexity="complex",
                    estimated_tokens=3500,
                    requires_own_phase=True,
                    suggested_phase_name="File Storage",
                    keywords=("upload", "storage", "file"),
                )
            )

        if analysis.total_nodes > 15 or analysis.max_depth > 4 or "Dashboard" in tags:
            kinds = ", ".join(analysis.component_types) or "layout containers"
            features.append(
                FeatureClassification(
                    feature=Feature(
                        id="layout-complex-ui",
                        name="Complex UI Implementation",
                        description=(
                            f"Implement complex layout structure ({analysis.total_nodes} nodes, "
                            f"{analysis.max_depth} levels deep). Includes: {kinds}"
                        ),
                        priority="high",
                    ),
                    domain="ui-component",
                    complexity="complex",
                    estimated_tokens=5000,
                    requires_own_phase=True,
                    suggested_phase_name="UI & Layout Implementation",
                    dependencies=("Design System Setup",),
                    keywords=("dashboard", "layout", "components", "ui"),
                )
            )

        if analysis.has_video:
            features.append(
                FeatureClassification(
                    feature=Feature(
                        id="layout-media-player",
                        name="Media Player Integration",
                        description="Video player components detected in layout",
                        priority="medium",
                    ),
                    domain="ui-component",
                    complexity="moderate",
                    estimated_tokens=2500,
                    requires_own_phase=False,
                    suggested_phase_name="Media Features",
                    keywords=("video", "player", "media"),
                )
            )

        if features:
            self.logger.debug("Layout manifest contributed %d features", len(features))
        return features


def infer_dependencies(feature: Feature) -> List[str]:
    """Guess prerequisite phase names from a feature description."""
    lowered = feature.description.lower()
    deps: List[str] = []
    if any(term in lowered for term in ("user", "account", "profile")):
        deps.append("Authentication System")
    if any(term in lowered for term in ("save", "store", "persist", "history")):
        deps.append("Database Setup")
    if any(term in lowered for term in ("image", "photo", "file", "upload")):
        deps.append("File Storage")
    return deps


def analyze_layout_complexity(root: Optional[Mapping[str, Any]]) -> LayoutComplexity:
    """Walk a layout node tree counting nodes, depth, and notable node kinds."""
    result = LayoutComplexity()
    if not isinstance(root, Mapping):
        return result

    seen_types: dict[str, None] = {}
    stack: List[tuple[Mapping[str, Any], int]] = [(root, 1)]
    while stack:
        node, depth = stack.pop()
        result.total_nodes += 1
        result.max_depth = max(result.max_depth, depth)

        node_type = node.get("type")
        if isinstance(node_type, str) and node_type:
            seen_types.setdefault(node_type, None)
            if node_type == "video":
                result.has_video = True

        tag = node.get("semantic_tag") or node.get("semanticTag")
        if isinstance(tag, str) and any(marker in tag.lower() for marker in _AUTH_TAG_MARKERS):
            result.has_auth_components = True

        children = node.get("children")
        if isinstance(children, list):
            # Reversed so types are recorded in document order.
            for child in reversed(children):
                if isinstance(child, Mapping):
                    stack.append((child, depth + 1))

    result.component_types = list(seen_types)
    return result


def infer_state_complexity(features: Sequence[Feature]) -> str:
    """Estimate how much client state the described features need."""
    text = " ".join(f"{f.name.lower()} {f.description.lower()}" for f in features)
    complex_hits = sum(1 for kw in STATE_COMPLEXITY_KEYWORDS["complex"] if kw in text)
    if complex_hits >= 2:
        return "complex"
    moderate_hits = sum(1 for kw in STATE_COMPLEXITY_KEYWORDS["moderate"] if kw in text)
    if complex_hits >= 1 or moderate_hits >= 3:
        return "moderate"
    return "simple"


def detect_memory_needs(features: Sequence[Feature], description: str = "") -> dict[str, bool]:
    """Return suggested values for the persistence/history/caching flags."""
    text = " ".join(
        [description.lower()] + [f"{f.name.lower()} {f.description.lower()}" for f in features]
    )
    strong = sum(1 for kw in MEMORY_KEYWORDS["context_strong"] if kw in text)
    weak = sum(1 for kw in MEMORY_KEYWORDS["context_weak"] if kw in text)
    caching_hits = sum(1 for kw in MEMORY_KEYWORDS["caching"] if kw in text)
    return {
        "needs_context_persistence": strong * 2 + weak >= 2,
        "needs_state_history": any(kw in text for kw in MEMORY_KEYWORDS["state_history"]),
        "needs_caching": caching_hits >= 2,
    }


def _flag_enabled(tech: TechnicalRequirements, flag: str) -> bool:
    if flag == "needs_state_history":
        return bool(tech.needs_state_history) or tech.state_complexity == "complex"
    return bool(getattr(tech, flag, False))


def _implicit_classification(
    row: ImplicitFeature, tech: TechnicalRequirements
) -> FeatureClassification:
    auth_type = tech.auth_type or _DEFAULT_AUTH_TYPE
    languages = ", ".join(tech.i18n_languages) or _DEFAULT_LANGUAGES
    description = row.description.format(auth_type=auth_type, languages=languages)
    keywords = row.keywords
    if row.flag == "needs_auth":
        keywords = keywords + (auth_type,)
    dependencies = ("Database Setup",) if row.needs_database_dependency and tech.needs_database else ()
    return FeatureClassification(
        feature=Feature(
            id=row.feature_id,
            name=row.name,
            description=description,
            priority=row.priority,
        ),
        domain=row.domain,
        complexity=row.complexity,
        estimated_tokens=row.estimated_tokens,
        requires_own_phase=row.requires_own_phase,
        suggested_phase_name=row.suggested_phase_name,
        dependencies=dependencies,
        keywords=keywords,
    )


__all__ = [
    "FeatureClassifier",
    "LayoutComplexity",
    "analyze_layout_complexity",
    "detect_memory_needs",
    "infer_dependencies",
    "infer_state_complexity",
]
