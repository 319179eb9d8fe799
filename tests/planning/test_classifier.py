"""Tests for feature classification."""

from __future__ import annotations

from phaseplan.config import PlannerConfig, TokenEstimates
from phaseplan.models import Feature, LayoutManifest, TechnicalRequirements
from phaseplan.planning.classifier import (
    FeatureClassifier,
    analyze_layout_complexity,
    detect_memory_needs,
    infer_dependencies,
    infer_state_complexity,
)


def test_complex_feature_is_isolated_with_pattern_estimate() -> None:
    feature = Feature(id="f1", name="User Login", description="login with password", priority="high")

    result = FeatureClassifier().classify(feature)

    assert result.domain == "auth"
    assert result.complexity == "complex"
    assert result.estimated_tokens == 4000
    assert result.requires_own_phase is True
    assert result.suggested_phase_name == "Authentication System"
    assert result.keywords == ("login",)


def test_moderate_feature_keeps_its_own_name() -> None:
    feature = Feature(id="f1", name="Calendar View", description="Show events by month")

    result = FeatureClassifier().classify(feature)

    assert result.domain == "feature"
    assert result.complexity == "moderate"
    assert result.estimated_tokens == 2000
    assert result.requires_own_phase is False
    assert result.suggested_phase_name == "Calendar View"
    assert result.keywords == ("calendar",)


def test_simple_feature_uses_configured_estimate() -> None:
    config = PlannerConfig(token_estimates=TokenEstimates(simple_feature=900))
    feature = Feature(id="f1", name="Dark Mode Toggle", description="Switch between light and dark themes")

    result = FeatureClassifier(config).classify(feature)

    assert result.domain == "feature"
    assert result.complexity == "simple"
    assert result.estimated_tokens == 900
    assert result.dependencies == ()
    assert result.keywords == ()


def test_classify_is_deterministic() -> None:
    feature = Feature(id="f1", name="Team Chat", description="Live messages for every user")
    classifier = FeatureClassifier()

    assert classifier.classify(feature) == classifier.classify(feature)


def test_infer_dependencies_reads_description_terms() -> None:
    feature = Feature(id="f1", name="Avatar", description="Users upload a profile photo and save it")

    assert infer_dependencies(feature) == ["Authentication System", "Database Setup", "File Storage"]


def test_implicit_features_empty_when_no_flags() -> None:
    assert FeatureClassifier().implicit_features(TechnicalRequirements()) == []


def test_implicit_auth_depends_on_database_when_enabled() -> None:
    tech = TechnicalRequirements(needs_auth=True, needs_database=True)

    implicit = FeatureClassifier().implicit_features(tech)

    assert [item.feature.id for item in implicit] == ["implicit-auth", "implicit-database"]
    auth = implicit[0]
    assert auth.feature.description == "email authentication with login, logout, and session management"
    assert auth.dependencies == ("Database Setup",)
    assert auth.keywords == ("auth", "email")
    assert auth.feature.priority == "high"


def test_implicit_auth_without_database_has_no_dependency() -> None:
    tech = TechnicalRequirements(needs_auth=True, auth_type="oauth")

    (auth,) = FeatureClassifier().implicit_features(tech)

    assert auth.dependencies == ()
    assert auth.feature.description.startswith("oauth authentication")


def test_complex_state_enables_state_management_row() -> None:
    tech = TechnicalRequirements(state_complexity="complex")

    (state,) = FeatureClassifier().implicit_features(tech)

    assert state.feature.id == "implicit-state-management"
    assert state.domain == "setup"


def test_i18n_defaults_languages() -> None:
    (i18n,) = FeatureClassifier().implicit_features(TechnicalRequirements(needs_i18n=True))
    assert i18n.feature.description == "Multi-language support for: English, Spanish"

    (custom,) = FeatureClassifier().implicit_features(
        TechnicalRequirements(needs_i18n=True, i18n_languages=["French", "German"])
    )
    assert custom.feature.description == "Multi-language support for: French, German"


def test_layout_features_from_tags_and_tree() -> None:
    manifest = LayoutManifest(
        detected_features=["FileUpload", "Dashboard"],
        root={
            "type": "container",
            "children": [
                {"type": "form", "semanticTag": "login-form"},
                {"type": "video"},
            ],
        },
    )

    features = FeatureClassifier().layout_features(manifest)

    assert [item.feature.id for item in features] == [
        "layout-auth",
        "layout-file-upload",
        "layout-complex-ui",
        "layout-media-player",
    ]
    complex_ui = features[2]
    assert complex_ui.dependencies == ("Design System Setup",)
    assert "3 nodes, 2 levels deep" in complex_ui.feature.description
    assert "container, form, video" in complex_ui.feature.description


def test_layout_features_none_without_manifest() -> None:
    assert FeatureClassifier().layout_features(None) == []


def test_analyze_layout_complexity_counts_depth_and_nodes() -> None:
    root = {"type": "page", "children": [{"type": "section", "children": [{"type": "text"}]}, {"type": "text"}]}

    result = analyze_layout_complexity(root)

    assert result.total_nodes == 4
    assert result.max_depth == 3
    assert result.component_types == ["page", "section", "text"]
    assert result.has_video is False
    assert result.has_auth_components is False


def test_analyze_layout_complexity_handles_missing_root() -> None:
    result = analyze_layout_complexity(None)
    assert result.total_nodes == 0
    assert result.max_depth == 0


def test_infer_state_complexity_tiers() -> None:
    complex_features = [Feature(id="a", name="Editor", description="undo and redo with full history")]
    moderate_features = [Feature(id="b", name="Shop", description="cart with filter, sort and favorites")]
    simple_features = [Feature(id="c", name="About page", description="static text")]

    assert infer_state_complexity(complex_features) == "complex"
    assert infer_state_complexity(moderate_features) == "moderate"
    assert infer_state_complexity(simple_features) == "simple"


def test_detect_memory_needs() -> None:
    features = [Feature(id="a", name="Assistant", description="remember preferences across sessions")]

    needs = detect_memory_needs(features, "Fast and instant answers with undo")

    assert needs == {
        "needs_context_persistence": True,
        "needs_state_history": True,
        "needs_caching": True,
    }
    assert detect_memory_needs([], "") == {
        "needs_context_persistence": False,
        "needs_state_history": False,
        "needs_caching": False,
    }
