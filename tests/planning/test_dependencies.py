"""Tests for dependency resolution and cycle detection."""

from __future__ import annotations

from phaseplan.models import DynamicPhase
from phaseplan.planning import (
    DependencyResolver,
    FeatureClassifier,
    PhaseBuilder,
    find_cycles,
    group_by_domain,
)
from tests._fixtures.concept_builder import ConceptBuilder


def _resolved(builder: ConceptBuilder):
    concept = builder.build()
    classifier = FeatureClassifier()
    items = classifier.classify_all(concept.core_features) + classifier.implicit_features(
        concept.technical
    )
    phases = PhaseBuilder().build(group_by_domain(items), concept)
    DependencyResolver().resolve(phases)
    return phases


def test_every_phase_after_setup_depends_on_setup(concept_builder: ConceptBuilder) -> None:
    concept_builder.feature("User Login", "login with password", "high").flags(needs_database=True)

    phases = _resolved(concept_builder)

    assert phases[0].dependencies == []
    for phase in phases[1:-1]:
        assert 1 in phase.dependencies
        assert all(dep < phase.number for dep in phase.dependencies)
    assert phases[-1].dependencies == [len(phases) - 1]


def test_database_and_polish_dependencies(concept_builder: ConceptBuilder) -> None:
    concept_builder.feature("User Login", "login with password", "high").flags(needs_database=True)

    setup, database, auth, polish = _resolved(concept_builder)

    assert database.dependencies == [1]
    assert auth.dependencies == [1, 2]
    assert auth.dependency_names == ["Project Setup", "Database Schema"]
    assert polish.dependencies == [3]
    assert polish.dependency_names == ["All previous phases"]


def test_auth_dependent_domains_depend_on_auth(concept_builder: ConceptBuilder) -> None:
    concept_builder.feature("Sales Dashboard", "charts of revenue").flags(needs_auth=True)

    phases = _resolved(concept_builder)
    by_name = {phase.name: phase for phase in phases}

    auth_number = by_name["Authentication System"].number
    assert auth_number in by_name["Analytics Dashboard"].dependencies
    assert "Authentication System" in by_name["Analytics Dashboard"].dependency_names


def test_feature_declared_dependencies_resolve_by_phase_name(concept_builder: ConceptBuilder) -> None:
    concept_builder.feature("Photo Search", "search every photo").flags(needs_file_upload=True)

    setup, storage, search, polish = _resolved(concept_builder)

    assert storage.name == "File Storage"
    assert search.name == "Search System"
    assert search.dependencies == [1, 2]
    assert search.dependency_names == ["Project Setup", "File Storage"]


def test_find_cycles_reports_back_edges() -> None:
    phases = [
        DynamicPhase(number=1, name="A", description="", domain="setup", dependencies=[2]),
        DynamicPhase(number=2, name="B", description="", domain="feature", dependencies=[1]),
    ]

    assert find_cycles(phases) == [1]


def test_find_cycles_empty_for_acyclic_plan(concept_builder: ConceptBuilder) -> None:
    concept_builder.feature("Calendar View").flags(needs_database=True, needs_auth=True)

    assert find_cycles(_resolved(concept_builder)) == []
