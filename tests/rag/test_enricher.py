"""Tests for transcript enrichment."""

from __future__ import annotations

import re

from phaseplan.config import ContextConfig
from phaseplan.models import DynamicPhase, PhaseConceptContext
from phaseplan.rag import ContextEnricher, extract_pattern_matches, truncate_at_word_boundary
from tests._fixtures.concept_builder import ConceptBuilder

TRANSCRIPT = """
Users login with email and password. Sessions last a day.

The dashboard shows charts of revenue for each region.

Register flow asks for a password and a role.

ok
"""


def test_extract_relevant_context_ranks_paragraphs_by_keyword_hits() -> None:
    enricher = ContextEnricher()

    result = enricher.extract_relevant_context(TRANSCRIPT.strip(), "auth")

    assert result == (
        "Users login with email and password. Sessions last a day.\n\n"
        "Register flow asks for a password and a role."
    )


def test_extract_relevant_context_unknown_domain_or_empty_text() -> None:
    enricher = ContextEnricher()

    assert enricher.extract_relevant_context(TRANSCRIPT, "no-such-domain") == ""
    assert enricher.extract_relevant_context("", "auth") == ""


def test_extract_relevant_context_truncates_with_note() -> None:
    enricher = ContextEnricher(ContextConfig(enricher_max_chars=30))

    result = enricher.extract_relevant_context(TRANSCRIPT.strip(), "auth")

    full = (
        "Users login with email and password. Sessions last a day.\n\n"
        "Register flow asks for a password and a role."
    )
    omitted = len(full) - 30
    assert result == full[:30] + f"\n\n[NOTE: {omitted} characters omitted. Focus on the requirements above.]"


def test_extract_relevant_context_respects_paragraph_limit() -> None:
    enricher = ContextEnricher(ContextConfig(enricher_max_paragraphs=1))

    result = enricher.extract_relevant_context(TRANSCRIPT.strip(), "auth")

    assert result == "Users login with email and password. Sessions last a day."


def test_extract_feature_specs(concept_builder: ConceptBuilder) -> None:
    concept = (
        concept_builder.feature("User Login", "login with password", "high")
        .transcript(
            """
            As a user I want User Login to be fast. The page must show User Login errors clearly.
            The backend endpoint for User Login returns a token.
            """
        )
        .build()
    )

    (spec,) = ContextEnricher().extract_feature_specs(concept, ["User Login"])

    assert spec.name == "User Login"
    assert spec.priority == "high"
    assert spec.user_stories == ["As a user I want User Login to be fast"]
    assert spec.acceptance_criteria == ["must show User Login errors clearly"]
    assert spec.technical_notes == ["backend endpoint for User Login returns a token"]


def test_extract_validation_rules_filters_by_domain_keywords() -> None:
    text = "Passwords must be checked against the session policy. Titles must be shorter than eighty characters."

    rules = ContextEnricher().extract_validation_rules(text, "auth")

    assert rules == ["checked against the session policy"]


def test_enrich_phase_fills_concept_context(concept_builder: ConceptBuilder) -> None:
    concept = concept_builder.feature("User Login").transcript(TRANSCRIPT).build()
    phase = DynamicPhase(
        number=2,
        name="Authentication System",
        description="Implement email authentication",
        domain="auth",
        features=["User Login"],
        concept_context=PhaseConceptContext(purpose="Track tasks"),
    )

    ContextEnricher().enrich_phase(phase, concept)

    assert phase.concept_context is not None
    assert phase.concept_context.purpose == "Track tasks"
    assert phase.concept_context.conversation_context.startswith("Users login with email")
    assert [spec.name for spec in phase.concept_context.feature_specs] == ["User Login"]
    assert phase.description.startswith(
        "Implement email authentication\n\nContext from requirements:\nUsers login"
    )


def test_enrich_phase_without_transcript_leaves_description(concept_builder: ConceptBuilder) -> None:
    concept = concept_builder.feature("Calendar View").build()
    phase = DynamicPhase(number=2, name="Calendar View", description="Show events", domain="feature")

    ContextEnricher().enrich_phase(phase, concept)

    assert phase.description == "Show events"
    assert phase.concept_context is not None
    assert phase.concept_context.conversation_context == ""


def test_truncate_at_word_boundary() -> None:
    assert truncate_at_word_boundary("short", 10) == "short"
    assert truncate_at_word_boundary("alpha beta gamma delta", 15) == "alpha beta..."
    assert truncate_at_word_boundary("hello world foo bar", 12) == "hello wor..."


def test_extract_pattern_matches_dedupes_and_filters_length() -> None:
    pattern = re.compile(r"note: ([^.]+)")
    text = "note: keep it simple. note: keep it simple. note: tiny. note: " + "x" * 200 + "."

    assert extract_pattern_matches(text, pattern) == ["keep it simple"]


def test_extract_workflow_specs_matches_domain_keywords(concept_builder: ConceptBuilder) -> None:
    concept = (
        concept_builder.workflow(
            "Onboarding", "Open signup page", "Enter password", "Confirm email", roles=("Guest", "Admin")
        )
        .workflow("Monthly report", "Pick a month", "Export the chart")
        .workflow("Empty", roles=("Admin",))
        .build()
    )
    enricher = ContextEnricher()

    (onboarding,) = enricher.extract_workflow_specs(concept, "auth")

    assert onboarding.name == "Onboarding"
    assert onboarding.trigger == "Open signup page"
    assert [(step.actor, step.action) for step in onboarding.steps] == [
        ("Guest", "Open signup page"),
        ("Guest", "Enter password"),
        ("Guest", "Confirm email"),
    ]
    (report,) = enricher.extract_workflow_specs(concept, "analytics")
    assert report.steps[0].actor == "User"
    assert enricher.extract_workflow_specs(concept, "no-such-domain") == []


def test_extract_workflow_specs_caps_results(concept_builder: ConceptBuilder) -> None:
    for index in range(12):
        concept_builder.workflow(f"Search flow {index}", "Type a query")

    specs = ContextEnricher().extract_workflow_specs(concept_builder.build(), "search")

    assert len(specs) == 10
    assert specs[-1].name == "Search flow 9"


def test_enrich_phase_attaches_workflows(concept_builder: ConceptBuilder) -> None:
    concept = concept_builder.workflow("Login", "Submit password", roles=("Member",)).build()
    phase = DynamicPhase(number=2, name="Authentication System", description="Auth", domain="auth")

    ContextEnricher().enrich_phase(phase, concept)

    assert phase.concept_context is not None
    assert [spec.name for spec in phase.concept_context.workflow_specs] == ["Login"]
