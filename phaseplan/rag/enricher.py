"""Keyword retrieval over the concept transcript for per-phase context."""

from __future__ import annotations

import re
from dataclasses import replace
from typing import List, Optional, Sequence

from ..config import ContextConfig
from ..logging import get_logger
from ..models import (
    AppConcept,
    DynamicPhase,
    FeatureSpecification,
    PhaseConceptContext,
    WorkflowSpecification,
    WorkflowStep,
)
from .constants import PHASE_KEYWORDS

_PARAGRAPH_SPLIT = re.compile(r"\n\n+")
_MIN_PARAGRAPH_CHARS = 20
_SPEC_LIMIT = 6
_RULE_LIMIT = 10
_WORKFLOW_LIMIT = 10
_DESCRIPTION_EXCERPT_CHARS = 500

_VALIDATION_PATTERNS = (
    re.compile(r"(?:must be|should be|has to be)\s+([^.]{10,80})", re.IGNORECASE),
    re.compile(r"(?:validate|validation|valid)\s+([^.]{10,80})", re.IGNORECASE),
    re.compile(r"(?:required|mandatory|minimum|maximum)\s+([^.]{10,80})", re.IGNORECASE),
    re.compile(r"(?:at least|at most|between)\s+([^.]{10,80})", re.IGNORECASE),
)


class ContextEnricher:
    """Attaches the relevant slice of the free-text transcript to each phase."""

    def __init__(self, config: ContextConfig | None = None) -> None:
        self.config = config or ContextConfig()
        self.logger = get_logger("rag.enricher")

    def extract_relevant_context(self, text: str, domain: str) -> str:
        """Return the top keyword-scored paragraphs of ``text`` for ``domain``."""
        if not text:
            return ""
        keywords = [k.lower() for k in PHASE_KEYWORDS.get(domain, [])]
        if not keywords:
            return ""

        paragraphs = [p for p in _PARAGRAPH_SPLIT.split(text) if len(p.strip()) > _MIN_PARAGRAPH_CHARS]
        scored = []
        for paragraph in paragraphs:
            lowered = paragraph.lower()
            score = sum(1 for keyword in keywords if keyword in lowered)
            if score > 0:
                scored.append((score, paragraph))
        scored.sort(key=lambda pair: pair[0], reverse=True)

        selected = [paragraph for _, paragraph in scored[: self.config.enricher_max_paragraphs]]
        result = "\n\n".join(selected)
        limit = self.config.enricher_max_chars
        if len(result) > limit:
            omitted = len(result) - limit
            self.logger.debug("Transcript slice for %s truncated by %d chars", domain, omitted)
            return (
                result[:limit]
                + f"\n\n[NOTE: {omitted} characters omitted. Focus on the requirements above.]"
            )
        return result

    def extract_feature_specs(
        self,
        concept: AppConcept,
        feature_names: Sequence[str],
    ) -> List[FeatureSpecification]:
        text = concept.conversation_context or ""
        priorities = {feature.name: feature.priority for feature in concept.core_features}
        specs: List[FeatureSpecification] = []
        for name in feature_names:
            escaped = re.escape(name)
            stories = extract_pattern_matches(
                text,
                re.compile(
                    rf"(?:as a|user (?:can|wants to|should))\s+[^.]*{escaped}[^.]*", re.IGNORECASE
                ),
            )
            criteria = extract_pattern_matches(
                text,
                re.compile(rf"(?:should|must|needs to)\s+[^.]*{escaped}[^.]*", re.IGNORECASE),
            )
            notes = extract_pattern_matches(
                text,
                re.compile(rf"(?:api|database|backend|endpoint)[^.]*{escaped}[^.]*", re.IGNORECASE),
            )
            specs.append(
                FeatureSpecification(
                    name=name,
                    user_stories=stories[:_SPEC_LIMIT],
                    acceptance_criteria=criteria[:_SPEC_LIMIT],
                    technical_notes=notes[:_SPEC_LIMIT],
                    priority=priorities.get(name, "medium"),
                )
            )
        return specs

    def extract_validation_rules(self, text: str, domain: str) -> List[str]:
        if not text:
            return []
        keywords = [k.lower() for k in PHASE_KEYWORDS.get(domain, [])]
        rules: List[str] = []
        for pattern in _VALIDATION_PATTERNS:
            for match in extract_pattern_matches(text, pattern):
                lowered = match.lower()
                if any(keyword in lowered for keyword in keywords) and match not in rules:
                    rules.append(match)
        return rules[:_RULE_LIMIT]

    def extract_workflow_specs(self, concept: AppConcept, domain: str) -> List[WorkflowSpecification]:
        """Concept workflows whose text mentions one of the domain keywords."""
        keywords = [k.lower() for k in PHASE_KEYWORDS.get(domain, [])]
        specs: List[WorkflowSpecification] = []
        for workflow in concept.workflows:
            text = f"{workflow.name} {workflow.description} {' '.join(workflow.steps)}".lower()
            if not any(keyword in text for keyword in keywords):
                continue
            actor = workflow.involved_roles[0] if workflow.involved_roles else "User"
            specs.append(
                WorkflowSpecification(
                    name=workflow.name,
                    trigger=workflow.steps[0] if workflow.steps else "User initiates",
                    steps=[WorkflowStep(action=step, actor=actor) for step in workflow.steps],
                )
            )
        return specs[:_WORKFLOW_LIMIT]

    def enrich_phase(self, phase: DynamicPhase, concept: AppConcept) -> DynamicPhase:
        """Fill the phase's concept context from the transcript, in place."""
        transcript = concept.conversation_context or ""
        relevant = self.extract_relevant_context(transcript, phase.domain)
        specs = self.extract_feature_specs(concept, phase.features)
        rules = self.extract_validation_rules(transcript, phase.domain)
        workflows = self.extract_workflow_specs(concept, phase.domain)

        base = phase.concept_context or PhaseConceptContext()
        phase.concept_context = replace(
            base,
            conversation_context=relevant,
            feature_specs=specs,
            technical_constraints=rules,
            workflow_specs=workflows,
        )
        if relevant:
            excerpt = truncate_at_word_boundary(relevant, _DESCRIPTION_EXCERPT_CHARS)
            phase.description += "\n\nContext from requirements:\n" + excerpt
        return phase


def extract_pattern_matches(text: str, pattern: re.Pattern[str]) -> List[str]:
    """Collect distinct matches (first group when present) of sensible length."""
    matches: List[str] = []
    for match in pattern.finditer(text):
        group: Optional[str] = match.group(1) if pattern.groups else None
        value = (group or match.group(0)).strip()
        if 5 < len(value) < 150 and value not in matches:
            matches.append(value)
    return matches


def truncate_at_word_boundary(text: str, limit: int) -> str:
    """Cut ``text`` to at most ``limit`` characters, preferring a word break.

    An ellipsis is appended when anything was removed; the result including
    the ellipsis never exceeds ``limit``.
    """
    if len(text) <= limit:
        return text
    if limit <= 3:
        return text[:limit]
    cut = text[: limit - 3]
    space = cut.rfind(" ")
    if space > (limit - 3) * 0.7:
        cut = cut[:space]
    return cut.rstrip() + "..."


__all__ = [
    "ContextEnricher",
    "extract_pattern_matches",
    "truncate_at_word_boundary",
]
