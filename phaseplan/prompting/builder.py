"""Builds code-generation prompts for individual phases."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Sequence

from jinja2 import Environment, FileSystemLoader

from ..models import (
    AccumulatedFile,
    APIContract,
    DynamicPhase,
    DynamicPhasePlan,
    FeatureSpecification,
    PhaseConceptContext,
)

_DEFAULT_TEMPLATES = Path(__file__).with_name("templates")
_PHASE_TEMPLATE = "phase.j2"


@dataclass(frozen=True)
class PromptMessage:
    """Represents a single chat message for the code generator."""

    role: str
    content: str


@dataclass
class PhasePrompt:
    """Rendered prompt for one phase plus bookkeeping metadata."""

    phase_number: int
    messages: List[PromptMessage]
    max_tokens: int | None
    metadata: Dict[str, object] = field(default_factory=dict)

    @property
    def text(self) -> str:
        return "\n\n".join(message.content for message in self.messages)


class PhasePromptBuilder:
    """Renders the per-phase prompt from Jinja2 templates."""

    SYSTEM_PROMPT = (
        "You are a senior full-stack engineer building an application one phase at a time. "
        "Stay consistent with files and patterns from earlier phases, implement only the "
        "features listed for this phase, and reply using the ===FILE:<path>=== block format."
    )

    def __init__(self, templates_dir: Path | None = None) -> None:
        self.templates_dir = templates_dir or _DEFAULT_TEMPLATES
        self._env = self._create_env(self.templates_dir)

    def build(
        self,
        plan: DynamicPhasePlan,
        phase: DynamicPhase,
        *,
        code_context: str = "",
        accumulated_files: Sequence[AccumulatedFile] = (),
        api_contracts: Sequence[APIContract] = (),
        patterns: Sequence[str] = (),
    ) -> PhasePrompt:
        context = phase.concept_context or PhaseConceptContext()
        template = self._env.get_template(_PHASE_TEMPLATE)
        user_prompt = template.render(
            plan=plan,
            phase=phase,
            context=context,
            specs=[spec for spec in context.feature_specs if _has_detail(spec)],
            roles=[role for role in context.roles if role.name in phase.relevant_roles]
            or list(context.roles),
            data_models=context.data_models,
            constraints=context.technical_constraints,
            workflows=context.workflow_specs,
            accumulated_files=list(accumulated_files),
            api_contracts=list(api_contracts),
            patterns=list(patterns),
            code_context=code_context,
        ).strip()

        messages = [
            PromptMessage(role="system", content=self.SYSTEM_PROMPT),
            PromptMessage(role="user", content=user_prompt),
        ]
        return PhasePrompt(
            phase_number=phase.number,
            messages=messages,
            max_tokens=phase.estimated_tokens or None,
            metadata={
                "phase_name": phase.name,
                "domain": phase.domain,
                "token_estimate": self._estimate_tokens(user_prompt),
                "context_chars": len(code_context),
            },
        )

    def _create_env(self, templates_dir: Path) -> Environment:
        directories = [str(templates_dir)]
        if templates_dir != _DEFAULT_TEMPLATES:
            directories.append(str(_DEFAULT_TEMPLATES))
        loader = FileSystemLoader(directories)
        return Environment(loader=loader, autoescape=False, trim_blocks=True, lstrip_blocks=True)

    @staticmethod
    def _estimate_tokens(text: str) -> int:
        """Rudimentary token estimate based on character length."""
        cleaned = text.strip()
        if not cleaned:
            return 0
        return max(1, len(cleaned) // 4)


def _has_detail(spec: FeatureSpecification) -> bool:
    return bool(spec.user_stories or spec.acceptance_criteria or spec.technical_notes)


__all__ = ["PhasePrompt", "PhasePromptBuilder", "PromptMessage"]
