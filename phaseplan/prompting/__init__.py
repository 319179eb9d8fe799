"""Prompt rendering for phase execution."""

from .builder import PhasePrompt, PhasePromptBuilder, PromptMessage

__all__ = ["PhasePrompt", "PhasePromptBuilder", "PromptMessage"]
