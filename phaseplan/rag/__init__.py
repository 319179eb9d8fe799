"""Transcript retrieval helpers used to enrich phases."""

from .enricher import ContextEnricher, extract_pattern_matches, truncate_at_word_boundary

__all__ = ["ContextEnricher", "extract_pattern_matches", "truncate_at_word_boundary"]
