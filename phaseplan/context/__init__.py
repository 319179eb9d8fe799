"""Code context window management for phase execution."""

from .builder import IncrementalCodeContextBuilder, PhaseBatch, format_block
from .importance import score_file

__all__ = ["IncrementalCodeContextBuilder", "PhaseBatch", "format_block", "score_file"]
