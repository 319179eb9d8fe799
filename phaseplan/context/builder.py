"""Bounded, importance-ranked code context across completed phases."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..analyzers import FileAnalysis, analyze_generated_files
from ..config import ContextConfig
from ..logging import get_logger
from ..models import AccumulatedFile, APIContract, GeneratedFile
from .importance import score_file

_TRUNCATION_MARKER = "\n// ... (truncated)\n\n"


@dataclass(frozen=True)
class PhaseBatch:
    """Files produced by one completed phase."""

    phase_number: int
    files: Tuple[GeneratedFile, ...]


def format_block(path: str, content: str) -> str:
    return f"// File: {path}\n{content}\n\n"


class IncrementalCodeContextBuilder:
    """Append-only working set of generated files plus the context window over it."""

    def __init__(self, config: ContextConfig | None = None) -> None:
        self.config = config or ContextConfig()
        self.logger = get_logger("context.builder")
        self._batches: List[PhaseBatch] = []
        self._metadata: Dict[str, AccumulatedFile] = {}
        self._contracts: Dict[Tuple[str, str], APIContract] = {}
        self._patterns: Dict[str, None] = {}

    # ------------------------------------------------------------------
    # Working set

    def record_phase(self, phase_number: int, files: Iterable[GeneratedFile]) -> FileAnalysis:
        """Append one completed phase's files and fold in their metadata."""
        batch = PhaseBatch(phase_number=phase_number, files=tuple(files))
        self._batches.append(batch)

        analysis = analyze_generated_files(batch.files, phase_number=phase_number)
        for item in analysis.accumulated_files:
            self._metadata[item.path] = item
        for contract in analysis.api_contracts:
            self._contracts[(contract.endpoint, contract.method)] = contract
        for name in analysis.established_patterns:
            self._patterns.setdefault(name, None)

        self.logger.debug(
            "Recorded %d files for phase %d (%d tracked paths)",
            len(batch.files),
            phase_number,
            len(self._metadata),
        )
        return analysis

    @property
    def batches(self) -> Tuple[PhaseBatch, ...]:
        return tuple(self._batches)

    def current_files(self) -> List[GeneratedFile]:
        """Latest content per path, in order of first appearance."""
        latest: Dict[str, GeneratedFile] = {}
        for batch in self._batches:
            for generated in batch.files:
                latest[generated.path] = generated
        return list(latest.values())

    @property
    def accumulated_files(self) -> List[AccumulatedFile]:
        return list(self._metadata.values())

    @property
    def api_contracts(self) -> List[APIContract]:
        return list(self._contracts.values())

    @property
    def established_patterns(self) -> List[str]:
        return list(self._patterns)

    def build_phase_context(self, max_chars: Optional[int] = None) -> str:
        return self.build_context(self.current_files(), max_chars=max_chars)

    # ------------------------------------------------------------------
    # Selection

    def rank(self, files: Sequence[GeneratedFile]) -> List[Tuple[GeneratedFile, float]]:
        """Return files with their scores, highest first; ties keep input order."""
        scored = [(generated, score_file(generated.path, generated.content)) for generated in files]
        return sorted(scored, key=lambda pair: pair[1], reverse=True)

    def build_context(
        self,
        files: Sequence[GeneratedFile],
        *,
        max_chars: Optional[int] = None,
    ) -> str:
        """Concatenate the most important files without exceeding the size cap.

        A file that does not fit is skipped, unless it scores at or above the
        high-importance threshold: then it is truncated into the remaining
        space (when that space is larger than the truncation floor) and
        selection ends.
        """
        limit = self.config.max_context_chars if max_chars is None else max_chars
        threshold = self.config.high_importance_threshold
        floor = self.config.min_truncation_chars

        parts: List[str] = []
        total = 0
        for generated, score in self.rank(files):
            block = format_block(generated.path, generated.content)
            if total + len(block) <= limit:
                parts.append(block)
                total += len(block)
                continue

            if score < threshold:
                self.logger.debug("Skipping %s (score %.2f) to respect context cap", generated.path, score)
                continue

            remaining = limit - total
            if remaining > floor:
                header = f"// File: {generated.path}\n"
                room = remaining - len(header) - len(_TRUNCATION_MARKER)
                if room > 0:
                    parts.append(header + generated.content[:room] + _TRUNCATION_MARKER)
                    self.logger.debug(
                        "Truncated %s to %d chars to fit context cap", generated.path, room
                    )
            break

        return "".join(parts)


__all__ = ["IncrementalCodeContextBuilder", "PhaseBatch", "format_block"]
