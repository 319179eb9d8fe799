"""Metadata extraction for generated files."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from ..models import AccumulatedFile, APIContract, GeneratedFile
from .endpoints import endpoint_for_path, extract_api_contracts
from .files import (
    classify_file_type,
    extract_exports,
    extract_imports,
    extract_imports_rich,
    generate_file_summary,
)
from .patterns import detect_patterns


@dataclass
class FileAnalysis:
    """Aggregate metadata for a batch of generated files."""

    accumulated_files: List[AccumulatedFile] = field(default_factory=list)
    api_contracts: List[APIContract] = field(default_factory=list)
    established_patterns: List[str] = field(default_factory=list)


def analyze_generated_files(
    files: Iterable[GeneratedFile],
    *,
    phase_number: Optional[int] = None,
) -> FileAnalysis:
    analysis = FileAnalysis()
    patterns: dict[str, None] = {}
    for generated in files:
        file_type = classify_file_type(generated.path, generated.content)
        analysis.accumulated_files.append(
            AccumulatedFile(
                path=generated.path,
                type=file_type,
                exports=extract_exports(generated.content),
                dependencies=extract_imports(generated.content),
                imports=extract_imports_rich(generated.content),
                summary=generate_file_summary(generated.path, generated.content),
                phase_number=phase_number,
            )
        )
        if file_type == "api":
            analysis.api_contracts.extend(extract_api_contracts(generated.path, generated.content))
        for name in detect_patterns(generated.content):
            patterns.setdefault(name, None)
    analysis.established_patterns = list(patterns)
    return analysis


__all__ = [
    "FileAnalysis",
    "analyze_generated_files",
    "classify_file_type",
    "detect_patterns",
    "endpoint_for_path",
    "extract_api_contracts",
    "extract_exports",
    "extract_imports",
    "extract_imports_rich",
    "generate_file_summary",
]
