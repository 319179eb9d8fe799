"""Parser for the delimited file-block format returned by the code generator.

Output looks like::

    ===FILE:src/app/page.tsx===
    export default function Page() { ... }
    ===FILE:src/lib/db.ts===
    ...
    ===DEPENDENCIES===
    {"zod": "^3.22.0"}
    ===END===
"""

from __future__ import annotations

import json
import re
from typing import Dict, Iterable, List, Mapping, Optional

from .logging import get_logger
from .models import GeneratedFile

_FILE_BLOCK = re.compile(
    r"^===FILE:([^=\n]+)===\n?([\s\S]*?)(?=\n?^===(?:FILE|DEPENDENCIES|END)===|\Z)",
    re.MULTILINE,
)
_DEPENDENCIES_BLOCK = re.compile(
    r"^===DEPENDENCIES===\n?([\s\S]*?)(?=\n?^===(?:FILE|END)===|\Z)",
    re.MULTILINE,
)

logger = get_logger("codegen")


def parse_generated_files(text: str) -> List[GeneratedFile]:
    """Extract ``(path, content)`` pairs in the order they appear."""
    if not text:
        return []
    files: List[GeneratedFile] = []
    for match in _FILE_BLOCK.finditer(text):
        path = match.group(1).strip()
        if not path:
            continue
        files.append(GeneratedFile(path=path, content=match.group(2).rstrip()))
    return files


def parse_dependencies(text: str) -> Dict[str, str]:
    """Return the package map from the ``===DEPENDENCIES===`` block, if any."""
    match = _DEPENDENCIES_BLOCK.search(text or "")
    if not match:
        return {}
    body = match.group(1).strip()
    if not body:
        return {}
    try:
        data = json.loads(body)
    except json.JSONDecodeError as exc:
        logger.debug("Ignoring malformed dependencies block: %s", exc)
        return {}
    if not isinstance(data, dict):
        return {}
    return {str(name): str(version) for name, version in data.items()}


def extract_file_paths(text: str) -> List[str]:
    return [generated.path for generated in parse_generated_files(text)]


def render_generated_files(
    files: Iterable[GeneratedFile],
    dependencies: Optional[Mapping[str, str]] = None,
) -> str:
    """Serialise files back into the delimited format, closed by ``===END===``."""
    chunks: List[str] = []
    for generated in files:
        chunks.append(f"===FILE:{generated.path}===\n{generated.content}")
    if dependencies:
        chunks.append("===DEPENDENCIES===\n" + json.dumps(dict(dependencies), indent=2))
    chunks.append("===END===")
    return "\n".join(chunks) + "\n"


__all__ = [
    "extract_file_paths",
    "parse_dependencies",
    "parse_generated_files",
    "render_generated_files",
]
