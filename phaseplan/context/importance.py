"""Importance scoring for generated files."""

from __future__ import annotations

import re

BASE_SCORE = 0.5

_EXPORTED_TYPE = re.compile(r"export\s+(?:interface|type)\s+\w+")
_CONTEXT_CONSTRUCT = re.compile(r"createContext\s*[<(]|\b\w+Provider\b")
_EXPORTED_HOOK = re.compile(r"export\s+(?:default\s+)?(?:const|function)\s+use[A-Z]\w*")
_SCHEMA_PATH = re.compile(r"schema|/models?/|\.model\.|prisma|migrations?/")
_SCHEMA_CONTENT = re.compile(
    r"@prisma/client|mongoose\.(?:Schema|model)|drizzle-orm|sequelize|pgTable\(|defineSchema\(|"
    r"^\s*model\s+\w+\s*\{",
    re.MULTILINE,
)
_TEST_PATH = re.compile(r"(?:\.test\.|\.spec\.|\.stories\.|\.story\.|/__tests__/|/tests?/)")


def score_file(path: str, content: str) -> float:
    """Return how valuable ``path`` is as context for later phases, in [0, 1].

    Shared definitions (types, schemas, providers, API routes) rank above
    leaf components; tests and stories rank below everything else.
    """
    lowered = "/" + path.lower().lstrip("/")
    score = BASE_SCORE

    if "/types/" in lowered or lowered.endswith(".d.ts"):
        score += 0.35
    elif _EXPORTED_TYPE.search(content):
        score += 0.25

    if "/api/" in lowered:
        score += 0.25

    if any(marker in lowered for marker in ("/utils/", "/lib/", "/helpers/")):
        score += 0.2

    if _CONTEXT_CONSTRUCT.search(content):
        score += 0.25

    if "/hooks/" in lowered or _EXPORTED_HOOK.search(content):
        score += 0.15

    if _SCHEMA_PATH.search(lowered) or _SCHEMA_CONTENT.search(content):
        score += 0.3

    if ".config." in lowered or "/config/" in lowered:
        score += 0.15

    if _TEST_PATH.search(lowered):
        score -= 0.3

    return max(0.0, min(1.0, score))


__all__ = ["BASE_SCORE", "score_file"]
