"""Regex extraction of per-file metadata from generated source files."""

from __future__ import annotations

import re
from typing import Dict, List

from ..models import ImportInfo

FILE_TYPES = ("component", "api", "type", "util", "style", "config", "other")
HTTP_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH")

_MAX_EXPORTS = 20
_MAX_DEPENDENCIES = 15

_NAMED_EXPORT = re.compile(r"export\s+(?:async\s+)?(?:const|let|function|class|interface|type)\s+(\w+)")
_DEFAULT_EXPORT = re.compile(r"export\s+default\s+(?:function|class)\s+(\w+)")
_BRACED_EXPORT = re.compile(r"export\s*\{\s*([^}]+)\s*\}")
_ALIAS_SPLIT = re.compile(r"\s+as\s+")

_IMPORT_SOURCE = re.compile(r"""import\s+(?:.*?\s+from\s+)?['"]([^'"]+)['"]""")
_NAMED_IMPORT = re.compile(r"""import\s+\{([^}]+)\}\s+from\s+['"]([^'"]+)['"]""")
_DEFAULT_IMPORT = re.compile(r"""import\s+(\w+)\s+from\s+['"]([^'"]+)['"]""")

_LEADING_DOC = re.compile(r"^/\*\*[\s\S]*?\*/")
_DOC_MARKERS = re.compile(r"/\*\*|\*/|\*")
_SCRIPT_SUFFIX = re.compile(r"\.(tsx?|jsx?)$")
_CONFIG_SUFFIX = re.compile(r"\.(ts|js|json)$")


def classify_file_type(path: str, content: str) -> str:
    """Return the coarse role of a file; the first matching rule wins."""
    lowered = path.lower()
    if "/api/" in lowered or "route.ts" in lowered:
        return "api"
    if "/types/" in lowered or lowered.endswith(".d.ts"):
        return "type"
    if any(marker in lowered for marker in ("/utils/", "/lib/", "/helpers/")):
        return "util"
    if "/components/" in lowered or (
        "export default function" in content and "return (" in content
    ):
        return "component"
    if lowered.endswith((".css", ".scss")) or "/styles/" in lowered:
        return "style"
    if ".config." in lowered or "/config/" in lowered:
        return "config"
    return "other"


def extract_exports(content: str) -> List[str]:
    exports: Dict[str, None] = {}
    for match in _NAMED_EXPORT.finditer(content):
        exports.setdefault(match.group(1), None)
    default = _DEFAULT_EXPORT.search(content)
    if default:
        exports.setdefault(f"default:{default.group(1)}", None)
    for match in _BRACED_EXPORT.finditer(content):
        for item in match.group(1).split(","):
            name = _ALIAS_SPLIT.split(item.strip())[0].strip()
            if name:
                exports.setdefault(name, None)
    return list(exports)[:_MAX_EXPORTS]


def extract_imports(content: str) -> List[str]:
    """Return distinct package names imported by the file (relative paths skipped)."""
    packages: Dict[str, None] = {}
    for match in _IMPORT_SOURCE.finditer(content):
        source = match.group(1)
        if source.startswith("."):
            continue
        packages.setdefault(source.split("/")[0], None)
    return list(packages)[:_MAX_DEPENDENCIES]


def extract_imports_rich(content: str) -> List[ImportInfo]:
    """Return named and default imports with their sources, relative ones included."""
    imports: List[ImportInfo] = []
    for match in _NAMED_IMPORT.finditer(content):
        symbols = [
            _ALIAS_SPLIT.split(item.strip())[0].strip()
            for item in match.group(1).split(",")
        ]
        source = match.group(2)
        imports.append(
            ImportInfo(
                symbols=[symbol for symbol in symbols if symbol],
                source=source,
                is_relative=source.startswith("."),
            )
        )
    for match in _DEFAULT_IMPORT.finditer(content):
        source = match.group(2)
        if any(existing.source == source for existing in imports):
            continue
        imports.append(
            ImportInfo(
                symbols=[f"default:{match.group(1)}"],
                source=source,
                is_relative=source.startswith("."),
            )
        )
    return imports


def generate_file_summary(path: str, content: str) -> str:
    """One-line description: the leading doc comment, else a per-type template."""
    doc = _LEADING_DOC.match(content)
    if doc:
        cleaned = _DOC_MARKERS.sub("", doc.group(0)).strip()
        first_line = cleaned.split("\n")[0].strip()
        if 10 < len(first_line) < 150:
            return first_line

    file_type = classify_file_type(path, content)
    exports = extract_exports(content)
    file_name = path.rsplit("/", 1)[-1] or path

    if file_type == "api":
        methods = [name for name in exports if name in HTTP_METHODS]
        return f"API route handling {', '.join(methods) or 'requests'}"
    if file_type == "component":
        name = exports[0] if exports else _SCRIPT_SUFFIX.sub("", file_name)
        return f"React component: {name}"
    if file_type in ("type", "util"):
        label = "Type definitions" if file_type == "type" else "Utility functions"
        more = "..." if len(exports) > 3 else ""
        return f"{label}: {', '.join(exports[:3])}{more}"
    if file_type == "config":
        return f"Configuration for {_CONFIG_SUFFIX.sub('', file_name)}"
    return f"{file_name} - {len(exports)} exports"


__all__ = [
    "FILE_TYPES",
    "HTTP_METHODS",
    "classify_file_type",
    "extract_exports",
    "extract_imports",
    "extract_imports_rich",
    "generate_file_summary",
]
