"""Tests for the generated-code block parser."""

from __future__ import annotations

from phaseplan.codegen import (
    extract_file_paths,
    parse_dependencies,
    parse_generated_files,
    render_generated_files,
)
from phaseplan.models import GeneratedFile

OUTPUT = """===FILE:src/app/page.tsx===
export default function Page() {
  return <main />;
}

===FILE:src/lib/db.ts===
export const db = connect();   
===DEPENDENCIES===
{"zod": "^3.22.0", "swr": "^2.2.0"}
===END===
"""


def test_parse_generated_files_preserves_multiline_content() -> None:
    files = parse_generated_files(OUTPUT)

    assert files == [
        GeneratedFile(
            path="src/app/page.tsx",
            content="export default function Page() {\n  return <main />;\n}",
        ),
        GeneratedFile(path="src/lib/db.ts", content="export const db = connect();"),
    ]


def test_parse_generated_files_runs_to_end_of_text_without_terminator() -> None:
    files = parse_generated_files("===FILE:a.ts===\nconst a = 1;\nconst b = 2;\n")

    assert files == [GeneratedFile(path="a.ts", content="const a = 1;\nconst b = 2;")]


def test_parse_generated_files_keeps_empty_blocks() -> None:
    files = parse_generated_files("===FILE:a.ts===\n===FILE:b.ts===\nconst b = 1\n===END===")

    assert files == [
        GeneratedFile(path="a.ts", content=""),
        GeneratedFile(path="b.ts", content="const b = 1"),
    ]


def test_parse_generated_files_ignores_markers_inside_lines() -> None:
    text = "===FILE:a.ts===\nconst marker = \"x ===END===\";\n===END===\n"

    assert parse_generated_files(text) == [
        GeneratedFile(path="a.ts", content="const marker = \"x ===END===\";")
    ]


def test_parse_generated_files_empty_input() -> None:
    assert parse_generated_files("") == []
    assert parse_generated_files("no blocks here") == []


def test_parse_dependencies() -> None:
    assert parse_dependencies(OUTPUT) == {"zod": "^3.22.0", "swr": "^2.2.0"}
    assert parse_dependencies("===DEPENDENCIES===\n{not json\n===END===") == {}
    assert parse_dependencies("===DEPENDENCIES===\n[1, 2]\n===END===") == {}
    assert parse_dependencies("===FILE:a.ts===\nx") == {}


def test_extract_file_paths() -> None:
    assert extract_file_paths(OUTPUT) == ["src/app/page.tsx", "src/lib/db.ts"]


def test_render_generated_files_is_parseable() -> None:
    files = [GeneratedFile(path="src/a.ts", content="export const a = 1")]

    rendered = render_generated_files(files, {"zod": "^3.22.0"})

    assert rendered.endswith("===END===\n")
    assert parse_generated_files(rendered) == files
    assert parse_dependencies(rendered) == {"zod": "^3.22.0"}
