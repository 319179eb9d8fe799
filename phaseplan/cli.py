"""CLI entrypoints for phaseplan commands."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any

from .codegen import parse_generated_files
from .concept import load_concept
from .config import PhasePlanConfig, load_config
from .context import IncrementalCodeContextBuilder
from .errors import PhasePlanError
from .logging import configure_logging
from .models import DynamicPhasePlan, PlanResult
from .planner import PhasePlanner


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_config_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default=".",
        help="Path to .phaseplan.yml or the directory holding it (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="phaseplan",
        description="Plan application builds as bounded phases and budget their code context.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    plan_parser = subparsers.add_parser(
        "plan",
        help="Generate a phase plan from a concept document (YAML or JSON).",
    )
    _add_verbose_option(plan_parser, suppress_default=True)
    _add_config_option(plan_parser)
    plan_parser.add_argument("concept", help="Path to the concept document.")
    plan_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full plan result as JSON instead of a phase table.",
    )

    context_parser = subparsers.add_parser(
        "context",
        help="Print the bounded code context window for generated output.",
    )
    _add_verbose_option(context_parser, suppress_default=True)
    _add_config_option(context_parser)
    context_parser.add_argument(
        "generated",
        help="File holding ===FILE:<path>=== blocks from the code generator.",
    )
    context_parser.add_argument(
        "--max-chars",
        type=int,
        default=None,
        help="Override the context window size in characters.",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for phaseplan commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    as_json = bool(getattr(args, "json", False))
    configure_logging(verbose=bool(args.verbose), quiet=as_json)

    try:
        config = load_config(Path(args.config))
    except PhasePlanError as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "plan":
        _run_plan(parser, args, config, as_json=as_json)
    elif args.command == "context":
        _run_context(parser, args, config)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _run_plan(
    parser: argparse.ArgumentParser,
    args: argparse.Namespace,
    config: PhasePlanConfig,
    *,
    as_json: bool,
) -> None:
    try:
        concept = load_concept(Path(args.concept))
    except PhasePlanError as exc:
        parser.exit(1, f"{exc}\n")

    planner = PhasePlanner(config.planner, config.context)
    result = planner.generate_plan(concept)

    if as_json:
        print(json.dumps(plan_result_to_dict(result), indent=2))
    elif result.success and result.plan is not None:
        print(format_plan_table(result.plan))
        for warning in result.warnings:
            print(f"warning: {warning}")

    if not result.success:
        parser.exit(
            1, f"phaseplan plan failed: {result.error}\nRun with --verbose for more details.\n"
        )


def _run_context(
    parser: argparse.ArgumentParser,
    args: argparse.Namespace,
    config: PhasePlanConfig,
) -> None:
    path = Path(args.generated)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        parser.exit(1, f"Generated output not found: {path}\n")

    files = parse_generated_files(text)
    if not files:
        parser.exit(1, f"No ===FILE:<path>=== blocks found in {path}\n")

    builder = IncrementalCodeContextBuilder(config.context)
    builder.record_phase(1, files)
    print(builder.build_phase_context(args.max_chars), end="")


def format_plan_table(plan: DynamicPhasePlan) -> str:
    """Render a plan as a fixed-width table for terminals."""
    header = (
        f"{plan.app_name}: {plan.total_phases} phases, {plan.complexity}, "
        f"~{plan.estimated_total_tokens} tokens, {plan.estimated_total_time}"
    )
    rows = [header, ""]
    name_width = max([len(phase.name) for phase in plan.phases] + [5])
    rows.append(f"{'#':>3}  {'Phase':<{name_width}}  {'Domain':<12}  {'Tokens':>6}  Depends on")
    for phase in plan.phases:
        depends = ", ".join(str(dep) for dep in phase.dependencies) or "-"
        rows.append(
            f"{phase.number:>3}  {phase.name:<{name_width}}  {phase.domain:<12}  "
            f"{phase.estimated_tokens:>6}  {depends}"
        )
    return "\n".join(rows)


def plan_result_to_dict(result: PlanResult) -> dict[str, Any]:
    """Plain-data view of a ``PlanResult`` suitable for ``json.dumps``."""
    return asdict(result)


if __name__ == "__main__":
    main(sys.argv[1:])
