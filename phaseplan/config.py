"""Configuration loading for phaseplan (.phaseplan.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigError

CONFIG_FILENAME = ".phaseplan.yml"


@dataclass(frozen=True)
class TokenEstimates:
    """Base token estimates per phase category."""

    simple_feature: int = 1200
    setup_phase: int = 2000
    polish_phase: int = 2500


@dataclass(frozen=True)
class PlannerConfig:
    """Limits that shape the phase plan. Immutable; share freely."""

    min_phases: int = 2
    max_phases: int = 30
    max_tokens_per_phase: int = 8000
    max_features_per_phase: int = 4
    token_estimates: TokenEstimates = field(default_factory=TokenEstimates)

    def with_overrides(self, **overrides: Any) -> "PlannerConfig":
        estimates = overrides.pop("token_estimates", None)
        if isinstance(estimates, dict):
            overrides["token_estimates"] = replace(self.token_estimates, **estimates)
        elif estimates is not None:
            overrides["token_estimates"] = estimates
        return replace(self, **overrides)


@dataclass(frozen=True)
class ContextConfig:
    """Size limits for code context windows and transcript extraction."""

    max_context_chars: int = 50_000
    min_truncation_chars: int = 500
    high_importance_threshold: float = 0.8
    enricher_max_paragraphs: int = 8
    enricher_max_chars: int = 12_000


@dataclass(frozen=True)
class PhasePlanConfig:
    """Represents the settings defined in .phaseplan.yml."""

    root: Path
    planner: PlannerConfig = field(default_factory=PlannerConfig)
    context: ContextConfig = field(default_factory=ContextConfig)


def load_config(config_path: Path) -> PhasePlanConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(Path(config_path))
    root = config_file.parent.resolve()

    if not config_file.exists():
        return PhasePlanConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    planner_data = _as_dict(data.get("planner"))
    defaults = PlannerConfig()
    estimates_data = _as_dict(planner_data.get("token_estimates"))
    estimates = TokenEstimates(
        simple_feature=_as_int(estimates_data.get("simple_feature"))
        or defaults.token_estimates.simple_feature,
        setup_phase=_as_int(estimates_data.get("setup_phase"))
        or defaults.token_estimates.setup_phase,
        polish_phase=_as_int(estimates_data.get("polish_phase"))
        or defaults.token_estimates.polish_phase,
    )
    planner = PlannerConfig(
        min_phases=_pick_int(planner_data.get("min_phases"), defaults.min_phases),
        max_phases=_pick_int(planner_data.get("max_phases"), defaults.max_phases),
        max_tokens_per_phase=_pick_int(
            planner_data.get("max_tokens_per_phase"), defaults.max_tokens_per_phase
        ),
        max_features_per_phase=_pick_int(
            planner_data.get("max_features_per_phase"), defaults.max_features_per_phase
        ),
        token_estimates=estimates,
    )
    if planner.max_features_per_phase < 1:
        raise ConfigError("planner.max_features_per_phase must be at least 1")
    if planner.min_phases > planner.max_phases:
        raise ConfigError("planner.min_phases cannot exceed planner.max_phases")

    context_data = _as_dict(data.get("context"))
    context_defaults = ContextConfig()
    threshold = _as_float(context_data.get("high_importance_threshold"))
    context = ContextConfig(
        max_context_chars=_pick_int(
            context_data.get("max_context_chars"), context_defaults.max_context_chars
        ),
        min_truncation_chars=_pick_int(
            context_data.get("min_truncation_chars"), context_defaults.min_truncation_chars
        ),
        high_importance_threshold=(
            threshold if threshold is not None else context_defaults.high_importance_threshold
        ),
        enricher_max_paragraphs=_pick_int(
            context_data.get("enricher_max_paragraphs"),
            context_defaults.enricher_max_paragraphs,
        ),
        enricher_max_chars=_pick_int(
            context_data.get("enricher_max_chars"), context_defaults.enricher_max_chars
        ),
    )

    return PhasePlanConfig(root=root, planner=planner, context=context)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.replace("_", ""))
        except ValueError:
            return None
    return None


def _pick_int(value: Any, default: int) -> int:
    parsed = _as_int(value)
    return default if parsed is None else parsed


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "ContextConfig",
    "PhasePlanConfig",
    "PlannerConfig",
    "TokenEstimates",
    "load_config",
]
