"""Tests for phaseplan.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from phaseplan.config import (
    ContextConfig,
    PhasePlanConfig,
    PlannerConfig,
    TokenEstimates,
    load_config,
)
from phaseplan.errors import ConfigError


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, PhasePlanConfig)
    assert config.root == tmp_path.resolve()
    assert config.planner == PlannerConfig()
    assert config.context == ContextConfig()
    assert config.planner.max_tokens_per_phase == 8000
    assert config.planner.token_estimates == TokenEstimates(1200, 2000, 2500)


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".phaseplan.yml"
    config_file.write_text(
        """
planner:
  min_phases: 3
  max_phases: 12
  max_tokens_per_phase: "6_000"
  max_features_per_phase: 3
  token_estimates:
    simple_feature: 1000
    polish_phase: 3000
context:
  max_context_chars: 20000
  min_truncation_chars: 250
  high_importance_threshold: 0.75
  enricher_max_paragraphs: 4
unknown_section:
  ignored: true
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.planner.min_phases == 3
    assert config.planner.max_phases == 12
    assert config.planner.max_tokens_per_phase == 6000
    assert config.planner.max_features_per_phase == 3
    assert config.planner.token_estimates == TokenEstimates(
        simple_feature=1000, setup_phase=2000, polish_phase=3000
    )
    assert config.context.max_context_chars == 20000
    assert config.context.min_truncation_chars == 250
    assert config.context.high_importance_threshold == pytest.approx(0.75)
    assert config.context.enricher_max_paragraphs == 4
    assert config.context.enricher_max_chars == 12_000


def test_load_config_accepts_directory(tmp_path: Path) -> None:
    (tmp_path / ".phaseplan.yml").write_text("planner:\n  max_phases: 9\n", encoding="utf-8")

    assert load_config(tmp_path).planner.max_phases == 9


def test_load_config_empty_file_uses_defaults(tmp_path: Path) -> None:
    (tmp_path / ".phaseplan.yml").write_text("\n", encoding="utf-8")

    assert load_config(tmp_path).planner == PlannerConfig()


def test_load_config_rejects_non_mapping(tmp_path: Path) -> None:
    (tmp_path / ".phaseplan.yml").write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_rejects_invalid_yaml(tmp_path: Path) -> None:
    (tmp_path / ".phaseplan.yml").write_text("planner: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Failed to parse"):
        load_config(tmp_path)


def test_load_config_rejects_inconsistent_limits(tmp_path: Path) -> None:
    config_file = tmp_path / ".phaseplan.yml"
    config_file.write_text("planner:\n  min_phases: 10\n  max_phases: 5\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="min_phases"):
        load_config(config_file)

    config_file.write_text("planner:\n  max_features_per_phase: 0\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="max_features_per_phase"):
        load_config(config_file)


def test_planner_config_with_overrides_returns_copy() -> None:
    base = PlannerConfig()

    updated = base.with_overrides(max_phases=10, token_estimates={"setup_phase": 1500})

    assert updated.max_phases == 10
    assert updated.token_estimates.setup_phase == 1500
    assert updated.token_estimates.simple_feature == 1200
    assert base.max_phases == 30
