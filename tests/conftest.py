from __future__ import annotations

from pathlib import Path

import pytest

from phaseplan.config import PlannerConfig
from tests._fixtures.concept_builder import ConceptBuilder


@pytest.fixture
def concept_builder(tmp_path: Path) -> ConceptBuilder:
    """Provide a reusable concept builder rooted at the pytest tmp_path."""
    return ConceptBuilder(tmp_path)


@pytest.fixture
def planner_config() -> PlannerConfig:
    return PlannerConfig()
