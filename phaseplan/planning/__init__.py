"""Planning pipeline: classification, grouping, phase assembly and dependencies."""

from .builder import PhaseBuilder, build_design_context, estimate_time
from .classifier import (
    FeatureClassifier,
    analyze_layout_complexity,
    detect_memory_needs,
    infer_dependencies,
    infer_state_complexity,
)
from .dependencies import DependencyResolver, find_cycles
from .grouper import group_by_domain

__all__ = [
    "DependencyResolver",
    "FeatureClassifier",
    "PhaseBuilder",
    "analyze_layout_complexity",
    "build_design_context",
    "detect_memory_needs",
    "estimate_time",
    "find_cycles",
    "group_by_domain",
    "infer_dependencies",
    "infer_state_complexity",
]
