"""Fail-safe results for planning runs that raise unexpectedly."""

from __future__ import annotations

from typing import Sequence

from .models import AnalysisDetails, AppConcept, PlanResult

_MAX_REASON_CHARS = 200


def build_analysis_stub(concept: AppConcept | None) -> AnalysisDetails:
    """Best-effort analysis block when classification never completed."""
    features = getattr(concept, "core_features", None)
    total = len(features) if isinstance(features, (list, tuple)) else 0
    return AnalysisDetails(total_features=total)


def build_failure_result(
    concept: AppConcept | None,
    error: BaseException | str | None,
    warnings: Sequence[str] = (),
) -> PlanResult:
    """Return an unsuccessful ``PlanResult`` carrying a readable error message."""
    return PlanResult(
        success=False,
        plan=None,
        error=_format_reason(error),
        warnings=list(warnings),
        analysis_details=build_analysis_stub(concept),
    )


def _format_reason(error: BaseException | str | None) -> str:
    if error is None:
        return "Unknown error during phase generation"
    text = str(error) if not isinstance(error, str) else error
    cleaned = " ".join(text.strip().split())
    if not cleaned:
        if isinstance(error, BaseException):
            return f"{type(error).__name__} during phase generation"
        return "Unknown error during phase generation"
    return cleaned[:_MAX_REASON_CHARS] + ("…" if len(cleaned) > _MAX_REASON_CHARS else "")


__all__ = ["build_analysis_stub", "build_failure_result"]
