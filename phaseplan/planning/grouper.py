"""Domain grouping for classified features."""

from __future__ import annotations

from typing import Dict, Iterable, List

from ..models import FeatureClassification


def group_by_domain(
    classifications: Iterable[FeatureClassification],
) -> Dict[str, List[FeatureClassification]]:
    """Bucket classifications by domain, keeping first-insertion order.

    A classification that requires its own phase is dropped when its bucket
    already holds one with the same suggested phase name, so an explicit
    "Login" feature and the implicit auth flag collapse into one entry.
    """
    grouped: Dict[str, List[FeatureClassification]] = {}
    for item in classifications:
        bucket = grouped.setdefault(item.domain, [])
        if item.requires_own_phase and any(
            existing.suggested_phase_name == item.suggested_phase_name for existing in bucket
        ):
            continue
        bucket.append(item)
    return grouped


__all__ = ["group_by_domain"]
