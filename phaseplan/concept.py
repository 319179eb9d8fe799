"""Loads application concepts from YAML or JSON documents."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from .errors import ConceptError
from .models import (
    AppConcept,
    DataField,
    DataModel,
    Feature,
    LayoutManifest,
    TechnicalRequirements,
    UIPreferences,
    UserRole,
    Workflow,
)

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")

_TECHNICAL_FLAGS = (
    "needs_auth",
    "needs_database",
    "needs_realtime",
    "needs_file_upload",
    "needs_api",
    "needs_i18n",
    "needs_offline_support",
    "needs_caching",
    "needs_state_history",
    "needs_context_persistence",
)


def load_concept(path: Path) -> AppConcept:
    """Read a concept document from ``path``.

    JSON is a subset of YAML, so both formats go through ``yaml.safe_load``.
    """
    concept_path = Path(path).expanduser()
    if not concept_path.is_file():
        raise ConceptError(f"Concept file not found: {concept_path}")
    try:
        data = yaml.safe_load(concept_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConceptError(f"Failed to parse {concept_path.name}: {exc}") from exc
    return concept_from_dict(data)


def concept_from_dict(data: Any) -> AppConcept:
    """Build an ``AppConcept`` from a plain mapping (snake_case or camelCase keys)."""
    if not isinstance(data, Mapping):
        raise ConceptError("Concept document must be a mapping at the root")
    raw = _normalise(data)

    name = raw.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ConceptError("Concept requires a non-empty 'name'")

    technical_data = _mapping(raw.get("technical") or raw.get("technical_requirements"), "technical")
    technical = _technical(technical_data)
    if not technical.data_models and raw.get("data_models"):
        technical.data_models = _data_models(raw.get("data_models"))

    manifest_data = raw.get("layout_manifest")
    return AppConcept(
        name=name.strip(),
        description=_text(raw.get("description")),
        purpose=_text(raw.get("purpose")),
        target_users=_text(raw.get("target_users")),
        core_features=_features(raw.get("core_features") or raw.get("features")),
        technical=technical,
        ui_preferences=_ui_preferences(_mapping(raw.get("ui_preferences"), "ui_preferences")),
        roles=_roles(raw.get("roles")),
        conversation_context=_text(raw.get("conversation_context")),
        layout_design=_optional_mapping(data, "layoutDesign", "layout_design"),
        layout_manifest=_manifest(manifest_data) if manifest_data is not None else None,
        workflows=_workflows(raw.get("workflows")),
    )


def _features(value: Any) -> List[Feature]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConceptError("'core_features' must be a list")
    features: List[Feature] = []
    for index, item in enumerate(value, start=1):
        if isinstance(item, str):
            features.append(Feature(id=f"feature-{index}", name=item))
            continue
        entry = _mapping(item, f"core_features[{index - 1}]")
        name = entry.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ConceptError(f"core_features[{index - 1}] requires a 'name'")
        priority = _text(entry.get("priority")).lower() or "medium"
        features.append(
            Feature(
                id=_text(entry.get("id")) or f"feature-{index}",
                name=name.strip(),
                description=_text(entry.get("description")),
                priority=priority,
            )
        )
    return features


def _technical(data: Dict[str, Any]) -> TechnicalRequirements:
    flags = {flag: bool(data.get(flag, False)) for flag in _TECHNICAL_FLAGS}
    languages = data.get("i18n_languages") or []
    if not isinstance(languages, list):
        raise ConceptError("'i18n_languages' must be a list")
    return TechnicalRequirements(
        auth_type=_optional_text(data.get("auth_type")),
        i18n_languages=[str(language) for language in languages],
        state_complexity=_optional_text(data.get("state_complexity")),
        data_models=_data_models(data.get("data_models")),
        **flags,
    )


def _data_models(value: Any) -> List[DataModel]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConceptError("'data_models' must be a list")
    models: List[DataModel] = []
    for item in value:
        entry = _mapping(item, "data_models")
        fields = []
        for field_item in entry.get("fields") or []:
            if isinstance(field_item, str):
                fields.append(DataField(name=field_item))
                continue
            field_entry = _mapping(field_item, "data_models.fields")
            fields.append(
                DataField(
                    name=_text(field_entry.get("name")),
                    type=_text(field_entry.get("type")) or "string",
                    required=bool(field_entry.get("required", False)),
                )
            )
        models.append(DataModel(name=_text(entry.get("name")), fields=fields))
    return models


def _roles(value: Any) -> List[UserRole]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConceptError("'roles' must be a list")
    roles: List[UserRole] = []
    for item in value:
        if isinstance(item, str):
            roles.append(UserRole(name=item))
            continue
        entry = _mapping(item, "roles")
        roles.append(
            UserRole(
                name=_text(entry.get("name")),
                capabilities=[str(cap) for cap in entry.get("capabilities") or []],
                permissions=[str(perm) for perm in entry.get("permissions") or []],
            )
        )
    return roles


def _workflows(value: Any) -> List[Workflow]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConceptError("'workflows' must be a list")
    workflows: List[Workflow] = []
    for index, item in enumerate(value):
        entry = _mapping(item, f"workflows[{index}]")
        name = _text(entry.get("name"))
        if not name:
            raise ConceptError(f"workflows[{index}] requires a 'name'")
        workflows.append(
            Workflow(
                name=name,
                description=_text(entry.get("description")),
                steps=[str(step) for step in entry.get("steps") or []],
                involved_roles=[str(role) for role in entry.get("involved_roles") or []],
            )
        )
    return workflows


def _ui_preferences(data: Dict[str, Any]) -> UIPreferences:
    return UIPreferences(
        style=_optional_text(data.get("style")),
        color_scheme=_optional_text(data.get("color_scheme")),
        layout=_optional_text(data.get("layout")),
        primary_color=_optional_text(data.get("primary_color")),
        inspiration=_optional_text(data.get("inspiration")),
    )


def _manifest(value: Any) -> LayoutManifest:
    entry = _mapping(value, "layout_manifest")
    detected = entry.get("detected_features") or []
    if not isinstance(detected, list):
        raise ConceptError("'layout_manifest.detected_features' must be a list")
    root = entry.get("root")
    design_system = entry.get("design_system") or {}
    return LayoutManifest(
        detected_features=[str(tag) for tag in detected],
        root=root if isinstance(root, dict) else None,
        design_system=design_system if isinstance(design_system, dict) else {},
    )


def _normalise(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Snake-case keys recursively, leaving list items that are not mappings alone."""
    normalised: Dict[str, Any] = {}
    for key, value in data.items():
        normalised[_snake(str(key))] = _normalise_value(value)
    return normalised


def _normalise_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return _normalise(value)
    if isinstance(value, list):
        return [_normalise_value(item) for item in value]
    return value


def _snake(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def _mapping(value: Any, label: str) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConceptError(f"'{label}' must be a mapping")
    return dict(value)


def _optional_mapping(data: Mapping[str, Any], *keys: str) -> Optional[Dict[str, Any]]:
    for key in keys:
        value = data.get(key)
        if isinstance(value, Mapping):
            return dict(value)
    return None


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _optional_text(value: Any) -> Optional[str]:
    text = _text(value)
    return text or None


__all__ = ["concept_from_dict", "load_concept"]
