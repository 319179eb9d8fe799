"""Helper utilities for constructing application concepts in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Any, Dict, List, Mapping

from phaseplan.models import (
    AppConcept,
    DataModel,
    Feature,
    LayoutManifest,
    TechnicalRequirements,
    UIPreferences,
    UserRole,
    Workflow,
)


class ConceptBuilder:
    """Fluent builder for ``AppConcept`` instances and concept files."""

    def __init__(self, tmp_path: Path, name: str = "Demo App") -> None:
        self.root = tmp_path
        self.name = name
        self.description = "A demo application"
        self.purpose = ""
        self.target_users = ""
        self._features: List[Feature] = []
        self._flags: Dict[str, Any] = {}
        self._roles: List[UserRole] = []
        self._models: List[DataModel] = []
        self._ui = UIPreferences()
        self._transcript = ""
        self._layout_design: Mapping[str, Any] | None = None
        self._manifest: LayoutManifest | None = None
        self._workflows: List[Workflow] = []

    def feature(
        self, name: str, description: str = "", priority: str = "medium"
    ) -> "ConceptBuilder":
        self._features.append(
            Feature(
                id=f"f{len(self._features) + 1}",
                name=name,
                description=description,
                priority=priority,
            )
        )
        return self

    def flags(self, **flags: Any) -> "ConceptBuilder":
        self._flags.update(flags)
        return self

    def role(self, name: str, *capabilities: str) -> "ConceptBuilder":
        self._roles.append(UserRole(name=name, capabilities=list(capabilities)))
        return self

    def model(self, name: str) -> "ConceptBuilder":
        self._models.append(DataModel(name=name))
        return self

    def workflow(self, name: str, *steps: str, roles: tuple[str, ...] = ()) -> "ConceptBuilder":
        self._workflows.append(Workflow(name=name, steps=list(steps), involved_roles=list(roles)))
        return self

    def ui(self, **prefs: Any) -> "ConceptBuilder":
        self._ui = UIPreferences(**prefs)
        return self

    def transcript(self, text: str) -> "ConceptBuilder":
        self._transcript = textwrap.dedent(text).strip()
        return self

    def layout(
        self,
        design: Mapping[str, Any] | None = None,
        manifest: LayoutManifest | None = None,
    ) -> "ConceptBuilder":
        self._layout_design = design
        self._manifest = manifest
        return self

    def build(self) -> AppConcept:
        technical = TechnicalRequirements(data_models=list(self._models), **self._flags)
        return AppConcept(
            name=self.name,
            description=self.description,
            purpose=self.purpose,
            target_users=self.target_users,
            core_features=list(self._features),
            technical=technical,
            ui_preferences=self._ui,
            roles=list(self._roles),
            conversation_context=self._transcript,
            layout_design=dict(self._layout_design) if self._layout_design else None,
            layout_manifest=self._manifest,
            workflows=list(self._workflows),
        )

    def write(self, relative: str, content: str) -> Path:
        """Write a concept (or any) document under the builder root."""
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")
        return path


__all__ = ["ConceptBuilder"]
