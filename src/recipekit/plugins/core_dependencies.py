"""Standard dependency set shared by every library subproject."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from recipekit.project import Project

CORE_DEPENDENCIES: tuple[tuple[str, str], ...] = (
    ("compile_only", "org.jetbrains:annotations:24.0.1"),
    ("compile_only", "org.projectlombok:lombok:1.18.26"),
    ("annotation_processor", "org.projectlombok:lombok:1.18.26"),
)


@dataclass(slots=True)
class CoreDependenciesPlugin:
    plugin_id: ClassVar[str] = "core-dependencies"
    dependencies: tuple[tuple[str, str], ...] = CORE_DEPENDENCIES

    def apply(self, project: Project) -> None:
        for scope, notation in self.dependencies:
            project.dependencies.add(scope, notation)
