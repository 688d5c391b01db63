"""Mapping-logic convention: publishes a remapped archive next to the primary one.

Applying the convention to a library subproject:

  1. requests the compile, license, core-dependencies and remap conventions;
  2. adds ``project(":mappings:shared")`` to the ``implementation`` scope;
  3. pins the Java toolchain to language level 17;
  4. sets the ``remap`` archive classifier to ``remapped``;
  5. wires ``remap -> jar`` and ``build -> remap``;
  6. creates the consumable, non-resolvable ``remapped`` configuration whose
     single outgoing artifact is the archive ``remap`` writes.

Every failure is raised during configuration, before any task runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

from recipekit.archives import Jar
from recipekit.configurations import Configuration
from recipekit.plugins.core_dependencies import CoreDependenciesPlugin
from recipekit.plugins.java import JavaPlugin
from recipekit.plugins.license import LicensePlugin
from recipekit.plugins.remapper import REMAP_TASK, RemapJar, RemapperPlugin
from recipekit.toolchains import JavaExtension

if TYPE_CHECKING:
    from recipekit.project import Plugin, Project

SHARED_MAPPINGS_PROJECT = ":mappings:shared"
LANGUAGE_LEVEL = 17
REMAPPED_CLASSIFIER = "remapped"
REMAPPED_CONFIGURATION = "remapped"


@dataclass(slots=True)
class MappingLogicPlugin:
    """Composes the conventions every remapped library subproject needs.

    A collaborator set to ``None`` is not requested; the convention then
    relies on the project having applied it already.
    """

    plugin_id: ClassVar[str] = "mapping-logic"
    java: Plugin | None = field(default_factory=JavaPlugin)
    license: Plugin | None = field(default_factory=LicensePlugin)
    core_dependencies: Plugin | None = field(default_factory=CoreDependenciesPlugin)
    remapper: Plugin | None = field(default_factory=RemapperPlugin)

    def apply(self, project: Project) -> None:
        for plugin in (self.java, self.license, self.core_dependencies, self.remapper):
            if plugin is not None:
                project.plugins.apply(plugin)

        project.dependencies.implementation(
            project.dependencies.project(SHARED_MAPPINGS_PROJECT),
        )
        project.extension("java", JavaExtension).set_toolchain(LANGUAGE_LEVEL)

        remap = project.tasks.named(REMAP_TASK, RemapJar)
        remap.archive_classifier = REMAPPED_CLASSIFIER

        jar = project.tasks.named("jar", Jar)
        remap.depends_on(jar)
        project.tasks.named("build").depends_on(remap)

        configuration = remapped_configuration(project, remap)
        project.logger.log(
            operation="apply_convention",
            project=project.path,
            task=remap.name,
            plugin=self.plugin_id,
            message="Configured remapped archive publication.",
            extra={
                "configuration": configuration.name,
                "artifact": str(remap.archive_file),
                "language_version": LANGUAGE_LEVEL,
            },
        )


def remapped_configuration(project: Project, remap: RemapJar) -> Configuration:
    """Create the outgoing ``remapped`` configuration for *remap*'s archive."""
    configuration = project.configurations.create(
        REMAPPED_CONFIGURATION,
        can_be_consumed=True,
        can_be_resolved=False,
        description="Remapped archive for consumers that need readable symbols.",
    )
    # Follows the task so later version or build_dir changes stay in sync.
    files = project.files(lambda: remap.archive_file).built_by(remap)
    configuration.artifact(files)
    configuration.add_dependency(project.dependencies.create(files))
    return configuration
