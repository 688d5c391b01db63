"""Projects and plugin composition."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, TypeVar, runtime_checkable

from recipekit.configurations import ConfigurationContainer, DependencyHandler
from recipekit.errors import MissingPluginError, ValidationError
from recipekit.files import FileCollection, PathSource, file_collection
from recipekit.observability import StructuredLogger
from recipekit.tasks import TaskContainer

if TYPE_CHECKING:
    from recipekit.build import Build

E = TypeVar("E")


@runtime_checkable
class Plugin(Protocol):
    """A reusable bundle of build-model mutations applied to a project."""

    plugin_id: str

    def apply(self, project: Project) -> None:
        """Mutate *project*; called at most once per project."""


class PluginManager:
    """Applies plugins to one project, once per plugin id."""

    def __init__(self, project: Project) -> None:
        self._project = project
        self._applied: list[str] = []

    def apply(self, plugin: str | Plugin) -> bool:
        """Apply *plugin*; return ``False`` when it was already applied."""
        resolved = self._resolve(plugin)
        if resolved.plugin_id in self._applied:
            return False
        # Record before applying so plugins that request each other terminate.
        self._applied.append(resolved.plugin_id)
        self._project.logger.log(
            operation="apply_plugin",
            project=self._project.path,
            task=None,
            plugin=resolved.plugin_id,
            message=f"Applying plugin '{resolved.plugin_id}'.",
        )
        resolved.apply(self._project)
        return True

    def has_plugin(self, plugin_id: str) -> bool:
        return plugin_id in self._applied

    @property
    def applied(self) -> tuple[str, ...]:
        return tuple(self._applied)

    def _resolve(self, plugin: str | Plugin) -> Plugin:
        if not isinstance(plugin, str):
            return plugin
        factory = self._project.build.plugin_registry.get(plugin)
        if factory is None:
            raise MissingPluginError(
                f"Plugin '{plugin}' is not available in this build.",
                hint="Register the plugin in Build.plugin_registry before requesting it.",
                context={"project": self._project.path, "plugin": plugin},
            )
        return factory()


@dataclass(eq=False, slots=True)
class Project:
    """One node of a multi-project build."""

    build: Build = field(repr=False)
    name: str
    path: str
    project_dir: Path
    version: str = "unspecified"
    build_dir: Path = field(init=False)
    tasks: TaskContainer = field(init=False, repr=False)
    configurations: ConfigurationContainer = field(init=False, repr=False)
    dependencies: DependencyHandler = field(init=False, repr=False)
    plugins: PluginManager = field(init=False, repr=False)
    extensions: dict[str, object] = field(init=False, default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        self.build_dir = self.project_dir / "build"
        self.tasks = TaskContainer(self)
        self.configurations = ConfigurationContainer(self)
        self.dependencies = DependencyHandler(self)
        self.plugins = PluginManager(self)

    @property
    def logger(self) -> StructuredLogger:
        return self.build.logger

    @property
    def source_dir(self) -> Path:
        return self.project_dir / "src"

    def apply(self, *plugins: str | Plugin) -> Project:
        if not plugins:
            raise ValidationError("apply() requires at least one plugin.")
        for plugin in plugins:
            self.plugins.apply(plugin)
        return self

    def files(self, *paths: str | PathSource) -> FileCollection:
        return file_collection(self, *paths)

    def add_extension(self, name: str, extension: E) -> E:
        if name in self.extensions:
            raise ValidationError(
                f"Extension '{name}' is already registered.",
                context={"project": self.path, "extension": name},
            )
        self.extensions[name] = extension
        return extension

    def extension(self, name: str, extension_type: type[E]) -> E:
        extension = self.extensions.get(name)
        if extension is None:
            raise ValidationError(
                f"Extension '{name}' not found in project {self.path}.",
                hint="Apply the plugin that contributes this extension first.",
                context={"project": self.path, "extension": name},
            )
        if not isinstance(extension, extension_type):
            raise ValidationError(
                f"Extension '{name}' is not a {extension_type.__name__}.",
                context={"project": self.path, "extension": name},
            )
        return extension
