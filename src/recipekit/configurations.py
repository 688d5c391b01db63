"""Dependency scopes, outgoing artifact sets, and their resolution."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Self

from recipekit.errors import DuplicateConfigurationError, ValidationError
from recipekit.files import FileCollection, file_collection

if TYPE_CHECKING:
    from recipekit.project import Project
    from recipekit.tasks import Task

DEFAULT_CONFIGURATION = "default"


@dataclass(frozen=True, slots=True)
class ProjectDependency:
    path: str
    configuration: str | None = None

    @property
    def notation(self) -> str:
        if self.configuration is None:
            return f"project({self.path})"
        return f"project({self.path}, configuration={self.configuration})"


@dataclass(frozen=True, slots=True)
class ModuleDependency:
    group: str
    name: str
    version: str | None = None

    @classmethod
    def parse(cls, notation: str) -> ModuleDependency:
        parts = notation.split(":")
        if len(parts) not in (2, 3) or not all(parts):
            raise ValidationError(
                "Module notation must be 'group:name' or 'group:name:version'.",
                context={"notation": notation},
            )
        return cls(group=parts[0], name=parts[1], version=parts[2] if len(parts) == 3 else None)

    @property
    def notation(self) -> str:
        if self.version is None:
            return f"{self.group}:{self.name}"
        return f"{self.group}:{self.name}:{self.version}"


@dataclass(frozen=True, slots=True)
class FileDependency:
    files: FileCollection

    @property
    def notation(self) -> str:
        return "files(" + ", ".join(str(path) for path in self.files) + ")"


Dependency = ProjectDependency | ModuleDependency | FileDependency


@dataclass(frozen=True, slots=True)
class PublishArtifact:
    """One outgoing file together with the collection recording its producers."""

    files: FileCollection

    @property
    def file(self) -> Path:
        return self.files.paths[0]

    def producers(self) -> tuple[Task, ...]:
        return self.files.producers()


@dataclass(slots=True)
class ResolvedConfiguration:
    files: tuple[Path, ...] = ()
    producers: tuple[Task, ...] = ()
    modules: tuple[ModuleDependency, ...] = ()


@dataclass(eq=False, slots=True)
class Configuration:
    """A named dependency scope that may also publish outgoing artifacts."""

    name: str
    project: Project = field(repr=False)
    can_be_consumed: bool = True
    can_be_resolved: bool = True
    description: str = ""
    dependencies: list[Dependency] = field(default_factory=list)
    outgoing: list[PublishArtifact] = field(default_factory=list)
    _extends_from: list[Configuration] = field(default_factory=list, init=False, repr=False)

    def extends_from(self, *configurations: Configuration) -> Self:
        for configuration in configurations:
            if configuration is self:
                raise ValidationError(
                    "A configuration cannot extend itself.",
                    context={"configuration": self.name},
                )
            if configuration not in self._extends_from:
                self._extends_from.append(configuration)
        return self

    @property
    def extended(self) -> tuple[Configuration, ...]:
        return tuple(self._extends_from)

    def add_dependency(self, dependency: Dependency) -> Dependency:
        if dependency not in self.dependencies:
            self.dependencies.append(dependency)
        return dependency

    def artifact(
        self,
        file: str | Path | FileCollection,
        *,
        built_by: str | Task | None = None,
    ) -> PublishArtifact:
        collection = (
            file if isinstance(file, FileCollection) else file_collection(self.project, file)
        )
        if len(collection) != 1:
            raise ValidationError(
                "An outgoing artifact must reference exactly one file.",
                context={"configuration": self.name, "files": str(len(collection))},
            )
        if built_by is not None:
            collection.built_by(built_by)
        published = PublishArtifact(files=collection)
        self.outgoing.append(published)
        return published

    def all_dependencies(self) -> tuple[Dependency, ...]:
        collected: list[Dependency] = []
        for parent in self._extends_from:
            for dependency in parent.all_dependencies():
                if dependency not in collected:
                    collected.append(dependency)
        for dependency in self.dependencies:
            if dependency not in collected:
                collected.append(dependency)
        return tuple(collected)

    def resolve(self) -> ResolvedConfiguration:
        if not self.can_be_resolved:
            raise ValidationError(
                f"Configuration '{self.name}' cannot be resolved.",
                hint="Resolve a classpath configuration that extends this scope instead.",
                context={"project": self.project.path, "configuration": self.name},
            )
        files: list[Path] = []
        producers: list[Task] = []
        modules: list[ModuleDependency] = []
        visited: set[tuple[str, str]] = set()
        for dependency in self.all_dependencies():
            _collect(dependency, self.project, files, producers, modules, visited)
        return ResolvedConfiguration(
            files=tuple(files),
            producers=tuple(producers),
            modules=tuple(modules),
        )

    def as_file_collection(self) -> FileCollection:
        """Resolved files as a collection whose producers become task inputs."""
        resolved = self.resolve()
        collection = file_collection(self.project, *resolved.files)
        collection.built_by(*resolved.producers)
        return collection


def _collect(
    dependency: Dependency,
    owner: Project,
    files: list[Path],
    producers: list[Task],
    modules: list[ModuleDependency],
    visited: set[tuple[str, str]],
) -> None:
    if isinstance(dependency, ModuleDependency):
        if dependency not in modules:
            modules.append(dependency)
        return
    if isinstance(dependency, FileDependency):
        _merge(dependency.files, files, producers)
        return
    target_project = owner.build.project(dependency.path)
    target_name = dependency.configuration or DEFAULT_CONFIGURATION
    key = (target_project.path, target_name)
    if key in visited:
        return
    visited.add(key)
    target = target_project.configurations.named(target_name)
    if not target.can_be_consumed:
        raise ValidationError(
            f"Configuration '{target_name}' of {target_project.path} is not consumable.",
            context={
                "project": owner.path,
                "target_project": target_project.path,
                "configuration": target_name,
            },
        )
    for published in target.outgoing:
        _merge(published.files, files, producers)
    for transitive in target.all_dependencies():
        _collect(transitive, target_project, files, producers, modules, visited)


def _merge(collection: FileCollection, files: list[Path], producers: list[Task]) -> None:
    for path in collection:
        if path not in files:
            files.append(path)
    for producer in collection.producers():
        if producer not in producers:
            producers.append(producer)


class ConfigurationContainer:
    """Named configurations declared by one project."""

    def __init__(self, project: Project) -> None:
        self._project = project
        self._configurations: dict[str, Configuration] = {}

    def create(
        self,
        name: str,
        *,
        can_be_consumed: bool = True,
        can_be_resolved: bool = True,
        description: str = "",
    ) -> Configuration:
        if not name:
            raise ValidationError("create() requires a non-empty configuration name.")
        if name in self._configurations:
            raise DuplicateConfigurationError(
                f"Configuration '{name}' already exists in project {self._project.path}.",
                hint="Pick a different name or configure the existing configuration.",
                context={"project": self._project.path, "configuration": name},
            )
        configuration = Configuration(
            name=name,
            project=self._project,
            can_be_consumed=can_be_consumed,
            can_be_resolved=can_be_resolved,
            description=description,
        )
        self._configurations[name] = configuration
        self._project.logger.log(
            operation="create_configuration",
            project=self._project.path,
            task=None,
            plugin=None,
            message=f"Created configuration '{name}'.",
            extra={"consumable": can_be_consumed, "resolvable": can_be_resolved},
        )
        return configuration

    def maybe_create(self, name: str, **options: bool | str) -> Configuration:
        existing = self._configurations.get(name)
        if existing is not None:
            return existing
        return self.create(name, **options)  # type: ignore[arg-type]

    def named(self, name: str) -> Configuration:
        configuration = self._configurations.get(name)
        if configuration is None:
            raise ValidationError(
                f"Configuration '{name}' not found in project {self._project.path}.",
                hint="Apply the plugin that declares this configuration first.",
                context={"project": self._project.path, "configuration": name},
            )
        return configuration

    def names(self) -> tuple[str, ...]:
        return tuple(sorted(self._configurations))

    def __contains__(self, name: object) -> bool:
        return name in self._configurations

    def __iter__(self) -> Iterator[Configuration]:
        return iter(self._configurations.values())


class DependencyHandler:
    """Adds dependencies to a project's configurations by scope name."""

    def __init__(self, project: Project) -> None:
        self._project = project

    def add(self, scope: str, notation: Dependency | FileCollection | str) -> Dependency:
        configuration = self._project.configurations.named(scope)
        dependency = self.create(notation)
        configuration.add_dependency(dependency)
        self._project.logger.log(
            operation="add_dependency",
            project=self._project.path,
            task=None,
            plugin=None,
            message=f"Added {dependency.notation} to '{scope}'.",
        )
        return dependency

    def implementation(self, notation: Dependency | FileCollection | str) -> Dependency:
        return self.add("implementation", notation)

    def project(self, path: str, *, configuration: str | None = None) -> ProjectDependency:
        target = self._project.build.project(path)
        return ProjectDependency(path=target.path, configuration=configuration)

    def create(self, notation: Dependency | FileCollection | str) -> Dependency:
        if isinstance(notation, FileCollection):
            return FileDependency(files=notation)
        if isinstance(notation, str):
            return ModuleDependency.parse(notation)
        return notation

    def for_scope(self, scope: str) -> tuple[Dependency, ...]:
        return tuple(self._project.configurations.named(scope).dependencies)
