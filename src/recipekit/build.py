"""Multi-project build: project registry, execution planning, and task runs."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from recipekit.errors import MissingProjectError, TaskGraphError, ValidationError
from recipekit.models import BuildResult, TaskOutcome
from recipekit.observability import StructuredLogger
from recipekit.plugins import builtin_plugins
from recipekit.policy import Policy, ensure_outgoing_artifacts
from recipekit.project import Plugin, Project
from recipekit.tasks import Task
from recipekit.toolchains import ToolchainRegistry

ROOT_PATH = ":"


def normalize_path(path: str) -> str:
    if not path:
        raise ValidationError("Project paths must be non-empty.")
    normalized = path if path.startswith(":") else f":{path}"
    if normalized != ROOT_PATH and (normalized.endswith(":") or "::" in normalized):
        raise ValidationError(
            "Project path has an empty segment.",
            context={"path": path},
        )
    return normalized


@dataclass(slots=True)
class Build:
    """Represents one build invocation over a tree of projects."""

    root_dir: Path = field(default_factory=lambda: Path("."))
    root_name: str = "root"
    version: str = "unspecified"
    policy: Policy = field(default_factory=Policy)
    toolchains: ToolchainRegistry = field(default_factory=ToolchainRegistry)
    logger: StructuredLogger = field(default_factory=StructuredLogger)
    plugin_registry: dict[str, Callable[[], Plugin]] = field(default_factory=builtin_plugins)
    _projects: dict[str, Project] = field(init=False, default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        self.root_dir = Path(self.root_dir)
        self._projects[ROOT_PATH] = Project(
            build=self,
            name=self.root_name,
            path=ROOT_PATH,
            project_dir=self.root_dir,
            version=self.version,
        )

    @property
    def root_project(self) -> Project:
        return self._projects[ROOT_PATH]

    @property
    def projects(self) -> tuple[Project, ...]:
        return tuple(self._projects[path] for path in sorted(self._projects))

    def include(self, *paths: str) -> Build:
        if not paths:
            raise ValidationError("include() requires at least one project path.")
        for path in paths:
            normalized = normalize_path(path)
            segments = normalized.strip(":").split(":")
            current = ""
            for segment in segments:
                current = f"{current}:{segment}"
                if current not in self._projects:
                    self._projects[current] = Project(
                        build=self,
                        name=segment,
                        path=current,
                        project_dir=self.root_dir.joinpath(*current.strip(":").split(":")),
                        version=self.version,
                    )
        return self

    def project(self, path: str) -> Project:
        normalized = normalize_path(path)
        project = self._projects.get(normalized)
        if project is None:
            raise MissingProjectError(
                f"Project '{normalized}' is not part of this build.",
                hint="Include the project in the build before depending on it.",
                context={"project": normalized},
            )
        return project

    def configure(
        self,
        path: str,
        *plugins: str | Plugin,
        version: str | None = None,
        build_dir: str | Path | None = None,
    ) -> Project:
        project = self.project(path)
        if version is not None:
            project.version = version
        if build_dir is not None:
            project.build_dir = Path(build_dir)
        if plugins:
            project.apply(*plugins)
        return project

    def task(self, task_path: str) -> Task:
        project_path, _, name = task_path.rpartition(":")
        return self.project(project_path or ROOT_PATH).tasks.named(name)

    def plan(self, path: str, *task_names: str) -> tuple[Task, ...]:
        """Order the requested tasks and everything they depend on."""
        if not task_names:
            raise ValidationError("plan() requires at least one task name.")
        project = self.project(path)
        ordered: list[Task] = []
        done: set[int] = set()
        visiting: list[Task] = []

        def visit(task: Task) -> None:
            if id(task) in done:
                return
            if task in visiting:
                cycle = [t.path for t in visiting[visiting.index(task) :]] + [task.path]
                raise TaskGraphError(
                    "Circular dependency between tasks.",
                    context={"cycle": " -> ".join(cycle)},
                )
            visiting.append(task)
            for dependency in task.task_dependencies():
                visit(dependency)
            visiting.pop()
            done.add(id(task))
            ordered.append(task)

        for name in task_names:
            visit(project.tasks.named(name))
        return tuple(ordered)

    def run(self, path: str, *task_names: str) -> BuildResult:
        plan = self.plan(path, *task_names)
        result = BuildResult(requested=tuple(task_names))
        for task in plan:
            self.logger.log(
                operation="execute_task",
                project=task.project.path,
                task=task.name,
                plugin=None,
                message=f"Executing {task.path}.",
            )
            task.execute()
            result.outcomes[task.path] = TaskOutcome(
                path=task.path,
                did_work=task.did_work,
                outputs=tuple(task.outputs),
            )
        self._verify_outgoing(plan)
        return result

    def _verify_outgoing(self, plan: tuple[Task, ...]) -> None:
        executed = {id(task) for task in plan}
        for project in self.projects:
            for configuration in project.configurations:
                for published in configuration.outgoing:
                    for producer in published.producers():
                        if id(producer) in executed:
                            ensure_outgoing_artifacts(
                                policy=self.policy,
                                configuration=f"{project.path}:{configuration.name}",
                                producer=producer.path,
                                files=published.files,
                            )
