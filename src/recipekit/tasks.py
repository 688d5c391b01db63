"""Named build tasks and the per-project task container."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Self, TypeVar

from recipekit.configurations import Configuration
from recipekit.errors import (
    DuplicateTaskError,
    MissingTaskError,
    RecipeError,
    TaskExecutionError,
    ValidationError,
)
from recipekit.files import FileCollection

if TYPE_CHECKING:
    from recipekit.project import Project

TaskAction = Callable[["Task"], None]
T = TypeVar("T", bound="Task")


@dataclass(eq=False, slots=True)
class Task:
    """A named unit of work in a project's task graph."""

    name: str
    project: Project = field(repr=False)
    description: str = ""
    group: str | None = None
    actions: list[TaskAction] = field(default_factory=list, repr=False)
    inputs: list[FileCollection | Configuration] = field(default_factory=list, repr=False)
    outputs: list[Path] = field(default_factory=list)
    did_work: bool = field(default=False, init=False)
    _depends_on: list[str | Task] = field(default_factory=list, init=False, repr=False)

    @property
    def path(self) -> str:
        if self.project.path == ":":
            return f":{self.name}"
        return f"{self.project.path}:{self.name}"

    def depends_on(self, *tasks: str | Task) -> Self:
        if not tasks:
            raise ValidationError(
                "depends_on() requires at least one task.",
                context={"task": self.path},
            )
        for task in tasks:
            if task is self or task == self.name:
                raise ValidationError(
                    "A task cannot depend on itself.",
                    context={"task": self.path},
                )
            if task not in self._depends_on:
                self._depends_on.append(task)
        return self

    @property
    def declared_dependencies(self) -> tuple[str | Task, ...]:
        return tuple(self._depends_on)

    def dependency_names(self) -> frozenset[str]:
        """Names of explicitly declared dependencies within the same project."""
        names: set[str] = set()
        for ref in self._depends_on:
            if isinstance(ref, str):
                names.add(ref)
            elif ref.project is self.project:
                names.add(ref.name)
        return frozenset(names)

    def task_dependencies(self) -> tuple[Task, ...]:
        """Explicit dependencies plus the producers of every input collection."""
        resolved: list[Task] = []
        for ref in self._depends_on:
            task = self.project.tasks.named(ref) if isinstance(ref, str) else ref
            if task not in resolved:
                resolved.append(task)
        for collection in self.input_files():
            for producer in collection.producers():
                if producer is not self and producer not in resolved:
                    resolved.append(producer)
        return tuple(resolved)

    def input_files(self) -> tuple[FileCollection, ...]:
        """Input collections, resolving configurations at the time of the call."""
        return tuple(
            item.as_file_collection() if isinstance(item, Configuration) else item
            for item in self.inputs
        )

    def do_first(self, action: TaskAction) -> Self:
        self.actions.insert(0, action)
        return self

    def do_last(self, action: TaskAction) -> Self:
        self.actions.append(action)
        return self

    def execute(self) -> None:
        for action in self.actions:
            try:
                action(self)
            except RecipeError:
                raise
            except Exception as exc:
                raise TaskExecutionError(
                    f"Task {self.path} failed.",
                    context={"task": self.path, "error": str(exc)},
                ) from exc
        self.did_work = bool(self.actions)


class TaskContainer:
    """Registry of the tasks declared by one project."""

    def __init__(self, project: Project) -> None:
        self._project = project
        self._tasks: dict[str, Task] = {}

    def register(
        self,
        name: str,
        task_type: type[T] = Task,  # type: ignore[assignment]
        **config: Any,
    ) -> T:
        if not name:
            raise ValidationError("register() requires a non-empty task name.")
        if name in self._tasks:
            raise DuplicateTaskError(
                f"Task '{name}' is already registered.",
                context={"project": self._project.path, "task": name},
            )
        task = task_type(name=name, project=self._project, **config)
        self._tasks[name] = task
        self._project.logger.log(
            operation="register_task",
            project=self._project.path,
            task=name,
            plugin=None,
            message=f"Registered task {task.path}.",
            level="debug",
        )
        return task

    def named(self, name: str, task_type: type[T] | None = None) -> T:
        task = self._tasks.get(name)
        if task is None:
            raise MissingTaskError(
                f"Task '{name}' not found in project {self._project.path}.",
                hint="Apply the plugin that registers this task before referencing it.",
                context={"project": self._project.path, "task": name},
            )
        if task_type is not None and not isinstance(task, task_type):
            raise ValidationError(
                f"Task '{name}' is not a {task_type.__name__}.",
                context={
                    "project": self._project.path,
                    "task": name,
                    "actual_type": type(task).__name__,
                },
            )
        return task  # type: ignore[return-value]

    def configure(self, name: str, action: Callable[[Task], None]) -> Task:
        task = self.named(name)
        action(task)
        return task

    def names(self) -> tuple[str, ...]:
        return tuple(sorted(self._tasks))

    def __contains__(self, name: object) -> bool:
        return name in self._tasks

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks.values())

    def __len__(self) -> int:
        return len(self._tasks)
