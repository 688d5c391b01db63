"""File collections that remember which tasks produce them."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Self

if TYPE_CHECKING:
    from recipekit.project import Project
    from recipekit.tasks import Task

PathSource = Path | Callable[[], Path]


@dataclass(slots=True)
class FileCollection:
    """Ordered, de-duplicated set of paths plus their producer tasks.

    A source may be a callable, such as a bound ``archive_file`` getter; it
    is evaluated every time the collection is read, so the paths follow later
    changes to the project's version or build directory.

    Producers given by name are looked up in the owning project when the
    execution plan is computed, so a collection may name a task that a
    later plugin registers.
    """

    project: Project
    sources: tuple[PathSource, ...] = ()
    _built_by: list[str | Task] = field(default_factory=list, repr=False)

    @property
    def paths(self) -> tuple[Path, ...]:
        return tuple(
            dict.fromkeys(Path(source()) if callable(source) else source for source in self.sources)
        )

    def built_by(self, *tasks: str | Task) -> Self:
        for task in tasks:
            if task not in self._built_by:
                self._built_by.append(task)
        return self

    def producers(self) -> tuple[Task, ...]:
        resolved: list[Task] = []
        for ref in self._built_by:
            task = self.project.tasks.named(ref) if isinstance(ref, str) else ref
            if task not in resolved:
                resolved.append(task)
        return tuple(resolved)

    def __iter__(self) -> Iterator[Path]:
        return iter(self.paths)

    def __len__(self) -> int:
        return len(self.sources)


def file_collection(project: Project, *paths: str | PathSource) -> FileCollection:
    normalized = tuple(
        dict.fromkeys(path if callable(path) else Path(path) for path in paths)
    )
    return FileCollection(project=project, sources=normalized)
