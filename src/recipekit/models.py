"""Typed results produced by running a build."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True, slots=True)
class TaskOutcome:
    path: str
    did_work: bool
    outputs: tuple[Path, ...] = ()


@dataclass(slots=True)
class BuildResult:
    requested: tuple[str, ...] = ()
    outcomes: dict[str, TaskOutcome] = field(default_factory=dict)

    @property
    def executed(self) -> tuple[str, ...]:
        return tuple(self.outcomes)

    def ran(self, task_path: str) -> bool:
        return task_path in self.outcomes

    def index_of(self, task_path: str) -> int:
        return self.executed.index(task_path)


__all__ = [
    "BuildResult",
    "TaskOutcome",
]
