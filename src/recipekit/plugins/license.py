"""License-header convention for project sources."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

from recipekit.errors import LicenseError
from recipekit.tasks import Task

if TYPE_CHECKING:
    from recipekit.project import Project

DEFAULT_HEADER = "SPDX-License-Identifier: GPL-3.0-or-later"
DEFAULT_INCLUDE = ("*.java",)


@dataclass(slots=True)
class LicenseExtension:
    header: str = DEFAULT_HEADER
    include: tuple[str, ...] = DEFAULT_INCLUDE

    def render_comment(self) -> str:
        body = "\n".join(f" * {line}".rstrip() for line in self.header.splitlines())
        return f"/*\n{body}\n */\n"

    def matches(self, path: Path) -> bool:
        return any(path.match(pattern) for pattern in self.include)


@dataclass(slots=True)
class LicensePlugin:
    plugin_id: ClassVar[str] = "license-logic"
    extension: LicenseExtension = field(default_factory=LicenseExtension)

    def apply(self, project: Project) -> None:
        project.add_extension("license", self.extension)
        check = project.tasks.register(
            "license_check",
            description="Verifies license headers on project sources.",
            group="verification",
        )
        check.do_last(_check_headers)
        project.tasks.register(
            "license_format",
            description="Adds missing license headers to project sources.",
            group="license",
        ).do_last(_format_headers)
        if "check" in project.tasks:
            project.tasks.named("check").depends_on(check)


def missing_headers(project: Project) -> tuple[Path, ...]:
    extension = project.extension("license", LicenseExtension)
    if not project.source_dir.is_dir():
        return ()
    missing: list[Path] = []
    for path in sorted(p for p in project.source_dir.rglob("*") if p.is_file()):
        if not extension.matches(path):
            continue
        if extension.header not in path.read_text(encoding="utf-8"):
            missing.append(path)
    return tuple(missing)


def _check_headers(task: Task) -> None:
    project = task.project
    missing = missing_headers(project)
    if not missing:
        return
    files = ", ".join(str(path.relative_to(project.project_dir)) for path in missing)
    if not project.build.policy.strict_license:
        project.logger.log(
            operation="license_check",
            project=project.path,
            task=task.name,
            plugin=LicensePlugin.plugin_id,
            message="Sources are missing the license header.",
            level="warning",
            extra={"files": files},
        )
        return
    raise LicenseError(
        "Sources are missing the license header.",
        hint="Run the license_format task to add the configured header.",
        context={"project": project.path, "files": files},
    )


def _format_headers(task: Task) -> None:
    project = task.project
    comment = project.extension("license", LicenseExtension).render_comment()
    for path in missing_headers(project):
        path.write_text(comment + path.read_text(encoding="utf-8"), encoding="utf-8")
