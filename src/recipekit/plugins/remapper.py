"""Remap tool: rewrites symbol names in a compiled archive into a second archive.

The rewrite is a plain textual rename driven by a mapping table of
``old -> new`` symbols. Tables come from ``mappings`` on the task and from
any tab-separated files listed in ``mapping_files``.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

from recipekit.archives import ArchiveTask, read_archive, write_archive
from recipekit.errors import ValidationError
from recipekit.files import FileCollection
from recipekit.tasks import Task

if TYPE_CHECKING:
    from recipekit.project import Project

REMAP_TASK = "remap"
DEFAULT_INPUT_TASK = "jar"
MANIFEST_ENTRY = "META-INF/MANIFEST.MF"


@dataclass(eq=False, slots=True)
class RemapJar(ArchiveTask):
    """Produces ``<base>-<version>-<classifier>.jar`` from the input task's archive."""

    input_task: str = DEFAULT_INPUT_TASK
    mappings: dict[str, str] = field(default_factory=dict)
    mapping_files: list[FileCollection] = field(default_factory=list, repr=False)

    def input_archive(self) -> Path:
        return self.project.tasks.named(self.input_task, ArchiveTask).archive_file

    def mapping_table(self) -> dict[str, str]:
        table: dict[str, str] = {}
        for collection in self.mapping_files:
            for path in collection:
                table.update(parse_mapping_table(path.read_text(encoding="utf-8"), source=path))
        table.update(self.mappings)
        return table


@dataclass(slots=True)
class RemapperPlugin:
    plugin_id: ClassVar[str] = "remapper"

    def apply(self, project: Project) -> None:
        remap = project.tasks.register(
            REMAP_TASK,
            RemapJar,
            description="Remaps symbol names in the primary archive.",
            group="build",
        )
        remap.do_last(_remap_archive)


def parse_mapping_table(text: str, *, source: Path | None = None) -> dict[str, str]:
    table: dict[str, str] = {}
    for number, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        parts = line.split("\t")
        if len(parts) != 2 or not all(parts):
            raise ValidationError(
                "Mapping lines must hold exactly two tab-separated symbols.",
                context={"source": str(source or "<inline>"), "line": str(number)},
            )
        table[parts[0]] = parts[1]
    return table


def remap_text(text: str, table: Mapping[str, str]) -> str:
    if not table:
        return text
    # Longest symbols first so a prefix never shadows a longer name.
    symbols = sorted(table, key=len, reverse=True)
    pattern = re.compile(r"\b(" + "|".join(re.escape(symbol) for symbol in symbols) + r")\b")
    return pattern.sub(lambda match: table[match.group(1)], text)


def _remap_archive(task: Task) -> None:
    remap = task.project.tasks.named(task.name, RemapJar)
    source = remap.input_archive()
    if not source.is_file():
        raise ValidationError(
            "Remap input archive does not exist.",
            hint=f"Make {remap.path} depend on the task that writes the archive.",
            context={"task": remap.path, "input": str(source)},
        )
    table = remap.mapping_table()
    entries = {
        name: content if name == MANIFEST_ENTRY else remap_text(content, table)
        for name, content in read_archive(source).items()
    }
    write_archive(remap.archive_file, entries)
    remap.outputs[:] = [remap.archive_file]
    remap.project.logger.log(
        operation="remap",
        project=remap.project.path,
        task=remap.name,
        plugin=RemapperPlugin.plugin_id,
        message=f"Remapped {source.name} into {remap.archive_file.name}.",
        extra={"symbols": len(table)},
    )
