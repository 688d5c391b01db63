"""Archive-producing tasks and deterministic zip helpers."""

from __future__ import annotations

import zipfile
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from recipekit.tasks import Task

# Fixed timestamp so identical inputs yield byte-identical archives.
_ZIP_EPOCH = (1980, 2, 1, 0, 0, 0)


@dataclass(eq=False, slots=True)
class ArchiveTask(Task):
    """Task whose single output is an archive named from its properties.

    The file name follows ``<base>-<version>[-<classifier>].<extension>``
    under ``destination_directory``, which defaults to ``<buildDir>/libs``.
    """

    archive_base_name: str | None = None
    archive_version: str | None = None
    archive_classifier: str = ""
    archive_extension: str = "jar"
    destination_directory: Path | None = None

    @property
    def archive_file_name(self) -> str:
        base = self.archive_base_name or self.project.name
        version = self.archive_version if self.archive_version is not None else self.project.version
        parts = [base]
        if version:
            parts.append(version)
        if self.archive_classifier:
            parts.append(self.archive_classifier)
        return f"{'-'.join(parts)}.{self.archive_extension}"

    @property
    def archive_file(self) -> Path:
        directory = self.destination_directory or self.project.build_dir / "libs"
        return directory / self.archive_file_name


@dataclass(eq=False, slots=True)
class Jar(ArchiveTask):
    """Packages the project's sources and classpath listing into the primary archive."""

    manifest: dict[str, str] = field(default_factory=dict)


def write_archive(path: Path, entries: Mapping[str, str]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for name in sorted(entries):
            info = zipfile.ZipInfo(name, date_time=_ZIP_EPOCH)
            archive.writestr(info, entries[name])
    return path


def read_archive(path: Path) -> dict[str, str]:
    with zipfile.ZipFile(path) as archive:
        return {name: archive.read(name).decode("utf-8") for name in archive.namelist()}


def render_manifest(attributes: Mapping[str, str]) -> str:
    lines = ["Manifest-Version: 1.0"]
    lines.extend(f"{key}: {value}" for key, value in sorted(attributes.items()))
    return "\n".join(lines) + "\n"
