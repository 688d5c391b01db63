"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from recipekit import Build, Project

LICENSE_HEADER = "/*\n * SPDX-License-Identifier: GPL-3.0-or-later\n */\n"

WriteSource = Callable[..., Path]


@pytest.fixture
def build(tmp_path: Path) -> Build:
    """A build with the shared mappings project and one library project."""
    build = Build(root_dir=tmp_path / "repo", version="1.2.3")
    build.include(":alpha", ":mappings:shared")
    build.configure(":mappings:shared", "java")
    return build


@pytest.fixture
def write_source() -> WriteSource:
    """Write a Java source under ``src/main/java`` of a project."""

    def _write(project: Project, relative: str, body: str, *, header: bool = True) -> Path:
        path = project.source_dir / "main" / "java" / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text((LICENSE_HEADER if header else "") + body, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def sources(build: Build, write_source: WriteSource) -> Build:
    """Populate alpha and the shared mappings project with compilable sources."""
    write_source(
        build.project(":mappings:shared"),
        "net/example/mappings/shared/Mapping.java",
        "package net.example.mappings.shared;\npublic interface Mapping { String version(); }\n",
    )
    write_source(
        build.project(":alpha"),
        "net/example/alpha/Skins.java",
        "package net.example.alpha;\nclass Skins { void apply(a b) { b.c(); } }\n",
    )
    return build
