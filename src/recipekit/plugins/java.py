"""Compile convention: dependency scopes, the java extension, and the archive lifecycle.

Task graph contributed::

    build -> assemble -> jar -> classes -> compile_java, process_resources
    build -> check

``compile_java`` takes ``compile_classpath`` as an input, so producers of
project dependencies run before it.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

from recipekit.archives import Jar, render_manifest, write_archive
from recipekit.tasks import Task
from recipekit.toolchains import JavaExtension

if TYPE_CHECKING:
    from recipekit.project import Project

SOURCE_SUFFIX = ".java"
CLASS_SUFFIX = ".class"


@dataclass(slots=True)
class JavaPlugin:
    plugin_id: ClassVar[str] = "java"

    def apply(self, project: Project) -> None:
        project.add_extension("java", JavaExtension(project=project))
        self._add_configurations(project)
        self._add_tasks(project)

    def _add_configurations(self, project: Project) -> None:
        configurations = project.configurations
        implementation = configurations.create(
            "implementation",
            can_be_consumed=False,
            can_be_resolved=False,
            description="Implementation dependencies of the main sources.",
        )
        compile_only = configurations.create(
            "compile_only",
            can_be_consumed=False,
            can_be_resolved=False,
            description="Compile-time only dependencies.",
        )
        runtime_only = configurations.create(
            "runtime_only",
            can_be_consumed=False,
            can_be_resolved=False,
        )
        configurations.create("annotation_processor", can_be_consumed=False)
        configurations.create(
            "compile_classpath",
            can_be_consumed=False,
        ).extends_from(implementation, compile_only)
        configurations.create(
            "runtime_classpath",
            can_be_consumed=False,
        ).extends_from(implementation, runtime_only)
        configurations.create(
            "default",
            can_be_resolved=False,
            description="Primary archive plus its runtime dependencies.",
        ).extends_from(implementation, runtime_only)

    def _add_tasks(self, project: Project) -> None:
        tasks = project.tasks

        compile_java = tasks.register(
            "compile_java",
            description="Compiles main Java sources.",
        )
        compile_java.inputs.append(project.configurations.named("compile_classpath"))
        compile_java.do_last(_compile_sources)

        process_resources = tasks.register(
            "process_resources",
            description="Copies main resources.",
        )
        process_resources.do_last(_copy_resources)

        tasks.register("classes", group="build").depends_on(compile_java, process_resources)

        jar = tasks.register(
            "jar",
            Jar,
            description="Assembles the primary archive.",
            group="build",
        )
        jar.depends_on("classes")
        jar.do_last(_package_jar)

        tasks.register("assemble", group="build").depends_on(jar)
        tasks.register("check", group="verification")
        tasks.register(
            "build",
            description="Assembles and tests this project.",
            group="build",
        ).depends_on("assemble", "check")

        project.configurations.named("default").artifact(
            project.files(lambda: jar.archive_file),
            built_by=jar,
        )


def classes_dir(project: Project) -> Path:
    return project.build_dir / "classes" / "java" / "main"


def resources_dir(project: Project) -> Path:
    return project.build_dir / "resources" / "main"


def _compile_sources(task: Task) -> None:
    project = task.project
    java = project.extension("java", JavaExtension)
    output_dir = classes_dir(project)
    if output_dir.exists():
        shutil.rmtree(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    source_root = project.source_dir / "main" / "java"
    if source_root.is_dir():
        for source in sorted(source_root.rglob(f"*{SOURCE_SUFFIX}")):
            relative = source.relative_to(source_root).with_suffix(CLASS_SUFFIX)
            target = output_dir / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(source.read_text(encoding="utf-8"), encoding="utf-8")
    task.outputs[:] = [output_dir]
    classpath = [path.name for path in task.input_files()[0]]
    level = str(java.language_version) if java.language_version is not None else "default"
    task.project.logger.log(
        operation="compile_java",
        project=project.path,
        task=task.name,
        plugin="java",
        message=f"Compiled sources with language level {level}.",
        extra={"classpath": classpath},
    )


def _copy_resources(task: Task) -> None:
    output_dir = resources_dir(task.project)
    if output_dir.exists():
        shutil.rmtree(output_dir)
    resource_root = task.project.source_dir / "main" / "resources"
    if resource_root.is_dir():
        shutil.copytree(resource_root, output_dir)
    else:
        output_dir.mkdir(parents=True, exist_ok=True)
    task.outputs[:] = [output_dir]


def _package_jar(task: Task) -> None:
    project = task.project
    jar = project.tasks.named(task.name, Jar)
    java = project.extension("java", JavaExtension)
    entries: dict[str, str] = {}
    for root in (classes_dir(project), resources_dir(project)):
        if not root.is_dir():
            continue
        for path in sorted(p for p in root.rglob("*") if p.is_file()):
            entries[path.relative_to(root).as_posix()] = path.read_text(encoding="utf-8")
    attributes = {
        "Implementation-Title": project.name,
        "Implementation-Version": project.version,
        **jar.manifest,
    }
    if java.language_version is not None:
        attributes["Build-Jdk-Spec"] = str(java.language_version)
    entries["META-INF/MANIFEST.MF"] = render_manifest(attributes)
    write_archive(jar.archive_file, entries)
    jar.outputs[:] = [jar.archive_file]
