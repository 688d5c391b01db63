from pathlib import Path

import pytest

from recipekit import Build, MissingPluginError, ModuleDependency, Policy, RemapJar
from recipekit.archives import read_archive
from recipekit.errors import LicenseError, ValidationError
from recipekit.plugins import CORE_DEPENDENCIES, LicenseExtension
from recipekit.plugins.remapper import parse_mapping_table, remap_text


def _library(tmp_path: Path, **build_options: object) -> Build:
    build = Build(root_dir=tmp_path, version="0.9", **build_options)  # type: ignore[arg-type]
    build.include(":lib")
    return build


def test_java_plugin_wires_the_archive_lifecycle(tmp_path: Path) -> None:
    lib = _library(tmp_path).configure(":lib", "java")

    assert lib.tasks.named("classes").dependency_names() == {"compile_java", "process_resources"}
    assert lib.tasks.named("jar").dependency_names() == {"classes"}
    assert lib.tasks.named("assemble").dependency_names() == {"jar"}
    assert lib.tasks.named("build").dependency_names() == {"assemble", "check"}
    default = lib.configurations.named("default")
    assert [artifact.file for artifact in default.outgoing] == [
        lib.build_dir / "libs" / "lib-0.9.jar"
    ]


def test_jar_packages_compiled_sources_and_resources(tmp_path: Path) -> None:
    build = _library(tmp_path)
    lib = build.configure(":lib", "java")
    source = lib.source_dir / "main" / "java" / "pkg" / "Main.java"
    source.parent.mkdir(parents=True)
    source.write_text("class Main {}\n", encoding="utf-8")
    resource = lib.source_dir / "main" / "resources" / "plugin.yml"
    resource.parent.mkdir(parents=True)
    resource.write_text("name: lib\n", encoding="utf-8")

    build.run(":lib", "jar")

    entries = read_archive(lib.build_dir / "libs" / "lib-0.9.jar")
    assert entries["pkg/Main.class"] == "class Main {}\n"
    assert entries["plugin.yml"] == "name: lib\n"
    assert "Implementation-Version: 0.9" in entries["META-INF/MANIFEST.MF"]


def test_unknown_plugin_id_fails(tmp_path: Path) -> None:
    build = _library(tmp_path)

    with pytest.raises(MissingPluginError) as excinfo:
        build.configure(":lib", "shadow")

    assert excinfo.value.context == {"project": ":lib", "plugin": "shadow"}


def test_plugins_apply_once_per_id(tmp_path: Path) -> None:
    lib = _library(tmp_path).configure(":lib", "java")

    assert lib.plugins.apply("java") is False
    assert lib.plugins.has_plugin("java")


def test_core_dependencies_fill_compile_only_scopes(tmp_path: Path) -> None:
    lib = _library(tmp_path).configure(":lib", "java", "core-dependencies")

    expected = tuple(
        ModuleDependency.parse(notation)
        for scope, notation in CORE_DEPENDENCIES
        if scope == "compile_only"
    )
    assert lib.dependencies.for_scope("compile_only") == expected
    assert lib.dependencies.for_scope("implementation") == ()
    assert lib.configurations.named("compile_classpath").resolve().modules == expected


def test_core_dependencies_require_the_compile_convention(tmp_path: Path) -> None:
    with pytest.raises(ValidationError):
        _library(tmp_path).configure(":lib", "core-dependencies")


def test_license_check_fails_on_missing_header(tmp_path: Path) -> None:
    build = _library(tmp_path)
    lib = build.configure(":lib", "java", "license-logic")
    source = lib.source_dir / "main" / "java" / "Main.java"
    source.parent.mkdir(parents=True)
    source.write_text("class Main {}\n", encoding="utf-8")

    assert "license_check" in lib.tasks.named("check").dependency_names()
    with pytest.raises(LicenseError) as excinfo:
        build.run(":lib", "check")

    assert excinfo.value.context["files"] == "src/main/java/Main.java"


def test_license_format_adds_the_header(tmp_path: Path) -> None:
    build = _library(tmp_path)
    lib = build.configure(":lib", "java", "license-logic")
    source = lib.source_dir / "main" / "java" / "Main.java"
    source.parent.mkdir(parents=True)
    source.write_text("class Main {}\n", encoding="utf-8")

    build.run(":lib", "license_format")
    build.run(":lib", "license_check")

    header = lib.extension("license", LicenseExtension).header
    assert source.read_text(encoding="utf-8").startswith(f"/*\n * {header}\n */\n")


def test_lenient_license_policy_only_warns(tmp_path: Path) -> None:
    build = _library(tmp_path, policy=Policy(strict_license=False))
    lib = build.configure(":lib", "java", "license-logic")
    source = lib.source_dir / "main" / "java" / "Main.java"
    source.parent.mkdir(parents=True)
    source.write_text("class Main {}\n", encoding="utf-8")

    build.run(":lib", "check")

    warnings = [r for r in build.logger.records if r["level"] == "warning"]
    assert warnings[0]["operation"] == "license_check"


def test_remapper_registers_an_unclassified_remap_task(tmp_path: Path) -> None:
    lib = _library(tmp_path).configure(":lib", "java", "remapper")

    remap = lib.tasks.named("remap", RemapJar)
    assert remap.archive_classifier == ""
    assert remap.archive_file == lib.build_dir / "libs" / "lib-0.9.jar"
    assert remap.dependency_names() == frozenset()

    remap.archive_classifier = "dev"
    assert remap.archive_file.name == "lib-0.9-dev.jar"


def test_remap_without_input_archive_fails(tmp_path: Path) -> None:
    build = _library(tmp_path)
    build.configure(":lib", "java", "remapper")

    with pytest.raises(ValidationError) as excinfo:
        build.run(":lib", "remap")

    assert excinfo.value.context["task"] == ":lib:remap"


def test_remap_reads_mapping_files(tmp_path: Path) -> None:
    build = _library(tmp_path)
    lib = build.configure(":lib", "java", "remapper")
    source = lib.source_dir / "main" / "java" / "Main.java"
    source.parent.mkdir(parents=True)
    source.write_text("class Main { aa field; }\n", encoding="utf-8")
    table = tmp_path / "mappings.tsv"
    table.write_text("# obfuscated\treadable\naa\tGameProfile\n", encoding="utf-8")
    remap = lib.tasks.named("remap", RemapJar)
    remap.archive_classifier = "remapped"
    remap.depends_on("jar")
    remap.mapping_files.append(lib.files(table))

    build.run(":lib", "remap")

    entries = read_archive(lib.build_dir / "libs" / "lib-0.9-remapped.jar")
    assert entries["Main.class"] == "class Main { GameProfile field; }\n"


def test_mapping_table_parsing_and_rename() -> None:
    table = parse_mapping_table("a\tEntity\n\n# comment\nab\tEntityPlayer\n")

    assert table == {"a": "Entity", "ab": "EntityPlayer"}
    assert remap_text("ab a abc", table) == "EntityPlayer Entity abc"
    assert remap_text("unchanged", {}) == "unchanged"
    with pytest.raises(ValidationError):
        parse_mapping_table("broken line\n")
