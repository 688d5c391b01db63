"""Java toolchain selection by language level."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from recipekit.errors import ToolchainError, ValidationError
from recipekit.policy import Policy, ensure_toolchain_provisioning

if TYPE_CHECKING:
    from recipekit.project import Project

MINIMUM_LANGUAGE_LEVEL = 8
DEFAULT_INSTALLED = (8, 11, 17, 21)
DEFAULT_PROVISIONABLE = (8, 11, 17, 21, 22, 23)


@dataclass(frozen=True, slots=True, order=True)
class JavaLanguageVersion:
    value: int

    @classmethod
    def of(cls, value: int) -> JavaLanguageVersion:
        if value < MINIMUM_LANGUAGE_LEVEL:
            raise ValidationError(
                f"Java language level {value} is not supported.",
                hint=f"Use language level {MINIMUM_LANGUAGE_LEVEL} or newer.",
                context={"language_version": str(value)},
            )
        return cls(value=value)

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, slots=True)
class Toolchain:
    language_version: JavaLanguageVersion
    home: Path
    provisioned: bool = False


@dataclass(slots=True)
class ToolchainRegistry:
    """Known JDK installations plus what may be downloaded on demand."""

    installed: tuple[int, ...] = DEFAULT_INSTALLED
    provisionable: tuple[int, ...] = DEFAULT_PROVISIONABLE
    install_root: Path = Path("/opt/jdks")
    _provisioned: dict[int, Toolchain] = field(default_factory=dict, init=False, repr=False)

    def resolve(self, version: JavaLanguageVersion, *, policy: Policy) -> Toolchain:
        if version.value in self.installed:
            return Toolchain(
                language_version=version,
                home=self.install_root / f"jdk-{version.value}",
            )
        cached = self._provisioned.get(version.value)
        if cached is not None:
            return cached
        ensure_toolchain_provisioning(policy=policy, language_version=version.value)
        if version.value not in self.provisionable:
            raise ToolchainError(
                f"No toolchain for language level {version.value} can be provisioned.",
                hint="Pick a language level offered by the toolchain registry.",
                context={
                    "language_version": str(version.value),
                    "provisionable": ", ".join(str(v) for v in self.provisionable),
                },
            )
        toolchain = Toolchain(
            language_version=version,
            home=self.install_root / "provisioned" / f"jdk-{version.value}",
            provisioned=True,
        )
        self._provisioned[version.value] = toolchain
        return toolchain


@dataclass(slots=True)
class JavaExtension:
    """The ``java`` project extension contributed by the compile convention."""

    project: Project = field(repr=False)
    language_version: JavaLanguageVersion | None = None
    toolchain: Toolchain | None = None

    def set_toolchain(self, language_version: int | JavaLanguageVersion) -> Toolchain:
        version = (
            language_version
            if isinstance(language_version, JavaLanguageVersion)
            else JavaLanguageVersion.of(language_version)
        )
        build = self.project.build
        toolchain = build.toolchains.resolve(version, policy=build.policy)
        self.language_version = version
        self.toolchain = toolchain
        self.project.logger.log(
            operation="pin_toolchain",
            project=self.project.path,
            task=None,
            plugin="java",
            message=f"Pinned Java toolchain to language level {version}.",
            extra={"home": str(toolchain.home), "provisioned": toolchain.provisioned},
        )
        return toolchain
