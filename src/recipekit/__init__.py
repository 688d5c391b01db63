"""Public package entrypoint for the recipekit build model and conventions."""

from .archives import ArchiveTask, Jar
from .build import Build
from .configurations import (
    Configuration,
    FileDependency,
    ModuleDependency,
    ProjectDependency,
    PublishArtifact,
    ResolvedConfiguration,
)
from .errors import (
    DuplicateConfigurationError,
    DuplicateTaskError,
    ErrorCode,
    LicenseError,
    MissingPluginError,
    MissingProjectError,
    MissingTaskError,
    RecipeError,
    TaskExecutionError,
    TaskGraphError,
    ToolchainError,
    ValidationError,
)
from .files import FileCollection
from .models import BuildResult, TaskOutcome
from .observability import StructuredLogger
from .plugins import MappingLogicPlugin, RemapJar
from .policy import Policy
from .project import Plugin, Project
from .tasks import Task
from .toolchains import JavaExtension, JavaLanguageVersion, Toolchain, ToolchainRegistry

__all__ = [
    "ArchiveTask",
    "Build",
    "BuildResult",
    "Configuration",
    "DuplicateConfigurationError",
    "DuplicateTaskError",
    "ErrorCode",
    "FileCollection",
    "FileDependency",
    "Jar",
    "JavaExtension",
    "JavaLanguageVersion",
    "LicenseError",
    "MappingLogicPlugin",
    "MissingPluginError",
    "MissingProjectError",
    "MissingTaskError",
    "ModuleDependency",
    "Plugin",
    "Policy",
    "Project",
    "ProjectDependency",
    "PublishArtifact",
    "RecipeError",
    "RemapJar",
    "ResolvedConfiguration",
    "StructuredLogger",
    "Task",
    "TaskExecutionError",
    "TaskGraphError",
    "TaskOutcome",
    "Toolchain",
    "ToolchainError",
    "ToolchainRegistry",
    "ValidationError",
]
