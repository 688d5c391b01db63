"""Built-in conventions, addressable by plugin id."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from .core_dependencies import CORE_DEPENDENCIES, CoreDependenciesPlugin
from .java import JavaPlugin
from .license import LicenseExtension, LicensePlugin
from .mapping_logic import (
    LANGUAGE_LEVEL,
    REMAPPED_CLASSIFIER,
    REMAPPED_CONFIGURATION,
    SHARED_MAPPINGS_PROJECT,
    MappingLogicPlugin,
)
from .remapper import RemapJar, RemapperPlugin

if TYPE_CHECKING:
    from recipekit.project import Plugin


def builtin_plugins() -> dict[str, Callable[[], Plugin]]:
    return {
        JavaPlugin.plugin_id: JavaPlugin,
        LicensePlugin.plugin_id: LicensePlugin,
        CoreDependenciesPlugin.plugin_id: CoreDependenciesPlugin,
        RemapperPlugin.plugin_id: RemapperPlugin,
        MappingLogicPlugin.plugin_id: MappingLogicPlugin,
    }


__all__ = [
    "CORE_DEPENDENCIES",
    "CoreDependenciesPlugin",
    "JavaPlugin",
    "LANGUAGE_LEVEL",
    "LicenseExtension",
    "LicensePlugin",
    "MappingLogicPlugin",
    "REMAPPED_CLASSIFIER",
    "REMAPPED_CONFIGURATION",
    "RemapJar",
    "RemapperPlugin",
    "SHARED_MAPPINGS_PROJECT",
    "builtin_plugins",
]
