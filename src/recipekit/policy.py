"""Policy configuration and enforcement helpers."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from recipekit.errors import TaskExecutionError, ToolchainError

ToolchainProvisioning = Literal["auto", "installed-only"]


@dataclass(frozen=True, slots=True)
class Policy:
    toolchain_provisioning: ToolchainProvisioning = "auto"
    verify_outgoing_artifacts: bool = True
    strict_license: bool = True


def ensure_toolchain_provisioning(*, policy: Policy, language_version: int) -> None:
    if policy.toolchain_provisioning == "installed-only":
        raise ToolchainError(
            f"No installed toolchain matches language level {language_version}.",
            hint="Install a matching JDK or set policy.toolchain_provisioning to 'auto'.",
            context={"language_version": str(language_version), "operation": "toolchain"},
        )


def ensure_outgoing_artifacts(
    *,
    policy: Policy,
    configuration: str,
    producer: str,
    files: Iterable[Path],
) -> None:
    if not policy.verify_outgoing_artifacts:
        return
    missing = [str(path) for path in files if not path.exists()]
    if missing:
        raise TaskExecutionError(
            "Outgoing artifact was not produced by its builder task.",
            hint="Check that the producing task writes the file the configuration publishes.",
            context={
                "configuration": configuration,
                "task": producer,
                "missing": ", ".join(missing),
            },
        )
