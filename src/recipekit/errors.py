"""Typed build-model error model with stable, machine-readable error codes."""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from typing import ClassVar


class ErrorCode(StrEnum):
    """Stable error identifiers surfaced by configuration and execution."""

    VALIDATION = "E_VALIDATION"
    MISSING_TASK = "E_MISSING_TASK"
    DUPLICATE_TASK = "E_DUPLICATE_TASK"
    MISSING_PROJECT = "E_MISSING_PROJECT"
    MISSING_PLUGIN = "E_MISSING_PLUGIN"
    TOOLCHAIN = "E_TOOLCHAIN"
    DUPLICATE_CONFIGURATION = "E_DUPLICATE_CONFIGURATION"
    TASK_GRAPH = "E_TASK_GRAPH"
    TASK_EXECUTION = "E_TASK_EXECUTION"
    LICENSE = "E_LICENSE"


class RecipeError(Exception):
    """Base error class that carries code, optional hint, and context.

    Subclasses pick their code through ``default_code``.
    """

    default_code: ClassVar[ErrorCode] = ErrorCode.VALIDATION
    code: str
    hint: str | None
    context: Mapping[str, str]

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode | None = None,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = (code or self.default_code).value
        self.hint = hint
        self.context = dict(context or {})

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.hint:
            parts.append(f"Hint: {self.hint}")
        if self.context:
            for k, v in self.context.items():
                if v:
                    parts.append(f"  {k}: {v}")
        return "\n".join(parts)

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "code": self.code,
            "message": str(self),
            "context": dict(self.context),
        }
        if self.hint is not None:
            payload["hint"] = self.hint
        return payload


class ValidationError(RecipeError):
    default_code = ErrorCode.VALIDATION


class MissingTaskError(RecipeError):
    default_code = ErrorCode.MISSING_TASK


class DuplicateTaskError(RecipeError):
    default_code = ErrorCode.DUPLICATE_TASK


class MissingProjectError(RecipeError):
    default_code = ErrorCode.MISSING_PROJECT


class MissingPluginError(RecipeError):
    default_code = ErrorCode.MISSING_PLUGIN


class ToolchainError(RecipeError):
    default_code = ErrorCode.TOOLCHAIN


class DuplicateConfigurationError(RecipeError):
    default_code = ErrorCode.DUPLICATE_CONFIGURATION


class TaskGraphError(RecipeError):
    default_code = ErrorCode.TASK_GRAPH


class TaskExecutionError(RecipeError):
    default_code = ErrorCode.TASK_EXECUTION


class LicenseError(RecipeError):
    default_code = ErrorCode.LICENSE


__all__ = [
    "DuplicateConfigurationError",
    "DuplicateTaskError",
    "ErrorCode",
    "LicenseError",
    "MissingPluginError",
    "MissingProjectError",
    "MissingTaskError",
    "RecipeError",
    "TaskExecutionError",
    "TaskGraphError",
    "ToolchainError",
    "ValidationError",
]
