from pathlib import Path

from recipekit.errors import (
    DuplicateConfigurationError,
    ErrorCode,
    MissingProjectError,
    MissingTaskError,
    TaskExecutionError,
    ToolchainError,
    ValidationError,
)
from recipekit.models import BuildResult, TaskOutcome


def test_error_codes_are_stable_and_machine_readable() -> None:
    errors = [
        ValidationError("bad input"),
        MissingTaskError("no remap"),
        MissingProjectError("no mappings"),
        ToolchainError("no jdk"),
        DuplicateConfigurationError("remapped exists"),
        TaskExecutionError("task failed"),
    ]
    assert [error.code for error in errors] == [
        "E_VALIDATION",
        "E_MISSING_TASK",
        "E_MISSING_PROJECT",
        "E_TOOLCHAIN",
        "E_DUPLICATE_CONFIGURATION",
        "E_TASK_EXECUTION",
    ]
    assert errors[1].code == ErrorCode.MISSING_TASK.value


def test_error_rendering_includes_hint_and_context() -> None:
    error = MissingTaskError(
        "Task 'remap' not found in project :alpha.",
        hint="Apply the remapper plugin.",
        context={"project": ":alpha", "task": "remap", "empty": ""},
    )

    rendered = str(error)
    assert rendered.splitlines() == [
        "Task 'remap' not found in project :alpha.",
        "Hint: Apply the remapper plugin.",
        "  project: :alpha",
        "  task: remap",
    ]
    payload = error.to_dict()
    assert payload["code"] == "E_MISSING_TASK"
    assert payload["hint"] == "Apply the remapper plugin."
    assert payload["context"] == {"project": ":alpha", "task": "remap", "empty": ""}


def test_explicit_code_overrides_the_class_default() -> None:
    error = ValidationError("bad input", code=ErrorCode.LICENSE)

    assert error.code == "E_LICENSE"
    assert isinstance(error, ValidationError)
    assert MissingTaskError.default_code is ErrorCode.MISSING_TASK


def test_error_without_hint_omits_it_from_payload() -> None:
    assert "hint" not in ValidationError("bad input").to_dict()


def test_build_result_lookup_helpers() -> None:
    result = BuildResult(requested=("build",))
    result.outcomes[":alpha:jar"] = TaskOutcome(
        path=":alpha:jar",
        did_work=True,
        outputs=(Path("build/libs/alpha.jar"),),
    )
    result.outcomes[":alpha:remap"] = TaskOutcome(path=":alpha:remap", did_work=True)

    assert result.executed == (":alpha:jar", ":alpha:remap")
    assert result.ran(":alpha:remap")
    assert not result.ran(":alpha:build")
    assert result.index_of(":alpha:remap") == 1
