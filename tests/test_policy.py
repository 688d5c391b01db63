from pathlib import Path

import pytest

from recipekit import Build, MappingLogicPlugin, Policy, RemapJar, Task, TaskExecutionError
from recipekit.policy import ensure_outgoing_artifacts


def test_outgoing_artifacts_must_exist_after_their_producer_runs(sources: Build) -> None:
    alpha = sources.configure(":alpha", MappingLogicPlugin())
    remap = alpha.tasks.named("remap", RemapJar)

    def discard(task: Task) -> None:
        remap.archive_file.unlink()

    remap.do_last(discard)

    with pytest.raises(TaskExecutionError) as excinfo:
        sources.run(":alpha", "remap")

    assert excinfo.value.context["configuration"] == ":alpha:remapped"
    assert excinfo.value.context["task"] == ":alpha:remap"


def test_verification_can_be_disabled(tmp_path: Path) -> None:
    ensure_outgoing_artifacts(
        policy=Policy(verify_outgoing_artifacts=False),
        configuration=":alpha:remapped",
        producer=":alpha:remap",
        files=[tmp_path / "missing.jar"],
    )


def test_policy_defaults() -> None:
    policy = Policy()

    assert policy.toolchain_provisioning == "auto"
    assert policy.verify_outgoing_artifacts is True
    assert policy.strict_license is True
