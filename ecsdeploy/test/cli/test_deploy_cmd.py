from __future__ import annotations

from pathlib import Path
from types import ModuleType
from typing import Any

import pytest
import typer

from ecsdeploy.cli.context import CLIContext
from ecsdeploy.core.config import build_run_config
from ecsdeploy.core.errors import ErrorCode
from ecsdeploy.core.result import Ok
from ecsdeploy.output.console import MockConsole
from ecsdeploy.platform.fake_process import FakeProcess

TARGET: dict[str, Any] = {
    "region": "us-east-1",
    "cluster": "bia-cluster-alb",
    "service": "bia-service",
    "ecr": "bia-app",
    "task_family": "bia-tf",
}


def _patch_context(
    monkeypatch: pytest.MonkeyPatch, module: ModuleType, tmp_path: Path
) -> MockConsole:
    console = MockConsole()

    def fake_build_context(**kwargs: object) -> CLIContext:
        config = build_run_config(workdir=tmp_path, **kwargs)  # type: ignore[arg-type]
        assert isinstance(config, Ok)
        return CLIContext(config=config.value, console=console)

    monkeypatch.setattr(module, "build_context", fake_build_context)
    return console


def test_deploy_prints_release_summary(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, fake_tools: FakeProcess
) -> None:
    import ecsdeploy.cli.commands.deploy_cmd as deploy_cmd

    console = _patch_context(monkeypatch, deploy_cmd, tmp_path)

    deploy_cmd.deploy(**TARGET, tag=None, dry_run=False, strict_wait=False)

    assert "version: abc123f" in console.messages
    assert "task definition: bia-tf:42" in console.messages
    assert "OK deployed version abc123f" in console.messages
    assert not console.has_error()


def test_deploy_dry_run_exits_cleanly(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    fake_tools: FakeProcess,
    mutating_prefixes: tuple[tuple[str, ...], ...],
) -> None:
    import ecsdeploy.cli.commands.deploy_cmd as deploy_cmd

    console = _patch_context(monkeypatch, deploy_cmd, tmp_path)

    deploy_cmd.deploy(**TARGET, tag=None, dry_run=True, strict_wait=False)

    assert fake_tools.commands_matching(mutating_prefixes) == []
    assert "task definition: bia-tf:999 (dry-run placeholder)" in console.messages


def test_deploy_build_failure_exits_with_build_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, fake_tools: FakeProcess
) -> None:
    import ecsdeploy.cli.commands.deploy_cmd as deploy_cmd

    console = _patch_context(monkeypatch, deploy_cmd, tmp_path)
    fake_tools.fail("docker", "build", stderr="Dockerfile not found")

    with pytest.raises(typer.Exit) as exc:
        deploy_cmd.deploy(**TARGET, tag=None, dry_run=False, strict_wait=False)

    assert exc.value.exit_code == int(ErrorCode.BUILD_ERROR)
    assert console.find("[building]")
    assert "hint: Dockerfile not found" in console.messages


def test_deploy_push_failure_exits_with_network_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, fake_tools: FakeProcess
) -> None:
    import ecsdeploy.cli.commands.deploy_cmd as deploy_cmd

    _patch_context(monkeypatch, deploy_cmd, tmp_path)
    fake_tools.fail("docker", "push", stderr="denied")

    with pytest.raises(typer.Exit) as exc:
        deploy_cmd.deploy(**TARGET, tag=None, dry_run=False, strict_wait=False)

    assert exc.value.exit_code == int(ErrorCode.NETWORK_ERROR)


def test_deploy_missing_tool_exits_with_env_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, fake_tools: FakeProcess
) -> None:
    import ecsdeploy.cli.commands.deploy_cmd as deploy_cmd
    import ecsdeploy.services.deploy.deps as deps_mod

    console = _patch_context(monkeypatch, deploy_cmd, tmp_path)
    monkeypatch.setattr(deps_mod, "which", lambda tool: None if tool == "docker" else tool)

    with pytest.raises(typer.Exit) as exc:
        deploy_cmd.deploy(**TARGET, tag=None, dry_run=False, strict_wait=False)

    assert exc.value.exit_code == int(ErrorCode.ENV_ERROR)
    assert console.find("docker: missing")
    assert fake_tools.calls == []


def test_stabilization_timeout_is_success_by_default(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, fake_tools: FakeProcess
) -> None:
    import ecsdeploy.cli.commands.deploy_cmd as deploy_cmd

    console = _patch_context(monkeypatch, deploy_cmd, tmp_path)
    fake_tools.fail("aws", "ecs", "wait", "services-stable", stderr="Max attempts exceeded")

    deploy_cmd.deploy(**TARGET, tag=None, dry_run=False, strict_wait=False)

    assert console.has_warning()
    assert not console.has_error()


def test_stabilization_timeout_with_strict_wait(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, fake_tools: FakeProcess
) -> None:
    import ecsdeploy.cli.commands.deploy_cmd as deploy_cmd

    _patch_context(monkeypatch, deploy_cmd, tmp_path)
    fake_tools.fail("aws", "ecs", "wait", "services-stable", stderr="Max attempts exceeded")

    with pytest.raises(typer.Exit) as exc:
        deploy_cmd.deploy(**TARGET, tag=None, dry_run=False, strict_wait=True)

    assert exc.value.exit_code == int(ErrorCode.UNSTABLE)


def test_build_command_only_builds(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, fake_tools: FakeProcess
) -> None:
    import ecsdeploy.cli.commands.deploy_cmd as deploy_cmd

    console = _patch_context(monkeypatch, deploy_cmd, tmp_path)

    deploy_cmd.build(**TARGET, tag=None, dry_run=False)

    assert fake_tools.ran("docker", "build")
    assert not fake_tools.ran("docker", "push")
    assert console.messages[-1] == "123456789012.dkr.ecr.us-east-1.amazonaws.com/bia-app:abc123f"


def test_push_command_uses_explicit_tag(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, fake_tools: FakeProcess
) -> None:
    import ecsdeploy.cli.commands.deploy_cmd as deploy_cmd

    _patch_context(monkeypatch, deploy_cmd, tmp_path)

    deploy_cmd.push(**TARGET, tag="v1.0.0", dry_run=False)

    assert fake_tools.commands("docker", "push") == [
        ["docker", "push", "123456789012.dkr.ecr.us-east-1.amazonaws.com/bia-app:v1.0.0"]
    ]
    assert not fake_tools.ran("git")


def test_update_service_command(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, fake_tools: FakeProcess
) -> None:
    import ecsdeploy.cli.commands.deploy_cmd as deploy_cmd

    console = _patch_context(monkeypatch, deploy_cmd, tmp_path)

    deploy_cmd.update_service(**TARGET, tag=None, dry_run=False, strict_wait=False)

    assert not fake_tools.ran("docker")
    assert "task definition: bia-tf:42" in console.messages
