from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from ecsdeploy.core.config import RunConfiguration, build_run_config
from ecsdeploy.core.errors import ErrorCode
from ecsdeploy.core.result import Err
from ecsdeploy.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: RunConfiguration
    console: ConsoleProtocol


def build_context(
    *,
    region: str,
    cluster: str,
    service: str,
    repository: str,
    task_family: str,
    tag: str | None = None,
    dry_run: bool = False,
    strict_wait: bool = False,
    workdir: Path | None = None,
) -> CLIContext:
    config_result = build_run_config(
        region=region,
        cluster=cluster,
        service=service,
        repository=repository,
        task_family=task_family,
        tag=tag,
        dry_run=dry_run,
        strict_wait=strict_wait,
        workdir=workdir,
    )
    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    console = RichConsole()
    if config_result.value.dry_run:
        console.warning("dry-run: no image, registry or service changes will be made")

    return CLIContext(config=config_result.value, console=console)
