"""Rollback commands - redeploy a published version, list versions."""

from __future__ import annotations

import typer

from ecsdeploy.cli.commands._helpers import exit_on_failure, finish_outcome
from ecsdeploy.cli.context import build_context
from ecsdeploy.cli.options import (
    cluster_option,
    dry_run_option,
    ecr_option,
    region_option,
    service_option,
    strict_wait_option,
    tag_option,
    task_family_option,
)
from ecsdeploy.core.errors import ErrorCode
from ecsdeploy.core.result import Err
from ecsdeploy.output.console import Style
from ecsdeploy.services.deploy.deps import check_dependencies
from ecsdeploy.services.deploy.rollback import RollbackCoordinator


def rollback(
    version: str | None = typer.Argument(
        None, help="Version (image tag) to roll back to", show_default=False
    ),
    region: str = region_option(),
    cluster: str = cluster_option(),
    service: str = service_option(),
    ecr: str = ecr_option(),
    task_family: str = task_family_option(),
    tag: str | None = tag_option(),
    dry_run: bool = dry_run_option(),
    strict_wait: bool = strict_wait_option(),
) -> None:
    """Roll the service back to a version already published in ECR."""
    if tag is not None:
        typer.echo("error: rollback takes the version as an argument, not --tag", err=True)
        typer.echo("usage: ecsdeploy rollback <version>", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    if version is None or not version.strip():
        typer.echo("error: a target version is required for rollback", err=True)
        typer.echo("usage: ecsdeploy rollback <version>", err=True)
        typer.echo("to see available versions: ecsdeploy list-versions", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    ctx = build_context(
        region=region,
        cluster=cluster,
        service=service,
        repository=ecr,
        task_family=task_family,
        dry_run=dry_run,
        strict_wait=strict_wait,
    )

    deps = check_dependencies(
        config=ctx.config, console=ctx.console, tools=("aws",), require_checkout=False
    )
    if isinstance(deps, Err):
        exit_on_failure(deps.error, ctx)

    coordinator = RollbackCoordinator(config=ctx.config, console=ctx.console)
    result = coordinator.rollback(version)
    if isinstance(result, Err):
        exit_on_failure(result.error, ctx)

    outcome = result.value
    suffix = " (dry-run placeholder)" if outcome.revision.placeholder else ""
    ctx.console.print(f"task definition: {outcome.revision}{suffix}")
    finish_outcome(outcome, ctx)


def list_versions(
    region: str = region_option(),
    cluster: str = cluster_option(),
    service: str = service_option(),
    ecr: str = ecr_option(),
    task_family: str = task_family_option(),
    tag: str | None = tag_option(),
    dry_run: bool = dry_run_option(),
) -> None:
    """List the last 10 versions available in ECR.

    Accepts the shared target options; only region and repository affect
    the listing.
    """
    ctx = build_context(
        region=region,
        cluster=cluster,
        service=service,
        repository=ecr,
        task_family=task_family,
        tag=tag,
        dry_run=dry_run,
    )

    deps = check_dependencies(
        config=ctx.config, console=ctx.console, tools=("aws",), require_checkout=False
    )
    if isinstance(deps, Err):
        exit_on_failure(deps.error, ctx)

    result = RollbackCoordinator(config=ctx.config, console=ctx.console).recent_versions()
    if isinstance(result, Err):
        exit_on_failure(result.error, ctx)

    images = result.value
    if not images:
        ctx.console.info(f"no images found in '{ctx.config.repository}'")
        return

    ctx.console.header(f"{ctx.config.repository} ({ctx.config.region})")
    for image in images:
        label = image.tag or "<untagged>"
        ctx.console.print(f"{label:<24} {image.pushed_at or ''}".rstrip())
    ctx.console.print(f"{len(images)} version(s)", Style.DIM)
