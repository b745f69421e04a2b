"""Release commands - full deploy and its standalone stages."""

from __future__ import annotations

from collections.abc import Callable

import typer

from ecsdeploy.cli.commands._helpers import exit_on_failure, finish_outcome
from ecsdeploy.cli.context import CLIContext, build_context
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
from ecsdeploy.core.result import Err, Result
from ecsdeploy.output.console import Style
from ecsdeploy.services.deploy.pipeline import ReleaseOrchestrator, ReleaseReport, StageFailure


def _run(
    ctx: CLIContext,
    step: Callable[[ReleaseOrchestrator], Result[ReleaseReport, StageFailure]],
) -> ReleaseReport:
    orchestrator = ReleaseOrchestrator(config=ctx.config, console=ctx.console)
    result = step(orchestrator)
    if isinstance(result, Err):
        exit_on_failure(result.error, ctx)
    return result.value


def _print_report(report: ReleaseReport, ctx: CLIContext) -> None:
    ctx.console.header("Release")
    ctx.console.print(f"version: {report.version}")
    ctx.console.print(f"image: {report.image.uri}")
    if report.revision is not None:
        suffix = " (dry-run placeholder)" if report.revision.placeholder else ""
        ctx.console.print(f"task definition: {report.revision}{suffix}")
    ctx.console.print(f"stages: {' -> '.join(str(s) for s in report.stages)}", Style.DIM)


def deploy(
    region: str = region_option(),
    cluster: str = cluster_option(),
    service: str = service_option(),
    ecr: str = ecr_option(),
    task_family: str = task_family_option(),
    tag: str | None = tag_option(),
    dry_run: bool = dry_run_option(),
    strict_wait: bool = strict_wait_option(),
) -> None:
    """Build, push and deploy the current commit to the ECS service."""
    ctx = build_context(
        region=region,
        cluster=cluster,
        service=service,
        repository=ecr,
        task_family=task_family,
        tag=tag,
        dry_run=dry_run,
        strict_wait=strict_wait,
    )
    report = _run(ctx, lambda o: o.deploy())
    _print_report(report, ctx)
    finish_outcome(report.outcome, ctx)
    ctx.console.success(f"deployed version {report.version}")


def build(
    region: str = region_option(),
    cluster: str = cluster_option(),
    service: str = service_option(),
    ecr: str = ecr_option(),
    task_family: str = task_family_option(),
    tag: str | None = tag_option(),
    dry_run: bool = dry_run_option(),
) -> None:
    """Only build the Docker image."""
    ctx = build_context(
        region=region,
        cluster=cluster,
        service=service,
        repository=ecr,
        task_family=task_family,
        tag=tag,
        dry_run=dry_run,
    )
    report = _run(ctx, lambda o: o.build())
    ctx.console.print(report.image.uri)


def push(
    region: str = region_option(),
    cluster: str = cluster_option(),
    service: str = service_option(),
    ecr: str = ecr_option(),
    task_family: str = task_family_option(),
    tag: str | None = tag_option(),
    dry_run: bool = dry_run_option(),
) -> None:
    """Only push the image for the current version to ECR."""
    ctx = build_context(
        region=region,
        cluster=cluster,
        service=service,
        repository=ecr,
        task_family=task_family,
        tag=tag,
        dry_run=dry_run,
    )
    report = _run(ctx, lambda o: o.push())
    ctx.console.print(report.image.uri)


def update_service(
    region: str = region_option(),
    cluster: str = cluster_option(),
    service: str = service_option(),
    ecr: str = ecr_option(),
    task_family: str = task_family_option(),
    tag: str | None = tag_option(),
    dry_run: bool = dry_run_option(),
    strict_wait: bool = strict_wait_option(),
) -> None:
    """Only register a new task definition and update the ECS service."""
    ctx = build_context(
        region=region,
        cluster=cluster,
        service=service,
        repository=ecr,
        task_family=task_family,
        tag=tag,
        dry_run=dry_run,
        strict_wait=strict_wait,
    )
    report = _run(ctx, lambda o: o.update_service())
    _print_report(report, ctx)
    finish_outcome(report.outcome, ctx)
