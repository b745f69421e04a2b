"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import typer

from ecsdeploy.core.errors import ErrorCode
from ecsdeploy.output.errors import deploy_error_exit_code, print_deploy_error
from ecsdeploy.output.console import Style
from ecsdeploy.services.deploy.errors import DeployError
from ecsdeploy.services.deploy.model import DeployOutcome
from ecsdeploy.services.deploy.pipeline import StageFailure

if TYPE_CHECKING:
    from ecsdeploy.cli.context import CLIContext


def exit_on_failure(failure: DeployError | StageFailure, ctx: CLIContext) -> NoReturn:
    """Print a deploy failure and exit with its mapped code."""
    print_deploy_error(failure, ctx.console)
    error = failure.error if isinstance(failure, StageFailure) else failure
    raise typer.Exit(code=deploy_error_exit_code(error.kind))


def finish_outcome(outcome: DeployOutcome | None, ctx: CLIContext) -> None:
    """Apply the stabilization policy to a finished service update.

    A timeout is a warning by default; with --strict-wait it exits with
    ErrorCode.UNSTABLE.
    """
    if outcome is None or outcome.warning is None:
        return

    ctx.console.print(
        "the update was accepted; the deployment may still converge", Style.DIM
    )
    if ctx.config.strict_wait:
        raise typer.Exit(code=int(ErrorCode.UNSTABLE))
