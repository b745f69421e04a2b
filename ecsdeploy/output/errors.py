"""Error presentation utilities.

Centralized error formatting and exit code mapping for deploy failures.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ecsdeploy.core.errors import ErrorCode
from ecsdeploy.output.console import Style
from ecsdeploy.services.deploy.errors import DeployError, DeployErrorKind
from ecsdeploy.services.deploy.pipeline import StageFailure

if TYPE_CHECKING:
    from ecsdeploy.output.console import ConsoleProtocol

__all__ = ["deploy_error_exit_code", "print_deploy_error"]


def deploy_error_exit_code(kind: DeployErrorKind) -> int:
    """Get the process exit code for a deploy error kind."""
    match kind:
        case "usage_error" | "version_not_found":
            return int(ErrorCode.USER_ERROR)
        case "dependency_missing" | "not_a_versioned_checkout" | "auth_failed":
            return int(ErrorCode.ENV_ERROR)
        case "build_failed":
            return int(ErrorCode.BUILD_ERROR)
        case (
            "push_failed"
            | "spec_not_found"
            | "registration_failed"
            | "update_rejected"
            | "registry_unavailable"
        ):
            return int(ErrorCode.NETWORK_ERROR)


def print_deploy_error(failure: DeployError | StageFailure, console: ConsoleProtocol) -> None:
    """Print a deploy failure, its hint and any available versions."""
    error = failure.error if isinstance(failure, StageFailure) else failure
    console.error(failure.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)
    if error.kind == "version_not_found" and error.available:
        console.info("available versions:")
        for tag in error.available:
            console.print(f"  {tag}")
