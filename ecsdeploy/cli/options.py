"""Option factories shared by every command.

Each call returns a fresh ``typer.Option`` so commands never share parameter
objects.
"""

from __future__ import annotations

from typing import Any

import typer

from ecsdeploy.core.config import (
    DEFAULT_CLUSTER,
    DEFAULT_REGION,
    DEFAULT_REPOSITORY,
    DEFAULT_SERVICE,
    DEFAULT_TASK_FAMILY,
)


def region_option() -> Any:
    return typer.Option(
        DEFAULT_REGION, "--region", "-r", envvar="ECSDEPLOY_REGION", help="AWS region"
    )


def cluster_option() -> Any:
    return typer.Option(
        DEFAULT_CLUSTER, "--cluster", "-c", envvar="ECSDEPLOY_CLUSTER", help="ECS cluster name"
    )


def service_option() -> Any:
    return typer.Option(
        DEFAULT_SERVICE, "--service", "-s", envvar="ECSDEPLOY_SERVICE", help="ECS service name"
    )


def ecr_option() -> Any:
    return typer.Option(
        DEFAULT_REPOSITORY,
        "--ecr",
        "-e",
        envvar="ECSDEPLOY_ECR_REPOSITORY",
        help="ECR repository name",
    )


def task_family_option() -> Any:
    return typer.Option(
        DEFAULT_TASK_FAMILY,
        "--task-family",
        envvar="ECSDEPLOY_TASK_FAMILY",
        help="ECS task definition family",
    )


def tag_option() -> Any:
    return typer.Option(
        None,
        "--tag",
        "-t",
        envvar="ECSDEPLOY_TAG",
        help="Release version to use (default: short git commit hash)",
        show_default=False,
    )


def dry_run_option() -> Any:
    return typer.Option(False, "--dry-run", help="Simulate every step without executing it")


def strict_wait_option() -> Any:
    return typer.Option(
        False,
        "--strict-wait",
        help="Exit non-zero when the service does not confirm stabilization",
    )
