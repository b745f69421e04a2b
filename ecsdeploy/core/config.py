"""Typed run configuration.

A ``RunConfiguration`` holds every target parameter of one invocation. It is
built once from defaults and CLI flags, then passed explicitly to every
service; nothing reads module-level state.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path

from .result import Err, Ok, Result

__all__ = [
    "ConfigError",
    "RunConfiguration",
    "build_run_config",
    # Defaults
    "DEFAULT_CLUSTER",
    "DEFAULT_REGION",
    "DEFAULT_REPOSITORY",
    "DEFAULT_SERVICE",
    "DEFAULT_TASK_FAMILY",
]

# -----------------------------------------------------------------------------
# Defaults
# -----------------------------------------------------------------------------

DEFAULT_REPOSITORY = "bia-app"
DEFAULT_CLUSTER = "bia-cluster-alb"
DEFAULT_SERVICE = "bia-service"
DEFAULT_TASK_FAMILY = "bia-tf"
DEFAULT_REGION = "us-east-1"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when flags do not form a usable configuration."""

    message: str
    option: str | None = None


@dataclass(frozen=True, slots=True)
class RunConfiguration:
    """Resolved target parameters for one invocation.

    Attributes:
        region: AWS region for ECR, ECS and STS calls.
        cluster: ECS cluster name.
        service: ECS service name.
        repository: ECR repository name.
        task_family: ECS task definition family.
        tag_override: Explicit release version; None means "use git HEAD".
        dry_run: Log every step without performing irreversible actions.
        strict_wait: Treat an unconfirmed stabilization as a failure.
        workdir: Build context and git checkout used for the release.
    """

    region: str = DEFAULT_REGION
    cluster: str = DEFAULT_CLUSTER
    service: str = DEFAULT_SERVICE
    repository: str = DEFAULT_REPOSITORY
    task_family: str = DEFAULT_TASK_FAMILY
    tag_override: str | None = None
    dry_run: bool = False
    strict_wait: bool = False
    workdir: Path = field(default_factory=Path.cwd)

    def with_tag(self, tag: str) -> RunConfiguration:
        """Return a copy pinned to an explicit version (used by rollback)."""
        return replace(self, tag_override=tag)


def _required(value: str, *, option: str) -> Result[str, ConfigError]:
    v = value.strip()
    if not v:
        return Err(ConfigError(f"{option} must not be empty", option=option))
    return Ok(v)


def build_run_config(
    *,
    region: str = DEFAULT_REGION,
    cluster: str = DEFAULT_CLUSTER,
    service: str = DEFAULT_SERVICE,
    repository: str = DEFAULT_REPOSITORY,
    task_family: str = DEFAULT_TASK_FAMILY,
    tag: str | None = None,
    dry_run: bool = False,
    strict_wait: bool = False,
    workdir: Path | None = None,
) -> Result[RunConfiguration, ConfigError]:
    """Validate raw flag values and build a RunConfiguration.

    Returns:
        Ok(RunConfiguration) on success, Err(ConfigError) naming the bad flag.
    """
    values: dict[str, str] = {}
    for option, raw in (
        ("--region", region),
        ("--cluster", cluster),
        ("--service", service),
        ("--ecr", repository),
        ("--task-family", task_family),
    ):
        checked = _required(raw, option=option)
        if isinstance(checked, Err):
            return checked
        values[option] = checked.value

    tag_override: str | None = None
    if tag is not None:
        checked = _required(tag, option="--tag")
        if isinstance(checked, Err):
            return checked
        tag_override = checked.value

    return Ok(
        RunConfiguration(
            region=values["--region"],
            cluster=values["--cluster"],
            service=values["--service"],
            repository=values["--ecr"],
            task_family=values["--task-family"],
            tag_override=tag_override,
            dry_run=dry_run,
            strict_wait=strict_wait,
            workdir=workdir if workdir is not None else Path.cwd(),
        )
    )
