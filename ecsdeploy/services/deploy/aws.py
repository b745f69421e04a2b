from __future__ import annotations

import json
from datetime import datetime
from time import sleep

from ecsdeploy.core.config import RunConfiguration
from ecsdeploy.core.result import Err, Ok, Result
from ecsdeploy.core.structured import StrDict, as_obj_list, as_str_dict, get_int, get_str
from ecsdeploy.platform.process import ProcessError
from ecsdeploy.platform.process import run as run_process
from ecsdeploy.services.deploy.errors import DeployError, DeployErrorKind
from ecsdeploy.services.deploy.model import ImageSummary, TaskSpecRevision
from ecsdeploy.services.deploy.timeouts import (
    AWS_READ_RETRY_ATTEMPTS,
    AWS_READ_RETRY_DELAY_SECONDS,
    AWS_TIMEOUT_SECONDS,
    STABILIZATION_TIMEOUT_SECONDS,
)


def _is_transient_aws_error(error: ProcessError) -> bool:
    text = f"{error.stderr}\n{error.stdout}".lower()
    markers = (
        "throttling",
        "throttlingexception",
        "rate exceeded",
        "requestlimitexceeded",
        "serviceunavailable",
        "service unavailable",
        "internalfailure",
        "internal server error",
        "connection reset",
        "connection was closed",
        "could not connect to the endpoint url",
        "read timeout",
        "connect timeout",
        "temporarily unavailable",
    )
    if error.returncode == -1 and "timed out" in text:
        return True
    return any(marker in text for marker in markers)


def _aws(config: RunConfiguration, *args: str) -> list[str]:
    return ["aws", *args, "--region", config.region, "--output", "json"]


def run_aws_read(
    *,
    config: RunConfiguration,
    cmd: list[str],
    kind: DeployErrorKind,
    message: str,
    hint: str | None = None,
    retry_attempts: int = AWS_READ_RETRY_ATTEMPTS,
) -> Result[str, DeployError]:
    """Run an idempotent aws call, retrying transient failures."""
    attempts = max(1, retry_attempts)
    attempt = 0
    while True:
        result = run_process(cmd, cwd=config.workdir, timeout=AWS_TIMEOUT_SECONDS)
        if isinstance(result, Ok):
            return result

        attempt += 1
        error = result.error
        if attempt < attempts and _is_transient_aws_error(error):
            sleep(AWS_READ_RETRY_DELAY_SECONDS * attempt)
            continue

        return Err(DeployError(kind=kind, message=message, hint=error.details() or hint))


def run_aws_write(
    *,
    config: RunConfiguration,
    cmd: list[str],
    kind: DeployErrorKind,
    message: str,
) -> Result[str, DeployError]:
    """Run a state-changing aws call exactly once."""
    result = run_process(cmd, cwd=config.workdir, timeout=AWS_TIMEOUT_SECONDS)
    if isinstance(result, Err):
        return Err(DeployError(kind=kind, message=message, hint=result.error.details() or None))
    return result


def _parse_json(
    raw: str, *, kind: DeployErrorKind, what: str
) -> Result[StrDict, DeployError]:
    try:
        obj: object = json.loads(raw)
    except json.JSONDecodeError as e:
        return Err(DeployError(kind=kind, message=f"aws returned invalid JSON for {what}: {e}"))

    data = as_str_dict(obj)
    if data is None:
        return Err(DeployError(kind=kind, message=f"unexpected aws payload for {what}"))
    return Ok(data)


def caller_account_id(*, config: RunConfiguration) -> Result[str, DeployError]:
    raw = run_aws_read(
        config=config,
        cmd=_aws(config, "sts", "get-caller-identity"),
        kind="auth_failed",
        message="failed to resolve the AWS account id",
        hint="check your AWS credentials (aws configure / AWS_PROFILE)",
    )
    if isinstance(raw, Err):
        return raw

    data = _parse_json(raw.value, kind="auth_failed", what="sts get-caller-identity")
    if isinstance(data, Err):
        return data

    account = get_str(data.value, "Account")
    if account is None:
        return Err(DeployError(kind="auth_failed", message="sts response has no Account"))
    return Ok(account)


def ecr_login_password(*, config: RunConfiguration) -> Result[str, DeployError]:
    # Plain text output: the password is piped straight into docker login.
    cmd = ["aws", "ecr", "get-login-password", "--region", config.region]
    raw = run_aws_read(
        config=config,
        cmd=cmd,
        kind="auth_failed",
        message="failed to fetch an ECR login password",
    )
    if isinstance(raw, Err):
        return raw

    password = raw.value.strip()
    if not password:
        return Err(DeployError(kind="auth_failed", message="ECR returned an empty password"))
    return Ok(password)


def image_exists(*, config: RunConfiguration, tag: str) -> Result[bool, DeployError]:
    """Check whether ``tag`` is present in the configured ECR repository.

    Ok(False) is only returned when ECR positively reports the image missing;
    any other failure is an Err so a registry outage is not mistaken for an
    unknown version.
    """
    cmd = _aws(
        config,
        "ecr",
        "describe-images",
        "--repository-name",
        config.repository,
        "--image-ids",
        f"imageTag={tag}",
    )
    result = run_process(cmd, cwd=config.workdir, timeout=AWS_TIMEOUT_SECONDS)
    if isinstance(result, Ok):
        return Ok(True)

    error = result.error
    if "ImageNotFoundException" in f"{error.stderr}\n{error.stdout}":
        return Ok(False)
    return Err(
        DeployError(
            kind="registry_unavailable",
            message=f"failed to look up {config.repository}:{tag} in ECR",
            hint=error.details() or None,
        )
    )


def _pushed_at_key(value: object) -> float:
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value).timestamp()
        except ValueError:
            return 0.0
    return 0.0


def list_images(
    *, config: RunConfiguration, limit: int
) -> Result[list[ImageSummary], DeployError]:
    """Return the ``limit`` most recently pushed images, oldest first."""
    raw = run_aws_read(
        config=config,
        cmd=_aws(config, "ecr", "describe-images", "--repository-name", config.repository),
        kind="registry_unavailable",
        message=f"failed to list images in ECR repository '{config.repository}'",
    )
    if isinstance(raw, Err):
        return raw

    data = _parse_json(raw.value, kind="registry_unavailable", what="ecr describe-images")
    if isinstance(data, Err):
        return data

    details = as_obj_list(data.value.get("imageDetails")) or []
    entries: list[tuple[float, ImageSummary]] = []
    for item in details:
        d = as_str_dict(item)
        if d is None:
            continue
        tags = as_obj_list(d.get("imageTags")) or []
        first_tag = tags[0] if tags and isinstance(tags[0], str) else None
        pushed = d.get("imagePushedAt")
        entries.append(
            (
                _pushed_at_key(pushed),
                ImageSummary(tag=first_tag, pushed_at=None if pushed is None else str(pushed)),
            )
        )

    entries.sort(key=lambda e: e[0])
    return Ok([summary for _, summary in entries[-limit:]] if limit > 0 else [])


def describe_task_definition(*, config: RunConfiguration) -> Result[StrDict, DeployError]:
    """Fetch the active task definition document of the configured family."""
    raw = run_aws_read(
        config=config,
        cmd=_aws(
            config, "ecs", "describe-task-definition", "--task-definition", config.task_family
        ),
        kind="spec_not_found",
        message=f"failed to read task definition '{config.task_family}'",
        hint="has the family been registered in this region?",
    )
    if isinstance(raw, Err):
        return raw

    data = _parse_json(raw.value, kind="spec_not_found", what="ecs describe-task-definition")
    if isinstance(data, Err):
        return data

    doc = as_str_dict(data.value.get("taskDefinition"))
    if doc is None:
        return Err(
            DeployError(
                kind="spec_not_found",
                message=f"no taskDefinition in response for '{config.task_family}'",
            )
        )
    return Ok(doc)


def register_task_definition(
    *, config: RunConfiguration, document: StrDict
) -> Result[TaskSpecRevision, DeployError]:
    cmd = _aws(
        config, "ecs", "register-task-definition", "--cli-input-json", json.dumps(document)
    )
    raw = run_aws_write(
        config=config,
        cmd=cmd,
        kind="registration_failed",
        message=f"ECS rejected the new task definition for '{config.task_family}'",
    )
    if isinstance(raw, Err):
        return raw

    data = _parse_json(raw.value, kind="registration_failed", what="register-task-definition")
    if isinstance(data, Err):
        return data

    registered = as_str_dict(data.value.get("taskDefinition")) or {}
    family = get_str(registered, "family")
    revision = get_int(registered, "revision")
    if family is None or revision is None:
        return Err(
            DeployError(
                kind="registration_failed",
                message="register-task-definition response has no family/revision",
            )
        )
    return Ok(TaskSpecRevision(family=family, revision=revision))


def update_service(
    *, config: RunConfiguration, revision: TaskSpecRevision
) -> Result[None, DeployError]:
    cmd = _aws(
        config,
        "ecs",
        "update-service",
        "--cluster",
        config.cluster,
        "--service",
        config.service,
        "--task-definition",
        str(revision),
    )
    raw = run_aws_write(
        config=config,
        cmd=cmd,
        kind="update_rejected",
        message=f"failed to update service '{config.service}' in cluster '{config.cluster}'",
    )
    if isinstance(raw, Err):
        return raw
    return Ok(None)


def wait_services_stable(*, config: RunConfiguration) -> Result[None, ProcessError]:
    """Block on the ECS ``services-stable`` waiter."""
    cmd = [
        "aws",
        "ecs",
        "wait",
        "services-stable",
        "--cluster",
        config.cluster,
        "--services",
        config.service,
        "--region",
        config.region,
    ]
    result = run_process(cmd, cwd=config.workdir, timeout=STABILIZATION_TIMEOUT_SECONDS)
    if isinstance(result, Err):
        return result
    return Ok(None)
