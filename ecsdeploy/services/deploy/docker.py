from __future__ import annotations

from ecsdeploy.core.config import RunConfiguration
from ecsdeploy.core.result import Err, Ok, Result
from ecsdeploy.platform.process import ProcessError
from ecsdeploy.platform.process import run as run_process
from ecsdeploy.services.deploy.model import ImageReference
from ecsdeploy.services.deploy.timeouts import DOCKER_LOGIN_TIMEOUT_SECONDS


def build_cmd(image: ImageReference) -> list[str]:
    return ["docker", "build", "-t", image.local_tag, "-t", image.uri, "."]


def login_cmd(registry_host: str) -> list[str]:
    return ["docker", "login", "--username", "AWS", "--password-stdin", registry_host]


def push_cmd(image: ImageReference) -> list[str]:
    return ["docker", "push", image.uri]


def docker_build(
    *, config: RunConfiguration, image: ImageReference
) -> Result[None, ProcessError]:
    # Builds can take arbitrarily long; no client-side timeout.
    result = run_process(build_cmd(image), cwd=config.workdir)
    if isinstance(result, Err):
        return result
    return Ok(None)


def docker_login(
    *, config: RunConfiguration, registry_host: str, password: str
) -> Result[None, ProcessError]:
    result = run_process(
        login_cmd(registry_host),
        cwd=config.workdir,
        timeout=DOCKER_LOGIN_TIMEOUT_SECONDS,
        input_text=password,
    )
    if isinstance(result, Err):
        return result
    return Ok(None)


def docker_push(*, config: RunConfiguration, image: ImageReference) -> Result[None, ProcessError]:
    result = run_process(push_cmd(image), cwd=config.workdir)
    if isinstance(result, Err):
        return result
    return Ok(None)
