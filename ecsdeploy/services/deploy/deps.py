from __future__ import annotations

from ecsdeploy.core.config import RunConfiguration
from ecsdeploy.core.result import Err, Ok, Result
from ecsdeploy.git.repository import Repository
from ecsdeploy.output.console import ConsoleProtocol
from ecsdeploy.platform.process import which
from ecsdeploy.services.deploy.config import REQUIRED_TOOLS
from ecsdeploy.services.deploy.errors import DeployError

_INSTALL_HINTS = {
    "docker": "Install Docker: https://docs.docker.com/get-docker/",
    "aws": "Install AWS CLI v2: https://aws.amazon.com/cli/",
    "git": "Install git: https://git-scm.com/downloads",
}


def check_dependencies(
    *,
    config: RunConfiguration,
    console: ConsoleProtocol,
    tools: tuple[str, ...] = REQUIRED_TOOLS,
    require_checkout: bool = True,
) -> Result[None, DeployError]:
    """Verify external tools are installed before any external call.

    ``require_checkout`` is dropped when an explicit version makes git
    unnecessary.
    """
    console.info("checking dependencies...")
    for tool in tools:
        if which(tool) is None:
            return Err(
                DeployError(
                    kind="dependency_missing",
                    message=f"{tool}: missing",
                    hint=_INSTALL_HINTS.get(tool),
                )
            )

    if require_checkout and not Repository(config.workdir).is_checkout():
        return Err(
            DeployError(
                kind="not_a_versioned_checkout",
                message=f"not a git repository: {config.workdir}",
                hint="run from the application checkout or pass --tag",
            )
        )

    console.info("all dependencies OK")
    return Ok(None)
