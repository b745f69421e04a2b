from __future__ import annotations

from ecsdeploy.core.result import Err, Ok, Result
from ecsdeploy.git.repository import Repository
from ecsdeploy.services.base import BaseService
from ecsdeploy.services.deploy.config import TAG_PATTERN, VERSION_LENGTH
from ecsdeploy.services.deploy.errors import DeployError


def validate_version(version: str) -> Result[str, DeployError]:
    """Check a release version against the ECR tag grammar."""
    if not TAG_PATTERN.match(version):
        return Err(
            DeployError(
                kind="usage_error",
                message=f"invalid version tag: {version!r}",
                hint="tags use letters, digits, '_', '.', '-' (max 128, no leading '.'/'-')",
            )
        )
    return Ok(version)


class VersionResolver(BaseService):
    """Derive the release version for this run."""

    def resolve(self) -> Result[str, DeployError]:
        override = self._config.tag_override
        if override is not None:
            return validate_version(override)

        repo = Repository(self._config.workdir)
        if not repo.is_checkout():
            return Err(
                DeployError(
                    kind="not_a_versioned_checkout",
                    message=f"not a git repository: {self._config.workdir}",
                    hint="run from the application checkout or pass --tag",
                )
            )

        sha = repo.head_sha(short=VERSION_LENGTH)
        if isinstance(sha, Err):
            return Err(
                DeployError(
                    kind="not_a_versioned_checkout",
                    message="failed to read the current git revision",
                    hint=sha.error.message,
                )
            )
        return validate_version(sha.value)
