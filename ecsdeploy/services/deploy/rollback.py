from __future__ import annotations

from ecsdeploy.core.result import Err, Ok, Result
from ecsdeploy.services.base import BaseService
from ecsdeploy.services.deploy import aws
from ecsdeploy.services.deploy.config import LIST_VERSIONS_LIMIT
from ecsdeploy.services.deploy.errors import DeployError
from ecsdeploy.services.deploy.image import ImageReferenceResolver
from ecsdeploy.services.deploy.model import DeployOutcome, ImageSummary
from ecsdeploy.services.deploy.service_update import ServiceUpdater
from ecsdeploy.services.deploy.task_spec import TaskSpecFactory
from ecsdeploy.services.deploy.version import validate_version


class RollbackCoordinator(BaseService):
    """Re-deploy an already published version without building or pushing."""

    def recent_versions(
        self, limit: int = LIST_VERSIONS_LIMIT
    ) -> Result[list[ImageSummary], DeployError]:
        """Return the most recently pushed images, oldest first."""
        self._console.info(f"listing the last {limit} versions in ECR...")
        return aws.list_images(config=self._config, limit=limit)

    def rollback(self, version: str | None) -> Result[DeployOutcome, DeployError]:
        if version is None or not version.strip():
            return Err(
                DeployError(
                    kind="usage_error",
                    message="a target version is required for rollback",
                    hint="usage: ecsdeploy rollback <version> (see: ecsdeploy list-versions)",
                )
            )

        checked = validate_version(version.strip())
        if isinstance(checked, Err):
            return checked
        target = checked.value

        self._console.info(f"starting rollback to version: {target}")

        # Read-only, so it also runs in dry-run.
        exists = aws.image_exists(config=self._config, tag=target)
        if isinstance(exists, Err):
            return exists
        if not exists.value:
            return Err(self._version_not_found(target))

        pinned = self._config.with_tag(target)
        image = ImageReferenceResolver(config=pinned, console=self._console).resolve(target)
        if isinstance(image, Err):
            return image

        revision = TaskSpecFactory(config=pinned, console=self._console).register(image.value)
        if isinstance(revision, Err):
            return revision

        outcome = ServiceUpdater(config=pinned, console=self._console).update(revision.value)
        if isinstance(outcome, Err):
            return outcome

        self._console.success(f"rollback to version {target} complete")
        return Ok(outcome.value)

    def _version_not_found(self, target: str) -> DeployError:
        message = f"image with tag '{target}' not found in ECR repository '{self._config.repository}'"
        recent = self.recent_versions()
        if isinstance(recent, Err):
            return DeployError(
                kind="version_not_found",
                message=message,
                hint=f"could not list available versions: {recent.error.message}",
            )
        tags = tuple(s.tag for s in reversed(recent.value) if s.tag is not None)
        return DeployError(
            kind="version_not_found",
            message=message,
            hint="run: ecsdeploy list-versions",
            available=tags,
        )
