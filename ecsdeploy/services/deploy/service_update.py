from __future__ import annotations

from ecsdeploy.core.result import Err, Ok, Result
from ecsdeploy.services.base import BaseService
from ecsdeploy.services.deploy import aws
from ecsdeploy.services.deploy.errors import DeployError, StabilizationTimeout
from ecsdeploy.services.deploy.model import DeployOutcome, TaskSpecRevision


class ServiceUpdater(BaseService):
    """Point the ECS service at a revision and wait for it to stabilize.

    A failed wait is reported as a warning on the outcome: the update call
    already succeeded and the deployment may still converge, so nothing is
    rolled back.
    """

    def update(self, revision: TaskSpecRevision) -> Result[DeployOutcome, DeployError]:
        cfg = self._config
        self._console.info(f"updating ECS service: {cfg.service}")

        if cfg.dry_run:
            self._dry_run_note(
                f"aws ecs update-service --cluster {cfg.cluster} --service {cfg.service} "
                f"--task-definition {revision}"
            )
            self._dry_run_note(
                f"aws ecs wait services-stable --cluster {cfg.cluster} --services {cfg.service}"
            )
            return Ok(DeployOutcome(revision=revision))

        updated = aws.update_service(config=cfg, revision=revision)
        if isinstance(updated, Err):
            return updated

        self._console.success("service updated")
        self._console.info("waiting for deployment to stabilize...")

        waited = aws.wait_services_stable(config=cfg)
        if isinstance(waited, Err):
            warning = StabilizationTimeout(
                service=cfg.service,
                revision=str(revision),
                detail=waited.error.details(),
            )
            self._console.warning(warning.message)
            return Ok(DeployOutcome(revision=revision, warning=warning))

        self._console.success("deployment is stable")
        return Ok(DeployOutcome(revision=revision))
