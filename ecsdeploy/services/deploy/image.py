from __future__ import annotations

from ecsdeploy.core.result import Err, Ok, Result
from ecsdeploy.output.console import Style
from ecsdeploy.services.base import BaseService
from ecsdeploy.services.deploy import aws, docker
from ecsdeploy.services.deploy.config import DRY_RUN_ACCOUNT_ID
from ecsdeploy.services.deploy.errors import DeployError
from ecsdeploy.services.deploy.model import ImageReference, registry_host


class ImageReferenceResolver(BaseService):
    """Qualify a release version with the account's ECR registry host."""

    def resolve(self, version: str) -> Result[ImageReference, DeployError]:
        if self._config.dry_run:
            account_id = DRY_RUN_ACCOUNT_ID
            self._dry_run_note(f"skipping sts get-caller-identity (account {account_id})")
        else:
            account = aws.caller_account_id(config=self._config)
            if isinstance(account, Err):
                return account
            account_id = account.value

        return Ok(
            ImageReference(
                registry_host=registry_host(account_id=account_id, region=self._config.region),
                repository=self._config.repository,
                version=version,
            )
        )


class ImageBuilder(BaseService):
    """Build the image from the working tree with its local and registry tags."""

    def build(self, image: ImageReference) -> Result[ImageReference, DeployError]:
        self._console.info(f"building image with tag: {image.version}")
        cmd = docker.build_cmd(image)
        if self._config.dry_run:
            self._dry_run_note(" ".join(cmd))
            return Ok(image)

        self._console.debug(" ".join(cmd))
        result = docker.docker_build(config=self._config, image=image)
        if isinstance(result, Err):
            return Err(
                DeployError(
                    kind="build_failed",
                    message=f"docker build failed (exit {result.error.returncode})",
                    hint=result.error.details() or None,
                )
            )

        self._console.success(f"built {image.local_tag}")
        return Ok(image)


class RegistryPublisher(BaseService):
    """Log in to ECR and push an image. Re-pushing a tag overwrites it."""

    def publish(self, image: ImageReference) -> Result[ImageReference, DeployError]:
        self._console.info("logging in to ECR...")
        if self._config.dry_run:
            self._dry_run_note(
                f"aws ecr get-login-password --region {self._config.region} | "
                + " ".join(docker.login_cmd(image.registry_host))
            )
            self._dry_run_note(" ".join(docker.push_cmd(image)))
            return Ok(image)

        password = aws.ecr_login_password(config=self._config)
        if isinstance(password, Err):
            return password

        login = docker.docker_login(
            config=self._config,
            registry_host=image.registry_host,
            password=password.value,
        )
        if isinstance(login, Err):
            return Err(
                DeployError(
                    kind="auth_failed",
                    message=f"docker login to {image.registry_host} failed",
                    hint=login.error.details() or None,
                )
            )

        self._console.info(f"pushing image: {image.uri}")
        self._console.print(" ".join(docker.push_cmd(image)), Style.DIM)
        pushed = docker.docker_push(config=self._config, image=image)
        if isinstance(pushed, Err):
            return Err(
                DeployError(
                    kind="push_failed",
                    message=f"docker push failed (exit {pushed.error.returncode})",
                    hint=pushed.error.details() or None,
                )
            )

        self._console.success(f"pushed {image.uri}")
        return Ok(image)
