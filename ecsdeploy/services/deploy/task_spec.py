"""Task definition derivation.

A new revision is derived from the currently active one: the fields ECS
assigns at registration are removed, only documented register inputs are
kept, and the primary container's image is replaced. The active revision is
never edited in place.
"""

from __future__ import annotations

import copy

from ecsdeploy.core.result import Err, Ok, Result
from ecsdeploy.core.structured import StrDict, as_obj_list, as_str_dict
from ecsdeploy.services.base import BaseService
from ecsdeploy.services.deploy import aws
from ecsdeploy.services.deploy.config import (
    DRY_RUN_REVISION,
    PLATFORM_ASSIGNED_FIELDS,
    REGISTER_INPUT_FIELDS,
)
from ecsdeploy.services.deploy.errors import DeployError
from ecsdeploy.services.deploy.model import ImageReference, TaskSpecRevision


def strip_platform_fields(document: StrDict) -> tuple[StrDict, tuple[str, ...]]:
    """Return a register-ready copy of ``document``.

    Returns:
        (cleaned, unknown): ``unknown`` names keys dropped because they are
        neither platform-assigned nor a documented register input.
    """
    cleaned: StrDict = {}
    unknown: list[str] = []
    for key, value in document.items():
        if key in PLATFORM_ASSIGNED_FIELDS:
            continue
        if key not in REGISTER_INPUT_FIELDS:
            unknown.append(key)
            continue
        cleaned[key] = copy.deepcopy(value)
    return cleaned, tuple(sorted(unknown))


def set_primary_image(document: StrDict, image_uri: str) -> Result[StrDict, DeployError]:
    """Return a copy of ``document`` whose first container runs ``image_uri``."""
    containers = as_obj_list(document.get("containerDefinitions"))
    if not containers:
        return Err(
            DeployError(
                kind="registration_failed",
                message="task definition has no container definitions",
            )
        )

    primary = as_str_dict(containers[0])
    if primary is None:
        return Err(
            DeployError(
                kind="registration_failed",
                message="first container definition is not an object",
            )
        )

    updated_containers = list(containers)
    updated_containers[0] = {**primary, "image": image_uri}
    return Ok({**document, "containerDefinitions": updated_containers})


def derive_task_spec(
    current: StrDict, image: ImageReference
) -> Result[tuple[StrDict, tuple[str, ...]], DeployError]:
    cleaned, unknown = strip_platform_fields(current)
    updated = set_primary_image(cleaned, image.uri)
    if isinstance(updated, Err):
        return updated
    return Ok((updated.value, unknown))


class TaskSpecFactory(BaseService):
    """Register a new task definition revision running a given image."""

    def register(self, image: ImageReference) -> Result[TaskSpecRevision, DeployError]:
        family = self._config.task_family
        self._console.info(f"creating new task definition with image: {image.uri}")

        if self._config.dry_run:
            placeholder = TaskSpecRevision(
                family=family, revision=DRY_RUN_REVISION, placeholder=True
            )
            self._dry_run_note(f"aws ecs describe-task-definition --task-definition {family}")
            self._dry_run_note(f"would register {family} with image {image.uri}")
            self._dry_run_note(f"placeholder revision {placeholder}")
            return Ok(placeholder)

        current = aws.describe_task_definition(config=self._config)
        if isinstance(current, Err):
            return current

        derived = derive_task_spec(current.value, image)
        if isinstance(derived, Err):
            return derived

        document, unknown = derived.value
        if unknown:
            self._console.debug(f"dropping unsupported task definition fields: {', '.join(unknown)}")

        registered = aws.register_task_definition(config=self._config, document=document)
        if isinstance(registered, Err):
            return registered

        self._console.success(f"new task definition: {registered.value}")
        return registered
