"""Release pipeline.

A release moves through fixed stages::

    resolving -> building -> publishing -> registering -> deploying -> done

Every stage failure is fatal and reported with the stage name. There is no
resume: a new invocation starts again at ``resolving``. Partial commands
(build, push, update-service) enter the pipeline after ``resolving`` at a
later stage and stop early; each one re-derives the version itself.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace
from enum import StrEnum

from ecsdeploy.core.result import Err, Ok, Result
from ecsdeploy.services.base import BaseService
from ecsdeploy.services.deploy.deps import check_dependencies
from ecsdeploy.services.deploy.errors import DeployError
from ecsdeploy.services.deploy.image import (
    ImageBuilder,
    ImageReferenceResolver,
    RegistryPublisher,
)
from ecsdeploy.services.deploy.model import DeployOutcome, ImageReference, TaskSpecRevision
from ecsdeploy.services.deploy.service_update import ServiceUpdater
from ecsdeploy.services.deploy.task_spec import TaskSpecFactory
from ecsdeploy.services.deploy.version import VersionResolver


class Stage(StrEnum):
    RESOLVING = "resolving"
    BUILDING = "building"
    PUBLISHING = "publishing"
    REGISTERING = "registering"
    DEPLOYING = "deploying"
    DONE = "done"


STAGE_ORDER: tuple[Stage, ...] = (
    Stage.RESOLVING,
    Stage.BUILDING,
    Stage.PUBLISHING,
    Stage.REGISTERING,
    Stage.DEPLOYING,
)


@dataclass(frozen=True, slots=True)
class StageFailure:
    stage: Stage
    error: DeployError

    @property
    def message(self) -> str:
        return f"[{self.stage}] {self.error.message}"

    @property
    def hint(self) -> str | None:
        return self.error.hint


@dataclass(frozen=True, slots=True)
class PipelineState:
    stage: Stage
    version: str | None = None
    image: ImageReference | None = None
    revision: TaskSpecRevision | None = None
    outcome: DeployOutcome | None = None
    completed: tuple[Stage, ...] = ()


@dataclass(frozen=True, slots=True)
class ReleaseReport:
    version: str
    image: ImageReference
    revision: TaskSpecRevision | None
    outcome: DeployOutcome | None
    stages: tuple[Stage, ...]


StageHandler = Callable[[PipelineState], Result[PipelineState, DeployError]]


def _missing(what: str) -> DeployError:
    return DeployError(kind="usage_error", message=f"pipeline state has no {what}")


def next_stage(current: Stage, *, entry: Stage, until: Stage) -> Stage:
    if current == Stage.RESOLVING:
        return entry
    if current == until:
        return Stage.DONE
    idx = STAGE_ORDER.index(current)
    return STAGE_ORDER[idx + 1] if idx + 1 < len(STAGE_ORDER) else Stage.DONE


def run_stages(
    *,
    initial: PipelineState,
    handlers: Mapping[Stage, StageHandler],
    entry: Stage,
    until: Stage,
) -> Result[PipelineState, StageFailure]:
    current = initial

    while current.stage != Stage.DONE:
        stage = current.stage
        handler = handlers.get(stage)
        if handler is None:
            return Err(
                StageFailure(
                    stage=stage,
                    error=DeployError(kind="usage_error", message=f"no handler for stage: {stage}"),
                )
            )

        outcome = handler(current)
        if isinstance(outcome, Err):
            return Err(StageFailure(stage=stage, error=outcome.error))

        current = replace(
            outcome.value,
            stage=next_stage(stage, entry=entry, until=until),
            completed=(*current.completed, stage),
        )

    return Ok(current)


class ReleaseOrchestrator(BaseService):
    """Compose the deploy stages for full and partial releases."""

    def deploy(self) -> Result[ReleaseReport, StageFailure]:
        """Build, push, register and roll out the current version."""
        return self.run(entry=Stage.BUILDING, until=Stage.DEPLOYING)

    def build(self) -> Result[ReleaseReport, StageFailure]:
        return self.run(entry=Stage.BUILDING, until=Stage.BUILDING)

    def push(self) -> Result[ReleaseReport, StageFailure]:
        return self.run(entry=Stage.PUBLISHING, until=Stage.PUBLISHING)

    def update_service(self) -> Result[ReleaseReport, StageFailure]:
        """Register a revision for the already published version and roll it out."""
        return self.run(entry=Stage.REGISTERING, until=Stage.DEPLOYING)

    def run(self, *, entry: Stage, until: Stage) -> Result[ReleaseReport, StageFailure]:
        if entry not in STAGE_ORDER[1:] or until not in STAGE_ORDER[1:]:
            raise ValueError(f"invalid pipeline range: {entry} -> {until}")
        if STAGE_ORDER.index(until) < STAGE_ORDER.index(entry):
            raise ValueError(f"invalid pipeline range: {entry} -> {until}")

        handlers: dict[Stage, StageHandler] = {
            Stage.RESOLVING: self._resolve,
            Stage.BUILDING: self._build,
            Stage.PUBLISHING: self._publish,
            Stage.REGISTERING: self._register,
            Stage.DEPLOYING: self._deploy,
        }
        result = run_stages(
            initial=PipelineState(stage=Stage.RESOLVING),
            handlers=handlers,
            entry=entry,
            until=until,
        )
        if isinstance(result, Err):
            return result

        state = result.value
        if state.version is None or state.image is None:
            return Err(StageFailure(stage=Stage.RESOLVING, error=_missing("version")))
        return Ok(
            ReleaseReport(
                version=state.version,
                image=state.image,
                revision=state.revision,
                outcome=state.outcome,
                stages=state.completed,
            )
        )

    def _resolve(self, state: PipelineState) -> Result[PipelineState, DeployError]:
        deps = check_dependencies(
            config=self._config,
            console=self._console,
            require_checkout=self._config.tag_override is None,
        )
        if isinstance(deps, Err):
            return deps

        version = VersionResolver(config=self._config, console=self._console).resolve()
        if isinstance(version, Err):
            return version
        self._console.info(f"release version: {version.value}")

        image = ImageReferenceResolver(config=self._config, console=self._console).resolve(
            version.value
        )
        if isinstance(image, Err):
            return image
        return Ok(replace(state, version=version.value, image=image.value))

    def _build(self, state: PipelineState) -> Result[PipelineState, DeployError]:
        if state.image is None:
            return Err(_missing("image"))
        built = ImageBuilder(config=self._config, console=self._console).build(state.image)
        if isinstance(built, Err):
            return built
        return Ok(replace(state, image=built.value))

    def _publish(self, state: PipelineState) -> Result[PipelineState, DeployError]:
        if state.image is None:
            return Err(_missing("image"))
        pushed = RegistryPublisher(config=self._config, console=self._console).publish(
            state.image
        )
        if isinstance(pushed, Err):
            return pushed
        return Ok(state)

    def _register(self, state: PipelineState) -> Result[PipelineState, DeployError]:
        if state.image is None:
            return Err(_missing("image"))
        revision = TaskSpecFactory(config=self._config, console=self._console).register(
            state.image
        )
        if isinstance(revision, Err):
            return revision
        return Ok(replace(state, revision=revision.value))

    def _deploy(self, state: PipelineState) -> Result[PipelineState, DeployError]:
        if state.revision is None:
            return Err(_missing("task definition revision"))
        outcome = ServiceUpdater(config=self._config, console=self._console).update(
            state.revision
        )
        if isinstance(outcome, Err):
            return outcome
        return Ok(replace(state, outcome=outcome.value))
