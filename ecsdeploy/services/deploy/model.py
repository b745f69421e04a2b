from __future__ import annotations

from dataclasses import dataclass

from ecsdeploy.services.deploy.errors import StabilizationTimeout


def registry_host(*, account_id: str, region: str) -> str:
    return f"{account_id}.dkr.ecr.{region}.amazonaws.com"


@dataclass(frozen=True, slots=True)
class ImageReference:
    """A registry-qualified image: ``{registry_host}/{repository}:{version}``."""

    registry_host: str
    repository: str
    version: str

    @property
    def local_tag(self) -> str:
        return f"{self.repository}:{self.version}"

    @property
    def uri(self) -> str:
        return f"{self.registry_host}/{self.repository}:{self.version}"

    def __str__(self) -> str:
        return self.uri


@dataclass(frozen=True, slots=True)
class TaskSpecRevision:
    """One registered task definition revision (``family:revision``)."""

    family: str
    revision: int
    placeholder: bool = False

    def __str__(self) -> str:
        return f"{self.family}:{self.revision}"


@dataclass(frozen=True, slots=True)
class ImageSummary:
    tag: str | None
    pushed_at: str | None


@dataclass(frozen=True, slots=True)
class DeployOutcome:
    """Result of pointing the service at a revision.

    ``warning`` is set when the platform did not confirm stabilization.
    """

    revision: TaskSpecRevision
    warning: StabilizationTimeout | None = None

    @property
    def stable(self) -> bool:
        return self.warning is None
