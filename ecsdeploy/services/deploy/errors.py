from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

DeployErrorKind = Literal[
    "usage_error",
    "dependency_missing",
    "not_a_versioned_checkout",
    "build_failed",
    "auth_failed",
    "push_failed",
    "spec_not_found",
    "registration_failed",
    "update_rejected",
    "version_not_found",
    "registry_unavailable",
]


@dataclass(frozen=True, slots=True)
class DeployError:
    """A fatal deploy failure.

    ``available`` is only filled for ``version_not_found`` and lists the most
    recent tags present in the registry.
    """

    kind: DeployErrorKind
    message: str
    hint: str | None = None
    available: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class StabilizationTimeout:
    """The service update was accepted but stability was not confirmed."""

    service: str
    revision: str
    detail: str = ""

    @property
    def message(self) -> str:
        return f"timed out waiting for service '{self.service}' to stabilize on {self.revision}"
