"""Ok/Err values returned by every deploy step.

git, docker and aws calls fail routinely (no checkout, bad credentials, a
rejected task definition). Each step hands back ``Ok(value)`` or
``Err(error)`` so the failure kind survives up to the CLI, which turns it
into an exit code.

Usage:
    match VersionResolver(config=config, console=console).resolve():
        case Ok(version):
            console.info(f"release version: {version}")
        case Err(error):
            console.error(error.message)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar, Union

__all__ = ["Err", "Ok", "Result"]

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    error: E

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result: TypeAlias = Union[Ok[T], Err[E]]
