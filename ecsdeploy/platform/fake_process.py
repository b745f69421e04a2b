"""In-memory replacement for ``process.run`` used by tests.

Responses are registered per command prefix; the longest matching prefix
wins. Every call is recorded so tests can assert what would have run.

Usage:
    fake = FakeProcess()
    fake.on("git", "rev-parse", result=Ok("abc123f\\n"))
    monkeypatch.setattr(repository_mod, "run_process", fake)
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from ecsdeploy.core.result import Err, Result
from ecsdeploy.platform.process import ProcessError

__all__ = ["FakeProcess", "Response"]

Response = Result[str, ProcessError] | Callable[[list[str]], Result[str, ProcessError]]


def _normalize(cmd: list[str]) -> tuple[str, ...]:
    # `git -C <path> ...` matches as `git ...`
    if len(cmd) >= 3 and cmd[0] == "git" and cmd[1] == "-C":
        return ("git", *cmd[3:])
    return tuple(cmd)


def _empty_responses() -> dict[tuple[str, ...], Response]:
    return {}


def _empty_calls() -> list[list[str]]:
    return []


def _empty_inputs() -> list[str | None]:
    return []


@dataclass
class FakeProcess:
    responses: dict[tuple[str, ...], Response] = field(default_factory=_empty_responses)
    calls: list[list[str]] = field(default_factory=_empty_calls)
    inputs: list[str | None] = field(default_factory=_empty_inputs)

    def on(self, *prefix: str, result: Response) -> None:
        self.responses[tuple(prefix)] = result

    def fail(self, *prefix: str, stderr: str, returncode: int = 1) -> None:
        """Make commands starting with ``prefix`` fail with ``stderr``."""

        def _fail(cmd: list[str]) -> Result[str, ProcessError]:
            return Err(
                ProcessError(command=tuple(cmd), returncode=returncode, stdout="", stderr=stderr)
            )

        self.on(*prefix, result=_fail)

    def __call__(
        self,
        cmd: list[str],
        cwd: Path,
        env: dict[str, str] | None = None,
        *,
        timeout: float | None = None,
        input_text: str | None = None,
    ) -> Result[str, ProcessError]:
        del cwd, env, timeout
        self.calls.append(list(cmd))
        self.inputs.append(input_text)

        normalized = _normalize(cmd)
        matches = [p for p in self.responses if normalized[: len(p)] == p]
        if not matches:
            raise AssertionError(f"unexpected command: {cmd}")
        response = self.responses[max(matches, key=len)]
        return response(list(cmd)) if callable(response) else response

    def ran(self, *prefix: str) -> bool:
        return bool(self.commands(*prefix))

    def commands(self, *prefix: str) -> list[list[str]]:
        return [c for c in self.calls if _normalize(c)[: len(prefix)] == prefix]

    def commands_matching(self, prefixes: tuple[tuple[str, ...], ...]) -> list[list[str]]:
        return [c for c in self.calls if any(_normalize(c)[: len(p)] == p for p in prefixes)]
