"""Git repository abstraction.

Only the read-only operations a release needs: detecting a checkout and
reading the current revision. All operations return Result types.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ecsdeploy.core.result import Err, Ok, Result
from ecsdeploy.platform.process import ProcessError
from ecsdeploy.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0

__all__ = ["GitError", "Repository"]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


class Repository:
    """A git checkout rooted at (or containing) ``path``."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def is_checkout(self) -> bool:
        """True when ``path`` is inside a git work tree.

        Asks git rather than looking for ``.git`` so that subdirectories and
        worktrees are recognized.
        """
        result = self._run(["rev-parse", "--git-dir"])
        return isinstance(result, Ok)

    def head_sha(self, *, short: int | None = None) -> Result[str, GitError]:
        """Return the HEAD revision, optionally abbreviated to ``short`` chars.

        ``git rev-parse --short=N`` may return more than N characters when the
        prefix is ambiguous; the value is truncated so callers always get
        exactly N.
        """
        args = ["rev-parse", "HEAD"] if short is None else ["rev-parse", f"--short={short}", "HEAD"]
        result = self._run(args)
        match result:
            case Err(e):
                return Err(
                    GitError(
                        command="rev-parse",
                        message=e.stderr.strip() or "git rev-parse failed",
                        returncode=e.returncode,
                    )
                )
            case Ok(stdout):
                sha = stdout.strip()
                if not sha:
                    return Err(GitError(command="rev-parse", message="empty revision"))
                return Ok(sha if short is None else sha[:short])

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        return run_process(
            ["git", "-C", str(self.path), *args], cwd=self.path, timeout=_GIT_TIMEOUT_SECONDS
        )
