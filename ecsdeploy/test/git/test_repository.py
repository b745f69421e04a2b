from __future__ import annotations

from pathlib import Path

import pytest

from ecsdeploy.core.result import Err, Ok
from ecsdeploy.git import repository as repository_mod
from ecsdeploy.git.repository import Repository
from ecsdeploy.platform.fake_process import FakeProcess


@pytest.fixture
def git(monkeypatch: pytest.MonkeyPatch) -> FakeProcess:
    fake = FakeProcess()
    monkeypatch.setattr(repository_mod, "run_process", fake)
    return fake


def test_is_checkout_true(tmp_path: Path, git: FakeProcess) -> None:
    git.on("git", "rev-parse", "--git-dir", result=Ok(".git\n"))

    assert Repository(tmp_path).is_checkout() is True
    assert git.calls == [["git", "-C", str(tmp_path), "rev-parse", "--git-dir"]]


def test_is_checkout_false(tmp_path: Path, git: FakeProcess) -> None:
    git.fail("git", "rev-parse", stderr="fatal: not a git repository", returncode=128)

    assert Repository(tmp_path).is_checkout() is False


def test_head_sha_short_is_truncated(tmp_path: Path, git: FakeProcess) -> None:
    # git may extend an ambiguous abbreviation
    git.on("git", "rev-parse", "--short=7", "HEAD", result=Ok("abc123f9\n"))

    assert Repository(tmp_path).head_sha(short=7) == Ok("abc123f")


def test_head_sha_full(tmp_path: Path, git: FakeProcess) -> None:
    sha = "abc123f" + "0" * 33
    git.on("git", "rev-parse", "HEAD", result=Ok(f"{sha}\n"))

    assert Repository(tmp_path).head_sha() == Ok(sha)


def test_head_sha_without_commits(tmp_path: Path, git: FakeProcess) -> None:
    git.fail("git", "rev-parse", stderr="fatal: ambiguous argument 'HEAD'", returncode=128)

    result = Repository(tmp_path).head_sha(short=7)
    assert isinstance(result, Err)
    assert result.error.returncode == 128
    assert "ambiguous" in result.error.message


def test_head_sha_empty_output(tmp_path: Path, git: FakeProcess) -> None:
    git.on("git", "rev-parse", result=Ok("\n"))

    result = Repository(tmp_path).head_sha(short=7)
    assert isinstance(result, Err)
    assert result.error.message == "empty revision"
