"""Git operations used to derive release versions.

Usage:
    from ecsdeploy.git import Repository

    repo = Repository(Path.cwd())
    match repo.head_sha(short=7):
        case Ok(sha):
            print(sha)
        case Err(e):
            print(e.message)
"""

from ecsdeploy.git.repository import GitError, Repository

__all__ = ["GitError", "Repository"]
