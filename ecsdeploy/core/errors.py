"""Error codes for CLI exit status.

Every fatal deploy failure maps to one of these codes. The numeric values
are part of the CLI contract and should remain stable:
- 0: Success (including a service that did not confirm stabilization)
- 1: User error (bad arguments, unknown rollback version)
- 2: Environment error (missing tools, no git checkout, AWS credentials)
- 3: Build error (docker build failed)
- 4: Network error (push, task definition or service update failed)
- 6: Service update accepted but stabilization unconfirmed (--strict-wait)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands."""

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    BUILD_ERROR = 3
    NETWORK_ERROR = 4
    UNSTABLE = 6
