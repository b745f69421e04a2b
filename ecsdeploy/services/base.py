from __future__ import annotations

from ecsdeploy.core.config import RunConfiguration
from ecsdeploy.output.console import ConsoleProtocol


class BaseService:
    """Shared constructor for deploy stages.

    Every stage receives the same frozen run configuration and console.
    """

    def __init__(self, *, config: RunConfiguration, console: ConsoleProtocol) -> None:
        self._config = config
        self._console = console

    def _dry_run_note(self, message: str) -> None:
        self._console.debug(f"dry-run: {message}")
