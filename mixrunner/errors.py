"""Exceptions raised by mixrunner tools."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence


class NoProjectRootFoundError(Exception):
    """Raised when no directory containing mix.exs exists above a start path."""

    def __init__(self, start_dir: Path | str):
        self.start_dir = Path(start_dir)
        super().__init__(f"No mix project found at or above {self.start_dir}")


class ToolInvocationError(Exception):
    """Raised when an external command fails to start or exits unsuccessfully.

    The string form is the raw error text reported by the tool or the OS.
    """

    def __init__(
        self,
        command: Sequence[str],
        message: str,
        exit_code: int | None = None,
        stderr: str = "",
    ):
        self.command = list(command)
        self.exit_code = exit_code
        self.stderr = stderr
        super().__init__(message)
