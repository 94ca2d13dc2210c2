"""Shell launcher: open an interactive iex session in the project root."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from mixrunner.config import Settings
from mixrunner.errors import ToolInvocationError
from mixrunner.tools.project_locator import normalize_start, find_project_root

logger = logging.getLogger(__name__)


def resolve_shell_dir(start_dir: Path | str, settings: Settings | None = None) -> Path:
    """Directory to start the shell in.

    Falls back to the start directory itself when it is not inside a mix project.
    """
    settings = settings or Settings()
    root = find_project_root(start_dir, prefer_umbrella=settings.prefer_umbrella)
    if root is None:
        fallback = normalize_start(start_dir)
        logger.info(f"No mix project above {fallback}, starting shell there")
        return fallback
    return root


def launch_shell(start_dir: Path | str, settings: Settings | None = None) -> int:
    """Run the configured shell command interactively and wait for it to exit.

    Args:
        start_dir: Directory (or file) the user is working in
        settings: Tool settings (defaults to Settings())

    Returns:
        Exit status of the shell

    Raises:
        ToolInvocationError: If the shell command cannot be started
    """
    settings = settings or Settings()
    command = list(settings.shell_command)
    work_dir = resolve_shell_dir(start_dir, settings)

    logger.info(f"Launching shell: {' '.join(command)} (cwd: {work_dir})")
    try:
        return subprocess.call(command, cwd=str(work_dir))
    except OSError as e:
        logger.error(f"Shell launch failed: {e}")
        raise ToolInvocationError(command, str(e)) from e
