"""Task lister: parse `mix help` output into selectable task names."""

from __future__ import annotations

import logging
import re
import subprocess
from pathlib import Path

from mixrunner.config import Settings
from mixrunner.errors import ToolInvocationError
from mixrunner.schemas import TaskEntry

logger = logging.getLogger(__name__)

TASK_PREFIX = "mix"

# `mix help` lists the bare `mix` alias for the default task; it duplicates a real task
DEFAULT_TASK_MARKER = "Runs the default task"

COMMENT_CHAR = "#"

_TASK_LINE = re.compile(rf"^{TASK_PREFIX}\s")


def strip_comment(descriptor: str) -> str:
    """Return the task name from a descriptor like "compile # Compiles"."""
    return descriptor.split(COMMENT_CHAR, 1)[0].strip()


def parse_task_entry(descriptor: str) -> TaskEntry:
    """Split a descriptor into its task name and description."""
    name, _, comment = descriptor.partition(COMMENT_CHAR)
    return TaskEntry(name=name.strip(), description=comment.strip())


def parse_help_output(text: str) -> list[str]:
    """Extract task descriptors from `mix help` output.

    Keeps lines starting with the prefix word, drops the default-task alias,
    and strips the prefix plus one separator. Order and duplicates are kept
    exactly as mix printed them.

    Args:
        text: Captured stdout of `mix help`

    Returns:
        Descriptors such as ["compile # Compiles", "help # Print help"]
    """
    descriptors = []
    for line in text.split("\n"):
        if not _TASK_LINE.match(line):
            continue
        if DEFAULT_TASK_MARKER in line:
            continue
        descriptor = line[len(TASK_PREFIX) + 1:].rstrip("\r")
        if not strip_comment(descriptor):
            continue
        descriptors.append(descriptor)
    return descriptors


def _run_help(project_root: Path | str, settings: Settings) -> str:
    """Run `mix help` in project_root and return its stdout."""
    command = [settings.mix_executable, "help"]
    logger.info(f"Executing command: {' '.join(command)} (cwd: {project_root})")

    try:
        result = subprocess.run(
            command,
            capture_output=True,
            text=True,
            cwd=str(project_root),
            timeout=settings.timeout_seconds,
        )
    except subprocess.TimeoutExpired:
        logger.warning(f"Command timed out after {settings.timeout_seconds}s: {' '.join(command)}")
        raise ToolInvocationError(
            command, f"Command timed out after {settings.timeout_seconds} seconds"
        ) from None
    except OSError as e:
        logger.error(f"Command execution failed: {e}")
        raise ToolInvocationError(command, str(e)) from e

    if result.returncode != 0:
        message = result.stderr.strip() or result.stdout.strip() or (
            f"{' '.join(command)} exited with status {result.returncode}"
        )
        logger.error(f"Command failed with exit code {result.returncode}: {' '.join(command)}")
        raise ToolInvocationError(command, message, exit_code=result.returncode, stderr=result.stderr)

    return result.stdout


def list_tasks(project_root: Path | str, settings: Settings | None = None) -> list[str]:
    """List task descriptors available in a mix project.

    Args:
        project_root: Directory containing mix.exs
        settings: Tool settings (defaults to Settings())

    Returns:
        Ordered task descriptors; empty when mix lists none

    Raises:
        ToolInvocationError: If mix cannot be started or exits non-zero
    """
    settings = settings or Settings()
    descriptors = parse_help_output(_run_help(project_root, settings))
    logger.debug(f"Parsed {len(descriptors)} tasks from mix help in {project_root}")
    return descriptors


def list_task_entries(project_root: Path | str, settings: Settings | None = None) -> list[TaskEntry]:
    """List tasks as TaskEntry models."""
    return [parse_task_entry(d) for d in list_tasks(project_root, settings)]
