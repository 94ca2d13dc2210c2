"""Task runner: run mix tasks in a project root and collect source locations."""

from __future__ import annotations

import logging
import os
import re
import subprocess
import threading
from pathlib import Path
from typing import Callable, Sequence

from mixrunner.config import Settings
from mixrunner.errors import ToolInvocationError
from mixrunner.schemas import SourceLocation, TaskRunResult

logger = logging.getLogger(__name__)

COMPILE_TASK = "compile"

SOURCE_EXTENSIONS = ("exs", "eex", "leex", "heex", "ex")

# path/to/file.ex:12 or path/to/file.ex:12:5
SOURCE_LOCATION_PATTERN = re.compile(
    r"(?P<file>[^\s:()\[\]\"'`]+\.(?:" + "|".join(SOURCE_EXTENSIONS) + r")):(?P<line>\d+)(?::(?P<column>\d+))?"
)

_TASK_NAME = re.compile(r"^[A-Za-z0-9_.\-]+$")

OutputSink = Callable[[str], None]


def parse_source_locations(text: str) -> list[SourceLocation]:
    """Find file:line[:column] references to Elixir sources in output text.

    Args:
        text: Compiler or task output

    Returns:
        Locations in order of first appearance, without duplicates
    """
    seen: set[tuple[str, int, int | None]] = set()
    locations = []
    for match in SOURCE_LOCATION_PATTERN.finditer(text):
        line = int(match.group("line"))
        column = int(match.group("column")) if match.group("column") else None
        if line < 1 or column == 0:
            continue
        key = (match.group("file"), line, column)
        if key in seen:
            continue
        seen.add(key)
        locations.append(SourceLocation(file=key[0], line=line, column=column))
    return locations


def build_task_command(task: str, args: Sequence[str] = (), settings: Settings | None = None) -> list[str]:
    """Build the argv for `mix <task> [args...]`.

    Raises:
        ValueError: If task is not a valid mix task name
    """
    settings = settings or Settings()
    if not _TASK_NAME.match(task):
        raise ValueError(f"Invalid task name: {task!r}")
    return [settings.mix_executable, task, *args]


def _child_env(settings: Settings) -> dict[str, str] | None:
    """Environment for the child process, or None to inherit unchanged."""
    if not settings.mix_env:
        return None
    env = dict(os.environ)
    env["MIX_ENV"] = settings.mix_env
    return env


def run_task(
    task: str,
    project_root: Path | str,
    args: Sequence[str] = (),
    settings: Settings | None = None,
    on_output: OutputSink | None = None,
) -> TaskRunResult:
    """Run a mix task, streaming combined stdout/stderr line by line.

    Blocks until the task exits. A non-zero exit is reported in the result,
    since the output itself is what the caller wants to show.

    Args:
        task: Task name, e.g. "compile" or "ecto.migrate"
        project_root: Directory containing mix.exs
        args: Extra arguments appended after the task name
        settings: Tool settings (defaults to Settings())
        on_output: Called with each output line as it arrives

    Returns:
        TaskRunResult with exit code, full output, and source locations

    Raises:
        ToolInvocationError: If mix cannot be started or times out
    """
    settings = settings or Settings()
    command = build_task_command(task, args, settings)
    work_dir = str(project_root)

    env_note = f", MIX_ENV={settings.mix_env}" if settings.mix_env else ""
    logger.info(f"Executing command: {' '.join(command)} (cwd: {work_dir}{env_note})")

    try:
        process = subprocess.Popen(
            command,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            bufsize=1,
            cwd=work_dir,
            env=_child_env(settings),
        )
    except OSError as e:
        logger.error(f"Command execution failed: {e}")
        raise ToolInvocationError(command, str(e)) from e

    timed_out = threading.Event()
    timer = None
    if settings.timeout_seconds is not None:
        def _kill() -> None:
            timed_out.set()
            process.kill()

        timer = threading.Timer(settings.timeout_seconds, _kill)
        timer.start()

    lines = []
    try:
        for line in process.stdout:
            lines.append(line)
            if on_output is not None:
                on_output(line.rstrip("\n"))
        exit_code = process.wait()
    except BaseException:
        if process.poll() is None:
            logger.warning(f"Killing {' '.join(command)} after output handling failed")
            process.kill()
            process.wait()
        raise
    finally:
        if timer is not None:
            timer.cancel()
        process.stdout.close()

    if timed_out.is_set():
        logger.warning(f"Command timed out after {settings.timeout_seconds}s: {' '.join(command)}")
        raise ToolInvocationError(
            command,
            f"Command timed out after {settings.timeout_seconds} seconds",
            exit_code=exit_code,
        )

    output = "".join(lines)
    if exit_code != 0:
        logger.warning(f"Command exited with status {exit_code}: {' '.join(command)}")

    return TaskRunResult(
        command_executed=command,
        work_dir=work_dir,
        exit_code=exit_code,
        output=output,
        locations=parse_source_locations(output),
    )


def compile_project(
    project_root: Path | str,
    settings: Settings | None = None,
    on_output: OutputSink | None = None,
) -> TaskRunResult:
    """Run `mix compile` in project_root."""
    return run_task(COMPILE_TASK, project_root, settings=settings, on_output=on_output)
