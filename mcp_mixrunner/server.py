"""MCP server exposing mixrunner tools to editors and assistants."""

from mcp.server.fastmcp import FastMCP

from mixrunner.config import Settings
from mixrunner.errors import NoProjectRootFoundError, ToolInvocationError
from mixrunner.schemas import ProjectInfo
from mixrunner.tools.project_locator import find_project_root as locate_root
from mixrunner.tools.project_locator import normalize_start, require_project_root
from mixrunner.tools.task_lister import list_task_entries
from mixrunner.tools.task_runner import run_task as do_run_task

mcp = FastMCP("mixrunner")


def _settings(prefer_umbrella: bool | None = None, mix_env: str | None = None) -> Settings:
    settings = Settings.from_env()
    if prefer_umbrella is not None:
        settings = settings.replace(prefer_umbrella=prefer_umbrella)
    if mix_env:
        settings = settings.replace(mix_env=mix_env)
    return settings


def _error(exc: Exception) -> dict:
    return {"error": type(exc).__name__, "detail": str(exc)}


@mcp.tool()
def find_project_root(start_dir: str, prefer_umbrella: bool | None = None) -> dict:
    """Find the mix project root for a directory or file.

    Args:
        start_dir: Directory or file to start from
        prefer_umbrella: Outermost umbrella root (default) or nearest root

    Returns:
        start_dir, root (null when not inside a mix project), prefer_umbrella
    """
    try:
        settings = _settings(prefer_umbrella)
    except ValueError as e:
        return _error(e)

    root = locate_root(start_dir, prefer_umbrella=settings.prefer_umbrella)
    return ProjectInfo(
        start_dir=str(normalize_start(start_dir)),
        root=str(root) if root else None,
        prefer_umbrella=settings.prefer_umbrella,
    ).model_dump()


@mcp.tool()
def list_tasks(start_dir: str, prefer_umbrella: bool | None = None) -> dict:
    """List the mix tasks available for the project containing start_dir."""
    try:
        settings = _settings(prefer_umbrella)
        project_root = require_project_root(start_dir, prefer_umbrella=settings.prefer_umbrella)
        entries = list_task_entries(project_root, settings)
    except (NoProjectRootFoundError, ToolInvocationError, ValueError) as e:
        return _error(e)

    return {
        "root": str(project_root),
        "tasks": [entry.model_dump() for entry in entries],
    }


@mcp.tool()
def run_task(
    task: str,
    start_dir: str,
    args: list[str] | None = None,
    mix_env: str | None = None,
) -> dict:
    """Run `mix <task> [args...]` in the project root.

    Returns the exit code, combined output, and file:line locations found in it.
    """
    try:
        settings = _settings(mix_env=mix_env)
        project_root = require_project_root(start_dir, prefer_umbrella=settings.prefer_umbrella)
        result = do_run_task(task, project_root, args=args or (), settings=settings)
    except (NoProjectRootFoundError, ToolInvocationError, ValueError) as e:
        return _error(e)
    return result.model_dump()


@mcp.tool()
def compile_project(start_dir: str, mix_env: str | None = None) -> dict:
    """Run `mix compile` in the project root."""
    return run_task("compile", start_dir, mix_env=mix_env)


if __name__ == "__main__":
    mcp.run()
