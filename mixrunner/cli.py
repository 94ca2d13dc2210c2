"""CLI for mixrunner - mix project roots, tasks, compiles and shells."""

from __future__ import annotations

import logging
import sys

import click

from mixrunner import __version__
from mixrunner.config import Settings
from mixrunner.errors import NoProjectRootFoundError, ToolInvocationError

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _dir_option(f):
    return click.option(
        "--dir", "-d",
        "directory",
        default=".",
        type=click.Path(exists=True, file_okay=True, dir_okay=True, resolve_path=True),
        help="Directory or file to start from (defaults to current directory)",
    )(f)


def _umbrella_option(f):
    return click.option(
        "--umbrella/--nearest",
        "prefer_umbrella",
        default=None,
        help="Use the outermost umbrella root or the nearest project root",
    )(f)


def _env_option(f):
    return click.option(
        "--env", "-e",
        "mix_env",
        default=None,
        help="MIX_ENV for the task (e.g. dev, test, prod)",
    )(f)


def _settings(ctx: click.Context, **overrides) -> Settings:
    """Settings from the environment with CLI overrides applied."""
    settings: Settings = ctx.obj or Settings()
    changes = {key: value for key, value in overrides.items() if value is not None}
    return settings.replace(**changes) if changes else settings


def _require_root(directory: str, settings: Settings):
    from mixrunner.tools.project_locator import require_project_root

    try:
        return require_project_root(directory, prefer_umbrella=settings.prefer_umbrella)
    except NoProjectRootFoundError as e:
        raise click.ClickException(str(e))


@click.group()
@click.version_option(version=__version__, prog_name="mixrunner")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """mixrunner - Run Elixir mix tasks from your editor.

    Finds the mix project (or umbrella) root for a directory, lists the
    tasks mix knows about, and runs compiles, tasks and iex shells there.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )
    try:
        ctx.obj = Settings.from_env()
    except ValueError as e:
        raise click.UsageError(str(e))


@main.command()
@_dir_option
@_umbrella_option
@click.pass_context
def root(ctx: click.Context, directory: str, prefer_umbrella: bool | None) -> None:
    """Print the mix project root.

    \b
    Example:
        mixrunner root
        mixrunner root --nearest --dir apps/web/lib
    """
    settings = _settings(ctx, prefer_umbrella=prefer_umbrella)
    click.echo(str(_require_root(directory, settings)))


@main.command()
@_dir_option
@_umbrella_option
@click.option(
    "--raw",
    is_flag=True,
    help="Output raw JSON instead of formatted text",
)
@click.pass_context
def tasks(ctx: click.Context, directory: str, prefer_umbrella: bool | None, raw: bool) -> None:
    """List the tasks available in the mix project.

    \b
    Example:
        mixrunner tasks
        mixrunner tasks --raw
    """
    from mixrunner.tools.task_lister import list_task_entries

    settings = _settings(ctx, prefer_umbrella=prefer_umbrella)
    project_root = _require_root(directory, settings)

    try:
        entries = list_task_entries(project_root, settings)
    except ToolInvocationError as e:
        raise click.ClickException(str(e))

    if raw:
        import json
        click.echo(json.dumps([entry.model_dump() for entry in entries], indent=2))
        return

    if not entries:
        click.echo("No tasks found.")
        return

    width = max(len(entry.name) for entry in entries)
    for entry in entries:
        if entry.description:
            click.echo(f"{entry.name.ljust(width)}  # {entry.description}")
        else:
            click.echo(entry.name)


def _run_and_report(ctx: click.Context, task: str, args: tuple[str, ...], directory: str,
                    prefer_umbrella: bool | None, mix_env: str | None) -> None:
    from mixrunner.tools.task_runner import run_task

    settings = _settings(ctx, prefer_umbrella=prefer_umbrella, mix_env=mix_env)
    project_root = _require_root(directory, settings)

    try:
        result = run_task(task, project_root, args=args, settings=settings, on_output=click.echo)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="TASK")
    except ToolInvocationError as e:
        raise click.ClickException(str(e))

    if result.locations:
        click.echo(f"\n{'─' * 60}", err=True)
        click.echo("Source locations:", err=True)
        for location in result.locations:
            suffix = f":{location.column}" if location.column else ""
            click.echo(f"  {location.file}:{location.line}{suffix}", err=True)

    ctx.exit(result.exit_code)


@main.command(context_settings={"ignore_unknown_options": True})
@click.argument("task")
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@_dir_option
@_umbrella_option
@_env_option
@click.pass_context
def run(ctx: click.Context, task: str, args: tuple[str, ...], directory: str,
        prefer_umbrella: bool | None, mix_env: str | None) -> None:
    """Run a mix task in the project root.

    \b
    Example:
        mixrunner run test
        mixrunner run test test/my_test.exs:12 --env test
        mixrunner run ecto.migrate
    """
    _run_and_report(ctx, task, args, directory, prefer_umbrella, mix_env)


@main.command(name="compile")
@_dir_option
@_umbrella_option
@_env_option
@click.pass_context
def compile_cmd(ctx: click.Context, directory: str, prefer_umbrella: bool | None, mix_env: str | None) -> None:
    """Compile the mix project."""
    _run_and_report(ctx, "compile", (), directory, prefer_umbrella, mix_env)


@main.command()
@_dir_option
@_umbrella_option
@click.pass_context
def shell(ctx: click.Context, directory: str, prefer_umbrella: bool | None) -> None:
    """Start an interactive shell (iex -S mix) in the project root.

    Outside a mix project the shell starts in the given directory.
    """
    from mixrunner.tools.shell_launcher import launch_shell

    settings = _settings(ctx, prefer_umbrella=prefer_umbrella)
    try:
        status = launch_shell(directory, settings)
    except ToolInvocationError as e:
        raise click.ClickException(str(e))
    ctx.exit(status)


@main.command()
def mcp() -> None:
    """Run the MCP server for editor and assistant integration.

    \b
    Configure in .mcp.json:
        {
            "mcpServers": {
                "mixrunner": {
                    "command": "mixrunner",
                    "args": ["mcp"]
                }
            }
        }
    """
    from mcp_mixrunner.server import mcp as mcp_server
    mcp_server.run()


if __name__ == "__main__":
    main()
