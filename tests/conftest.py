"""Pytest configuration and fixtures for mixrunner tests."""

import os
import stat
from pathlib import Path

import pytest

from mixrunner.config import Settings

SAMPLE_HELP_OUTPUT = """mix                   # Runs the default task (current: "mix run")
mix app.start         # Starts all registered apps
mix compile           # Compiles source files
mix deps.get          # Gets all out of date dependencies
mix help              # Prints help information for tasks
mix test              # Runs a project's tests
iex -S mix            # Starts IEx and runs the default task
"""


def _make_executable(path: Path, body: str) -> Path:
    path.write_text("#!/bin/sh\n" + body)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def tmp_workspace(tmp_path: Path) -> Path:
    """Create a temporary workspace directory for tests."""
    workspace = tmp_path / "workspace"
    workspace.mkdir()
    return workspace


@pytest.fixture
def mix_project(tmp_workspace: Path) -> Path:
    """A single mix project with a lib/ subdirectory."""
    project = tmp_workspace / "my_app"
    (project / "lib" / "my_app").mkdir(parents=True)
    (project / "mix.exs").write_text("defmodule MyApp.MixProject do\nend\n")
    (project / "lib" / "my_app.ex").write_text("defmodule MyApp do\nend\n")
    return project


@pytest.fixture
def umbrella_project(tmp_workspace: Path) -> Path:
    """An umbrella project with one child app under apps/."""
    umbrella = tmp_workspace / "umbrella"
    child = umbrella / "apps" / "web"
    (child / "lib" / "web").mkdir(parents=True)
    (umbrella / "mix.exs").write_text("defmodule Umbrella.MixProject do\nend\n")
    (child / "mix.exs").write_text("defmodule Web.MixProject do\nend\n")
    return umbrella


@pytest.fixture
def fake_mix(tmp_path: Path) -> Path:
    """A fake mix executable that echoes help output or its arguments."""
    help_file = tmp_path / "help.txt"
    help_file.write_text(SAMPLE_HELP_OUTPUT)
    return _make_executable(
        tmp_path / "fake-mix",
        f"""if [ "$1" = "help" ]; then
  cat "{help_file}"
  exit 0
fi
if [ "$1" = "fail" ]; then
  echo "** (Mix) The task \\"fail\\" could not be found" >&2
  exit 1
fi
echo "cwd=$(pwd)"
echo "env=$MIX_ENV"
echo "args=$*"
""",
    )


@pytest.fixture
def failing_mix(tmp_path: Path) -> Path:
    """A fake mix executable that always fails with a message on stderr."""
    return _make_executable(
        tmp_path / "failing-mix",
        'echo "** (Mix) Could not find a Mix.Project" >&2\nexit 1\n',
    )


@pytest.fixture
def fake_settings(fake_mix: Path) -> Settings:
    """Settings pointing at the fake mix executable."""
    return Settings(mix_executable=str(fake_mix))


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep MIXRUNNER_* variables from the outer environment out of tests."""
    for name in list(os.environ):
        if name.startswith("MIXRUNNER_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def sample_help_output() -> str:
    """Realistic `mix help` output."""
    return SAMPLE_HELP_OUTPUT
