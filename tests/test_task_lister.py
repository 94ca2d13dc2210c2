"""Tests for task_lister."""

import subprocess
import pytest
from unittest.mock import patch, MagicMock

from mixrunner.config import Settings
from mixrunner.errors import ToolInvocationError
from mixrunner.schemas import TaskEntry
from mixrunner.tools.task_lister import (
    list_task_entries,
    list_tasks,
    parse_help_output,
    parse_task_entry,
    strip_comment,
)


class TestParseHelpOutput:
    """Test parsing of `mix help` text."""

    def test_keeps_tasks_in_order(self):
        """Task lines are kept in order; default task and other lines dropped."""
        text = "\n".join([
            "mix compile # Compiles",
            "mix help # Print help",
            "mix   # Runs the default task",
            "iex -S mix",
        ])
        assert parse_help_output(text) == ["compile # Compiles", "help # Print help"]

    def test_strips_exactly_one_separator(self):
        """Only the prefix word and one blank are removed."""
        assert parse_help_output("mix  deps.get   # Gets deps") == [" deps.get   # Gets deps"]

    def test_keeps_duplicates(self):
        """Duplicate names from mix are not collapsed."""
        text = "mix test # Runs tests\nmix test # Runs tests\n"
        assert parse_help_output(text) == ["test # Runs tests", "test # Runs tests"]

    def test_requires_whitespace_after_prefix(self):
        """Words merely starting with 'mix' are not task lines."""
        assert parse_help_output("mixed results\nmix\n") == []

    def test_skips_blank_descriptors(self):
        """A bare prefix with nothing after it is not a task."""
        assert parse_help_output("mix \nmix\r\nmix    \nmix  # orphan comment\nmix compile # Compiles") == [
            "compile # Compiles"
        ]

    def test_tab_separator(self):
        """A tab counts as the separator."""
        assert parse_help_output("mix\tcompile # Compiles") == ["compile # Compiles"]

    def test_empty_output(self):
        """Empty output yields an empty list."""
        assert parse_help_output("") == []

    def test_crlf_line_endings(self):
        """Carriage returns are not part of the descriptor."""
        assert parse_help_output("mix compile # Compiles\r\nmix test\r\n") == [
            "compile # Compiles",
            "test",
        ]

    def test_sample_help(self, sample_help_output):
        """Realistic mix help output parses to its tasks."""
        names = [strip_comment(d) for d in parse_help_output(sample_help_output)]
        assert names == ["app.start", "compile", "deps.get", "help", "test"]


class TestStripComment:
    """Test comment stripping."""

    def test_removes_comment(self):
        assert strip_comment("compile # Compiles") == "compile"

    def test_no_comment(self):
        assert strip_comment("compile") == "compile"

    def test_trims_whitespace(self):
        assert strip_comment("  deps.get      # Gets all deps  ") == "deps.get"

    def test_splits_on_first_hash(self):
        assert strip_comment("phx.new # Creates # a project") == "phx.new"


class TestParseTaskEntry:
    """Test descriptor to TaskEntry conversion."""

    def test_name_and_description(self):
        entry = parse_task_entry("compile           # Compiles source files")
        assert entry == TaskEntry(name="compile", description="Compiles source files")

    def test_without_description(self):
        entry = parse_task_entry("compile")
        assert entry.name == "compile"
        assert entry.description == ""


class TestListTasks:
    """Test listing tasks through an external mix."""

    def test_lists_tasks_from_fake_mix(self, mix_project, fake_settings):
        """Tasks come from running mix help in the project root."""
        tasks = list_tasks(mix_project, fake_settings)
        assert [strip_comment(t) for t in tasks] == ["app.start", "compile", "deps.get", "help", "test"]

    def test_idempotent(self, mix_project, fake_settings):
        """Repeated calls give identical results."""
        assert list_tasks(mix_project, fake_settings) == list_tasks(mix_project, fake_settings)

    def test_entries(self, mix_project, fake_settings):
        """list_task_entries returns TaskEntry models."""
        entries = list_task_entries(mix_project, fake_settings)
        assert entries[1] == TaskEntry(name="compile", description="Compiles source files")

    @patch("mixrunner.tools.task_lister.subprocess.run")
    def test_runs_help_in_project_root(self, mock_run, mix_project):
        """mix help runs with cwd set to the project root."""
        mock_run.return_value = MagicMock(returncode=0, stdout="mix compile # Compiles\n", stderr="")

        assert list_tasks(mix_project) == ["compile # Compiles"]
        args, kwargs = mock_run.call_args
        assert args[0] == ["mix", "help"]
        assert kwargs["cwd"] == str(mix_project)
        assert kwargs["timeout"] is None

    def test_missing_executable_raises(self, mix_project, tmp_path):
        """A missing mix executable raises ToolInvocationError."""
        settings = Settings(mix_executable=str(tmp_path / "no-such-mix"))
        with pytest.raises(ToolInvocationError) as exc_info:
            list_tasks(mix_project, settings)
        assert exc_info.value.exit_code is None
        assert str(exc_info.value) != ""

    def test_nonzero_exit_raises_with_stderr(self, mix_project, failing_mix):
        """Non-zero exit surfaces stderr verbatim."""
        settings = Settings(mix_executable=str(failing_mix))
        with pytest.raises(ToolInvocationError) as exc_info:
            list_tasks(mix_project, settings)
        assert exc_info.value.exit_code == 1
        assert str(exc_info.value) == "** (Mix) Could not find a Mix.Project"

    @patch("mixrunner.tools.task_lister.subprocess.run")
    def test_timeout_raises(self, mock_run, mix_project):
        """A configured timeout surfaces as ToolInvocationError."""
        mock_run.side_effect = subprocess.TimeoutExpired(cmd=["mix", "help"], timeout=2)
        with pytest.raises(ToolInvocationError, match="timed out"):
            list_tasks(mix_project, Settings(timeout_seconds=2))

    @patch("mixrunner.tools.task_lister.subprocess.run")
    def test_empty_listing_is_not_an_error(self, mock_run, mix_project):
        """No task lines gives an empty list."""
        mock_run.return_value = MagicMock(returncode=0, stdout="Nothing here\n", stderr="")
        assert list_tasks(mix_project) == []
