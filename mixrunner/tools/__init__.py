"""Tools wrapping the mix command line."""

from mixrunner.tools.project_locator import find_project_root, require_project_root
from mixrunner.tools.task_lister import list_task_entries, list_tasks, strip_comment
from mixrunner.tools.task_runner import compile_project, run_task
from mixrunner.tools.shell_launcher import launch_shell

__all__ = [
    "find_project_root",
    "require_project_root",
    "list_tasks",
    "list_task_entries",
    "strip_comment",
    "run_task",
    "compile_project",
    "launch_shell",
]
