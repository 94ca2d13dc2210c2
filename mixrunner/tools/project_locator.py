"""Project locator: find the mix project root above a directory."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

from mixrunner.errors import NoProjectRootFoundError

logger = logging.getLogger(__name__)

MARKER_FILE = "mix.exs"


def normalize_start(start_dir: Path | str) -> Path:
    """Resolve the start path; a file path means its containing directory."""
    start = Path(start_dir).expanduser().resolve()
    if start.is_file():
        return start.parent
    return start


def _has_marker(directory: Path) -> bool:
    return (directory / MARKER_FILE).is_file()


def _marker_dirs(start: Path) -> Iterator[Path]:
    """Yield directories containing the marker, nearest first.

    start is already resolved, so its parents are a finite chain ending at
    the filesystem root.
    """
    for directory in (start, *start.parents):
        if _has_marker(directory):
            logger.debug(f"Found {MARKER_FILE} in {directory}")
            yield directory


def find_project_root(start_dir: Path | str, prefer_umbrella: bool = True) -> Path | None:
    """Find the mix project root for a directory.

    With prefer_umbrella, the search keeps climbing after the nearest match
    and returns the highest ancestor containing mix.exs, skipping over any
    directories in between that have none.

    Args:
        start_dir: Directory (or file) to start from
        prefer_umbrella: Return the outermost root instead of the nearest

    Returns:
        Absolute path of the root, or None if no mix.exs exists up to the
        filesystem root
    """
    start = normalize_start(start_dir)
    found: Path | None = None

    for directory in _marker_dirs(start):
        found = directory
        if not prefer_umbrella:
            break

    if found is None:
        logger.debug(f"No {MARKER_FILE} found above {start}")
    return found


def require_project_root(start_dir: Path | str, prefer_umbrella: bool = True) -> Path:
    """Like find_project_root, but raise when no root exists.

    Raises:
        NoProjectRootFoundError: If no mix.exs is found
    """
    root = find_project_root(start_dir, prefer_umbrella=prefer_umbrella)
    if root is None:
        raise NoProjectRootFoundError(normalize_start(start_dir))
    return root
