"""
Filesystem Scanner - bounded-depth file discovery and tolerant readers.

Every detector goes through these helpers so depth and ignore semantics are
identical everywhere, and so an unreadable file becomes "absent" instead of
an exception. Writers used by scaffolding raise ScaffoldWriteError instead
of a raw OSError.
"""

import json
import logging
import os
import re
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from .errors import ScaffoldWriteError

logger = logging.getLogger(__name__)

# Build caches, version control and package caches
IGNORED_DIRS: frozenset[str] = frozenset(
    {
        "node_modules",
        ".git",
        "dist",
        "build",
        ".next",
        ".expo",
        "__pycache__",
        ".venv",
    }
)


def find_files(
    root: Path | str,
    pattern: re.Pattern[str] | str,
    max_depth: int = 3,
    ignored_dirs: Iterable[str] = IGNORED_DIRS,
) -> list[Path]:
    """
    Find files below root whose name matches pattern.

    Files directly inside root are at depth 0. Directories are walked at any
    depth; max_depth only limits which files may match. Symlinked
    directories are not followed and unreadable subtrees are skipped.

    Args:
        root: Directory to search
        pattern: Regex searched against each file name
        max_depth: Deepest directory level whose files may match
        ignored_dirs: Directory names never entered

    Returns:
        Sorted list of absolute file paths
    """
    regex = re.compile(pattern) if isinstance(pattern, str) else pattern
    ignored = frozenset(ignored_dirs)
    root_path = Path(root).resolve()
    if not root_path.is_dir():
        return []

    results: list[Path] = []
    for current, dirnames, filenames in os.walk(root_path, onerror=_log_walk_error):
        dirnames[:] = sorted(name for name in dirnames if name not in ignored)
        depth = len(Path(current).relative_to(root_path).parts)
        if depth > max_depth:
            continue
        for filename in sorted(filenames):
            if filename in ignored:
                continue
            if regex.search(filename):
                results.append(Path(current) / filename)

    return results


def _log_walk_error(error: OSError) -> None:
    logger.debug(f"Skipping unreadable path during scan: {error}")


def safe_list_dir(directory: Path) -> list[str]:
    """List directory entries, returning [] when the directory is unreadable."""
    try:
        return sorted(entry.name for entry in directory.iterdir())
    except OSError:
        return []


def read_text_or_none(path: Path) -> str | None:
    """Read a UTF-8 text file, or None if it is missing or unreadable."""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        if path.exists():
            logger.debug(f"Could not read {path}: {e}")
        return None


def read_json_or_none(path: Path) -> Any:
    """Parse a JSON file, or None if it is missing, unreadable or malformed."""
    content = read_text_or_none(path)
    if content is None:
        return None
    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        logger.debug(f"Malformed JSON in {path}: {e}")
        return None


def read_json_object(path: Path) -> dict[str, Any] | None:
    """Parse a JSON file whose top level must be an object."""
    data = read_json_or_none(path)
    return data if isinstance(data, dict) else None


def count_lines(content: str) -> int:
    """Count newline-separated lines; a trailing newline does not start a new line."""
    if not content:
        return 0
    lines = content.split("\n")
    if lines[-1] == "":
        lines.pop()
    return len(lines)


def text_matches(path: Path, pattern: re.Pattern[str]) -> bool:
    """True when the file is readable and its content matches pattern."""
    content = read_text_or_none(path)
    return content is not None and pattern.search(content) is not None


def make_directory(path: Path) -> None:
    """Create path and its parents, raising ScaffoldWriteError on failure."""
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ScaffoldWriteError(
            f"Cannot create directory {path}: {e.strerror or e}", path=str(path)
        ) from e


def write_text_file(path: Path, content: str) -> None:
    """Write UTF-8 text, creating parent directories as needed."""
    make_directory(path.parent)
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise ScaffoldWriteError(f"Cannot write {path}: {e.strerror or e}", path=str(path)) from e
