"""
Signal Detectors - independent read-only checks over a target directory.

Each detector is total: an unreadable or malformed file is treated as if
the signal were absent.
"""

import logging
import re
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from .filesystem import (
    IGNORED_DIRS,
    find_files,
    read_json_object,
    read_text_or_none,
    safe_list_dir,
)

logger = logging.getLogger(__name__)

MANIFEST_FILE = "package.json"
MANIFEST_PATTERN = re.compile(r"^package\.json$")
WORKFLOW_SUFFIXES = (".yml", ".yaml")
VERIFIED_MARKER = "<!-- Verified:"
MARKDOWN_PATTERN = re.compile(r"\.(md|markdown)$")

# Gate name -> pattern over lower-cased workflow content. Word boundaries keep
# "checkout" from counting as anything.
ENFORCEMENT_GATE_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("lint", re.compile(r"\b(lint|eslint|biome\s+check|ruff|flake8)\b")),
    ("test", re.compile(r"\b(test|vitest|jest|pytest)\b")),
    ("typecheck", re.compile(r"\b(typecheck|type-check|tsc\s+--no-?emit|mypy)\b")),
    ("build", re.compile(r"\bbuild\b")),
    ("audit", re.compile(r"\baudit\b")),
    ("prettier", re.compile(r"\bprettier\b")),
    ("format", re.compile(r"\bformat\b")),
)

CLI_NAME_PATTERN = re.compile(r"(^|[-_])cli($|[-_])")
CLI_KEYWORD_PATTERN = re.compile(r"(cli|command-?line|terminal)", re.IGNORECASE)

# Diagnosability checks
DOCTOR_DOCS_PATTERN = re.compile(r"\bdoctor\b|\bhealth check\b", re.IGNORECASE)
CI_DIAGNOSTIC_PATTERN = re.compile(r"\baudit\b|\bdoctor\b", re.IGNORECASE)
ENTRY_SOURCE_NAME_PATTERN = re.compile(r"^(index\.(ts|js|mjs|cjs)|__main__\.py|cli\.py)$")
ENTRY_SOURCE_CONTENT_PATTERN = re.compile(
    r"function\s+doctor\s*\(|def\s+doctor\s*\(|--help|Unknown command|printHelp",
    re.IGNORECASE,
)
TEST_FILE_NAME_PATTERN = re.compile(r"\.(test|spec)\.(ts|js|mjs|cjs)$|^test_.*\.py$")
TEST_CONTENT_PATTERN = re.compile(r"--help|Unknown command|doctor", re.IGNORECASE)

SIGNAL_DOCTOR_DOCS = "doctor docs"
SIGNAL_CI_DIAGNOSTICS = "ci diagnostic checks"
SIGNAL_COMMAND_SURFACE = "cli diagnostic command surface"
SIGNAL_DIAGNOSTIC_TESTS = "cli diagnostic tests"


def list_workflow_files(workflow_dir: Path) -> list[Path]:
    """Workflow files directly inside workflow_dir (not recursive)."""
    return [
        workflow_dir / name
        for name in safe_list_dir(workflow_dir)
        if name.endswith(WORKFLOW_SUFFIXES)
    ]


def scan_workflows_for_enforcement(workflow_dir: Path) -> list[str]:
    """
    Detect which quality gates CI workflows run.

    Args:
        workflow_dir: Directory holding workflow YAML files

    Returns:
        De-duplicated gate names in first-detected order
    """
    gates: list[str] = []
    for workflow in list_workflow_files(workflow_dir):
        content = read_text_or_none(workflow)
        if content is None:
            continue
        content = content.lower()
        for gate, pattern in ENFORCEMENT_GATE_PATTERNS:
            if gate not in gates and pattern.search(content):
                gates.append(gate)
    return gates


def detect_monorepo_workspaces(manifest_path: Path) -> list[str]:
    """
    Read workspace globs from a root manifest.

    Supports a bare array (`"workspaces": [...]`) and the nested form
    (`"workspaces": {"packages": [...]}`).

    Returns:
        Workspace globs, empty when the manifest is absent or not a monorepo
    """
    manifest = read_json_object(manifest_path)
    if manifest is None:
        return []
    return workspaces_from_manifest(manifest)


def workspaces_from_manifest(manifest: dict[str, Any]) -> list[str]:
    workspaces = manifest.get("workspaces")
    if isinstance(workspaces, dict):
        workspaces = workspaces.get("packages")
    if not isinstance(workspaces, list):
        return []
    return [glob for glob in workspaces if isinstance(glob, str)]


def is_cli_manifest(manifest: dict[str, Any]) -> bool:
    """True when a manifest exposes a binary, a cli-style name, or cli keywords."""
    binary = manifest.get("bin")
    has_bin = (isinstance(binary, str) and bool(binary.strip())) or (
        isinstance(binary, dict) and len(binary) > 0
    )

    name = manifest.get("name")
    has_cli_name = isinstance(name, str) and CLI_NAME_PATTERN.search(name) is not None

    keywords = manifest.get("keywords")
    has_cli_keywords = isinstance(keywords, list) and any(
        isinstance(keyword, str) and CLI_KEYWORD_PATTERN.search(keyword)
        for keyword in keywords
    )
    return has_bin or has_cli_name or has_cli_keywords


def detect_cli_project(
    target_dir: Path,
    root_manifest_path: Path,
    max_depth: int = 4,
    ignored_dirs: Iterable[str] = IGNORED_DIRS,
) -> bool:
    """
    Classify the repository as a command-line tool.

    Checks the root manifest first, then every nested manifest within
    max_depth.
    """
    root_manifest = read_json_object(root_manifest_path)
    if root_manifest is not None and is_cli_manifest(root_manifest):
        return True

    root_resolved = root_manifest_path.resolve()
    for manifest_path in find_files(target_dir, MANIFEST_PATTERN, max_depth, ignored_dirs):
        if manifest_path == root_resolved:
            continue
        manifest = read_json_object(manifest_path)
        if manifest is not None and is_cli_manifest(manifest):
            return True
    return False


def _any_file_matches(paths: Iterable[Path], pattern: re.Pattern[str]) -> bool:
    for path in paths:
        content = read_text_or_none(path)
        if content is not None and pattern.search(content):
            return True
    return False


def _readme_signals(target_dir: Path) -> list[str]:
    readme = read_text_or_none(target_dir / "README.md")
    if readme is not None and DOCTOR_DOCS_PATTERN.search(readme):
        return [SIGNAL_DOCTOR_DOCS]
    return []


def _workflow_signals(target_dir: Path) -> list[str]:
    workflows = list_workflow_files(target_dir / ".github" / "workflows")
    if _any_file_matches(workflows, CI_DIAGNOSTIC_PATTERN):
        return [SIGNAL_CI_DIAGNOSTICS]
    return []


def _source_signals(target_dir: Path, max_depth: int, ignored_dirs: Iterable[str]) -> list[str]:
    sources = find_files(target_dir, ENTRY_SOURCE_NAME_PATTERN, max_depth, ignored_dirs)
    if _any_file_matches(sources, ENTRY_SOURCE_CONTENT_PATTERN):
        return [SIGNAL_COMMAND_SURFACE]
    return []


def _test_signals(target_dir: Path, max_depth: int, ignored_dirs: Iterable[str]) -> list[str]:
    tests = find_files(target_dir, TEST_FILE_NAME_PATTERN, max_depth, ignored_dirs)
    if _any_file_matches(tests, TEST_CONTENT_PATTERN):
        return [SIGNAL_DIAGNOSTIC_TESTS]
    return []


def detect_cli_diagnosability_signals(
    target_dir: Path,
    max_depth: int = 5,
    ignored_dirs: Iterable[str] = IGNORED_DIRS,
) -> list[str]:
    """
    Collect evidence that a CLI can explain its own failures.

    Returns:
        Fired signal names, in check order (docs, CI, source, tests)
    """
    signals: list[str] = []
    checks = (
        _readme_signals(target_dir),
        _workflow_signals(target_dir),
        _source_signals(target_dir, max_depth, ignored_dirs),
        _test_signals(target_dir, max_depth, ignored_dirs),
    )
    for check_signals in checks:
        for signal in check_signals:
            if signal not in signals:
                signals.append(signal)
    return signals


def collect_verified_docs(
    target_dir: Path,
    max_depth: int = 3,
    ignored_dirs: Iterable[str] = IGNORED_DIRS,
) -> list[Path]:
    """Markdown files carrying a `<!-- Verified: YYYY-MM-DD -->` marker."""
    verified = []
    for doc in find_files(target_dir, MARKDOWN_PATTERN, max_depth, ignored_dirs):
        content = read_text_or_none(doc)
        if content is not None and VERIFIED_MARKER in content:
            verified.append(doc)
    return verified
