"""
Audit Context Builder - one immutable snapshot of a repository per run.

All detectors run exactly once here; the scorers only read the resulting
RuntimeContext (plus the occasional document body it points at).
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .config import AuditPolicy
from .detection import (
    MANIFEST_FILE,
    collect_verified_docs,
    detect_cli_project,
    scan_workflows_for_enforcement,
    workspaces_from_manifest,
)
from .filesystem import (
    IGNORED_DIRS,
    count_lines,
    find_files,
    read_json_object,
    read_text_or_none,
)

logger = logging.getLogger(__name__)

MAP_FILE = "AGENTS.md"
MAP_FILE_PATTERN = re.compile(r"^AGENTS\.md$")
ARCHITECTURE_FILE = "ARCHITECTURE.md"
POLICY_FILE = "risk-policy.json"
GOLDEN_PRINCIPLES_PATH = "docs/golden-principles.md"
DESIGN_DOCS_INDEX_PATH = "docs/design-docs/index.md"
DEBT_TRACKER_PATH = "docs/exec-plans/tech-debt-tracker.md"

LINTER_CONFIGS: tuple[str, ...] = (
    ".eslintrc.json",
    ".eslintrc.js",
    "eslint.config.js",
    "eslint.config.mjs",
    "biome.json",
    "ruff.toml",
    ".ruff.toml",
)
CI_PATHS: tuple[str, ...] = (".github/workflows", ".gitlab-ci.yml", "Jenkinsfile", ".circleci")

STRUCTURAL_LINT_SCRIPT_PATTERN = re.compile(r"lint|structure", re.IGNORECASE)
DOC_GARDENER_SCRIPT_PATTERN = re.compile(r"doc-gardener|freshness", re.IGNORECASE)
DRIFT_SCRIPT_PATTERN = re.compile(r"drift|docs-drift", re.IGNORECASE)
SCRIPT_SCAN_DEPTH = 1


@dataclass(frozen=True)
class RuntimeContext:
    """Read-only facts about one repository, gathered once per audit."""

    target_dir: Path
    policy: AuditPolicy
    ignored_dirs: frozenset[str]
    map_file_lines: int | None
    map_files: tuple[Path, ...]
    has_manifest: bool
    manifest: dict[str, Any] | None
    manifest_text: str | None
    linter_configs: tuple[str, ...]
    has_ci: bool
    ci_gates: tuple[str, ...]
    workspaces: tuple[str, ...]
    is_cli: bool
    verified_docs: tuple[Path, ...]
    has_policy_file: bool
    has_debt_tracker: bool
    has_scripts_dir: bool
    has_structural_lint_script: bool
    has_doc_gardener_script: bool
    has_drift_script: bool

    @property
    def has_map_file(self) -> bool:
        return self.map_file_lines is not None

    @property
    def has_linter(self) -> bool:
        return len(self.linter_configs) > 0

    @property
    def is_monorepo(self) -> bool:
        return len(self.workspaces) > 0

    @property
    def manifest_path(self) -> Path:
        return self.target_dir / MANIFEST_FILE

    @property
    def docs_dir(self) -> Path:
        return self.target_dir / "docs"

    @property
    def exec_plans_dir(self) -> Path:
        return self.docs_dir / "exec-plans"

    @property
    def design_docs_dir(self) -> Path:
        return self.docs_dir / "design-docs"

    @property
    def design_docs_index(self) -> Path:
        return self.target_dir / DESIGN_DOCS_INDEX_PATH

    @property
    def architecture_path(self) -> Path:
        return self.target_dir / ARCHITECTURE_FILE

    @property
    def golden_principles_path(self) -> Path:
        return self.target_dir / GOLDEN_PRINCIPLES_PATH

    @property
    def policy_path(self) -> Path:
        return self.target_dir / POLICY_FILE

    @property
    def workflow_dir(self) -> Path:
        return self.target_dir / ".github" / "workflows"

    def path(self, relative: str) -> Path:
        return self.target_dir / relative

    def read(self, relative: str) -> str | None:
        """Read a file below the target, None when absent or unreadable."""
        return read_text_or_none(self.target_dir / relative)


def ignored_dirs_for(policy: AuditPolicy) -> frozenset[str]:
    return IGNORED_DIRS | policy.extra_ignored_dirs


def present_linter_configs(target_dir: Path) -> tuple[str, ...]:
    return tuple(name for name in LINTER_CONFIGS if (target_dir / name).exists())


def has_ci_config(target_dir: Path, ci_paths: tuple[str, ...] = CI_PATHS) -> bool:
    return any((target_dir / path).exists() for path in ci_paths)


def find_scripts(target_dir: Path, pattern: re.Pattern[str], ignored_dirs: frozenset[str]) -> list[Path]:
    """Files under scripts/ (and one level below) whose name matches pattern."""
    scripts_dir = target_dir / "scripts"
    if not scripts_dir.is_dir():
        return []
    return find_files(scripts_dir, pattern, SCRIPT_SCAN_DEPTH, ignored_dirs)


def build_runtime_context(target_dir: Path, policy: AuditPolicy | None = None) -> RuntimeContext:
    """
    Run every detector once and freeze the results.

    Args:
        target_dir: Resolved repository root (must exist)
        policy: Thresholds and scan depths, defaults when omitted

    Returns:
        Immutable RuntimeContext
    """
    policy = policy or AuditPolicy()
    ignored = ignored_dirs_for(policy)
    depth = policy.default_depth

    map_text = read_text_or_none(target_dir / MAP_FILE)
    map_file_lines = count_lines(map_text) if map_text is not None else None
    if map_text is None and (target_dir / MAP_FILE).exists():
        # Present but unreadable still counts as present with no lines
        map_file_lines = 0

    manifest_path = target_dir / MANIFEST_FILE
    has_manifest = manifest_path.is_file()
    manifest = read_json_object(manifest_path) if has_manifest else None
    manifest_text = read_text_or_none(manifest_path) if has_manifest else None
    workspaces = tuple(workspaces_from_manifest(manifest)) if manifest is not None else ()

    workflow_dir = target_dir / ".github" / "workflows"
    ci_gates = tuple(scan_workflows_for_enforcement(workflow_dir)) if workflow_dir.is_dir() else ()

    context = RuntimeContext(
        target_dir=target_dir,
        policy=policy,
        ignored_dirs=ignored,
        map_file_lines=map_file_lines,
        map_files=tuple(find_files(target_dir, MAP_FILE_PATTERN, depth, ignored)),
        has_manifest=has_manifest,
        manifest=manifest,
        manifest_text=manifest_text,
        linter_configs=present_linter_configs(target_dir),
        has_ci=has_ci_config(target_dir),
        ci_gates=ci_gates,
        workspaces=workspaces,
        is_cli=detect_cli_project(
            target_dir, manifest_path, policy.cli_manifest_depth, ignored
        ),
        verified_docs=tuple(collect_verified_docs(target_dir, depth, ignored)),
        has_policy_file=(target_dir / POLICY_FILE).exists(),
        has_debt_tracker=(target_dir / DEBT_TRACKER_PATH).exists(),
        has_scripts_dir=(target_dir / "scripts").is_dir(),
        has_structural_lint_script=bool(
            find_scripts(target_dir, STRUCTURAL_LINT_SCRIPT_PATTERN, ignored)
        ),
        has_doc_gardener_script=bool(
            find_scripts(target_dir, DOC_GARDENER_SCRIPT_PATTERN, ignored)
        ),
        has_drift_script=bool(find_scripts(target_dir, DRIFT_SCRIPT_PATTERN, ignored)),
    )
    logger.debug(
        f"Context for {target_dir}: manifest={has_manifest} monorepo={context.is_monorepo} "
        f"cli={context.is_cli} gates={list(ci_gates)}"
    )
    return context
