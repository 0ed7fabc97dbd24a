"""
Scoring rules - small named predicates composed by the dimension scorers.

Each AND/OR/threshold condition used in scoring lives here so it can be
tested on its own.
"""

import re
from collections.abc import Iterable
from typing import Any

DEPENDENCY_DIRECTION_PATTERN = re.compile(r"dependenc|layer|forward only|import", re.IGNORECASE)
ARCHITECTURAL_LINT_PATTERN = re.compile(
    r"no-restricted-imports|import/no-default-export|boundaries|dependency", re.IGNORECASE
)
BIOME_RULE_GROUP_PATTERN = re.compile(
    r'"(recommended|all|suspicious|correctness|style|complexity|nursery|performance|security|a11y)"'
)
BIOME_RULE_GROUP_MIN = 5
LINT_ENFORCEMENT_PATTERN = re.compile(r"lint|eslint|biome|ruff|enforced", re.IGNORECASE)
ANTI_PATTERN_PATTERN = re.compile(r"anti-pattern|don['’]t|never|avoid", re.IGNORECASE)
DOC_STATUS_PATTERN = re.compile(r"verif|status|last.*check", re.IGNORECASE)
QUALITY_GRADE_PATTERN = re.compile(r"quality.*grade|grade", re.IGNORECASE)
DRIFT_RULES_PATTERN = re.compile(r"docsDriftRules|watchPaths", re.IGNORECASE)
HEADING_PATTERN = re.compile(r"^##\s+", re.MULTILINE)
NUMBERED_ITEM_PATTERN = re.compile(r"^\d+\.\s+", re.MULTILINE)

TABLE_HEADER_LINES = 2
CI_ENFORCEMENT_GATES = frozenset({"lint", "test", "typecheck"})
WORKFLOW_ENFORCEMENT_GATES = frozenset({"lint", "test", "build", "typecheck"})
BOOT_SCRIPTS = ("dev", "start")


def meets_threshold(count: int, minimum: int) -> bool:
    return count >= minimum


def count_true(signals: Iterable[bool]) -> int:
    return sum(1 for signal in signals if signal)


def round_half_up(value: float) -> int:
    return int(value + 0.5)


def within_line_limit(lines: int, limit: int) -> bool:
    return lines <= limit


def count_table_rows(content: str) -> int:
    """Data rows of a markdown table: lines holding '|' minus the header and divider."""
    table_lines = sum(1 for line in content.split("\n") if "|" in line)
    return max(0, table_lines - TABLE_HEADER_LINES)


def count_golden_principles(content: str) -> int:
    """Principles are either `## ` headings or `N. ` items, whichever is larger."""
    headings = len(HEADING_PATTERN.findall(content))
    numbered = len(NUMBERED_ITEM_PATTERN.findall(content))
    return max(headings, numbered)


def has_dependency_direction_rules(content: str) -> bool:
    return DEPENDENCY_DIRECTION_PATTERN.search(content) is not None


def has_architectural_lint_rules(config_name: str, content: str) -> bool:
    """True when a linter config restricts imports or (biome) enables many rule groups."""
    if ARCHITECTURAL_LINT_PATTERN.search(content):
        return True
    if config_name == "biome.json":
        return len(BIOME_RULE_GROUP_PATTERN.findall(content)) >= BIOME_RULE_GROUP_MIN
    return False


def mentions_lint_enforcement(content: str) -> bool:
    return LINT_ENFORCEMENT_PATTERN.search(content) is not None


def documents_anti_patterns(content: str) -> bool:
    return ANTI_PATTERN_PATTERN.search(content) is not None


def tracks_doc_status(content: str) -> bool:
    return DOC_STATUS_PATTERN.search(content) is not None


def tracks_quality_grades(content: str) -> bool:
    return QUALITY_GRADE_PATTERN.search(content) is not None


def declares_drift_rules(content: str) -> bool:
    return DRIFT_RULES_PATTERN.search(content) is not None


def ci_references_enforcement(gates: Iterable[str]) -> bool:
    return any(gate in CI_ENFORCEMENT_GATES for gate in gates)


def workflow_enforcement_gates(gates: Iterable[str]) -> list[str]:
    return [gate for gate in gates if gate in WORKFLOW_ENFORCEMENT_GATES]


def has_boot_script(manifest: dict[str, Any] | None) -> bool:
    """True when a manifest defines a truthy `scripts.dev` or `scripts.start`."""
    if not manifest:
        return False
    scripts = manifest.get("scripts")
    if not isinstance(scripts, dict):
        return False
    return any(scripts.get(name) for name in BOOT_SCRIPTS)


def dependency_count(manifest: dict[str, Any]) -> int:
    dependencies = manifest.get("dependencies")
    return len(dependencies) if isinstance(dependencies, dict) else 0


def workspace_dir_name(glob: str) -> str:
    """Directory named by a workspace glob, e.g. `packages/*` -> `packages/`."""
    return glob.replace("*", "")
