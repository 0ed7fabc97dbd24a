"""
Doctor Reporter - pass/fail/warn checks with a fix for every problem.

Uses the scanner and detectors directly; it does not score.
"""

import logging
from pathlib import Path

from .audit import resolve_target
from .config import AuditPolicy
from .context import (
    ARCHITECTURE_FILE,
    MAP_FILE,
    MAP_FILE_PATTERN,
    POLICY_FILE,
    STRUCTURAL_LINT_SCRIPT_PATTERN,
    find_scripts,
    has_ci_config,
    ignored_dirs_for,
    present_linter_configs,
)
from .detection import collect_verified_docs, scan_workflows_for_enforcement
from .filesystem import count_lines, find_files, read_text_or_none
from .models import DoctorCheck, DoctorReport, DoctorStatus

logger = logging.getLogger(__name__)

REQUIRED_DOCS: tuple[str, ...] = (
    "docs/design-docs/index.md",
    "docs/design-docs/core-beliefs.md",
    "docs/product-specs/index.md",
    "docs/exec-plans/tech-debt-tracker.md",
    "docs/golden-principles.md",
)
DOCTOR_CI_PATHS: tuple[str, ...] = (".github/workflows", ".gitlab-ci.yml", "Jenkinsfile")


def _pass(check: str) -> DoctorCheck:
    return DoctorCheck(check=check, status=DoctorStatus.PASS)


def check_map_file(target_dir: Path, policy: AuditPolicy) -> list[DoctorCheck]:
    map_path = target_dir / MAP_FILE
    if not map_path.exists():
        return [
            DoctorCheck(
                f"{MAP_FILE} missing",
                DoctorStatus.FAIL,
                f"Run 'harness init .' to create {MAP_FILE}",
            )
        ]

    lines = count_lines(read_text_or_none(map_path) or "")
    if lines <= policy.map_file_max_lines:
        return [_pass(f"{MAP_FILE} exists and concise")]
    return [
        DoctorCheck(
            f"{MAP_FILE} too long",
            DoctorStatus.WARN,
            f"Trim {MAP_FILE} from {lines} to ~100 lines. Move details to docs/.",
        )
    ]


def check_architecture(target_dir: Path) -> list[DoctorCheck]:
    if (target_dir / ARCHITECTURE_FILE).exists():
        return [_pass(f"{ARCHITECTURE_FILE} exists")]
    return [
        DoctorCheck(
            f"{ARCHITECTURE_FILE} missing",
            DoctorStatus.FAIL,
            f"Run 'harness init .' to create {ARCHITECTURE_FILE}",
        )
    ]


def check_required_docs(target_dir: Path) -> list[DoctorCheck]:
    checks = []
    for doc in REQUIRED_DOCS:
        if (target_dir / doc).exists():
            checks.append(_pass(f"{doc} exists"))
        else:
            checks.append(
                DoctorCheck(
                    f"{doc} missing",
                    DoctorStatus.FAIL,
                    "Run 'harness init .' to create missing files",
                )
            )
    return checks


def check_linter(target_dir: Path) -> list[DoctorCheck]:
    if present_linter_configs(target_dir):
        return [_pass("Linter configured")]
    return [
        DoctorCheck(
            "No linter configured",
            DoctorStatus.WARN,
            "Add eslint, biome or ruff config to enforce architectural constraints",
        )
    ]


def check_ci(target_dir: Path, policy: AuditPolicy) -> list[DoctorCheck]:
    if not has_ci_config(target_dir, DOCTOR_CI_PATHS):
        return [
            DoctorCheck(
                "No CI pipeline",
                DoctorStatus.WARN,
                "Add CI pipeline to enforce golden principles mechanically",
            )
        ]

    checks = [_pass("CI pipeline exists")]
    workflow_dir = target_dir / ".github" / "workflows"
    if not workflow_dir.exists():
        return checks

    gates = scan_workflows_for_enforcement(workflow_dir)
    if len(gates) >= policy.doctor_ci_gate_min:
        checks.append(_pass(f"CI enforces {len(gates)} quality gates"))
    else:
        checks.append(
            DoctorCheck(
                "CI lacks enforcement steps",
                DoctorStatus.WARN,
                "Add lint, test, and typecheck steps to CI workflows",
            )
        )
    return checks


def check_policy_file(target_dir: Path) -> list[DoctorCheck]:
    if (target_dir / POLICY_FILE).exists():
        return [_pass(f"{POLICY_FILE} exists")]
    return [
        DoctorCheck(
            f"No {POLICY_FILE}",
            DoctorStatus.WARN,
            f"Create {POLICY_FILE} with risk tiers and docs-drift rules",
        )
    ]


def check_verified_docs(target_dir: Path, policy: AuditPolicy) -> list[DoctorCheck]:
    verified = collect_verified_docs(target_dir, policy.default_depth, ignored_dirs_for(policy))
    if verified:
        return [_pass(f"Verification headers in {len(verified)} doc(s)")]
    return [
        DoctorCheck(
            "No verification headers in docs",
            DoctorStatus.WARN,
            "Add <!-- Verified: YYYY-MM-DD --> headers to key docs for freshness tracking",
        )
    ]


def check_hierarchical_map_files(target_dir: Path, policy: AuditPolicy) -> list[DoctorCheck]:
    map_files = find_files(
        target_dir, MAP_FILE_PATTERN, policy.default_depth, ignored_dirs_for(policy)
    )
    if len(map_files) >= 2:
        return [_pass(f"Hierarchical {MAP_FILE} ({len(map_files)} files)")]
    return []


def check_structural_lint(target_dir: Path, policy: AuditPolicy) -> list[DoctorCheck]:
    if not (target_dir / "scripts").is_dir():
        return []
    if find_scripts(target_dir, STRUCTURAL_LINT_SCRIPT_PATTERN, ignored_dirs_for(policy)):
        return [_pass("Structural lint scripts found")]
    return [
        DoctorCheck(
            "No structural lint scripts",
            DoctorStatus.WARN,
            "Add scripts/lint-structure.mjs to enforce layer and dependency rules",
        )
    ]


def run_doctor(target_path: str | Path, policy: AuditPolicy | None = None) -> DoctorReport:
    """
    Run every doctor check against a repository.

    Args:
        target_path: Directory to check
        policy: Thresholds and scan depths (defaults when omitted)

    Returns:
        DoctorReport with checks in fixed order

    Raises:
        TargetNotFoundError: If target_path does not exist
    """
    policy = policy or AuditPolicy()
    target_dir = resolve_target(target_path)

    checks = [
        *check_map_file(target_dir, policy),
        *check_architecture(target_dir),
        *check_required_docs(target_dir),
        *check_linter(target_dir),
        *check_ci(target_dir, policy),
        *check_policy_file(target_dir),
        *check_verified_docs(target_dir, policy),
        *check_hierarchical_map_files(target_dir, policy),
        *check_structural_lint(target_dir, policy),
    ]
    report = DoctorReport(project=target_dir.name, target=str(target_dir), checks=checks)
    logger.info(f"Doctor for {report.project}: {report.summary}")
    return report
