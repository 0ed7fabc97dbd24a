"""
Dimension Scorers - turn a RuntimeContext into six 0-3 scores with findings.

Sub-checks run in a fixed order so finding order is stable. Each scorer
adds to its own AuditScore and may append recommendations to the result.
"""

import logging
import re
from collections.abc import Callable

from . import rules
from .context import (
    ARCHITECTURE_FILE,
    MAP_FILE,
    RuntimeContext,
)
from .detection import MANIFEST_PATTERN, detect_cli_diagnosability_signals
from .filesystem import find_files, read_json_object, read_text_or_none, safe_list_dir
from .models import AuditResult, AuditScore, Dimension

logger = logging.getLogger(__name__)

TRADITIONAL_OBSERVABILITY = ("docker-compose.yml", "docker-compose.yaml", "grafana", "prometheus.yml")
SENTRY_CONFIG_PATTERN = re.compile(r"^sentry\.(client|server)\.config\.", re.IGNORECASE)
SENTRY_ENV_PATTERN = re.compile(r"^\.env\.sentry", re.IGNORECASE)
HOSTING_CONFIGS = ("vercel.json", "netlify.toml")
MANIFEST_OBSERVABILITY_MARKERS = ("@sentry/", "datadog-ci")
OBSERVABILITY_SCAN_DEPTH = 1

AGENT_CONFIGS = ("CLAUDE.md", ".claude", "CODEX.md", ".cursor", "conductor.json")
PR_TEMPLATES = (".github/pull_request_template.md", ".github/PULL_REQUEST_TEMPLATE.md")
ISSUE_TEMPLATE_DIR = ".github/ISSUE_TEMPLATE"
CONDUCTOR_FILE = "conductor.json"

Scorer = Callable[[RuntimeContext, AuditResult], None]


# Repository knowledge


def _score_map_file(ctx: RuntimeContext, result: AuditResult, score: AuditScore) -> None:
    if ctx.map_file_lines is None:
        score.note(f"{MAP_FILE} missing")
        result.recommend(
            f"Create {MAP_FILE} as a concise map (~100 lines) - run 'harness init .'"
        )
    elif rules.within_line_limit(ctx.map_file_lines, ctx.policy.map_file_max_lines):
        score.award(f"{MAP_FILE} exists ({ctx.map_file_lines} lines)")
    else:
        score.note(
            f"{MAP_FILE} exists but too long ({ctx.map_file_lines} lines, "
            f"target: <{ctx.policy.map_file_max_lines})"
        )

    if len(ctx.map_files) >= 2:
        score.note(f"Hierarchical {MAP_FILE} detected ({len(ctx.map_files)} files)")


def _score_design_docs(ctx: RuntimeContext, result: AuditResult, score: AuditScore) -> None:
    if ctx.verified_docs:
        score.note(f"Verification headers found in {len(ctx.verified_docs)} doc(s)")

    if not ctx.docs_dir.exists():
        score.note("docs/ directory missing")
        result.recommend("Create docs/ directory structure - run 'harness init .'")
        return

    has_design_docs = ctx.design_docs_dir.exists()
    if has_design_docs and ctx.design_docs_index.exists():
        score.award("docs/design-docs/ with index exists")
        index = read_text_or_none(ctx.design_docs_index) or ""
        decisions = rules.count_table_rows(index)
        if rules.meets_threshold(decisions, ctx.policy.design_decision_min_rows):
            score.note(f"{decisions} design decisions documented")
    elif has_design_docs:
        score.note("docs/design-docs/ exists but missing index.md")
    else:
        score.note("docs/design-docs/ missing")


def _score_exec_plans(ctx: RuntimeContext, score: AuditScore) -> None:
    if not ctx.exec_plans_dir.exists():
        score.note("No versioned execution plans")
        return
    if (ctx.exec_plans_dir / "active").exists() and (ctx.exec_plans_dir / "completed").exists():
        score.award("Execution plans versioned in-repo")
    else:
        score.note("exec-plans/ incomplete (missing active/ or completed/)")


def score_repository_knowledge(ctx: RuntimeContext, result: AuditResult) -> None:
    """Map file, design docs with index, and versioned execution plans."""
    score = result.scores[Dimension.REPOSITORY_KNOWLEDGE]
    _score_map_file(ctx, result, score)
    _score_design_docs(ctx, result, score)
    _score_exec_plans(ctx, score)


# Architecture enforcement


def has_deep_linter_enforcement(ctx: RuntimeContext) -> bool:
    """A structural-lint script or a linter config that restricts imports."""
    if ctx.has_structural_lint_script:
        return True
    for config_name in ctx.linter_configs:
        content = ctx.read(config_name)
        if content is not None and rules.has_architectural_lint_rules(config_name, content):
            return True
    return False


def count_enforcement_signals(ctx: RuntimeContext) -> int:
    golden = read_text_or_none(ctx.golden_principles_path)
    golden_enforced = (
        golden is not None and rules.mentions_lint_enforcement(golden) and ctx.has_linter
    )
    return rules.count_true(
        (
            ctx.has_policy_file,
            rules.ci_references_enforcement(ctx.ci_gates),
            ctx.has_structural_lint_script,
            golden_enforced,
        )
    )


def score_architecture_enforcement(ctx: RuntimeContext, result: AuditResult) -> None:
    """Documented layering, linter configuration, and mechanical enforcement."""
    score = result.scores[Dimension.ARCHITECTURE_ENFORCEMENT]

    architecture = read_text_or_none(ctx.architecture_path)
    if architecture is None:
        score.note(f"{ARCHITECTURE_FILE} missing")
        result.recommend(f"Create {ARCHITECTURE_FILE} with domain map and layer rules")
    elif rules.has_dependency_direction_rules(architecture):
        score.award(f"{ARCHITECTURE_FILE} with dependency direction rules")
    else:
        score.note(f"{ARCHITECTURE_FILE} exists but lacks dependency direction rules")
        result.recommend(f"Document dependency direction rules in {ARCHITECTURE_FILE}")

    if ctx.has_linter:
        if has_deep_linter_enforcement(ctx):
            score.award("Linter configuration found with architectural enforcement")
        else:
            score.award("Linter configuration found")
    else:
        score.note("No linter configuration found")
        result.recommend("Add linter configuration to enforce architectural constraints")

    signals = count_enforcement_signals(ctx)
    if rules.meets_threshold(signals, ctx.policy.enforcement_min_signals):
        score.award(f"Enforcement evidence detected ({signals} signals)")
    elif signals == 1:
        score.note(
            f"Partial enforcement evidence (need {ctx.policy.enforcement_min_signals}+ signals)"
        )


# Agent legibility


def has_bootable_workspace(ctx: RuntimeContext) -> bool:
    """Any package directly inside a workspace directory defines dev/start."""
    for glob in ctx.workspaces:
        workspace_dir = ctx.target_dir / rules.workspace_dir_name(glob)
        if not workspace_dir.is_dir():
            continue
        for entry in safe_list_dir(workspace_dir):
            manifest = read_json_object(workspace_dir / entry / "package.json")
            if rules.has_boot_script(manifest):
                return True
    return False


def has_observability_config(ctx: RuntimeContext) -> bool:
    target = ctx.target_dir
    if any(
        (target / name).exists() or (target / "infra" / name).exists()
        for name in TRADITIONAL_OBSERVABILITY
    ):
        return True
    if any((target / name).exists() for name in HOSTING_CONFIGS):
        return True
    if ctx.manifest_text is not None and any(
        marker in ctx.manifest_text for marker in MANIFEST_OBSERVABILITY_MARKERS
    ):
        return True
    for pattern in (SENTRY_CONFIG_PATTERN, SENTRY_ENV_PATTERN):
        if find_files(target, pattern, OBSERVABILITY_SCAN_DEPTH, ctx.ignored_dirs):
            return True
    return False


def _score_observability(ctx: RuntimeContext, score: AuditScore) -> None:
    if has_observability_config(ctx):
        score.award("Observability configuration found")
        return
    if not ctx.is_cli:
        score.note("No observability stack detected")
        return

    signals = detect_cli_diagnosability_signals(
        ctx.target_dir, ctx.policy.source_depth, ctx.ignored_dirs
    )
    if rules.meets_threshold(len(signals), ctx.policy.diagnosability_min_signals):
        score.award(f"CLI diagnosability signals found ({', '.join(signals)})")
    else:
        score.note("No observability or CLI diagnosability signals detected")


def _score_workspace_footprint(ctx: RuntimeContext, score: AuditScore) -> None:
    root_manifest = ctx.manifest_path.resolve()
    manifests = [
        path
        for path in find_files(
            ctx.target_dir, MANIFEST_PATTERN, ctx.policy.workspace_manifest_depth, ctx.ignored_dirs
        )
        if path != root_manifest
    ]
    if not manifests:
        return

    total = 0
    counted = 0
    for path in manifests:
        manifest = read_json_object(path)
        if manifest is None:
            continue
        total += rules.dependency_count(manifest)
        counted += 1

    if counted == 0:
        score.note("No readable workspace package.json files for dependency footprint analysis")
        return

    average = rules.round_half_up(total / counted)
    summary = f"avg {average} across {counted} packages"
    if average < ctx.policy.workspace_average_dependency_limit:
        score.award(f"Lean workspace dependencies ({summary})")
    else:
        score.note(f"Heavy workspace dependencies ({summary}) - consider trimming")


def _score_dependency_footprint(ctx: RuntimeContext, score: AuditScore) -> None:
    if not ctx.has_manifest:
        return
    if ctx.is_monorepo:
        _score_workspace_footprint(ctx, score)
        return
    if ctx.manifest is None:
        return

    count = rules.dependency_count(ctx.manifest)
    if count < ctx.policy.single_package_dependency_limit:
        score.award(f"Lean dependency set ({count} dependencies)")
    else:
        score.note(f"Heavy dependency set ({count} dependencies) - consider trimming")


def score_agent_legibility(ctx: RuntimeContext, result: AuditResult) -> None:
    """Bootability, observability (or CLI diagnosability), and dependency footprint."""
    score = result.scores[Dimension.AGENT_LEGIBILITY]

    if rules.has_boot_script(ctx.manifest):
        score.award("App has dev/start script (bootable)")
    elif ctx.is_monorepo and has_bootable_workspace(ctx):
        score.award(
            f"Monorepo detected with {len(ctx.workspaces)} workspace(s), bootable workspace found"
        )

    _score_observability(ctx, score)
    _score_dependency_footprint(ctx, score)


# Golden principles


def score_golden_principles(ctx: RuntimeContext, result: AuditResult) -> None:
    """Principles document, CI pipeline, and tech-debt tracker."""
    score = result.scores[Dimension.GOLDEN_PRINCIPLES]

    golden = read_text_or_none(ctx.golden_principles_path)
    if golden is not None:
        count = rules.count_golden_principles(golden)
        if rules.meets_threshold(count, ctx.policy.golden_principles_min):
            score.award(f"Golden principles documented ({count} principles)")
        else:
            score.award(
                f"Golden principles documented - only {count} principles, consider adding more"
            )
        if rules.documents_anti_patterns(golden):
            score.note("Anti-patterns documented")
    else:
        score.note("No golden principles document")
        result.recommend("Create docs/golden-principles.md with mechanical taste rules")

    if ctx.has_ci:
        score.award("CI pipeline exists for enforcement")
        if rules.meets_threshold(len(ctx.ci_gates), ctx.policy.rich_ci_gate_count):
            score.note(
                f"CI enforces {len(ctx.ci_gates)} quality gates ({', '.join(ctx.ci_gates)})"
            )
    else:
        score.note("No CI pipeline detected")

    if ctx.has_debt_tracker:
        score.award("Tech debt tracker exists")


# Agent workflow


def governance_signals(ctx: RuntimeContext) -> list[str]:
    """Names of the workflow governance artifacts present, in report order."""
    signals = []
    if any(ctx.path(template).exists() for template in PR_TEMPLATES):
        signals.append("PR template")
    if ctx.has_policy_file:
        signals.append("risk-policy.json")
    if ctx.path(ISSUE_TEMPLATE_DIR).exists():
        signals.append("issue templates")
    if ctx.path(CONDUCTOR_FILE).exists():
        signals.append(CONDUCTOR_FILE)
    return signals


def score_agent_workflow(ctx: RuntimeContext, result: AuditResult) -> None:
    """Agent configuration, governance artifacts, and enforcing CI workflows."""
    score = result.scores[Dimension.AGENT_WORKFLOW]

    if any(ctx.path(name).exists() for name in AGENT_CONFIGS):
        score.award("Agent configuration found")
    else:
        score.note("No agent configuration (CLAUDE.md, .cursor, conductor.json, etc.)")

    signals = governance_signals(ctx)
    if signals:
        score.award(f"Workflow governance found ({', '.join(signals)})")

    if ctx.workflow_dir.exists():
        gates = rules.workflow_enforcement_gates(ctx.ci_gates)
        if rules.meets_threshold(len(gates), ctx.policy.workflow_gate_min):
            score.award(f"CI workflows with enforcement ({', '.join(gates)})")
        else:
            score.note(
                "CI workflows exist but lack sufficient enforcement steps "
                f"(need {ctx.policy.workflow_gate_min}+)"
            )


# Garbage collection


def has_active_doc_gardening(ctx: RuntimeContext) -> bool:
    index = read_text_or_none(ctx.design_docs_index)
    if index is not None and rules.tracks_doc_status(index):
        return True
    if ctx.has_doc_gardener_script:
        return True
    return rules.meets_threshold(len(ctx.verified_docs), ctx.policy.gardening_verified_docs_min)


def has_quality_grades(ctx: RuntimeContext) -> bool:
    architecture = read_text_or_none(ctx.architecture_path)
    return architecture is not None and rules.tracks_quality_grades(architecture)


def has_drift_enforcement(ctx: RuntimeContext) -> bool:
    if ctx.has_drift_script:
        return True
    policy = read_text_or_none(ctx.policy_path) if ctx.has_policy_file else None
    return policy is not None and rules.declares_drift_rules(policy)


def score_garbage_collection(ctx: RuntimeContext, result: AuditResult) -> None:
    """Debt tracking, doc gardening, and quality grades or drift enforcement."""
    score = result.scores[Dimension.GARBAGE_COLLECTION]

    if ctx.has_debt_tracker:
        score.award("Tech debt tracked in-repo")
    else:
        score.note("No tech debt tracking")

    if has_active_doc_gardening(ctx):
        score.award("Active doc-gardening detected")

    grades = has_quality_grades(ctx)
    drift = has_drift_enforcement(ctx)
    if grades and drift:
        score.award("Quality grades tracked in architecture")
        score.note("Drift enforcement detected")
    elif grades:
        score.award("Quality grades tracked in architecture")
    elif drift:
        score.award("Drift enforcement detected")


SCORERS: tuple[tuple[Dimension, Scorer], ...] = (
    (Dimension.REPOSITORY_KNOWLEDGE, score_repository_knowledge),
    (Dimension.ARCHITECTURE_ENFORCEMENT, score_architecture_enforcement),
    (Dimension.AGENT_LEGIBILITY, score_agent_legibility),
    (Dimension.GOLDEN_PRINCIPLES, score_golden_principles),
    (Dimension.AGENT_WORKFLOW, score_agent_workflow),
    (Dimension.GARBAGE_COLLECTION, score_garbage_collection),
)


def apply_scoring(ctx: RuntimeContext, result: AuditResult) -> None:
    """Run all six scorers in declaration order."""
    for dimension, scorer in SCORERS:
        scorer(ctx, result)
        logger.debug(f"{dimension.value}: {result.scores[dimension].score}/{result.scores[dimension].max}")
