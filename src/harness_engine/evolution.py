"""
Evolution Planner - from the current maturity level to the next one.

Planning (plan_evolution) only reads the target. apply_evolution performs
at most one idempotent scaffolding step and never overwrites files.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .audit import run_audit
from .automation_pack import (
    has_agent_factory_pack,
    recommend_automation_pack,
    scaffold_automation_pack,
)
from .config import AuditPolicy
from .context import ignored_dirs_for
from .maturity import resolve_level_key
from .models import (
    AuditResult,
    AuditScore,
    AutomationPack,
    Dimension,
    EvolutionPath,
    EvolutionStep,
    PackResolution,
    ScaffoldResult,
)
from .scaffold import InitOptions, missing_baseline_artifacts, run_init

logger = logging.getLogger(__name__)

WEAKEST_DIMENSION_COUNT = 3
PACK_RECOMMENDING_LEVELS = frozenset({"L0", "L1", "L2"})

L4_MESSAGE = (
    "Already at L4: Self-Correcting. Focus on maintaining quality grades and continuous improvement."
)
L4_PACK_REASON = "Already at L4. Keep existing automation healthy and continuously verified."
PACK_PRESENT_REASON = "Agent-factory automation pack already present."
PACK_SUPPRESSED_REASON = "Agent-factory recommendation suppressed by maturity level."

PACK_STEP_ACTION = "Adopt agent-factory automation pack"
PACK_STEP_DESCRIPTION = (
    "Scaffold structural lint, docs freshness, and PR review automation with "
    "'harness init . --pack agent-factory'."
)


def _steps(*steps: tuple[str, str, bool]) -> tuple[EvolutionStep, ...]:
    return tuple(
        EvolutionStep(step=number, action=action, description=description, automated=automated)
        for number, (action, description, automated) in enumerate(steps, start=1)
    )


EVOLUTION_PATHS: dict[str, EvolutionPath] = {
    "L0": EvolutionPath(
        from_level="L0: Manual",
        to_level="L1: Assisted",
        goal="Get agents into the development loop",
        steps=_steps(
            (
                "Create AGENTS.md",
                "Concise map (~100 lines) pointing agents to deeper docs. "
                "Run 'harness init .' to generate.",
                True,
            ),
            (
                "Create docs/ structure",
                "Design docs, product specs, references, execution plans - all versioned in-repo.",
                True,
            ),
            (
                "Document architecture",
                "ARCHITECTURE.md with domain map, layer ordering, and dependency direction rules.",
                True,
            ),
            (
                "Set up agent-friendly CI",
                "Fast feedback, clear error messages, deterministic output. "
                "Agents need to parse CI results.",
                False,
            ),
            (
                "First agent PR",
                "Have an agent open its first PR from a prompt. "
                "Validates the full loop works end-to-end.",
                False,
            ),
        ),
        success_criteria="Agent can read AGENTS.md, follow pointers, and open a useful PR.",
    ),
    "L1": EvolutionPath(
        from_level="L1: Assisted",
        to_level="L2: Steered",
        goal="Shift from human-writes-code to human-steers-agent",
        steps=_steps(
            (
                "Write golden principles",
                "Mechanical taste rules in docs/golden-principles.md, enforced in CI, "
                "not just documented.",
                True,
            ),
            (
                "Add structural linters",
                "Custom lint rules for dependency direction, layer violations, naming conventions.",
                False,
            ),
            (
                "Enable worktree isolation",
                "App bootable per git worktree, one instance per in-flight change.",
                False,
            ),
            (
                "Create exec-plan templates",
                "Versioned execution plans in docs/exec-plans/ with active, completed, "
                "and tech debt tracked.",
                True,
            ),
            (
                "Adopt prompt-first workflow",
                "Describe tasks in natural language. Agents write all code, tests, and docs.",
                False,
            ),
        ),
        success_criteria="Most new code is written by agents, not humans.",
    ),
    "L2": EvolutionPath(
        from_level="L2: Steered",
        to_level="L3: Autonomous",
        goal="Agent handles full PR lifecycle end-to-end",
        steps=_steps(
            (
                "Establish risk tiers and policy-as-code",
                "Create risk-policy.json defining risk tiers, docs-drift rules, "
                "and watch paths for enforcement.",
                False,
            ),
            (
                "Enforce golden principles mechanically",
                "Add structural lint scripts and CI gates that enforce golden principles, "
                "not just document them.",
                False,
            ),
            (
                "Enable self-validation",
                "Agent drives the app, takes screenshots, checks behavior against expectations.",
                False,
            ),
            (
                "Add doc-gardening automation",
                "Add verification headers (<!-- Verified: -->), freshness scripts, "
                "and recurring doc review.",
                False,
            ),
            (
                "Build escalation paths",
                "Clear criteria for when to involve humans vs. when agents can proceed autonomously.",
                False,
            ),
        ),
        success_criteria="Agent can end-to-end ship a feature from prompt to merge.",
    ),
    "L3": EvolutionPath(
        from_level="L3: Autonomous",
        to_level="L4: Self-Correcting",
        goal="System maintains and improves itself without human intervention",
        steps=_steps(
            (
                "Implement active doc-gardening with drift detection",
                "Automated drift detection between docs and code, with auto-repair capabilities.",
                False,
            ),
            (
                "Add quality grades",
                "Per-domain, per-layer scoring tracked in ARCHITECTURE.md.",
                False,
            ),
            (
                "Automate enforcement ratio tracking",
                "Track >80% of golden principles enforced in CI. Measure and improve coverage.",
                False,
            ),
            (
                "Track tech debt continuously",
                "In-repo tracker with recurring review, debt paid down in small increments.",
                True,
            ),
            (
                "Establish docs-drift rules",
                "Link code changes to required doc updates via risk-policy.json "
                "watchPaths and docsDriftRules.",
                False,
            ),
        ),
        success_criteria="Codebase improves in quality without human intervention.",
    ),
}


@dataclass
class EvolutionPlan:
    """Result of the read-only planning phase."""

    target_dir: Path
    audit: AuditResult
    path: EvolutionPath | None
    steps: tuple[EvolutionStep, ...] = ()
    weakest_dimensions: list[tuple[Dimension, AuditScore]] = field(default_factory=list)
    pack_resolution: PackResolution | None = None
    has_factory_pack: bool = False
    recommend_factory_pack: bool = False

    @property
    def is_terminal(self) -> bool:
        return self.path is None

    def pack_recommendation(self) -> dict[str, Any]:
        if self.is_terminal:
            return {"recommended": None, "reason": L4_PACK_REASON}
        if self.recommend_factory_pack and self.pack_resolution is not None:
            return {
                "recommended": AutomationPack.AGENT_FACTORY.value,
                "reason": self.pack_resolution.reason,
            }
        if self.has_factory_pack:
            return {"recommended": None, "reason": PACK_PRESENT_REASON}
        if (
            self.pack_resolution is not None
            and self.pack_resolution.selected == AutomationPack.AGENT_FACTORY
        ):
            return {"recommended": None, "reason": PACK_SUPPRESSED_REASON}
        reason = self.pack_resolution.reason if self.pack_resolution else ""
        return {"recommended": None, "reason": reason}

    def to_dict(self, applied: "AppliedEvolution | None" = None) -> dict[str, Any]:
        """
        Convert to the JSON-ready evolution document.

        Args:
            applied: Outcome of apply_evolution, when it ran
        """
        base = {
            "command": "evolve",
            "project": self.audit.project,
            "current_level": self.audit.maturity_level,
            "current_score": self.audit.total_score,
        }
        if self.path is None:
            return {
                **base,
                "message": L4_MESSAGE,
                "pack_recommendation": self.pack_recommendation(),
            }

        result: dict[str, Any] = {
            **base,
            "next_level": self.path.to_level,
            "goal": self.path.goal,
            "steps": [step.to_dict() for step in self.steps],
            "success_criteria": self.path.success_criteria,
            "weakest_dimensions": [
                {"dimension": dimension.value, **score.to_dict()}
                for dimension, score in self.weakest_dimensions
            ],
            "pack_recommendation": self.pack_recommendation(),
            "applied": list(applied.messages) if applied else [],
        }
        if applied is not None and applied.scaffold is not None:
            result["scaffold"] = applied.scaffold.to_dict()
        result["recommendations"] = list(self.audit.recommendations)
        return result


@dataclass
class AppliedEvolution:
    """Side effects performed by apply_evolution."""

    messages: list[str] = field(default_factory=list)
    scaffold: ScaffoldResult | None = None


def weakest_dimensions(
    audit: AuditResult, count: int = WEAKEST_DIMENSION_COUNT
) -> list[tuple[Dimension, AuditScore]]:
    """Lowest-scoring dimensions; ties keep declaration order."""
    ranked = sorted(audit.scores.items(), key=lambda item: item[1].score)
    return ranked[:count]


def build_steps(path: EvolutionPath, recommend_pack: bool) -> tuple[EvolutionStep, ...]:
    if not recommend_pack:
        return path.steps
    pack_step = EvolutionStep(
        step=len(path.steps) + 1,
        action=PACK_STEP_ACTION,
        description=PACK_STEP_DESCRIPTION,
        automated=True,
    )
    return path.steps + (pack_step,)


def plan_evolution(target_path: str | Path, policy: AuditPolicy | None = None) -> EvolutionPlan:
    """
    Audit the target and select the path to the next maturity level.

    Args:
        target_path: Repository to evolve
        policy: Audit thresholds (defaults when omitted)

    Returns:
        EvolutionPlan; its path is None at L4

    Raises:
        TargetNotFoundError: If the target does not exist
    """
    policy = policy or AuditPolicy()
    audit = run_audit(target_path, policy)
    target_dir = Path(target_path).expanduser().resolve()
    level_key = resolve_level_key(audit.maturity_level)

    path = EVOLUTION_PATHS.get(level_key)
    if path is None:
        logger.info(f"{audit.project} is already at {audit.maturity_level}")
        return EvolutionPlan(target_dir=target_dir, audit=audit, path=None)

    resolution = recommend_automation_pack(
        target_dir, policy.pack_source_depth, ignored_dirs_for(policy)
    )
    has_pack = has_agent_factory_pack(target_dir)
    recommend_pack = (
        resolution.selected == AutomationPack.AGENT_FACTORY
        and not has_pack
        and level_key in PACK_RECOMMENDING_LEVELS
    )

    return EvolutionPlan(
        target_dir=target_dir,
        audit=audit,
        path=path,
        steps=build_steps(path, recommend_pack),
        weakest_dimensions=weakest_dimensions(audit),
        pack_resolution=resolution,
        has_factory_pack=has_pack,
        recommend_factory_pack=recommend_pack,
    )


def apply_evolution(plan: EvolutionPlan) -> AppliedEvolution:
    """
    Perform the single scaffolding step the plan calls for.

    Missing baseline artifacts trigger init scaffolding (with the pack when
    it is recommended); otherwise a recommended pack is scaffolded alone.
    Existing files are never overwritten.

    Args:
        plan: Output of plan_evolution

    Returns:
        AppliedEvolution with messages and the scaffold result, if any
    """
    if plan.is_terminal:
        return AppliedEvolution()

    missing = missing_baseline_artifacts(plan.target_dir)
    if missing:
        pack = AutomationPack.AGENT_FACTORY if plan.recommend_factory_pack else AutomationPack.NONE
        logger.info(f"Scaffolding {len(missing)} missing baseline artifact(s)")
        report = run_init(
            InitOptions(path=plan.target_dir, pack=pack.value, force=False),
            allow_existing_map=True,
        )
        if pack == AutomationPack.AGENT_FACTORY:
            message = (
                "Ran 'harness init' with agent-factory pack to scaffold missing structure "
                "and automation"
            )
        else:
            message = "Ran 'harness init' to scaffold missing structure"
        return AppliedEvolution(messages=[message], scaffold=report.scaffold)

    if not plan.recommend_factory_pack:
        return AppliedEvolution()

    scaffold = scaffold_automation_pack(plan.target_dir, AutomationPack.AGENT_FACTORY, force=False)
    messages = []
    if scaffold.created:
        messages.append(
            f"Applied 'agent-factory' automation pack scaffolding "
            f"({len(scaffold.created)} artifact(s))"
        )
    return AppliedEvolution(messages=messages, scaffold=scaffold)


def run_evolve(
    target_path: str | Path,
    apply: bool = False,
    policy: AuditPolicy | None = None,
) -> dict[str, Any]:
    """Plan, optionally apply, and return the evolution document."""
    plan = plan_evolution(target_path, policy)
    applied = apply_evolution(plan) if apply else None
    return plan.to_dict(applied)
