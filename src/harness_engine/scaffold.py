"""
Baseline scaffolding - the `init` operation.

Creates the docs structure, map file, architecture doc and policy file,
plus an optional automation pack. Re-running without force only fills in
what is missing.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .audit import resolve_target
from .automation_pack import (
    normalize_automation_pack,
    resolve_automation_pack,
    scaffold_automation_pack,
)
from .context import MAP_FILE
from .errors import ScaffoldConflictError
from .filesystem import make_directory, write_text_file
from .models import AutomationPack, PackResolution, ScaffoldResult
from .templates import baseline_files

logger = logging.getLogger(__name__)

BASELINE_DIRECTORIES: tuple[str, ...] = (
    "docs/design-docs",
    "docs/exec-plans/active",
    "docs/exec-plans/completed",
    "docs/generated",
    "docs/product-specs",
    "docs/references",
)
BASELINE_FILES: tuple[str, ...] = (
    "AGENTS.md",
    "ARCHITECTURE.md",
    "risk-policy.json",
    "docs/golden-principles.md",
    "docs/design-docs/index.md",
    "docs/design-docs/core-beliefs.md",
    "docs/product-specs/index.md",
    "docs/exec-plans/tech-debt-tracker.md",
)
# Everything whose absence makes `evolve --apply` re-run baseline scaffolding
BASELINE_ARTIFACTS: tuple[str, ...] = BASELINE_FILES + (
    "docs/exec-plans/active",
    "docs/exec-plans/completed",
    "docs/generated",
    "docs/references",
)


@dataclass
class InitOptions:
    """Options accepted by run_init."""

    path: str | Path = "."
    name: str | None = None
    force: bool = False
    pack: str | None = None


@dataclass
class InitReport:
    """Outcome of an init run."""

    project: str
    target: Path
    resolution: PackResolution
    scaffold: ScaffoldResult
    next_steps: list[str]

    def to_dict(self) -> dict[str, Any]:
        requested = self.resolution.requested
        selected = self.resolution.selected
        return {
            "command": "init",
            "project": self.project,
            "target": str(self.target),
            "requested_automation_pack": None if requested == AutomationPack.NONE else requested.value,
            "automation_pack": None if selected == AutomationPack.NONE else selected.value,
            "automation_pack_reason": self.resolution.reason,
            **self.scaffold.to_dict(),
            "next_steps": list(self.next_steps),
        }


def missing_baseline_artifacts(target_dir: Path) -> list[str]:
    """Baseline artifacts not yet present in target_dir."""
    return [artifact for artifact in BASELINE_ARTIFACTS if not (target_dir / artifact).exists()]


def scaffold_baseline(
    target_dir: Path,
    project_name: str,
    pack: AutomationPack = AutomationPack.NONE,
    force: bool = False,
) -> ScaffoldResult:
    """
    Create baseline directories and files, then the selected pack.

    Args:
        target_dir: Existing repository root
        project_name: Name rendered into AGENTS.md and ARCHITECTURE.md
        pack: Resolved automation pack
        force: Overwrite existing files

    Returns:
        ScaffoldResult listing created and already-present artifacts

    Raises:
        ScaffoldWriteError: If a directory or file cannot be written
    """
    result = ScaffoldResult()

    for directory in BASELINE_DIRECTORIES:
        full_path = target_dir / directory
        if full_path.exists():
            result.record(f"{directory}/", created=False)
            continue
        make_directory(full_path)
        result.record(f"{directory}/", created=True)

    for template in baseline_files(project_name, pack):
        full_path = target_dir / template.path
        if full_path.exists() and not force:
            result.record(template.path, created=False)
            continue
        write_text_file(full_path, template.content)
        result.record(template.path, created=True)
        logger.info(f"Created {template.path}")

    result.extend(scaffold_automation_pack(target_dir, pack, force))
    return result


def build_next_steps(resolution: PackResolution) -> list[str]:
    steps = [
        f"Edit {MAP_FILE} - fill in the project description",
        "Edit ARCHITECTURE.md - define your business domains",
        "Review risk-policy.json - set tiers and docs drift rules for your repo",
        "Edit docs/golden-principles.md - customize rules for your project",
        "Run 'harness audit .' to see your starting score",
    ]
    if resolution.selected == AutomationPack.AGENT_FACTORY:
        steps.extend(
            [
                "Review generated scripts in scripts/ and tune checks for your stack and taste",
                "Enable or adapt new workflows in .github/workflows/ to match your branch protections",
                "Run 'node scripts/lint-structure.mjs' locally to baseline structural checks",
            ]
        )
    elif resolution.requested == AutomationPack.AUTO:
        steps.append(f"Auto-pack selection: {resolution.reason}")
    return steps


def run_init(options: InitOptions, allow_existing_map: bool = False) -> InitReport:
    """
    Scaffold a repository for agent-driven development.

    Args:
        options: Target path, project name, force flag and pack request
        allow_existing_map: Proceed when AGENTS.md exists (files are still kept)

    Returns:
        InitReport describing what was created

    Raises:
        TargetNotFoundError: If the target does not exist
        UnknownAutomationPackError: If the pack name is not recognized
        ScaffoldConflictError: If AGENTS.md exists and neither force nor
            allow_existing_map is set
        ScaffoldWriteError: If a directory or file cannot be written
    """
    requested = normalize_automation_pack(options.pack)
    target_dir = resolve_target(options.path)
    project_name = options.name or target_dir.name

    if (target_dir / MAP_FILE).exists() and not (options.force or allow_existing_map):
        raise ScaffoldConflictError(
            f"{MAP_FILE} already exists. Use --force to overwrite.",
            hint="Run 'harness audit' to assess your current setup instead.",
        )

    resolution = resolve_automation_pack(target_dir, requested)
    logger.info(f"Initializing {target_dir} (pack: {resolution.selected.value})")
    scaffold = scaffold_baseline(target_dir, project_name, resolution.selected, options.force)

    return InitReport(
        project=project_name,
        target=target_dir,
        resolution=resolution,
        scaffold=scaffold,
        next_steps=build_next_steps(resolution),
    )
