"""Template bodies for scaffolded repository files.

Baseline documents are rendered from the functions below. Automation pack
files are bundled under packs/<name>/ and listed in that pack's
manifest.yaml.
"""

import json
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any

import yaml

from .models import AutomationPack

PACKS_DIR = Path(__file__).parent / "packs"
PACK_DIRECTORIES = {AutomationPack.AGENT_FACTORY: "agent_factory"}


@dataclass(frozen=True)
class TemplateFile:
    """A file to scaffold: path relative to the target and its content."""

    path: str
    content: str


def _today() -> str:
    return date.today().isoformat()


def agents_md_template(project_name: str) -> str:
    return f"""# AGENTS.md

## Repository Overview

{project_name} - [Brief description of the project].

## Architecture

See ARCHITECTURE.md for domain map, package layering, and dependency rules.

## Documentation Map

| Topic | Location | Status |
|-------|----------|--------|
| Architecture | ARCHITECTURE.md | Current |
| Design Docs | docs/design-docs/index.md | Current |
| Core Beliefs | docs/design-docs/core-beliefs.md | Current |
| Product Specs | docs/product-specs/index.md | Current |
| Active Plans | docs/exec-plans/active/ | Current |
| Completed Plans | docs/exec-plans/completed/ | Current |
| Technical Debt | docs/exec-plans/tech-debt-tracker.md | Current |
| Risk Policy | risk-policy.json | Current |
| Golden Principles | docs/golden-principles.md | Current |
| References | docs/references/ | Current |

## Development Workflow

1. Receive task via prompt
2. Read this file, then follow pointers to relevant docs
3. Implement changes following ARCHITECTURE.md layer rules
4. Run linters and tests before asking for review
5. Self-review changes for correctness and style
6. Open PR with concise summary

## Key Constraints

- Dependencies flow forward only: Types > Config > Repo > Service > Runtime > UI
- Cross-cutting concerns enter ONLY through Providers
- Validate data at boundaries
- All knowledge lives in-repo, not in external tools

## Golden Principles

See docs/golden-principles.md for the full set of mechanical taste rules.
"""


def architecture_md_template(project_name: str) -> str:
    return f"""# Architecture - {project_name}

## Domain Map

| Domain | Description | Quality Grade |
|--------|-------------|---------------|
| Core | Core business logic | - |
| Auth | Authentication and authorization | - |
| UI | User interface components | - |

## Layered Architecture

Each domain follows a strict layer ordering. Dependencies flow forward only.

```
Types --> Config --> Repo --> Service --> Runtime --> UI
Providers (auth, connectors, telemetry, feature flags) enter through explicit interfaces
```

| Layer | Responsibility | May Import From |
|-------|---------------|-----------------|
| Types | Data shapes, enums, interfaces | Utils |
| Config | Configuration loading, validation | Types, Utils |
| Repo | Data access, storage | Config, Types, Utils |
| Service | Business logic orchestration | Repo, Config, Types, Utils |
| Runtime | Process lifecycle, scheduling | Service, Config, Types, Utils |
| UI | User-facing presentation | Runtime, Service, Types, Utils |

## Enforcement

- [ ] Linter rule for import direction
- [ ] Structural tests for layer violations
- [ ] CI gate that fails on violations
"""


def golden_principles_template() -> str:
    return """# Golden Principles

Opinionated mechanical rules that encode human taste. They go beyond standard
linters and are enforced in CI.

## Shared utilities over hand-rolled helpers

Centralize invariants in shared modules. Never duplicate utility logic across domains.

## Validate at boundaries

Parse and validate all external data where it enters the system. Never access unvalidated shapes.

## Boring technology preferred

Choose composable, stable, well-documented dependencies.

## Single source of truth

Every piece of knowledge has exactly one canonical location.

## Actionable errors

Error messages say what happened and what to do next.

## Anti-patterns

- Nested ternaries and deep nesting; prefer early returns
- Magic strings; use enums or constants
- Stale docs; delete or update them
"""


def core_beliefs_template() -> str:
    return """# Core Beliefs

Agent-first operating principles that guide development decisions.

## 1. Repository is the Single Source of Truth

If it is not in the repo, it does not exist to the agent.

## 2. Constraints Enable Speed

Strict architectural rules, enforced mechanically, let agents ship fast without drift.

## 3. Taste Is Captured Once, Enforced Continuously

Engineering judgment is encoded into golden principles and tooling.

## 4. Technical Debt Is a High-Interest Loan

Pay it down continuously in small increments.

## 5. Progressive Disclosure Over Information Dumps

Give agents a short map and teach them where to look.
"""


def tech_debt_tracker_template() -> str:
    today = _today()
    return f"""# Technical Debt Tracker

Track known technical debt with priority and ownership.

| ID | Description | Domain | Priority | Status | Created | Updated |
|----|-------------|--------|----------|--------|---------|---------|
| TD-001 | Example: implement dependency linter | Core | High | Open | {today} | {today} |

## Priority Definitions

- **Critical**: Actively causing bugs or blocking features
- **High**: Will cause problems soon
- **Medium**: Noticeable drag on velocity
- **Low**: Address opportunistically
"""


def design_docs_index_template() -> str:
    return f"""# Design Documents Index

Registry of all design documents with verification status.

| Document | Status | Last Verified | Owner |
|----------|--------|---------------|-------|
| core-beliefs.md | Current | {_today()} | Team |

## Status Definitions

- **Current**: Verified to match actual implementation
- **Stale**: Known to be out of date, needs update
- **Draft**: In progress, not yet finalized
- **Archived**: No longer relevant, kept for reference
"""


def product_specs_index_template() -> str:
    return """# Product Specifications Index

Registry of all product specifications.

| Spec | Status | Priority | Owner |
|------|--------|----------|-------|
| - | - | - | - |

## Adding a New Spec

1. Create a new markdown file in this directory
2. Add it to the table above
3. Include problem statement, proposed solution and acceptance criteria
"""


def risk_policy_template(pack: AutomationPack = AutomationPack.NONE) -> str:
    """Render risk-policy.json; the agent-factory variant adds merge tiers for its gates."""
    policy: dict[str, Any]
    if pack == AutomationPack.AGENT_FACTORY:
        policy = {
            "version": 1,
            "description": (
                "Agent-factory policy template for high-autonomy repositories. "
                "High-risk changes require human review and stronger CI gates."
            ),
            "tiers": ["low", "medium", "high"],
            "riskTierRules": {
                "high": [
                    "src/security/",
                    "src/auth/",
                    ".github/workflows/",
                    "risk-policy.json",
                    "AGENTS.md",
                    "ARCHITECTURE.md",
                ],
                "low": ["**"],
            },
            "mergePolicy": {
                "high": {
                    "requiredChecks": ["ci", "structural-lint", "risk-policy-gate"],
                    "requiresHumanReview": True,
                    "minApprovals": 1,
                },
                "low": {"requiredChecks": ["ci"], "requiresHumanReview": False},
            },
            "docsDriftRules": {
                "watchPaths": ["src/", "scripts/", ".github/workflows/"],
                "mustUpdate": ["AGENTS.md", "ARCHITECTURE.md", "docs/golden-principles.md"],
            },
        }
    else:
        policy = {
            "version": 1,
            "tiers": ["low", "medium", "high"],
            "watchPaths": ["src/", "docs/"],
            "docsDriftRules": [
                {
                    "watch": "src/",
                    "docs": [
                        "ARCHITECTURE.md",
                        "docs/design-docs/index.md",
                        "docs/golden-principles.md",
                    ],
                }
            ],
        }
    return json.dumps(policy, indent=2) + "\n"


def baseline_files(project_name: str, pack: AutomationPack) -> list[TemplateFile]:
    """Baseline documents in creation order."""
    return [
        TemplateFile("AGENTS.md", agents_md_template(project_name)),
        TemplateFile("ARCHITECTURE.md", architecture_md_template(project_name)),
        TemplateFile("risk-policy.json", risk_policy_template(pack)),
        TemplateFile("docs/golden-principles.md", golden_principles_template()),
        TemplateFile("docs/design-docs/index.md", design_docs_index_template()),
        TemplateFile("docs/design-docs/core-beliefs.md", core_beliefs_template()),
        TemplateFile("docs/product-specs/index.md", product_specs_index_template()),
        TemplateFile("docs/exec-plans/tech-debt-tracker.md", tech_debt_tracker_template()),
    ]


def get_pack_dir(pack: AutomationPack) -> Path:
    """Get the path to a bundled automation pack.

    Raises:
        FileNotFoundError: If the pack is not bundled with the package
    """
    pack_dir = PACKS_DIR / PACK_DIRECTORIES.get(pack, "")
    if pack not in PACK_DIRECTORIES or not pack_dir.is_dir():
        raise FileNotFoundError(
            f"Automation pack '{pack.value}' not found at {pack_dir}. "
            "This may indicate a packaging issue."
        )
    return pack_dir


def load_pack_manifest(pack_dir: Path) -> dict[str, Any]:
    """Load a pack's manifest.yaml."""
    manifest_path = pack_dir / "manifest.yaml"
    if not manifest_path.exists():
        raise FileNotFoundError(f"Manifest not found at {manifest_path}")
    with open(manifest_path) as f:
        return yaml.safe_load(f) or {}


def pack_files(pack: AutomationPack) -> list[TemplateFile]:
    """Files of a bundled automation pack, in manifest order."""
    pack_dir = get_pack_dir(pack)
    manifest = load_pack_manifest(pack_dir)
    files = []
    for entry in manifest.get("files", []):
        source = pack_dir / entry["source"]
        files.append(TemplateFile(entry["target"], source.read_text(encoding="utf-8")))
    return files


def pack_targets(pack: AutomationPack) -> list[str]:
    """Target paths a pack writes, without reading file bodies."""
    manifest = load_pack_manifest(get_pack_dir(pack))
    return [entry["target"] for entry in manifest.get("files", [])]
