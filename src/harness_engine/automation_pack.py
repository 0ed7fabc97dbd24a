"""
Automation pack selection and scaffolding.

Requested packs are "none", "auto" or "agent-factory". "auto" inspects the
target and only selects agent-factory when a JS/TS signal is present.
"""

import logging
import re
from collections.abc import Iterable
from pathlib import Path

from .errors import UnknownAutomationPackError
from .filesystem import IGNORED_DIRS, find_files, make_directory, write_text_file
from .models import AutomationPack, PackResolution, ScaffoldResult
from .templates import pack_files, pack_targets

logger = logging.getLogger(__name__)

ALLOWED_PACKS = [pack.value for pack in AutomationPack]
JS_SOURCE_PATTERN = re.compile(r"\.(ts|tsx|js|jsx|mjs|cjs)$")
NON_JS_STACK_MARKERS = (
    "go.mod",
    "Cargo.toml",
    "pyproject.toml",
    "requirements.txt",
    "pom.xml",
    "build.gradle",
    "Gemfile",
)
PACK_DIRECTORIES = ("scripts", ".github/workflows")

REASON_PACKAGE_JSON = (
    "Detected package.json (Node/JS project). Applying agent-factory automation pack."
)
REASON_JS_WITH_GITHUB = (
    "Detected JS/TS sources with GitHub workflow usage. Applying agent-factory automation pack."
)
REASON_NON_JS_STACK = (
    "Detected non-JS stack signals. Keeping base scaffold; choose stack-specific automation manually."
)
REASON_INSUFFICIENT = (
    "Insufficient stack signals for safe auto-pack selection. Keeping base scaffold."
)
REASON_EXPLICIT = "Explicitly requested agent-factory automation pack."
REASON_NONE = "No optional automation pack selected."


def normalize_automation_pack(raw: str | None) -> AutomationPack:
    """
    Parse a user-supplied pack name.

    Blank input means "none"; matching is case-insensitive.

    Raises:
        UnknownAutomationPackError: For any other value
    """
    value = (raw or "").strip().lower()
    if not value:
        return AutomationPack.NONE
    try:
        return AutomationPack(value)
    except ValueError:
        raise UnknownAutomationPackError(
            f"Unknown automation pack: {raw}",
            allowed=ALLOWED_PACKS,
            hint=(
                "Use '--pack auto' for adaptive selection or "
                "'--pack agent-factory' for explicit scaffolding."
            ),
        ) from None


def has_agent_factory_pack(target_dir: Path) -> bool:
    """True when every agent-factory file is already present."""
    return all(
        (target_dir / target).exists()
        for target in pack_targets(AutomationPack.AGENT_FACTORY)
    )


def recommend_automation_pack(
    target_dir: Path,
    source_depth: int = 2,
    ignored_dirs: Iterable[str] = IGNORED_DIRS,
) -> PackResolution:
    """
    Pick a pack from stack signals (the "auto" resolution).

    Args:
        target_dir: Repository root
        source_depth: How deep to look for JS/TS sources

    Returns:
        PackResolution with requested="auto"
    """
    has_manifest = (target_dir / "package.json").exists()
    has_js_sources = bool(find_files(target_dir, JS_SOURCE_PATTERN, source_depth, ignored_dirs))
    has_github = (target_dir / ".github").exists()
    has_non_js_markers = any((target_dir / marker).exists() for marker in NON_JS_STACK_MARKERS)

    if has_manifest:
        selected, reason = AutomationPack.AGENT_FACTORY, REASON_PACKAGE_JSON
    elif has_js_sources and has_github:
        selected, reason = AutomationPack.AGENT_FACTORY, REASON_JS_WITH_GITHUB
    elif has_non_js_markers and not has_js_sources:
        selected, reason = AutomationPack.NONE, REASON_NON_JS_STACK
    else:
        selected, reason = AutomationPack.NONE, REASON_INSUFFICIENT

    logger.debug(f"Auto pack selection for {target_dir}: {selected.value}")
    return PackResolution(requested=AutomationPack.AUTO, selected=selected, reason=reason)


def resolve_automation_pack(
    target_dir: Path,
    requested: AutomationPack,
    source_depth: int = 2,
    ignored_dirs: Iterable[str] = IGNORED_DIRS,
) -> PackResolution:
    """Resolve a requested pack to a concrete selection."""
    if requested == AutomationPack.AUTO:
        return recommend_automation_pack(target_dir, source_depth, ignored_dirs)
    if requested == AutomationPack.AGENT_FACTORY:
        return PackResolution(requested, AutomationPack.AGENT_FACTORY, REASON_EXPLICIT)
    return PackResolution(requested, AutomationPack.NONE, REASON_NONE)


def scaffold_automation_pack(
    target_dir: Path,
    pack: AutomationPack,
    force: bool = False,
) -> ScaffoldResult:
    """
    Write a pack's scripts and workflows into target_dir.

    Existing files are kept unless force is set.

    Args:
        target_dir: Repository root
        pack: Selected pack (NONE writes nothing)
        force: Overwrite existing files

    Returns:
        ScaffoldResult listing created and already-present artifacts
    """
    result = ScaffoldResult()
    if pack == AutomationPack.NONE:
        return result

    for directory in PACK_DIRECTORIES:
        full_path = target_dir / directory
        if not full_path.exists():
            make_directory(full_path)
            result.record(f"{directory}/", created=True)

    for template in pack_files(pack):
        full_path = target_dir / template.path
        if full_path.exists() and not force:
            result.record(template.path, created=False)
            continue
        write_text_file(full_path, template.content)
        result.record(template.path, created=True)
        logger.info(f"Created {template.path}")

    return result
