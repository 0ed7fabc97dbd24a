"""
Audit runner - validate the target, build context, score, and total.
"""

import logging
from pathlib import Path

from .config import AuditPolicy
from .context import build_runtime_context
from .errors import TargetNotFoundError
from .maturity import resolve_maturity_level
from .models import AuditResult
from .scoring import apply_scoring

logger = logging.getLogger(__name__)

WELL_STRUCTURED_RECOMMENDATION = (
    "Project is well-structured. Consider evolving to next maturity level."
)


def resolve_target(target_path: str | Path) -> Path:
    """
    Resolve a user-supplied target to an absolute directory.

    Raises:
        TargetNotFoundError: If the path does not exist
    """
    target_dir = Path(target_path).expanduser().resolve()
    if not target_dir.exists():
        raise TargetNotFoundError(str(target_dir))
    return target_dir


def run_audit(target_path: str | Path, policy: AuditPolicy | None = None) -> AuditResult:
    """
    Audit a repository across all six dimensions.

    Args:
        target_path: Directory to audit
        policy: Thresholds and scan depths (defaults when omitted)

    Returns:
        AuditResult with scores, maturity level and recommendations

    Raises:
        TargetNotFoundError: If target_path does not exist
    """
    target_dir = resolve_target(target_path)
    logger.info(f"Auditing {target_dir}")

    context = build_runtime_context(target_dir, policy)
    result = AuditResult(project=target_dir.name)
    apply_scoring(context, result)

    result.maturity_level = resolve_maturity_level(result.total_score)
    if not result.recommendations:
        result.recommend(WELL_STRUCTURED_RECOMMENDATION)

    logger.info(
        f"Audit of {result.project}: {result.total_score}/{result.max_score} "
        f"({result.maturity_level})"
    )
    return result
