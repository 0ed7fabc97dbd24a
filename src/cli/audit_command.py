"""The harness audit command implementation."""

from pathlib import Path

import typer

from harness_engine.audit import run_audit
from harness_engine.errors import HarnessError

from .console import render_audit
from .output import emit_json, fail, load_policy


def audit_command(
    ctx: typer.Context,
    path: str = typer.Argument(".", help="Repository to audit"),
    pretty: bool = typer.Option(
        False,
        "--pretty",
        help="Render tables instead of JSON",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        help="Config file (overrides HARNESS_CONFIG_PATH and .harness.yaml)",
    ),
) -> None:
    """Score a repository across six maturity dimensions.

    Prints the audit as JSON: per-dimension scores and findings, the total
    (0-18), the maturity level and recommendations.
    """
    try:
        policy = load_policy(ctx, path, config)
        result = run_audit(path, policy)
    except HarnessError as e:
        fail(e)

    if pretty:
        render_audit(result.to_dict())
    else:
        emit_json(result.to_dict())
