"""The harness doctor command implementation."""

from pathlib import Path

import typer

from harness_engine.doctor import run_doctor
from harness_engine.errors import HarnessError

from .console import render_doctor
from .output import emit_json, fail, load_policy


def doctor_command(
    ctx: typer.Context,
    path: str = typer.Argument(".", help="Repository to check"),
    pretty: bool = typer.Option(
        False,
        "--pretty",
        help="Render a checklist table instead of JSON",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        help="Config file (overrides HARNESS_CONFIG_PATH and .harness.yaml)",
    ),
) -> None:
    """Check a repository's harness setup and suggest fixes.

    Every failing or warning check carries a concrete fix.
    """
    try:
        policy = load_policy(ctx, path, config)
        report = run_doctor(path, policy)
    except HarnessError as e:
        fail(e)

    if pretty:
        render_doctor(report.to_dict())
    else:
        emit_json(report.to_dict())
