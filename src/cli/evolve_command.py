"""The harness evolve command implementation."""

from pathlib import Path

import typer

from harness_engine.errors import HarnessError
from harness_engine.evolution import run_evolve

from .console import render_evolution
from .output import emit_json, fail, load_policy


def evolve_command(
    ctx: typer.Context,
    path: str = typer.Argument(".", help="Repository to evolve"),
    apply: bool = typer.Option(
        False,
        "--apply",
        help="Scaffold missing structure or the recommended automation pack",
    ),
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
    """Plan the steps to the next maturity level.

    With --apply, runs at most one scaffolding step. Existing files are
    never overwritten.
    """
    try:
        policy = load_policy(ctx, path, config)
        plan = run_evolve(path, apply=apply, policy=policy)
    except HarnessError as e:
        fail(e)

    if pretty:
        render_evolution(plan)
    else:
        emit_json(plan)
