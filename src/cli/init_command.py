"""The harness init command implementation."""

import typer

from harness_engine.errors import HarnessError
from harness_engine.scaffold import InitOptions, run_init

from .output import emit_json, fail


def init_command(
    path: str = typer.Argument(".", help="Repository to scaffold"),
    name: str | None = typer.Option(
        None,
        "--name",
        help="Project name (defaults to the directory name)",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite existing files, including AGENTS.md",
    ),
    pack: str = typer.Option(
        "none",
        "--pack",
        help="Automation pack: none, auto or agent-factory",
    ),
) -> None:
    """Scaffold the docs structure agents need.

    Creates AGENTS.md, ARCHITECTURE.md, risk-policy.json and the docs/
    tree, plus an optional automation pack. Existing files are kept unless
    --force is given.
    """
    try:
        report = run_init(InitOptions(path=path, name=name, force=force, pack=pack))
    except HarnessError as e:
        fail(e)

    emit_json(report.to_dict())
