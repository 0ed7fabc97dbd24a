"""Harness CLI entry point."""

import logging
import sys

import typer
from rich.console import Console

from . import __version__
from .audit_command import audit_command
from .doctor_command import doctor_command
from .evolve_command import evolve_command
from .init_command import init_command

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

app = typer.Typer(
    name="harness",
    help="Harness - repository maturity audits for agent-driven development",
    no_args_is_help=True,
)
console = Console()


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"harness version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        envvar="HARNESS_LOG_LEVEL",
        help="Logging level for stderr diagnostics (default: WARNING)",
    ),
) -> None:
    """Harness - repository maturity audits for agent-driven development."""
    level = (log_level or "WARNING").upper()
    if not isinstance(logging.getLevelName(level), int):
        typer.echo(f"Unknown log level: {log_level}", err=True)
        raise typer.Exit(2)
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr, force=True)
    ctx.obj = {"log_level": log_level}


# Register commands
app.command(name="audit")(audit_command)
app.command(name="doctor")(doctor_command)
app.command(name="evolve")(evolve_command)
app.command(name="init")(init_command)


if __name__ == "__main__":
    app()
