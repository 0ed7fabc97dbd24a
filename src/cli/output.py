"""Shared plumbing for commands: JSON output, error envelope, config loading."""

import json
import logging
from pathlib import Path
from typing import Any, NoReturn

import typer

from harness_engine.config import AuditPolicy, get_log_level, load_config
from harness_engine.errors import HarnessError

logger = logging.getLogger(__name__)


def emit_json(payload: dict[str, Any]) -> None:
    """Write a JSON document to stdout."""
    typer.echo(json.dumps(payload, indent=2))


def fail(error: HarnessError) -> NoReturn:
    """Write the error envelope to stderr and exit with status 1."""
    typer.echo(json.dumps(error.to_dict()), err=True)
    raise typer.Exit(1)


def apply_config_log_level(ctx: typer.Context, config: dict[str, Any]) -> None:
    """Use the configured level unless --log-level (or its env var) was given."""
    if (ctx.obj or {}).get("log_level"):
        return
    level = get_log_level(config)
    if isinstance(logging.getLevelName(level), int):
        logging.getLogger().setLevel(level)
    else:
        logger.warning(f"Ignoring unknown logging level in config: {level}")


def load_policy(ctx: typer.Context, target: str, config_path: Path | None) -> AuditPolicy:
    """
    Load configuration for a target and build its audit policy.

    Raises:
        ConfigurationError: If an explicit config file is missing or invalid
    """
    config = load_config(Path(target), config_path)
    apply_config_log_level(ctx, config)
    return AuditPolicy.from_config(config)
