"""Harness Configuration

Configuration loading with environment variable support and sensible defaults.

Environment Variables:
    HARNESS_CONFIG_PATH: Path to an explicit config file
    HARNESS_LOG_LEVEL: Override logging level from config

Configuration Schema:
    thresholds:
        map_file_max_lines: int - Longest AGENTS.md that still scores (default: 150)
        enforcement_min_signals: int - Enforcement evidence needed to score (default: 2)
        diagnosability_min_signals: int - CLI signals replacing observability (default: 2)
        single_package_dependency_limit: int - Lean single-package bound (default: 20)
        workspace_average_dependency_limit: int - Lean workspace average bound (default: 30)
        ... see DEFAULT_CONFIG for the full list
    scan:
        default_depth: int - Depth for map files and docs (default: 3)
        extra_ignored_dirs: list - Directory names skipped in addition to the built-ins
    logging:
        level: str - Logging level (default: "WARNING")
"""

import copy
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".harness.yaml"

# Default configuration values
DEFAULT_CONFIG: dict[str, Any] = {
    "thresholds": {
        "map_file_max_lines": 150,
        "design_decision_min_rows": 3,
        "enforcement_min_signals": 2,
        "diagnosability_min_signals": 2,
        "single_package_dependency_limit": 20,
        "workspace_average_dependency_limit": 30,
        "golden_principles_min": 5,
        "rich_ci_gate_count": 3,
        "workflow_gate_min": 2,
        "gardening_verified_docs_min": 3,
        "doctor_ci_gate_min": 2,
    },
    "scan": {
        "default_depth": 3,
        "cli_manifest_depth": 4,
        "workspace_manifest_depth": 3,
        "source_depth": 5,
        "pack_source_depth": 2,
        "extra_ignored_dirs": [],
    },
    "logging": {
        "level": "WARNING",
    },
}


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge override dict into base dict.

    Args:
        base: Base dictionary (defaults)
        override: Override dictionary (user config)

    Returns:
        Merged dictionary with override values taking precedence
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _read_yaml(path: Path) -> dict[str, Any]:
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise yaml.YAMLError(f"expected a mapping at top level, got {type(data).__name__}")
    return data


def load_config(
    target_dir: Path | None = None,
    config_path: str | Path | None = None,
) -> dict[str, Any]:
    """
    Load configuration from YAML with environment variable overrides.

    Configuration Loading Order (later overrides earlier):
    1. Default values (DEFAULT_CONFIG)
    2. Config file (config_path, HARNESS_CONFIG_PATH, or <target>/.harness.yaml)
    3. Environment variable overrides (HARNESS_LOG_LEVEL)

    Every loaded file goes through validate_config(). A repo-local
    .harness.yaml that fails is ignored with a warning; an explicit file
    that fails is an error.

    Args:
        target_dir: Audited directory, searched for an optional .harness.yaml
        config_path: Explicit config file path (overrides HARNESS_CONFIG_PATH)

    Returns:
        Merged configuration dictionary

    Raises:
        ConfigurationError: If an explicit config file is missing, is not
            valid YAML, or holds values of the wrong shape
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    file_path = config_path or os.environ.get("HARNESS_CONFIG_PATH")

    if file_path:
        # Explicit config path - must exist and be valid
        resolved_path = Path(file_path).expanduser().resolve()
        if not resolved_path.is_file():
            raise ConfigurationError(
                f"Config file not found: {file_path}", path=str(resolved_path)
            )
        try:
            config = _deep_merge(config, _read_yaml(resolved_path))
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in config file: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Cannot read config file: {e}") from e
        validate_config(config)
        logger.info(f"Loaded configuration from: {resolved_path}")
    elif target_dir is not None:
        # Repo-local config is optional
        local_path = Path(target_dir) / CONFIG_FILE_NAME
        if local_path.is_file():
            try:
                candidate = _deep_merge(config, _read_yaml(local_path))
                validate_config(candidate)
                config = candidate
                logger.info(f"Loaded configuration from: {local_path}")
            except yaml.YAMLError as e:
                logger.warning(f"Invalid YAML in {local_path} (ignoring): {e}")
            except ConfigurationError as e:
                logger.warning(f"Invalid configuration in {local_path} (ignoring): {e.message}")
            except OSError as e:
                logger.warning(f"Cannot read {local_path} (ignoring): {e}")
        else:
            logger.debug("No config file found, using defaults")

    log_level_override = os.environ.get("HARNESS_LOG_LEVEL")
    if log_level_override:
        config["logging"] = {**(config.get("logging") or {}), "level": log_level_override}

    return config


def _section(config: dict[str, Any], name: str) -> dict[str, Any]:
    section = config.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigurationError(
            f"Configuration section '{name}' must be a mapping, got {type(section).__name__}"
        )
    return section


def _as_int(section: dict[str, Any], key: str, defaults: dict[str, Any]) -> int:
    value = section.get(key, defaults[key])
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigurationError(
            f"Configuration value '{key}' must be a non-negative integer, got {value!r}"
        )
    return value


@dataclass(frozen=True)
class AuditPolicy:
    """Tunable thresholds and scan depths used by detectors and scorers."""

    map_file_max_lines: int = 150
    design_decision_min_rows: int = 3
    enforcement_min_signals: int = 2
    diagnosability_min_signals: int = 2
    single_package_dependency_limit: int = 20
    workspace_average_dependency_limit: int = 30
    golden_principles_min: int = 5
    rich_ci_gate_count: int = 3
    workflow_gate_min: int = 2
    gardening_verified_docs_min: int = 3
    doctor_ci_gate_min: int = 2
    default_depth: int = 3
    cli_manifest_depth: int = 4
    workspace_manifest_depth: int = 3
    source_depth: int = 5
    pack_source_depth: int = 2
    extra_ignored_dirs: frozenset[str] = frozenset()

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> "AuditPolicy":
        """Build a policy from a load_config() dictionary."""
        thresholds = _section(config, "thresholds")
        scan = _section(config, "scan")
        default_thresholds = DEFAULT_CONFIG["thresholds"]
        default_scan = DEFAULT_CONFIG["scan"]

        extra_dirs = scan.get("extra_ignored_dirs") or []
        if not isinstance(extra_dirs, list) or not all(
            isinstance(name, str) for name in extra_dirs
        ):
            raise ConfigurationError(
                "Configuration value 'extra_ignored_dirs' must be a list of directory names"
            )

        values: dict[str, Any] = {
            key: _as_int(thresholds, key, default_thresholds)
            for key in default_thresholds
        }
        values.update(
            {
                key: _as_int(scan, key, default_scan)
                for key in default_scan
                if key != "extra_ignored_dirs"
            }
        )
        return cls(extra_ignored_dirs=frozenset(extra_dirs), **values)


def get_log_level(config: dict[str, Any]) -> str:
    """Extract the configured logging level name."""
    return str(_section(config, "logging").get("level", "WARNING")).upper()


def validate_config(config: dict[str, Any]) -> None:
    """
    Check that a loaded configuration can build a policy and a log level.

    Raises:
        ConfigurationError: If a section is not a mapping or a value has the
            wrong type
    """
    AuditPolicy.from_config(config)
    get_log_level(config)
