"""Unit tests for configuration loading and audit policy."""

import logging
from pathlib import Path

import pytest

from harness_engine.config import (
    DEFAULT_CONFIG,
    AuditPolicy,
    get_log_level,
    load_config,
)
from harness_engine.errors import ConfigurationError
from tests.helpers import write_file


@pytest.mark.usefixtures("clean_env")
class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults(self, temp_project: Path):
        """Without any config file the defaults are returned."""
        config = load_config(temp_project)

        assert config == DEFAULT_CONFIG

    def test_defaults_are_not_shared(self, temp_project: Path):
        """Mutating a loaded config leaves the defaults alone."""
        config = load_config(temp_project)
        config["thresholds"]["map_file_max_lines"] = 1

        assert DEFAULT_CONFIG["thresholds"]["map_file_max_lines"] == 150

    def test_repo_local_file(self, temp_project: Path):
        """.harness.yaml in the target is merged over the defaults."""
        write_file(temp_project, ".harness.yaml", "thresholds:\n  map_file_max_lines: 200\n")

        config = load_config(temp_project)

        assert config["thresholds"]["map_file_max_lines"] == 200
        assert config["thresholds"]["enforcement_min_signals"] == 2

    def test_invalid_repo_local_file_is_ignored(self, temp_project: Path):
        """A broken local file falls back to defaults."""
        write_file(temp_project, ".harness.yaml", "thresholds: [unclosed\n")

        config = load_config(temp_project)

        assert config == DEFAULT_CONFIG

    @pytest.mark.parametrize(
        "content",
        [
            "thresholds:\n  - 1\n",
            "scan: 3\n",
            "logging: [INFO]\n",
            "thresholds:\n  map_file_max_lines: lots\n",
            "scan:\n  extra_ignored_dirs: vendor\n",
        ],
        ids=["list-section", "scalar-section", "list-logging", "wrong-type-value", "scalar-ignore-list"],
    )
    def test_malformed_repo_local_file_is_ignored(self, temp_project: Path, caplog, content: str):
        """A local file with sections or values of the wrong shape falls back to defaults."""
        write_file(temp_project, ".harness.yaml", content)

        with caplog.at_level(logging.WARNING, logger="harness_engine.config"):
            config = load_config(temp_project)

        assert config == DEFAULT_CONFIG
        assert AuditPolicy.from_config(config) == AuditPolicy()
        assert "Invalid configuration" in caplog.text

    def test_env_config_path(self, temp_project: Path, tmp_path: Path, monkeypatch):
        """HARNESS_CONFIG_PATH takes precedence over the local file."""
        write_file(temp_project, ".harness.yaml", "thresholds:\n  map_file_max_lines: 200\n")
        env_file = write_file(tmp_path, "env.yaml", "thresholds:\n  map_file_max_lines: 90\n")
        monkeypatch.setenv("HARNESS_CONFIG_PATH", str(env_file))

        config = load_config(temp_project)

        assert config["thresholds"]["map_file_max_lines"] == 90

    def test_explicit_path_beats_env(self, tmp_path: Path, monkeypatch):
        """An explicit path overrides HARNESS_CONFIG_PATH."""
        env_file = write_file(tmp_path, "env.yaml", "scan:\n  default_depth: 1\n")
        cli_file = write_file(tmp_path, "cli.yaml", "scan:\n  default_depth: 2\n")
        monkeypatch.setenv("HARNESS_CONFIG_PATH", str(env_file))

        config = load_config(None, cli_file)

        assert config["scan"]["default_depth"] == 2

    def test_missing_explicit_file(self, tmp_path: Path):
        """A named config file must exist."""
        with pytest.raises(ConfigurationError, match="Config file not found"):
            load_config(None, tmp_path / "missing.yaml")

    def test_invalid_explicit_file(self, tmp_path: Path):
        """A named config file must be valid YAML."""
        bad = write_file(tmp_path, "bad.yaml", "thresholds: [unclosed\n")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_config(None, bad)

    def test_non_mapping_file(self, tmp_path: Path):
        """A top-level list is rejected."""
        bad = write_file(tmp_path, "list.yaml", "- a\n- b\n")

        with pytest.raises(ConfigurationError):
            load_config(None, bad)

    @pytest.mark.parametrize(
        "content", ["thresholds:\n  - 1\n", "scan: 3\n", "thresholds:\n  map_file_max_lines: lots\n"]
    )
    def test_malformed_explicit_file(self, tmp_path: Path, content: str):
        """A named config file with values of the wrong shape is an error."""
        bad = write_file(tmp_path, "bad.yaml", content)

        with pytest.raises(ConfigurationError, match="must be"):
            load_config(None, bad)

    def test_log_level_env_override(self, temp_project: Path, monkeypatch):
        """HARNESS_LOG_LEVEL wins over the file."""
        write_file(temp_project, ".harness.yaml", "logging:\n  level: INFO\n")
        monkeypatch.setenv("HARNESS_LOG_LEVEL", "debug")

        config = load_config(temp_project)

        assert get_log_level(config) == "DEBUG"


class TestAuditPolicy:
    """Tests for AuditPolicy.from_config."""

    def test_defaults_match(self):
        """The default config builds the default policy."""
        assert AuditPolicy.from_config(DEFAULT_CONFIG) == AuditPolicy()

    def test_overrides(self):
        """Thresholds, depths and ignore names are applied."""
        policy = AuditPolicy.from_config(
            {
                "thresholds": {"golden_principles_min": 3},
                "scan": {"source_depth": 2, "extra_ignored_dirs": ["vendor"]},
            }
        )

        assert policy.golden_principles_min == 3
        assert policy.source_depth == 2
        assert policy.extra_ignored_dirs == frozenset({"vendor"})
        assert policy.map_file_max_lines == 150

    @pytest.mark.parametrize("value", [-1, "ten", True, 1.5])
    def test_rejects_bad_numbers(self, value):
        """Thresholds must be non-negative integers."""
        with pytest.raises(ConfigurationError, match="map_file_max_lines"):
            AuditPolicy.from_config({"thresholds": {"map_file_max_lines": value}})

    def test_rejects_bad_ignored_dirs(self):
        """extra_ignored_dirs must be a list of strings."""
        with pytest.raises(ConfigurationError, match="extra_ignored_dirs"):
            AuditPolicy.from_config({"scan": {"extra_ignored_dirs": "vendor"}})

    @pytest.mark.parametrize("section", ["thresholds", "scan"])
    def test_rejects_non_mapping_sections(self, section: str):
        """Sections must be mappings."""
        with pytest.raises(ConfigurationError, match=f"'{section}' must be a mapping"):
            AuditPolicy.from_config({section: [1]})

    def test_null_section_uses_defaults(self):
        """An empty section in YAML loads as None and means defaults."""
        assert AuditPolicy.from_config({"thresholds": None, "scan": None}) == AuditPolicy()

    def test_policy_is_hashable(self):
        """Policies are frozen value objects."""
        assert hash(AuditPolicy()) == hash(AuditPolicy())
