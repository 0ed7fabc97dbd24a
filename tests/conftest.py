"""Shared pytest fixtures for repo-harness tests.

Every fixture builds a throwaway repository under tmp_path; nothing is
shared between tests.
"""

from pathlib import Path

import pytest

from harness_engine.scaffold import InitOptions, run_init

# =============================================================================
# Path Fixtures
# =============================================================================


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


# =============================================================================
# State Management Fixtures
# =============================================================================


@pytest.fixture
def temp_project(tmp_path: Path) -> Path:
    """Create an empty temporary repository directory."""
    project = tmp_path / "test-project"
    project.mkdir()
    return project


@pytest.fixture
def scaffolded_project(temp_project: Path) -> Path:
    """Temporary repository after a plain `harness init` (no pack)."""
    run_init(InitOptions(path=temp_project))
    return temp_project


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove HARNESS_* environment variables that would change config loading."""
    monkeypatch.delenv("HARNESS_CONFIG_PATH", raising=False)
    monkeypatch.delenv("HARNESS_LOG_LEVEL", raising=False)
