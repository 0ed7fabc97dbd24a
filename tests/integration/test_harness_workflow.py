"""Integration tests for the harness workflow.

Tests the complete lifecycle through the CLI:
- init on an empty repository
- audit and doctor on the result
- evolve --apply until nothing is left to apply
"""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from cli.main import app
from harness_engine.maturity import level_index
from tests.helpers import write_json

# Mark all tests in this module as integration tests
pytestmark = pytest.mark.integration

runner = CliRunner()


def run(*args: str) -> dict:
    result = runner.invoke(app, list(args))
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


@pytest.mark.usefixtures("clean_env")
class TestHarnessWorkflow:
    """End-to-end lifecycle of a repository under harness."""

    def test_init_then_audit_raises_maturity(self, temp_project: Path):
        """Scaffolding moves an empty repository from L0 to L2."""
        before = run("audit", str(temp_project))
        run("init", str(temp_project))
        after = run("audit", str(temp_project))

        assert before["maturity_level"] == "L0: Manual"
        assert after["maturity_level"] == "L2: Steered"
        assert after["total_score"] > before["total_score"]

    def test_doctor_after_init(self, temp_project: Path):
        """A freshly initialized repository has no failing checks."""
        run("init", str(temp_project))

        report = run("doctor", str(temp_project))

        assert report["summary"]["failed"] == 0
        for check in report["checks"]:
            assert (check["status"] == "pass") == (check["fix"] == "")

    def test_evolve_apply_for_node_project(self, temp_project: Path):
        """evolve --apply scaffolds baseline and pack, then settles."""
        write_json(temp_project, "package.json", {"name": "web", "scripts": {"dev": "vite"}})

        first = run("evolve", str(temp_project), "--apply")
        second = run("evolve", str(temp_project), "--apply")

        assert first["pack_recommendation"]["recommended"] == "agent-factory"
        assert len(first["applied"]) == 1
        assert "scaffold" in first
        assert second["applied"] == []
        assert "scaffold" not in second
        assert level_index(second["current_level"]) > level_index(first["current_level"])

    def test_init_twice_requires_force(self, temp_project: Path):
        """A second init is refused and leaves files untouched."""
        run("init", str(temp_project), "--name", "first")
        agents = (temp_project / "AGENTS.md").read_text(encoding="utf-8")

        result = runner.invoke(app, ["init", str(temp_project), "--name", "second"])

        assert result.exit_code == 1
        assert (temp_project / "AGENTS.md").read_text(encoding="utf-8") == agents
