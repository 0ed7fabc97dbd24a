"""Unit tests for the audit runner."""

from pathlib import Path

import pytest

from harness_engine.audit import WELL_STRUCTURED_RECOMMENDATION, resolve_target, run_audit
from harness_engine.errors import TargetNotFoundError
from harness_engine.models import Dimension
from tests.helpers import write_file, write_lines, write_rich_repository


class TestResolveTarget:
    """Tests for resolve_target."""

    def test_resolves_relative_path(self, temp_project: Path, monkeypatch: pytest.MonkeyPatch):
        """Relative targets become absolute."""
        monkeypatch.chdir(temp_project.parent)

        assert resolve_target(temp_project.name) == temp_project.resolve()

    def test_missing_target(self, tmp_path: Path):
        """A missing directory raises with its path in the message."""
        missing = tmp_path / "nope"

        with pytest.raises(TargetNotFoundError) as exc_info:
            resolve_target(missing)

        assert "Directory does not exist" in str(exc_info.value)
        assert str(missing.resolve()) in str(exc_info.value)


class TestRunAudit:
    """Tests for run_audit."""

    def test_empty_directory(self, temp_project: Path):
        """An empty repository is L0 with zero in every dimension."""
        result = run_audit(temp_project)

        assert result.project == "test-project"
        assert result.total_score == 0
        assert result.maturity_level == "L0: Manual"
        assert all(score.score == 0 for score in result.scores.values())
        recommendations = " ".join(result.recommendations)
        assert "AGENTS.md" in recommendations
        assert "docs/" in recommendations
        assert "ARCHITECTURE.md" in recommendations
        assert "linter" in recommendations
        assert "golden-principles" in recommendations

    def test_total_is_sum_of_dimensions(self, scaffolded_project: Path):
        """total_score always equals the sum of the six scores."""
        result = run_audit(scaffolded_project)
        data = result.to_dict()

        assert data["total_score"] == sum(s["score"] for s in data["scores"].values())
        assert data["max_score"] == 18
        assert list(data["scores"]) == [d.value for d in Dimension]

    def test_scaffolded_repository(self, scaffolded_project: Path):
        """A freshly scaffolded repository reaches L2."""
        result = run_audit(scaffolded_project)

        assert result.scores[Dimension.REPOSITORY_KNOWLEDGE].score == 3
        assert result.scores[Dimension.ARCHITECTURE_ENFORCEMENT].score == 1
        assert result.scores[Dimension.AGENT_LEGIBILITY].score == 0
        assert result.scores[Dimension.GOLDEN_PRINCIPLES].score == 2
        assert result.scores[Dimension.AGENT_WORKFLOW].score == 1
        assert result.scores[Dimension.GARBAGE_COLLECTION].score == 3
        assert result.total_score == 10
        assert result.maturity_level == "L2: Steered"

    def test_audit_is_idempotent(self, scaffolded_project: Path):
        """Auditing twice yields identical documents apart from the timestamp."""
        first = run_audit(scaffolded_project).to_dict()
        second = run_audit(scaffolded_project).to_dict()
        first.pop("timestamp")
        second.pop("timestamp")

        assert first == second

    def test_audit_does_not_modify_target(self, scaffolded_project: Path):
        """The audit is read-only."""
        before = sorted(str(p) for p in scaffolded_project.rglob("*"))
        run_audit(scaffolded_project)
        after = sorted(str(p) for p in scaffolded_project.rglob("*"))

        assert before == after

    def test_well_structured_fallback(self, temp_project: Path):
        """A repository with nothing to recommend gets the fallback line."""
        write_lines(temp_project, "AGENTS.md", 40)
        (temp_project / "docs").mkdir()
        write_file(temp_project, "ARCHITECTURE.md", "Dependencies flow forward only.\n")
        write_file(temp_project, "ruff.toml", "")
        write_file(temp_project, "docs/golden-principles.md", "## One\n")

        result = run_audit(temp_project)

        assert result.recommendations == [WELL_STRUCTURED_RECOMMENDATION]

    def test_timestamp_is_utc_iso(self, temp_project: Path):
        """Timestamps end with a Z suffix."""
        assert run_audit(temp_project).timestamp.endswith("Z")

    def test_rich_repository_is_terminal(self, temp_project: Path):
        """A repository with every signal reaches L4."""
        write_rich_repository(temp_project)

        result = run_audit(temp_project)

        assert result.total_score == 18
        assert result.maturity_level == "L4: Self-Correcting"

    def test_missing_target_raises(self, tmp_path: Path):
        """Auditing a missing directory raises TargetNotFoundError."""
        with pytest.raises(TargetNotFoundError):
            run_audit(tmp_path / "missing")
