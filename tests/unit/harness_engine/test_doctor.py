"""Unit tests for the doctor reporter."""

from pathlib import Path

import pytest

from harness_engine.config import AuditPolicy
from harness_engine.doctor import REQUIRED_DOCS, run_doctor
from harness_engine.errors import TargetNotFoundError
from harness_engine.models import DoctorStatus
from tests.helpers import assert_check, write_file, write_lines, write_workflow


class TestRunDoctor:
    """Tests for run_doctor."""

    def test_empty_repository(self, temp_project: Path):
        """Everything required fails and everything optional warns."""
        report = run_doctor(temp_project)

        assert [check.check for check in report.checks] == [
            "AGENTS.md missing",
            "ARCHITECTURE.md missing",
            *[f"{doc} missing" for doc in REQUIRED_DOCS],
            "No linter configured",
            "No CI pipeline",
            "No risk-policy.json",
            "No verification headers in docs",
        ]
        assert report.summary == {"passed": 0, "failed": 7, "warnings": 4, "total": 11}

    def test_every_problem_has_a_fix(self, temp_project: Path):
        """Failing and warning checks always carry fix text."""
        report = run_doctor(temp_project)

        for check in report.checks:
            assert check.status != DoctorStatus.PASS
            assert check.fix

    def test_scaffolded_repository(self, scaffolded_project: Path):
        """init output passes the required checks."""
        report = run_doctor(scaffolded_project)

        assert_check(report, "AGENTS.md exists and concise", "pass")
        assert_check(report, "ARCHITECTURE.md exists", "pass")
        assert_check(report, "risk-policy.json exists", "pass")
        assert_check(report, "No linter configured", "warn")
        assert report.summary["failed"] == 0
        for check in report.checks:
            if check.status == DoctorStatus.PASS:
                assert check.fix == ""

    def test_map_file_too_long(self, temp_project: Path):
        """A long map file is a warning with a trim hint."""
        write_lines(temp_project, "AGENTS.md", 151)

        report = run_doctor(temp_project)

        assert report.checks[0].check == "AGENTS.md too long"
        assert report.checks[0].status == DoctorStatus.WARN
        assert report.checks[0].fix == "Trim AGENTS.md from 151 to ~100 lines. Move details to docs/."

    def test_map_file_limit_follows_policy(self, temp_project: Path):
        """The concise limit comes from the policy."""
        write_lines(temp_project, "AGENTS.md", 20)

        report = run_doctor(temp_project, AuditPolicy(map_file_max_lines=10))

        assert_check(report, "AGENTS.md too long", "warn")

    def test_ci_with_enforcement(self, temp_project: Path):
        """Two gates pass the enforcement check."""
        write_workflow(temp_project, "ci", "npm run lint", "npm test")

        report = run_doctor(temp_project)

        assert_check(report, "CI pipeline exists", "pass")
        assert_check(report, "CI enforces 2 quality gates", "pass")

    def test_ci_without_enforcement(self, temp_project: Path):
        """A checkout-only workflow lacks enforcement."""
        write_workflow(temp_project, "ci")

        report = run_doctor(temp_project)

        assert_check(report, "CI lacks enforcement steps", "warn")

    def test_non_github_ci_skips_gate_check(self, temp_project: Path):
        """Jenkins pipelines pass without a gate count."""
        write_file(temp_project, "Jenkinsfile", "pipeline {}\n")

        report = run_doctor(temp_project)

        names = [check.check for check in report.checks]
        assert "CI pipeline exists" in names
        assert not any("quality gates" in name or "lacks" in name for name in names)

    def test_circleci_is_not_checked(self, temp_project: Path):
        """Only GitHub, GitLab and Jenkins count as CI for the doctor."""
        (temp_project / ".circleci").mkdir()

        report = run_doctor(temp_project)

        assert_check(report, "No CI pipeline", "warn")

    def test_verified_docs(self, temp_project: Path):
        """Verification headers are counted."""
        write_file(temp_project, "docs/guide.md", "<!-- Verified: 2026-03-01 -->\n# Guide\n")

        report = run_doctor(temp_project)

        assert_check(report, "Verification headers in 1 doc(s)", "pass")

    def test_hierarchical_map_files(self, temp_project: Path):
        """Nested map files add a passing check."""
        write_lines(temp_project, "AGENTS.md", 5)
        write_lines(temp_project, "apps/web/AGENTS.md", 5)

        report = run_doctor(temp_project)

        assert_check(report, "Hierarchical AGENTS.md (2 files)", "pass")

    def test_structural_lint_check_needs_scripts_dir(self, temp_project: Path):
        """Without scripts/ there is no structural lint check."""
        report = run_doctor(temp_project)

        assert not any("tructural lint" in check.check for check in report.checks)

    def test_structural_lint_missing(self, temp_project: Path):
        """A scripts/ dir without a lint script warns."""
        write_file(temp_project, "scripts/release.sh", "#!/bin/sh\n")

        report = run_doctor(temp_project)

        assert_check(report, "No structural lint scripts", "warn")
        assert report.checks[-1].fix == (
            "Add scripts/lint-structure.mjs to enforce layer and dependency rules"
        )

    def test_structural_lint_present(self, temp_project: Path):
        """A lint-structure script passes."""
        write_file(temp_project, "scripts/lint-structure.mjs", "")

        report = run_doctor(temp_project)

        assert_check(report, "Structural lint scripts found", "pass")

    def test_report_document(self, temp_project: Path):
        """to_dict carries command, target and summary."""
        data = run_doctor(temp_project).to_dict()

        assert data["command"] == "doctor"
        assert data["project"] == "test-project"
        assert data["target"] == str(temp_project.resolve())
        assert data["checks"][0] == {
            "check": "AGENTS.md missing",
            "status": "fail",
            "fix": "Run 'harness init .' to create AGENTS.md",
        }

    def test_missing_target(self, tmp_path: Path):
        """A missing directory raises."""
        with pytest.raises(TargetNotFoundError):
            run_doctor(tmp_path / "missing")
