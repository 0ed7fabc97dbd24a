"""Unit tests for the scoring rule predicates."""

import pytest

from harness_engine import rules


class TestCounting:
    """Tests for counting predicates."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(2.5, 3), (2.49, 2), (0.0, 0), (29.5, 30)],
    )
    def test_round_half_up(self, value, expected):
        """Halves round up, never to even."""
        assert rules.round_half_up(value) == expected

    def test_count_table_rows_subtracts_header(self):
        """Header and divider lines are not decisions."""
        table = "| A | B |\n|---|---|\n| 1 | x |\n| 2 | y |\n| 3 | z |\n"
        assert rules.count_table_rows(table) == 3

    def test_count_table_rows_never_negative(self):
        """A lone header line counts as zero rows."""
        assert rules.count_table_rows("| A |") == 0
        assert rules.count_table_rows("no table") == 0

    def test_count_golden_principles_takes_max(self):
        """The larger of heading and numbered-item counts wins."""
        content = "## One\n## Two\n1. a\n2. b\n3. c\n"
        assert rules.count_golden_principles(content) == 3

    def test_count_true(self):
        """Only truthy signals count."""
        assert rules.count_true([True, False, True, False]) == 2


class TestContentPredicates:
    """Tests for regex predicates over document content."""

    def test_dependency_direction(self):
        """Layer or dependency vocabulary counts as direction rules."""
        assert rules.has_dependency_direction_rules("Dependencies flow forward only")
        assert rules.has_dependency_direction_rules("## Layers")
        assert not rules.has_dependency_direction_rules("# Overview")

    def test_architectural_lint_rules(self):
        """Import restrictions count for any config."""
        assert rules.has_architectural_lint_rules(
            ".eslintrc.json", '{"rules": {"no-restricted-imports": "error"}}'
        )
        assert not rules.has_architectural_lint_rules(".eslintrc.json", '{"rules": {}}')

    def test_biome_rule_groups(self):
        """biome.json needs five or more rule groups."""
        many = '{"recommended": true, "style": {}, "complexity": {}, "suspicious": {}, "correctness": {}}'
        few = '{"recommended": true, "style": {}}'
        assert rules.has_architectural_lint_rules("biome.json", many)
        assert not rules.has_architectural_lint_rules("biome.json", few)
        assert not rules.has_architectural_lint_rules("ruff.toml", many)

    def test_anti_patterns(self):
        """Never/avoid/don't phrasing documents anti-patterns."""
        assert rules.documents_anti_patterns("Never mutate inputs")
        assert rules.documents_anti_patterns("Don't guess")
        assert not rules.documents_anti_patterns("Prefer small functions")

    def test_quality_grades_and_drift(self):
        """Grade and drift vocabulary is recognized."""
        assert rules.tracks_quality_grades("| Domain | Quality Grade |")
        assert rules.declares_drift_rules('{"watchPaths": []}')
        assert not rules.declares_drift_rules('{"tiers": []}')


class TestManifestPredicates:
    """Tests for predicates over parsed manifests."""

    def test_has_boot_script(self):
        """dev or start scripts make an app bootable."""
        assert rules.has_boot_script({"scripts": {"dev": "vite"}})
        assert rules.has_boot_script({"scripts": {"start": "node ."}})
        assert not rules.has_boot_script({"scripts": {"test": "jest"}})
        assert not rules.has_boot_script({"scripts": "oops"})
        assert not rules.has_boot_script(None)

    def test_dependency_count(self):
        """Only an object of dependencies is counted."""
        assert rules.dependency_count({"dependencies": {"a": "1", "b": "2"}}) == 2
        assert rules.dependency_count({"dependencies": ["a"]}) == 0
        assert rules.dependency_count({}) == 0

    def test_workflow_enforcement_gates(self):
        """Only lint/test/build/typecheck gates count for workflows."""
        assert rules.workflow_enforcement_gates(["lint", "audit", "build", "format"]) == ["lint", "build"]

    def test_ci_references_enforcement(self):
        """build alone is not lint/test/typecheck enforcement."""
        assert not rules.ci_references_enforcement(["build", "audit"])
        assert rules.ci_references_enforcement(["build", "test"])
