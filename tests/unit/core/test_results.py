"""Tests for deepscan.core.results."""

from __future__ import annotations

from pathlib import Path

from deepscan.core.models import Violation
from deepscan.core.results import (
    RESULT_ARTIFACTS,
    extract_violations,
    has_evaluation,
    parse_report,
    parse_report_text,
)


class TestParseReport:
    """Tests for parse_report."""

    def test_missing_file_is_absent(self, tmp_path: Path) -> None:
        assert parse_report(tmp_path / "scan-result.yml") is None

    def test_empty_file_is_absent(self, tmp_path: Path) -> None:
        report = tmp_path / "scan-result.yml"
        report.write_text("", encoding="utf-8")
        assert parse_report(report) is None

    def test_parses_fixture(self, fixtures_dir: Path) -> None:
        tree = parse_report(fixtures_dir / "evaluation-result.yml")
        assert tree["repository"]["vcs"]["type"] == "Git"

    def test_malformed_yaml_is_absent(self) -> None:
        assert parse_report_text("evaluator: [unclosed") is None

    def test_directory_is_absent(self, tmp_path: Path) -> None:
        assert parse_report(tmp_path) is None


class TestHasEvaluation:
    """Tests for has_evaluation."""

    def test_with_evaluator(self, fixtures_dir: Path) -> None:
        assert has_evaluation(parse_report(fixtures_dir / "evaluation-result.yml"))

    def test_without_evaluator(self, fixtures_dir: Path) -> None:
        assert not has_evaluation(parse_report(fixtures_dir / "scan-result.yml"))

    def test_non_mapping(self) -> None:
        assert not has_evaluation(None)
        assert not has_evaluation(["evaluator"])


class TestExtractViolations:
    """Tests for extract_violations."""

    def test_two_unhandled_license_entries(self, fixtures_dir: Path) -> None:
        tree = parse_report(fixtures_dir / "evaluation-result.yml")

        violations = extract_violations(tree)

        assert violations == [
            Violation(
                rule="UNHANDLED_LICENSE",
                package_name="NPM::ckeditor4:4.22.0",
                license="LicenseRef-scancode-proprietary-license",
                license_source="DETECTED",
                severity="ERROR",
                message=(
                    "The license LicenseRef-scancode-proprietary-license is currently "
                    "not covered by policy rules."
                ),
            ),
            Violation(
                rule="UNHANDLED_LICENSE",
                package_name="NPM::left-pad:1.3.0",
                license="WTFPL",
                license_source="DECLARED",
                severity="WARNING",
                message="The license WTFPL is currently not covered by policy rules.",
            ),
        ]

    def test_zero_entries(self, fixtures_dir: Path) -> None:
        tree = parse_report(fixtures_dir / "no-violations.yml")
        assert extract_violations(tree) == []

    def test_missing_path_is_zero_violations(self, fixtures_dir: Path) -> None:
        tree = parse_report(fixtures_dir / "scan-result.yml")
        assert extract_violations(tree) == []

    def test_null_violations(self) -> None:
        assert extract_violations({"evaluator": {"violations": None}}) == []

    def test_violations_not_a_list(self) -> None:
        assert extract_violations({"evaluator": {"violations": "oops"}}) == []

    def test_camel_case_license_source(self) -> None:
        tree = {"evaluator": {"violations": [{"rule": "R", "licenseSource": "CONCLUDED"}]}}

        [violation] = extract_violations(tree)

        assert violation.license_source == "CONCLUDED"

    def test_missing_fields_become_empty(self) -> None:
        tree = {"evaluator": {"violations": [{"rule": "R"}]}}

        [violation] = extract_violations(tree)

        assert violation.package_name == ""
        assert violation.message == ""

    def test_non_mapping_entries_are_skipped(self) -> None:
        tree = {"evaluator": {"violations": ["junk", {"rule": "R"}]}}
        assert [v.rule for v in extract_violations(tree)] == ["R"]

    def test_non_string_values_are_stringified(self) -> None:
        tree = {"evaluator": {"violations": [{"rule": "R", "severity": 3}]}}
        assert extract_violations(tree)[0].severity == "3"


class TestResultArtifacts:
    """Tests for the artifact list."""

    def test_five_named_artifacts(self) -> None:
        assert RESULT_ARTIFACTS == (
            "analyzer-result.yml",
            "scan-result.yml",
            "evaluation-result.yml",
            "bom.cyclonedx.json",
            "scan-report-web-app.html",
        )
