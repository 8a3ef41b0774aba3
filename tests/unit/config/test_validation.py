"""Tests for configuration validation."""

from __future__ import annotations

from pathlib import Path

from deepscan.config.validation import (
    ValidationSeverity,
    validate_config,
    validate_config_file,
)


class TestValidateConfig:
    """Tests for validate_config."""

    def test_valid_config(self) -> None:
        data = {
            "version": 1,
            "workspace": {"path": "/tmp/scan", "keep": True},
            "timeouts": {"build": 100, "run": 1.5},
            "defaults": {"branch": "main"},
        }
        assert validate_config(data, "test.yml") == []

    def test_unknown_top_level_key_with_suggestion(self) -> None:
        [warning] = validate_config({"timeout": {}}, "test.yml")

        assert warning.message == "Unknown top-level key 'timeout'"
        assert warning.suggestion == "timeouts"
        assert warning.source == "test.yml"

    def test_unknown_section_key(self) -> None:
        [warning] = validate_config({"container": {"name_prefx": "x"}}, "test.yml")

        assert warning.key == "container.name_prefx"
        assert warning.suggestion == "name_prefix"

    def test_section_must_be_mapping(self) -> None:
        [warning] = validate_config({"workspace": "/tmp"}, "test.yml")
        assert warning.message == "'workspace' must be a mapping, got str"

    def test_wrong_types(self) -> None:
        warnings = validate_config({
            "workspace": {"keep": "yes"},
            "timeouts": {"build": True},
            "defaults": {"branch": 3},
        }, "test.yml")

        assert [w.message for w in warnings] == [
            "'workspace.keep' must be a boolean, got str",
            "'timeouts.build' must be a number, got bool",
            "'defaults.branch' must be a string, got int",
        ]

    def test_non_positive_timeout(self) -> None:
        [warning] = validate_config({"timeouts": {"run": 0}}, "test.yml")
        assert warning.message == "Invalid value '0' for 'timeouts.run'. Must be positive"

    def test_null_values_are_allowed(self) -> None:
        assert validate_config({"workspace": {"path": None}}, "test.yml") == []


class TestValidateConfigFile:
    """Tests for validate_config_file."""

    def test_missing_file(self, tmp_path: Path) -> None:
        is_valid, [issue] = validate_config_file(tmp_path / "absent.yml")

        assert not is_valid
        assert issue.severity == ValidationSeverity.ERROR

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "c.yml"
        path.write_text("a: b: c:\n  - bad")

        is_valid, [issue] = validate_config_file(path)

        assert not is_valid
        assert issue.message.startswith("Invalid YAML syntax")

    def test_empty_file_is_valid_with_warning(self, tmp_path: Path) -> None:
        path = tmp_path / "c.yml"
        path.write_text("")

        is_valid, [issue] = validate_config_file(path)

        assert is_valid
        assert issue.severity == ValidationSeverity.WARNING

    def test_unknown_keys_are_warnings(self, tmp_path: Path) -> None:
        path = tmp_path / "c.yml"
        path.write_text("workspce:\n  keep: true\n")

        is_valid, [issue] = validate_config_file(path)

        assert is_valid
        assert issue.severity == ValidationSeverity.WARNING
        assert issue.suggestion == "workspace"

    def test_type_errors_are_errors(self, tmp_path: Path) -> None:
        path = tmp_path / "c.yml"
        path.write_text("timeouts:\n  build: slow\n")

        is_valid, [issue] = validate_config_file(path)

        assert not is_valid
        assert issue.severity == ValidationSeverity.ERROR
        assert issue.key == "timeouts.build"
