"""Validate command implementation.

Validates deepscan configuration files and reports issues.
"""

from __future__ import annotations

from argparse import Namespace
from pathlib import Path

from deepscan.cli.commands import Command
from deepscan.cli.exit_codes import EXIT_INVALID_USAGE, EXIT_ISSUES_FOUND, EXIT_SUCCESS
from deepscan.config.loader import PROJECT_CONFIG_NAMES, find_project_config
from deepscan.config.models import DeepScanConfig
from deepscan.config.validation import (
    ConfigValidationIssue,
    ValidationSeverity,
    validate_config_file,
)


class ValidateCommand(Command):
    """Validates deepscan configuration files."""

    @property
    def name(self) -> str:
        """Command identifier."""
        return "validate"

    def execute(self, args: Namespace, config: DeepScanConfig | None = None) -> int:
        """Execute the validate command.

        Args:
            args: Parsed command-line arguments.
            config: Unused; the file is read directly.

        Returns:
            Exit code: 0 = valid, 1 = has errors, 3 = file not found.
        """
        config_path = getattr(args, "config", None)
        if config_path:
            config_path = Path(config_path)
        else:
            config_path = find_project_config(Path.cwd())

        if config_path is None:
            print("No configuration file found.")
            print(f"Looked for: {', '.join(PROJECT_CONFIG_NAMES)}")
            return EXIT_INVALID_USAGE

        if not config_path.exists():
            print(f"Configuration file not found: {config_path}")
            return EXIT_INVALID_USAGE

        print(f"Validating {config_path}...")

        _, issues = validate_config_file(config_path)

        if not issues:
            print("Configuration is valid.")
            return EXIT_SUCCESS

        errors = [i for i in issues if i.severity == ValidationSeverity.ERROR]
        warnings = [i for i in issues if i.severity == ValidationSeverity.WARNING]

        if errors:
            print(f"\nErrors ({len(errors)}):")
            for issue in errors:
                self._print_issue(issue)

        if warnings:
            print(f"\nWarnings ({len(warnings)}):")
            for issue in warnings:
                self._print_issue(issue)

        if errors:
            print(f"\nConfiguration is invalid ({len(errors)} error(s)).")
            return EXIT_ISSUES_FOUND
        print(f"\nConfiguration is valid with {len(warnings)} warning(s).")
        return EXIT_SUCCESS

    def _print_issue(self, issue: ConfigValidationIssue) -> None:
        location = f" [{issue.key}]" if issue.key else ""
        print(f"  - {issue.message}{location}")
        if issue.suggestion:
            print(f"    Did you mean '{issue.suggestion}'?")
