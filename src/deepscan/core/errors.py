"""Exceptions raised by deepscan.

Expected command failures are not exceptions: they travel as
:class:`~deepscan.core.subprocess_runner.CommandResult` values and end up in
the task log. The classes here cover conditions that stop a scan or never let
it start.
"""

from __future__ import annotations

from typing import List, Optional


class DeepScanError(Exception):
    """Base class for deepscan errors."""

    pass


class DependencyCheckError(DeepScanError):
    """A required external tool is missing or unusable.

    Raised by the dependency gate after the failed task has been logged.
    Hosting surfaces treat it as fatal: the CLI exits the process.
    """

    def __init__(self, failed_checks: List[str], message: Optional[str] = None):
        self.failed_checks = list(failed_checks)
        super().__init__(
            message or f"Dependency check failed: {', '.join(self.failed_checks)}"
        )


class ScanInProgressError(DeepScanError):
    """Another scan holds the process-wide scan lock."""

    pass


class OptionsError(DeepScanError):
    """Scan options are invalid or do not name a single scan kind."""

    pass


class ConfigError(DeepScanError):
    """Configuration loading or parsing error."""

    pass
