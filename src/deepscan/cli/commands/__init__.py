"""CLI commands package.

This module provides the base Command class and exports all command implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from argparse import Namespace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from deepscan.config.models import DeepScanConfig


class Command(ABC):
    """Base class for CLI commands.

    All CLI commands should inherit from this class and implement
    the execute method.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Command identifier."""

    @abstractmethod
    def execute(self, args: Namespace, config: "DeepScanConfig | None" = None) -> int:
        """Execute the command.

        Args:
            args: Parsed command-line arguments.
            config: Optional deepscan configuration.

        Returns:
            Exit code (0 for success, non-zero for error).
        """


# ruff: noqa: E402
from deepscan.cli.commands.scan import ScanCommand
from deepscan.cli.commands.serve import ServeCommand
from deepscan.cli.commands.status import StatusCommand
from deepscan.cli.commands.validate import ValidateCommand

__all__ = [
    "Command",
    "ScanCommand",
    "ServeCommand",
    "StatusCommand",
    "ValidateCommand",
]
