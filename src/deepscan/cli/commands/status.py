"""Status command implementation."""

from __future__ import annotations

from argparse import Namespace

from deepscan.bootstrap.dependencies import ToolStatus, check_dependencies, long_path_status
from deepscan.bootstrap.paths import get_deepscan_home
from deepscan.bootstrap.platform import get_platform_info
from deepscan.cli.commands import Command
from deepscan.cli.exit_codes import EXIT_BOOTSTRAP_FAILURE, EXIT_SUCCESS
from deepscan.config.models import DeepScanConfig
from deepscan.core.subprocess_runner import ProcessRunner


def _status_symbol(status: ToolStatus) -> str:
    if status == ToolStatus.PRESENT:
        return "✓ available"
    elif status == ToolStatus.NOT_RUNNING:
        return "✗ not running"
    elif status == ToolStatus.DISABLED:
        return "✗ disabled"
    return "✗ not found"


class StatusCommand(Command):
    """Shows dependency status and environment information."""

    def __init__(self, version: str, runner: ProcessRunner | None = None):
        """Initialize StatusCommand.

        Args:
            version: Current deepscan version string.
            runner: Process runner for the checks (default: a new one).
        """
        self._version = version
        self._runner = runner

    @property
    def name(self) -> str:
        """Command identifier."""
        return "status"

    def execute(self, args: Namespace, config: DeepScanConfig | None = None) -> int:
        """Execute the status command.

        Displays deepscan version, platform info and dependency status.

        Returns:
            EXIT_SUCCESS when a scan could run, EXIT_BOOTSTRAP_FAILURE otherwise.
        """
        config = config or DeepScanConfig()
        runner = self._runner or ProcessRunner(default_timeout=config.timeouts.default)
        platform_info = get_platform_info()

        print(f"deepscan version: {self._version}")
        print(f"Platform: {platform_info.label}")
        print(f"Home: {get_deepscan_home()}")
        print(f"Workspace: {config.workspace_path()}")
        if config.sources:
            print(f"Config: {', '.join(config.sources)}")
        print()

        report = check_dependencies(runner)
        print("Dependencies:")
        print(f"  git:           {_status_symbol(report.git)}")
        print(f"  docker:        {_status_symbol(report.docker)}")
        print(f"  docker daemon: {_status_symbol(report.docker_daemon)}")

        if platform_info.needs_long_paths:
            long_paths = long_path_status(runner)
            print(f"  windows long paths: {_status_symbol(long_paths['windows_long_paths'])}")
            print(f"  git long paths:     {_status_symbol(long_paths['git_long_paths'])}")

        if not report.all_valid():
            print()
            print("Install git and docker and start the docker daemon before scanning.")
            return EXIT_BOOTSTRAP_FAILURE

        return EXIT_SUCCESS
