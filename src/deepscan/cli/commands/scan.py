"""Scan command implementation (package, project and git-project)."""

from __future__ import annotations

from argparse import Namespace
from typing import Optional

from rich.console import Console

from deepscan.cli.commands import Command
from deepscan.cli.exit_codes import (
    EXIT_BOOTSTRAP_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_ISSUES_FOUND,
    EXIT_SUCCESS,
)
from deepscan.config.models import DeepScanConfig
from deepscan.core.errors import DependencyCheckError
from deepscan.core.logging import get_logger
from deepscan.core.streaming import TerminalLogger
from deepscan.pipeline import (
    GitProjectOptions,
    PackageOptions,
    PipelineResult,
    ProjectOptions,
    ScanOptions,
    ScanPipeline,
)

LOGGER = get_logger(__name__)

SCAN_COMMANDS = ("package", "project", "git-project")


class ScanCommand(Command):
    """Runs one scan with live terminal progress."""

    def __init__(self, version: str, console: Optional[Console] = None):
        """Initialize ScanCommand.

        Args:
            version: Current deepscan version string.
            console: Rich console for progress output (default: stdout).
        """
        self._version = version
        self._console = console

    @property
    def name(self) -> str:
        """Command identifier."""
        return "scan"

    def execute(self, args: Namespace, config: DeepScanConfig | None = None) -> int:
        """Execute a scan command.

        Args:
            args: Parsed command-line arguments.
            config: Loaded configuration.

        Returns:
            Exit code based on scan results.
        """
        config = config or DeepScanConfig()
        options = self.build_options(args, config)
        if options is None:
            return EXIT_INVALID_USAGE

        logger = TerminalLogger(console=self._console)
        try:
            result = ScanPipeline(options, logger, config=config).run()
        except DependencyCheckError as e:
            LOGGER.error(str(e))
            return EXIT_BOOTSTRAP_FAILURE
        finally:
            logger.close()

        self._print_summary(result)

        if result.violations and getattr(args, "fail_on_violations", False):
            return EXIT_ISSUES_FOUND
        return EXIT_SUCCESS

    def build_options(self, args: Namespace, config: DeepScanConfig) -> Optional[ScanOptions]:
        """Turn parsed arguments into scan options.

        Returns:
            The options, or None when the arguments are unusable.
        """
        results_path = getattr(args, "output", None)

        if args.command == "package":
            repo_url = args.ort_config_repo_url or config.defaults.ort_config_repo_url
            if not repo_url:
                LOGGER.error(
                    "No ORT config repository given. Use --ort-config-repo-url "
                    "or set defaults.ort_config_repo_url."
                )
                return None
            return PackageOptions(
                package_name=args.name,
                package_version=args.package_version,
                ort_config_repo_url=repo_url,
                results_path=results_path,
            )

        if args.command == "project":
            project_path = args.path.expanduser().resolve()
            config_path = args.config_path.expanduser().resolve()
            for label, path in (("Project", project_path), ("Config", config_path)):
                if not path.is_dir():
                    LOGGER.error(f"{label} directory not found: {path}")
                    return None
            return ProjectOptions(
                project_path=project_path,
                project_config_path=config_path,
                results_path=results_path,
            )

        if args.command == "git-project":
            return GitProjectOptions(
                project_url=args.url,
                project_config_url=args.config_url,
                project_branch=args.branch or config.defaults.branch,
                project_config_branch=args.config_branch or config.defaults.config_branch,
                project_config_folder=args.config_folder,
                results_path=results_path,
                enable_long_path=args.enable_long_path,
            )

        LOGGER.error(f"Unknown scan command: {args.command}")
        return None

    def _print_summary(self, result: PipelineResult) -> None:
        console = self._console or Console()
        count = len(result.violations)
        noun = "violation" if count == 1 else "violations"
        if result.failed_tasks:
            console.print(f"[yellow]Scan finished with {len(result.failed_tasks)} failed steps[/yellow]")
        console.print(f"{count} {noun} found")
        if result.copied_artifacts:
            console.print(f"Results copied to {result.copied_artifacts[0].parent}")
