"""CLI runner orchestration.

This module handles command dispatch and execution for the deepscan CLI.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Iterable, Optional

from deepscan.cli.arguments import build_parser
from deepscan.cli.commands.scan import SCAN_COMMANDS, ScanCommand
from deepscan.cli.commands.serve import ServeCommand
from deepscan.cli.commands.status import StatusCommand
from deepscan.cli.commands.validate import ValidateCommand
from deepscan.cli.exit_codes import EXIT_INVALID_USAGE, EXIT_SCANNER_ERROR, EXIT_SUCCESS
from deepscan.config import DeepScanConfig, load_config
from deepscan.core.errors import ConfigError
from deepscan.core.logging import configure_logging, get_logger

LOGGER = get_logger(__name__)


def get_version() -> str:
    """Get deepscan version.

    Returns:
        Version string from package metadata or fallback.
    """
    try:
        return version("deepscan")
    except PackageNotFoundError:
        # Fallback for editable installs that have not yet built metadata.
        from deepscan import __version__
        return __version__


class CLIRunner:
    """Orchestrates CLI execution with subcommand dispatch."""

    def __init__(self) -> None:
        self.parser = build_parser()
        self._version = get_version()
        self.scan_cmd = ScanCommand(version=self._version)
        self.status_cmd = StatusCommand(version=self._version)
        self.serve_cmd = ServeCommand(version=self._version)
        self.validate_cmd = ValidateCommand()

    def run(self, argv: Optional[Iterable[str]] = None) -> int:
        """Run the CLI.

        Args:
            argv: Command-line arguments (defaults to sys.argv).

        Returns:
            Exit code.
        """
        argv_list = list(argv) if argv is not None else None

        try:
            args = self.parser.parse_args(argv_list)
        except SystemExit as e:
            # argparse exits 0 for --help and 2 for usage errors
            return EXIT_SUCCESS if e.code in (0, None) else EXIT_INVALID_USAGE

        configure_logging(
            debug=args.debug,
            verbose=args.verbose,
            quiet=args.quiet,
        )

        if args.version:
            print(self._version)
            return EXIT_SUCCESS

        command = getattr(args, "command", None)

        if command in SCAN_COMMANDS:
            return self._handle_scan(args)
        elif command == "status":
            return self._handle_status(args)
        elif command == "serve":
            return self._handle_serve(args)
        elif command == "validate":
            return self.validate_cmd.execute(args)
        else:
            # No command specified - show help
            self.parser.print_help()
            return EXIT_SUCCESS

    def _load_config(self, args) -> Optional[DeepScanConfig]:
        try:
            return load_config(
                project_root=Path.cwd(),
                cli_config_path=getattr(args, "config", None),
            )
        except ConfigError as e:
            LOGGER.error(str(e))
            return None

    def _handle_scan(self, args) -> int:
        """Handle the package, project and git-project commands.

        Args:
            args: Parsed command-line arguments.

        Returns:
            Exit code.
        """
        config = self._load_config(args)
        if config is None:
            return EXIT_INVALID_USAGE

        try:
            return self.scan_cmd.execute(args, config)
        except Exception as e:
            if args.debug:
                import traceback
                traceback.print_exc()
            LOGGER.error(f"Scan failed: {e}")
            return EXIT_SCANNER_ERROR

    def _handle_status(self, args) -> int:
        config = self._load_config(args)
        if config is None:
            return EXIT_INVALID_USAGE
        return self.status_cmd.execute(args, config)

    def _handle_serve(self, args) -> int:
        """Handle the serve command.

        Args:
            args: Parsed command-line arguments.

        Returns:
            Exit code.
        """
        config = self._load_config(args)
        if config is None:
            return EXIT_INVALID_USAGE
        return self.serve_cmd.execute(args, config)
