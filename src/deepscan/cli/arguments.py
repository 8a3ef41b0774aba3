"""Argument parser construction for the deepscan CLI.

This module builds the argument parser with subcommands:
- deepscan package     - Scan a published npm package
- deepscan project     - Scan a local project directory
- deepscan git-project - Scan a project from a git repository
- deepscan status      - Show dependency and environment status
- deepscan serve       - Run the MCP server
- deepscan validate    - Validate a configuration file
"""

from __future__ import annotations

import argparse
from pathlib import Path


def _add_global_options(parser: argparse.ArgumentParser) -> None:
    """Add global options available to all commands."""
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show deepscan version and exit.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (info-level) logging.",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Reduce logging output to errors only.",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        type=Path,
        help="Path to a config file (default: .deepscan.yml in the current directory).",
    )


def _add_result_options(parser: argparse.ArgumentParser) -> None:
    """Options shared by all scan commands."""
    parser.add_argument(
        "--output", "-o",
        metavar="DIR",
        type=Path,
        help="Copy the result files into this directory.",
    )
    parser.add_argument(
        "--fail-on-violations",
        action="store_true",
        help="Exit with code 1 when policy violations are found.",
    )


def _build_package_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'package' subcommand parser."""
    package_parser = subparsers.add_parser(
        "package",
        help="Scan a published npm package.",
        description=(
            "Build a scan project depending on the given package and run "
            "the license scan against it."
        ),
    )
    package_parser.add_argument("name", help="npm package name.")
    package_parser.add_argument("package_version", metavar="VERSION", help="Package version.")
    package_parser.add_argument(
        "--ort-config-repo-url",
        metavar="URL",
        help="Git URL of the policy configuration repository "
             "(default: defaults.ort_config_repo_url from config).",
    )
    _add_result_options(package_parser)


def _build_project_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'project' subcommand parser."""
    project_parser = subparsers.add_parser(
        "project",
        help="Scan a project directory.",
        description="Copy a local project and its policy configuration into the scan.",
    )
    project_parser.add_argument("path", type=Path, help="Project directory to scan.")
    project_parser.add_argument(
        "--config-path",
        metavar="DIR",
        type=Path,
        required=True,
        help="Directory holding the policy configuration.",
    )
    _add_result_options(project_parser)


def _build_git_project_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'git-project' subcommand parser."""
    git_parser = subparsers.add_parser(
        "git-project",
        help="Scan a project from a git repository.",
        description="Clone a project and its policy configuration, then scan it.",
    )
    git_parser.add_argument("url", help="Clone URL of the project.")
    git_parser.add_argument(
        "--config-url",
        metavar="URL",
        required=True,
        help="Clone URL of the policy configuration repository.",
    )
    git_parser.add_argument(
        "--branch",
        help="Project branch (default: defaults.branch from config, else main).",
    )
    git_parser.add_argument(
        "--config-branch",
        help="Configuration branch (default: defaults.config_branch from config, else main).",
    )
    git_parser.add_argument(
        "--config-folder",
        metavar="FOLDER",
        help="Subfolder of the configuration repository holding the configuration.",
    )
    git_parser.add_argument(
        "--enable-long-path",
        action="store_true",
        help="On Windows, enable long path support if it is off (needs an elevated shell).",
    )
    _add_result_options(git_parser)


def _build_status_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'status' subcommand parser."""
    subparsers.add_parser(
        "status",
        help="Show dependency and environment status.",
        description="Check git, docker and the docker daemon without running a scan.",
    )


def _build_validate_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'validate' subcommand parser."""
    subparsers.add_parser(
        "validate",
        help="Validate a configuration file.",
        description=(
            "Check the configuration file given with --config, or the project "
            "configuration in the current directory, for unknown keys and wrong types."
        ),
    )


def _build_serve_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'serve' subcommand parser."""
    subparsers.add_parser(
        "serve",
        help="Run the MCP server over stdio.",
        description="Expose the scans and the live task log as MCP tools.",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser for the deepscan CLI.

    Returns:
        Configured ArgumentParser instance with subcommands.
    """
    parser = argparse.ArgumentParser(
        prog="deepscan",
        description="deepscan - License compliance deep scans in a container.",
        epilog=(
            "Examples:\n"
            "  deepscan package left-pad 1.3.0 --ort-config-repo-url URL\n"
            "  deepscan project ./app --config-path ./ort-config -o results\n"
            "  deepscan git-project URL --config-url URL --branch develop\n"
            "  deepscan status\n"
            "  deepscan --config ci.yml validate\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    _add_global_options(parser)

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        description="Available commands:",
        metavar="COMMAND",
    )

    _build_package_parser(subparsers)
    _build_project_parser(subparsers)
    _build_git_project_parser(subparsers)
    _build_status_parser(subparsers)
    _build_serve_parser(subparsers)
    _build_validate_parser(subparsers)

    return parser
