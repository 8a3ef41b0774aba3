"""Checks for the external tools a scan depends on.

A scan needs the git client, the container runtime CLI and a running
container daemon. On Windows, project checkouts also need long path support
in the OS and in git.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List

from deepscan.core.git import GitClient
from deepscan.core.logging import get_logger
from deepscan.core.subprocess_runner import CommandResult, ProcessRunner

LOGGER = get_logger(__name__)

_LONG_PATHS_KEY = r"HKLM\SYSTEM\CurrentControlSet\Control\FileSystem"
_LONG_PATHS_VALUE = "LongPathsEnabled"


class ToolStatus(str, Enum):
    """Status of one external dependency."""

    PRESENT = "present"
    MISSING = "missing"
    NOT_RUNNING = "not_running"
    DISABLED = "disabled"


@dataclass
class DependencyReport:
    """Result of checking the tools required for a scan.

    Attributes:
        git: Status of the git client.
        docker: Status of the docker CLI.
        docker_daemon: Status of the docker daemon.
    """

    git: ToolStatus
    docker: ToolStatus
    docker_daemon: ToolStatus

    def all_valid(self) -> bool:
        return not self.failed_checks()

    def failed_checks(self) -> List[str]:
        """Return the names of checks that did not pass."""
        failed = []
        if self.git != ToolStatus.PRESENT:
            failed.append("git")
        if self.docker != ToolStatus.PRESENT:
            failed.append("docker")
        if self.docker_daemon != ToolStatus.PRESENT:
            failed.append("docker daemon")
        return failed

    def to_dict(self) -> Dict[str, str]:
        return {
            "git": self.git.value,
            "docker": self.docker.value,
            "docker_daemon": self.docker_daemon.value,
        }


def check_git(runner: ProcessRunner) -> ToolStatus:
    result = GitClient(runner).version()
    return ToolStatus.PRESENT if result.ok else ToolStatus.MISSING


def check_docker(runner: ProcessRunner) -> ToolStatus:
    result = runner.run(["docker", "--version"])
    return ToolStatus.PRESENT if result.ok else ToolStatus.MISSING


def check_docker_daemon(runner: ProcessRunner) -> ToolStatus:
    """Check that the docker daemon answers ``docker info``."""
    result = runner.run(["docker", "info", "--format", "{{.ServerVersion}}"])
    return ToolStatus.PRESENT if result.ok else ToolStatus.NOT_RUNNING


def check_dependencies(runner: ProcessRunner) -> DependencyReport:
    """Check git, docker and the docker daemon.

    The daemon check is skipped when the docker CLI is missing.
    """
    docker = check_docker(runner)
    report = DependencyReport(
        git=check_git(runner),
        docker=docker,
        docker_daemon=(
            check_docker_daemon(runner) if docker == ToolStatus.PRESENT else ToolStatus.MISSING
        ),
    )
    if report.all_valid():
        LOGGER.debug("All scan dependencies are available")
    else:
        LOGGER.debug(f"Missing scan dependencies: {report.failed_checks()}")
    return report


def windows_long_paths_enabled(runner: ProcessRunner) -> bool:
    """Check the ``LongPathsEnabled`` registry value."""
    result = runner.run(["reg", "query", _LONG_PATHS_KEY, "/v", _LONG_PATHS_VALUE])
    return result.ok and "0x1" in result.stdout


def enable_windows_long_paths(runner: ProcessRunner) -> CommandResult:
    """Set ``LongPathsEnabled`` to 1 (requires an elevated shell)."""
    result = runner.run([
        "reg", "add", _LONG_PATHS_KEY,
        "/v", _LONG_PATHS_VALUE, "/t", "REG_DWORD", "/d", "1", "/f",
    ])
    if result.error_message():
        LOGGER.warning(f"Could not enable Windows long paths: {result.error_message()}")
    return result


def long_path_status(runner: ProcessRunner) -> Dict[str, ToolStatus]:
    """Report long path support of the OS and of git."""
    return {
        "windows_long_paths": (
            ToolStatus.PRESENT if windows_long_paths_enabled(runner) else ToolStatus.DISABLED
        ),
        "git_long_paths": (
            ToolStatus.PRESENT if GitClient(runner).long_paths_enabled() else ToolStatus.DISABLED
        ),
    }
