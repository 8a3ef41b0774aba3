"""Calls to the git command line client."""

from __future__ import annotations

from pathlib import Path
from typing import List

from deepscan.core.logging import get_logger
from deepscan.core.subprocess_runner import CommandResult, ProcessRunner
from deepscan.core.workspace import remove_tree

LOGGER = get_logger(__name__)


class GitClient:
    """Thin wrapper over ``git`` invoked through the process runner."""

    def __init__(self, runner: ProcessRunner, executable: str = "git") -> None:
        self.runner = runner
        self.executable = executable

    def _cmd(self, *args: str) -> List[str]:
        return [self.executable, *args]

    def version(self) -> CommandResult:
        return self.runner.run(self._cmd("--version"))

    def clone(self, url: str, branch: str, destination: Path, depth: int = 1) -> CommandResult:
        """Shallow-clone ``branch`` of ``url`` into ``destination``.

        ``--quiet`` keeps the error stream empty on success, so any stderr
        text means the clone failed.
        """
        return self.runner.run(
            self._cmd(
                "clone", "--quiet",
                "--depth", str(depth),
                "--branch", branch,
                url, str(destination),
            ),
            kind="clone",
        )

    def long_paths_enabled(self) -> bool:
        result = self.runner.run(self._cmd("config", "--system", "core.longpaths"))
        return result.ok and result.stdout.strip().lower() == "true"

    def enable_long_paths(self) -> CommandResult:
        return self.runner.run(self._cmd("config", "--system", "core.longpaths", "true"))


def remove_git_metadata(checkout: Path) -> bool:
    """Delete the ``.git`` folder of a checkout.

    Returns:
        True if a metadata folder was removed.
    """
    metadata = Path(checkout) / ".git"
    if not metadata.exists():
        return False
    LOGGER.debug(f"Removing git metadata from {checkout}")
    remove_tree(metadata)
    return True
