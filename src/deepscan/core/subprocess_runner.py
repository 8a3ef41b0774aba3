"""Synchronous runner for external commands.

Every external call made by a scan (git, docker, reg) goes through
:func:`run_command`. Output is captured rather than streamed because each
pipeline stage needs the literal stderr text for its task log entry.
A failed command never raises: the failure is encoded in the returned
:class:`CommandResult`.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

from deepscan.core.logging import get_logger

LOGGER = get_logger(__name__)

# Exit status reported when the executable cannot be found (shell convention)
STATUS_NOT_FOUND = 127

# Separator used when a multi-line error stream becomes a single task name
ERROR_LINE_SEPARATOR = " | "


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one external command.

    Attributes:
        args: The command line that was run.
        status: Exit status, or None when the command timed out.
        stdout: Captured standard output.
        stderr: Captured standard error.
        timed_out: Whether the command was killed after its timeout.
    """

    args: Sequence[str]
    status: Optional[int]
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        """True when the command exited with status 0."""
        return self.status == 0

    def error_message(self, separator: str = ERROR_LINE_SEPARATOR) -> Optional[str]:
        """Return the failure text of this command, or None if it succeeded.

        A non-empty error stream counts as a failure even with exit status 0;
        its lines are joined with ``separator``.
        """
        lines = [line.strip() for line in self.stderr.splitlines() if line.strip()]
        if lines:
            return separator.join(lines)
        if self.status != 0:
            if self.timed_out:
                return "Command timed out"
            return f"Command failed with exit code {self.status}"
        return None


def run_command(
    cmd: List[str],
    cwd: Optional[Union[str, Path]] = None,
    timeout: Optional[float] = None,
) -> CommandResult:
    """Run a command to completion and capture its output.

    The working directory and environment are inherited unless ``cwd`` is
    given. Standard input is closed so that commands attaching to it see EOF
    instead of blocking the scan.

    Args:
        cmd: Command and arguments to run.
        cwd: Optional working directory.
        timeout: Timeout in seconds, or None to wait indefinitely.

    Returns:
        CommandResult describing the exit status and captured output.
    """
    LOGGER.debug(f"Running command: {' '.join(cmd)}")

    try:
        completed = subprocess.run(
            cmd,
            capture_output=True,
            stdin=subprocess.DEVNULL,
            text=True,
            encoding="utf-8",
            errors="replace",
            cwd=str(cwd) if cwd is not None else None,
            timeout=timeout,
        )
    except FileNotFoundError:
        LOGGER.debug(f"Executable not found: {cmd[0]}")
        return CommandResult(
            args=list(cmd),
            status=STATUS_NOT_FOUND,
            stderr=f"{cmd[0]}: command not found",
        )
    except subprocess.TimeoutExpired as e:
        LOGGER.warning(f"Command timed out after {timeout}s: {' '.join(cmd)}")
        return CommandResult(
            args=list(cmd),
            status=None,
            stdout=_as_text(e.stdout),
            stderr=f"Command timed out after {timeout:g} seconds: {' '.join(cmd)}",
            timed_out=True,
        )

    LOGGER.debug(f"Command exited with status {completed.returncode}")
    return CommandResult(
        args=list(cmd),
        status=completed.returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
    )


def _as_text(output: Union[str, bytes, None]) -> str:
    """Normalize partial output captured before a timeout."""
    if output is None:
        return ""
    if isinstance(output, bytes):
        return output.decode("utf-8", errors="replace")
    return output


class ProcessRunner:
    """Runs external commands with per-class timeouts.

    The pipeline talks to this object rather than to :func:`run_command`
    directly so tests can substitute a fake runner.
    """

    def __init__(
        self,
        default_timeout: Optional[float] = None,
        timeouts: Optional[dict] = None,
    ) -> None:
        self._default_timeout = default_timeout
        self._timeouts = dict(timeouts or {})

    def timeout_for(self, kind: str) -> Optional[float]:
        """Return the timeout for a class of command (build, run, clone, ...)."""
        return self._timeouts.get(kind, self._default_timeout)

    def run(self, cmd: List[str], kind: str = "default") -> CommandResult:
        """Run ``cmd`` with the timeout configured for ``kind``."""
        return run_command(cmd, timeout=self.timeout_for(kind))
