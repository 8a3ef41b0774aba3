"""Shared fixtures for deepscan unit tests."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

import pytest

from deepscan.bootstrap.platform import PlatformInfo
from deepscan.config.models import DeepScanConfig, WorkspaceConfig
from deepscan.core.streaming import StreamLogger
from deepscan.core.subprocess_runner import CommandResult
from deepscan.core.tracker import TaskTracker

FIXTURES_DIR = Path(__file__).parent / "fixtures"


class FakeRunner:
    """Process runner double that never starts a process.

    Every command succeeds with empty output unless a rule registered with
    :meth:`on` matches its leading arguments. Later rules win. A rule may
    carry an ``effect`` called with the command, standing in for what the
    real process would leave on disk.
    """

    def __init__(self) -> None:
        self.calls: List[Tuple[List[str], str]] = []
        self._rules: List[Tuple[Tuple[str, ...], CommandResult, Optional[Callable]]] = []

    def on(self, *prefix: str, status: int = 0, stdout: str = "", stderr: str = "",
           effect: Optional[Callable[[List[str]], None]] = None) -> "FakeRunner":
        result = CommandResult(args=list(prefix), status=status, stdout=stdout, stderr=stderr)
        self._rules.append((prefix, result, effect))
        return self

    def run(self, cmd: Sequence[str], kind: str = "default") -> CommandResult:
        cmd = list(cmd)
        self.calls.append((cmd, kind))
        for prefix, result, effect in reversed(self._rules):
            if tuple(cmd[:len(prefix)]) == prefix:
                if effect is not None:
                    effect(cmd)
                return CommandResult(args=cmd, status=result.status,
                                     stdout=result.stdout, stderr=result.stderr)
        return CommandResult(args=cmd, status=0)

    @property
    def commands(self) -> List[List[str]]:
        return [cmd for cmd, _ in self.calls]

    def ran(self, *prefix: str) -> bool:
        return any(tuple(cmd[:len(prefix)]) == prefix for cmd in self.commands)

    def kind_of(self, *prefix: str) -> str:
        for cmd, kind in self.calls:
            if tuple(cmd[:len(prefix)]) == prefix:
                return kind
        raise AssertionError(f"No command starting with {prefix}")


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def stream_logger() -> StreamLogger:
    return StreamLogger()


@pytest.fixture
def tracker(stream_logger: StreamLogger) -> TaskTracker:
    return TaskTracker(stream_logger)


@pytest.fixture
def linux() -> PlatformInfo:
    return PlatformInfo(os="linux", arch="amd64")


@pytest.fixture
def windows() -> PlatformInfo:
    return PlatformInfo(os="windows", arch="amd64")


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def scan_config(tmp_path: Path) -> DeepScanConfig:
    """Configuration staging into a temporary workspace."""
    return DeepScanConfig(workspace=WorkspaceConfig(path=tmp_path / "project-scan"))
