"""Tests for deepscan.core.streaming."""

from __future__ import annotations

import io
from typing import List

from rich.console import Console

from deepscan.core.models import Task, TaskStatus, Violation
from deepscan.core.streaming import ScanLogger, StreamLogger, TerminalLogger
from deepscan.core.task_log import TaskLog


def _console(buffer: io.StringIO) -> Console:
    return Console(file=buffer, force_terminal=False, color_system=None, width=200)


def _violation() -> Violation:
    return Violation(
        rule="UNHANDLED_LICENSE",
        package_name="NPM::left-pad:1.3.0",
        license="WTFPL",
        license_source="DECLARED",
        severity="ERROR",
        message="The license WTFPL is currently not covered by policy rules.",
    )


class RecordingLogger(ScanLogger):
    """Sink that remembers what it was asked to react to."""

    def __init__(self) -> None:
        super().__init__()
        self.seen: List[object] = []

    def on_task(self, task: Task) -> None:
        self.seen.append(("task", task.id, task.status))

    def on_violation(self, violation: Violation) -> None:
        self.seen.append(("violation", violation.rule))


class TestScanLogger:
    """Tests for the ScanLogger base class."""

    def test_add_log_stores_then_dispatches(self) -> None:
        logger = RecordingLogger()
        logger.add_log(Task(1, "a"))
        logger.add_log(Task(1, "b", TaskStatus.COMPLETED))
        logger.add_log(_violation())

        assert logger.seen == [
            ("task", 1, TaskStatus.IN_PROGRESS),
            ("task", 1, TaskStatus.COMPLETED),
            ("violation", "UNHANDLED_LICENSE"),
        ]
        assert len(logger.task_log.tasks) == 1

    def test_uses_given_task_log(self) -> None:
        log = TaskLog()
        logger = RecordingLogger()
        logger.task_log = log
        logger.add_log(Task(1, "a"))

        assert log.get_task(1) is not None

    def test_reset_log(self) -> None:
        logger = RecordingLogger()
        logger.add_log(Task(1, "a"))
        logger.reset_log()

        assert logger.task_log.is_empty()


class TestTerminalLogger:
    """Tests for TerminalLogger."""

    def test_in_progress_task_starts_spinner(self) -> None:
        buffer = io.StringIO()
        logger = TerminalLogger(console=_console(buffer))
        try:
            logger.add_log(Task(1, "Building docker image"))
            assert 1 in logger._spinners
        finally:
            logger.close()

    def test_completed_task_prints_success_line(self) -> None:
        buffer = io.StringIO()
        logger = TerminalLogger(console=_console(buffer))
        logger.add_log(Task(1, "Building docker image"))
        logger.add_log(Task(1, "Docker image built", TaskStatus.COMPLETED))
        logger.close()

        assert "✔ Docker image built" in buffer.getvalue()
        assert logger._spinners == {}

    def test_failed_task_prints_failure_line(self) -> None:
        buffer = io.StringIO()
        logger = TerminalLogger(console=_console(buffer))
        logger.add_log(Task(1, "Building docker image"))
        logger.add_log(Task(1, "no such file", TaskStatus.FAILED))
        logger.close()

        assert "✖ no such file" in buffer.getvalue()

    def test_resolved_task_without_spinner_is_printed(self) -> None:
        buffer = io.StringIO()
        logger = TerminalLogger(console=_console(buffer))
        logger.add_log(Task(9, "Dependencies checked", TaskStatus.COMPLETED))
        logger.close()

        assert "✔ Dependencies checked" in buffer.getvalue()
        assert logger._spinners == {}

    def test_violation_is_printed_immediately(self) -> None:
        buffer = io.StringIO()
        logger = TerminalLogger(console=_console(buffer))
        logger.add_log(_violation())

        out = buffer.getvalue()
        assert "ERROR" in out
        assert "NPM::left-pad:1.3.0 -> The license WTFPL" in out

    def test_markup_in_names_is_escaped(self) -> None:
        buffer = io.StringIO()
        logger = TerminalLogger(console=_console(buffer))
        logger.add_log(Task(1, "[red]x[/red]", TaskStatus.COMPLETED))

        assert "[red]x[/red]" in buffer.getvalue()

    def test_close_stops_pending_spinners(self) -> None:
        logger = TerminalLogger(console=_console(io.StringIO()))
        logger.add_log(Task(1, "a"))
        logger.add_log(Task(2, "b"))
        logger.close()

        assert logger._spinners == {}


class TestStreamLogger:
    """Tests for StreamLogger."""

    def test_records_without_output(self) -> None:
        logger = StreamLogger()
        logger.add_log(Task(1, "a"))

        assert logger.snapshot_tasks() == "a"

    def test_snapshot_reflects_latest_state(self) -> None:
        logger = StreamLogger(separator="<br>")
        logger.add_log(Task(1, "Building docker image"))
        logger.add_log(Task(2, "Creating docker container"))
        logger.add_log(Task(1, "Docker image built", TaskStatus.COMPLETED))

        assert logger.snapshot_tasks() == "Docker image built<br>Creating docker container"

    def test_snapshot_violations(self) -> None:
        logger = StreamLogger()
        logger.add_log(_violation())

        assert logger.snapshot_violations() == (
            "( ERROR )UNHANDLED_LICENSE: "
            "The license WTFPL is currently not covered by policy rules."
        )

    def test_snapshots_after_reset_are_empty(self) -> None:
        logger = StreamLogger()
        logger.add_log(Task(1, "a"))
        logger.add_log(_violation())
        logger.reset_log()

        assert logger.snapshot_tasks() == ""
        assert logger.snapshot_violations() == ""
