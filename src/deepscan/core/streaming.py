"""Logger sinks that consume the scan task log.

Both sinks store records in a :class:`~deepscan.core.task_log.TaskLog`; they
differ only in when they produce output:
- TerminalLogger: reacts to every record (spinners, printed lines)
- StreamLogger: produces nothing on write; a transport pulls snapshots
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, Optional

from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TaskID, TextColumn

from deepscan.core.models import Task, TaskStatus, Violation
from deepscan.core.task_log import LogRecord, TaskLog


class ScanLogger(ABC):
    """Base class for logger sinks.

    The pipeline calls :meth:`add_log` for every task update and violation.
    Subclasses implement the side effects of a record.
    """

    def __init__(self, task_log: Optional[TaskLog] = None) -> None:
        self.task_log = task_log if task_log is not None else TaskLog()

    def add_log(self, entry: LogRecord) -> None:
        """Store a record and let the sink react to it.

        Args:
            entry: A Task (new or updated) or a Violation.
        """
        stored = self.task_log.record(entry)
        if isinstance(stored, Violation):
            self.on_violation(stored)
        else:
            self.on_task(stored)

    def reset_log(self) -> None:
        """Clear tasks and violations."""
        self.task_log.reset()

    def close(self) -> None:
        """Release any display resources held by the sink."""

    @abstractmethod
    def on_task(self, task: Task) -> None:
        """React to a task that was just recorded.

        Args:
            task: The stored task, already carrying its latest status.
        """

    @abstractmethod
    def on_violation(self, violation: Violation) -> None:
        """React to a violation that was just recorded.

        Args:
            violation: The recorded violation.
        """


class TerminalLogger(ScanLogger):
    """Renders scan progress on a terminal.

    A spinner is shown for each task in progress. When the task resolves, the
    spinner is replaced by a succeeded or failed line. Violations are printed
    as soon as they are recorded.
    """

    def __init__(
        self,
        console: Optional[Console] = None,
        task_log: Optional[TaskLog] = None,
    ) -> None:
        """Initialize TerminalLogger.

        Args:
            console: Rich console to draw on (default: a new stdout console).
            task_log: Task log to record into (default: a fresh log).
        """
        super().__init__(task_log)
        self._console = console or Console()
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("{task.description}"),
            console=self._console,
            transient=True,
        )
        self._spinners: Dict[int, TaskID] = {}

    def on_task(self, task: Task) -> None:
        spinner = self._spinners.get(task.id)

        if spinner is None:
            if task.status.is_resolved:
                # Never seen in progress: nothing to resolve, just report it.
                self._print_resolved(task)
                return
            if not self._spinners:
                self._progress.start()
            self._spinners[task.id] = self._progress.add_task(escape(task.name))
            return

        if task.status.is_resolved:
            self._progress.remove_task(spinner)
            del self._spinners[task.id]
            self._print_resolved(task)
            if not self._spinners:
                self._progress.stop()
        else:
            self._progress.update(spinner, description=escape(task.name))

    def on_violation(self, violation: Violation) -> None:
        self._console.print(
            f"[bold white on red] {escape(violation.severity)} [/bold white on red] "
            f"[green]{escape(violation.package_name)}[/green] -> {escape(violation.message)}"
        )

    def close(self) -> None:
        """Stop any spinner still running (e.g. after an aborted scan)."""
        for spinner in self._spinners.values():
            self._progress.remove_task(spinner)
        self._spinners.clear()
        self._progress.stop()

    def _print_resolved(self, task: Task) -> None:
        if task.status == TaskStatus.COMPLETED:
            self._console.print(f"[green]✔[/green] {escape(task.name)}")
        else:
            self._console.print(f"[red]✖[/red] {escape(task.name)}")


class StreamLogger(ScanLogger):
    """Pull-based sink for streaming transports.

    Records are stored without side effects. A subscribed client asks for
    the current rendering of the log whenever it polls; intermediate states
    it did not poll for are not replayed.
    """

    def __init__(self, separator: str = "\n", task_log: Optional[TaskLog] = None) -> None:
        super().__init__(task_log)
        self.separator = separator

    def on_task(self, task: Task) -> None:
        pass

    def on_violation(self, violation: Violation) -> None:
        pass

    def snapshot_tasks(self) -> str:
        """Current task names joined by the separator."""
        return self.task_log.render_tasks(self.separator)

    def snapshot_violations(self) -> str:
        """Current violations, one ``( severity )rule: message`` per entry."""
        return self.task_log.render_violations(self.separator)
