"""Append-only progress ledger of a scan.

The log is not synchronized. Only the thread running the pipeline writes
to it; sinks either run on that thread or take read-only snapshots. Scans are
serialized by the pipeline's scan lock, so there is never more than one
writer.
"""

from __future__ import annotations

from typing import List, Optional, Union

from deepscan.core.models import ScanLog, Task, TaskStatus, Violation

LogRecord = Union[Task, Violation]


def format_task(task: Task) -> str:
    """Detailed one-line rendering of a task."""
    return f"{task.id}( {task.status.value} ) -> {task.name}"


def format_violation(violation: Violation) -> str:
    """One-line rendering of a violation."""
    return f"( {violation.severity} ){violation.rule}: {violation.message}"


class TaskLog:
    """Id-keyed task records plus an append-only violation list."""

    def __init__(self) -> None:
        self._log = ScanLog()

    @property
    def tasks(self) -> List[Task]:
        return list(self._log.tasks)

    @property
    def violations(self) -> List[Violation]:
        return list(self._log.violations)

    def get_task(self, task_id: int) -> Optional[Task]:
        for task in self._log.tasks:
            if task.id == task_id:
                return task
        return None

    def record(self, entry: LogRecord) -> LogRecord:
        """Record a task or a violation.

        A task whose id is already known updates the stored record in place
        (status and name), keeping its position. Anything else is appended.

        Returns:
            The stored record.
        """
        if isinstance(entry, Violation):
            self._log.violations.append(entry)
            return entry

        existing = self.get_task(entry.id)
        if existing is None:
            stored = Task(id=entry.id, name=entry.name, status=entry.status)
            self._log.tasks.append(stored)
            return stored

        existing.status = entry.status
        existing.name = entry.name
        return existing

    def reset(self) -> None:
        """Forget all tasks and violations."""
        self._log = ScanLog()

    def is_empty(self) -> bool:
        return not self._log.tasks and not self._log.violations

    def has_failures(self) -> bool:
        return any(task.status == TaskStatus.FAILED for task in self._log.tasks)

    def render_tasks(self, separator: str = "\n", detailed: bool = False) -> str:
        """Join task names (or detailed task lines) with ``separator``."""
        if detailed:
            return separator.join(format_task(task) for task in self.tasks)
        return separator.join(task.name for task in self.tasks)

    def render_violations(self, separator: str = "\n") -> str:
        return separator.join(format_violation(v) for v in self.violations)

    def snapshot(self) -> ScanLog:
        """Return a copy that later records do not affect."""
        return ScanLog(
            tasks=[Task(id=t.id, name=t.name, status=t.status) for t in self._log.tasks],
            violations=list(self._log.violations),
        )
