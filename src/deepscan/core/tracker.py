"""Stage progress reporting for one pipeline run."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional, Tuple, Type

from deepscan.core.logging import get_logger
from deepscan.core.models import Task, TaskStatus, Violation
from deepscan.core.streaming import ScanLogger

LOGGER = get_logger(__name__)


class TaskTracker:
    """Hands out task ids and reports stage progress to a logger sink.

    Ids come from a counter private to the tracker, so every pipeline run
    numbers its stages 1, 2, 3, ... in execution order.
    """

    def __init__(self, logger: ScanLogger) -> None:
        self.logger = logger
        self._counter = 0

    def next_id(self) -> int:
        self._counter += 1
        return self._counter

    def start(self, name: str) -> int:
        """Log a new in-progress task and return its id."""
        task_id = self.next_id()
        LOGGER.debug(f"Task {task_id} started: {name}")
        self.logger.add_log(Task(id=task_id, name=name, status=TaskStatus.IN_PROGRESS))
        return task_id

    def complete(self, task_id: int, name: str) -> None:
        LOGGER.debug(f"Task {task_id} completed: {name}")
        self.logger.add_log(Task(id=task_id, name=name, status=TaskStatus.COMPLETED))

    def fail(self, task_id: int, message: str) -> None:
        LOGGER.info(f"Task {task_id} failed: {message}")
        self.logger.add_log(Task(id=task_id, name=message, status=TaskStatus.FAILED))

    def finish(self, task_id: int, error: Optional[str], done_name: str) -> bool:
        """Resolve a task from an optional error message.

        Returns:
            True when the task completed, False when it failed.
        """
        if error:
            self.fail(task_id, error)
            return False
        self.complete(task_id, done_name)
        return True

    def violation(self, violation: Violation) -> None:
        self.logger.add_log(violation)

    @contextmanager
    def stage(
        self,
        name: str,
        done_name: str,
        suppress: Tuple[Type[BaseException], ...] = (),
    ) -> Iterator[int]:
        """Run a block as one task.

        The task completes when the block returns. If the block raises, the
        task is marked failed with the exception text. Exceptions listed in
        ``suppress`` end there; any other exception propagates.
        """
        task_id = self.start(name)
        try:
            yield task_id
        except suppress as e:
            self.fail(task_id, str(e) or type(e).__name__)
            return
        except Exception as e:
            self.fail(task_id, str(e) or type(e).__name__)
            raise
        self.complete(task_id, done_name)
