"""Tests for deepscan.core.tracker."""

from __future__ import annotations

import pytest

from deepscan.core.models import TaskStatus
from deepscan.core.streaming import StreamLogger
from deepscan.core.tracker import TaskTracker


class TestTaskTracker:
    """Tests for TaskTracker."""

    def test_ids_increase_in_call_order(self, tracker: TaskTracker) -> None:
        assert tracker.start("a") == 1
        assert tracker.start("b") == 2
        assert tracker.next_id() == 3

    def test_counters_are_per_tracker(self, stream_logger: StreamLogger) -> None:
        TaskTracker(stream_logger).start("a")
        assert TaskTracker(stream_logger).start("b") == 1

    def test_complete(self, tracker: TaskTracker, stream_logger: StreamLogger) -> None:
        task_id = tracker.start("Building docker image")
        tracker.complete(task_id, "Docker image built")

        [task] = stream_logger.task_log.tasks
        assert task.name == "Docker image built"
        assert task.status == TaskStatus.COMPLETED

    def test_finish_with_error_fails(self, tracker: TaskTracker, stream_logger: StreamLogger) -> None:
        task_id = tracker.start("Building docker image")

        assert tracker.finish(task_id, "no such file", "Docker image built") is False
        [task] = stream_logger.task_log.tasks
        assert task.name == "no such file"
        assert task.status == TaskStatus.FAILED

    def test_finish_without_error_completes(self, tracker: TaskTracker) -> None:
        task_id = tracker.start("a")
        assert tracker.finish(task_id, None, "done") is True

    def test_stage_completes(self, tracker: TaskTracker, stream_logger: StreamLogger) -> None:
        with tracker.stage("Copying", "Copied") as task_id:
            assert stream_logger.task_log.get_task(task_id).status == TaskStatus.IN_PROGRESS

        assert stream_logger.task_log.get_task(task_id).name == "Copied"

    def test_stage_fails_and_reraises(self, tracker: TaskTracker, stream_logger: StreamLogger) -> None:
        with pytest.raises(OSError):
            with tracker.stage("Copying", "Copied"):
                raise OSError("Permission denied")

        [task] = stream_logger.task_log.tasks
        assert task.status == TaskStatus.FAILED
        assert task.name == "Permission denied"

    def test_stage_failure_without_message_uses_type(self, tracker: TaskTracker,
                                                     stream_logger: StreamLogger) -> None:
        with pytest.raises(KeyError):
            with tracker.stage("a", "b"):
                raise KeyError()

        assert stream_logger.task_log.tasks[0].name == "KeyError"

    def test_stage_suppresses_listed_errors(self, tracker: TaskTracker,
                                            stream_logger: StreamLogger) -> None:
        with tracker.stage("Copying Dockerfile", "Copied Dockerfile",
                           suppress=(FileNotFoundError,)):
            raise FileNotFoundError("no such file")

        [task] = stream_logger.task_log.tasks
        assert task.status == TaskStatus.FAILED
        assert task.name == "no such file"

    def test_stage_reraises_unlisted_errors(self, tracker: TaskTracker) -> None:
        with pytest.raises(PermissionError):
            with tracker.stage("a", "b", suppress=(FileNotFoundError,)):
                raise PermissionError("denied")
