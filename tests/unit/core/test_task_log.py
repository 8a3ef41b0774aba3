"""Tests for deepscan.core.task_log."""

from __future__ import annotations

from deepscan.core.models import Task, TaskStatus, Violation
from deepscan.core.task_log import TaskLog, format_task, format_violation


def _violation(rule: str = "UNHANDLED_LICENSE", message: str = "msg") -> Violation:
    return Violation(
        rule=rule,
        package_name="NPM::left-pad:1.3.0",
        license="WTFPL",
        license_source="DECLARED",
        severity="ERROR",
        message=message,
    )


class TestRecordTask:
    """Tests for recording tasks."""

    def test_new_task_is_appended(self) -> None:
        log = TaskLog()
        log.record(Task(1, "Creating scan project directory"))
        log.record(Task(2, "Copying Dockerfile to the scan project"))

        assert [t.id for t in log.tasks] == [1, 2]

    def test_same_id_updates_in_place(self) -> None:
        log = TaskLog()
        log.record(Task(1, "Building docker image"))
        log.record(Task(2, "Creating docker container"))
        log.record(Task(1, "Docker image built", TaskStatus.COMPLETED))

        assert len(log.tasks) == 2
        assert log.tasks[0].id == 1
        assert log.tasks[0].name == "Docker image built"
        assert log.tasks[0].status == TaskStatus.COMPLETED

    def test_latest_status_wins(self) -> None:
        log = TaskLog()
        log.record(Task(7, "a", TaskStatus.IN_PROGRESS))
        log.record(Task(7, "b", TaskStatus.FAILED))
        log.record(Task(7, "c", TaskStatus.COMPLETED))

        [task] = log.tasks
        assert task.status == TaskStatus.COMPLETED
        assert task.name == "c"

    def test_stored_task_is_a_copy(self) -> None:
        log = TaskLog()
        original = Task(1, "a")
        log.record(original)
        original.name = "changed"

        assert log.tasks[0].name == "a"

    def test_tasks_property_returns_copy_of_list(self) -> None:
        log = TaskLog()
        log.record(Task(1, "a"))
        log.tasks.clear()

        assert len(log.tasks) == 1


class TestRecordViolation:
    """Tests for recording violations."""

    def test_violations_are_appended(self) -> None:
        log = TaskLog()
        first = _violation(message="first")
        second = _violation(message="second")
        log.record(first)
        log.record(second)

        assert log.violations == [first, second]

    def test_identical_violations_are_kept(self) -> None:
        log = TaskLog()
        log.record(_violation())
        log.record(_violation())

        assert len(log.violations) == 2

    def test_violation_count_never_decreases(self) -> None:
        log = TaskLog()
        sizes = []
        for i in range(3):
            log.record(_violation(message=str(i)))
            log.record(Task(i, "task"))
            sizes.append(len(log.violations))

        assert sizes == [1, 2, 3]


class TestReset:
    """Tests for TaskLog.reset."""

    def test_reset_clears_everything(self) -> None:
        log = TaskLog()
        log.record(Task(1, "a"))
        log.record(_violation())
        log.reset()

        assert log.is_empty()
        assert log.tasks == []
        assert log.violations == []


class TestRendering:
    """Tests for rendering helpers."""

    def test_format_task(self) -> None:
        task = Task(4, "Docker image built", TaskStatus.COMPLETED)
        assert format_task(task) == "4( Completed ) -> Docker image built"

    def test_format_violation(self) -> None:
        assert format_violation(_violation()) == "( ERROR )UNHANDLED_LICENSE: msg"

    def test_render_tasks_joins_names(self) -> None:
        log = TaskLog()
        log.record(Task(1, "a"))
        log.record(Task(2, "b"))

        assert log.render_tasks("<br>") == "a<br>b"

    def test_render_tasks_detailed(self) -> None:
        log = TaskLog()
        log.record(Task(1, "a", TaskStatus.FAILED))

        assert log.render_tasks(detailed=True) == "1( Failed ) -> a"

    def test_render_violations(self) -> None:
        log = TaskLog()
        log.record(_violation(message="one"))
        log.record(_violation(rule="OTHER", message="two"))

        assert log.render_violations(" | ") == (
            "( ERROR )UNHANDLED_LICENSE: one | ( ERROR )OTHER: two"
        )

    def test_render_empty_log(self) -> None:
        log = TaskLog()
        assert log.render_tasks() == ""
        assert log.render_violations() == ""


class TestQueries:
    """Tests for lookup helpers and snapshots."""

    def test_get_task(self) -> None:
        log = TaskLog()
        log.record(Task(5, "a"))

        assert log.get_task(5).name == "a"
        assert log.get_task(6) is None

    def test_has_failures(self) -> None:
        log = TaskLog()
        log.record(Task(1, "a", TaskStatus.COMPLETED))
        assert not log.has_failures()

        log.record(Task(2, "b", TaskStatus.FAILED))
        assert log.has_failures()

    def test_snapshot_is_detached(self) -> None:
        log = TaskLog()
        log.record(Task(1, "a"))
        snapshot = log.snapshot()
        log.record(Task(1, "done", TaskStatus.COMPLETED))
        log.record(_violation())

        assert snapshot.tasks[0].status == TaskStatus.IN_PROGRESS
        assert snapshot.violations == []
