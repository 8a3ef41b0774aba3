from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List


class TaskStatus(str, Enum):
    """Progress state of one pipeline stage."""

    NOT_STARTED = "Not Started"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    FAILED = "Failed"

    @property
    def is_resolved(self) -> bool:
        """True for terminal states."""
        return self in (TaskStatus.COMPLETED, TaskStatus.FAILED)


@dataclass
class Task:
    """One pipeline stage's progress record.

    A stage owns a single id for its whole lifetime; reporting the same id
    again updates the status (and name) of the existing record.
    """

    id: int
    name: str
    status: TaskStatus = TaskStatus.IN_PROGRESS

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "status": self.status.value}


@dataclass(frozen=True)
class Violation:
    """A policy rule breach reported by the evaluator."""

    rule: str
    package_name: str
    license: str
    license_source: str
    severity: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "rule": self.rule,
            "package_name": self.package_name,
            "license": self.license,
            "license_source": self.license_source,
            "severity": self.severity,
            "message": self.message,
        }


@dataclass
class ScanLog:
    """Tasks in first-seen order and violations in extraction order."""

    tasks: List[Task] = field(default_factory=list)
    violations: List[Violation] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tasks": [task.to_dict() for task in self.tasks],
            "violations": [violation.to_dict() for violation in self.violations],
        }
