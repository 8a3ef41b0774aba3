"""Stage-sequence executor shared by all scan kinds.

Stage order for one run::

    dependency gate (fatal)
    workspace prepare
    variant payload
    entry script
    image build
    pre-clean of a leftover container
    create, start, stop, remove container
    image removal
    evaluation check, violation extraction
    result copy (when an output directory was requested)
    workspace clean-up

Stage failures are logged and the sequence continues. Only the dependency
gate stops a run, by raising DependencyCheckError.
"""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from deepscan.bootstrap.dependencies import check_dependencies
from deepscan.bootstrap.platform import PlatformInfo, get_platform_info
from deepscan.config.models import DeepScanConfig
from deepscan.core.container import ContainerManager
from deepscan.core.errors import DependencyCheckError, ScanInProgressError
from deepscan.core.git import GitClient
from deepscan.core.logging import get_logger
from deepscan.core.models import TaskStatus, Violation
from deepscan.core.results import (
    EVALUATION_RESULT_FILE,
    RESULT_ARTIFACTS,
    SCAN_RESULT_FILE,
    extract_violations,
    has_evaluation,
    parse_report,
)
from deepscan.core.streaming import ScanLogger
from deepscan.core.subprocess_runner import ProcessRunner
from deepscan.core.tracker import TaskTracker
from deepscan.core.workspace import Workspace
from deepscan.pipeline.options import ScanOptions
from deepscan.pipeline.variants import ENTRYPOINT, PipelineContext, get_variant

LOGGER = get_logger(__name__)

# Serializes scans within the process; the workspace path is shared.
_SCAN_LOCK = threading.Lock()


def scan_in_progress() -> bool:
    """Check whether some thread is currently running a scan."""
    return _SCAN_LOCK.locked()


def new_run_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass
class PipelineResult:
    """Summary of one finished run.

    Attributes:
        run_id: Identifier used in the container and image name.
        container_name: Name of the container and image of this run.
        violations: Violations extracted from the evaluation report.
        failed_tasks: Names of the tasks that ended Failed.
        copied_artifacts: Result files copied to the output directory.
    """

    run_id: str
    container_name: str
    violations: List[Violation] = field(default_factory=list)
    failed_tasks: List[str] = field(default_factory=list)
    copied_artifacts: List[Path] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.failed_tasks

    def to_dict(self) -> Dict[str, Any]:
        return {
            "run_id": self.run_id,
            "container_name": self.container_name,
            "success": self.success,
            "violation_count": len(self.violations),
            "violations": [v.to_dict() for v in self.violations],
            "failed_tasks": list(self.failed_tasks),
            "copied_artifacts": [str(p) for p in self.copied_artifacts],
        }


class ScanPipeline:
    """Runs one scan of any kind.

    Example:
        >>> pipeline = ScanPipeline(options, TerminalLogger())
        >>> result = pipeline.run()
    """

    def __init__(
        self,
        options: ScanOptions,
        logger: ScanLogger,
        config: Optional[DeepScanConfig] = None,
        runner: Optional[ProcessRunner] = None,
        run_id: Optional[str] = None,
        platform: Optional[PlatformInfo] = None,
    ) -> None:
        """Initialize ScanPipeline.

        Args:
            options: Scan options; their type selects the variant.
            logger: Sink receiving every task update and violation.
            config: deepscan configuration (default: built-in defaults).
            runner: Process runner (default: one using the configured timeouts).
            run_id: Identifier for container and image names (default: random).
            platform: Host platform (default: detected).
        """
        self.options = options
        self.logger = logger
        self.config = config or DeepScanConfig()
        self.runner = runner or ProcessRunner(
            default_timeout=self.config.timeouts.default,
            timeouts=self.config.timeouts.as_dict(),
        )
        self.run_id = run_id or new_run_id()
        self.platform = platform or get_platform_info()
        self.variant = get_variant(options)

        self.tracker = TaskTracker(logger)
        self.workspace = Workspace(self.config.workspace_path(), self.tracker)
        self.context = PipelineContext(
            workspace=self.workspace,
            tracker=self.tracker,
            runner=self.runner,
            git=GitClient(self.runner),
            templates_dir=self.config.templates_path(),
            platform=self.platform,
        )
        self.container = ContainerManager(
            name=self.container_name,
            context_dir=self.workspace.root,
            runner=self.runner,
            tracker=self.tracker,
            results_mount=self.config.container.results_mount,
        )

    @property
    def container_name(self) -> str:
        return f"{self.config.container.name_prefix}-{self.run_id}"

    def run(self, wait: bool = True, reset_log: bool = False) -> PipelineResult:
        """Run the scan under the process-wide scan lock.

        Args:
            wait: Block until a running scan finishes. When False and another
                scan is running, raise instead.
            reset_log: Clear the sink's log once the lock is held.

        Raises:
            ScanInProgressError: ``wait`` is False and another scan is running.
            DependencyCheckError: A required tool is missing.
        """
        if not _SCAN_LOCK.acquire(blocking=wait):
            raise ScanInProgressError("Another scan is already running")
        try:
            if reset_log:
                self.logger.reset_log()
            LOGGER.info(f"Starting {self.options.kind.value} scan {self.run_id}")
            return self._run_stages()
        finally:
            _SCAN_LOCK.release()

    def _run_stages(self) -> PipelineResult:
        result = PipelineResult(run_id=self.run_id, container_name=self.container_name)

        self.check_dependencies()
        self.workspace.prepare()
        self.variant.prepare_workspace(self.context)
        self.workspace.stage_file(self.context.template(ENTRYPOINT), ENTRYPOINT)

        self.container.build()
        self.container.pre_clean(remove_images=self.config.container.remove_image)
        self.container.run_to_completion()
        if self.config.container.remove_image:
            self.container.remove_image()

        result.violations = self.evaluate()

        if self.variant.results_path:
            result.copied_artifacts = self.workspace.copy_results(
                self.variant.results_path, list(RESULT_ARTIFACTS)
            )

        if self.config.workspace.keep:
            LOGGER.info(f"Keeping workspace at {self.workspace.root}")
        else:
            self.workspace.clean()

        result.failed_tasks = [
            task.name for task in self.logger.task_log.tasks if task.status == TaskStatus.FAILED
        ]
        LOGGER.info(
            f"Scan {self.run_id} finished: {len(result.violations)} violations, "
            f"{len(result.failed_tasks)} failed tasks"
        )
        return result

    def check_dependencies(self) -> None:
        """Verify git, docker and variant-specific requirements.

        Raises:
            DependencyCheckError: If any check failed. The task is logged as
                Failed before raising.
        """
        task_id = self.tracker.start("Checking dependencies needed for the scan")
        report = check_dependencies(self.runner)
        failed = report.failed_checks() + self.variant.check_extra_dependencies(self.context)
        if failed:
            message = f"Missing dependencies: {', '.join(failed)}"
            self.tracker.fail(task_id, message)
            raise DependencyCheckError(failed, message)
        self.tracker.complete(task_id, "Dependencies checked")

    def evaluate(self) -> List[Violation]:
        """Find the evaluation tree and log its violations.

        Prefers the evaluator section embedded in the scan result and falls
        back to the separate evaluation report.
        """
        tree = None
        task_id = self.tracker.start("Checking for evaluation in scan result")
        scan_tree = parse_report(self.workspace.root / SCAN_RESULT_FILE)
        if not scan_tree:
            self.tracker.fail(task_id, "No scan result found")
        elif has_evaluation(scan_tree):
            self.tracker.complete(task_id, "Evaluation found in scan result")
            tree = scan_tree
        else:
            self.tracker.complete(task_id, "No evaluation found in scan result")

        task_id = self.tracker.start("Checking for violations")
        if tree is None:
            tree = parse_report(self.workspace.root / EVALUATION_RESULT_FILE)
        if not tree:
            self.tracker.fail(task_id, "No evaluation result found")
            return []
        self.tracker.complete(task_id, "Violations checked")

        with self.tracker.stage("Logging violations", "Violations logged"):
            violations = extract_violations(tree)
            for violation in violations:
                self.tracker.violation(violation)
        return violations
