"""MCP tool executor for deepscan operations.

Scans run in a worker thread and record into one process-wide
StreamLogger. Clients poll ``get_tasks`` and ``get_violations`` for the
current state of the log while a scan is running.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional

from deepscan.config import DeepScanConfig
from deepscan.core.errors import DependencyCheckError, OptionsError, ScanInProgressError
from deepscan.core.logging import get_logger
from deepscan.core.streaming import StreamLogger
from deepscan.core.subprocess_runner import ProcessRunner
from deepscan.pipeline import (
    PipelineResult,
    ScanKind,
    ScanOptions,
    ScanPipeline,
    options_from_dict,
    scan_in_progress,
)

LOGGER = get_logger(__name__)


class MCPToolExecutor:
    """Executes deepscan operations for MCP tools."""

    def __init__(
        self,
        config: DeepScanConfig,
        logger: Optional[StreamLogger] = None,
        runner: Optional[ProcessRunner] = None,
    ):
        """Initialize MCPToolExecutor.

        Args:
            config: deepscan configuration.
            logger: Shared stream sink (default: a new one).
            runner: Process runner passed to every pipeline (default: per run).
        """
        self.config = config
        self.logger = logger or StreamLogger()
        self._runner = runner

    async def scan_package(
        self,
        package_name: str,
        package_version: str,
        ort_config_repo_url: Optional[str] = None,
        results_path: Optional[str] = None,
    ) -> Dict[str, Any]:
        return await self.scan({
            "kind": ScanKind.PACKAGE.value,
            "package_name": package_name,
            "package_version": package_version,
            "ort_config_repo_url": ort_config_repo_url or self.config.defaults.ort_config_repo_url,
            "results_path": results_path,
        })

    async def scan_project(
        self,
        project_path: str,
        project_config_path: str,
        results_path: Optional[str] = None,
    ) -> Dict[str, Any]:
        return await self.scan({
            "kind": ScanKind.PROJECT.value,
            "project_path": project_path,
            "project_config_path": project_config_path,
            "results_path": results_path,
        })

    async def scan_git_project(
        self,
        project_url: str,
        project_config_url: str,
        project_branch: Optional[str] = None,
        project_config_branch: Optional[str] = None,
        project_config_folder: Optional[str] = None,
        results_path: Optional[str] = None,
        enable_long_path: bool = False,
    ) -> Dict[str, Any]:
        return await self.scan({
            "kind": ScanKind.GIT_PROJECT.value,
            "project_url": project_url,
            "project_config_url": project_config_url,
            "project_branch": project_branch or self.config.defaults.branch,
            "project_config_branch": project_config_branch or self.config.defaults.config_branch,
            "project_config_folder": project_config_folder,
            "results_path": results_path,
            "enable_long_path": enable_long_path,
        })

    async def scan(self, options_data: Dict[str, Any]) -> Dict[str, Any]:
        """Validate options, reset the log and run one scan.

        Args:
            options_data: Scan options including the ``kind`` discriminant.

        Returns:
            Scan summary, or an ``error`` entry.
        """
        try:
            options = options_from_dict(options_data)
        except OptionsError as e:
            return {"error": str(e)}

        if scan_in_progress():
            return {"error": "Another scan is already running"}

        loop = asyncio.get_event_loop()
        try:
            result = await loop.run_in_executor(None, self._run_pipeline, options)
        except ScanInProgressError as e:
            return {"error": str(e)}
        except DependencyCheckError as e:
            return {
                "error": str(e),
                "failed_checks": e.failed_checks,
                "tasks": self._task_items(),
            }
        return result.to_dict()

    def _run_pipeline(self, options: ScanOptions) -> PipelineResult:
        pipeline = ScanPipeline(options, self.logger, config=self.config, runner=self._runner)
        return pipeline.run(wait=False, reset_log=True)

    async def get_tasks(self, detailed: bool = False) -> Dict[str, Any]:
        """Current task log rendering and structured task list."""
        return {
            "running": scan_in_progress(),
            "text": self.logger.task_log.render_tasks(self.logger.separator, detailed=detailed),
            "tasks": self._task_items(),
        }

    async def get_violations(self) -> Dict[str, Any]:
        violations = self.logger.task_log.violations
        return {
            "running": scan_in_progress(),
            "text": self.logger.snapshot_violations(),
            "count": len(violations),
            "violations": [v.to_dict() for v in violations],
        }

    async def clear_log(self) -> Dict[str, Any]:
        """Reset the shared log unless a scan is writing to it."""
        if scan_in_progress():
            return {"error": "Cannot clear the log while a scan is running"}
        self.logger.reset_log()
        return {"cleared": True}

    def _task_items(self):
        return [task.to_dict() for task in self.logger.task_log.tasks]
