"""Container lifecycle for one scan run.

All operations are keyed by a single name used for both the image tag and
the container. States follow::

    ABSENT -> BUILT -> CREATED -> RUNNING -> STOPPED -> REMOVED

Images and containers carry the ``deepscan.scan`` label so that leftovers
of earlier runs can be found and removed before a new container is created.
Stop and remove are guarded by :meth:`ContainerManager.exists`, so calling
them when no container exists is a no-op that still completes its task.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import List

from deepscan.core.logging import get_logger
from deepscan.core.subprocess_runner import ProcessRunner
from deepscan.core.tracker import TaskTracker

LOGGER = get_logger(__name__)

DEFAULT_RUNTIME = "docker"
DEFAULT_RESULTS_MOUNT = "/home/ort/results"

# Label carried by every image and container a scan creates
SCAN_LABEL = "deepscan.scan"


class ContainerState(str, Enum):
    """Lifecycle state of the scan container."""

    ABSENT = "absent"
    BUILT = "built"
    CREATED = "created"
    RUNNING = "running"
    STOPPED = "stopped"
    REMOVED = "removed"


class ContainerManager:
    """Builds the scan image and drives the scan container.

    Each operation logs one task and returns whether it succeeded. Failures
    carry the runtime's literal error text as the task name.
    """

    def __init__(
        self,
        name: str,
        context_dir: Path,
        runner: ProcessRunner,
        tracker: TaskTracker,
        results_mount: str = DEFAULT_RESULTS_MOUNT,
        runtime: str = DEFAULT_RUNTIME,
    ) -> None:
        """Initialize ContainerManager.

        Args:
            name: Image tag and container name.
            context_dir: Staged build context; also bound as the results volume.
            runner: Process runner for runtime commands.
            tracker: Task tracker of the current run.
            results_mount: Bind target inside the container.
            runtime: Container runtime executable.
        """
        self.name = name
        self.context_dir = Path(context_dir)
        self.runner = runner
        self.tracker = tracker
        self.results_mount = results_mount
        self.runtime = runtime
        self.state = ContainerState.ABSENT

    def _cmd(self, *args: str) -> List[str]:
        return [self.runtime, *args]

    def build(self) -> bool:
        """Build the scan image from the staged context."""
        task_id = self.tracker.start("Building docker image")
        result = self.runner.run(
            self._cmd(
                "image", "build", "--quiet", "--no-cache",
                "--tag", self.name, "--label", SCAN_LABEL, str(self.context_dir.resolve()),
            ),
            kind="build",
        )
        ok = self.tracker.finish(task_id, result.error_message(), "Docker image built")
        if ok:
            self.state = ContainerState.BUILT
        return ok

    def exists(self) -> bool:
        """Check whether a container with this name is listed (running or not)."""
        result = self.runner.run(
            self._cmd("container", "ls", "--all", "--quiet", "--filter", f"name=^/{self.name}$")
        )
        return bool(result.stdout.strip())

    def image_exists(self) -> bool:
        result = self.runner.run(self._cmd("image", "ls", "--quiet", self.name))
        return bool(result.stdout.strip())

    def create(self) -> bool:
        """Create the container with the workspace bound read-write."""
        task_id = self.tracker.start("Creating docker container")
        volume = f"{self.context_dir.resolve()}:{self.results_mount}:rw"
        result = self.runner.run(
            self._cmd(
                "container", "create", "--volume", volume,
                "--name", self.name, "--label", SCAN_LABEL, self.name,
            )
        )
        ok = self.tracker.finish(task_id, result.error_message(), "Docker container created")
        if ok:
            self.state = ContainerState.CREATED
        return ok

    def start(self) -> bool:
        """Run the container attached and wait for the scan tool to finish."""
        task_id = self.tracker.start("Running docker container")
        self.state = ContainerState.RUNNING
        result = self.runner.run(
            self._cmd("container", "start", "--attach", "--interactive", self.name),
            kind="run",
        )
        return self.tracker.finish(task_id, result.error_message(), "Docker container started")

    def stop(self) -> bool:
        """Stop the container if it exists."""
        task_id = self.tracker.start("Stopping docker container")
        error = None
        if self.exists():
            result = self.runner.run(self._cmd("container", "stop", self.name))
            error = result.error_message()
        else:
            LOGGER.debug(f"No container named {self.name} to stop")
        ok = self.tracker.finish(task_id, error, "Docker container stopped")
        if ok:
            self.state = ContainerState.STOPPED
        return ok

    def remove(self) -> bool:
        """Remove the container and its anonymous volumes if it exists."""
        task_id = self.tracker.start("Removing docker container")
        error = None
        if self.exists():
            result = self.runner.run(self._cmd("container", "rm", "--volumes", self.name))
            error = result.error_message()
        else:
            LOGGER.debug(f"No container named {self.name} to remove")
        ok = self.tracker.finish(task_id, error, "Docker container removed")
        if ok:
            self.state = ContainerState.REMOVED
        return ok

    def remove_image(self) -> bool:
        """Remove the scan image if it exists."""
        task_id = self.tracker.start("Removing docker image")
        error = None
        if self.image_exists():
            result = self.runner.run(self._cmd("image", "rm", "--force", self.name))
            error = result.error_message()
        return self.tracker.finish(task_id, error, "Docker image removed")

    def leftover_containers(self) -> List[str]:
        """Ids of labelled scan containers that are created or exited."""
        result = self.runner.run(self._cmd(
            "container", "ls", "--all", "--quiet",
            "--filter", f"label={SCAN_LABEL}",
            "--filter", "status=created",
            "--filter", "status=exited",
        ))
        return result.stdout.split()

    def leftover_images(self) -> List[str]:
        """Tags of labelled scan images other than this run's."""
        result = self.runner.run(self._cmd(
            "image", "ls", "--filter", f"label={SCAN_LABEL}", "--format", "{{.Repository}}",
        ))
        return [tag for tag in result.stdout.split() if tag not in (self.name, "<none>")]

    def pre_clean(self, remove_images: bool = True) -> None:
        """Remove what earlier runs left behind.

        A container with this run's name is stopped and removed. Labelled scan
        containers that never ran or have exited are removed as well; running
        ones may belong to a scan in another process and are left alone. With
        ``remove_images``, labelled images of earlier runs are removed last.
        """
        if self.exists():
            LOGGER.info(f"Removing leftover container {self.name}")
            self.stop()
            self.remove()

        containers = self.leftover_containers()
        if containers:
            LOGGER.info(f"Removing {len(containers)} leftover scan containers")
            task_id = self.tracker.start("Removing leftover docker containers")
            result = self.runner.run(self._cmd("container", "rm", "--volumes", *containers))
            self.tracker.finish(
                task_id, result.error_message(), "Leftover docker containers removed"
            )

        images = self.leftover_images() if remove_images else []
        if images:
            LOGGER.info(f"Removing leftover scan images: {', '.join(images)}")
            task_id = self.tracker.start("Removing leftover docker images")
            result = self.runner.run(self._cmd("image", "rm", *images))
            self.tracker.finish(
                task_id, result.error_message(), "Leftover docker images removed"
            )

    def run_to_completion(self) -> bool:
        """Create, start, stop and remove the container.

        Every step runs even when an earlier one failed, so the run never
        leaves a container behind.

        Returns:
            True when all steps succeeded.
        """
        results = [self.create(), self.start(), self.stop(), self.remove()]
        return all(results)
