"""Staging directory that becomes the container build context.

Layout after staging::

    <workspace>/
        Dockerfile          build recipe for the scan image
        entrypoint.sh       runs the scan tool inside the container
        package.json        package scans only
        .ort/config/        policy configuration (project scans)
        ...                 project sources (project scans)

The container writes its result files to the workspace root.
"""

from __future__ import annotations

import json
import os
import shutil
import stat
import sys
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from deepscan.core.logging import get_logger
from deepscan.core.tracker import TaskTracker

LOGGER = get_logger(__name__)

# Policy configuration location inside the build context
CONFIG_SUBPATH = Path(".ort") / "config"
# Scratch location for partial config checkouts
TEMP_SUBPATH = Path(".ort") / "temp"

# Windows extended-length path prefix
_WINDOWS_LONG_PATH_PREFIX = "\\\\?\\"

# Missing sources are logged as failed tasks and the run goes on
_MISSING_SOURCE = (FileNotFoundError,)


def extended_path(path: Path) -> str:
    """Return ``path`` in a form that survives long paths on Windows."""
    resolved = str(Path(path).resolve())
    if sys.platform == "win32" and not resolved.startswith(_WINDOWS_LONG_PATH_PREFIX):
        return _WINDOWS_LONG_PATH_PREFIX + resolved
    return resolved


def _make_writable_and_retry(func, path, _exc) -> None:
    """rmtree error handler for read-only files (git objects on Windows)."""
    os.chmod(path, stat.S_IWRITE)
    func(path)


def remove_tree(path: Path) -> None:
    """Delete a directory tree, clearing read-only bits when needed."""
    if sys.version_info >= (3, 12):
        shutil.rmtree(path, onexc=_make_writable_and_retry)
    else:
        shutil.rmtree(path, onerror=_make_writable_and_retry)


class Workspace:
    """Creates, populates and removes the staging directory.

    Every operation is logged as one task.
    """

    def __init__(self, root: Path, tracker: TaskTracker) -> None:
        self.root = Path(root)
        self.tracker = tracker

    @property
    def config_dir(self) -> Path:
        return self.root / CONFIG_SUBPATH

    @property
    def temp_dir(self) -> Path:
        return self.root / TEMP_SUBPATH

    def exists(self) -> bool:
        return self.root.exists()

    def clean(self) -> None:
        """Delete the staging directory if it exists."""
        if not self.root.exists():
            return
        with self.tracker.stage("Cleaning scan project directory", "Scan project directory cleaned"):
            remove_tree(self.root)

    def prepare(self) -> None:
        """Start from a fresh, empty staging directory."""
        self.clean()
        with self.tracker.stage("Creating scan project directory", "Scan project directory created"):
            self.root.mkdir(parents=True)

    def stage_file(
        self,
        source: Path,
        name: str,
        replacements: Optional[Mapping[str, str]] = None,
    ) -> Path:
        """Copy a template file into the workspace root.

        A missing template is logged as a failed task.

        Args:
            source: Template file to copy.
            name: File name inside the workspace.
            replacements: Optional placeholder tokens to substitute in the text.

        Returns:
            Path of the staged file.
        """
        destination = self.root / name
        with self.tracker.stage(
            f"Copying {name} to the scan project",
            f"Copied {name} to the scan project",
            suppress=_MISSING_SOURCE,
        ):
            shutil.copy2(source, destination)
            if replacements:
                _substitute(destination, replacements)
        return destination

    def substitute(self, name: str, token: str, value: str, label: str) -> None:
        """Replace a placeholder token in an already staged file.

        Args:
            name: File name inside the workspace.
            token: Placeholder text to replace.
            value: Replacement text.
            label: What is being set, for the task name.
        """
        with self.tracker.stage(
            f"Updating {label} to {value}",
            f"Updated {label} to {value}",
            suppress=_MISSING_SOURCE,
        ):
            _substitute(self.root / name, {token: value})

    def write_json(self, name: str, data: Dict[str, Any], label: str) -> Path:
        """Write a JSON document (e.g. the package manifest) into the workspace."""
        destination = self.root / name
        with self.tracker.stage(
            f"Writing {label} to the scan project",
            f"Written {label} to the scan project",
        ):
            destination.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
        return destination

    def stage_tree(self, source: Path, dest_subpath: Path | str = "", label: str = "files") -> Path:
        """Recursively copy a directory into the workspace.

        A missing source directory is logged as a failed task.

        Args:
            source: Directory to copy.
            dest_subpath: Target path relative to the workspace root.
            label: What is being copied, for the task name.

        Returns:
            Path of the destination directory.
        """
        destination = self.root / dest_subpath
        with self.tracker.stage(
            f"Copying {label} to the scan project",
            f"Copied {label} to the scan project",
            suppress=_MISSING_SOURCE,
        ):
            source = Path(source)
            if not source.is_dir():
                raise FileNotFoundError(f"Directory not found: {source}")
            shutil.copytree(
                extended_path(source),
                extended_path(destination),
                dirs_exist_ok=True,
            )
        return destination

    def copy_results(self, output_dir: Path, artifacts: List[str]) -> List[Path]:
        """Copy the named result files that exist into ``output_dir``.

        Missing artifacts are skipped.

        Returns:
            Paths of the copied files.
        """
        copied: List[Path] = []
        with self.tracker.stage(
            "Copying scan results to output directory",
            "Copied scan results to output directory",
        ):
            output_dir = Path(output_dir).resolve()
            output_dir.mkdir(parents=True, exist_ok=True)
            for artifact in artifacts:
                source = self.root / artifact
                if not source.is_file():
                    LOGGER.debug(f"Result artifact not produced: {artifact}")
                    continue
                destination = output_dir / artifact
                shutil.copyfile(source, destination)
                copied.append(destination)
        return copied


def _substitute(path: Path, replacements: Mapping[str, str]) -> None:
    text = path.read_text(encoding="utf-8")
    for token, value in replacements.items():
        text = text.replace(token, value)
    path.write_text(text, encoding="utf-8")
