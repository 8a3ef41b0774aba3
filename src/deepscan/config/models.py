"""Typed configuration for deepscan."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from deepscan.bootstrap.paths import DeepscanPaths


@dataclass
class WorkspaceConfig:
    """Staging directory settings.

    Attributes:
        path: Staging directory (default: ~/.deepscan/project-scan).
        keep: Keep the staging directory after the scan.
        templates: Directory with custom build-context templates.
    """

    path: Optional[Path] = None
    keep: bool = False
    templates: Optional[Path] = None


@dataclass
class ContainerConfig:
    """Container naming and volume settings."""

    name_prefix: str = "deep-scan"
    results_mount: str = "/home/ort/results"
    remove_image: bool = True


@dataclass
class TimeoutConfig:
    """Timeouts in seconds per class of external command."""

    default: float = 600
    build: float = 3600
    run: float = 14400
    clone: float = 900

    def as_dict(self) -> Dict[str, float]:
        return {"build": self.build, "run": self.run, "clone": self.clone}


@dataclass
class DefaultsConfig:
    """Defaults for scan options not given on the command line."""

    ort_config_repo_url: str = ""
    branch: str = "main"
    config_branch: str = "main"


@dataclass
class DeepScanConfig:
    """Complete deepscan configuration."""

    workspace: WorkspaceConfig = field(default_factory=WorkspaceConfig)
    container: ContainerConfig = field(default_factory=ContainerConfig)
    timeouts: TimeoutConfig = field(default_factory=TimeoutConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)

    # Where the values came from, for `deepscan status`
    _config_sources: List[str] = field(default_factory=list, repr=False)

    def workspace_path(self) -> Path:
        """Resolved staging directory."""
        if self.workspace.path:
            return Path(self.workspace.path).expanduser()
        return DeepscanPaths.default().workspace_dir

    def templates_path(self) -> Path:
        if self.workspace.templates:
            return Path(self.workspace.templates).expanduser()
        return DeepscanPaths.default().templates_dir

    @property
    def sources(self) -> List[str]:
        return list(self._config_sources)
