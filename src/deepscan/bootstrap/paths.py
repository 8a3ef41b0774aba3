"""Path management for deepscan.

Handles the ~/.deepscan directory structure:

    ~/.deepscan/
        config/config.yml   - global configuration
        project-scan/       - default staging directory
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar

# Default directory name under user home
DEFAULT_HOME_DIR_NAME = ".deepscan"

# Environment variable to override home directory
DEEPSCAN_HOME_ENV = "DEEPSCAN_HOME"

# Build-context templates shipped with the package
TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


def get_deepscan_home() -> Path:
    """Get the deepscan home directory path.

    Resolution order:
    1. DEEPSCAN_HOME environment variable (if set)
    2. ~/.deepscan (default)
    """
    env_home = os.environ.get(DEEPSCAN_HOME_ENV)
    if env_home:
        return Path(env_home).expanduser()
    return Path.home() / DEFAULT_HOME_DIR_NAME


@dataclass
class DeepscanPaths:
    """Manages paths within the deepscan home directory."""

    home: Path

    _CONFIG_DIR: ClassVar[str] = "config"
    _WORKSPACE_DIR: ClassVar[str] = "project-scan"

    @classmethod
    def default(cls) -> "DeepscanPaths":
        """Create paths from the default deepscan home."""
        return cls(get_deepscan_home())

    @property
    def config_dir(self) -> Path:
        return self.home / self._CONFIG_DIR

    @property
    def workspace_dir(self) -> Path:
        """Default staging directory for scans."""
        return self.home / self._WORKSPACE_DIR

    @property
    def templates_dir(self) -> Path:
        return TEMPLATES_DIR
