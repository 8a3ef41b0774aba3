"""Configuration loading for deepscan."""

from deepscan.config.models import (
    ContainerConfig,
    DeepScanConfig,
    DefaultsConfig,
    TimeoutConfig,
    WorkspaceConfig,
)
from deepscan.config.loader import load_config

__all__ = [
    "ContainerConfig",
    "DeepScanConfig",
    "DefaultsConfig",
    "TimeoutConfig",
    "WorkspaceConfig",
    "load_config",
]
