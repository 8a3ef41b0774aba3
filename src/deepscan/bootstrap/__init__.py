"""
Bootstrap module for deepscan.

This module handles:
- Platform detection (OS + architecture)
- Home and staging directory resolution (~/.deepscan/)
- Dependency checks (git, docker, Windows long paths)
"""

from deepscan.bootstrap.platform import get_platform_info, PlatformInfo
from deepscan.bootstrap.paths import get_deepscan_home, DeepscanPaths
from deepscan.bootstrap.dependencies import check_dependencies, DependencyReport

__all__ = [
    "get_platform_info",
    "PlatformInfo",
    "get_deepscan_home",
    "DeepscanPaths",
    "check_dependencies",
    "DependencyReport",
]
