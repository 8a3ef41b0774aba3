"""Platform detection for deepscan.

The scan itself runs inside a container, so any host with a working
container runtime is supported. Platform details matter for Windows only,
where long filesystem paths must be enabled before project checkouts.
"""

from __future__ import annotations

import platform
from dataclasses import dataclass

# Architecture normalization map
_ARCH_MAP = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "arm64": "arm64",
    "aarch64": "arm64",
}


def normalize_arch(machine: str) -> str:
    """Normalize architecture string to standard form.

    Args:
        machine: Raw architecture string from platform.machine()

    Returns:
        Normalized architecture, or the lowercased input when unknown.
    """
    return _ARCH_MAP.get(machine.lower(), machine.lower())


def detect_os() -> str:
    """Return the lowercase OS name (darwin, linux, windows, ...)."""
    return platform.system().lower()


def is_windows() -> bool:
    return detect_os() == "windows"


@dataclass(frozen=True)
class PlatformInfo:
    """Information about the current platform.

    Attributes:
        os: Operating system (darwin, linux, windows).
        arch: CPU architecture (amd64, arm64, ...).
    """

    os: str
    arch: str

    @property
    def label(self) -> str:
        """Example: "darwin-arm64", "linux-amd64"."""
        return f"{self.os}-{self.arch}"

    @property
    def needs_long_paths(self) -> bool:
        """Whether project checkouts require long path support."""
        return self.os == "windows"


def get_platform_info() -> PlatformInfo:
    """Detect and return current platform information."""
    return PlatformInfo(os=detect_os(), arch=normalize_arch(platform.machine()))
