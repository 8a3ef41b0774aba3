"""Scan options: a tagged union over the three scan kinds.

Each options class carries its discriminant as ``kind``. Callers building
options from loose data (MCP arguments, JSON) go through
:func:`options_from_dict`, which requires the discriminant instead of
guessing the kind from which fields are present.
"""

from __future__ import annotations

from dataclasses import MISSING, Field, dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any, ClassVar, Dict, Optional, Type, Union

from deepscan.core.errors import OptionsError


class ScanKind(str, Enum):
    """Discriminant of the scan options union."""

    PACKAGE = "package"
    PROJECT = "project"
    GIT_PROJECT = "git_project"


@dataclass(frozen=True)
class PackageOptions:
    """Scan a published npm package.

    Attributes:
        package_name: npm package name (e.g. ``left-pad``).
        package_version: Version or range to install.
        ort_config_repo_url: Git URL of the policy configuration repository.
        results_path: Optional directory receiving the result files.
    """

    kind: ClassVar[ScanKind] = ScanKind.PACKAGE

    package_name: str
    package_version: str
    ort_config_repo_url: str
    results_path: Optional[Path] = None


@dataclass(frozen=True)
class ProjectOptions:
    """Scan a project directory on the local disk.

    Attributes:
        project_path: Project sources to scan.
        project_config_path: Local policy configuration directory.
        results_path: Optional directory receiving the result files.
    """

    kind: ClassVar[ScanKind] = ScanKind.PROJECT

    project_path: Path
    project_config_path: Path
    results_path: Optional[Path] = None


@dataclass(frozen=True)
class GitProjectOptions:
    """Scan a project hosted in a git repository.

    Attributes:
        project_url: Clone URL of the project.
        project_config_url: Clone URL of the policy configuration repository.
        project_branch: Branch of the project to scan.
        project_config_branch: Branch of the configuration repository.
        project_config_folder: Subfolder of the configuration repository that
            holds the configuration (default: repository root).
        results_path: Optional directory receiving the result files.
        enable_long_path: On Windows, enable long path support instead of
            failing the dependency check.
    """

    kind: ClassVar[ScanKind] = ScanKind.GIT_PROJECT

    project_url: str
    project_config_url: str
    project_branch: str = "main"
    project_config_branch: str = "main"
    project_config_folder: Optional[str] = None
    results_path: Optional[Path] = None
    enable_long_path: bool = False


ScanOptions = Union[PackageOptions, ProjectOptions, GitProjectOptions]

OPTIONS_BY_KIND: Dict[ScanKind, Type[Any]] = {
    ScanKind.PACKAGE: PackageOptions,
    ScanKind.PROJECT: ProjectOptions,
    ScanKind.GIT_PROJECT: GitProjectOptions,
}

_PATH_FIELDS = {"project_path", "project_config_path", "results_path"}


def options_from_dict(data: Dict[str, Any]) -> ScanOptions:
    """Build scan options from a mapping carrying a ``kind`` key.

    Args:
        data: Field values plus the ``kind`` discriminant.

    Returns:
        The options instance for that kind.

    Raises:
        OptionsError: If the kind is missing or unknown, a required field is
            missing or empty, or a field does not belong to the kind.
    """
    raw_kind = data.get("kind")
    if raw_kind is None:
        raise OptionsError(
            "Scan options must name their kind: "
            + ", ".join(kind.value for kind in ScanKind)
        )
    try:
        kind = ScanKind(str(raw_kind).replace("-", "_"))
    except ValueError as e:
        raise OptionsError(f"Unknown scan kind '{raw_kind}'") from e

    options_cls = OPTIONS_BY_KIND[kind]
    known = {f.name: f for f in fields(options_cls)}
    values = {key: value for key, value in data.items() if key != "kind"}

    unknown = sorted(set(values) - set(known))
    if unknown:
        raise OptionsError(f"Unknown options for {kind.value} scan: {', '.join(unknown)}")

    kwargs: Dict[str, Any] = {}
    for name, value in values.items():
        if value is None or value == "":
            continue
        kwargs[name] = Path(str(value)).expanduser() if name in _PATH_FIELDS else value

    missing = [
        name for name, f in known.items()
        if _is_required(f) and not kwargs.get(name)
    ]
    if missing:
        raise OptionsError(f"Missing options for {kind.value} scan: {', '.join(missing)}")

    return options_cls(**kwargs)


def _is_required(f: Field) -> bool:
    return f.default is MISSING and f.default_factory is MISSING
