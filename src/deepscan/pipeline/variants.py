"""Variant strategies: what differs between package, project and git scans.

The executor runs the same stage sequence for every scan. A variant
contributes two things: extra dependency checks and the population of the
workspace before the common tail (entry script, image build, container run,
result evaluation).
"""

from __future__ import annotations

import json
import shutil
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from deepscan.bootstrap.dependencies import (
    enable_windows_long_paths,
    windows_long_paths_enabled,
)
from deepscan.bootstrap.platform import PlatformInfo
from deepscan.core.errors import OptionsError
from deepscan.core.git import GitClient, remove_git_metadata
from deepscan.core.logging import get_logger
from deepscan.core.subprocess_runner import ERROR_LINE_SEPARATOR, ProcessRunner
from deepscan.core.tracker import TaskTracker
from deepscan.core.workspace import CONFIG_SUBPATH, Workspace, extended_path, remove_tree
from deepscan.pipeline.options import (
    GitProjectOptions,
    PackageOptions,
    ProjectOptions,
    ScanOptions,
)

LOGGER = get_logger(__name__)

DOCKERFILE = "Dockerfile"
MANIFEST = "package.json"
ENTRYPOINT = "entrypoint.sh"

# Placeholder in the package Dockerfile replaced by the config repository URL
ORT_CONFIG_REPO_TOKEN = "${ort-config-repo}"


@dataclass
class PipelineContext:
    """Collaborators shared by every stage of one run."""

    workspace: Workspace
    tracker: TaskTracker
    runner: ProcessRunner
    git: GitClient
    templates_dir: Path
    platform: PlatformInfo

    def template(self, *parts: str) -> Path:
        return self.templates_dir.joinpath(*parts)


class ScanVariant(ABC):
    """Strategy for one scan kind."""

    def __init__(self, options: ScanOptions) -> None:
        self.options = options

    @property
    def results_path(self) -> Optional[Path]:
        return self.options.results_path

    def check_extra_dependencies(self, ctx: PipelineContext) -> List[str]:
        """Run checks beyond git and docker.

        Returns:
            Names of the checks that failed.
        """
        return []

    @abstractmethod
    def prepare_workspace(self, ctx: PipelineContext) -> None:
        """Stage the variant's payload into the freshly created workspace."""


class PackageVariant(ScanVariant):
    """Scans a published npm package through a generated manifest."""

    options: PackageOptions

    def prepare_workspace(self, ctx: PipelineContext) -> None:
        manifest = self.build_manifest(ctx)
        ctx.workspace.write_json(MANIFEST, manifest, "package json")
        ctx.workspace.stage_file(ctx.template("scan-package", DOCKERFILE), DOCKERFILE)
        ctx.workspace.substitute(
            DOCKERFILE,
            ORT_CONFIG_REPO_TOKEN,
            self.options.ort_config_repo_url,
            "ORT config repo",
        )

    def build_manifest(self, ctx: PipelineContext) -> Dict[str, Any]:
        """Read the manifest template and add the package to its dependencies."""
        package_ref = f"{self.options.package_name}@{self.options.package_version}"
        with ctx.tracker.stage(
            f"Adding {package_ref} to the scan project dependencies",
            f"Added {package_ref} to the scan project dependencies",
        ):
            template = ctx.template("scan-package", MANIFEST)
            manifest = json.loads(template.read_text(encoding="utf-8"))
            dependencies = dict(manifest.get("dependencies") or {})
            dependencies[self.options.package_name] = self.options.package_version
            manifest["dependencies"] = dependencies
        return manifest


class ProjectVariant(ScanVariant):
    """Scans a project directory from the local disk."""

    options: ProjectOptions

    def prepare_workspace(self, ctx: PipelineContext) -> None:
        ctx.workspace.stage_file(ctx.template("scan-project", DOCKERFILE), DOCKERFILE)
        ctx.workspace.stage_tree(self.options.project_path, "", "project files")
        ctx.workspace.stage_tree(
            self.options.project_config_path, CONFIG_SUBPATH, "ORT config files"
        )


class GitProjectVariant(ScanVariant):
    """Scans a project checked out from a git repository."""

    options: GitProjectOptions

    def check_extra_dependencies(self, ctx: PipelineContext) -> List[str]:
        if not ctx.platform.needs_long_paths:
            return []

        if self.options.enable_long_path:
            return self.enable_long_paths(ctx)

        failed = []
        if not windows_long_paths_enabled(ctx.runner):
            failed.append("windows long paths")
        if not ctx.git.long_paths_enabled():
            failed.append("git long paths")
        return failed

    def enable_long_paths(self, ctx: PipelineContext) -> List[str]:
        """Turn on long path support in Windows and git where it is off.

        Returns:
            Names of the settings that could not be enabled.
        """
        task_id = ctx.tracker.start("Enabling Windows long path support")
        failed = []
        errors = []
        if not windows_long_paths_enabled(ctx.runner):
            error = enable_windows_long_paths(ctx.runner).error_message()
            if error:
                failed.append("windows long paths")
                errors.append(error)
        if not ctx.git.long_paths_enabled():
            error = ctx.git.enable_long_paths().error_message()
            if error:
                failed.append("git long paths")
                errors.append(error)
        ctx.tracker.finish(
            task_id, ERROR_LINE_SEPARATOR.join(errors), "Enabled Windows long path support"
        )
        return failed

    def prepare_workspace(self, ctx: PipelineContext) -> None:
        self.checkout_project(ctx)
        self.checkout_config(ctx)
        ctx.workspace.stage_file(ctx.template("scan-project", DOCKERFILE), DOCKERFILE)

    def checkout_project(self, ctx: PipelineContext) -> bool:
        """Clone the project into the workspace root."""
        root = ctx.workspace.root
        task_id = ctx.tracker.start("Checking out project from git repository")
        result = ctx.git.clone(self.options.project_url, self.options.project_branch, root)
        remove_git_metadata(root)
        return ctx.tracker.finish(task_id, result.error_message(), "Project checked out")

    def checkout_config(self, ctx: PipelineContext) -> bool:
        """Clone the policy configuration into the workspace config folder.

        With ``project_config_folder`` set, the repository is cloned into a
        scratch folder and only that subfolder is copied over.
        """
        workspace = ctx.workspace
        task_id = ctx.tracker.start("Checking out project ORT config from git repository")
        workspace.config_dir.mkdir(parents=True, exist_ok=True)

        folder = self.options.project_config_folder
        if folder:
            workspace.temp_dir.mkdir(parents=True, exist_ok=True)
            result = ctx.git.clone(
                self.options.project_config_url,
                self.options.project_config_branch,
                workspace.temp_dir,
            )
            error = result.error_message()
            if not error:
                error = _copy_config_folder(workspace.temp_dir, folder, workspace.config_dir)
            if workspace.temp_dir.exists():
                remove_tree(workspace.temp_dir)
        else:
            result = ctx.git.clone(
                self.options.project_config_url,
                self.options.project_config_branch,
                workspace.config_dir,
            )
            error = result.error_message()

        remove_git_metadata(workspace.config_dir)
        return ctx.tracker.finish(task_id, error, "Project ORT config checked out")


def _copy_config_folder(checkout: Path, folder: str, destination: Path) -> Optional[str]:
    """Copy a config subfolder out of a scratch checkout.

    Returns:
        An error message, or None on success.
    """
    source = checkout / folder
    if not source.is_dir():
        return f"Config folder not found in repository: {folder}"
    shutil.copytree(extended_path(source), extended_path(destination), dirs_exist_ok=True)
    return None


_VARIANTS = {
    PackageOptions: PackageVariant,
    ProjectOptions: ProjectVariant,
    GitProjectOptions: GitProjectVariant,
}


def get_variant(options: ScanOptions) -> ScanVariant:
    """Select the variant strategy for a scan options instance."""
    variant_cls = _VARIANTS.get(type(options))
    if variant_cls is None:
        raise OptionsError(f"Unsupported scan options: {type(options).__name__}")
    return variant_cls(options)
