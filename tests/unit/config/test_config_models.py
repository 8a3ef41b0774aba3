"""Tests for typed configuration models."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

from deepscan.bootstrap.paths import TEMPLATES_DIR
from deepscan.config.models import DeepScanConfig, WorkspaceConfig


class TestDeepScanConfig:
    """Tests for DeepScanConfig."""

    def test_default_workspace_under_home(self, tmp_path: Path) -> None:
        with patch.dict(os.environ, {"DEEPSCAN_HOME": str(tmp_path)}):
            assert DeepScanConfig().workspace_path() == tmp_path / "project-scan"

    def test_explicit_workspace(self, tmp_path: Path) -> None:
        config = DeepScanConfig(workspace=WorkspaceConfig(path=tmp_path / "ws"))
        assert config.workspace_path() == tmp_path / "ws"

    def test_default_templates_are_packaged(self) -> None:
        assert DeepScanConfig().templates_path() == TEMPLATES_DIR

    def test_sources_is_a_copy(self) -> None:
        config = DeepScanConfig()
        config.sources.append("x")
        assert config.sources == []

    def test_defaults(self) -> None:
        config = DeepScanConfig()

        assert config.workspace.keep is False
        assert config.container.remove_image is True
        assert config.container.results_mount == "/home/ort/results"
        assert config.timeouts.default == 600
        assert config.defaults.ort_config_repo_url == ""
