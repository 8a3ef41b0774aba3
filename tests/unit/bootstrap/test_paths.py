"""Tests for path management functionality."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

from deepscan.bootstrap.paths import (
    DEFAULT_HOME_DIR_NAME,
    TEMPLATES_DIR,
    DeepscanPaths,
    get_deepscan_home,
)


class TestGetDeepscanHome:
    """Tests for get_deepscan_home function."""

    def test_returns_default_in_user_home(self, tmp_path: Path) -> None:
        with patch.dict(os.environ, {"HOME": str(tmp_path), "USERPROFILE": str(tmp_path)}):
            os.environ.pop("DEEPSCAN_HOME", None)
            home = get_deepscan_home()
            assert home == tmp_path / DEFAULT_HOME_DIR_NAME

    def test_respects_deepscan_home_env_var(self, tmp_path: Path) -> None:
        custom_home = tmp_path / "custom-deepscan"
        with patch.dict(os.environ, {"DEEPSCAN_HOME": str(custom_home)}):
            assert get_deepscan_home() == custom_home

    def test_empty_env_var_is_ignored(self, tmp_path: Path) -> None:
        with patch.dict(os.environ, {"DEEPSCAN_HOME": "", "HOME": str(tmp_path),
                                     "USERPROFILE": str(tmp_path)}):
            assert get_deepscan_home() == tmp_path / DEFAULT_HOME_DIR_NAME


class TestDeepscanPaths:
    """Tests for DeepscanPaths class."""

    def test_paths_from_home(self, tmp_path: Path) -> None:
        home = tmp_path / ".deepscan"
        paths = DeepscanPaths(home)

        assert paths.home == home
        assert paths.config_dir == home / "config"
        assert paths.workspace_dir == home / "project-scan"

    def test_default_uses_env_home(self, tmp_path: Path) -> None:
        with patch.dict(os.environ, {"DEEPSCAN_HOME": str(tmp_path)}):
            assert DeepscanPaths.default().home == tmp_path

    def test_templates_are_packaged(self) -> None:
        paths = DeepscanPaths(Path("/unused"))

        assert paths.templates_dir == TEMPLATES_DIR
        assert (TEMPLATES_DIR / "entrypoint.sh").is_file()
        assert (TEMPLATES_DIR / "scan-package" / "Dockerfile").is_file()
        assert (TEMPLATES_DIR / "scan-package" / "package.json").is_file()
        assert (TEMPLATES_DIR / "scan-project" / "Dockerfile").is_file()
