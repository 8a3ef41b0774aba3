"""Configuration file loading and merging.

Handles loading configuration from YAML files with:
- Project-level config (.deepscan.yml in the working directory)
- Global config (~/.deepscan/config/config.yml)
- Environment variable expansion (${VAR})
- Config merging with proper precedence
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from deepscan.bootstrap.paths import get_deepscan_home
from deepscan.config.models import (
    ContainerConfig,
    DeepScanConfig,
    DefaultsConfig,
    TimeoutConfig,
    WorkspaceConfig,
)
from deepscan.config.validation import validate_config
from deepscan.core.errors import ConfigError
from deepscan.core.logging import get_logger

LOGGER = get_logger(__name__)

# Config file names
PROJECT_CONFIG_NAMES = [".deepscan.yml", ".deepscan.yaml", "deepscan.yml", "deepscan.yaml"]
GLOBAL_CONFIG_NAME = "config.yml"

# Environment variable pattern: ${VAR} or ${VAR:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")

__all__ = ["ConfigError", "load_config"]


def load_config(
    project_root: Optional[Path] = None,
    cli_config_path: Optional[Path] = None,
    cli_overrides: Optional[Dict[str, Any]] = None,
) -> DeepScanConfig:
    """Load configuration with proper precedence.

    Precedence (highest to lowest):
    1. CLI flags (cli_overrides)
    2. Custom config file (cli_config_path) OR project config (.deepscan.yml)
    3. Global config (~/.deepscan/config/config.yml)
    4. Built-in defaults

    Args:
        project_root: Directory searched for a project config (default: cwd).
        cli_config_path: Optional path to custom config file (--config flag).
        cli_overrides: Dict of CLI flag overrides.

    Returns:
        Merged DeepScanConfig instance.

    Raises:
        ConfigError: If specified config file doesn't exist or has parse errors.
    """
    sources: List[str] = []
    merged: Dict[str, Any] = {}
    project_root = project_root or Path.cwd()

    # Layer 1: Global config
    global_path = find_global_config()
    if global_path:
        try:
            global_dict = load_yaml_file(global_path)
            validate_config(global_dict, source=str(global_path))
            merged = merge_configs(merged, global_dict)
            sources.append(f"global:{global_path}")
            LOGGER.debug(f"Loaded global config from {global_path}")
        except (yaml.YAMLError, ConfigError, OSError) as e:
            LOGGER.warning(f"Failed to load global config: {e}")

    # Layer 2: Project or custom config
    if cli_config_path:
        if not cli_config_path.exists():
            raise ConfigError(f"Config file not found: {cli_config_path}")
        layer_path: Optional[Path] = cli_config_path
        label = "custom"
    else:
        layer_path = find_project_config(project_root)
        label = "project"

    if layer_path:
        try:
            layer_dict = load_yaml_file(layer_path)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {layer_path}: {e}") from e
        validate_config(layer_dict, source=str(layer_path))
        merged = merge_configs(merged, layer_dict)
        sources.append(f"{label}:{layer_path}")
        LOGGER.debug(f"Loaded {label} config from {layer_path}")

    # Layer 3: CLI overrides
    if cli_overrides:
        merged = merge_configs(merged, cli_overrides)
        sources.append("cli")
        LOGGER.debug("Applied CLI overrides")

    config = dict_to_config(merged)
    config._config_sources = sources

    LOGGER.debug(f"Config loaded from sources: {sources}")
    return config


def find_project_config(project_root: Path) -> Optional[Path]:
    """Find a config file in ``project_root``."""
    for name in PROJECT_CONFIG_NAMES:
        config_path = project_root / name
        if config_path.is_file():
            return config_path
    return None


def find_global_config() -> Optional[Path]:
    """Find global config at ~/.deepscan/config/config.yml."""
    config_path = get_deepscan_home() / "config" / GLOBAL_CONFIG_NAME
    if config_path.is_file():
        return config_path
    return None


def load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load and parse a YAML config file.

    Performs environment variable expansion on string values.

    Raises:
        yaml.YAMLError: If YAML parsing fails.
        ConfigError: If the document is not a mapping.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be a YAML mapping, got {type(data).__name__}")

    return expand_env_vars(data)


def expand_env_vars(data: Any) -> Any:
    """Recursively expand ${VAR} and ${VAR:-default} in string values."""
    if isinstance(data, dict):
        return {k: expand_env_vars(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [expand_env_vars(item) for item in data]
    elif isinstance(data, str):
        return ENV_VAR_PATTERN.sub(_env_var_replacer, data)
    else:
        return data


def _env_var_replacer(match: re.Match[str]) -> str:
    """Replace environment variable reference with its value."""
    var_name = match.group(1)
    default_value = match.group(2)

    value = os.environ.get(var_name)
    if value is not None:
        return value
    if default_value is not None:
        return default_value

    LOGGER.warning(f"Environment variable ${var_name} is not set and has no default")
    return ""


def merge_configs(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge two config dicts, with overlay taking precedence.

    Dicts merge recursively; scalars and lists from the overlay replace.
    """
    result = base.copy()

    for key, overlay_value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(overlay_value, dict):
            result[key] = merge_configs(result[key], overlay_value)
        else:
            result[key] = overlay_value

    return result


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key) or {}
    return value if isinstance(value, dict) else {}


def _optional_path(value: Any) -> Optional[Path]:
    if not isinstance(value, str) or not value:
        return None
    return Path(value).expanduser()


def _string(values: Dict[str, Any], key: str, default: str) -> str:
    value = values.get(key)
    return value if isinstance(value, str) and value else default


def _flag(values: Dict[str, Any], key: str, default: bool) -> bool:
    value = values.get(key)
    return value if isinstance(value, bool) else default


def _seconds(values: Dict[str, Any], key: str, default: float) -> float:
    value = values.get(key)
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0:
        return float(value)
    return default


def dict_to_config(data: Dict[str, Any]) -> DeepScanConfig:
    """Convert a merged config dict to a typed DeepScanConfig.

    Values of the wrong type fall back to the built-in default; validation
    has already warned about them.
    """
    workspace_data = _section(data, "workspace")
    workspace = WorkspaceConfig(
        path=_optional_path(workspace_data.get("path")),
        keep=_flag(workspace_data, "keep", False),
        templates=_optional_path(workspace_data.get("templates")),
    )

    container_defaults = ContainerConfig()
    container_data = _section(data, "container")
    container = ContainerConfig(
        name_prefix=_string(container_data, "name_prefix", container_defaults.name_prefix),
        results_mount=_string(container_data, "results_mount", container_defaults.results_mount),
        remove_image=_flag(container_data, "remove_image", container_defaults.remove_image),
    )

    timeout_defaults = TimeoutConfig()
    timeout_data = _section(data, "timeouts")
    timeouts = TimeoutConfig(
        default=_seconds(timeout_data, "default", timeout_defaults.default),
        build=_seconds(timeout_data, "build", timeout_defaults.build),
        run=_seconds(timeout_data, "run", timeout_defaults.run),
        clone=_seconds(timeout_data, "clone", timeout_defaults.clone),
    )

    defaults_data = _section(data, "defaults")
    defaults = DefaultsConfig(
        ort_config_repo_url=_string(defaults_data, "ort_config_repo_url", ""),
        branch=_string(defaults_data, "branch", "main"),
        config_branch=_string(defaults_data, "config_branch", "main"),
    )

    return DeepScanConfig(
        workspace=workspace,
        container=container,
        timeouts=timeouts,
        defaults=defaults,
    )


def get_default_config() -> DeepScanConfig:
    """Built-in defaults."""
    return DeepScanConfig()
