"""Configuration validation for deepscan.

Warns on unknown keys and wrong value types. Validation never raises;
callers get a list of warnings and the loader carries on with defaults.
"""

from __future__ import annotations

from dataclasses import dataclass
from difflib import get_close_matches
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Tuple

import yaml

from deepscan.core.logging import get_logger

LOGGER = get_logger(__name__)


class ValidationSeverity(Enum):
    """Severity level for validation issues."""

    ERROR = "error"  # Config will fail at runtime
    WARNING = "warning"  # Likely mistake but config usable


@dataclass
class ConfigValidationIssue:
    """A validation issue for configuration with severity."""

    message: str
    source: str
    severity: ValidationSeverity
    key: Optional[str] = None
    suggestion: Optional[str] = None


@dataclass
class ConfigValidationWarning:
    """A validation warning for configuration."""

    message: str
    source: str
    key: Optional[str] = None
    suggestion: Optional[str] = None


VALID_TOP_LEVEL_KEYS: Set[str] = {
    "version",
    "workspace",
    "container",
    "timeouts",
    "defaults",
}

# Expected value types per section key
SECTION_SCHEMAS: Dict[str, Dict[str, Tuple[type, ...]]] = {
    "workspace": {
        "path": (str,),
        "keep": (bool,),
        "templates": (str,),
    },
    "container": {
        "name_prefix": (str,),
        "results_mount": (str,),
        "remove_image": (bool,),
    },
    "timeouts": {
        "default": (int, float),
        "build": (int, float),
        "run": (int, float),
        "clone": (int, float),
    },
    "defaults": {
        "ort_config_repo_url": (str,),
        "branch": (str,),
        "config_branch": (str,),
    },
}

_TYPE_NAMES = {str: "a string", bool: "a boolean", int: "a number", float: "a number"}


def validate_config(
    data: Dict[str, Any],
    source: str,
) -> List[ConfigValidationWarning]:
    """Validate configuration dictionary.

    Args:
        data: Config dictionary to validate.
        source: Source file path for warning messages.

    Returns:
        List of validation warnings.
    """
    warnings: List[ConfigValidationWarning] = []

    if not isinstance(data, dict):  # type: ignore[unreachable]
        warnings.append(ConfigValidationWarning(
            message=f"Config must be a mapping, got {type(data).__name__}",
            source=source,
        ))
        return warnings  # type: ignore[unreachable]

    for key in data.keys():
        if key not in VALID_TOP_LEVEL_KEYS:
            _warn(warnings, ConfigValidationWarning(
                message=f"Unknown top-level key '{key}'",
                source=source,
                key=key,
                suggestion=_suggest_key(key, VALID_TOP_LEVEL_KEYS),
            ))

    for section, schema in SECTION_SCHEMAS.items():
        value = data.get(section)
        if value is None:
            continue
        if not isinstance(value, dict):
            warnings.append(ConfigValidationWarning(
                message=f"'{section}' must be a mapping, got {type(value).__name__}",
                source=source,
                key=section,
            ))
            continue
        warnings.extend(_validate_section(section, value, schema, source))

    timeouts = data.get("timeouts")
    if isinstance(timeouts, dict):
        for key, seconds in timeouts.items():
            if _is_number(seconds) and seconds <= 0:
                warnings.append(ConfigValidationWarning(
                    message=f"Invalid value '{seconds}' for 'timeouts.{key}'. Must be positive",
                    source=source,
                    key=f"timeouts.{key}",
                ))

    return warnings


def _validate_section(
    section: str,
    values: Dict[str, Any],
    schema: Dict[str, Tuple[type, ...]],
    source: str,
) -> List[ConfigValidationWarning]:
    warnings: List[ConfigValidationWarning] = []
    for key, value in values.items():
        dotted = f"{section}.{key}"
        expected = schema.get(key)
        if expected is None:
            _warn(warnings, ConfigValidationWarning(
                message=f"Unknown key '{dotted}'",
                source=source,
                key=dotted,
                suggestion=_suggest_key(key, set(schema)),
            ))
            continue
        if value is None:
            continue
        # bool is an int subclass; keep "true" out of numeric fields
        if isinstance(value, bool) and bool not in expected:
            ok = False
        else:
            ok = isinstance(value, expected)
        if not ok:
            warnings.append(ConfigValidationWarning(
                message=f"'{dotted}' must be {_TYPE_NAMES[expected[0]]}, "
                        f"got {type(value).__name__}",
                source=source,
                key=dotted,
            ))
    return warnings


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _warn(warnings: List[ConfigValidationWarning], warning: ConfigValidationWarning) -> None:
    warnings.append(warning)
    _log_warning(warning)


def _suggest_key(invalid_key: str, valid_keys: Set[str]) -> Optional[str]:
    """Suggest a valid key for a typo.

    Args:
        invalid_key: The invalid key that was used.
        valid_keys: Set of valid keys to match against.

    Returns:
        Closest matching valid key, or None if no good match.
    """
    matches = get_close_matches(invalid_key, list(valid_keys), n=1, cutoff=0.6)
    return matches[0] if matches else None


def _log_warning(warning: ConfigValidationWarning) -> None:
    """Log a validation warning."""
    msg = f"{warning.message} in {warning.source}"
    if warning.suggestion:
        msg += f" (did you mean '{warning.suggestion}'?)"
    LOGGER.warning(msg)


def validate_config_file(config_path: Path) -> Tuple[bool, List[ConfigValidationIssue]]:
    """Validate a configuration file from disk.

    Returns:
        Tuple of (is_valid, issues) where is_valid is False if any errors exist.
    """
    issues: List[ConfigValidationIssue] = []
    source = str(config_path)

    if not config_path.exists():
        issues.append(ConfigValidationIssue(
            message=f"Configuration file not found: {config_path}",
            source=source,
            severity=ValidationSeverity.ERROR,
        ))
        return False, issues

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        issues.append(ConfigValidationIssue(
            message=f"Invalid YAML syntax: {e}",
            source=source,
            severity=ValidationSeverity.ERROR,
        ))
        return False, issues

    if data is None:
        issues.append(ConfigValidationIssue(
            message="Configuration file is empty",
            source=source,
            severity=ValidationSeverity.WARNING,
        ))
        return True, issues

    # Type mismatches and invalid values are errors, unknown keys are warnings
    for warning in validate_config(data, source):
        is_error = any(phrase in warning.message for phrase in [
            "must be",
            "Invalid value",
            "Config must be",
        ])
        issues.append(ConfigValidationIssue(
            message=warning.message,
            source=warning.source,
            severity=ValidationSeverity.ERROR if is_error else ValidationSeverity.WARNING,
            key=warning.key,
            suggestion=warning.suggestion,
        ))

    has_errors = any(issue.severity == ValidationSeverity.ERROR for issue in issues)
    return not has_errors, issues
