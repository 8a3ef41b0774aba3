"""Reading the scan tool's YAML reports.

The container deposits ``scan-result.yml`` and ``evaluation-result.yml`` in
the workspace. Policy violations live under ``evaluator.violations``:

    evaluator:
      violations:
      - rule: "UNHANDLED_LICENSE"
        pkg: "NPM::ckeditor4:4.22.0"
        license: "NOASSERTION"
        license_source: "DETECTED"
        severity: "ERROR"
        message: "..."
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from deepscan.core.logging import get_logger
from deepscan.core.models import Violation

LOGGER = get_logger(__name__)

SCAN_RESULT_FILE = "scan-result.yml"
EVALUATION_RESULT_FILE = "evaluation-result.yml"

# Artifacts copied to a requested output directory, in copy order
RESULT_ARTIFACTS = (
    "analyzer-result.yml",
    SCAN_RESULT_FILE,
    EVALUATION_RESULT_FILE,
    "bom.cyclonedx.json",
    "scan-report-web-app.html",
)


def read_report_text(path: Path) -> Optional[str]:
    """Read a report file, returning None when it is missing or unreadable."""
    LOGGER.debug(f"Reading file: {path}")
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        LOGGER.debug(f"Error reading file {path}: {e}")
        return None


def parse_report_text(content: str) -> Optional[Any]:
    """Parse YAML report text into plain Python data.

    Returns:
        The parsed tree, or None for empty or malformed content.
    """
    try:
        return yaml.safe_load(content)
    except yaml.YAMLError as e:
        LOGGER.warning(f"Report is not valid YAML: {e}")
        return None


def parse_report(path: Path) -> Optional[Any]:
    """Load a report file into a tree.

    A missing, unreadable, empty or malformed report yields None; callers
    treat that as "nothing to evaluate", not as an error.
    """
    content = read_report_text(path)
    if content is None:
        return None
    return parse_report_text(content)


def has_evaluation(tree: Any) -> bool:
    """Check whether a report tree carries an ``evaluator`` section."""
    return isinstance(tree, dict) and bool(tree.get("evaluator"))


def extract_violations(tree: Any) -> List[Violation]:
    """Map ``evaluator.violations`` entries to Violation records.

    Entries keep their source order. A tree without that path has no
    violations.
    """
    if not isinstance(tree, dict):
        return []
    evaluator = tree.get("evaluator")
    if not isinstance(evaluator, dict):
        return []
    entries = evaluator.get("violations") or []
    if not isinstance(entries, list):
        LOGGER.warning("evaluator.violations is not a list; ignoring it")
        return []

    return [_to_violation(entry) for entry in entries if isinstance(entry, dict)]


def _to_violation(entry: Dict[str, Any]) -> Violation:
    license_source = entry.get("license_source")
    if license_source is None:
        license_source = entry.get("licenseSource")

    return Violation(
        rule=_text(entry.get("rule")),
        package_name=_text(entry.get("pkg")),
        license=_text(entry.get("license")),
        license_source=_text(license_source),
        severity=_text(entry.get("severity")),
        message=_text(entry.get("message")),
    )


def _text(value: Any) -> str:
    return "" if value is None else str(value)
