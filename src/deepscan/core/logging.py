"""Diagnostic logging for deepscan.

The task log (see :mod:`deepscan.core.task_log`) is what users watch; the
loggers configured here trace commands and file access for developers.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

# Environment variable that sets the level when no CLI flag does
LOG_LEVEL_ENV = "DEEPSCAN_LOG_LEVEL"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def resolve_level(*, debug: bool = False, verbose: bool = False, quiet: bool = False) -> int:
    """Resolve the logging level from CLI flags.

    Precedence:
    - quiet → ERROR
    - debug → DEBUG
    - verbose → INFO
    - DEEPSCAN_LOG_LEVEL, when set to a known level name
    - default → WARNING
    """

    if quiet:
        return logging.ERROR
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO

    env_level = os.environ.get(LOG_LEVEL_ENV, "").strip().upper()
    if env_level in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        return getattr(logging, env_level)
    return logging.WARNING


def configure_logging(*, debug: bool = False, verbose: bool = False, quiet: bool = False) -> None:
    """Configure root logging on stderr so stdout stays free for scan output."""

    logging.basicConfig(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        format=LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-level logger."""

    return logging.getLogger(name if name is not None else "deepscan")
