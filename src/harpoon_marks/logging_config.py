"""Logging configuration for harpoon."""

import os
import sys

from loguru import logger

_LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_DEFAULT_LEVEL = "WARNING"


def resolve_log_level(*, verbose: bool = False) -> str:
    """Pick the log level: --verbose, then $HARPOON_LOG, then WARNING."""
    if verbose:
        return "DEBUG"
    requested = os.environ.get("HARPOON_LOG", "").upper()
    if requested == "WARN":
        requested = "WARNING"
    if requested in _LOG_LEVELS:
        return requested
    return _DEFAULT_LEVEL


def configure_logging(*, verbose: bool = False) -> None:
    """Configure loguru with appropriate level."""
    logger.remove()
    logger.add(
        sys.stderr, level=resolve_log_level(verbose=verbose), format="{level.icon} {message}"
    )
