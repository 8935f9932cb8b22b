"""Path normalization and project key derivation."""

import os
import posixpath
import subprocess
from pathlib import Path

from loguru import logger


def project_key(cwd: str | Path | None = None) -> str:
    """Return the working directory as an absolute, '/'-separated path."""
    base = Path(cwd) if cwd is not None else Path.cwd()
    return posixpath.normpath(str(base.absolute()).replace("\\", "/"))


def normalize_path(path: str, cwd: str | Path | None = None) -> str:
    """Canonicalize a file name for storage and comparison.

    Absolute paths inside the working directory become relative to it, other
    paths are only cleaned up (``~`` expanded, ``\\`` turned into ``/``,
    ``.`` and ``..`` collapsed). Applying it twice gives the same result.
    """
    if not path:
        return ""
    expanded = os.path.expanduser(path.replace("\\", "/")).replace("\\", "/")
    normalized = posixpath.normpath(expanded)
    if posixpath.isabs(normalized):
        base = project_key(cwd).rstrip("/")
        if normalized.startswith(base + "/"):
            return normalized[len(base) + 1 :]
    return normalized


def _git_branch(cwd: str | Path | None) -> str | None:
    """Current branch name, or None outside a repository."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--abbrev-ref", "HEAD"],
            cwd=str(cwd) if cwd is not None else None,
            capture_output=True,
            text=True,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError) as e:
        logger.debug("No git branch for {}: {}", cwd or Path.cwd(), e)
        return None
    return result.stdout.strip() or None


def branch_key(cwd: str | Path | None = None) -> str:
    """Key marks by working directory and branch, e.g. ``/src/app-main``.

    Falls back to :func:`project_key` when there is no usable git branch.
    """
    branch = _git_branch(cwd)
    if branch is None:
        return project_key(cwd)
    return f"{project_key(cwd)}-{branch}"


def expand_key(key: str) -> str:
    """Expand ``~`` and environment variables in a project key read from disk."""
    return os.path.expandvars(os.path.expanduser(key))
