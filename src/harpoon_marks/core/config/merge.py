"""Layered merging of raw configuration payloads."""

import copy
from collections.abc import Mapping
from typing import Any

from loguru import logger

from harpoon_marks.core.paths import expand_key


def _merge_into(target: dict[str, Any], source: Mapping[str, Any]) -> None:
    for key, value in source.items():
        if isinstance(value, Mapping) and isinstance(target.get(key), dict):
            _merge_into(target[key], value)
        else:
            # Lists and scalars replace the lower layer wholesale, lists are never concatenated.
            target[key] = copy.deepcopy(value)


def merge_tables(*layers: Mapping[str, Any]) -> dict[str, Any]:
    """Merge payloads left to right, later layers taking precedence.

    Objects present on both sides are merged key by key. Every other value,
    including lists, is taken from the highest layer that defines it. Inputs
    are left untouched.
    """
    out: dict[str, Any] = {}
    for layer in layers:
        _merge_into(out, layer)
    return out


def expand_dir(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of ``payload`` with ``~`` and env vars expanded in project keys."""
    out = dict(payload)
    projects = out.get("projects")
    if projects is None:
        return out
    if not isinstance(projects, Mapping):
        logger.warning("Ignoring 'projects': expected an object, got {}", type(projects).__name__)
        out.pop("projects")
        return out
    out["projects"] = {expand_key(key): value for key, value in projects.items()}
    return out
