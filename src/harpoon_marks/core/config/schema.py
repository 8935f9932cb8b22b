"""Conversion between raw JSON payloads and typed configuration."""

from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from loguru import logger

from harpoon_marks.models.mark import Config, GlobalSettings, Mark, MarkConfig, ProjectConfig

_BOOL_SETTINGS = ("mark_branch", "save_on_toggle", "save_on_change")


def parse_global_settings(data: Any) -> GlobalSettings:
    """Build settings from a payload, keeping defaults for missing or bad fields."""
    defaults = GlobalSettings()
    if not isinstance(data, Mapping):
        logger.warning("Ignoring 'global_settings': expected an object")
        return defaults

    values: dict[str, Any] = {}
    for name in _BOOL_SETTINGS:
        if name not in data:
            continue
        if isinstance(data[name], bool):
            values[name] = data[name]
        else:
            logger.warning("Ignoring global_settings.{}: expected a boolean", name)

    if "excluded_filetypes" in data:
        raw = data["excluded_filetypes"]
        if isinstance(raw, list) and all(isinstance(x, str) for x in raw):
            values["excluded_filetypes"] = frozenset(raw)
        else:
            logger.warning(
                "Ignoring global_settings.excluded_filetypes: expected a list of strings"
            )

    return replace(defaults, **values)


def _int_field(entry: Mapping[str, Any], name: str, default: int) -> int:
    value = entry.get(name, default)
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    return value


def parse_mark(entry: Any) -> Mark:
    """Parse one stored mark.

    Legacy bare strings become marks with the default cursor, ``null`` and
    anything unrecognizable become tombstones so later indices stay put.
    """
    if isinstance(entry, str):
        return Mark(filename=entry)
    if isinstance(entry, Mapping):
        filename = entry.get("filename")
        if not isinstance(filename, str):
            filename = ""
        return Mark(
            filename=filename,
            row=_int_field(entry, "row", 1),
            col=_int_field(entry, "col", 0),
        )
    if entry is not None:
        logger.warning("Unrecognized mark entry {!r}, keeping an empty slot", entry)
    return Mark.tombstone()


def parse_marks(raw: Any) -> list[Mark]:
    """Parse a marks list.

    Older versions could write a sparse array as an object keyed by
    ``"1"``, ``"2"``, ... ; holes in it become tombstones.
    """
    if isinstance(raw, list):
        return [parse_mark(entry) for entry in raw]
    if isinstance(raw, Mapping):
        slots: dict[int, Any] = {}
        for key, entry in raw.items():
            if isinstance(key, str) and key.isdigit() and int(key) >= 1:
                slots[int(key)] = entry
            else:
                logger.warning("Ignoring mark with non-index key {!r}", key)
        length = max(slots, default=0)
        return [parse_mark(slots.get(idx)) for idx in range(1, length + 1)]
    if raw is not None:
        logger.warning("Ignoring marks: expected a list, got {}", type(raw).__name__)
    return []


def parse_project(raw: Any) -> ProjectConfig:
    if not isinstance(raw, Mapping):
        logger.warning("Ignoring project entry: expected an object")
        return ProjectConfig()
    extra = {k: v for k, v in raw.items() if k != "mark"}
    mark_section = raw.get("mark")
    if not isinstance(mark_section, Mapping):
        return ProjectConfig(extra=extra)
    return ProjectConfig(mark=MarkConfig(marks=parse_marks(mark_section.get("marks"))), extra=extra)


def parse_config(payload: Mapping[str, Any]) -> Config:
    """Turn a merged payload into a :class:`Config`."""
    projects_raw = payload.get("projects", {})
    if not isinstance(projects_raw, Mapping):
        logger.warning("Ignoring 'projects': expected an object")
        projects_raw = {}

    return Config(
        global_settings=parse_global_settings(payload.get("global_settings", {})),
        projects={key: parse_project(value) for key, value in projects_raw.items()},
        extra={k: v for k, v in payload.items() if k not in ("global_settings", "projects")},
    )


def project_to_payload(project: ProjectConfig) -> dict[str, Any]:
    return {
        **project.extra,
        "mark": {"marks": [mark.to_payload() for mark in project.mark.marks]},
    }


def config_to_payload(config: Config) -> dict[str, Any]:
    """Serialize a :class:`Config` in the on-disk schema."""
    return {
        **config.extra,
        "global_settings": config.global_settings.to_payload(),
        "projects": {key: project_to_payload(p) for key, p in config.projects.items()},
    }
