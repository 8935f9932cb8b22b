"""Loading, repairing and saving the layered harpoon configuration."""

import json
from pathlib import Path
from typing import Any

from loguru import logger

from harpoon_marks.config import DEFAULT_CONFIG, cache_config_path, user_config_path
from harpoon_marks.core.config.merge import expand_dir, merge_tables
from harpoon_marks.core.config.schema import config_to_payload, parse_config
from harpoon_marks.core.paths import branch_key, normalize_path, project_key
from harpoon_marks.models.mark import Config, GlobalSettings, Mark, MarkConfig, ProjectConfig


def read_config(path: Path) -> dict[str, Any]:
    """Read a JSON config file.

    Returns:
        The decoded object, or an empty dict if the file is missing,
        unreadable, not valid JSON or not a JSON object.
    """
    try:
        with open(path, encoding="utf-8") as f:
            payload = json.load(f)
    except FileNotFoundError:
        logger.debug("No config file at {}", path)
        return {}
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable config file {}: {}", path, e)
        return {}
    if not isinstance(payload, dict):
        logger.warning("Ignoring config file {}: top level is not an object", path)
        return {}
    return payload


class ConfigStore:
    """Own the session's configuration and keep it in sync with disk.

    Two files feed the configuration: a user-authored one and a cache file
    that every save rewrites. The in-memory :class:`Config` is the source of
    truth during a session; saving merges it with whatever other sessions
    wrote for *other* projects in the meantime.
    """

    def __init__(
        self,
        user_path: str | Path | None = None,
        cache_path: str | Path | None = None,
        *,
        cwd: str | Path | None = None,
    ) -> None:
        self.user_path = Path(user_path) if user_path is not None else user_config_path()
        self.cache_path = Path(cache_path) if cache_path is not None else cache_config_path()
        self.cwd = project_key(cwd)
        self._config: Config | None = None

    @property
    def config(self) -> Config:
        if self._config is None:
            msg = "ConfigStore.load() must be called first"
            raise RuntimeError(msg)
        return self._config

    @property
    def global_settings(self) -> GlobalSettings:
        return self.config.global_settings

    def load(self, overrides: dict[str, Any] | None = None) -> Config:
        """Merge defaults, cache file, user file and overrides, in that order."""
        cache_payload = read_config(self.cache_path)
        user_payload = read_config(self.user_path)
        merged = merge_tables(
            DEFAULT_CONFIG,
            expand_dir(cache_payload),
            expand_dir(user_payload),
            expand_dir(overrides or {}),
        )
        self._config = self.ensure_correct_config(parse_config(merged))
        logger.debug(
            "Config loaded: {} project(s), active key {!r}",
            len(self._config.projects),
            self.mark_config_key(),
        )
        return self._config

    def mark_config_key(self, settings: GlobalSettings | None = None) -> str:
        """Key of the active project: branch key or working directory."""
        settings = settings or self.global_settings
        if settings.mark_branch:
            return branch_key(self.cwd)
        return project_key(self.cwd)

    def _ensure_project(self, config: Config, key: str) -> ProjectConfig:
        project = config.projects.get(key)
        if project is None:
            project = ProjectConfig()
            config.projects[key] = project
        for mark in project.mark.marks:
            mark.filename = normalize_path(mark.filename, self.cwd)
        return project

    def ensure_correct_config(self, config: Config) -> Config:
        """Make sure the active project exists and its marks are consistent.

        File names are normalized, a file marked more than once keeps only its
        first slot and trailing tombstones are dropped.
        """
        project = self._ensure_project(config, self.mark_config_key(config.global_settings))
        marks = project.mark.marks
        seen: set[str] = set()
        for idx, mark in enumerate(marks):
            if mark.is_tombstone:
                continue
            if mark.filename in seen:
                logger.warning("Dropping duplicate mark {} at {}", mark.filename, idx + 1)
                marks[idx] = Mark.tombstone(mark.row, mark.col)
                continue
            seen.add(mark.filename)
        while marks and marks[-1].is_tombstone:
            marks.pop()
        return config

    def get_mark_config(self) -> MarkConfig:
        """Return the live mark section of the active project."""
        return self._ensure_project(self.config, self.mark_config_key()).mark

    def refresh_projects_before_update(self) -> None:
        """Reload every project except the active one from the cache file.

        The active project keeps its in-memory state; the global settings
        in memory are kept too.
        """
        key = self.mark_config_key()
        self._ensure_project(self.config, key)
        current = config_to_payload(self.config)
        active = {"projects": {key: current.pop("projects")[key]}}

        disk_projects = expand_dir({"projects": read_config(self.cache_path).get("projects", {})})
        others = disk_projects.get("projects") or {}
        others.pop(key, None)

        merged = merge_tables(current, {"projects": others}, active)
        self._config = self.ensure_correct_config(parse_config(merged))
        logger.debug("Refreshed {} other project(s) from {}", len(others), self.cache_path)

    def save(self) -> None:
        """Refresh other projects from disk, then write the cache file.

        Write errors are not caught.
        """
        self.refresh_projects_before_update()
        contents = json.dumps(config_to_payload(self.config), sort_keys=True, indent=4) + "\n"

        try:
            with open(self.cache_path, encoding="utf-8") as f:
                if f.read() == contents:
                    logger.trace("Cache file unchanged: {}", self.cache_path)
                    return
        except (FileNotFoundError, UnicodeDecodeError):
            pass

        logger.debug("Writing cache file {}", self.cache_path)
        self.cache_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.cache_path, "w", encoding="utf-8") as f:
            f.write(contents)
