"""Configuration constants and file locations for harpoon."""

import os
from pathlib import Path
from typing import Any

# Filetype of the list-editing view. Never markable.
MENU_FILETYPE = "harpoon"

# How a tombstone is rendered in the list-editing view.
EMPTY_PLACEHOLDER = "(empty)"

# Base layer of the merge. Cache file, user file and runtime overrides go on top.
DEFAULT_CONFIG: dict[str, Any] = {
    "projects": {},
    "global_settings": {
        "save_on_toggle": False,
        "save_on_change": True,
        "excluded_filetypes": [MENU_FILETYPE],
        "mark_branch": False,
    },
}

CONFIG_FILENAME = "harpoon.json"


def user_config_path() -> Path:
    """User-authored config file, under $XDG_CONFIG_HOME (default ~/.config)."""
    base = os.environ.get("XDG_CONFIG_HOME") or "~/.config"
    return Path(base).expanduser() / "harpoon" / CONFIG_FILENAME


def cache_config_path() -> Path:
    """Cache file written on every save, under $XDG_DATA_HOME (default ~/.local/share)."""
    base = os.environ.get("XDG_DATA_HOME") or "~/.local/share"
    return Path(base).expanduser() / "harpoon" / CONFIG_FILENAME
