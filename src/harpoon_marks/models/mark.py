"""Domain models for harpoon marks and configuration."""

from dataclasses import dataclass, field
from typing import Any

from harpoon_marks.config import MENU_FILETYPE


@dataclass
class Mark:
    """A marked file plus the last known cursor position.

    An empty filename is a tombstone: the slot of a removed mark, kept so
    that the indices of later marks do not shift.
    """

    filename: str
    row: int = 1
    col: int = 0

    @property
    def is_tombstone(self) -> bool:
        return self.filename == ""

    @classmethod
    def tombstone(cls, row: int = 1, col: int = 0) -> "Mark":
        return cls(filename="", row=row, col=col)

    def to_payload(self) -> dict[str, Any]:
        return {"filename": self.filename, "row": self.row, "col": self.col}


@dataclass(frozen=True)
class GlobalSettings:
    """Settings shared by every project."""

    mark_branch: bool = False
    save_on_toggle: bool = False
    save_on_change: bool = True
    excluded_filetypes: frozenset[str] = frozenset({MENU_FILETYPE})

    def to_payload(self) -> dict[str, Any]:
        return {
            "mark_branch": self.mark_branch,
            "save_on_toggle": self.save_on_toggle,
            "save_on_change": self.save_on_change,
            "excluded_filetypes": sorted(self.excluded_filetypes),
        }


@dataclass
class MarkConfig:
    """Marks of one project, addressed by 1-based index."""

    marks: list[Mark] = field(default_factory=list)


@dataclass
class ProjectConfig:
    """Per-project section. Unknown keys from disk are kept in ``extra``."""

    mark: MarkConfig = field(default_factory=MarkConfig)
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class Config:
    """The whole in-memory configuration of a session."""

    global_settings: GlobalSettings = field(default_factory=GlobalSettings)
    projects: dict[str, ProjectConfig] = field(default_factory=dict)
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ExportEntry:
    """One line of the quickfix-style export. ``index`` is dense, not the slot index."""

    index: int
    label: str
    filename: str
    row: int
    col: int
