"""Per-project file marks with stable indices and layered JSON persistence."""

from harpoon_marks.core.config.store import ConfigStore
from harpoon_marks.core.marks.engine import MarkEngine
from harpoon_marks.core.navigation import Navigator
from harpoon_marks.errors import ExcludedFiletypeError, HarpoonError, InvalidInputError
from harpoon_marks.protocols import EditorProtocol

__all__ = [
    "ConfigStore",
    "EditorProtocol",
    "ExcludedFiletypeError",
    "HarpoonError",
    "InvalidInputError",
    "MarkEngine",
    "Navigator",
]
