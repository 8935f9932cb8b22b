"""Text rendition of the mark list: one file per line, editable as plain text."""

from collections.abc import Iterable
from dataclasses import dataclass

from loguru import logger

from harpoon_marks.config import EMPTY_PLACEHOLDER
from harpoon_marks.core.marks.engine import MarkEngine
from harpoon_marks.core.navigation import Navigator


def get_contents(engine: MarkEngine) -> list[str]:
    """Line N holds the file of slot N; tombstones show as ``(empty)``."""
    contents: list[str] = []
    for idx in range(1, engine.length() + 1):
        filename = engine.get_marked_file_name(idx)
        contents.append(filename or EMPTY_PLACEHOLDER)
    return contents


def parse_menu_items(lines: Iterable[str]) -> list[str]:
    """Turn edited lines back into an ordered list of file names.

    Blank lines are dropped. ``(empty)`` lines become empty names, which the
    engine stores as tombstones.
    """
    items: list[str] = []
    for line in lines:
        stripped = line.strip()
        if not stripped:
            continue
        items.append("" if stripped == EMPTY_PLACEHOLDER else stripped)
    return items


@dataclass
class MenuSession:
    """State of one open list-editing view.

    Replaces editor-global window/buffer handles: callers keep the session
    and pass the current text back in.
    """

    engine: MarkEngine
    is_open: bool = False

    def open(self) -> list[str]:
        self.is_open = True
        return get_contents(self.engine)

    def save(self, lines: Iterable[str]) -> None:
        logger.trace("on_menu_save()")
        self.engine.set_from_ordered_list(parse_menu_items(lines))

    def close(self, lines: Iterable[str], *, force_save: bool = False) -> None:
        """Close the view, saving first when ``save_on_toggle`` is set or forced."""
        if self.engine.store.global_settings.save_on_toggle or force_save:
            self.save(lines)
        self.is_open = False

    def select(self, lines: list[str], line_number: int) -> bool:
        """Save the edited list, close the view and jump to the chosen line."""
        self.close(lines, force_save=True)
        return Navigator(self.engine).nav_file(_line_to_index(self.engine, line_number))


def _line_to_index(engine: MarkEngine, line_number: int) -> int:
    # Lines are 1-based; shift back when integer ids are read as 0-based.
    return line_number - 1 if engine.zero_index else line_number
