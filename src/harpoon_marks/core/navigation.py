"""Navigation between marks: by index or file name, next and previous."""

from loguru import logger

from harpoon_marks.core.marks.engine import MarkEngine
from harpoon_marks.core.paths import normalize_path


class Navigator:
    """Resolve marks and ask the editor to open them."""

    def __init__(self, engine: MarkEngine) -> None:
        self.engine = engine

    def nav_file(self, item: str | int) -> bool:
        """Open the mark at an index (or for a file name).

        Returns:
            True if a mark was found and opened, False otherwise.
        """
        logger.trace("nav_file(): navigating to {!r}", item)
        idx = self.engine.get_index_of(item)
        mark = self.engine.get_slot(idx) if idx is not None else None
        if mark is None or mark.is_tombstone:
            logger.debug("nav_file(): no mark exists for {!r}", item)
            return False

        filename = normalize_path(mark.filename, self.engine.store.cwd)
        logger.debug("nav_file(): opening {!r} at row {}, col {}", filename, mark.row, mark.col)
        self.engine.editor.open_file(filename, row=mark.row, col=mark.col)
        return True

    def _step(self, direction: int) -> bool:
        length = self.engine.length()
        if length == 0:
            logger.debug("No marks to navigate")
            return False

        current = self.engine.get_current_index()
        if current is None:
            # From outside the list, "next" starts at the first slot and "prev" at the last.
            current = 0 if direction > 0 else length + 1

        idx = current
        for _ in range(length):
            idx += direction
            if idx > length:
                idx = 1
            elif idx < 1:
                idx = length
            if self.engine.valid_index(idx):
                return self._open_index(idx)
        return False

    def _open_index(self, idx: int) -> bool:
        # Go through the file name: integer ids are subject to zero-index mode.
        filename = self.engine.get_marked_file_name(idx)
        if not filename:
            return False
        return self.nav_file(filename)

    def nav_next(self) -> bool:
        """Go to the next mark, wrapping around to the first one."""
        return self._step(1)

    def nav_prev(self) -> bool:
        """Go to the previous mark, wrapping around to the last one."""
        return self._step(-1)
