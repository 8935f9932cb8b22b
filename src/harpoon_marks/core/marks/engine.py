"""Mark list operations for the active project."""

from collections.abc import Callable, Iterable
from dataclasses import replace

from loguru import logger

from harpoon_marks.config import MENU_FILETYPE
from harpoon_marks.core.config.store import ConfigStore
from harpoon_marks.core.paths import normalize_path
from harpoon_marks.errors import ExcludedFiletypeError, InvalidInputError
from harpoon_marks.models.mark import ExportEntry, Mark, MarkConfig
from harpoon_marks.protocols import EditorProtocol

FileOrIndex = str | int | None


class MarkEngine:
    """Add, remove and look up marks of the active project.

    Marks live in the store's configuration; the engine fetches them on every
    call and never keeps a copy. Slots are addressed by 1-based index. A
    removed mark leaves a tombstone so that later marks keep their index;
    tombstones at the end of the list are dropped after each change.
    """

    def __init__(
        self,
        store: ConfigStore,
        editor: EditorProtocol,
        *,
        zero_index: bool = False,
    ) -> None:
        self.store = store
        self.editor = editor
        # Integer indices passed in count from 0 instead of 1.
        self.zero_index = zero_index
        self._changed_callbacks: list[Callable[[], None]] = []

    # --- events ---

    def on_changed(self, callback: Callable[[], None]) -> None:
        """Register a callback run after every change, in registration order."""
        self._changed_callbacks.append(callback)

    def _emit_changed(self) -> None:
        if self.store.global_settings.save_on_change:
            self.store.save()
        for callback in self._changed_callbacks:
            callback()

    # --- helpers ---

    @property
    def _marks(self) -> list[Mark]:
        return self.store.get_mark_config().marks

    def _mark_config(self) -> MarkConfig:
        return self.store.get_mark_config()

    def _normalize(self, filename: str) -> str:
        return normalize_path(filename, self.store.cwd)

    def _create_mark(self, filename: str) -> Mark:
        row, col = self.editor.cursor()
        return Mark(filename=filename, row=row, col=col)

    def _buf_name(self, item: FileOrIndex) -> str:
        if item is None:
            return self._normalize(self.editor.current_filename() or "")
        if isinstance(item, str):
            return self._normalize(item)
        idx = self.get_index_of(item)
        if self.valid_index(idx):
            return self.get_marked_file_name(idx) or ""
        return ""

    def _check_filetype(self) -> None:
        filetype = self.editor.current_filetype()
        if filetype == MENU_FILETYPE:
            msg = "You can't add harpoon to the harpoon"
            raise ExcludedFiletypeError(msg)
        if filetype in self.store.global_settings.excluded_filetypes:
            msg = f"Filetype {filetype!r} cannot be marked, it is in 'excluded_filetypes'"
            raise ExcludedFiletypeError(msg)

    @staticmethod
    def _validate_buf_name(buf_name: str) -> None:
        if not buf_name:
            msg = "Couldn't find a valid file name to mark"
            raise InvalidInputError(msg)

    def _first_empty_slot(self) -> int:
        for idx, mark in enumerate(self._marks, start=1):
            if mark.is_tombstone:
                return idx
        return self.length() + 1

    # --- lookups ---

    def length(self) -> int:
        """Highest populated index. Tombstones count."""
        return len(self._marks)

    def get_index_of(self, item: str | int | None) -> int | None:
        """Resolve a file name or an index to a 1-based index, or None."""
        if item is None:
            msg = "Provide a file name or a mark index, got None"
            raise InvalidInputError(msg)

        if isinstance(item, str):
            filename = self._normalize(item)
            if not filename:
                return None
            for idx, mark in enumerate(self._marks, start=1):
                if mark.filename == filename:
                    return idx
            return None

        if self.zero_index:
            item += 1
        if 1 <= item <= self.length():
            return item
        return None

    def get_marked_file_name(self, idx: int) -> str | None:
        mark = self.get_slot(idx)
        return mark.filename if mark is not None else None

    def valid_index(self, idx: int | None) -> bool:
        """True if ``idx`` points at a slot that holds a real mark."""
        if idx is None:
            return False
        return bool(self.get_marked_file_name(idx))

    def get(self, item: str | int) -> Mark | None:
        """Return the mark at an index or for a file name, tombstones included."""
        idx = self.get_index_of(item)
        if idx is None:
            return None
        return self.get_slot(idx)

    def get_slot(self, idx: int) -> Mark | None:
        """Return the mark in 1-based slot ``idx``. Zero-index mode does not apply."""
        marks = self._marks
        if 1 <= idx <= len(marks):
            return marks[idx - 1]
        return None

    def get_current_index(self) -> int | None:
        current = self.editor.current_filename()
        if not current:
            return None
        return self.get_index_of(current)

    def status(self, item: str | None = None) -> str:
        """``"M<idx>"`` if the file is marked, otherwise an empty string."""
        idx = self.get_index_of(self._buf_name(item))
        if self.valid_index(idx):
            return f"M{idx}"
        return ""

    # --- mutations ---

    def add(self, item: FileOrIndex = None) -> None:
        """Mark a file at the first free slot. Already marked files are left alone."""
        self._check_filetype()
        buf_name = self._buf_name(item)

        if self.valid_index(self.get_index_of(buf_name)):
            return

        self._validate_buf_name(buf_name)

        marks = self._marks
        idx = self._first_empty_slot()
        mark = self._create_mark(buf_name)
        if idx > len(marks):
            marks.append(mark)
        else:
            marks[idx - 1] = mark
        logger.debug("Marked {} at {}", buf_name, idx)
        self.remove_empty_tail(emit=False)
        self._emit_changed()

    def remove(self, item: FileOrIndex = None) -> None:
        """Replace a mark with a tombstone. Unknown files and indices are ignored."""
        buf_name = self._buf_name(item)
        if not isinstance(item, int):
            self._validate_buf_name(buf_name)

        idx = self.get_index_of(buf_name) if buf_name else None
        if idx is None or not self.valid_index(idx):
            return

        self._marks[idx - 1] = self._create_mark("")
        logger.debug("Removed mark {} at {}", buf_name, idx)
        self.remove_empty_tail(emit=False)
        self._emit_changed()

    def toggle(self, item: str | None = None) -> None:
        buf_name = self._buf_name(item)
        self._validate_buf_name(buf_name)

        if self.valid_index(self.get_index_of(buf_name)):
            self.remove(buf_name)
            self.editor.notify("Mark removed")
        else:
            self.add(buf_name)
            self.editor.notify("Mark added")

    def clear_all(self) -> None:
        self._mark_config().marks = []
        self._emit_changed()

    def set_current_at(self, idx: int) -> None:
        """Put the current file at slot ``idx``, leaving a tombstone where it was."""
        self._check_filetype()
        buf_name = self._buf_name(None)
        self._validate_buf_name(buf_name)
        if idx < 1:
            msg = f"Mark index must be 1 or greater, got {idx}"
            raise InvalidInputError(msg)

        marks = self._marks
        current_idx = self.get_index_of(buf_name)
        if current_idx is not None and self.valid_index(current_idx):
            marks[current_idx - 1] = self._create_mark("")

        while len(marks) < idx:
            marks.append(self._create_mark(""))
        marks[idx - 1] = self._create_mark(buf_name)

        self.remove_empty_tail(emit=False)
        self._emit_changed()

    def set_from_ordered_list(self, entries: Iterable[str | Mark]) -> None:
        """Replace the whole list, e.g. with the lines of an edited menu.

        File names that are already marked keep their stored cursor
        position; new ones get the current cursor. An empty name becomes a
        tombstone. A file listed twice keeps only its first slot.
        """
        new_marks: list[Mark] = []
        seen: set[str] = set()
        for entry in entries:
            if isinstance(entry, Mark):
                mark = replace(entry, filename=self._normalize(entry.filename))
            else:
                filename = self._normalize(entry)
                if not filename:
                    mark = self._create_mark("")
                else:
                    mark = self.get(filename) or self._create_mark(filename)

            if not mark.is_tombstone:
                if mark.filename in seen:
                    logger.debug("Dropping duplicate entry {}", mark.filename)
                    continue
                seen.add(mark.filename)
            new_marks.append(mark)

        self._mark_config().marks = new_marks
        self.remove_empty_tail(emit=False)
        self._emit_changed()

    def remove_empty_tail(self, *, emit: bool = True) -> bool:
        """Drop trailing tombstones. Returns True if any were dropped."""
        marks = self._marks
        found = False
        while marks and marks[-1].is_tombstone:
            marks.pop()
            found = True
        if found and emit:
            self._emit_changed()
        return found

    def squash(self) -> None:
        """Drop every tombstone, shifting later marks to lower indices."""
        config = self._mark_config()
        config.marks = [mark for mark in config.marks if not mark.is_tombstone]
        self._emit_changed()

    def store_cursor_offset(self, item: str | None = None) -> None:
        """Remember the cursor position for a file being left.

        Unmarked files are ignored and failures are swallowed; listeners are
        notified either way.
        """
        try:
            buf_name = self._buf_name(item)
            idx = self.get_index_of(buf_name)
            if idx is not None and self.valid_index(idx):
                mark = self._marks[idx - 1]
                mark.row, mark.col = self.editor.cursor()
        except Exception:
            logger.opt(exception=True).debug("Could not store cursor offset")

        self._emit_changed()

    # --- export ---

    def to_ordered_export(self) -> list[ExportEntry]:
        """Marks for a quickfix-style list, numbered densely, tombstones skipped."""
        marks = [mark for mark in self._marks if not mark.is_tombstone]
        return [
            ExportEntry(
                index=number,
                label=f"{number}: {mark.filename}",
                filename=mark.filename,
                row=mark.row,
                col=mark.col,
            )
            for number, mark in enumerate(marks, start=1)
        ]
