"""Protocols for the editor side of harpoon."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class EditorProtocol(Protocol):
    """What the mark engine and navigator need from the host editor."""

    def current_filename(self) -> str | None:
        """Return the file shown in the active buffer, or None."""
        ...

    def current_filetype(self) -> str:
        """Return the filetype of the active buffer."""
        ...

    def cursor(self) -> tuple[int, int]:
        """Return the cursor as (row, col), row 1-based and col 0-based."""
        ...

    def open_file(self, filename: str, *, row: int, col: int) -> None:
        """Show the file with the cursor at row/col."""
        ...

    def notify(self, message: str) -> None:
        """Show a status message to the user."""
        ...
