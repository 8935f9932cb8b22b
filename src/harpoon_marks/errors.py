"""Exceptions raised by harpoon operations."""


class HarpoonError(Exception):
    """Base class for user-facing harpoon errors."""


class InvalidInputError(HarpoonError, ValueError):
    """A mark operation got a missing or empty file name."""


class ExcludedFiletypeError(InvalidInputError):
    """The current file's type may not be marked."""
