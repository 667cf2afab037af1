# console_core/errors.py
from __future__ import annotations


class ConsoleError(Exception):
    """Base class for errors raised by the query console."""


class DatabaseNotInitialized(ConsoleError):
    """Raised when a query is submitted before the store has been initialized."""


class InconsistentRowsError(ConsoleError):
    """Raised by strict column validation when rows disagree with row 0's key set."""

    def __init__(self, indices: list[int]):
        self.indices = indices
        super().__init__(f"rows {indices} do not match the columns of the first row")


class ExportError(ConsoleError):
    """Raised when a clipboard write or file save fails."""
