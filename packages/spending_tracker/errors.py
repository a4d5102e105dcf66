"""Exception taxonomy for ``spending_tracker``.

Parse-time errors (``ParseError`` and subclasses) surface to the user as a
failed import with no state change. ``StorageReadError`` is raised by the
store's decoding helpers and recovered inside the store; it never reaches the
presentation layer.
"""

from __future__ import annotations


class TrackerError(Exception):
    """Base class for all errors raised by this package."""


class ParseError(TrackerError):
    """The imported file could not be read as a transaction CSV."""


class EmptyOrUnreadableFile(ParseError):
    """The imported file contained no parseable transaction rows."""


class InvalidAmount(ParseError):
    """A row's ``Amount`` is not a finite number; the whole batch is rejected."""

    def __init__(self, description: str, raw_amount: object, *, row_number: int | None = None):
        self.description = description
        self.raw_amount = raw_amount
        self.row_number = row_number
        where = f" on row {row_number}" if row_number is not None else ""
        super().__init__(
            f"Invalid amount {raw_amount!r}{where} (description: {description!r})"
        )


class StorageReadError(TrackerError):
    """A persisted slice exists but does not decode to a valid value."""

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Stored value for {key!r} is unreadable: {reason}")


__all__ = [
    "TrackerError",
    "ParseError",
    "EmptyOrUnreadableFile",
    "InvalidAmount",
    "StorageReadError",
]
