"""Error types raised by tables and the persistence helpers."""

from __future__ import annotations


class TableError(Exception):
    """Base class for errors raised by kv-table."""


class KeyNotFound(TableError, KeyError):
    """Direct access to a key that is not present in the table."""


class PreconditionViolation(TableError, ValueError):
    """An operation was called with arguments it does not accept."""


class TypeMismatch(TableError, TypeError):
    """A stored value does not have the type the caller expected."""
