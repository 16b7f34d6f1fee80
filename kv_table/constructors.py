"""Shorthand constructors for tables."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .table import Table


if TYPE_CHECKING:
    from collections.abc import Iterable


__all__ = ["T", "array", "pairs"]


def T(*values: Any, **named: Any) -> Table:  # noqa: N802
    """Build a table from positional values and optional string-keyed fields.

    Positional values are stored at keys ``1..N`` in order; keyword arguments
    are stored under their names.

    >>> T(10, 20, 30).top_index
    3
    >>> T(1, name="x")["name"]
    'x'
    """
    table = Table(values)
    for key, value in named.items():
        table[key] = value
    return table


def array(data: Iterable[Any]) -> Table:
    """Build a table from an iterable, keyed ``1..N`` by position."""
    return Table(data)


def pairs(*items: tuple[Any, Any]) -> Table:
    """Build a table from ``(key, value)`` pairs, stored in the order given."""
    table = Table()
    for key, value in items:
        table[key] = value
    return table
