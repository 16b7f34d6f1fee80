"""Save tables to, and load them from, a store."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from . import codec
from .errors import TypeMismatch
from .stores import FileStore
from .table import Table


if TYPE_CHECKING:
    from collections.abc import Callable

    from .stores import Store


__all__ = ["load", "save"]

logger = logging.getLogger(__name__)


def save(
    table: Table,
    path: str,
    overwrite: bool = False,  # noqa: FBT001, FBT002
    *,
    store: Store | None = None,
    encoder: Callable[[Table], bytes] = codec.dumps,
) -> Table:
    """Serialize ``table`` and write it to ``path``.

    Raises :class:`FileExistsError` when something is already stored at
    ``path`` and ``overwrite`` is False. Store errors propagate unchanged.
    """
    target = store if store is not None else FileStore()
    if not overwrite and target.exists(path):
        msg = f"{path} already exists; pass overwrite=True to replace it"
        raise FileExistsError(msg)

    data = encoder(table)
    target.write(path, data)
    logger.debug("saved table with %d entries to %s", len(table), path)
    return table


def load(
    path: str,
    *,
    store: Store | None = None,
    decoder: Callable[[bytes], Any] = codec.loads,
) -> Table:
    """Read ``path`` and deserialize the table stored there."""
    target = store if store is not None else FileStore()
    data = target.read(path)
    if data is None:
        msg = f"no table stored at {path}"
        raise FileNotFoundError(msg)

    result = decoder(data)
    if not isinstance(result, Table):
        msg = f"{path} holds a {type(result).__name__}, expected a Table"
        raise TypeMismatch(msg)
    logger.debug("loaded table with %d entries from %s", len(result), path)
    return result
