"""Local filesystem store implementation."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import override

from .protocol import Store


logger = logging.getLogger(__name__)


class FileStore(Store):
    """Store bytes in local files.

    Relative paths resolve against ``root`` when one is given, and against the
    working directory otherwise.
    """

    def __init__(self, root: str | Path | None = None) -> None:
        super().__init__()
        self._root = Path(root) if root is not None else None

    def _resolve(self, path: str) -> Path:
        resolved = Path(path).expanduser()
        if self._root is not None:
            resolved = self._root / resolved
        return resolved

    @override
    def read(self, path: str) -> bytes | None:
        """Return file content for path, or None when the file does not exist."""
        target = self._resolve(path)
        if not target.is_file():
            return None
        logger.debug("reading %s", target)
        return target.read_bytes()

    @override
    def write(self, path: str, data: bytes) -> None:
        """Write bytes to path, creating parent directories as needed."""
        target = self._resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        logger.debug("writing %d bytes to %s", len(data), target)
        _ = target.write_bytes(data)

    @override
    def exists(self, path: str) -> bool:
        """Return True when path exists."""
        return self._resolve(path).exists()

    @override
    def delete(self, path: str) -> None:
        """Delete path if present."""
        self._resolve(path).unlink(missing_ok=True)

    @override
    def close(self) -> None:
        """Release store resources."""
        return
