"""Redis-compatible store implementation."""

from __future__ import annotations

import logging
from typing import Any, override


try:
    import redis
except ImportError:  # pragma: no cover - exercised when dependency is absent
    redis = None

from .protocol import Store


logger = logging.getLogger(__name__)


def _normalize_bytes(value: str | bytes | None) -> bytes | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value.encode()
    return value


class RedisStore(Store):
    """Redis-compatible store using the synchronous ``redis`` client APIs."""

    def __init__(self, url: str = "redis://localhost:6379/0", *, client: Any | None = None, prefix: str = "") -> None:
        """Create a store from URL or an injected client.

        Parameters
        ----------
        url
            Redis connection URL used when ``client`` is not provided.
        client
            Optional injected client with ``get/set/exists/delete/close`` API.
        prefix
            Prepended to every path to form the Redis key.
        """
        super().__init__()
        self._url = url
        self._prefix = prefix
        if client is not None:
            self._client = client
            return

        if redis is None:
            msg = "redis dependency is required for RedisStore; install with `pip install redis`"
            raise RuntimeError(msg)

        self._client = redis.Redis.from_url(url)

    def _key(self, path: str) -> str:
        return f"{self._prefix}{path}"

    @override
    def read(self, path: str) -> bytes | None:
        """Return stored bytes for path, or None when the key does not exist."""
        logger.debug("reading redis key %s", self._key(path))
        return _normalize_bytes(self._client.get(self._key(path)))

    @override
    def write(self, path: str, data: bytes) -> None:
        """Store bytes at path."""
        logger.debug("writing %d bytes to redis key %s", len(data), self._key(path))
        self._client.set(self._key(path), data)

    @override
    def exists(self, path: str) -> bool:
        """Return True when the key exists."""
        return bool(self._client.exists(self._key(path)))

    @override
    def delete(self, path: str) -> None:
        """Delete the key if present."""
        self._client.delete(self._key(path))

    @override
    def close(self) -> None:
        """Release store resources."""
        close_method = getattr(self._client, "close", None)
        if close_method is not None:
            close_method()
