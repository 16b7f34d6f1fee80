"""Store contracts and implementations."""

from .file import FileStore
from .protocol import Store
from .redis import RedisStore


__all__ = ["FileStore", "RedisStore", "Store"]
