"""kv-table - Lua-style hybrid map/array tables with flatten support"""

from ._version import version as __version__
from .activity import Activity
from .constructors import T, array, pairs
from .errors import KeyNotFound, PreconditionViolation, TableError, TypeMismatch
from .persistence import load, save
from .stores import FileStore, RedisStore, Store
from .table import Table


__all__ = [
    "Activity",
    "FileStore",
    "KeyNotFound",
    "PreconditionViolation",
    "RedisStore",
    "Store",
    "T",
    "Table",
    "TableError",
    "TypeMismatch",
    "__version__",
    "array",
    "load",
    "pairs",
    "save",
]
