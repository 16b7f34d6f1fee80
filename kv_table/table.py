"""Lua-style table: an associative map with a contiguous 1-based array prefix."""

from __future__ import annotations

import numbers
import sys
from collections.abc import Iterable, Iterator, MutableMapping
from reprlib import recursive_repr
from types import MappingProxyType
from typing import Any, Self, TypeVar, override

from .activity import Activity
from .errors import KeyNotFound, PreconditionViolation, TypeMismatch


_T = TypeVar("_T")

_MISSING: Any = object()
_HASH_SEED = 37
_HASH_MASK = (1 << sys.hash_info.width) - 1


def _checked(key: Any, value: Any, expected: type[_T] | None) -> Any:
    if expected is not None and not isinstance(value, expected):
        msg = f"value at key {key!r} is {type(value).__name__}, expected {expected.__name__}"
        raise TypeMismatch(msg)
    return value


def _position(key: Any) -> int | None:
    """Return the integer a numeric key is equal to, since the dict treats them as one key."""
    if not isinstance(key, numbers.Number):
        return None
    try:
        position = int(key.real) if isinstance(key, complex) else int(key)  # type: ignore[call-overload]
    except (TypeError, ValueError, OverflowError):
        return None
    return position if position == key else None


def _descend(table: Table, on_path: set[int]) -> Iterator[Any]:
    if id(table) in on_path:
        msg = "table contains itself"
        raise PreconditionViolation(msg)
    on_path.add(id(table))
    return iter(table._array_values())  # noqa: SLF001


class Table(MutableMapping[Any, Any], Activity):
    """Hybrid associative map and 1-based array.

    Any hashable value can be a key and any value can be stored, including
    other tables. ``top_index`` is the largest ``n`` such that every integer key
    ``1..n`` is present; integer keys past a gap are stored but sit outside the
    array prefix until the gap is filled.
    """

    def __init__(self, values: Iterable[Any] = ()) -> None:
        """Create a table whose array prefix holds ``values`` at keys ``1..N``."""
        super().__init__()
        self._state: dict[Any, Any] = {}
        self._top_index = 0
        for value in values:
            self._top_index += 1
            self._state[self._top_index] = value

    @property
    def top_index(self) -> int:
        """Length of the contiguous integer prefix starting at 1."""
        return self._top_index

    def state(self) -> MappingProxyType[Any, Any]:
        """Return a read-only view of the backing store."""
        return MappingProxyType(self._state)

    def _absorb(self) -> None:
        while self._top_index + 1 in self._state:
            self._top_index += 1

    def _array_values(self) -> list[Any]:
        size = len(self._state)
        if self._top_index != size:
            msg = f"expected a dense array of {size} entries, but only 1..{self._top_index} is contiguous"
            raise PreconditionViolation(msg)
        return [self._state[position] for position in range(1, size + 1)]

    @override
    def get(self, key: Any, default: Any = None, *, expected: type[_T] | None = None) -> Any:
        """Return the value for ``key``, or ``default`` when it is absent.

        When ``expected`` is given a present value of another type raises
        :class:`TypeMismatch`.
        """
        if key not in self._state:
            return default
        return _checked(key, self._state[key], expected)

    def contains(self, key: Any) -> bool:
        """Return True when ``key`` is present."""
        return key in self._state

    def apply(self, key: Any, expected: type[_T] | None = None) -> Any:
        """Return the value for ``key``, raising :class:`KeyNotFound` when absent."""
        return _checked(key, self[key], expected)

    @override
    def __getitem__(self, key: Any) -> Any:
        try:
            return self._state[key]
        except KeyError:
            raise KeyNotFound(key) from None

    @override
    def __setitem__(self, key: Any, value: Any) -> None:
        self._state[key] = value
        self._absorb()

    @override
    def __delitem__(self, key: Any) -> None:
        try:
            del self._state[key]
        except KeyError:
            raise KeyNotFound(key) from None
        position = _position(key)
        if position is not None and 0 < position <= self._top_index:
            self._top_index = position - 1

    @override
    def __contains__(self, key: object) -> bool:
        return key in self._state

    @override
    def __iter__(self) -> Iterator[Any]:
        return iter(self._state)

    @override
    def __len__(self) -> int:
        return len(self._state)

    @override
    def update(self, *args: Any, **kwargs: Any) -> Self:  # type: ignore[override]
        """Store entries and return the table.

        ``update(key, value)`` stores a single entry; any other call takes the
        usual mapping forms (a mapping, an iterable of pairs, keyword arguments).
        """
        if len(args) == 2 and not kwargs:  # noqa: PLR2004
            key, value = args
            self[key] = value
            return self
        super().update(*args, **kwargs)
        return self

    def remove(self, index: int | None = None) -> Any:
        """Remove and return the value at ``index``, or at the top of the array.

        Inside the array prefix the following elements shift down one slot.
        Outside it the key is dropped without shifting. Returns None when
        nothing is stored there.
        """
        if index is None:
            if self._top_index == 0:
                return None
            index = self._top_index
        if index <= 0:
            msg = f"index must be positive, got {index}"
            raise PreconditionViolation(msg)

        if index <= self._top_index:
            result = self._state[index]
            for position in range(index, self._top_index):
                self._state[position] = self._state[position + 1]
            del self._state[self._top_index]
            self._top_index -= 1
            return result
        return self._state.pop(index, None)

    def insert(self, index_or_value: Any, value: Any = _MISSING) -> Self:
        """Append a value, or insert one at ``index`` shifting the array up.

        ``insert(value)`` appends after the array prefix. ``insert(index, value)``
        moves the elements at ``index..top_index`` up one slot first when
        ``index`` falls inside the prefix, and otherwise stores at ``index``.
        """
        if value is _MISSING:
            self[self._top_index + 1] = index_or_value
            return self

        index = index_or_value
        if index <= 0:
            msg = f"index must be positive, got {index}"
            raise PreconditionViolation(msg)

        if index <= self._top_index:
            for position in range(self._top_index + 1, index, -1):
                self._state[position] = self._state[position - 1]
            self._top_index += 1
            self._state[index] = value
            self._absorb()
        else:
            self[index] = value
        return self

    def add(self, other: Table) -> Self:
        """Merge the string-keyed entries of ``other`` into this table."""
        for key in other:
            if not isinstance(key, str):
                msg = f"add only merges string keys, got {key!r}"
                raise PreconditionViolation(msg)
        self._state.update(other.items())
        return self

    def length(self) -> int:
        """Total number of entries, array prefix included."""
        return len(self._state)

    def clone(self) -> Table:
        """Return a shallow copy with its own backing store."""
        result = type(self)()
        for key, value in self._state.items():
            result[key] = value
        return result

    def __copy__(self) -> Table:
        return self.clone()

    def flatten(self) -> Table:
        """Collapse nested tables into one table of leaves keyed ``1..N``.

        Leaves keep their depth-first, left-to-right order. Every table visited
        must be a dense array (keys ``1..len``).
        """
        result = Table()
        on_path = {id(self)}
        stack: list[tuple[Table, Iterator[Any]]] = [(self, iter(self._array_values()))]
        while stack:
            table, values = stack[-1]
            value = next(values, _MISSING)
            if value is _MISSING:
                _ = stack.pop()
                on_path.discard(id(table))
            elif isinstance(value, Table):
                stack.append((value, _descend(value, on_path)))
            else:
                _ = result.insert(value)
        return result

    def inverse_flatten(self, target: Table) -> Table:
        """Rebuild the nested shape of ``target`` from the leaves of this table.

        This is the inverse of :meth:`flatten`:
        ``table.flatten().inverse_flatten(table) == table``.
        """
        result = Table()
        cursor = 1
        on_path = {id(target)}
        stack: list[tuple[Table, Iterator[Any], Table]] = [(target, iter(target._array_values()), result)]
        while stack:
            shape, slots, out = stack[-1]
            slot = next(slots, _MISSING)
            if slot is _MISSING:
                _ = stack.pop()
                on_path.discard(id(shape))
            elif isinstance(slot, Table):
                child = Table()
                _ = out.insert(child)
                stack.append((slot, _descend(slot, on_path), child))
            else:
                if cursor not in self._state:
                    msg = f"flat table has no leaf at position {cursor} for the target shape"
                    raise PreconditionViolation(msg)
                _ = out.insert(self._state[cursor])
                cursor += 1
        return result

    def save(self, path: str, overwrite: bool = False, **kwargs: Any) -> Self:  # noqa: FBT001, FBT002
        """Persist this table at ``path``; see :func:`kv_table.persistence.save`."""
        from .persistence import save  # noqa: PLC0415

        _ = save(self, path, overwrite, **kwargs)
        return self

    @classmethod
    def load(cls, path: str, **kwargs: Any) -> Table:
        """Load a table from ``path``; see :func:`kv_table.persistence.load`."""
        from .persistence import load  # noqa: PLC0415

        return load(path, **kwargs)

    @override
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Table):
            return NotImplemented
        if self is other:
            return True
        if len(self._state) != len(other._state):
            return False
        for key, value in self._state.items():
            if key not in other._state or other._state[key] != value:
                return False
        return True

    @override
    def __hash__(self) -> int:
        # Summing per-entry terms keeps the hash independent of insertion order.
        total = 0
        for key, value in self._state.items():
            total += hash(key) * _HASH_SEED + hash(value)
        return total & _HASH_MASK

    @override
    @recursive_repr()
    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._state!r})"

    @override
    @recursive_repr()
    def __str__(self) -> str:
        lines = []
        for key, value in self._state.items():
            indent = "\n\t" + " " * len(str(key)) + "  "
            lines.append(f"{key}: " + indent.join(str(value).split("\n")))
        body = "\n\t".join(lines)
        return f" {{\n\t{body}\n }}"
