"""Tagged JSON wire format for tables.

JSON objects only take string keys, so every key and value is written as a
``{"t": tag, "v": payload}`` node. Tables and plain dicts become lists of
``[key, value]`` node pairs in insertion order, which keeps integer keys,
tuple keys and nested tables intact across a round trip. Encoding recurses, so
nesting deeper than the interpreter recursion limit raises ``ValueError``.
"""

from __future__ import annotations

import json
from typing import Any

from .table import Table


__all__ = ["dumps", "loads"]

_ENCODING = "utf-8"


def _encode_pairs(items: Any, active: set[int]) -> list[list[dict[str, Any]]]:
    return [[_encode(key, active), _encode(value, active)] for key, value in items]


def _encode_container(value: Any, active: set[int]) -> dict[str, Any]:
    if id(value) in active:
        msg = f"cannot encode a {type(value).__name__} that contains itself"
        raise ValueError(msg)
    active.add(id(value))
    try:
        if isinstance(value, Table):
            return {"t": "table", "v": _encode_pairs(value.items(), active)}
        if isinstance(value, dict):
            return {"t": "dict", "v": _encode_pairs(value.items(), active)}
        tag = "list" if isinstance(value, list) else "tuple"
        return {"t": tag, "v": [_encode(item, active) for item in value]}
    finally:
        active.discard(id(value))


def _encode(value: Any, active: set[int]) -> dict[str, Any]:
    if value is None:
        return {"t": "none", "v": None}
    if isinstance(value, bool):
        return {"t": "bool", "v": value}
    if isinstance(value, int):
        return {"t": "int", "v": value}
    if isinstance(value, float):
        return {"t": "float", "v": value}
    if isinstance(value, str):
        return {"t": "str", "v": value}
    if isinstance(value, Table | dict | list | tuple):
        return _encode_container(value, active)
    msg = f"cannot encode value of type {type(value).__name__}"
    raise TypeError(msg)


def _decode_pairs(payload: Any) -> list[tuple[Any, Any]]:
    if not isinstance(payload, list):
        msg = "expected a list of key/value pairs"
        raise ValueError(msg)
    decoded: list[tuple[Any, Any]] = []
    for pair in payload:
        if not isinstance(pair, list) or len(pair) != 2:  # noqa: PLR2004
            msg = f"malformed key/value pair: {pair!r}"
            raise ValueError(msg)
        decoded.append((_decode(pair[0]), _decode(pair[1])))
    return decoded


_SCALAR_TYPES: dict[str, tuple[type, ...]] = {
    "bool": (bool,),
    "int": (int,),
    "float": (float, int),
    "str": (str,),
}


def _decode(node: Any) -> Any:  # noqa: PLR0911
    if not isinstance(node, dict) or "t" not in node or "v" not in node:
        msg = f"malformed node: {node!r}"
        raise ValueError(msg)

    tag, payload = node["t"], node["v"]
    if tag == "none":
        return None
    if tag in _SCALAR_TYPES:
        if not isinstance(payload, _SCALAR_TYPES[tag]) or (tag != "bool" and isinstance(payload, bool)):
            msg = f"payload {payload!r} does not match tag {tag!r}"
            raise ValueError(msg)
        return float(payload) if tag == "float" else payload
    if tag == "table":
        table = Table()
        for key, value in _decode_pairs(payload):
            table[key] = value
        return table
    if tag == "dict":
        return dict(_decode_pairs(payload))
    if tag in {"list", "tuple"}:
        if not isinstance(payload, list):
            msg = f"expected a list payload for tag {tag!r}"
            raise ValueError(msg)
        items = [_decode(item) for item in payload]
        return items if tag == "list" else tuple(items)
    msg = f"unknown tag: {tag!r}"
    raise ValueError(msg)


def dumps(table: Table) -> bytes:
    """Serialize a table to UTF-8 encoded tagged JSON."""
    if not isinstance(table, Table):
        msg = f"expected a Table, got {type(table).__name__}"
        raise TypeError(msg)
    try:
        encoded = json.dumps(_encode(table, set()), separators=(",", ":"))
    except RecursionError as error:
        msg = "table is nested too deeply to encode"
        raise ValueError(msg) from error
    return encoded.encode(_ENCODING)


def loads(data: bytes | str) -> Table:
    """Deserialize a table written by :func:`dumps`."""
    text = data.decode(_ENCODING) if isinstance(data, bytes) else data
    try:
        result = _decode(json.loads(text))
    except RecursionError as error:
        msg = "encoded table is nested too deeply to decode"
        raise ValueError(msg) from error
    if not isinstance(result, Table):
        msg = f"expected an encoded table, got {type(result).__name__}"
        raise ValueError(msg)  # noqa: TRY004
    return result
