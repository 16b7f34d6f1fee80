"""Minimal example for flattening a table and saving it to a local file."""

import tempfile
from pathlib import Path

from kv_table import T, Table


def main() -> None:
    """Flatten a nested table, save it, load it back and restore its shape."""
    nested = T(T(1, 2), 3, T(4, T(5, 6)), name="weights")
    print("nested:", nested)

    # only the array prefix takes part in flattening
    shape = T(*(nested[position] for position in range(1, nested.top_index + 1)))
    flat = shape.flatten()
    print("flat:", flat)

    with tempfile.TemporaryDirectory() as directory:
        path = str(Path(directory) / "flat.json")
        _ = flat.save(path)
        loaded = Table.load(path)

    restored = loaded.inverse_flatten(shape)
    assert restored == shape  # noqa: S101
    print("restored:", restored)


if __name__ == "__main__":
    main()
