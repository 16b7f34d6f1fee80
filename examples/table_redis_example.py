"""Minimal example for saving tables through a Redis-compatible store."""

from kv_table import RedisStore, T, load, save


def main() -> None:
    """Run a basic save/load flow against Redis/Dragonfly."""
    store = RedisStore(url="redis://redis:6379/0", prefix="tables:")
    try:
        table = T("a", "b", "c", owner="alice")
        _ = save(table, "letters", overwrite=True, store=store)
        print("letters:", load("letters", store=store))

        _ = table.insert(2, "x")
        print("removed:", table.remove(4))
        _ = save(table, "letters", overwrite=True, store=store)
        print(f"{table=}")
    finally:
        store.close()


if __name__ == "__main__":
    main()
