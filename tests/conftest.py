from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from kv_table.stores import FileStore, RedisStore


if TYPE_CHECKING:
    from pathlib import Path


class FakeRedisClient:
    def __init__(self) -> None:
        self.store: dict[str, bytes] = {}
        self.closed = False

    def get(self, key: str) -> bytes | None:
        return self.store.get(key)

    def set(self, key: str, value: bytes) -> None:
        self.store[key] = value

    def exists(self, key: str) -> int:
        return int(key in self.store)

    def delete(self, key: str) -> int:
        return int(self.store.pop(key, None) is not None)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_redis() -> FakeRedisClient:
    return FakeRedisClient()


@pytest.fixture
def redis_store(fake_redis: FakeRedisClient) -> RedisStore:
    return RedisStore(client=fake_redis, prefix="tables:")


@pytest.fixture
def file_store(tmp_path: Path) -> FileStore:
    return FileStore(tmp_path)
