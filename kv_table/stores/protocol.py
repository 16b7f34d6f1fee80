"""Store interface definitions."""

from __future__ import annotations

from abc import ABC, abstractmethod


class Store(ABC):
    """Blocking byte store addressed by path."""

    @abstractmethod
    def read(self, path: str) -> bytes | None:
        """Return stored bytes for path, or None when nothing is stored there."""

    @abstractmethod
    def write(self, path: str, data: bytes) -> None:
        """Store bytes at path, replacing any previous content."""

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Return True when something is stored at path."""

    @abstractmethod
    def delete(self, path: str) -> None:
        """Delete path if present."""

    @abstractmethod
    def close(self) -> None:
        """Close any store resources."""
