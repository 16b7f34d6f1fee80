"""Capability marker for values passed between processing stages."""

from __future__ import annotations

from abc import ABC


class Activity(ABC):  # noqa: B024
    """Marker base class; carries no behavior.

    Frameworks dispatch on ``isinstance(value, Activity)`` to tell containers
    that may flow between stages apart from plain leaf values.
    """
