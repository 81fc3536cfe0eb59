# src/daybook/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The lifecycle engine depends on Protocols instead of concrete implementations.
This keeps storage and time swappable and makes testing easier.
"""

from collections.abc import Iterable, Sequence
from datetime import date
from typing import Any, Protocol


class Clock(Protocol):
    """Returns the current calendar day (date.today in production)."""
    def __call__(self) -> date: ...


class TaskListener(Protocol):
    """Receives the active-task snapshot after each change."""
    def __call__(self, tasks: Sequence[Any]) -> None: ...


class TaskRepo(Protocol):
    """
    Collection-oriented task persistence.

    `collection` is a task_store.Collection (kept as Any to avoid import coupling).
    """

    def load(self, collection: Any) -> list[Any]: ...
    def save(self, collection: Any, tasks: Iterable[Any]) -> None: ...

    def read_last_reset_date(self) -> date | None: ...
    def write_last_reset_date(self, day: date) -> None: ...
