# src/daybook/tasks/errors.py

from __future__ import annotations

from pathlib import Path


class DaybookError(Exception):
    """Base class for errors raised by the task core."""


class MalformedRecord(DaybookError):
    """A stored task record violates the JSON schema."""


class CorruptStore(DaybookError):
    """A collection file exists but cannot be parsed at all."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Corrupt store file {self.path}: {reason}")


class InvalidInput(DaybookError, ValueError):
    """An add request was rejected (blank title, unknown kind, bad date)."""
