# src/daybook/tasks/task_store.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from collections.abc import Iterable
from datetime import date
from enum import StrEnum
from pathlib import Path

from . import task_codec
from .errors import CorruptStore
from .task_models import Task, TaskKind

logger = logging.getLogger(__name__)

LAST_RESET_FILE = "last_update.txt"


class Collection(StrEnum):
    ACTIVE_DAILY = "active-daily"
    ACTIVE_SCHEDULED = "active-scheduled"
    ACTIVE_REMINDER = "active-reminder"
    DONE_SCHEDULED = "done-scheduled"
    DONE_REMINDER = "done-reminder"

    @property
    def filename(self) -> str:
        return _FILENAMES[self]

    @classmethod
    def active_for(cls, kind: TaskKind) -> Collection:
        match kind:
            case TaskKind.DAILY:
                return cls.ACTIVE_DAILY
            case TaskKind.SCHEDULED:
                return cls.ACTIVE_SCHEDULED
            case TaskKind.REMINDER:
                return cls.ACTIVE_REMINDER
        raise ValueError(f"Unknown task kind: {kind!r}")

    @classmethod
    def done_for(cls, kind: TaskKind) -> Collection:
        match kind:
            case TaskKind.SCHEDULED:
                return cls.DONE_SCHEDULED
            case TaskKind.REMINDER:
                return cls.DONE_REMINDER
        raise ValueError(f"{kind!r} tasks have no done collection")


_FILENAMES: dict[Collection, str] = {
    Collection.ACTIVE_DAILY: "daily.json",
    Collection.ACTIVE_SCHEDULED: "scheduled.json",
    Collection.ACTIVE_REMINDER: "reminder.json",
    Collection.DONE_SCHEDULED: "scheduled_done.json",
    Collection.DONE_REMINDER: "reminder_done.json",
}


class JsonTaskStore:
    """
    File-backed task store: one JSON array per collection.

    Writes:
    - every save rewrites the whole file
    - data goes to a sibling .tmp file first, then os.replace() publishes it,
      so a reader never observes a half-written collection

    There is no cross-file transaction. Callers that touch two collections
    for one logical move must order the writes themselves.
    """

    def __init__(self, data_dir: str | Path = "data") -> None:
        self._data_dir = Path(data_dir)
        logger.info("JsonTaskStore ready dir=%s", self._data_dir)

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, collection: Collection) -> Path:
        return self._data_dir / Collection(collection).filename

    # ---- low-level helpers ----

    def _read_text(self, path: Path) -> str | None:
        if not path.exists():
            return None
        try:
            return path.read_text("utf-8")
        except UnicodeDecodeError as e:
            raise CorruptStore(path, f"not valid UTF-8 ({e.reason})") from e

    def _write_atomic(self, path: Path, text: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(path.suffix + ".tmp")
        try:
            tmp.write_text(text, "utf-8")
            os.replace(tmp, path)
        except OSError:
            with contextlib.suppress(OSError):
                tmp.unlink()
            raise

    # ---- public API ----

    def load(self, collection: Collection) -> list[Task]:
        path = self.path_for(collection)
        text = self._read_text(path)
        if text is None:
            logger.debug("Collection %s missing at %s; treating as empty", collection, path)
            return []
        try:
            tasks = task_codec.decode(text)
        except json.JSONDecodeError as e:
            raise CorruptStore(path, f"invalid JSON at line {e.lineno} column {e.colno}") from e
        logger.debug("Loaded %s: %d task(s) from %s", collection, len(tasks), path)
        return tasks

    def save(self, collection: Collection, tasks: Iterable[Task]) -> None:
        path = self.path_for(collection)
        items = list(tasks)
        self._write_atomic(path, task_codec.encode(items))
        logger.debug("Saved %s: %d task(s) to %s", collection, len(items), path)

    def read_last_reset_date(self) -> date | None:
        path = self._data_dir / LAST_RESET_FILE
        text = self._read_text(path)
        if text is None or not text.strip():
            return None
        try:
            return date.fromisoformat(text.strip())
        except ValueError as e:
            raise CorruptStore(path, f"not an ISO date: {text.strip()!r}") from e

    def write_last_reset_date(self, day: date) -> None:
        path = self._data_dir / LAST_RESET_FILE
        self._write_atomic(path, day.isoformat())
        logger.debug("Last reset date set to %s", day.isoformat())
