# src/daybook/tasks/task_codec.py

"""
JSON codec for task collections.

Record layout (one JSON object per task, the file is a JSON array):
    {"title": str, "kind": "daily"|"scheduled"|"reminder",
     "date": "YYYY-MM-DD" | null, "completed": bool,
     "completedDate": "YYYY-MM-DD" | null}

Older files wrote the tag under "type" instead of "kind"; both are accepted.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from datetime import date
from typing import Any

from .errors import MalformedRecord
from .task_models import Task, TaskKind

logger = logging.getLogger(__name__)

INDENT = 4


def task_to_record(task: Task) -> dict[str, Any]:
    return {
        "title": task.title,
        "kind": task.kind.value,
        "date": task.due_date.isoformat() if task.due_date else None,
        "completed": bool(task.completed),
        "completedDate": task.completed_on.isoformat() if task.completed_on else None,
    }


def _parse_iso(raw: Any, *, field: str, index: int) -> date | None:
    if raw is None:
        return None
    if not isinstance(raw, str):
        raise MalformedRecord(f"record #{index}: {field} must be an ISO date string or null")
    try:
        return date.fromisoformat(raw.strip())
    except ValueError:
        raise MalformedRecord(f"record #{index}: invalid {field} {raw!r}") from None


def record_to_task(raw: Any, index: int = 0) -> Task:
    if not isinstance(raw, dict):
        raise MalformedRecord(f"record #{index}: expected an object, got {type(raw).__name__}")

    title = raw.get("title")
    if not isinstance(title, str) or not title.strip():
        raise MalformedRecord(f"record #{index}: missing title")

    tag = raw.get("kind", raw.get("type"))
    try:
        kind = TaskKind(tag)
    except ValueError:
        raise MalformedRecord(f"record #{index}: unknown kind {tag!r}") from None

    completed = raw.get("completed")
    if not isinstance(completed, bool):
        raise MalformedRecord(f"record #{index}: completed must be a boolean")

    due = _parse_iso(raw.get("date"), field="date", index=index)
    if kind.is_dated and due is None:
        raise MalformedRecord(f"record #{index}: {kind.value} task without a date")
    if not kind.is_dated and due is not None:
        logger.debug("Ignoring date on daily record #%s (%r)", index, title)
        due = None

    return Task(
        title=title,
        kind=kind,
        due_date=due,
        completed=completed,
        completed_on=_parse_iso(raw.get("completedDate"), field="completedDate", index=index),
    )


def encode(tasks: Iterable[Task]) -> str:
    """Serialize tasks as a pretty-printed JSON array."""
    return json.dumps([task_to_record(t) for t in tasks], ensure_ascii=False, indent=INDENT)


def decode(text: str | None) -> list[Task]:
    """
    Parse a JSON array of task records.

    Empty or absent text yields an empty list. Invalid JSON propagates as
    json.JSONDecodeError; schema violations raise MalformedRecord.
    """
    if text is None or not text.strip():
        return []

    data = json.loads(text)
    if not isinstance(data, list):
        raise MalformedRecord(f"expected a JSON array, got {type(data).__name__}")

    return [record_to_task(raw, i) for i, raw in enumerate(data)]
