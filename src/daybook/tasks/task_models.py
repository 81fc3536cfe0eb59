# src/daybook/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import StrEnum

from .errors import InvalidInput


class TaskKind(StrEnum):
    """
    Variant tag of a task.

    Notes:
    - DAILY carries no date and is reset every calendar day.
    - SCHEDULED / REMINDER carry a date and are archived once completed.
    """

    DAILY = "daily"
    SCHEDULED = "scheduled"
    REMINDER = "reminder"

    @property
    def is_dated(self) -> bool:
        return self is not TaskKind.DAILY

    @classmethod
    def from_label(cls, raw: str | None) -> TaskKind:
        label = (raw or "").strip().lower()
        kind = _KIND_ALIASES.get(label)
        if kind is None:
            raise InvalidInput(f"Unknown task kind: {raw!r}")
        return kind


_KIND_ALIASES: dict[str, TaskKind] = {
    "d": TaskKind.DAILY,
    "daily": TaskKind.DAILY,
    "s": TaskKind.SCHEDULED,
    "scheduled": TaskKind.SCHEDULED,
    "r": TaskKind.REMINDER,
    "reminder": TaskKind.REMINDER,
}

TaskKey = tuple[str, TaskKind, date | None, date | None]


@dataclass(slots=True, eq=False)
class Task:
    """
    A single task.

    Fields:
        title: Non-empty, single-line title.
        kind: Variant tag (daily / scheduled / reminder).
        due_date: Associated calendar date; None exactly for daily tasks.
        completed: Checkbox state.
        completed_on: Day the task was checked; None while unchecked.

    Equality is structural over (title, kind, due_date, completed_on). There is
    no generated id, so two tasks with identical fields are interchangeable.
    """

    title: str
    kind: TaskKind
    due_date: date | None = None
    completed: bool = False
    completed_on: date | None = None

    def __post_init__(self) -> None:
        if self.kind.is_dated and self.due_date is None:
            raise ValueError(f"{self.kind.value} task requires a date")
        if not self.kind.is_dated and self.due_date is not None:
            raise ValueError("daily task cannot carry a date")

    @classmethod
    def daily(cls, title: str) -> Task:
        return cls(title=title, kind=TaskKind.DAILY)

    @classmethod
    def scheduled(cls, title: str, on: date) -> Task:
        return cls(title=title, kind=TaskKind.SCHEDULED, due_date=on)

    @classmethod
    def reminder(cls, title: str, on: date) -> Task:
        return cls(title=title, kind=TaskKind.REMINDER, due_date=on)

    @property
    def associated_date(self) -> date | None:
        return self.due_date

    @property
    def key(self) -> TaskKey:
        return (self.title, self.kind, self.due_date, self.completed_on)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Task):
            return NotImplemented
        return self.key == other.key

    # Mutable record: equality without hashing.
    __hash__ = None  # type: ignore[assignment]
