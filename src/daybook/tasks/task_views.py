# src/daybook/tasks/task_views.py

"""Pure list derivations for the front end (no I/O, no mutation)."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from .task_models import Task, TaskKind

DISPLAY_DATE_FORMAT = "%d/%m/%Y"
TODAY_LABEL = "TODAY"


def _by_date(tasks: Iterable[Task]) -> list[Task]:
    # sorted() is stable: equal dates keep insertion order.
    return sorted(tasks, key=lambda t: t.due_date or date.min)


def active_daily(tasks: Iterable[Task]) -> list[Task]:
    return [t for t in tasks if t.kind is TaskKind.DAILY]


def active_scheduled(tasks: Iterable[Task]) -> list[Task]:
    return _by_date(t for t in tasks if t.kind is TaskKind.SCHEDULED)


def active_reminder(tasks: Iterable[Task]) -> list[Task]:
    return _by_date(t for t in tasks if t.kind is TaskKind.REMINDER)


def done_sorted(tasks: Iterable[Task]) -> list[Task]:
    return _by_date(tasks)


def is_due_today(task: Task, today: date) -> bool:
    return task.due_date is not None and task.due_date == today


def format_due(task: Task, today: date, fmt: str = DISPLAY_DATE_FORMAT) -> str:
    if task.due_date is None:
        return ""
    if is_due_today(task, today):
        return TODAY_LABEL
    return task.due_date.strftime(fmt)


@dataclass(frozen=True, slots=True)
class BoardView:
    daily: list[Task]
    scheduled: list[Task]
    reminder: list[Task]

    def column(self, kind: TaskKind) -> list[Task]:
        match kind:
            case TaskKind.DAILY:
                return self.daily
            case TaskKind.SCHEDULED:
                return self.scheduled
            case TaskKind.REMINDER:
                return self.reminder
        raise ValueError(f"Unknown task kind: {kind!r}")


def build_board(tasks: Iterable[Task]) -> BoardView:
    items = list(tasks)
    return BoardView(
        daily=active_daily(items),
        scheduled=active_scheduled(items),
        reminder=active_reminder(items),
    )


@dataclass(frozen=True, slots=True)
class HistoryView:
    scheduled: list[Task]
    reminder: list[Task]

    def column(self, kind: TaskKind) -> list[Task]:
        match kind:
            case TaskKind.SCHEDULED:
                return self.scheduled
            case TaskKind.REMINDER:
                return self.reminder
        raise ValueError(f"{kind!r} tasks have no history")


def build_history(scheduled_done: Iterable[Task], reminder_done: Iterable[Task]) -> HistoryView:
    return HistoryView(scheduled=done_sorted(scheduled_done), reminder=done_sorted(reminder_done))
