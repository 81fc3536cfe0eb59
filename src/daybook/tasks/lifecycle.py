# src/daybook/tasks/lifecycle.py

from __future__ import annotations

"""
Task lifecycle engine.

Owns the in-memory working set of active tasks and drives every transition:
- initialize: load active collections, drop stray completed one-offs, daily reset
- toggle_complete: check/uncheck; checked one-offs move to their done collection
- restore: move a task from history back to the active set
- delete: drop an active task for good (no history)
- add: validate and append a new task

Done collections are never cached; they are read from the repo on demand.

Write ordering for one-off completion: the done collection is saved first,
the active collection second. A crash in between leaves the unchecked task in
the active file as well as in history; after a restart it shows up in both and
completing it again adds a second history entry. This is accepted: the other
order could lose the task outright. Single-collection writes roll the working
set back when the save fails.
"""

import logging
from collections.abc import Callable, Iterable, Sequence
from datetime import date, datetime

from ..core.ports import Clock, TaskListener, TaskRepo
from .errors import InvalidInput
from .task_models import Task, TaskKind
from .task_store import Collection

logger = logging.getLogger(__name__)

DEFAULT_DATE_FORMATS: tuple[str, ...] = ("%Y-%m-%d", "%d/%m/%Y")


def parse_day(raw: date | str | None, formats: Iterable[str] = DEFAULT_DATE_FORMATS) -> date | None:
    """Parse a calendar day from a date or text; None if nothing matches."""
    if raw is None:
        return None
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    text = str(raw).strip()
    if not text:
        return None
    for fmt in formats:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


class TaskEngine:
    def __init__(
        self,
        repo: TaskRepo,
        *,
        clock: Clock = date.today,
        date_formats: Iterable[str] = DEFAULT_DATE_FORMATS,
    ) -> None:
        self._repo = repo
        self._clock = clock
        self._date_formats = tuple(date_formats)
        self._tasks: list[Task] = []
        self._listeners: list[TaskListener] = []

    # ---- observation ----

    @property
    def active(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    def subscribe(self, listener: TaskListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        snapshot = self.active
        for listener in list(self._listeners):
            listener(snapshot)

    # ---- low-level helpers ----

    def _today(self) -> date:
        return self._clock()

    def _of_kind(self, kind: TaskKind) -> list[Task]:
        return [t for t in self._tasks if t.kind is kind]

    def _persist_active(self, kind: TaskKind) -> None:
        self._repo.save(Collection.active_for(kind), self._of_kind(kind))

    def _find_active(self, task: Task) -> int | None:
        # Prefer the exact object handed out by `active`; fall back to the structural key.
        for i, t in enumerate(self._tasks):
            if t is task:
                return i
        for i, t in enumerate(self._tasks):
            if t.key == task.key:
                return i
        return None

    @staticmethod
    def _find_by_key(tasks: Sequence[Task], task: Task) -> int | None:
        for i, t in enumerate(tasks):
            if t.key == task.key:
                return i
        return None

    # ---- operations ----

    def initialize(self) -> None:
        """
        Load active tasks and run the once-per-day reset of daily tasks.

        Store errors (CorruptStore / MalformedRecord) propagate to the caller.
        """
        daily = self._repo.load(Collection.ACTIVE_DAILY)
        loaded: list[Task] = list(daily)

        for kind in (TaskKind.SCHEDULED, TaskKind.REMINDER):
            stored = self._repo.load(Collection.active_for(kind))
            kept = [t for t in stored if not t.completed]
            if len(kept) != len(stored):
                logger.warning(
                    "Dropping %d completed %s task(s) left in the active collection",
                    len(stored) - len(kept),
                    kind.value,
                )
                self._repo.save(Collection.active_for(kind), kept)
            loaded.extend(kept)

        self._tasks = loaded

        today = self._today()
        last = self._repo.read_last_reset_date()
        if last is None or last != today:
            changed = False
            for t in self._tasks:
                if t.kind is TaskKind.DAILY and (t.completed or t.completed_on is not None):
                    t.completed = False
                    t.completed_on = None
                    changed = True
            if changed:
                self._persist_active(TaskKind.DAILY)
            self._repo.write_last_reset_date(today)
            logger.info("Daily reset for %s (last=%s, cleared=%s)", today, last, changed)

        logger.info(
            "Engine initialized: %d daily, %d scheduled, %d reminder",
            len(self._of_kind(TaskKind.DAILY)),
            len(self._of_kind(TaskKind.SCHEDULED)),
            len(self._of_kind(TaskKind.REMINDER)),
        )
        self._notify()

    def add(self, title: str, kind: TaskKind | str, when: date | str | None = None) -> Task:
        clean_title = (title or "").strip()
        if not clean_title:
            raise InvalidInput("Title is required")

        task_kind = kind if isinstance(kind, TaskKind) else TaskKind.from_label(kind)

        due: date | None = None
        if task_kind.is_dated:
            due = parse_day(when, self._date_formats)
            if due is None:
                raise InvalidInput(f"A valid date is required for {task_kind.value} tasks (got {when!r})")

        task = Task(title=clean_title, kind=task_kind, due_date=due)
        self._tasks.append(task)
        try:
            self._persist_active(task_kind)
        except Exception:
            self._tasks.remove(task)
            raise

        logger.info("Task added kind=%s title=%r date=%s", task_kind.value, clean_title, due)
        self._notify()
        return task

    def toggle_complete(self, task: Task, value: bool) -> bool:
        idx = self._find_active(task)
        if idx is None:
            logger.debug("toggle_complete: task %r not active; ignoring", task.title)
            return False

        current = self._tasks[idx]

        if not value:
            if current.kind is TaskKind.DAILY:
                self._set_daily(current, False, None)
            else:
                current.completed = False
                current.completed_on = None
            self._notify()
            return True

        today = self._today()

        match current.kind:
            case TaskKind.DAILY:
                self._set_daily(current, True, today)
                logger.info("Daily task checked title=%r", current.title)

            case TaskKind.SCHEDULED | TaskKind.REMINDER:
                self._archive(idx, current, today)

        self._notify()
        return True

    def _set_daily(self, task: Task, completed: bool, on: date | None) -> None:
        previous = (task.completed, task.completed_on)
        task.completed = completed
        task.completed_on = on
        try:
            self._persist_active(TaskKind.DAILY)
        except Exception:
            task.completed, task.completed_on = previous
            raise

    def _archive(self, idx: int, task: Task, today: date) -> None:
        done_collection = Collection.done_for(task.kind)

        task.completed = True
        task.completed_on = today
        try:
            done = self._repo.load(done_collection)
            done.append(task)
            self._repo.save(done_collection, done)
        except Exception:
            task.completed = False
            task.completed_on = None
            logger.error("Archiving %r failed; task stays active", task.title)
            raise

        del self._tasks[idx]
        self._persist_active(task.kind)
        logger.info("Task archived kind=%s title=%r on=%s", task.kind.value, task.title, today)

    def restore(self, task: Task) -> Task | None:
        if not task.kind.is_dated:
            logger.debug("restore: daily task %r has no history; ignoring", task.title)
            return None

        done_collection = Collection.done_for(task.kind)
        done = self._repo.load(done_collection)
        idx = self._find_by_key(done, task)
        if idx is None:
            logger.debug("restore: %r not found in %s; ignoring", task.title, done_collection)
            return None

        restored = done.pop(idx)
        self._repo.save(done_collection, done)

        completed_on = restored.completed_on
        restored.completed = False
        restored.completed_on = None
        self._tasks.append(restored)
        try:
            self._persist_active(restored.kind)
        except Exception:
            # Put the entry back into history so it is not left only in memory.
            self._tasks.pop()
            restored.completed = True
            restored.completed_on = completed_on
            done.insert(idx, restored)
            logger.error("Restoring %r failed; entry returned to %s", restored.title, done_collection)
            self._repo.save(done_collection, done)
            raise

        logger.info("Task restored kind=%s title=%r", restored.kind.value, restored.title)
        self._notify()
        return restored

    def delete(self, task: Task) -> bool:
        idx = self._find_active(task)
        if idx is None:
            logger.debug("delete: %r already gone", task.title)
            return False

        removed = self._tasks.pop(idx)
        try:
            self._persist_active(removed.kind)
        except Exception:
            self._tasks.insert(idx, removed)
            raise

        logger.info("Task deleted kind=%s title=%r", removed.kind.value, removed.title)
        self._notify()
        return True

    def history(self, kind: TaskKind | str) -> list[Task]:
        """Fresh snapshot of the done collection for `kind`."""
        task_kind = kind if isinstance(kind, TaskKind) else TaskKind.from_label(kind)
        return self._repo.load(Collection.done_for(task_kind))
