# src/daybook/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import cast

from ..core.state import AppState
from ..tasks.errors import InvalidInput
from ..tasks.task_models import Task, TaskKind
from ..tasks.task_views import BoardView, HistoryView, build_board, build_history, format_due

CommandEmitter = Callable[[str], None]
CommandConfirm = Callable[[str], bool]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler4 = Callable[
    [AppState, list[str], CommandEmitter | None, CommandConfirm | None], str
]
CommandHandler = CommandHandler2 | CommandHandler4

logger = logging.getLogger(__name__)

_KIND_PREFIX: dict[TaskKind, str] = {
    TaskKind.DAILY: "d",
    TaskKind.SCHEDULED: "s",
    TaskKind.REMINDER: "r",
}
_PREFIX_KIND = {v: k for k, v in _KIND_PREFIX.items()}

_SECTION_TITLES: dict[TaskKind, str] = {
    TaskKind.DAILY: "Daily",
    TaskKind.SCHEDULED: "Scheduled",
    TaskKind.REMINDER: "Reminders",
}


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
        confirm: CommandConfirm | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 4

        if nparams >= 4:
            h4 = cast(CommandHandler4, handler)
            return h4(state, args, emit, confirm)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- rendering ----


def _task_line(state: AppState, ref: str, task: Task, *, checkbox: bool = True) -> str:
    fmt = getattr(state.settings, "display_date_format", "%d/%m/%Y")
    due = format_due(task, state.today(), fmt)
    suffix = f" ({due})" if due else ""
    box = ("[x] " if task.completed else "[ ] ") if checkbox else ""
    return f"  {ref:<4} {box}{task.title}{suffix}"


def render_board(state: AppState, board: BoardView | None = None) -> str:
    board = board or build_board(state.engine.active)
    lines: list[str] = []
    for kind in TaskKind:
        tasks = board.column(kind)
        lines.append(f"{_SECTION_TITLES[kind]}:")
        if not tasks:
            lines.append("  (empty)")
        for i, t in enumerate(tasks, start=1):
            lines.append(_task_line(state, f"{_KIND_PREFIX[kind]}{i}", t))
    return "\n".join(lines)


def _history_view(state: AppState) -> HistoryView:
    return build_history(
        state.engine.history(TaskKind.SCHEDULED),
        state.engine.history(TaskKind.REMINDER),
    )


def render_history(state: AppState, history: HistoryView | None = None) -> str:
    history = history or _history_view(state)
    lines = ["History:"]
    for kind in (TaskKind.SCHEDULED, TaskKind.REMINDER):
        tasks = history.column(kind)
        lines.append(f"{_SECTION_TITLES[kind]} (done):")
        if not tasks:
            lines.append("  (empty)")
        for i, t in enumerate(tasks, start=1):
            line = _task_line(state, f"h{_KIND_PREFIX[kind]}{i}", t, checkbox=False)
            if t.completed_on:
                line += f" [done {t.completed_on.isoformat()}]"
            lines.append(line)
    return "\n".join(lines)


# ---- ref resolution ----


def _parse_ref(raw: str) -> tuple[TaskKind, int] | None:
    ref = raw.strip().lower().rstrip(".")
    if len(ref) < 2 or ref[0] not in _PREFIX_KIND or not ref[1:].isdigit():
        return None
    return _PREFIX_KIND[ref[0]], int(ref[1:])


def resolve_active(state: AppState, raw: str) -> Task | None:
    parsed = _parse_ref(raw)
    if parsed is None:
        return None
    kind, number = parsed
    column = build_board(state.engine.active).column(kind)
    if number < 1 or number > len(column):
        return None
    return column[number - 1]


def resolve_history(state: AppState, raw: str) -> Task | None:
    ref = raw.strip().lower()
    if ref.startswith("h"):
        ref = ref[1:]
    parsed = _parse_ref(ref)
    if parsed is None or parsed[0] is TaskKind.DAILY:
        return None
    kind, number = parsed
    column = _history_view(state).column(kind)
    if number < 1 or number > len(column):
        return None
    return column[number - 1]


# ---- commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    return render_board(state)


def cmd_status(state: AppState, args: list[str]) -> str:
    board = build_board(state.engine.active)
    data_dir = getattr(state.settings, "data_dir", "?")
    last = state.store.read_last_reset_date()
    return (
        "Status:\n"
        f"  Data dir: {data_dir}\n"
        f"  Today: {state.today().isoformat()}\n"
        f"  Last daily reset: {last.isoformat() if last else 'never'}\n"
        f"  Active: {len(board.daily)} daily, {len(board.scheduled)} scheduled, "
        f"{len(board.reminder)} reminder"
    )


def cmd_exit(state: AppState, args: list[str]) -> str:
    # The console loop stops on /exit before dispatching; this covers other callers.
    return "Use /exit at the console prompt to leave."


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add daily <title...>
    /add scheduled <date> <title...>
    /add reminder <date> <title...>
    """
    if not args:
        return "Usage: /add <daily|scheduled|reminder> [date] <title...>"

    kind = TaskKind.from_label(args[0])
    if kind.is_dated:
        if len(args) < 2:
            raise InvalidInput(f"A date is required for {kind.value} tasks")
        when: str | None = args[1]
        title = " ".join(args[2:])
    else:
        when = None
        title = " ".join(args[1:])

    task = state.engine.add(title, kind, when)
    return f"Added {task.kind.value} task: {task.title}"


def _toggle(state: AppState, args: list[str], value: bool) -> str:
    if len(args) != 1:
        return f"Usage: /{'done' if value else 'undo'} <ref> (e.g. d1, s2, r3)"
    task = resolve_active(state, args[0])
    if task is None:
        return f"No active task {args[0]}."
    state.engine.toggle_complete(task, value)
    if value and task.kind.is_dated:
        return f"Completed and moved to history: {task.title}"
    return f"{'Checked' if value else 'Unchecked'}: {task.title}"


def cmd_done(state: AppState, args: list[str]) -> str:
    return _toggle(state, args, True)


def cmd_undo(state: AppState, args: list[str]) -> str:
    return _toggle(state, args, False)


def cmd_rm(
    state: AppState,
    args: list[str],
    emit: CommandEmitter | None = None,
    confirm: CommandConfirm | None = None,
) -> str:
    """
    /rm <ref>     -> delete after confirmation (if enabled)
    /rm <ref> -y  -> delete without asking
    """
    flags = {a for a in args if a.startswith("-")}
    refs = [a for a in args if not a.startswith("-")]
    if len(refs) != 1:
        return "Usage: /rm <ref> [-y]"

    task = resolve_active(state, refs[0])
    if task is None:
        return f"No active task {refs[0]}."

    ask = bool(getattr(state.settings, "confirm_delete", True)) and "-y" not in flags
    if ask and confirm is not None:
        question = f'Delete "{task.title}"? It will NOT go to history.'
        if not confirm(question):
            return "Delete cancelled."

    state.engine.delete(task)
    return f"Deleted: {task.title}"


def cmd_history(state: AppState, args: list[str]) -> str:
    return render_history(state)


def cmd_restore(
    state: AppState,
    args: list[str],
    emit: CommandEmitter | None = None,
    confirm: CommandConfirm | None = None,
) -> str:
    if len(args) != 1:
        return "Usage: /restore <history ref> (e.g. hs1, hr2)"

    task = resolve_history(state, args[0])
    if task is None:
        return f"No history entry {args[0]}."

    if confirm is not None and not confirm(f'Restore "{task.title}" to the active list?'):
        return "Restore cancelled."

    restored = state.engine.restore(task)
    if restored is None:
        return f"Already restored: {task.title}"
    return f"Restored: {restored.title}"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show the three active lists.", aliases=["ls"])
registry.register("status", cmd_status, help_text="Show data dir, reset date and counts.")
registry.register(
    "add",
    cmd_add,
    help_text="Add a task: /add daily <title> | /add scheduled|reminder <date> <title>.",
)
registry.register("done", cmd_done, help_text="Check a task: /done <ref>.", aliases=["check"])
registry.register("undo", cmd_undo, help_text="Uncheck a task: /undo <ref>.", aliases=["uncheck"])
registry.register("rm", cmd_rm, help_text="Delete a task (no history): /rm <ref> [-y].", aliases=["delete"])
registry.register("history", cmd_history, help_text="Show completed scheduled tasks and reminders.")
registry.register("restore", cmd_restore, help_text="Restore from history: /restore <href>.")
registry.register("exit", cmd_exit, help_text="Leave the console.", aliases=["quit"])
