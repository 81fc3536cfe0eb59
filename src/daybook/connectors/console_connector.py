# src/daybook/connectors/console_connector.py

from __future__ import annotations

import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..cli.commands import render_board
from ..core.state import AppState
from ..tasks.errors import DaybookError

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def _confirm(question: str) -> bool:
    try:
        answer = input(f"{question} [y/N] ").strip().lower()
    except (EOFError, KeyboardInterrupt):
        print()
        return False
    return answer in ("y", "yes")


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started.")
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "daybook"))

    # Redraw the board only after something actually changed.
    dirty = {"board": True}

    def on_change(_tasks) -> None:
        dirty["board"] = True

    unsubscribe = state.engine.subscribe(on_change)

    def emit(text: str) -> None:
        print(f"[{_ts_local()}] {text}", flush=True)

    _print_ts(f"[{app_name}] Use /help for commands. Use /exit to quit.\n")

    try:
        while True:
            if dirty["board"]:
                print(render_board(state))
                dirty["board"] = False

            try:
                user_input = input("\n>>> ").strip()
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break
            except KeyboardInterrupt:
                logger.info("Console KeyboardInterrupt, exiting.")
                print()
                break

            if not user_input:
                continue

            if user_input.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            try:
                cmd_response = command_registry.handle(
                    state, user_input, emit=emit, confirm=_confirm
                )
            except DaybookError as e:
                logger.info("Command rejected: %s", e)
                cmd_response = f"Error: {e}"
            except Exception:
                logger.exception("Command handler crashed.")
                cmd_response = "Internal error while handling a command."

            if cmd_response is None:
                cmd_response = "Commands start with '/'. Use /help to list them."

            _print_ts(cmd_response)
    finally:
        unsubscribe()

    logger.info("Console connector finished.")
