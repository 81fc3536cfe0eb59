# src/daybook/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local data directory exists,
- wires the JSON store and the lifecycle engine into AppState,
- runs the engine's startup pass (load + daily reset).
"""

from __future__ import annotations

import logging
from datetime import date

from ..config import get_settings
from ..core.ports import Clock
from ..core.state import AppState
from ..tasks.lifecycle import TaskEngine
from ..tasks.task_store import JsonTaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None, clock: Clock = date.today, initialize: bool = True) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings and the clock injectable makes the app easier to test and
    avoids hidden global config reads. If settings is None, falls back to get_settings().
    Store errors raised by TaskEngine.initialize() propagate to the caller.
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = JsonTaskStore(settings.data_dir)
    engine = TaskEngine(store, clock=clock, date_formats=settings.date_formats)

    state = AppState(settings=settings, store=store, engine=engine, clock=clock)
    if initialize:
        engine.initialize()
    return state
