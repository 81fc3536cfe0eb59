# src/daybook/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from ..tasks.lifecycle import TaskEngine
from .ports import Clock, TaskRepo


@dataclass
class AppState:
    # Settings, or any object exposing the same attributes.
    settings: object

    store: TaskRepo
    engine: TaskEngine
    clock: Clock = field(default=date.today)

    def today(self) -> date:
        return self.clock()
