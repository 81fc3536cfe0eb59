# tests/conftest.py

from __future__ import annotations

from datetime import date
from pathlib import Path
from types import SimpleNamespace

import pytest

from daybook.cli.bootstrap import create_initial_state
from daybook.core.state import AppState
from daybook.tasks.lifecycle import TaskEngine
from daybook.tasks.task_store import JsonTaskStore

from .fakes import FakeClock, InMemoryTaskRepo


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="daybook-test",
        log_level="DEBUG",
        log_dir=tmp_path / "logs",
        data_dir=tmp_path / "data",
        date_formats=["%Y-%m-%d", "%d/%m/%Y"],
        display_date_format="%d/%m/%Y",
        confirm_delete=True,
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(date(2024, 5, 1))


@pytest.fixture()
def store(settings: SimpleNamespace) -> JsonTaskStore:
    return JsonTaskStore(settings.data_dir)


@pytest.fixture()
def repo() -> InMemoryTaskRepo:
    return InMemoryTaskRepo()


@pytest.fixture()
def engine(repo: InMemoryTaskRepo, clock: FakeClock) -> TaskEngine:
    eng = TaskEngine(repo, clock=clock)
    eng.initialize()
    return eng


@pytest.fixture()
def state(settings: SimpleNamespace, clock: FakeClock) -> AppState:
    """
    AppState wired with the real JSON store and a fake clock.

    NOTE: We keep the real file store here because its on-disk format is part
    of what we want to test.
    """
    return create_initial_state(settings=settings, clock=clock)
