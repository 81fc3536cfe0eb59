# tests/test_main.py

from __future__ import annotations

import logging

import pytest

from daybook.cli import main as cli_main
from daybook.cli.bootstrap import create_initial_state
from daybook.logging_setup import setup_logging
from daybook.tasks.errors import CorruptStore


@pytest.fixture()
def restore_root_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)


def test_setup_logging_writes_daybook_records_to_file(tmp_path, restore_root_logging) -> None:
    log_file = setup_logging(log_dir=tmp_path / "logs")

    logging.getLogger("daybook.tasks.lifecycle").info("hello from the engine")
    for h in logging.getLogger().handlers:
        h.flush()

    assert log_file == tmp_path / "logs" / "daybook.log"
    assert "hello from the engine" in log_file.read_text("utf-8")


def test_bootstrap_creates_data_dir_and_runs_reset(settings, clock) -> None:
    state = create_initial_state(settings=settings, clock=clock)

    assert settings.data_dir.is_dir()
    assert state.store.read_last_reset_date() == clock.today
    assert state.today() == clock.today


def test_main_exits_when_store_is_corrupt(settings, monkeypatch, restore_root_logging) -> None:
    def broken(**_kwargs):
        raise CorruptStore(settings.data_dir / "daily.json", "invalid JSON")

    def never_called(_state):
        raise AssertionError("console must not start")

    monkeypatch.setattr(cli_main, "get_settings", lambda: settings)
    monkeypatch.setattr(cli_main, "create_initial_state", broken)
    monkeypatch.setattr(cli_main, "run_console_loop", never_called)

    with pytest.raises(SystemExit) as exc:
        cli_main.main()
    assert exc.value.code == 1


def test_main_runs_console_with_initialized_state(settings, clock, monkeypatch, restore_root_logging) -> None:
    seen = []

    monkeypatch.setattr(cli_main, "get_settings", lambda: settings)
    monkeypatch.setattr(
        cli_main, "create_initial_state", lambda settings: create_initial_state(settings=settings, clock=clock)
    )
    monkeypatch.setattr(cli_main, "run_console_loop", seen.append)

    cli_main.main()

    assert len(seen) == 1
    assert seen[0].engine.active == ()
