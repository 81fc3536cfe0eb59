# src/daybook/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState (which loads tasks and runs the daily
reset), then hands control to the console REPL.
"""

from __future__ import annotations

import logging
import sys

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging
from ..tasks.errors import DaybookError

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    file_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.log_dir, file_level=file_level)

    logger.info("Starting %s (data_dir=%s)...", settings.app_name, settings.data_dir)

    try:
        state = create_initial_state(settings=settings)
    except DaybookError as e:
        # No partial recovery: the user has to fix or move the broken file.
        logger.error("Cannot load tasks: %s", e)
        print(f"Cannot load tasks: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        run_console_loop(state)
    finally:
        logger.info("Bye.")


if __name__ == "__main__":
    main()
