# src/tasktracker/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, asks for reminder permission once,
restores pending reminders, then runs:
- the reminder loop in a background thread (optional),
- the console REPL in the main thread.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging
from ..reminders.notifier import ConsoleNotifier
from ..reminders.reminder_scheduler import (
    LocalReminderScheduler,
    ReminderBackgroundRunner,
    rebuild_reminders,
    start_reminders_in_background,
)

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "WARNING")).upper()
    console_level = getattr(logging, level_name, logging.WARNING)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)

    runner: ReminderBackgroundRunner | None = None
    scheduler = state.reminders
    if isinstance(scheduler, LocalReminderScheduler):
        if asyncio.run(scheduler.request_permission()):
            rebuild_reminders(state.task_store.tasks, scheduler)
        runner = start_reminders_in_background(
            scheduler,
            ConsoleNotifier(),
            interval_seconds=settings.reminder_poll_seconds,
        )

    try:
        run_console_loop(state)
    finally:
        if runner is not None:
            runner.stop()
            runner.join(timeout=5.0)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
