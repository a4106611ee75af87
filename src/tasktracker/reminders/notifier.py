# src/tasktracker/reminders/notifier.py

from __future__ import annotations

from datetime import datetime

from .reminder_scheduler import PendingReminder


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


class ConsoleNotifier:
    """Prints fired reminders into the console (interleaves with the REPL prompt)."""

    def notify(self, reminder: PendingReminder) -> None:
        print(f"\n[{_ts_local()}] [REMINDER] {reminder.title}", flush=True)
