# src/tasktracker/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The store and the task API depend on Protocols instead of concrete implementations.
This keeps storage backends and reminder delivery swappable and makes testing easier.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Awaitable, Protocol

if TYPE_CHECKING:
    from ..reminders.reminder_scheduler import PendingReminder


class TaskStorage(Protocol):
    """Raw persistence for the serialized task list."""

    def load_raw(self) -> bytes | None: ...
    def save_raw(self, data: bytes) -> None: ...


class ReminderFacility(Protocol):
    """
    Where one-shot reminders live.

    - schedule_reminder is idempotent per task id (a new call supersedes the old one)
    - cancel_reminder is a no-op for unknown ids
    - request_permission is awaited once at startup; when denied, schedule calls
      are accepted but have no observable effect
    """

    def schedule_reminder(self, task_id: str, title: str, fire_at: datetime) -> None: ...
    def cancel_reminder(self, task_id: str) -> None: ...
    def request_permission(self) -> Awaitable[bool]: ...


class Notifier(Protocol):
    """Delivers a fired reminder to the user (console, desktop, ...)."""

    def notify(self, reminder: PendingReminder) -> None: ...
