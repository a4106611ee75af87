# src/tasktracker/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the storage backend, task store and reminder facility into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import TaskStorage
from ..core.state import AppState
from ..reminders.reminder_scheduler import LocalReminderScheduler
from ..tasks.task_storage import JsonFileStorage, SqliteStorage
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_json_path.parent.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)


def build_storage(settings) -> TaskStorage:
    backend = str(getattr(settings, "storage_backend", "json")).lower()
    if backend == "sqlite":
        return SqliteStorage(settings.tasks_db_path)
    return JsonFileStorage(settings.tasks_json_path)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    reminders = None
    if getattr(settings, "reminders_enabled", True):
        reminders = LocalReminderScheduler(
            permitted=getattr(settings, "notifications_permitted", True)
        )

    state = AppState(
        settings=settings,
        task_store=TaskStore(build_storage(settings)),
        reminders=reminders,
    )
    logger.info(
        "State ready storage=%s reminders=%s",
        getattr(settings, "storage_backend", "json"),
        "on" if reminders is not None else "off",
    )
    return state
