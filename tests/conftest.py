# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from tasktracker.core.state import AppState
from tasktracker.tasks.task_storage import JsonFileStorage
from tasktracker.tasks.task_store import TaskStore

from .fakes import FakeClock, MemoryStorage, RecordingReminders


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment and any local .env.
    """
    return SimpleNamespace(
        app_name="TaskTracker",
        log_level="WARNING",
        data_dir=tmp_path,
        storage_backend="json",
        tasks_json_path=tmp_path / "tasks.json",
        tasks_db_path=tmp_path / "tasks.sqlite3",
        reminders_enabled=True,
        notifications_permitted=True,
        reminder_poll_seconds=0.01,
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture()
def store(storage: MemoryStorage, clock: FakeClock) -> TaskStore:
    return TaskStore(storage, clock=clock)


@pytest.fixture()
def reminders() -> RecordingReminders:
    return RecordingReminders()


@pytest.fixture()
def state(settings: SimpleNamespace, clock: FakeClock, reminders: RecordingReminders) -> AppState:
    """
    AppState wired with a real JSON file store and a recording reminder facility.
    """
    return AppState(
        settings=settings,
        task_store=TaskStore(JsonFileStorage(settings.tasks_json_path), clock=clock),
        reminders=reminders,
    )
