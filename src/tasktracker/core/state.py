# src/tasktracker/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..core.ports import ReminderFacility
from ..tasks.task_models import Creating, FormMode
from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    # Settings object (real Settings or a SimpleNamespace in tests).
    settings: Any

    task_store: TaskStore
    reminders: ReminderFacility | None = None

    # Presentation state: what a plain line of input does (add vs edit).
    mode: FormMode = field(default_factory=Creating)
