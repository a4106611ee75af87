# src/tasktracker/tasks/task_api.py

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from ..core.state import AppState
from ..reminders.dispatcher import dispatch_effects
from .task_models import Creating, Editing, FormMode, Mutation, Task
from .task_store import UNSET

logger = logging.getLogger(__name__)

# Convenience helpers used by connectors: run one store mutation and hand its
# reminder effects to state.reminders. Store errors (InvalidInput/NotFound) propagate.


def _apply(state: AppState, mutation: Mutation[Any]) -> Any:
    if mutation.effects:
        dispatch_effects(mutation.effects, state.reminders)
    return mutation.value


def add_task(state: AppState, title: str, due_date: datetime | None = None) -> Task:
    return _apply(state, state.task_store.add(title, due_date))


def toggle_task(state: AppState, task_id: str) -> None:
    _apply(state, state.task_store.toggle_completion(task_id))


def update_task(state: AppState, task_id: str, *, title: Any = UNSET, due_date: Any = UNSET) -> Task:
    return _apply(state, state.task_store.update(task_id, title=title, due_date=due_date))


def delete_task(state: AppState, task_id: str) -> None:
    _apply(state, state.task_store.delete(task_id))


def clear_tasks(state: AppState) -> None:
    _apply(state, state.task_store.clear_all())


def submit_form(state: AppState, mode: FormMode, title: str, due_date: Any = UNSET) -> Task:
    """
    Submit the add/edit form.

    Creating      -> add a new task (UNSET due date means no deadline)
    Editing(id)   -> update that task; UNSET leaves its due date alone
    """
    if isinstance(mode, Editing):
        task = update_task(state, mode.task_id, title=title, due_date=due_date)
        logger.info("Edited task id=%s", task.id)
        return task

    if not isinstance(mode, Creating):
        raise TypeError(f"unknown form mode: {mode!r}")

    task = add_task(state, title, None if due_date is UNSET else due_date)
    logger.info("Created task id=%s", task.id)
    return task
