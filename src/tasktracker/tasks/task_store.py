# src/tasktracker/tasks/task_store.py

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import replace
from datetime import UTC, datetime
from typing import Any, Final

from ..core.ports import TaskStorage
from .task_codec import DecodeError, decode_tasks, encode_tasks
from .task_models import (
    CancelReminder,
    InvalidInput,
    Mutation,
    NotFound,
    ReminderEffect,
    ScheduleReminder,
    Task,
    as_utc,
)

logger = logging.getLogger(__name__)


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"


UNSET: Final[Any] = _Unset()
# Marker for "field not supplied" in update(); None means "clear the due date".


def _utc_now() -> datetime:
    return datetime.now(UTC)


def display_order_key(item: tuple[int, Task]) -> tuple[int, datetime | int, int]:
    """
    Total order for the display view, applied to (insertion_index, task) pairs:
    dated tasks first (ascending due date), undated tasks after, ties by insertion.
    """
    index, task = item
    if task.due_date is not None:
        return (0, task.due_date, index)
    return (1, 0, index)


def is_overdue(task: Task, now: datetime | None = None) -> bool:
    if task.due_date is None:
        return False
    now_utc = as_utc(now) if now is not None else _utc_now()
    return task.due_date < now_utc


class TaskStore:
    """
    In-memory task list with write-through persistence.

    - The list order is insertion order; that is what gets persisted.
    - Every mutating call flushes the whole list before it returns.
    - Mutations never call the reminder facility; they return the reminder
      effects inside a Mutation and the caller dispatches them.
    - Ids that are not in the store are a silent no-op, except for update().
    """

    def __init__(
        self,
        storage: TaskStorage,
        *,
        clock: Callable[[], datetime] = _utc_now,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ) -> None:
        self._storage = storage
        self._clock = clock
        self._new_id = id_factory
        self._tasks: list[Task] = self.load()
        logger.info("TaskStore ready total=%d", len(self._tasks))

    # ---- low-level helpers ----

    def _now(self) -> datetime:
        return as_utc(self._clock())  # type: ignore[return-value]

    def _index_of(self, task_id: str) -> int | None:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        return None

    def _persist(self, tasks: list[Task]) -> None:
        self._storage.save_raw(encode_tasks(tasks))
        logger.debug("Persisted %d task(s)", len(tasks))

    def _schedule_effect(self, task: Task) -> ScheduleReminder | None:
        if task.due_date is None or task.due_date <= self._now():
            return None
        return ScheduleReminder(task_id=task.id, title=task.title, fire_at=task.due_date)

    @staticmethod
    def _clean_title(title: Any) -> str:
        if not isinstance(title, str) or not title.strip():
            raise InvalidInput("title must not be empty")
        return title.strip()

    # ---- reads ----

    def load(self) -> list[Task]:
        """
        Read the persisted list. Missing or malformed data gives an empty list.
        """
        try:
            raw = self._storage.load_raw()
        except Exception:
            logger.exception("Task storage read failed; starting empty.")
            return []

        if not raw:
            return []

        try:
            return decode_tasks(raw)
        except DecodeError as e:
            logger.warning("Persisted task list is unreadable (%s); starting empty.", e)
            return []

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    def get(self, task_id: str) -> Task | None:
        idx = self._index_of(task_id)
        return self._tasks[idx] if idx is not None else None

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task_id: object) -> bool:
        return isinstance(task_id, str) and self._index_of(task_id) is not None

    def ordered_view(self) -> list[Task]:
        ordered = sorted(enumerate(self._tasks), key=display_order_key)
        return [t for _, t in ordered]

    def is_overdue(self, task: Task) -> bool:
        return is_overdue(task, self._now())

    # ---- mutations ----
    # Each mutation saves the candidate list first and only then applies the
    # change in memory, so a failed write leaves the store untouched.

    def add(self, title: str, due_date: datetime | None = None) -> Mutation[Task]:
        clean = self._clean_title(title)
        task = Task(id=self._new_id(), title=clean, is_completed=False, due_date=as_utc(due_date))

        self._persist([*self._tasks, task])
        self._tasks.append(task)
        logger.debug("Task added id=%s due=%s", task.id, task.due_date)

        effect = self._schedule_effect(task)
        return Mutation(task, (effect,) if effect else ())

    def toggle_completion(self, task_id: str) -> Mutation[None]:
        task = self.get(task_id)
        if task is None:
            logger.debug("toggle_completion: no task id=%s", task_id)
            self._persist(self._tasks)
            return Mutation(None)

        flipped = replace(task, is_completed=not task.is_completed)
        self._persist([flipped if t is task else t for t in self._tasks])
        task.is_completed = flipped.is_completed
        logger.debug("Task id=%s completed=%s", task_id, task.is_completed)
        return Mutation(None)

    def update(
        self,
        task_id: str,
        *,
        title: Any = UNSET,
        due_date: Any = UNSET,
    ) -> Mutation[Task]:
        task = self.get(task_id)
        if task is None:
            raise NotFound(task_id)

        new_title = task.title if title is UNSET else self._clean_title(title)
        new_due = task.due_date if due_date is UNSET else as_utc(due_date)

        due_changed = new_due != task.due_date
        title_changed = new_title != task.title

        edited = replace(task, title=new_title, due_date=new_due)
        self._persist([edited if t is task else t for t in self._tasks])
        task.title = new_title
        task.due_date = new_due

        effects: list[ReminderEffect] = []
        schedule = self._schedule_effect(task)
        if due_changed:
            effects.append(schedule if schedule else CancelReminder(task.id))
        elif title_changed and schedule:
            effects.append(schedule)

        logger.debug(
            "Task updated id=%s title_changed=%s due_changed=%s", task.id, title_changed, due_changed
        )
        return Mutation(task, tuple(effects))

    def delete(self, task_id: str) -> Mutation[None]:
        idx = self._index_of(task_id)
        if idx is None:
            self._persist(self._tasks)
            return Mutation(None)

        self._persist(self._tasks[:idx] + self._tasks[idx + 1 :])
        del self._tasks[idx]
        logger.debug("Task deleted id=%s", task_id)
        return Mutation(None, (CancelReminder(task_id),))

    def clear_all(self) -> Mutation[None]:
        effects = tuple(CancelReminder(t.id) for t in self._tasks if t.due_date is not None)
        n = len(self._tasks)
        self._persist([])
        self._tasks.clear()
        logger.info("Cleared %d task(s), %d reminder(s) cancelled", n, len(effects))
        return Mutation(None, effects)
