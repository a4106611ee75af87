# src/tasktracker/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Generic, TypeVar

T = TypeVar("T")


class TaskTrackerError(Exception):
    """Base class for errors the store reports to its caller."""


class InvalidInput(TaskTrackerError, ValueError):
    """Empty or whitespace-only title on create/update."""


class NotFound(TaskTrackerError, LookupError):
    """update() targeted an id that is not in the store."""

    def __init__(self, task_id: str) -> None:
        super().__init__(f"task not found: {task_id}")
        self.task_id = task_id


@dataclass(slots=True)
class Task:
    """
    One to-do item.

    Notes:
    - id is assigned once by the store and never changes.
    - due_date is always timezone-aware (UTC) once it is inside the store.
    """

    id: str
    title: str
    is_completed: bool = False
    due_date: datetime | None = None


def as_utc(value: datetime | None) -> datetime | None:
    """Normalize a datetime to aware UTC. Naive values are read as local time."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.astimezone()
    return value.astimezone(UTC)


# ---- reminder effects ----


@dataclass(slots=True, frozen=True)
class ScheduleReminder:
    task_id: str
    title: str
    fire_at: datetime


@dataclass(slots=True, frozen=True)
class CancelReminder:
    task_id: str


ReminderEffect = ScheduleReminder | CancelReminder


@dataclass(slots=True, frozen=True)
class Mutation(Generic[T]):
    """
    Result of a mutating store operation.

    The store never talks to the reminder facility directly; it returns the
    schedule/cancel requests here and the caller dispatches them.
    """

    value: T
    effects: tuple[ReminderEffect, ...] = field(default_factory=tuple)


# ---- form mode (create vs edit) ----


@dataclass(slots=True, frozen=True)
class Creating:
    pass


@dataclass(slots=True, frozen=True)
class Editing:
    task_id: str


FormMode = Creating | Editing
