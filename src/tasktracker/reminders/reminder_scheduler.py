# src/tasktracker/reminders/reminder_scheduler.py

from __future__ import annotations

"""
In-process reminder facility.

- LocalReminderScheduler keeps one pending reminder per task id.
- run_reminder_loop is a small polling loop that fires due reminders through a Notifier.
- start_reminders_in_background runs that loop in its own thread + event loop,
  because the console REPL blocks on input().
"""

import asyncio
import contextlib
import logging
import threading
from dataclasses import dataclass
from datetime import UTC, datetime

from ..core.ports import Notifier, ReminderFacility
from ..tasks.task_models import Task, as_utc

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class PendingReminder:
    task_id: str
    title: str
    fire_at: datetime


class LocalReminderScheduler:
    """
    Thread-safe table of pending one-shot reminders.

    Permission:
    - unknown until request_permission() is awaited (treated as granted meanwhile)
    - when denied, schedule_reminder() is accepted but does nothing
    """

    def __init__(self, *, permitted: bool = True) -> None:
        self._permitted_cfg = bool(permitted)
        self._granted: bool | None = None
        self._pending: dict[str, PendingReminder] = {}
        self._lock = threading.Lock()

    @property
    def granted(self) -> bool:
        return self._granted is not False

    async def request_permission(self) -> bool:
        if self._granted is None:
            self._granted = self._permitted_cfg
            if self._granted:
                logger.info("Reminder permission granted.")
            else:
                logger.warning("Reminder permission denied; reminders will not fire.")
        return self._granted

    def schedule_reminder(self, task_id: str, title: str, fire_at: datetime) -> None:
        if not self.granted:
            logger.debug("Reminder for task %s ignored (no permission)", task_id)
            return

        reminder = PendingReminder(task_id=task_id, title=title, fire_at=as_utc(fire_at))  # type: ignore[arg-type]
        with self._lock:
            replaced = task_id in self._pending
            self._pending[task_id] = reminder
        logger.info(
            "Reminder %s task=%s at %s",
            "rescheduled" if replaced else "scheduled",
            task_id,
            reminder.fire_at.isoformat(),
        )

    def cancel_reminder(self, task_id: str) -> None:
        with self._lock:
            removed = self._pending.pop(task_id, None)
        if removed is not None:
            logger.info("Reminder cancelled task=%s", task_id)

    def pending(self) -> list[PendingReminder]:
        with self._lock:
            return sorted(self._pending.values(), key=lambda r: r.fire_at)

    def pop_due(self, now: datetime | None = None) -> list[PendingReminder]:
        now_utc = as_utc(now) if now is not None else datetime.now(UTC)
        with self._lock:
            due = [r for r in self._pending.values() if r.fire_at <= now_utc]
            for r in due:
                del self._pending[r.task_id]
        due.sort(key=lambda r: r.fire_at)
        return due


def rebuild_reminders(
    tasks: list[Task], facility: ReminderFacility, now: datetime | None = None
) -> int:
    """
    Re-register reminders for loaded tasks (the in-process facility starts empty).

    Only open tasks with a due date in the future are scheduled.
    """
    now_utc = as_utc(now) if now is not None else datetime.now(UTC)
    n = 0
    for task in tasks:
        if task.is_completed or task.due_date is None or task.due_date <= now_utc:
            continue
        try:
            facility.schedule_reminder(task.id, task.title, task.due_date)
            n += 1
        except Exception:
            logger.exception("Failed to restore reminder task=%s", task.id)
    logger.info("Restored %d reminder(s)", n)
    return n


async def run_reminder_loop(
    scheduler: LocalReminderScheduler,
    notifier: Notifier,
    *,
    interval_seconds: float = 1.0,
    stop_event: asyncio.Event | None = None,
) -> None:
    """
    Simple polling loop.

    Every interval_seconds:
    - take the reminders that are due (they are removed from the table)
    - hand each one to notifier.notify(...)

    Notifier failures are logged and the loop keeps going.
    To stop the loop, set stop_event or cancel the coroutine/task.
    """
    sleep_s = max(0.01, float(interval_seconds))

    while stop_event is None or not stop_event.is_set():
        for reminder in scheduler.pop_due():
            try:
                notifier.notify(reminder)
                logger.info("Reminder fired task=%s", reminder.task_id)
            except Exception:
                logger.exception("notify failed task=%s", reminder.task_id)

        if stop_event is None:
            await asyncio.sleep(sleep_s)
            continue

        with contextlib.suppress(asyncio.TimeoutError):
            await asyncio.wait_for(stop_event.wait(), timeout=sleep_s)


@dataclass(slots=True)
class ReminderBackgroundRunner:
    thread: threading.Thread
    loop: asyncio.AbstractEventLoop
    stop_event: asyncio.Event

    def stop(self) -> None:
        try:
            self.loop.call_soon_threadsafe(self.stop_event.set)
        except Exception:
            logger.debug("Failed to signal reminder loop stop.", exc_info=True)

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)


def start_reminders_in_background(
    scheduler: LocalReminderScheduler,
    notifier: Notifier,
    *,
    interval_seconds: float = 1.0,
) -> ReminderBackgroundRunner | None:
    """
    Start the reminder loop in a background thread with its own event loop.
    """
    ready = threading.Event()
    holder: dict[str, object] = {}

    def runner() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        stop_event = asyncio.Event()

        holder["loop"] = loop
        holder["stop_event"] = stop_event
        ready.set()

        try:
            loop.run_until_complete(
                run_reminder_loop(
                    scheduler, notifier, interval_seconds=interval_seconds, stop_event=stop_event
                )
            )
        finally:
            with contextlib.suppress(Exception):
                loop.stop()
            with contextlib.suppress(Exception):
                loop.close()

    t = threading.Thread(target=runner, name="reminders", daemon=True)
    t.start()

    ready.wait(timeout=5.0)
    loop = holder.get("loop")
    stop_event = holder.get("stop_event")

    if not isinstance(loop, asyncio.AbstractEventLoop) or not isinstance(stop_event, asyncio.Event):
        logger.error("Reminder thread did not initialize properly.")
        return None

    logger.info("Reminder background thread started.")
    return ReminderBackgroundRunner(thread=t, loop=loop, stop_event=stop_event)
