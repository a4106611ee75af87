# tests/fakes.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta


class MemoryStorage:
    """
    In-memory TaskStorage used for store unit tests.

    - Captures every save for assertions
    - load_raw returns the last saved payload (or the initial one)
    """

    def __init__(self, initial: bytes | None = None) -> None:
        self.data = initial
        self.saves: list[bytes] = []
        self.fail_saves = False

    def load_raw(self) -> bytes | None:
        return self.data

    def save_raw(self, data: bytes) -> None:
        if self.fail_saves:
            raise OSError("disk full")
        self.saves.append(data)
        self.data = data


class BrokenStorage:
    """Storage whose reads always fail."""

    def load_raw(self) -> bytes | None:
        raise OSError("disk on fire")

    def save_raw(self, data: bytes) -> None:
        raise OSError("disk on fire")


@dataclass(slots=True)
class RecordingReminders:
    """
    Fake ReminderFacility: records schedule/cancel calls in order.
    """

    calls: list[tuple] = field(default_factory=list)
    fail: bool = False

    def schedule_reminder(self, task_id: str, title: str, fire_at: datetime) -> None:
        if self.fail:
            raise RuntimeError("notification center unavailable")
        self.calls.append(("schedule", task_id, title, fire_at))

    def cancel_reminder(self, task_id: str) -> None:
        if self.fail:
            raise RuntimeError("notification center unavailable")
        self.calls.append(("cancel", task_id))

    async def request_permission(self) -> bool:
        return True

    def cancelled(self) -> list[str]:
        return [c[1] for c in self.calls if c[0] == "cancel"]

    def scheduled(self) -> list[str]:
        return [c[1] for c in self.calls if c[0] == "schedule"]


@dataclass(slots=True)
class RecordingNotifier:
    fired: list = field(default_factory=list)
    fail_first: bool = False

    def notify(self, reminder) -> None:
        if self.fail_first and not self.fired:
            self.fail_first = False
            raise RuntimeError("notify boom")
        self.fired.append(reminder)


class FakeClock:
    """Settable clock; starts at a fixed instant."""

    def __init__(self, now: datetime | None = None) -> None:
        self.now = now or datetime(2026, 10, 19, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)
