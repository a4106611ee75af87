# src/tasktracker/tasks/task_codec.py

"""
JSON wire format for the persisted task list.

Layout: a JSON array of records, in insertion order:

    {"id": "...", "title": "...", "isCompleted": false, "dueDate": "2026-10-20T15:00:00+00:00"}

Decoding is lenient: unknown fields are ignored, isCompleted/dueDate may be missing,
and records without a usable id/title are skipped instead of failing the whole list.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime, timedelta
from typing import Any

from .task_models import Task, as_utc

logger = logging.getLogger(__name__)

# Older builds wrote dueDate as seconds since this reference date.
REFERENCE_DATE = datetime(2001, 1, 1, tzinfo=UTC)


class DecodeError(ValueError):
    """The payload is not a task list at all (bad JSON / wrong top-level type)."""


def _date_to_str(value: datetime | None) -> str | None:
    if value is None:
        return None
    return as_utc(value).isoformat()  # type: ignore[union-attr]


def _str_to_date(raw: Any) -> datetime | None:
    if raw is None:
        return None
    # bool is an int subclass; never a date.
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        try:
            return REFERENCE_DATE + timedelta(seconds=float(raw))
        except (OverflowError, ValueError):
            return None
    if isinstance(raw, str) and raw.strip():
        s = raw.strip()
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        try:
            return as_utc(datetime.fromisoformat(s))
        except (OverflowError, ValueError):
            return None
    return None


def task_to_record(task: Task) -> dict[str, Any]:
    return {
        "id": task.id,
        "title": task.title,
        "isCompleted": bool(task.is_completed),
        "dueDate": _date_to_str(task.due_date),
    }


def record_to_task(rec: Any) -> Task | None:
    if not isinstance(rec, dict):
        return None

    task_id = rec.get("id")
    title = rec.get("title")
    if not isinstance(task_id, str) or not task_id.strip():
        return None
    if not isinstance(title, str):
        return None

    raw_due = rec.get("dueDate")
    due_date = _str_to_date(raw_due)
    if raw_due is not None and due_date is None:
        logger.warning("Ignoring unreadable dueDate=%r for task id=%s", raw_due, task_id)

    done = rec.get("isCompleted")
    if not isinstance(done, bool):
        done = False

    return Task(
        id=task_id,
        title=title,
        is_completed=done,
        due_date=due_date,
    )


def encode_tasks(tasks: list[Task]) -> bytes:
    payload = [task_to_record(t) for t in tasks]
    return json.dumps(payload, ensure_ascii=False, indent=2).encode("utf-8")


def decode_tasks(data: bytes | str) -> list[Task]:
    """
    Decode a persisted task list.

    Raises DecodeError when the payload as a whole is unusable; individual bad
    records are dropped (and logged). Duplicate ids keep the first occurrence.
    """
    try:
        raw = json.loads(data)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DecodeError(f"invalid task list JSON: {e}") from e

    if not isinstance(raw, list):
        raise DecodeError(f"task list must be a JSON array, got {type(raw).__name__}")

    out: list[Task] = []
    seen: set[str] = set()
    for i, rec in enumerate(raw):
        task = record_to_task(rec)
        if task is None:
            logger.warning("Skipping malformed task record #%d", i)
            continue
        if task.id in seen:
            logger.warning("Skipping duplicate task id=%s (record #%d)", task.id, i)
            continue
        seen.add(task.id)
        out.append(task)
    return out
