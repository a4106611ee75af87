# tests/test_task_codec.py

from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta, timezone

import pytest

from tasktracker.tasks.task_codec import DecodeError, decode_tasks, encode_tasks
from tasktracker.tasks.task_models import Task
from tasktracker.tasks.task_store import TaskStore

from .fakes import MemoryStorage


def test_round_trip_mixed_list() -> None:
    tasks = [
        Task(id="6F9619FF-8B86-D011-B42D-00C04FC964FF", title="Buy milk"),
        Task(id="b", title="Call Bob", is_completed=True, due_date=datetime(2026, 10, 20, 15, 30, tzinfo=UTC)),
        Task(id="c", title="Ünïcödé ✓", due_date=datetime(2026, 10, 21, 8, 0, 0, 123456, tzinfo=UTC)),
    ]
    assert decode_tasks(encode_tasks(tasks)) == tasks


def test_round_trip_empty_list() -> None:
    assert decode_tasks(encode_tasks([])) == []


def test_encoded_record_shape() -> None:
    due = datetime(2026, 10, 20, 17, 0, tzinfo=timezone(timedelta(hours=2)))
    raw = json.loads(encode_tasks([Task(id="x", title="t", due_date=due)]))
    assert raw == [
        {"id": "x", "title": "t", "isCompleted": False, "dueDate": "2026-10-20T15:00:00+00:00"},
    ]


def test_decode_tolerates_order_extra_and_missing_fields() -> None:
    payload = json.dumps(
        [
            {"title": "b", "extra": [1, 2], "id": "2", "isCompleted": True},
            {"id": "1", "title": "a"},
            {"dueDate": "2026-10-20T15:00:00Z", "id": "3", "title": "c", "priority": "high"},
        ]
    )
    tasks = decode_tasks(payload)
    assert [t.id for t in tasks] == ["2", "1", "3"]
    assert tasks[0].is_completed is True
    assert tasks[1].is_completed is False
    assert tasks[1].due_date is None
    assert tasks[2].due_date == datetime(2026, 10, 20, 15, 0, tzinfo=UTC)


def test_decode_skips_bad_records_and_duplicate_ids() -> None:
    payload = json.dumps(
        [
            {"id": "1", "title": "ok"},
            {"title": "no id"},
            {"id": "", "title": "blank id"},
            {"id": "2"},
            "not a record",
            {"id": "1", "title": "duplicate"},
            {"id": "3", "title": "bad date", "dueDate": "someday"},
        ]
    )
    tasks = decode_tasks(payload)
    assert [(t.id, t.title) for t in tasks] == [("1", "ok"), ("3", "bad date")]
    assert tasks[1].due_date is None


def test_decode_numeric_due_date_uses_2001_reference() -> None:
    payload = json.dumps([{"id": "1", "title": "legacy", "isCompleted": False, "dueDate": 86400}])
    (task,) = decode_tasks(payload)
    assert task.due_date == datetime(2001, 1, 2, tzinfo=UTC)


@pytest.mark.parametrize("payload", ["", "{", '{"tasks": []}', "42", "null"])
def test_decode_rejects_non_list_payloads(payload: str) -> None:
    with pytest.raises(DecodeError):
        decode_tasks(payload)


@pytest.mark.parametrize(
    "raw_due",
    ["1e12", "NaN", '"0001-01-01T00:00:00+05:00"', '"9999-12-31T23:59:59-05:00"'],
)
def test_decode_out_of_range_due_date_is_dropped(raw_due: str) -> None:
    payload = '[{"id": "a", "title": "x", "dueDate": %s}]' % raw_due
    (task,) = decode_tasks(payload)
    assert task.title == "x"
    assert task.due_date is None


def test_store_starts_with_out_of_range_due_date() -> None:
    store = TaskStore(MemoryStorage(b'[{"id": "a", "title": "x", "dueDate": 1e12}]'))
    assert [(t.id, t.due_date) for t in store.tasks] == [("a", None)]


@pytest.mark.parametrize("raw_done", ['"false"', '"true"', "1", "null", "[]"])
def test_decode_is_completed_requires_json_boolean(raw_done: str) -> None:
    payload = '[{"id": "a", "title": "x", "isCompleted": %s}]' % raw_done
    (task,) = decode_tasks(payload)
    assert task.is_completed is False
