# tests/test_commands.py

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from tasktracker.cli.commands import CommandRegistry, parse_due, split_title_and_due
from tasktracker.connectors.console_connector import handle_line
from tasktracker.core.state import AppState
from tasktracker.tasks.task_models import Creating, Editing

from .fakes import RecordingReminders


def test_command_registry_routes_2_and_3_params(state: AppState) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}

    def h2(state, args):
        called["h2"] += 1
        return "h2"

    def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b", aliases=["bee"])

    assert reg.handle(state, "/a x") == "h2"
    assert reg.handle(state, "/BEE y", emit=lambda _: None) == "h3"
    assert called == {"h2": 1, "h3": 1}


def test_command_registry_unknown_and_non_command(state: AppState) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")
    assert "Empty command" in (reg.handle(state, "/") or "")


def test_parse_due_relative_and_iso() -> None:
    base = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)
    assert parse_due("+30m", base) == base + timedelta(minutes=30)
    assert parse_due("+2H", base) == base + timedelta(hours=2)
    assert parse_due("+1d", base) == base + timedelta(days=1)
    assert parse_due("+1w", base) == base + timedelta(weeks=1)
    assert parse_due("2030-01-02T03:04") == datetime(2030, 1, 2, 3, 4)
    with pytest.raises(ValueError):
        parse_due("tomorrow-ish")


def test_parse_due_out_of_range_is_a_value_error() -> None:
    base = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)
    with pytest.raises(ValueError, match="Cannot read due date"):
        parse_due("+99999999999d", base)
    with pytest.raises(ValueError, match="Cannot read due date"):
        parse_due("+999999999999w", base)


def test_huge_relative_due_is_reported_not_crashed(state: AppState) -> None:
    handle_line(state, "Buy milk")

    reply = handle_line(state, "/due 1 +99999999999d") or ""
    assert reply.startswith("Cannot read due date")
    assert state.task_store.tasks[0].due_date is None

    reply = handle_line(state, "Call Bob @ +99999999999d") or ""
    assert reply.startswith("Error: Cannot read due date")
    assert len(state.task_store) == 1


def test_split_title_and_due() -> None:
    assert split_title_and_due("Buy milk") == ("Buy milk", None)
    title, due = split_title_and_due("Email a@b.c @ 2030-01-01T09:00")
    assert title == "Email a@b.c"
    assert due == datetime(2030, 1, 1, 9, 0)


def test_plain_text_adds_and_list_orders_by_due(state: AppState) -> None:
    assert handle_line(state, "Buy milk") == "Added: Buy milk"
    assert handle_line(state, "/add Call Bob @ 2030-01-01T09:00") == "Added: Call Bob"

    listing = handle_line(state, "/list") or ""
    lines = listing.splitlines()
    assert lines[0] == "Tasks:"
    assert "Call Bob" in lines[1] and "(due " in lines[1]
    assert lines[2] == " 2. [ ] Buy milk"


def test_empty_title_is_reported_not_raised(state: AppState) -> None:
    assert (handle_line(state, "/add   ") or "").startswith("Usage")
    assert (handle_line(state, "   @ +1h") or "").startswith("Error:")
    assert len(state.task_store) == 0


def test_edit_mode_round_trip(state: AppState) -> None:
    handle_line(state, "Draft")
    reply = handle_line(state, "/edit 1") or ""
    assert reply.startswith("Editing 'Draft'")
    assert isinstance(state.mode, Editing)

    assert handle_line(state, "Final") == "Updated: Final"
    assert isinstance(state.mode, Creating)
    assert [t.title for t in state.task_store.tasks] == ["Final"]

    handle_line(state, "/edit 1")
    assert handle_line(state, "/cancel") == "Edit cancelled."
    assert handle_line(state, "/cancel") == "Nothing to cancel."


def test_done_due_del_and_clear(state: AppState, reminders: RecordingReminders) -> None:
    handle_line(state, "a")
    handle_line(state, "b")

    assert handle_line(state, "/done 2") == "Done: b"
    assert handle_line(state, "/done 2") == "Reopened: b"

    assert (handle_line(state, "/due 1 2020-01-01T09:00") or "").startswith("Due ")
    assert "OVERDUE" in (handle_line(state, "/list") or "")
    assert (handle_line(state, "/due 1 none") or "").startswith("Due date cleared")

    assert handle_line(state, "/del 9") == "Usage: /del <n> (see /list)"
    assert handle_line(state, "/del 1") == "Deleted: a"

    assert "/clear yes" in (handle_line(state, "/clear") or "")
    assert len(state.task_store) == 1
    assert handle_line(state, "/clear yes") == "All tasks removed."
    assert len(state.task_store) == 0
    assert "cancel" in [c[0] for c in reminders.calls]


def test_status_and_help(state: AppState) -> None:
    handle_line(state, "a @ 2020-01-01T00:00")
    status = handle_line(state, "/status") or ""
    assert "Tasks: 1 (0 done, 1 overdue)" in status
    assert "Storage: json" in status
    assert "/add" in (handle_line(state, "/help") or "")
