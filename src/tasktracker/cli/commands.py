# src/tasktracker/cli/commands.py

from __future__ import annotations

import inspect
import logging
import re
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any, cast

from ..core.state import AppState
from ..tasks import task_api
from ..tasks.task_models import Creating, Editing, Task
from ..tasks.task_store import UNSET

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

_RELATIVE_RE = re.compile(r"^\+(\d+)\s*([mhdw])$", re.IGNORECASE)
_UNITS = {"m": "minutes", "h": "hours", "d": "days", "w": "weeks"}
DUE_SEPARATOR = " @ "


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  Plain text adds a task (or replaces the title while editing).")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- parsing / formatting helpers ----


def parse_due(text: str, now: datetime | None = None) -> datetime:
    """
    Parse a due date typed by the user.

    Accepted:
    - relative: +30m, +2h, +1d, +1w
    - ISO-8601: 2026-10-20T15:00, 2026-10-20 15:00, 2026-10-20 (naive = local time)
    """
    s = (text or "").strip()
    m = _RELATIVE_RE.match(s)
    try:
        if m:
            base = now if now is not None else datetime.now(UTC)
            return base + timedelta(**{_UNITS[m.group(2).lower()]: int(m.group(1))})
        return datetime.fromisoformat(s)
    except (OverflowError, ValueError):
        raise ValueError(f"Cannot read due date {text!r}. Use +30m / +2h / +1d or 2026-10-20T15:00.") from None


def split_title_and_due(text: str) -> tuple[str, datetime | None]:
    """'Call Bob @ +1h' -> ('Call Bob', <datetime>). No ' @ ' -> (text, None)."""
    if DUE_SEPARATOR not in text:
        return text, None
    title, _, when = text.rpartition(DUE_SEPARATOR)
    return title, parse_due(when)


def _fmt_due(value: datetime) -> str:
    return value.astimezone().strftime("%Y-%m-%d %H:%M")


def format_task_line(state: AppState, n: int, task: Task) -> str:
    box = "[x]" if task.is_completed else "[ ]"
    line = f"{n:>2}. {box} {task.title}"
    if task.due_date is not None:
        line += f"  (due {_fmt_due(task.due_date)})"
        if not task.is_completed and state.task_store.is_overdue(task):
            line += "  OVERDUE"
    return line


def _resolve(state: AppState, arg: str) -> Task | None:
    """Map a 1-based position in the display order to a task."""
    try:
        n = int(arg)
    except ValueError:
        return None
    view = state.task_store.ordered_view()
    if 1 <= n <= len(view):
        return view[n - 1]
    return None


# ---- commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    view = state.task_store.ordered_view()
    if not view:
        return "No tasks yet. Type a title to add one."
    lines = ["Tasks:"]
    for i, task in enumerate(view, start=1):
        lines.append(format_task_line(state, i, task))
    return "\n".join(lines)


def cmd_add(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /add <title> [@ <when>]"
    try:
        title, due = split_title_and_due(" ".join(args))
    except ValueError as e:
        return str(e)
    task = task_api.add_task(state, title, due)
    return f"Added: {task.title}"


def cmd_done(state: AppState, args: list[str]) -> str:
    task = _resolve(state, args[0]) if args else None
    if task is None:
        return "Usage: /done <n> (see /list)"
    task_api.toggle_task(state, task.id)
    return f"{'Done' if task.is_completed else 'Reopened'}: {task.title}"


def cmd_edit(state: AppState, args: list[str]) -> str:
    task = _resolve(state, args[0]) if args else None
    if task is None:
        return "Usage: /edit <n> (see /list)"
    state.mode = Editing(task.id)
    return f"Editing '{task.title}'. Type the new title (optionally ' @ <when>'), or /cancel."


def cmd_cancel(state: AppState, args: list[str]) -> str:
    if isinstance(state.mode, Creating):
        return "Nothing to cancel."
    state.mode = Creating()
    return "Edit cancelled."


def cmd_due(state: AppState, args: list[str]) -> str:
    task = _resolve(state, args[0]) if args else None
    if task is None or len(args) < 2:
        return "Usage: /due <n> <when|none>"
    when = " ".join(args[1:])
    due: Any
    if when.lower() in ("none", "-", "off"):
        due = None
    else:
        try:
            due = parse_due(when)
        except ValueError as e:
            return str(e)
    updated = task_api.update_task(state, task.id, due_date=due)
    if updated.due_date is None:
        return f"Due date cleared: {updated.title}"
    return f"Due {_fmt_due(updated.due_date)}: {updated.title}"


def cmd_del(state: AppState, args: list[str]) -> str:
    task = _resolve(state, args[0]) if args else None
    if task is None:
        return "Usage: /del <n> (see /list)"
    task_api.delete_task(state, task.id)
    if isinstance(state.mode, Editing) and state.mode.task_id == task.id:
        state.mode = Creating()
    return f"Deleted: {task.title}"


def cmd_clear(
    state: AppState,
    args: list[str],
    emit: CommandEmitter | None = None,
) -> str:
    """
    /clear        -> ask for confirmation
    /clear yes    -> remove every task
    """
    n = len(state.task_store)
    if not args or args[0].lower() not in ("yes", "y"):
        return f"This removes all {n} task(s). Use /clear yes to confirm."
    if emit and n:
        emit(f"Removing {n} task(s)...")
    task_api.clear_tasks(state)
    state.mode = Creating()
    return "All tasks removed."


def cmd_status(state: AppState, args: list[str]) -> str:
    store = state.task_store
    tasks = store.tasks
    done = sum(1 for t in tasks if t.is_completed)
    overdue = sum(1 for t in tasks if not t.is_completed and store.is_overdue(t))
    mode = "editing" if isinstance(state.mode, Editing) else "creating"
    backend = getattr(state.settings, "storage_backend", "json")

    pending_fn = getattr(state.reminders, "pending", None)
    if state.reminders is None:
        reminders = "OFF"
    elif callable(pending_fn):
        reminders = f"{len(pending_fn())} pending"
    else:
        reminders = "ON"

    return (
        "Status:\n"
        f"  Tasks: {len(tasks)} ({done} done, {overdue} overdue)\n"
        f"  Storage: {backend}\n"
        f"  Reminders: {reminders}\n"
        f"  Mode: {mode}"
    )


def submit_line(state: AppState, text: str) -> str:
    """Plain (non-command) input: add a task, or finish the current edit."""
    title, due = split_title_and_due(text)
    mode = state.mode
    task = task_api.submit_form(state, mode, title, UNSET if due is None else due)
    state.mode = Creating()
    if isinstance(mode, Editing):
        return f"Updated: {task.title}"
    return f"Added: {task.title}"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show tasks (due-dated first).", aliases=["ls", "l"])
registry.register("add", cmd_add, help_text="Add a task: /add <title> [@ <when>].", aliases=["a"])
registry.register("done", cmd_done, help_text="Toggle completion: /done <n>.", aliases=["x"])
registry.register("edit", cmd_edit, help_text="Edit a task title: /edit <n>, then type it.")
registry.register("cancel", cmd_cancel, help_text="Leave edit mode.")
registry.register("due", cmd_due, help_text="Set/clear due date: /due <n> <+2h|2026-10-20T15:00|none>.")
registry.register("del", cmd_del, help_text="Delete a task: /del <n>.", aliases=["rm"])
registry.register("clear", cmd_clear, help_text="Remove all tasks: /clear yes.")
registry.register("status", cmd_status, help_text="Show counts, storage and reminder state.")
