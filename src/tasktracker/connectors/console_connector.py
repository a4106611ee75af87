# src/tasktracker/connectors/console_connector.py

from __future__ import annotations

import logging
from datetime import datetime

from ..cli.commands import cmd_list, submit_line
from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..tasks.task_models import Editing, TaskTrackerError

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def _prompt(state: AppState) -> str:
    return "edit> " if isinstance(state.mode, Editing) else "> "


def handle_line(state: AppState, user_input: str) -> str | None:
    """
    One REPL step: slash command or plain text. Returns the text to show.

    Store errors (empty title, vanished task) and bad due dates come back as
    messages; anything else is logged and reported as an internal error.
    """
    def emit(text: str) -> None:
        print(f"[{_ts_local()}] {text}", flush=True)

    try:
        reply = command_registry.handle(state, user_input, emit=emit)
        if reply is None:
            reply = submit_line(state, user_input)
        return reply
    except (TaskTrackerError, ValueError) as e:
        logger.debug("Rejected input %r: %s", user_input, e)
        return f"Error: {e}"
    except Exception:
        logger.exception("Command handler crashed.")
        return "Internal error while handling the input."


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started.")
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "TaskTracker"))
    _print_ts(f"[{app_name}] Type a task to add it. Use /help for commands, /exit to quit.\n")
    print(cmd_list(state, []))

    while True:
        try:
            user_input = input(_prompt(state)).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        reply = handle_line(state, user_input)
        if reply:
            print(reply)

    logger.info("Console connector finished.")
