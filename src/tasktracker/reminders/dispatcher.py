# src/tasktracker/reminders/dispatcher.py

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..core.ports import ReminderFacility
from ..tasks.task_models import CancelReminder, ReminderEffect, ScheduleReminder

logger = logging.getLogger(__name__)


def dispatch_effects(effects: Iterable[ReminderEffect], facility: ReminderFacility | None) -> int:
    """
    Execute reminder effects against the facility, in order.

    Failures are logged per effect and never raised: the store mutation that
    produced the effects has already been persisted.
    Returns the number of effects that were handed over successfully.
    """
    if facility is None:
        return 0

    ok = 0
    for effect in effects:
        try:
            if isinstance(effect, ScheduleReminder):
                facility.schedule_reminder(effect.task_id, effect.title, effect.fire_at)
            elif isinstance(effect, CancelReminder):
                facility.cancel_reminder(effect.task_id)
            else:
                logger.warning("Unknown reminder effect: %r", effect)
                continue
            ok += 1
        except Exception:
            logger.exception("Reminder effect failed: %r", effect)
    return ok
