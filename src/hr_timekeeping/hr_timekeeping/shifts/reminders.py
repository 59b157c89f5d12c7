"""Clock-in and clock-out reminders derived from an employee's schedule.

A clock-in reminder is due shortly before the scheduled start on a working
day when the employee has not clocked in. A clock-out reminder is due around
the scheduled end while the employee is still clocked in.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
from typing import Optional

from ..common.datetime_utils import minutes_of_day
from ..core.constants import MINUTES_PER_DAY, REMINDER_LEAD_MINUTES, REMINDER_WINDOW_MINUTES
from ..core.enums import ReminderKind
from .model import ShiftSchedule


@dataclass(frozen=True)
class Reminder:
    kind: ReminderKind
    title: str
    message: str


def _format_time(value: time) -> str:
    hour12 = value.hour % 12 or 12
    return f"{hour12}:{value.minute:02d} {'PM' if value.hour >= 12 else 'AM'}"


def _within_window(now: datetime, target_minutes: int) -> bool:
    # Circular distance so windows around midnight still match.
    diff = abs(minutes_of_day(now) - target_minutes % MINUTES_PER_DAY)
    return min(diff, MINUTES_PER_DAY - diff) <= REMINDER_WINDOW_MINUTES


def due_reminders(now: datetime, schedule: ShiftSchedule, record) -> list[Reminder]:
    """Reminders to send at now; record exposes clock_in and clock_out, or is None."""
    reminders: list[Reminder] = []
    clocked_in = record is not None and record.clock_in is not None
    clocked_out = record is not None and record.clock_out is not None

    clock_in_target = minutes_of_day(schedule.start_time) - REMINDER_LEAD_MINUTES
    if schedule.works_on(now.date()) and not clocked_in and _within_window(now, clock_in_target):
        reminders.append(
            Reminder(
                kind=ReminderKind.CLOCK_IN,
                title="Time to Clock In!",
                message=f"Your work day starts at {_format_time(schedule.start_time)}. Don't forget to clock in!",
            )
        )

    if clocked_in and not clocked_out and _within_window(now, minutes_of_day(schedule.end_time)):
        reminders.append(
            Reminder(
                kind=ReminderKind.CLOCK_OUT,
                title="Time to Clock Out!",
                message=f"Your work day ends at {_format_time(schedule.end_time)}. Don't forget to clock out!",
            )
        )

    return reminders
