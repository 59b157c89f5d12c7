from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Iterable, Optional, Union

from ..common.datetime_utils import parse_time_of_day
from ..core.constants import DEFAULT_WORK_END, DEFAULT_WORK_START, DEFAULT_WORKING_DAYS


@dataclass(frozen=True)
class ShiftSchedule:
    """Scheduled working hours of an employee, time-of-day only.

    A schedule crosses midnight when end_time is at or before start_time
    (e.g. 22:00-06:00). Equal times mean a full 24 hour shift.
    working_days numbers days from Sunday = 0.
    """

    start_time: time
    end_time: time
    working_days: tuple[int, ...] = DEFAULT_WORKING_DAYS

    @classmethod
    def default(cls) -> "ShiftSchedule":
        return cls(start_time=DEFAULT_WORK_START, end_time=DEFAULT_WORK_END)

    @classmethod
    def from_strings(cls, start: Union[str, time], end: Union[str, time]) -> "ShiftSchedule":
        return cls(start_time=parse_time_of_day(start), end_time=parse_time_of_day(end))

    def works_on(self, day: date) -> bool:
        return day_number(day) in self.working_days


def day_number(day: date) -> int:
    """Day of week with Sunday = 0 ... Saturday = 6."""
    return (day.weekday() + 1) % 7


def parse_working_days(value: Union[None, str, Iterable[int]]) -> tuple[int, ...]:
    """Parse stored working days ("1,2,3", "[1, 2, 3]" or a list); empty means Mon-Fri."""
    if value is None:
        return DEFAULT_WORKING_DAYS
    if isinstance(value, str):
        parts = value.strip().strip("[]").split(",")
        value = [int(p) for p in parts if p.strip()]

    days = tuple(sorted({int(d) for d in value}))
    if any(d < 0 or d > 6 for d in days):
        raise ValueError(f"Invalid working days: {value!r}")
    return days or DEFAULT_WORKING_DAYS


def resolve_schedule(
    start: Optional[Union[str, time]],
    end: Optional[Union[str, time]],
    working_days: Union[None, str, Iterable[int]] = None,
) -> ShiftSchedule:
    """Build a schedule from stored working hours, filling gaps with 09:00-18:00 Mon-Fri."""
    return ShiftSchedule(
        start_time=parse_time_of_day(start) if start else DEFAULT_WORK_START,
        end_time=parse_time_of_day(end) if end else DEFAULT_WORK_END,
        working_days=parse_working_days(working_days),
    )
