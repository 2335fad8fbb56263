from __future__ import annotations

"""Day / week / month tracking windows.

Two flavours:
- "contained": the calendar day, Monday-start week, and calendar month that
  contain the date
- "until": the last 1, 7, and days-in-month days ending with the date's day

The date is always an explicit argument; tzinfo is preserved.
"""

import calendar
import datetime as _dt
from dataclasses import dataclass
from typing import Literal

IntervalType = Literal["contained", "until"]


@dataclass(frozen=True, slots=True)
class TimeInterval:
    start: _dt.datetime
    end: _dt.datetime


@dataclass(frozen=True, slots=True)
class TimeIntervals:
    day: TimeInterval
    week: TimeInterval
    month: TimeInterval


def start_of_day(value: _dt.datetime) -> _dt.datetime:
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(value: _dt.datetime) -> _dt.datetime:
    return value.replace(hour=23, minute=59, second=59, microsecond=999000)


def start_of_week(value: _dt.datetime) -> _dt.datetime:
    return start_of_day(value - _dt.timedelta(days=value.weekday()))


def end_of_week(value: _dt.datetime) -> _dt.datetime:
    return end_of_day(value + _dt.timedelta(days=6 - value.weekday()))


def days_in_month(value: _dt.datetime) -> int:
    return calendar.monthrange(value.year, value.month)[1]


def start_of_month(value: _dt.datetime) -> _dt.datetime:
    return start_of_day(value.replace(day=1))


def end_of_month(value: _dt.datetime) -> _dt.datetime:
    return end_of_day(value.replace(day=days_in_month(value)))


def end_of_last_day(value: _dt.datetime) -> _dt.datetime:
    return end_of_day(value - _dt.timedelta(days=1))


def end_of_last_week(value: _dt.datetime) -> _dt.datetime:
    return end_of_week(value) - _dt.timedelta(days=7)


def end_of_last_month(value: _dt.datetime) -> _dt.datetime:
    return end_of_day(start_of_month(value) - _dt.timedelta(days=1))


def days_before(value: _dt.datetime, days: int) -> _dt.datetime:
    """Start of the day `days - 1` days before `value`.

    days=1 returns the start of `value`'s own day.
    """
    return start_of_day(value - _dt.timedelta(days=days - 1))


def time_intervals_from_definition(kind: IntervalType, date: _dt.datetime) -> TimeIntervals:
    if kind == "contained":
        return TimeIntervals(
            day=TimeInterval(start_of_day(date), end_of_day(date)),
            week=TimeInterval(start_of_week(date), end_of_week(date)),
            month=TimeInterval(start_of_month(date), end_of_month(date)),
        )

    end = end_of_day(date)
    return TimeIntervals(
        day=TimeInterval(days_before(end, 1), end),
        week=TimeInterval(days_before(end, 7), end),
        month=TimeInterval(days_before(end, days_in_month(end)), end),
    )
