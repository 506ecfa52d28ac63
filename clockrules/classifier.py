"""Turn raw Clockify records into classified calendar days."""

from collections import defaultdict
from datetime import date, timedelta
from typing import assert_never

from clockrules.holidays import date_range
from clockrules.models import (
    Day,
    Holiday,
    HolidayType,
    SickLeaveDay,
    TimeEntry,
    TimeOffItem,
    TimeOffType,
    WorkDay,
)


def group_work_days(entries: list[TimeEntry]) -> list[WorkDay]:
    """Group time entries by the UTC date they started on, sorted by date."""
    by_date: dict[date, list[TimeEntry]] = defaultdict(list)
    for entry in entries:
        by_date[entry.start.date()].append(entry)
    return [WorkDay(date=day, entries=tuple(by_date[day])) for day in sorted(by_date)]


def time_off_day(item: TimeOffItem, target_date: date) -> Day:
    """Classify one date covered by a time-off request."""
    match item.type:
        case TimeOffType.SICK_LEAVE:
            return SickLeaveDay(date=target_date, title=item.note)
        case TimeOffType.VACATION:
            return Holiday(date=target_date, title=item.note, kind=HolidayType.VACATION)
        case TimeOffType.PARENTAL_LEAVE:
            return Holiday(date=target_date, title=item.note, kind=HolidayType.PARENTAL_LEAVE)
        case TimeOffType.DAY_OFF:
            return Holiday(date=target_date, title=item.note, kind=HolidayType.FLEX)
        case _:
            assert_never(item.type)


def expand_time_off(items: list[TimeOffItem], since: date) -> list[Day]:
    """
    Expand time-off requests into one day per covered date.

    Clockify encodes a request as midnight-to-midnight in the user's zone, so the
    UTC start lands on the previous date; that first date is dropped.
    """
    days = []
    for item in items:
        first = item.start.date() + timedelta(days=1)
        for target_date in date_range(first, item.end.date()):
            if target_date >= since:
                days.append(time_off_day(item, target_date))
    return days
