"""Reconciliation of worked time against expected time."""

import logging
from datetime import UTC, date, datetime
from typing import assert_never

from clockrules.duration import Duration
from clockrules.errors import NoWorkDataError
from clockrules.holidays import is_weekday, weekdays_between
from clockrules.models import (
    DEFAULT_DAY_SECONDS,
    Day,
    Holiday,
    HolidayType,
    Results,
    SickLeaveDay,
    WorkDay,
)
from clockrules.overrides import OverridePolicy

logger = logging.getLogger(__name__)


def utc_today() -> date:
    """Current date in UTC, the calendar all dates are compared in."""
    return datetime.now(UTC).date()


def expected_day_seconds(policy: OverridePolicy, target_date: date) -> int:
    """Expected seconds for one weekday, falling back to the default day length."""
    seconds = policy.expected_seconds(target_date)
    return DEFAULT_DAY_SECONDS if seconds is None else seconds


def expected_seconds(policy: OverridePolicy, days: list[date]) -> int:
    return sum(expected_day_seconds(policy, day) for day in days)


def _kept_without_today(day: Day, today: date) -> bool:
    """Days off kept when today is excluded: all holidays, sick days before today."""
    match day:
        case Holiday():
            return True
        case SickLeaveDay() | WorkDay():
            return day.date < today
        case _:
            assert_never(day)


def _counted_weekdays(days: list[Day], policy: OverridePolicy) -> list[date]:
    return [day.date for day in days if is_weekday(day.date) and not policy.is_ignored(day)]


def calculate_results(
    public_holidays: list[Holiday],
    work_days: list[WorkDay],
    days_off: list[Day],
    include_today: bool = False,
    start_balance_minutes: int = 0,
    policy: OverridePolicy | None = None,
    today: date | None = None,
) -> Results:
    """
    Calculate the balance since the first working day.

    Rules:
    - Expected time accrues on every weekday from the first working day to today
    - Public holidays, sick days, parental leave and held vacation are not expected
    - Future vacation and flex days are still expected until they are taken
    - Flex days off are never subtracted, they are paid out of the balance
    - Ignore windows from the policy drop matching days from every category

    Args:
        include_today: Count today's work and weekday; otherwise only days before today
        start_balance_minutes: Balance carried over from before the first working day
        today: Reference date, defaults to the current UTC date
    """
    if today is None:
        today = utc_today()
    if policy is None:
        policy = OverridePolicy.empty()

    if not work_days:
        msg = "No working days found since the start date"
        raise NoWorkDataError(msg)
    first_working_day = min(work_day.date for work_day in work_days)
    all_weekdays = weekdays_between(first_working_day, today)

    if not include_today:
        work_days = [work_day for work_day in work_days if work_day.date < today]
        public_holidays = [holiday for holiday in public_holidays if holiday.date < today]
        days_off = [day for day in days_off if _kept_without_today(day, today)]
        all_weekdays = [day for day in all_weekdays if day < today]

    if not work_days:
        msg = "No working days found before today"
        raise NoWorkDataError(msg)
    longest_working_day = max(work_days, key=lambda work_day: work_day.duration.seconds)

    public_holiday_dates = [
        holiday.date
        for holiday in public_holidays
        if holiday.date <= today
        and is_weekday(holiday.date)
        and holiday.date > first_working_day
        and not policy.is_ignored(holiday)
    ]

    sick_days: list[Day] = []
    parental_leave_days: list[Day] = []
    vacation_days: list[Day] = []
    flex_days: list[Day] = []
    for day in days_off:
        match day:
            case SickLeaveDay():
                sick_days.append(day)
            case Holiday(kind=HolidayType.PARENTAL_LEAVE):
                parental_leave_days.append(day)
            case Holiday(kind=HolidayType.VACATION):
                vacation_days.append(day)
            case Holiday() | WorkDay():
                flex_days.append(day)
            case _:
                assert_never(day)

    sick_leave_dates = [day.date for day in sick_days if not policy.is_ignored(day)]
    parental_leave_dates = _counted_weekdays(parental_leave_days, policy)

    vacation_dates = _counted_weekdays(vacation_days, policy)
    held_vacation_dates = [
        day for day in vacation_dates if day < today or (include_today and day == today)
    ]
    future_vacation_count = len(vacation_dates) - len(held_vacation_dates)

    flex_dates = _counted_weekdays(flex_days, policy)
    held_flex_count = sum(1 for day in flex_dates if day <= today)
    future_flex_count = len(flex_dates) - held_flex_count

    not_expected = (
        set(public_holiday_dates)
        | set(sick_leave_dates)
        | set(held_vacation_dates)
        | set(parental_leave_dates)
    )
    filtered_expected_days = [day for day in all_weekdays if day not in not_expected]

    expected = Duration(expected_seconds(policy, filtered_expected_days))
    worked = Duration(sum(work_day.duration.seconds for work_day in work_days))
    start_balance = Duration.from_minutes(start_balance_minutes)
    balance = start_balance + worked - expected

    logger.info(
        "Balance since %s: worked %s, expected %s, balance %s",
        first_working_day,
        worked,
        expected,
        balance,
    )

    return Results(
        first_working_day=first_working_day,
        working_day_count=len(work_days),
        worked_time=worked,
        public_holiday_count=len(public_holiday_dates),
        sick_leave_day_count=len(sick_leave_dates),
        parental_leave_day_count=len(parental_leave_dates),
        held_vacation_day_count=len(held_vacation_dates),
        future_vacation_day_count=future_vacation_count,
        held_flex_time_off_day_count=held_flex_count,
        future_flex_time_off_day_count=future_flex_count,
        filtered_expected_working_day_count=len(filtered_expected_days),
        expected_working_time=expected,
        total_expected_working_time=Duration(expected_seconds(policy, all_weekdays)),
        longest_working_day=longest_working_day,
        balance=balance,
        start_balance=start_balance,
    )
