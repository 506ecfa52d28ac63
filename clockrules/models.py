"""Data models for time entries, classified days and results."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import TypeAlias, assert_never

from clockrules.duration import Duration

WORK_DAY_HOURS = 7.5
DEFAULT_DAY_SECONDS = int(WORK_DAY_HOURS * 3600)


class DayType(str, Enum):
    """Day tag used by the override settings."""

    WORKING_DAY = "WorkingDay"
    SICK_LEAVE = "SickLeave"
    PARENTAL_LEAVE = "ParentalLeave"
    PUBLIC_HOLIDAY = "PublicHoliday"
    VACATION = "Vacation"
    FLEX = "Flex"
    SELF_IMPROVEMENT = "SelfImprovement"
    UNKNOWN = "Unknown"


class HolidayType(str, Enum):
    """Kind of non-working day."""

    VACATION = "Vacation"
    PUBLIC_HOLIDAY = "PublicHoliday"
    FLEX = "Flex"
    PARENTAL_LEAVE = "ParentalLeave"
    UNKNOWN = "Unknown"


class TimeOffType(str, Enum):
    """Time-off policy of an approved request."""

    DAY_OFF = "DayOff"
    SICK_LEAVE = "SickLeave"
    VACATION = "Vacation"
    PARENTAL_LEAVE = "ParentalLeave"


@dataclass(frozen=True)
class User:
    """Clockify user resolved from the API token."""

    id: int
    workspace_id: int
    name: str
    email: str

    @property
    def id_hex(self) -> str:
        """User id as used in Clockify URLs."""
        return f"{self.id:024x}"

    @property
    def workspace_hex(self) -> str:
        """Active workspace id as used in Clockify URLs."""
        return f"{self.workspace_id:024x}"


@dataclass(frozen=True)
class TimeEntry:
    """A single tracked work session."""

    description: str
    project_name: str
    user_id: str
    start: datetime
    end: datetime

    @property
    def seconds(self) -> int:
        """Tracked time in whole seconds."""
        return int((self.end - self.start).total_seconds())


@dataclass(frozen=True)
class TimeOffItem:
    """An approved whole-day time-off request."""

    note: str
    user_id: str
    type: TimeOffType
    start: datetime
    end: datetime
    status: str = ""


@dataclass(frozen=True)
class WorkDay:
    """All time entries started on one date."""

    date: date
    entries: tuple[TimeEntry, ...] = ()

    @property
    def duration(self) -> Duration:
        """Total tracked time for this day."""
        return Duration(sum(entry.seconds for entry in self.entries))

    @property
    def entry_count(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class Holiday:
    """A public holiday or a day of approved time off."""

    date: date
    title: str
    kind: HolidayType


@dataclass(frozen=True)
class SickLeaveDay:
    """A day of approved sick leave."""

    date: date
    title: str


Day: TypeAlias = WorkDay | Holiday | SickLeaveDay


def holiday_day_type(kind: HolidayType) -> DayType:
    """Map a holiday kind to its override tag."""
    match kind:
        case HolidayType.VACATION:
            return DayType.VACATION
        case HolidayType.PUBLIC_HOLIDAY:
            return DayType.PUBLIC_HOLIDAY
        case HolidayType.FLEX:
            return DayType.FLEX
        case HolidayType.PARENTAL_LEAVE:
            return DayType.PARENTAL_LEAVE
        case HolidayType.UNKNOWN:
            return DayType.UNKNOWN
        case _:
            assert_never(kind)


def day_type(day: Day) -> DayType:
    """Map a classified day to its override tag."""
    match day:
        case WorkDay():
            return DayType.WORKING_DAY
        case SickLeaveDay():
            return DayType.SICK_LEAVE
        case Holiday(kind=kind):
            return holiday_day_type(kind)
        case _:
            assert_never(day)


@dataclass(frozen=True)
class Results:
    """Balance and per-category counts since the first working day."""

    first_working_day: date
    working_day_count: int
    worked_time: Duration
    public_holiday_count: int
    sick_leave_day_count: int
    parental_leave_day_count: int
    held_vacation_day_count: int
    future_vacation_day_count: int
    held_flex_time_off_day_count: int
    future_flex_time_off_day_count: int
    filtered_expected_working_day_count: int
    expected_working_time: Duration
    total_expected_working_time: Duration
    longest_working_day: WorkDay
    balance: Duration
    start_balance: Duration = field(default_factory=Duration)

    @property
    def total_flex_time_off_day_count(self) -> int:
        return self.held_flex_time_off_day_count + self.future_flex_time_off_day_count

    @property
    def unfiltered_expected_working_day_count(self) -> int:
        return (
            self.filtered_expected_working_day_count
            + self.public_holiday_count
            + self.sick_leave_day_count
        )

    @property
    def total_weekdays_since_start(self) -> int:
        return self.public_holiday_count + self.sick_leave_day_count + self.working_day_count

    @property
    def balance_days(self) -> int:
        """
        Balance in whole default-length days, truncated toward zero.

        Always divides by the default day length, even when per-day expected
        hours were overridden.
        """
        days = abs(self.balance.seconds) // DEFAULT_DAY_SECONDS
        return -days if self.balance.seconds < 0 else days
