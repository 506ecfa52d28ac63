"""Public holiday calendar and weekday helpers."""

import json
import logging
from collections.abc import Iterator
from datetime import date, timedelta
from pathlib import Path

from clockrules.errors import HolidayCalendarError
from clockrules.models import Holiday, HolidayType

logger = logging.getLogger(__name__)

HOLIDAYS_PATH = Path(__file__).parent / "holidays.json"


def is_weekday(target_date: date) -> bool:
    """Check if a date falls on Monday to Friday."""
    # 5 = Saturday, 6 = Sunday
    return target_date.weekday() not in (5, 6)


def date_range(start: date, end: date) -> Iterator[date]:
    """Yield every date from start to end, both inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def weekdays_between(start: date, end: date) -> list[date]:
    """All weekdays from start to end, both inclusive."""
    return [day for day in date_range(start, end) if is_weekday(day)]


def parse_holidays(text: str) -> list[Holiday]:
    """Parse a JSON array of ``{type, title, date}`` holiday records."""
    try:
        records = json.loads(text)
    except json.JSONDecodeError as e:
        msg = f"Holiday calendar is not valid JSON: {e}"
        raise HolidayCalendarError(msg) from e
    if not isinstance(records, list):
        msg = "Holiday calendar must be a JSON array"
        raise HolidayCalendarError(msg)

    holidays = []
    for record in records:
        try:
            holidays.append(
                Holiday(
                    date=date.fromisoformat(record["date"]),
                    title=record["title"],
                    kind=HolidayType(record["type"]),
                )
            )
        except (KeyError, TypeError, ValueError) as e:
            msg = f"Invalid holiday record {record!r}: {e}"
            raise HolidayCalendarError(msg) from e
    return holidays


def load_public_holidays(since: date, path: Path = HOLIDAYS_PATH) -> list[Holiday]:
    """
    Load public holidays on weekdays from ``since`` onwards.

    Holidays falling on a weekend are skipped, they never change the balance.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        msg = f"Could not read holiday calendar {path}: {e}"
        raise HolidayCalendarError(msg) from e

    holidays = [
        holiday
        for holiday in parse_holidays(text)
        if is_weekday(holiday.date) and holiday.date >= since
    ]
    logger.info("Loaded %d public holidays since %s", len(holidays), since)
    return holidays
