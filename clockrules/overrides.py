"""Per-user override settings: ignored days and custom expected hours."""

import json
import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any

from clockrules.models import Day, DayType, day_type

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH = Path(".settings.json")


def _field(record: dict[str, Any], name: str) -> Any:
    """Read a snake_case key, falling back to its camelCase spelling."""
    if name in record:
        return record[name]
    head, *rest = name.split("_")
    camel = head + "".join(part.title() for part in rest)
    return record[camel]


@dataclass(frozen=True)
class IgnoreItem:
    """Suppress days of one type within an inclusive date range."""

    name: str
    description: str
    date_start: date
    date_end: date
    type: DayType

    @classmethod
    def from_dict(cls, record: dict[str, Any]) -> "IgnoreItem":
        return cls(
            name=_field(record, "name"),
            description=_field(record, "description"),
            date_start=date.fromisoformat(_field(record, "date_start")),
            date_end=date.fromisoformat(_field(record, "date_end")),
            type=DayType(_field(record, "type")),
        )

    def matches(self, day: Day) -> bool:
        return self.date_start <= day.date <= self.date_end and day_type(day) == self.type


@dataclass(frozen=True)
class ExpectedWorkingHours:
    """Override the expected hours per day within an inclusive date range."""

    name: str
    description: str
    date_start: date
    date_end: date
    hours_per_day: float

    @classmethod
    def from_dict(cls, record: dict[str, Any]) -> "ExpectedWorkingHours":
        return cls(
            name=_field(record, "name"),
            description=_field(record, "description"),
            date_start=date.fromisoformat(_field(record, "date_start")),
            date_end=date.fromisoformat(_field(record, "date_end")),
            hours_per_day=float(_field(record, "hours_per_day")),
        )

    def contains(self, target_date: date) -> bool:
        return self.date_start <= target_date <= self.date_end


@dataclass(frozen=True)
class OverridePolicy:
    """Override rules for one user, keyed by email."""

    email: str
    ignore_items: tuple[IgnoreItem, ...] = ()
    expected_working_hours: tuple[ExpectedWorkingHours, ...] = ()

    @classmethod
    def empty(cls) -> "OverridePolicy":
        """Policy without any overrides."""
        return cls(email="")

    @classmethod
    def from_dict(cls, record: dict[str, Any]) -> "OverridePolicy":
        return cls(
            email=_field(record, "email"),
            ignore_items=tuple(
                IgnoreItem.from_dict(item) for item in _field(record, "ignore_items")
            ),
            expected_working_hours=tuple(
                ExpectedWorkingHours.from_dict(item)
                for item in _field(record, "expected_working_hours")
            ),
        )

    def is_ignored(self, day: Day) -> bool:
        """Check if any ignore window covers the day and its type."""
        ignored = any(item.matches(day) for item in self.ignore_items)
        if ignored:
            logger.info("Ignore day: %s", day)
        return ignored

    def expected_seconds(self, target_date: date) -> int | None:
        """Expected working seconds from the first matching window, if any."""
        for window in self.expected_working_hours:
            if window.contains(target_date):
                return int(window.hours_per_day * 3600)
        return None


class GlobalSettings:
    """Override policies of every configured user."""

    def __init__(self, policies: list[OverridePolicy] | None = None) -> None:
        self.policies: list[OverridePolicy] = policies or []

    @classmethod
    def load(cls, path: Path = DEFAULT_SETTINGS_PATH) -> "GlobalSettings":
        """
        Load the optional settings file.

        A missing or malformed file means no overrides for anyone.
        """
        try:
            records = json.loads(path.read_text(encoding="utf-8"))
            policies = [OverridePolicy.from_dict(record) for record in records]
        except FileNotFoundError:
            logger.info("No extra settings at %s", path)
            return cls()
        except (OSError, TypeError, KeyError, ValueError) as e:
            logger.warning("Could not read extra settings from %s: %s", path, e)
            return cls()
        return cls(policies)

    def for_email(self, email: str) -> OverridePolicy:
        """Policy for the given user, or the empty policy."""
        return next(
            (policy for policy in self.policies if policy.email == email),
            OverridePolicy.empty(),
        )
