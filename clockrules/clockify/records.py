"""Parsing of Clockify JSON payloads into models."""

from datetime import UTC, datetime
from typing import Any

from clockrules.errors import ResponseParseError, UnsupportedTimeOffError
from clockrules.models import TimeEntry, TimeOffItem, TimeOffType, User

POLICY_TYPES: dict[str, TimeOffType] = {
    "Day off": TimeOffType.DAY_OFF,
    "Sick leave": TimeOffType.SICK_LEAVE,
    "Vacation": TimeOffType.VACATION,
    "Parental leave": TimeOffType.PARENTAL_LEAVE,
}


def _get_object(obj: Any, field: str) -> dict[str, Any]:
    value = obj.get(field) if isinstance(obj, dict) else None
    if not isinstance(value, dict):
        msg = f"missing field `{field}`"
        raise ResponseParseError(msg)
    return value


def _get_str(obj: dict[str, Any], field: str) -> str:
    value = obj.get(field)
    if not isinstance(value, str):
        msg = f"missing field `{field}`"
        raise ResponseParseError(msg)
    return value


def _get_datetime(obj: dict[str, Any], field: str) -> datetime:
    """Read an RFC 3339 timestamp and normalize it to UTC."""
    try:
        value = datetime.fromisoformat(_get_str(obj, field))
    except ValueError as e:
        msg = f"invalid timestamp in `{field}`: {e}"
        raise ResponseParseError(msg) from e
    if value.tzinfo is None:
        msg = f"timestamp in `{field}` has no timezone"
        raise ResponseParseError(msg)
    return value.astimezone(UTC)


def _get_hex_id(obj: dict[str, Any], field: str) -> int:
    try:
        return int(_get_str(obj, field), 16)
    except ValueError as e:
        msg = f"`{field}` is not a hex id"
        raise ResponseParseError(msg) from e


def parse_user(payload: Any) -> User:
    """Parse the ``v1/user`` response."""
    if not isinstance(payload, dict):
        msg = "user response is not an object"
        raise ResponseParseError(msg)
    return User(
        id=_get_hex_id(payload, "id"),
        workspace_id=_get_hex_id(payload, "activeWorkspace"),
        name=_get_str(payload, "name"),
        email=_get_str(payload, "email"),
    )


def parse_time_entry(obj: Any) -> TimeEntry:
    """Parse one timesheet entry."""
    if not isinstance(obj, dict):
        msg = "time entry is not an object"
        raise ResponseParseError(msg)
    interval = _get_object(obj, "timeInterval")
    return TimeEntry(
        description=_get_str(obj, "description"),
        project_name=_get_str(_get_object(obj, "project"), "name"),
        user_id=_get_str(_get_object(obj, "user"), "id"),
        start=_get_datetime(interval, "start"),
        end=_get_datetime(interval, "end"),
    )


def parse_time_entries(payload: Any) -> list[TimeEntry]:
    """Parse a timesheet response, which must be a JSON array."""
    if not isinstance(payload, list):
        msg = "timesheet response is not an array"
        raise ResponseParseError(msg)
    return [parse_time_entry(obj) for obj in payload]


def _parse_status(obj: dict[str, Any]) -> str:
    status = obj.get("status")
    if isinstance(status, dict):
        return str(status.get("statusType", ""))
    return status if isinstance(status, str) else ""


def parse_time_off_item(obj: Any) -> TimeOffItem:
    """
    Parse one time-off request.

    Only whole-day requests are supported: anything measured in another unit,
    or flagged as a half day, raises UnsupportedTimeOffError.
    """
    if not isinstance(obj, dict):
        msg = "time-off request is not an object"
        raise ResponseParseError(msg)

    time_unit = _get_str(obj, "timeUnit")
    if time_unit != "DAYS":
        msg = f"Time unit wasn't 'DAYS' but {time_unit!r}"
        raise UnsupportedTimeOffError(msg)

    user_id = _get_str(obj, "userId")
    policy_name = _get_str(obj, "policyName")
    try:
        time_off_type = POLICY_TYPES[policy_name]
    except KeyError:
        msg = f"unknown policyName: {policy_name}"
        raise ResponseParseError(msg) from None
    note = obj.get("note")
    if not isinstance(note, str):
        note = ""

    time_off_period = _get_object(obj, "timeOffPeriod")
    period = _get_object(time_off_period, "period")
    start = _get_datetime(period, "start")
    end = _get_datetime(period, "end")

    half_day = time_off_period.get("halfDay")
    if not isinstance(half_day, bool):
        msg = "missing field `halfDay`"
        raise ResponseParseError(msg)
    if half_day:
        msg = "Half day time off is not supported"
        raise UnsupportedTimeOffError(msg)

    return TimeOffItem(
        note=note,
        user_id=user_id,
        type=time_off_type,
        start=start,
        end=end,
        status=_parse_status(obj),
    )


def parse_time_off_response(payload: Any) -> list[TimeOffItem]:
    """Parse the time-off search response ``{count, requests: [...]}``."""
    if not isinstance(payload, dict):
        msg = "time-off response is not an object"
        raise ResponseParseError(msg)
    if not isinstance(payload.get("count"), int):
        msg = "missing field `count`"
        raise ResponseParseError(msg)
    requests = payload.get("requests")
    if not isinstance(requests, list):
        msg = "missing field `requests`"
        raise ResponseParseError(msg)
    return [parse_time_off_item(obj) for obj in requests]
