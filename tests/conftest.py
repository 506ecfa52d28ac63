"""Shared fixtures."""

import asyncio
import json
from datetime import UTC, date, datetime, timedelta

import pytest
import requests

from clockrules.models import TimeEntry, WorkDay


@pytest.fixture
def make_response():
    """Build real requests.Response objects without touching the network."""

    def _make(status=200, payload=None, body=None, headers=None):
        response = requests.Response()
        response.status_code = status
        if body is None:
            body = b"" if payload is None else json.dumps(payload).encode()
        response._content = body
        response.encoding = "utf-8"
        response.url = "https://global.api.clockify.me/test"
        if headers is None:
            headers = {"Content-Length": str(len(body))}
        response.headers.update(headers)
        return response

    return _make


@pytest.fixture
def sleeps(monkeypatch):
    """Record asyncio.sleep delays instead of waiting."""
    delays: list[float] = []

    async def fake_sleep(delay, result=None):
        delays.append(delay)
        return result

    monkeypatch.setattr(asyncio, "sleep", fake_sleep)
    return delays


def entry(start: datetime, hours: float, description: str = "work") -> TimeEntry:
    return TimeEntry(
        description=description,
        project_name="Project",
        user_id="u1",
        start=start,
        end=start + timedelta(hours=hours),
    )


def work_day(day: date, hours: float) -> WorkDay:
    """A WorkDay with one entry starting at 08:00 UTC."""
    start = datetime(day.year, day.month, day.day, 8, tzinfo=UTC)
    return WorkDay(date=day, entries=(entry(start, hours),))


@pytest.fixture
def make_work_day():
    return work_day


@pytest.fixture
def make_entry():
    return entry
