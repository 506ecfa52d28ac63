"""Tests for the Clockify client."""

from datetime import date
from unittest.mock import MagicMock

import pytest
import requests

from clockrules.clockify.client import ClockifyClient
from clockrules.errors import RemoteRequestError, UnsupportedTimeOffError

USER_JSON = {
    "id": "65a0f0c2b1e4a3d2c1b0a999",
    "activeWorkspace": "65a0f0c2b1e4a3d2c1b0a000",
    "name": "Maija",
    "email": "maija@example.com",
}


def time_off_json(half_day=False):
    return {
        "userId": USER_JSON["id"],
        "policyName": "Sick leave",
        "timeUnit": "DAYS",
        "note": "Flu",
        "status": {"statusType": "APPROVED"},
        "timeOffPeriod": {
            "halfDay": half_day,
            "period": {"start": "2024-01-30T22:00:00Z", "end": "2024-02-01T21:59:59.999Z"},
        },
    }


@pytest.fixture
def client(monkeypatch):
    """A client whose session never reaches the network."""
    with ClockifyClient("secret-token") as clockify:
        monkeypatch.setattr(clockify.session, "request", MagicMock())
        yield clockify


@pytest.fixture
def resolved(client, make_response):
    """A client that already knows its user."""
    client.session.request.side_effect = [make_response(payload=USER_JSON)]
    return client


def test_session_requires_context_manager():
    """The session only exists inside the with block."""
    with pytest.raises(RuntimeError):
        _ = ClockifyClient("token").session


def test_session_sends_api_key():
    """Every request carries the API token header."""
    with ClockifyClient("secret-token") as clockify:
        assert clockify.session.headers["x-api-key"] == "secret-token"


def test_user_requires_resolving():
    """Fetching before resolving the user is a programming error."""
    with ClockifyClient("token") as clockify, pytest.raises(RuntimeError):
        _ = clockify.user


@pytest.mark.asyncio
async def test_resolve_user(client, make_response, sleeps):
    """The user is fetched once and kept on the client."""
    client.session.request.side_effect = [make_response(payload=USER_JSON)]

    user = await client.resolve_user()

    assert user.email == "maija@example.com"
    assert client.user is user
    method, url = client.session.request.call_args.args
    assert (method, url) == ("GET", "https://global.api.clockify.me/v1/user")
    assert sleeps == []


@pytest.mark.asyncio
async def test_resolve_user_retries(client, make_response, sleeps):
    """Transient failures are retried with a fixed pause."""
    client.session.request.side_effect = [
        requests.ConnectionError("reset"),
        make_response(status=503, body=b"unavailable"),
        make_response(payload=USER_JSON),
    ]

    user = await client.resolve_user()

    assert user.id_hex == USER_JSON["id"]
    assert sleeps == [2.0, 2.0]


@pytest.mark.asyncio
async def test_resolve_user_gives_up_after_three_attempts(client, sleeps):
    """The third failure propagates."""
    client.session.request.side_effect = requests.ConnectionError("reset")

    with pytest.raises(RemoteRequestError):
        await client.resolve_user()
    assert client.session.request.call_count == 3
    assert sleeps == [2.0, 2.0]


@pytest.mark.asyncio
async def test_resolve_user_rejected_token_is_not_retried(client, make_response, sleeps):
    """A client error such as a bad token fails on the first attempt."""
    client.session.request.side_effect = [make_response(status=401, body=b"")]

    with pytest.raises(RemoteRequestError) as exc:
        await client.resolve_user()
    assert exc.value.status_code == 401
    assert client.session.request.call_count == 1
    assert sleeps == []


@pytest.mark.asyncio
async def test_resolve_user_retries_rate_limit(client, make_response, sleeps):
    """Rate limiting is transient even though it is a 4xx status."""
    client.session.request.side_effect = [
        make_response(status=429, body=b""),
        make_response(payload=USER_JSON),
    ]

    await client.resolve_user()

    assert sleeps == [2.0]


@pytest.mark.asyncio
async def test_time_off_rate_limit_backoff(resolved, make_response, sleeps):
    """Two 429s then success use exactly the first two backoff delays."""
    await resolved.resolve_user()
    resolved.session.request.side_effect = [
        make_response(status=429, body=b""),
        make_response(status=429, body=b""),
        make_response(payload={"count": 1, "requests": [time_off_json()]}),
    ]

    items = await resolved.fetch_time_off_items()

    assert len(items) == 1
    assert items[0].note == "Flu"
    assert sleeps == [0.6, 0.75]


@pytest.mark.asyncio
async def test_time_off_rate_limit_exhausted(resolved, make_response, sleeps):
    """When the delays run out the last 429 surfaces as an error."""
    await resolved.resolve_user()
    resolved.session.request.side_effect = [make_response(status=429, body=b"")] * 5

    with pytest.raises(RemoteRequestError) as exc:
        await resolved.fetch_time_off_items()
    assert exc.value.status_code == 429
    assert sleeps == [0.6, 0.75, 1.25, 2.0]


@pytest.mark.asyncio
async def test_time_off_request_filters_approved(resolved, make_response, sleeps):
    """The search body selects approved requests of the current user."""
    await resolved.resolve_user()
    resolved.session.request.side_effect = [make_response(payload={"count": 0, "requests": []})]

    assert await resolved.fetch_time_off_items() == []

    call = resolved.session.request.call_args
    assert call.args == (
        "POST",
        "https://global.api.clockify.me/workspaces/65a0f0c2b1e4a3d2c1b0a000/time-off/requests",
    )
    body = call.kwargs["json"]
    assert body["status"] == ["APPROVED"]
    assert body["users"]["ids"] == [USER_JSON["id"]]
    assert body["pageSize"] == 500


@pytest.mark.asyncio
async def test_time_off_half_day_is_fatal(resolved, make_response, sleeps):
    """Half-day requests abort without retrying."""
    await resolved.resolve_user()
    resolved.session.request.side_effect = [
        make_response(payload={"count": 1, "requests": [time_off_json(half_day=True)]})
    ]

    with pytest.raises(UnsupportedTimeOffError):
        await resolved.fetch_time_off_items()
    assert sleeps == []


@pytest.mark.asyncio
async def test_fetch_work_items_since(resolved, make_response, sleeps):
    """Work items are fetched window by window up to the end of today."""
    await resolved.resolve_user()
    resolved.session.request.side_effect = None
    resolved.session.request.return_value = make_response(body=b"[]")

    entries = await resolved.fetch_work_items_since(date(2024, 1, 1), today=date(2024, 3, 1))

    assert entries == []
    calls = resolved.session.request.call_args_list[1:]
    assert len(calls) == 2
    assert calls[0].args[1] == (
        "https://global.api.clockify.me/workspaces/65a0f0c2b1e4a3d2c1b0a000"
        "/timeEntries/users/65a0f0c2b1e4a3d2c1b0a999/timesheet"
    )
    assert calls[0].kwargs["params"]["start"] == "2024-01-01T00:00:00.000Z"
    assert calls[-1].kwargs["params"]["end"] == "2024-03-01T23:59:59.000Z"


@pytest.mark.asyncio
async def test_debug_snapshots(monkeypatch, tmp_path, make_response, sleeps):
    """With a debug directory every payload is written to disk."""
    with ClockifyClient("token", debug_dir=tmp_path) as clockify:
        request = MagicMock(side_effect=[make_response(payload=USER_JSON)])
        monkeypatch.setattr(clockify.session, "request", request)
        await clockify.resolve_user()

    snapshots = list(tmp_path.glob("*-user.json"))
    assert len(snapshots) == 1
    assert "maija@example.com" in snapshots[0].read_text()
