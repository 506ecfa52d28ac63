"""Windowed, batched fetching of timesheet entries."""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import requests

from clockrules.clockify.records import parse_time_entries
from clockrules.errors import ResponseParseError
from clockrules.models import TimeEntry

if TYPE_CHECKING:
    from clockrules.clockify.client import ClockifyClient

logger = logging.getLogger(__name__)

# Clockify limits timesheet queries to 999 hours (about 41.6 days)
MAX_WINDOW_DAYS = 41
BATCH_SIZE = 18
BATCH_PAUSE = 1.0  # seconds
EMPTY_CONTENT_LENGTHS = ("0", "2")


def split_windows(
    start: datetime, end: datetime, max_days: int = MAX_WINDOW_DAYS
) -> list[tuple[datetime, datetime]]:
    """
    Split [start, end) into contiguous windows of at most ``max_days``.

    Each window starts where the previous one ended; the last is clamped to end.
    """
    windows = []
    step = timedelta(days=max_days)
    current = start
    while current < end:
        window_end = min(current + step, end)
        windows.append((current, window_end))
        current = window_end
    return windows


def format_timestamp(value: datetime) -> str:
    """Format as RFC 3339 in UTC with milliseconds, e.g. 2024-01-31T00:00:00.000Z."""
    formatted = value.astimezone(UTC).isoformat(timespec="milliseconds")
    return formatted.replace("+00:00", "Z")


def is_empty_response(response: requests.Response) -> bool:
    """
    Check for Clockify's empty-payload responses.

    Chunked responses carry no length, so only a blank body counts as empty.
    Otherwise a Content-Length of 0 or 2 (``[]``) marks an empty window.
    """
    transfer_encoding = response.headers.get("Transfer-Encoding", "")
    if "chunked" in transfer_encoding.lower():
        return not response.content.strip()
    return response.headers.get("Content-Length") in EMPTY_CONTENT_LENGTHS


class WindowedFetcher:
    """Fetch a long interval as concurrent batches of short windows."""

    def __init__(
        self,
        batch_size: int = BATCH_SIZE,
        batch_pause: float = BATCH_PAUSE,
        max_window_days: int = MAX_WINDOW_DAYS,
    ) -> None:
        self.batch_size = batch_size
        self.batch_pause = batch_pause
        self.max_window_days = max_window_days

    async def fetch(
        self, client: ClockifyClient, url: str, start: datetime, end: datetime
    ) -> list[TimeEntry]:
        """
        Fetch every time entry between start and end.

        Any transport error or unparsable window aborts the whole fetch.
        Entry order across windows is not preserved.
        """
        windows = split_windows(start, end, self.max_window_days)
        logger.info("Fetching %d timesheet windows from %s to %s", len(windows), start, end)

        responses: list[requests.Response] = []
        for offset in range(0, len(windows), self.batch_size):
            batch = windows[offset : offset + self.batch_size]
            responses.extend(await self._run_batch(client, url, batch))
            has_next_batch = offset + self.batch_size < len(windows)
            if has_next_batch and len(responses) > self.batch_size:
                await asyncio.sleep(self.batch_pause)

        entries: list[TimeEntry] = []
        for response in responses:
            if is_empty_response(response):
                continue
            try:
                payload = response.json()
            except ValueError as e:
                msg = f"Timesheet response is not JSON: {e}"
                raise ResponseParseError(msg) from e
            client.dump_debug("time-entries", payload)
            entries.extend(parse_time_entries(payload))

        logger.info("Fetched %d time entries", len(entries))
        return entries

    async def _run_batch(
        self, client: ClockifyClient, url: str, batch: list[tuple[datetime, datetime]]
    ) -> list[requests.Response]:
        """Request one batch; the first failure cancels and awaits the rest."""
        try:
            async with asyncio.TaskGroup() as group:
                tasks = [group.create_task(self._request(client, url, *window)) for window in batch]
        except ExceptionGroup as e:
            raise e.exceptions[0] from None
        return [task.result() for task in tasks]

    @staticmethod
    async def _request(
        client: ClockifyClient, url: str, start: datetime, end: datetime
    ) -> requests.Response:
        logger.debug("Requesting timesheet window %s - %s", start, end)
        response = await client.send(
            "GET",
            url,
            params={
                "start": format_timestamp(start),
                "end": format_timestamp(end),
                "in-progress": "false",
                "page": "0",
                "page-size": "0",
            },
        )
        client.raise_for_status(response)
        return response
