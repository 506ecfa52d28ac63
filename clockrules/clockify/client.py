"""Clockify session management and data fetching."""

import asyncio
import logging
from datetime import UTC, date, datetime, time
from pathlib import Path
from typing import Any, Self

import requests
from requests.adapters import HTTPAdapter

from clockrules.clockify.debug import DebugSink
from clockrules.clockify.records import parse_time_off_response, parse_user
from clockrules.clockify.windows import BATCH_SIZE, WindowedFetcher
from clockrules.errors import RemoteRequestError, ResponseParseError
from clockrules.models import TimeEntry, TimeOffItem, User

logger = logging.getLogger(__name__)

API_URL = "https://global.api.clockify.me/"
REQUEST_TIMEOUT = 30  # seconds

USER_ATTEMPTS = 3
USER_RETRY_DELAY = 2.0  # seconds
RATE_LIMIT_DELAYS = (0.6, 0.75, 1.25, 2.0)  # seconds
TIME_OFF_PAGE_SIZE = 500


def _is_transient(error: Exception) -> bool:
    """Client errors other than rate limiting will not go away by retrying."""
    if not isinstance(error, RemoteRequestError) or error.status_code is None:
        return True
    status = error.status_code
    return not (400 <= status < 500) or status == requests.codes.too_many_requests


class ClockifyClient:
    """Authenticated Clockify session bound to one API token."""

    def __init__(
        self,
        token: str,
        base_url: str = API_URL,
        debug_dir: Path | None = None,
        fetcher: WindowedFetcher | None = None,
    ) -> None:
        self._token = token
        self._base_url = base_url
        self._debug_sink = DebugSink(debug_dir) if debug_dir else None
        self._fetcher = fetcher or WindowedFetcher()
        self._session: requests.Session | None = None
        self._user: User | None = None

    def __enter__(self) -> Self:
        self._session = requests.Session()
        self._session.headers["x-api-key"] = self._token
        # One pooled connection per concurrent timesheet window
        adapter = HTTPAdapter(pool_maxsize=BATCH_SIZE)
        self._session.mount("https://", adapter)
        self._session.mount("http://", adapter)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._session:
            self._session.close()
        self._session = None

    @property
    def session(self) -> requests.Session:
        """Get the active session."""
        if not self._session:
            msg = "ClockifyClient should be used as a context manager"
            raise RuntimeError(msg)
        return self._session

    @property
    def user(self) -> User:
        """Get the resolved user."""
        if not self._user:
            msg = "resolve_user() must be awaited first"
            raise RuntimeError(msg)
        return self._user

    async def send(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        """Run one blocking request in a worker thread."""
        try:
            return await asyncio.to_thread(
                self.session.request, method, url, timeout=REQUEST_TIMEOUT, **kwargs
            )
        except requests.RequestException as e:
            msg = f"{method} {url} failed: {e}"
            raise RemoteRequestError(msg) from e

    @staticmethod
    def raise_for_status(response: requests.Response) -> None:
        """Turn an HTTP error status into RemoteRequestError."""
        if not response.ok:
            msg = f"Clockify responded {response.status_code} for {response.url}"
            raise RemoteRequestError(msg, status_code=response.status_code)

    def dump_debug(self, label: str, payload: Any) -> None:
        """Snapshot a raw payload when debugging is enabled."""
        if self._debug_sink:
            self._debug_sink.write(label, payload)

    @staticmethod
    def _json(response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            msg = f"Response from {response.url} is not JSON: {e}"
            raise ResponseParseError(msg) from e

    async def resolve_user(self) -> User:
        """
        Fetch the user owning the token.

        Transient failures are retried up to three attempts with a fixed pause.
        Client errors such as a rejected token propagate at once.
        """
        url = f"{self._base_url}v1/user"
        for attempt in range(1, USER_ATTEMPTS + 1):
            try:
                response = await self.send("GET", url)
                self.raise_for_status(response)
                payload = self._json(response)
                break
            except (RemoteRequestError, ResponseParseError) as e:
                if attempt == USER_ATTEMPTS or not _is_transient(e):
                    raise
                logger.warning(
                    "Fetching user failed (attempt %d/%d): %s", attempt, USER_ATTEMPTS, e
                )
                await asyncio.sleep(USER_RETRY_DELAY)

        self.dump_debug("user", payload)
        self._user = parse_user(payload)
        logger.info("Resolved Clockify user %s", self._user.email)
        return self._user

    async def fetch_work_items_since(
        self, since: date, today: date | None = None
    ) -> list[TimeEntry]:
        """Fetch time entries from the start of ``since`` to the end of today."""
        if today is None:
            today = datetime.now(UTC).date()
        start = datetime.combine(since, time.min, tzinfo=UTC)
        end = datetime.combine(today, time(23, 59, 59), tzinfo=UTC)
        url = (
            f"{self._base_url}workspaces/{self.user.workspace_hex}"
            f"/timeEntries/users/{self.user.id_hex}/timesheet"
        )
        return await self._fetcher.fetch(self, url, start, end)

    async def fetch_time_off_items(self) -> list[TimeOffItem]:
        """
        Fetch the user's approved time-off requests.

        Rate-limited (429) responses are retried with escalating pauses; once the
        pauses run out the last status decides.
        """
        url = f"{self._base_url}workspaces/{self.user.workspace_hex}/time-off/requests"
        body = {
            "page": 1,
            "pageSize": TIME_OFF_PAGE_SIZE,
            "status": ["APPROVED"],
            "users": {
                "contains": "CONTAINS",
                "ids": [self.user.id_hex],
                "status": "ALL",
            },
            "userGroups": {},
        }

        response = await self.send("POST", url, json=body)
        for delay in RATE_LIMIT_DELAYS:
            if response.status_code != requests.codes.too_many_requests:
                break
            logger.info("Time-off request rate limited, retrying in %.2f s", delay)
            await asyncio.sleep(delay)
            response = await self.send("POST", url, json=body)

        self.raise_for_status(response)
        payload = self._json(response)
        self.dump_debug("time-off", payload)
        items = parse_time_off_response(payload)
        logger.info("Fetched %d time-off requests", len(items))
        return items
