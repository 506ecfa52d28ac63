"""Fetch everything for one user and reconcile it."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import date
from typing import TypeVar

from clockrules.calculator import calculate_results
from clockrules.classifier import expand_time_off, group_work_days
from clockrules.clockify import ClockifyClient
from clockrules.config import RunOptions
from clockrules.database import FirstDateCache
from clockrules.errors import ClockRulesError
from clockrules.holidays import load_public_holidays
from clockrules.models import Day, Holiday, Results, User, WorkDay
from clockrules.overrides import GlobalSettings

logger = logging.getLogger(__name__)

DEFAULT_SINCE = date(2022, 1, 1)

T = TypeVar("T")


@dataclass(frozen=True)
class Report:
    """Results of one run together with whom they belong to."""

    user: User
    results: Results
    explicit_start: bool


async def _labelled(label: str, pending: Awaitable[T]) -> T:
    try:
        return await pending
    except ClockRulesError as e:
        logger.error("Failed to get %s: %s", label, e)
        e.add_note(f"while fetching {label}")
        raise


async def collect_days(
    client: ClockifyClient, since: date, today: date | None = None
) -> tuple[list[Holiday], list[WorkDay], list[Day]]:
    """
    Load public holidays, working days and days off concurrently.

    The first failure cancels the other fetches and is raised once they have stopped.
    """

    async def public_holidays() -> list[Holiday]:
        return await asyncio.to_thread(load_public_holidays, since)

    async def work_days() -> list[WorkDay]:
        worked = group_work_days(await client.fetch_work_items_since(since, today))
        logger.info(
            "Fetched %d time entries on %d working days",
            sum(work_day.entry_count for work_day in worked),
            len(worked),
        )
        return worked

    async def days_off() -> list[Day]:
        return expand_time_off(await client.fetch_time_off_items(), since)

    try:
        async with asyncio.TaskGroup() as group:
            holidays = group.create_task(_labelled("public holidays", public_holidays()))
            worked = group.create_task(_labelled("working days", work_days()))
            off = group.create_task(_labelled("days off", days_off()))
    except ExceptionGroup as e:
        raise e.exceptions[0] from None
    return holidays.result(), worked.result(), off.result()


async def build_report(
    options: RunOptions,
    settings: GlobalSettings,
    cache: FirstDateCache,
    today: date | None = None,
    client_factory: Callable[..., ClockifyClient] = ClockifyClient,
) -> Report:
    """
    Calculate the balance for the token's user.

    Without an explicit start date, the cached first working day (or a fixed
    early date) is used and the first working day found is cached afterwards.
    """
    since = options.start_date or cache.get_cached_first_date(options.token) or DEFAULT_SINCE
    debug_dir = options.debug_dir if options.debug else None

    with client_factory(options.token, debug_dir=debug_dir) as client:
        user = await client.resolve_user()
        policy = settings.for_email(user.email)
        public_holidays, work_days, days_off = await collect_days(client, since, today)

    results = calculate_results(
        public_holidays,
        work_days,
        days_off,
        include_today=options.include_today,
        start_balance_minutes=options.start_balance_minutes or 0,
        policy=policy,
        today=today,
    )

    if options.start_date is None:
        cache.set_cached_first_date(options.token, results.first_working_day)

    return Report(user=user, results=results, explicit_start=options.start_date is not None)
