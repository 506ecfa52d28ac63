"""Clockify API integration."""

from clockrules.clockify.client import ClockifyClient
from clockrules.clockify.windows import WindowedFetcher, split_windows

__all__ = ["ClockifyClient", "WindowedFetcher", "split_windows"]
