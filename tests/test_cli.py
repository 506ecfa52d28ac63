"""Tests for command line parsing."""

import argparse
import io
from datetime import date

import pytest

from clockrules.__main__ import parse_options, resolve_token, start_date
from clockrules.config import Config
from clockrules.errors import ConfigNotFoundError


def test_start_date():
    """Start dates from 2023 onwards are accepted."""
    assert start_date("2023-01-01") == date(2023, 1, 1)
    assert start_date("2024-02-29") == date(2024, 2, 29)


@pytest.mark.parametrize("value", ["2022-12-31", "yesterday", "2024-02-30"])
def test_start_date_rejected(value):
    """Too early or malformed dates are rejected."""
    with pytest.raises(argparse.ArgumentTypeError):
        start_date(value)


def test_parse_defaults():
    """Running without arguments starts a plain run."""
    args = parse_options([])

    assert args.command == "run"
    assert args.token is None
    assert args.start_date is None
    assert not args.include_today
    assert not args.plain
    assert args.log_level == "WARNING"


def test_parse_all_options():
    """Short flags map to the run options."""
    args = parse_options(["-t", "abc", "-s", "2024-01-08", "-b", "-90", "-i", "--plain"])

    assert args.token == "abc"
    assert args.start_date == date(2024, 1, 8)
    assert args.start_balance == -90
    assert args.include_today
    assert args.plain


def test_start_balance_requires_start_date():
    """A start balance without a start date is a usage error."""
    with pytest.raises(SystemExit):
        parse_options(["-b", "60"])


def test_early_start_date_is_usage_error():
    """The date validator surfaces as a usage error."""
    with pytest.raises(SystemExit):
        parse_options(["-s", "2022-06-01"])


def test_token_from_environment(monkeypatch):
    """The environment is used when no token is passed."""
    monkeypatch.delenv("CLOCKIFY_TOKEN", raising=False)
    monkeypatch.setenv("TOKEN", "from-env")

    assert resolve_token(parse_options([])) == "from-env"
    assert resolve_token(parse_options(["-t", "explicit"])) == "explicit"


def test_missing_token_without_terminal(monkeypatch):
    """Without a terminal to prompt on, a missing token is an error."""
    monkeypatch.delenv("CLOCKIFY_TOKEN", raising=False)
    monkeypatch.delenv("TOKEN", raising=False)
    monkeypatch.setattr(Config, "load", classmethod(lambda cls, path=None: None))
    monkeypatch.setattr("sys.stdin", io.StringIO())

    with pytest.raises(ConfigNotFoundError):
        resolve_token(parse_options([]))
