"""Tests for the text summary."""

import dataclasses
from datetime import date
from io import StringIO

import pytest
from rich.console import Console

from clockrules.calculator import calculate_results
from clockrules.duration import Duration
from clockrules.models import User
from clockrules.report import Report
from clockrules.summary import (
    BALANCE_ITEM,
    format_duration,
    grinding_text,
    longest_day_text,
    print_report,
    result_rows,
)


@pytest.fixture
def results(make_work_day):
    work_days = [
        make_work_day(date(2024, 1, 8), 7.5),
        make_work_day(date(2024, 1, 9), 9.75),
        make_work_day(date(2024, 1, 10), 6),
    ]
    return calculate_results([], work_days, [], start_balance_minutes=30, today=date(2024, 1, 11))


@pytest.fixture
def report(results):
    user = User(id=1, workspace_id=2, name="Maija", email="m@example.com")
    return Report(user=user, results=results, explicit_start=False)


@pytest.mark.parametrize(
    ("seconds", "text"),
    [
        (27000, "7 hours, 30 minutes"),
        (7200, "2 hours"),
        (0, "0 hours"),
        (-1800, "-0 hours, 30 minutes"),
        (-27000, "-7 hours, 30 minutes"),
    ],
)
def test_format_duration(seconds, text):
    """Hours always shown, minutes only when non-zero."""
    assert format_duration(Duration(seconds)) == text


def test_result_rows(results):
    """Day counts are shown with their default-length time."""
    rows = result_rows(results)

    assert rows[0] == ("Public holidays (on weekdays)", "0", "0 hours")
    assert rows[-2] == ("Total working time", "3", "23 hours, 15 minutes")
    assert rows[-1] == (BALANCE_ITEM, "0+", "1 hours, 15 minutes")
    assert "Start balance" not in [row[0] for row in rows]


def test_result_rows_with_start_balance(results):
    """The start balance row is shown for explicit start dates."""
    rows = result_rows(results, show_start_balance=True)

    assert rows[-2] == ("Start balance", "", "0 hours, 30 minutes")


def test_result_rows_negative_balance(results):
    """A deficit of more than a day shows negative days."""
    rows = result_rows(dataclasses.replace(results, balance=Duration(-2 * 27000 - 60)))

    assert rows[-1] == (BALANCE_ITEM, "-2+", "-15 hours, 1 minutes")


def test_grinding_text(report):
    """Explicit start dates are a lower bound."""
    assert grinding_text(report) == "You have been grinding since: 2024-01-08"
    explicit = dataclasses.replace(report, explicit_start=True)
    assert grinding_text(explicit) == "You have been grinding at least since: 2024-01-08"


def test_longest_day_text(results):
    """The longest day is named with its weekday."""
    assert longest_day_text(results) == (
        "Your longest grind is 9 hours, 45 minutes. You did it on Tuesday, 2024-01-09"
    )


def test_print_report(report):
    """Plain output contains the summary and the table."""
    output = StringIO()

    print_report(report, Console(file=output, width=120))

    text = output.getvalue()
    assert "You have been grinding since: 2024-01-08" in text
    assert "Work time balance" in text
    assert "1 hours, 15 minutes" in text
