"""Text summary of results, shared by the TUI and plain output."""

from typing import TypeAlias

from rich.console import Console
from rich.table import Table

from clockrules.duration import Duration
from clockrules.models import WORK_DAY_HOURS, Results
from clockrules.report import Report

COLUMNS = ("Item", "Days", "Hours & minutes")
BALANCE_ITEM = "Work time balance"

Row: TypeAlias = tuple[str, str, str]


def format_duration(duration: Duration) -> str:
    """Format as 'H hours' or 'H hours, M minutes', negative with a leading '-'."""
    sign = "-" if duration.seconds < 0 else ""
    hours, minutes = abs(duration).hours_and_minutes()
    if minutes:
        return f"{sign}{hours} hours, {minutes} minutes"
    return f"{sign}{hours} hours"


def _row(item: str, days: int | None, duration: Duration | None = None) -> Row:
    """A table row; day counts without a duration are shown as default-length days."""
    if duration is None and days is not None:
        duration = Duration.from_hours(days * WORK_DAY_HOURS)
    return (
        item,
        "" if days is None else str(days),
        "" if duration is None else format_duration(duration),
    )


def result_rows(results: Results, show_start_balance: bool = False) -> list[Row]:
    """Rows of the results table, the balance last."""
    rows = [
        _row("Public holidays (on weekdays)", results.public_holiday_count),
        _row("Held parental leave weekdays", results.parental_leave_day_count),
        _row("Held vacation weekdays", results.held_vacation_day_count),
        _row("Future vacation weekdays", results.future_vacation_day_count),
        _row("Held flex time off", results.held_flex_time_off_day_count),
        _row("Future flex time off", results.future_flex_time_off_day_count),
        _row("Sick leave time", results.sick_leave_day_count),
        _row(
            "Expected working time (sick leaves & public holidays deducted)",
            results.filtered_expected_working_day_count,
            results.expected_working_time,
        ),
        _row("Total working time", results.working_day_count, results.worked_time),
    ]
    if show_start_balance:
        rows.append(_row("Start balance", None, results.start_balance))
    rows.append((BALANCE_ITEM, f"{results.balance_days}+", format_duration(results.balance)))
    return rows


def grinding_text(report: Report) -> str:
    """Since when the user has been working, as far as we know."""
    since = report.results.first_working_day.isoformat()
    if report.explicit_start:
        return f"You have been grinding at least since: {since}"
    return f"You have been grinding since: {since}"


def longest_day_text(results: Results) -> str:
    longest = results.longest_working_day
    hours, minutes = longest.duration.hours_and_minutes()
    return (
        f"Your longest grind is {hours} hours, {minutes} minutes. "
        f"You did it on {longest.date.strftime('%A')}, {longest.date.isoformat()}"
    )


def print_report(report: Report, console: Console | None = None) -> None:
    """Print the summary and results table without starting the TUI."""
    console = console or Console()
    table = Table(*COLUMNS, header_style="bold green")
    for row in result_rows(report.results, report.explicit_start):
        style = "bold" if row[0] == BALANCE_ITEM else None
        table.add_row(*row, style=style)

    console.print(grinding_text(report))
    console.print(longest_day_text(report.results))
    console.print(table)
