"""Main Textual application."""

from dataclasses import replace
from typing import ClassVar

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Vertical
from textual.widgets import Footer, Header, LoadingIndicator

from clockrules.config import RunOptions
from clockrules.database import FirstDateCache
from clockrules.errors import ClockRulesError
from clockrules.overrides import GlobalSettings
from clockrules.report import Report, build_report
from clockrules.widgets import ResultsTable, StatsPanel


class ClockRulesApp(App):
    """ClockRules TUI application."""

    CSS = """
    #main-container {
        height: 100%;
    }

    Vertical {
        height: 100%;
    }

    #loading-indicator {
        layer: overlay;
        offset: 50% 50%;
        width: auto;
        height: auto;
        display: none;
    }

    #loading-indicator.visible {
        display: block;
    }

    #stats-panel {
        height: auto;
        padding: 1;
        background: $panel;
        border: solid $primary;
    }

    .stat-box {
        height: auto;
        padding: 0 1;
    }

    #results-table {
        height: 1fr;
        border: solid $primary;
        width: 100%;
    }
    """

    BINDINGS: ClassVar[list[Binding | tuple[str, str] | tuple[str, str, str]]] = [
        ("q", "quit", "Quit"),
        ("r", "refresh", "Refresh"),
        ("t", "toggle_today", "Toggle Today"),
        ("?", "help", "Help"),
    ]

    def __init__(
        self, options: RunOptions, settings: GlobalSettings, cache: FirstDateCache
    ) -> None:
        super().__init__()
        self.options = options
        self.settings = settings
        self.cache = cache
        self.report: Report | None = None

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield Header(show_clock=True)
        with Container(id="main-container"), Vertical():
            yield LoadingIndicator(id="loading-indicator")
            yield StatsPanel(id="stats-panel")
            yield ResultsTable(id="results-table")
        yield Footer()

    def on_mount(self) -> None:
        """Load data when the app starts."""
        self._update_title()
        self.load_data_async()

    def _update_title(self) -> None:
        today = "including today" if self.options.include_today else "until yesterday"
        self.title = f"ClockRules - {today}"

    def load_data_async(self) -> None:
        """Start async data loading."""
        loading = self.query_one("#loading-indicator", LoadingIndicator)
        loading.add_class("visible")
        self.run_worker(self._fetch_and_update(), exclusive=True)

    async def _fetch_and_update(self) -> None:
        """Fetch from Clockify, reconcile and show the results."""
        try:
            report = await build_report(self.options, self.settings, self.cache)
        except ClockRulesError as e:
            self.query_one("#loading-indicator", LoadingIndicator).remove_class("visible")
            self.notify(f"Failed to calculate balance: {e}", severity="error", timeout=10)
            return

        self.report = report
        self._update_ui(report)

    def _update_ui(self, report: Report) -> None:
        """Update UI components."""
        stats_panel = self.query_one("#stats-panel", StatsPanel)
        stats_panel.update_report(report)

        results_table = self.query_one("#results-table", ResultsTable)
        results_table.load_results(report.results, report.explicit_start)

        loading = self.query_one("#loading-indicator", LoadingIndicator)
        loading.remove_class("visible")

        # Focus the table so it can receive keyboard input
        results_table.focus()

        self.notify("Data loaded successfully", severity="information")

    def action_refresh(self) -> None:
        """Refresh data from Clockify."""
        self.notify("Refreshing data...", severity="information")
        self.load_data_async()

    def action_toggle_today(self) -> None:
        """Recalculate with today included or excluded."""
        self.options = replace(self.options, include_today=not self.options.include_today)
        self._update_title()
        self.load_data_async()

    def action_help(self) -> None:
        """Show help message."""
        help_text = """
        [bold]ClockRules - Keyboard Shortcuts[/bold]

        [cyan]q[/cyan] - Quit application
        [cyan]r[/cyan] - Refresh data from Clockify
        [cyan]t[/cyan] - Include or exclude today
        [cyan]?[/cyan] - Show this help

        [bold]Balance Rules:[/bold]
        • 7.5 hours expected per weekday
        • Public holidays, sick leave and parental leave are not expected
        • Vacation counts once taken, flex time off is paid from the balance
        """
        self.notify(help_text, title="Help", timeout=10)
