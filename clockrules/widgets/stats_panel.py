"""Stats panel widget showing the headline numbers."""

from textual.app import ComposeResult
from textual.containers import Container, Vertical
from textual.widgets import Static

from clockrules.report import Report
from clockrules.summary import format_duration, grinding_text, longest_day_text


class StatsPanel(Container):
    """Panel with the first working day, longest day and balance."""

    def compose(self) -> ComposeResult:
        """Compose the stats panel."""
        with Vertical(classes="stat-box"):
            yield Static("Loading...", id="stat-user")
            yield Static("", id="stat-since")
            yield Static("", id="stat-longest")
            yield Static("", id="stat-balance")

    def update_report(self, report: Report) -> None:
        """Update the displayed statistics."""
        results = report.results
        self.query_one("#stat-user", Static).update(
            f"[bold]{report.user.name}[/bold] <{report.user.email}>"
        )
        self.query_one("#stat-since", Static).update(grinding_text(report))
        self.query_one("#stat-longest", Static).update(longest_day_text(results))

        balance = format_duration(results.balance)
        if results.balance.seconds >= 0:
            self.query_one("#stat-balance", Static).update(
                f"[green][bold]Balance:[/bold] +{balance}[/green]"
            )
        else:
            self.query_one("#stat-balance", Static).update(
                f"[red][bold]Balance:[/bold] {balance}[/red]"
            )

        self.refresh()
