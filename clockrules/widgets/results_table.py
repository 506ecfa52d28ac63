"""Results table widget showing the balance breakdown."""

from rich.text import Text
from textual.widgets import DataTable

from clockrules.models import Results
from clockrules.summary import BALANCE_ITEM, COLUMNS, result_rows


class ResultsTable(DataTable):
    """Table with one row per balance category."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self.cursor_type = "row"
        self.zebra_stripes = True

    def on_mount(self) -> None:
        """Set up the table columns."""
        item, days, hours = COLUMNS
        self.add_column(item)
        self.add_column(days, width=8)
        self.add_column(hours, width=24)

    def load_results(self, results: Results, show_start_balance: bool = False) -> None:
        """Load results into the table."""
        self.clear()
        for item, days, hours in result_rows(results, show_start_balance):
            if item == BALANCE_ITEM:
                style = "bold green" if results.balance.seconds >= 0 else "bold red"
                self.add_row(
                    Text(item, style=style),
                    Text(days, style=style),
                    Text(hours, style=style),
                    key=item,
                )
            else:
                self.add_row(item, days, hours, key=item)
