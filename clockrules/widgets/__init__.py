"""Textual widgets for the TUI."""

from clockrules.widgets.results_table import ResultsTable
from clockrules.widgets.stats_panel import StatsPanel

__all__ = ["ResultsTable", "StatsPanel"]
