"""
Console output formatting using Rich.
"""

from datetime import datetime
from typing import List

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from business_day_calculator.data.schemas import (
    BusinessDayConfig,
    BusinessDayRange,
    BusinessDaySummary,
    ClosingSummary,
    ClosingWindow,
)

DATETIME_FORMAT = "%d.%m.%Y %H:%M:%S"
WEEKDAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def _fmt(value: datetime) -> str:
    return value.strftime(DATETIME_FORMAT)


class ConsoleFormatter:
    """Formats output for console display using Rich."""

    def __init__(self, console: Console = None):
        """
        Initialize the console formatter.

        Args:
            console: Optional Rich console, a new one is created if omitted.
        """
        self.console = console or Console()

    def print_config(self, config: BusinessDayConfig, hours: int) -> None:
        """Print the business day configuration in use."""
        table = Table(show_header=False, box=None)
        table.add_column("Label", style="cyan", width=20)
        table.add_column("Value", style="white")

        table.add_row("Starts at:", config.auto_start_time)
        table.add_row("Ends at:", config.business_day_end_hour or config.auto_start_time)
        table.add_row("Hours:", str(hours))

        self.console.print(Panel(table, title="[bold]Business Day[/bold]"))

    def print_range(self, anchor: datetime, business_day: BusinessDayRange) -> None:
        """
        Print the range of a single business day.

        Args:
            anchor: Anchor date of the business day.
            business_day: Computed range.
        """
        self.console.print()
        self.console.rule(
            f"[bold blue]Business Day {anchor.strftime('%d.%m.%Y')}[/bold blue]"
        )
        self.console.print()

        table = Table(show_header=False, box=None)
        table.add_column("Label", style="cyan", width=20)
        table.add_column("Value", style="white")
        table.add_row("Start:", _fmt(business_day.start))
        table.add_row("End:", _fmt(business_day.end))

        self.console.print(Panel(table, title="[bold]Range[/bold]"))
        self.console.print()

    def print_bucket(self, timestamp: datetime, business_day: datetime) -> None:
        """Print which business day a timestamp belongs to."""
        self.console.print(
            f"[cyan]{_fmt(timestamp)}[/cyan] belongs to the business day starting "
            f"[bold green]{_fmt(business_day)}[/bold green]"
        )

    def print_ranges(self, ranges: List[BusinessDayRange]) -> None:
        """
        Print a table of business day ranges.

        Args:
            ranges: Ranges to display, in order.
        """
        table = Table(title="[bold]Business Days[/bold]")
        table.add_column("Day", style="dim", width=10)
        table.add_column("Start", style="cyan")
        table.add_column("End", style="cyan")

        for business_day in ranges:
            table.add_row(
                WEEKDAY_NAMES[business_day.start.weekday()],
                _fmt(business_day.start),
                _fmt(business_day.end),
            )

        if ranges:
            self.console.print(table)
        else:
            self.console.print("[dim]No business days in this period.[/dim]")

    def print_summary(self, summary: ClosingSummary, title: str = "Closing Summary") -> None:
        """
        Print a closing summary.

        Args:
            summary: Summary to display.
            title: Panel title.
        """
        totals = Table(show_header=False, box=None)
        totals.add_column("Label", style="cyan", width=20)
        totals.add_column("Value", style="white", justify="right", width=12)

        totals.add_row("Transactions:", str(summary.transactions))
        totals.add_row("Tax:", f"{summary.total_tax:.2f}")
        totals.add_row("Tips:", f"{summary.total_tips:.2f}")
        totals.add_row("", "─" * 12)
        totals.add_row(
            Text("Total Sales:", style="bold green"),
            Text(f"{summary.total_sales:.2f}", style="bold green"),
        )

        self.console.print(Panel(totals, title=f"[bold]{title}[/bold]"))

        if summary.payment_methods:
            methods = Table(title="Payment Methods")
            methods.add_column("Method", style="white")
            methods.add_column("Count", justify="right")
            methods.add_column("Total", justify="right")
            for name, stats in sorted(summary.payment_methods.items()):
                methods.add_row(name, str(stats.count), f"{stats.total:.2f}")
            self.console.print(methods)

        if summary.tills:
            tills = Table(title="Tills")
            tills.add_column("Till", style="white")
            tills.add_column("Transactions", justify="right")
            tills.add_column("Total", justify="right")
            for name, stats in sorted(summary.tills.items()):
                tills.add_row(name, str(stats.transactions), f"{stats.total:.2f}")
            self.console.print(tills)

    def print_business_day_summaries(self, summaries: List[BusinessDaySummary]) -> None:
        """Print one summary per business day."""
        self.console.print()
        self.console.rule("[bold blue]Sales per Business Day[/bold blue]")
        self.console.print()

        if not summaries:
            self.console.print("[dim]No transactions found.[/dim]")
            return

        for day in summaries:
            self.print_summary(
                day.summary,
                title=f"{_fmt(day.window.start)} - {_fmt(day.window.end)}",
            )
            self.console.print()

    def print_closing_window(self, window: ClosingWindow) -> None:
        """Print the period covered by a closing."""
        self.console.print(
            f"Closing business day from [cyan]{_fmt(window.start)}[/cyan] "
            f"to [cyan]{_fmt(window.end)}[/cyan]"
        )

    def print_error(self, message: str) -> None:
        """
        Print an error message.

        Args:
            message: Error message to display.
        """
        self.console.print(f"[bold red]Error:[/bold red] {message}")

    def print_success(self, message: str) -> None:
        """
        Print a success message.

        Args:
            message: Success message to display.
        """
        self.console.print(f"[bold green]Success:[/bold green] {message}")
