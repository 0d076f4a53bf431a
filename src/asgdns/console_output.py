"""Console output formatting for the asgdns CLI."""
from __future__ import annotations

from rich.console import Console
from rich.table import Table

from .dns import DnsTarget, RecordChange


class ConsoleOutput:
    """Handles formatting and displaying output to the console."""

    def __init__(self):
        """Initialize console output with a Rich console instance."""
        self.console = Console()

    def print_target(self, target: DnsTarget, canonical: str) -> None:
        """Print the record a DNS tag resolves to.

        Args:
            target: Parsed tag value
            canonical: Shortest tag form for the same target
        """
        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Hosted Zone", style="green")
        table.add_column("Type", style="magenta")
        table.add_column("Record Name", style="yellow")
        table.add_column("TTL", justify="right")

        table.add_row(target.hosted_zone_id, target.record_type, target.record_name, str(target.ttl))

        self.console.print("\n[bold underline]DNS Target[/bold underline]")
        self.console.print(table)
        self.console.print(f"Canonical tag value: [bold]{canonical}[/bold]")

    def print_change(self, change: RecordChange) -> None:
        """Print a Route53 record change.

        Args:
            change: The change built for a notification
        """
        action_style = "green" if change.action == "UPSERT" else "red"

        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Action", style=action_style)
        table.add_column("Name", style="yellow")
        table.add_column("Type", style="magenta")
        table.add_column("Set Identifier", style="green")
        table.add_column("Weight", justify="right")
        table.add_column("TTL", justify="right")
        table.add_column("Value", style="blue")

        table.add_row(
            change.action,
            change.name,
            change.record_type,
            change.set_identifier,
            str(change.weight),
            str(change.ttl),
            change.value,
        )

        self.console.print("\n[bold underline]Route53 Change[/bold underline]")
        self.console.print(table)

    def print_error(self, message: str) -> None:
        """Print an error message."""
        self.console.print(f"[red]Error: {message}[/red]")

    def print_success(self, message: str) -> None:
        """Print a success message."""
        self.console.print(f"[green]{message}[/green]")

    def print_warning(self, message: str) -> None:
        """Print a warning message."""
        self.console.print(f"[yellow]Warning: {message}[/yellow]")
