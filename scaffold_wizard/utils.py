"""Shared utility functions for the Scaffold Wizard.

Provides Rich-based developer console output and small formatting helpers.
The wizard core never prints to end users; everything here is aimed at
developers watching the console while the wizard runs.
"""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console(stderr=True)


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_ms(milliseconds: float) -> str:
    """Format a duration in milliseconds to a short human-readable string.

    Examples::

        format_ms(0.042)  -> "42µs"
        format_ms(3.7)    -> "3.70ms"
        format_ms(1520.0) -> "1.52s"
    """
    if milliseconds < 0:
        return "0.00ms"
    if milliseconds < 1:
        return f"{milliseconds * 1000:.0f}µs"
    if milliseconds < 1000:
        return f"{milliseconds:.2f}ms"
    return f"{milliseconds / 1000:.2f}s"


def describe_value(value: Any) -> str:
    """Render a configuration value for diagnostics and summaries."""
    if value is None:
        return "(not selected)"
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value) if value else "(none)"
    if isinstance(value, bool):
        return "yes" if value else "no"
    return str(value)


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, Any], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(escape(str(key)), escape(describe_value(value)))

    console.print(table)
    console.print()


def print_info(message: str) -> None:
    """Print a dimmed informational message."""
    console.print(f"[dim]{escape(message)}[/dim]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{escape(message)}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{escape(message)}[/bold yellow]")
