"""Central UI handler for shelldoc.

Single source of truth for Rich console styling. Import this instead of
instantiating Console() in every command file.

Usage:
    from shelldoc.ui import console, print_header, print_warning

    console.print("[success]History is clean[/success]")
    print_header("FILTER RESULTS")
"""

import sys

from rich.console import Console
from rich.table import Table
from rich.theme import Theme

SHELLDOC_THEME = Theme({
    "info": "bold cyan",
    "warning": "bold yellow",
    "error": "bold red",
    "success": "bold green",
    "cmd": "bold magenta",
    "path": "bold cyan",
    "dim": "dim white",
})

# Single console instance - import this, don't create your own
console = Console(
    theme=SHELLDOC_THEME,
    force_terminal=sys.stdout.isatty()
)


def print_header(title: str) -> None:
    """Print a styled section header with horizontal rules."""
    console.rule(f"[bold]{title}[/bold]")


def print_warning(msg: str) -> None:
    """Print a warning message in yellow."""
    console.print(f"[warning]WARNING:[/warning] {msg}")


def print_success(msg: str) -> None:
    """Print a success message in green."""
    console.print(f"[success]OK:[/success] {msg}")


def stats_table(stats: dict) -> Table:
    """Two-column table of filtering counters and rates."""
    table = Table(title="Filtering statistics", show_header=True, header_style="bold")
    table.add_column("Metric")
    table.add_column("Value", justify="right")

    for key, value in stats.items():
        if isinstance(value, float):
            table.add_row(key, f"{value:.1f}%")
        else:
            table.add_row(key, str(value))

    return table
