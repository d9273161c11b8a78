"""Shared utility functions for crxforge.

Provides JSON I/O and the Rich-based terminal output (status lines,
validation tables, spinners) used by the scaffolder and CLI.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

if TYPE_CHECKING:
    from crxforge.manifest.validator import ValidationResult

console = Console()
err_console = Console(stderr=True)

_debug_enabled = False


# ---------------------------------------------------------------------------
# JSON I/O
# ---------------------------------------------------------------------------


def load_json(path: str | Path) -> Any:
    """Load and parse a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
    """
    raw = Path(path).read_text(encoding="utf-8")
    return json.loads(raw)


def dump_json(data: Any) -> str:
    """Serialise *data* the way crxforge writes JSON files (2-space, trailing newline)."""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def set_debug(enabled: bool) -> None:
    """Toggle :func:`print_debug` output."""
    global _debug_enabled
    _debug_enabled = enabled


def print_info(message: str) -> None:
    """Print a blue informational message."""
    console.print(f"[bold blue]i[/bold blue] {message}")


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]✓[/bold green] {message}")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]![/bold yellow] {message}")


def print_error(message: str) -> None:
    """Print a red error message to stderr."""
    err_console.print(f"[bold red]✗[/bold red] {message}")


def print_debug(message: str) -> None:
    """Print a dim debug message, only when debug output is enabled."""
    if _debug_enabled:
        console.print(f"[dim]debug: {message}[/dim]")


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_validation_result(result: "ValidationResult", title: str = "Manifest validation") -> None:
    """Print every issue of a validation result, not only the first one."""
    if result.valid:
        print_success(f"{title}: no problems found")
        return

    table = Table(title=title, show_header=True, header_style="bold red")
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Severity")
    table.add_column("Message")
    table.add_column("Description", style="dim")

    for issue in result.errors:
        table.add_row(issue.field, issue.severity.value, issue.message, issue.description or "")

    console.print(table)
    console.print()


def create_progress() -> Progress:
    """Create a Rich spinner progress for scaffolding steps.

    Returns:
        A ``Progress`` instance suitable for use as a context manager.
    """
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )
