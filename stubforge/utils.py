"""Shared utility functions for stubforge.

Provides the Rich console used for all user-facing output, the small set of
message helpers the CLI reports through, and file-system helpers used by the
generator pipeline.  The generation engine itself never prints.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path

from rich.console import Console
from rich.table import Table

console = Console()
error_console = Console(stderr=True)


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def ensure_dir(path: str | Path) -> Path:
    """Create a directory (and parents) if it does not exist.

    Returns:
        The directory as a ``Path``.
    """
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path


def write_file(path: str | Path, content: str) -> Path:
    """Create missing parent directories, then write *content* to *path*.

    Line endings are written exactly as given. The write is not atomic: an
    ``OSError`` part-way through may leave a truncated file behind.
    """
    file_path = Path(path)
    ensure_dir(file_path.parent)
    file_path.write_text(content, encoding="utf-8", newline="")
    return file_path


def display_path(path: str | Path, root: str | Path | None = None) -> str:
    """Render *path* relative to *root* when it lives underneath it."""
    file_path = Path(path)
    if root is not None:
        try:
            return file_path.relative_to(root).as_posix()
        except ValueError:
            pass
    return str(file_path)


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message to stderr."""
    error_console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")


def print_comment(message: str) -> None:
    """Print a dim informational line."""
    console.print(f"[dim]{message}[/dim]")


def print_summary_table(
    rows: Mapping[str, str] | Iterable[tuple[str, str]],
    title: str = "Summary",
    columns: tuple[str, str] = ("Item", "Value"),
) -> None:
    """Print a two-column summary table.

    Args:
        rows: Mapping of label -> value, or an iterable of pairs.
        title: Table title.
        columns: Header labels for the two columns.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column(columns[0], style="dim", no_wrap=True)
    table.add_column(columns[1])

    items = rows.items() if isinstance(rows, Mapping) else rows
    for key, value in items:
        table.add_row(key, str(value))

    console.print(table)
