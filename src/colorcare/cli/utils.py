"""Shared CLI utilities — Rich console, error handling, gallery and config helpers."""

from __future__ import annotations

import csv
import functools
import io
import json
import logging
import traceback
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

if TYPE_CHECKING:
    from colorcare.config import AppConfig
    from colorcare.core import GalleryStore
    from colorcare.session.metrics import SessionMetrics
    from colorcare.session.serialization import RecordedSession

console = Console()

# Set by the --verbose flag on the top-level CLI group.
verbose: bool = False


def setup_logging(verbose_flag: bool) -> None:
    """Route library logging through Rich (DEBUG with --verbose, else WARNING)."""
    root = logging.getLogger("colorcare")
    root.handlers.clear()
    handler = RichHandler(console=console, show_path=False, rich_tracebacks=verbose_flag)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose_flag else logging.WARNING)


def open_gallery(path: str) -> GalleryStore:
    """Open a gallery with CLI-friendly error handling.

    Args:
        path: Path to the .colorcare directory.

    Returns:
        An open GalleryStore.

    Raises:
        SystemExit: With code 1 if the gallery is not found.
    """
    from colorcare.core import GalleryStore
    from colorcare.core.exceptions import GalleryNotFoundError

    try:
        return GalleryStore.open(Path(path))
    except GalleryNotFoundError:
        console.print(f"[red]Error:[/red] No gallery found at {path}")
        raise SystemExit(1)


def load_app_config(path: str | None) -> AppConfig:
    """Load the YAML config at ``path``, or the defaults when no path is given.

    Raises:
        SystemExit: With code 1 if the file is invalid.
    """
    from colorcare.config import AppConfig, load_config

    if path is None:
        return AppConfig()
    try:
        return load_config(Path(path))
    except (OSError, ValueError, TypeError) as e:
        console.print(f"[red]Error:[/red] Invalid config {path}: {e}")
        raise SystemExit(1)


def load_recorded_session(path: str) -> RecordedSession:
    """Load a session JSON file with CLI-friendly error handling.

    Raises:
        SystemExit: With code 1 if the file is malformed.
    """
    from colorcare.session.serialization import load_session

    try:
        return load_session(Path(path))
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)


def check_output_path(out_path: Path, overwrite: bool) -> None:
    """Exit 1 unless a file can be written at ``out_path``.

    Rejects directories, missing parent directories, and existing files
    when ``overwrite`` is not set.
    """
    problem = None
    if out_path.is_dir():
        problem = f"Output path is a directory: {out_path}"
    elif not out_path.parent.exists():
        problem = f"Parent directory does not exist: {out_path.parent}"
    elif out_path.exists() and not overwrite:
        problem = f"Output file already exists: {out_path} (use --overwrite to replace it)"
    if problem is not None:
        console.print(f"[red]Error:[/red] {problem}")
        raise SystemExit(1)


def metrics_rows(metrics: SessionMetrics) -> list[dict[str, Any]]:
    """Flatten session metrics into metric/value rows for display."""
    q = metrics.quadrant_activity
    return [
        {"metric": "neglect_ratio", "value": metrics.neglect_ratio},
        {"metric": "tremor_score", "value": metrics.tremor_score},
        {"metric": "total_time_seconds", "value": metrics.total_time_seconds},
        {"metric": "nudge_count", "value": metrics.nudge_count},
        {"metric": "quadrant_top_left", "value": q.top_left},
        {"metric": "quadrant_top_right", "value": q.top_right},
        {"metric": "quadrant_bottom_left", "value": q.bottom_left},
        {"metric": "quadrant_bottom_right", "value": q.bottom_right},
    ]


def error_handler(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator wrapping CLI commands with standard error handling.

    Catches ColorCareError and ReportError (exit 1) and unexpected
    exceptions (exit 2). With --verbose, unexpected errors include the
    full traceback.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        from colorcare.core.exceptions import ColorCareError
        from colorcare.report.backends import ReportError

        try:
            return func(*args, **kwargs)
        except SystemExit:
            raise
        except (ColorCareError, ReportError) as e:
            console.print(f"[red]Error:[/red] {e}")
            raise SystemExit(1)
        except Exception as e:
            if verbose:
                console.print(f"[red]Internal error:[/red] {e}")
                console.print(traceback.format_exc())
            else:
                console.print(
                    f"[red]Internal error:[/red] {type(e).__name__}: {e}\n"
                    "[dim]Use --verbose for the full traceback.[/dim]"
                )
            raise SystemExit(2)

    return wrapper


def format_output(
    rows: list[dict[str, Any]],
    columns: list[str],
    fmt: str,
    title: str,
) -> None:
    """Render rows in the requested format (table, csv, or json).

    Args:
        rows: List of dicts, each with keys matching columns.
        columns: Column names (display order).
        fmt: One of "table", "csv", "json".
        title: Title for table output.
    """
    if fmt == "table":
        table = Table(show_header=True, title=title)
        for col in columns:
            if col == columns[0]:
                table.add_column(col, style="bold")
            else:
                table.add_column(col)
        for row in rows:
            table.add_row(*(_cell(row.get(c)) for c in columns))
        console.print(table)
    elif fmt == "csv":
        buf = io.StringIO()
        writer = csv.writer(buf)
        writer.writerow(columns)
        for row in rows:
            writer.writerow([_cell(row.get(c)) for c in columns])
        console.print(
            buf.getvalue().rstrip(), markup=False, highlight=False, soft_wrap=True,
        )
    elif fmt == "json":
        console.print(json.dumps(rows, indent=2), markup=False, highlight=False, soft_wrap=True)


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        return f"{value:.3f}"
    return str(value)
