"""colorcare export — write every stored session to a CSV file."""

from __future__ import annotations

from pathlib import Path

import click

from colorcare.cli.utils import check_output_path, console, error_handler, open_gallery


@click.command()
@click.argument("output", type=click.Path())
@click.option("-g", "--gallery", "gallery_path", required=True, type=click.Path(exists=True),
              help="Path to the .colorcare gallery.")
@click.option("--overwrite", is_flag=True, help="Replace OUTPUT if it already exists.")
@error_handler
def export(output: str, gallery_path: str, overwrite: bool) -> None:
    """Export sessions to CSV, one row per session with quadrant columns."""
    out_path = Path(output).expanduser()
    check_output_path(out_path, overwrite)

    store = open_gallery(gallery_path)
    try:
        with console.status("[bold blue]Writing sessions..."):
            count = store.export_sessions_csv(out_path)
    finally:
        store.close()
    console.print(f"[green]Exported {count} session(s) to {out_path}[/green]")
