"""colorcare create — create a new gallery."""

from __future__ import annotations

from pathlib import Path

import click

from colorcare.cli.utils import console, error_handler


@click.command()
@click.argument("path", type=click.Path())
@click.option("--name", "-n", default=None, help="Gallery name.")
@error_handler
def create(path: str, name: str | None) -> None:
    """Create a new .colorcare gallery directory."""
    from colorcare.core import GalleryStore

    gallery_path = Path(path)
    store = GalleryStore.create(gallery_path, name=name or "")
    store.close()

    console.print(f"[green]Created gallery at {gallery_path}[/green]")
