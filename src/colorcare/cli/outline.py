"""colorcare outline — turn a photo into a coloring-template outline."""

from __future__ import annotations

import dataclasses
from pathlib import Path

import click

from colorcare.cli.utils import (
    check_output_path,
    console,
    error_handler,
    load_app_config,
    open_gallery,
)


@click.command()
@click.argument("source")
@click.argument("output", type=click.Path())
@click.option("--low-threshold", type=float, default=None, help="Canny low hysteresis threshold (0-255).")
@click.option("--high-threshold", type=float, default=None, help="Canny high hysteresis threshold (0-255).")
@click.option("--max-dimension", type=int, default=None, help="Longest side after downscaling, in pixels.")
@click.option("--sigma", type=float, default=None, help="Gaussian blur sigma before edge detection.")
@click.option("--config", "config_path", type=click.Path(exists=True), default=None,
              help="YAML config file.")
@click.option("-g", "--gallery", "gallery_path", type=click.Path(exists=True), default=None,
              help="Also store the input and the outline in this gallery.")
@click.option("--overwrite", is_flag=True, help="Overwrite output file if it exists.")
@error_handler
def outline(
    source: str,
    output: str,
    low_threshold: float | None,
    high_threshold: float | None,
    max_dimension: int | None,
    sigma: float | None,
    config_path: str | None,
    gallery_path: str | None,
    overwrite: bool,
) -> None:
    """Extract a black-on-white outline PNG from SOURCE (file path or URL)."""
    from colorcare.outline import extract_outline, fetch_image_bytes, is_url

    out_path = Path(output).expanduser()
    check_output_path(out_path, overwrite)

    overrides = {
        k: v for k, v in {
            "low_threshold": low_threshold,
            "high_threshold": high_threshold,
            "max_dimension": max_dimension,
            "sigma": sigma,
        }.items() if v is not None
    }
    app_config = load_app_config(config_path)
    try:
        config = dataclasses.replace(app_config.outline, **overrides)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    if is_url(source):
        with console.status("[bold blue]Fetching image..."):
            data = fetch_image_bytes(source)
    else:
        src_path = Path(source).expanduser()
        if not src_path.is_file():
            console.print(f"[red]Error:[/red] Input file not found: {src_path}")
            raise SystemExit(1)
        data = src_path.read_bytes()

    with console.status("[bold blue]Extracting outline..."):
        png = extract_outline(data, config)
    out_path.write_bytes(png)
    console.print(f"[green]Wrote outline to {out_path}[/green]")

    if gallery_path is not None:
        store = open_gallery(gallery_path)
        try:
            source_image = store.add_image(data, kind="template_input")
            template = store.add_image(png, kind="template")
        finally:
            store.close()
        console.print(
            f"[green]Stored input {source_image.id} and template {template.id}[/green]"
        )
