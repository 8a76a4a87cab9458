"""colorcare gallery — list, add and remove stored images."""

from __future__ import annotations

from pathlib import Path

import click

from colorcare.cli.utils import console, error_handler, format_output, open_gallery

_KINDS = ["artwork", "template", "template_input"]


@click.group()
@click.option(
    "-g", "--gallery", "gallery_path", required=True, type=click.Path(exists=True),
    help="Path to the .colorcare gallery.",
)
@click.pass_context
@error_handler
def gallery(ctx: click.Context, gallery_path: str) -> None:
    """Manage gallery images."""
    ctx.ensure_object(dict)
    ctx.obj["store"] = open_gallery(gallery_path)


@gallery.result_callback()
@click.pass_context
def cleanup(ctx: click.Context, *args: object, **kwargs: object) -> None:
    """Close the store after any gallery subcommand completes."""
    store = ctx.obj.get("store")
    if store:
        store.close()


@gallery.command("list")
@click.option("--kind", type=click.Choice(_KINDS), default=None, help="Filter by image kind.")
@click.option("--format", "fmt", type=click.Choice(["table", "csv", "json"]),
              default="table", help="Output format.")
@click.pass_context
@error_handler
def list_images(ctx: click.Context, kind: str | None, fmt: str) -> None:
    """List images, newest first."""
    store = ctx.obj["store"]
    images = store.get_images(kind=kind)

    if not images:
        console.print("[dim]No images found.[/dim]")
        return

    rows = [
        {
            "id": img.id,
            "kind": img.kind,
            "created_at": img.created_at,
            "storage_path": img.storage_path,
        }
        for img in images
    ]
    format_output(rows, ["id", "kind", "created_at", "storage_path"], fmt, "Gallery")


@gallery.command()
@click.argument("image_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--kind", type=click.Choice(_KINDS), default="artwork", help="Image kind.")
@click.pass_context
@error_handler
def add(ctx: click.Context, image_file: str, kind: str) -> None:
    """Add a PNG image to the gallery."""
    store = ctx.obj["store"]
    try:
        image = store.add_image(Path(image_file).read_bytes(), kind=kind)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)
    console.print(f"[green]Added {kind}:[/green] {image.id}")


@gallery.command()
@click.argument("image_id")
@click.pass_context
@error_handler
def delete(ctx: click.Context, image_id: str) -> None:
    """Delete an image and the sessions recorded against it."""
    store = ctx.obj["store"]
    store.delete_image(image_id)
    console.print(f"[green]Deleted image:[/green] {image_id}")


@gallery.command()
@click.option("--yes", is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
@error_handler
def clear(ctx: click.Context, yes: bool) -> None:
    """Delete every image in the gallery."""
    store = ctx.obj["store"]
    if not yes and not click.confirm("Delete all images and their sessions?"):
        console.print("[dim]Aborted.[/dim]")
        return
    count = store.clear_images()
    console.print(f"[green]Deleted {count} image(s)[/green]")
