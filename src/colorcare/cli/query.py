"""colorcare query — inspect stored sessions."""

from __future__ import annotations

import click

from colorcare.cli.utils import console, error_handler, format_output, open_gallery


@click.group()
@click.option(
    "-g", "--gallery", "gallery_path", required=True, type=click.Path(exists=True),
    help="Path to the .colorcare gallery.",
)
@click.pass_context
@error_handler
def query(ctx: click.Context, gallery_path: str) -> None:
    """Query gallery sessions."""
    ctx.ensure_object(dict)
    ctx.obj["store"] = open_gallery(gallery_path)


@query.result_callback()
@click.pass_context
def cleanup(ctx: click.Context, *args: object, **kwargs: object) -> None:
    """Close the store after any query subcommand completes."""
    store = ctx.obj.get("store")
    if store:
        store.close()


@query.command()
@click.option("--format", "fmt", type=click.Choice(["table", "csv", "json"]),
              default="table", help="Output format.")
@click.option("--image", "image_id", default=None, help="Only sessions for this image.")
@click.pass_context
@error_handler
def sessions(ctx: click.Context, fmt: str, image_id: str | None) -> None:
    """List recorded sessions, newest first."""
    store = ctx.obj["store"]
    records = store.get_sessions(image_id=image_id)

    if not records:
        console.print("[dim]No sessions found.[/dim]")
        return

    rows = [
        {
            "id": r.id,
            "image_id": r.image_id,
            "created_at": r.created_at,
            "completion_time": r.completion_time,
            "neglect_ratio": r.neglect_ratio,
            "tremor_index": r.tremor_index,
            "nudge_count": r.nudge_count,
        }
        for r in records
    ]
    columns = [
        "id", "image_id", "created_at", "completion_time",
        "neglect_ratio", "tremor_index", "nudge_count",
    ]
    format_output(rows, columns, fmt, "Sessions")


@query.command()
@click.option("--format", "fmt", type=click.Choice(["table", "csv", "json"]),
              default="table", help="Output format.")
@click.pass_context
@error_handler
def stats(ctx: click.Context, fmt: str) -> None:
    """Show session totals, averages and the 30-day activity trend."""
    from colorcare.session.stats import summarize_sessions

    store = ctx.obj["store"]
    summary = summarize_sessions(store.get_sessions(), store.count_images())

    rows = [
        {"stat": "total_sessions", "value": summary.total_sessions},
        {"stat": "total_images", "value": summary.total_images},
        {"stat": "average_neglect_ratio", "value": summary.average_neglect_ratio},
        {"stat": "average_tremor_index", "value": summary.average_tremor_index},
        {"stat": "average_completion_time", "value": summary.average_completion_time},
    ]
    format_output(rows, ["stat", "value"], fmt, "Session Statistics")

    if fmt == "table" and summary.activity_by_date:
        format_output(summary.activity_by_date, ["date", "count"], fmt, "Activity (last 30 days)")
