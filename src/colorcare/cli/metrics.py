"""colorcare metrics — compute session metrics from a recorded session file."""

from __future__ import annotations

import dataclasses
import json

import click

from colorcare.cli.utils import (
    console,
    error_handler,
    format_output,
    load_app_config,
    load_recorded_session,
    metrics_rows,
)


@click.command()
@click.argument("session_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--format", "fmt", type=click.Choice(["table", "csv", "json"]),
              default="table", help="Output format.")
@click.option("--tremor-threshold", type=float, default=None,
              help="Micro-movement threshold in pixels.")
@click.option("--config", "config_path", type=click.Path(exists=True), default=None,
              help="YAML config file.")
@error_handler
def metrics(
    session_file: str,
    fmt: str,
    tremor_threshold: float | None,
    config_path: str | None,
) -> None:
    """Compute neglect, tremor, timing and nudge metrics for SESSION_FILE."""
    config = load_app_config(config_path).metrics
    if tremor_threshold is not None:
        try:
            config = dataclasses.replace(config, tremor_threshold_px=tremor_threshold)
        except ValueError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise SystemExit(1)

    recorded = load_recorded_session(session_file)
    result = recorded.compute_metrics(config)

    if fmt == "json":
        console.print(
            json.dumps(result.to_dict(), indent=2),
            markup=False, highlight=False, soft_wrap=True,
        )
    else:
        format_output(metrics_rows(result), ["metric", "value"], fmt, "Session Metrics")
