"""colorcare report — caregiver summary for a recorded session."""

from __future__ import annotations

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
@click.option("--context", default=None, help="What was colored, e.g. 'a sunflower'.")
@click.option("--config", "config_path", type=click.Path(exists=True), default=None,
              help="YAML config file.")
@error_handler
def report(session_file: str, context: str | None, config_path: str | None) -> None:
    """Compute metrics for SESSION_FILE and generate a caregiver summary."""
    from colorcare.report import OpenAIBackend, ReportGenerator

    config = load_app_config(config_path)
    recorded = load_recorded_session(session_file)
    result = recorded.compute_metrics(config.metrics)
    format_output(metrics_rows(result), ["metric", "value"], "table", "Session Metrics")

    backend = OpenAIBackend.from_env(
        api_key_env=config.report.api_key_env, base_url=config.report.base_url,
    )
    generator = ReportGenerator(
        backend,
        primary_model=config.report.primary_model,
        fallback_model=config.report.fallback_model,
    )
    with console.status("[bold blue]Generating summary..."):
        analysis = generator.analyze(result, context)

    console.print("\n[bold]Caregiver summary[/bold]")
    console.print(analysis, markup=False)
