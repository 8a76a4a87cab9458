"""ColorCare CLI — top-level Click group."""

from __future__ import annotations

import click


@click.group()
@click.version_option(package_name="colorcare")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging and full tracebacks on errors.")
def cli(verbose: bool) -> None:
    """ColorCare — coloring templates and care-session metrics."""
    from colorcare.cli import utils

    utils.verbose = verbose
    utils.setup_logging(verbose)


def _register_commands() -> None:
    """Attach every subcommand to the top-level group."""
    from colorcare.cli.create import create
    from colorcare.cli.export import export
    from colorcare.cli.gallery import gallery
    from colorcare.cli.metrics import metrics
    from colorcare.cli.outline import outline
    from colorcare.cli.query import query
    from colorcare.cli.report import report

    cli.add_command(create)
    cli.add_command(export)
    cli.add_command(gallery)
    cli.add_command(metrics)
    cli.add_command(outline)
    cli.add_command(query)
    cli.add_command(report)


_register_commands()
