"""Click-based CLI for pricebook-converter.

Thin wrapper around library modules. Zero business logic: every operation
delegates to the pipeline, config, and conversion modules.
"""

from __future__ import annotations

import logging

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

console = Console(stderr=True)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _configure_logging(verbose: bool) -> None:
    """Route library logging through Rich on the stderr console."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _currency_option(
    ctx: click.Context, param: click.Parameter, value: str | None
) -> str | None:
    """Validate --currency eagerly so a bad code fails before any I/O."""
    if value is None:
        return None
    from pricebook_converter.core import InvalidCurrencyCodeError
    from pricebook_converter.conversion import validate_currency_code

    try:
        return validate_currency_code(value)
    except InvalidCurrencyCodeError as exc:
        raise click.BadParameter(str(exc)) from exc


def _output_summary_table(outcome) -> None:
    """Render conversion counters as a Rich table."""
    table = Table(title="Conversion Summary")
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")

    table.add_row("Headers rewritten", str(outcome.stats.headers))
    table.add_row("Price tables", str(outcome.stats.price_tables))
    table.add_row("Amounts converted", str(outcome.stats.amounts))
    table.add_row("Price-info maps", str(outcome.stats.price_infos))
    table.add_row("Chunks written", str(outcome.stats.chunks))

    console.print(table)


def _report_outcome(outcome, verbose: bool) -> None:
    """Print where the output went and whether it passed validation."""
    path = escape(str(outcome.output_path))
    if verbose:
        _output_summary_table(outcome)

    if outcome.report is None:
        console.print(
            f"[green]✓[/green] Updated XML saved to {path} (validation skipped)."
        )
    elif outcome.report.valid:
        console.print(f"[green]✓[/green] Updated XML saved to {path} and is valid.")
    else:
        console.print(f"[yellow]Updated XML saved to {path} but is invalid:[/yellow]")
        for violation in outcome.report.errors:
            console.print(f"  - {escape(str(violation))}")


# ---------------------------------------------------------------------------
# Command
# ---------------------------------------------------------------------------


@click.command()
@click.option(
    "--input",
    "-i",
    "input_path",
    type=click.Path(exists=True, dir_okay=False),
    required=True,
    help="Input pricebook XML file.",
)
@click.option(
    "--output",
    "-o",
    "output_path",
    type=click.Path(dir_okay=False),
    required=True,
    help="Output XML file. Its name without extension becomes the pricebook id.",
)
@click.option(
    "--currency",
    "-c",
    type=str,
    default=None,
    callback=_currency_option,
    help="Currency to convert the prices to (3 letters). Default: RON.",
)
@click.option(
    "--exchange-rate",
    "--exchangeRate",
    "-r",
    "exchange_rate",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Exchange rate between the old and new currencies. Default: 5.03.",
)
@click.option(
    "--xsd",
    "-x",
    "xsd_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="XSD file used to validate the output. Default: pricebook.xsd.",
)
@click.option(
    "--no-validate",
    is_flag=True,
    default=False,
    help="Skip XSD validation of the output.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True),
    envvar="PRICEBOOK_CONVERTER_CONFIG",
    default=None,
    help="Path to pricebook-converter.yml config file.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable verbose output.",
)
@click.version_option(package_name="pricebook-converter")
def cli(
    input_path: str,
    output_path: str,
    currency: str | None,
    exchange_rate: float | None,
    xsd_path: str | None,
    no_validate: bool,
    config_path: str | None,
    verbose: bool,
) -> None:
    """Pricebook Converter: convert a pricebook XML into another currency."""
    from pricebook_converter.core import PricebookError, load_config
    from pricebook_converter.pipeline import convert_pricebook

    _configure_logging(verbose)

    try:
        config = load_config(config_path=config_path).with_overrides(
            currency=currency,
            exchange_rate=exchange_rate,
            xsd_path=xsd_path,
            validate_output=False if no_validate else None,
        )
        outcome = convert_pricebook(input_path, output_path, config)
    except PricebookError as exc:
        console.print(f"[red]Error processing the XML:[/red] {escape(str(exc))}")
        if verbose and exc.context:
            console.print(exc.context)
        raise SystemExit(1)

    _report_outcome(outcome, verbose)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
