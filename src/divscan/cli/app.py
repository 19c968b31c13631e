"""divscan CLI -- run the divergence engine over series files.

Commands:
    scan     -- Detect bullish/bearish divergences between price and an indicator
    extrema  -- List the strict local peaks and lows of one column
    stats    -- Show where the latest price sits relative to its extremes
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import structlog
import typer
from rich.console import Console

from divscan.cli.formatters import (
    format_divergence_table,
    format_error,
    format_extrema_table,
    format_price_stats,
    format_summary_panel,
)
from divscan.config.settings import ScanSettings, get_preset
from divscan.data.loader import (
    DEFAULT_DATE_COLUMN,
    DEFAULT_INDICATOR_COLUMN,
    DEFAULT_PRICE_COLUMN,
    SeriesLoadError,
    load_column,
    load_series,
)
from divscan.signals.divergence import (
    DivergenceInputError,
    detect_divergences,
    identify_peaks_lows,
    summarize_divergences,
)
from divscan.signals.price_stats import calculate_price_stats

app = typer.Typer(
    name="divscan",
    help="Price / indicator divergence scanner",
    rich_markup_mode="rich",
)
console = Console()


def configure_logging(verbose: bool) -> None:
    """Route structlog output to stderr, at DEBUG when verbose else WARNING."""
    level = logging.DEBUG if verbose else logging.WARNING
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Emit debug logs to stderr"
    ),
) -> None:
    """Price / indicator divergence scanner."""
    configure_logging(verbose)


def _fail(title: str, message: str) -> None:
    console.print(format_error(title, message))
    raise typer.Exit(code=1)


# ---------------------------------------------------------------------------
# scan
# ---------------------------------------------------------------------------


@app.command()
def scan(
    path: Path = typer.Argument(..., help="CSV or Parquet file, one row per bar"),
    order: Optional[int] = typer.Option(
        None, help="Half-width of the extremum neighborhood"
    ),
    min_strength: Optional[float] = typer.Option(
        None, help="Minimum combined percentage move to report"
    ),
    window_size: Optional[int] = typer.Option(
        None, help="Matching radius between price and indicator extrema"
    ),
    preset: Optional[str] = typer.Option(
        None, help="Named settings preset (default: DIVSCAN_* environment)"
    ),
    price_column: str = typer.Option(DEFAULT_PRICE_COLUMN, help="Price column"),
    indicator_column: str = typer.Option(
        DEFAULT_INDICATOR_COLUMN, help="Indicator column"
    ),
    date_column: str = typer.Option(DEFAULT_DATE_COLUMN, help="Date label column"),
    as_json: bool = typer.Option(False, "--json", help="Print records as JSON"),
) -> None:
    """Detect bullish and bearish divergences in a series file."""
    try:
        base = get_preset(preset) if preset is not None else ScanSettings.from_env()
        settings = base.replace(
            order=order, min_strength=min_strength, window_size=window_size
        ).validate()
    except KeyError as exc:
        _fail("Scan", exc.args[0])
    except DivergenceInputError as exc:
        _fail("Scan", str(exc))

    try:
        series = load_series(
            path,
            price_column=price_column,
            indicator_column=indicator_column,
            date_column=date_column,
        )
        patterns = detect_divergences(
            series.prices, series.indicator, series.dates, **settings.as_kwargs()
        )
    except (SeriesLoadError, DivergenceInputError) as exc:
        _fail("Scan", str(exc))

    if as_json:
        typer.echo(json.dumps([p.to_dict() for p in patterns], indent=2))
        return

    if patterns:
        console.print(format_divergence_table(patterns))
    console.print(format_summary_panel(summarize_divergences(patterns)))


# ---------------------------------------------------------------------------
# extrema
# ---------------------------------------------------------------------------


@app.command()
def extrema(
    path: Path = typer.Argument(..., help="CSV or Parquet file"),
    column: str = typer.Option(DEFAULT_PRICE_COLUMN, help="Column to scan"),
    order: int = typer.Option(5, help="Half-width of the extremum neighborhood"),
) -> None:
    """List strict local peaks and lows of one column."""
    try:
        values = load_column(path, column)
        data = identify_peaks_lows(values, order)
    except (SeriesLoadError, DivergenceInputError) as exc:
        _fail("Extrema", str(exc))

    console.print(format_extrema_table(data))


# ---------------------------------------------------------------------------
# stats
# ---------------------------------------------------------------------------


@app.command()
def stats(
    path: Path = typer.Argument(..., help="CSV or Parquet file"),
    price_column: str = typer.Option(DEFAULT_PRICE_COLUMN, help="Price column"),
) -> None:
    """Show the current price against its all-time high and low."""
    try:
        price_stats = calculate_price_stats(load_column(path, price_column))
    except (SeriesLoadError, ValueError) as exc:
        _fail("Price Statistics", str(exc))

    console.print(format_price_stats(price_stats))
