"""Load aligned date / price / indicator series from CSV or Parquet files.

Files are read with PyArrow. A row is kept only if both its price and its
indicator value are present and finite; rows are dropped whole, so the three
output sequences stay index-aligned. Oscillators such as RSI have a warm-up
period of missing values at the start, and dropping those rows (rather than
filtering the indicator alone) keeps every index pointing at the same bar.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from pathlib import Path

import pyarrow as pa
import pyarrow.csv as pacsv
import pyarrow.parquet as pq
import structlog

logger = structlog.get_logger()

DEFAULT_DATE_COLUMN = "date"
DEFAULT_PRICE_COLUMN = "close"
DEFAULT_INDICATOR_COLUMN = "rsi"


class SeriesLoadError(Exception):
    """Raised when a series file cannot be read or lacks required columns."""


@dataclass
class AlignedSeries:
    """Index-aligned series ready for the divergence scanner.

    Attributes
    ----------
    dates : list[str]
        Date labels, ISO formatted when the source column is a date type.
    prices : list[float]
    indicator : list[float]
    dropped_rows : int
        Rows discarded because the price or indicator was missing.
    """

    dates: list[str] = field(default_factory=list)
    prices: list[float] = field(default_factory=list)
    indicator: list[float] = field(default_factory=list)
    dropped_rows: int = 0

    def __len__(self) -> int:
        return len(self.prices)


def read_table(path: str | Path, text_columns: list[str] | None = None) -> pa.Table:
    """Read a CSV or Parquet file into a PyArrow table.

    ``text_columns`` are kept as strings when reading CSV so date labels are
    not reinterpreted by type inference.
    """
    path = Path(path)
    if not path.exists():
        raise SeriesLoadError(f"Series file not found: {path}")

    suffix = path.suffix.lower()
    try:
        if suffix == ".csv":
            convert = pacsv.ConvertOptions(
                column_types={c: pa.string() for c in text_columns or []}
            )
            return pacsv.read_csv(path, convert_options=convert)
        if suffix in (".parquet", ".pq"):
            return pq.read_table(path)
    except (pa.ArrowInvalid, OSError) as exc:
        raise SeriesLoadError(f"Could not read {path}: {exc}") from exc

    raise SeriesLoadError(
        f"Unsupported file type {suffix!r} for {path} (expected .csv or .parquet)"
    )


def load_column(path: str | Path, column: str) -> list[float]:
    """Read one numeric column, one value per file row.

    Missing cells become NaN in place, so list positions are file row
    numbers. NaN is never reported as an extremum.
    """
    table = read_table(path)
    _require_columns(table, [column], path)
    return [
        math.nan if v is None else v for v in _float_column(table, column, path)
    ]


def load_series(
    path: str | Path,
    price_column: str = DEFAULT_PRICE_COLUMN,
    indicator_column: str = DEFAULT_INDICATOR_COLUMN,
    date_column: str = DEFAULT_DATE_COLUMN,
) -> AlignedSeries:
    """Load and align the three series from a single file.

    Parameters
    ----------
    path : str | Path
        CSV or Parquet file with one row per bar.
    price_column, indicator_column, date_column : str
        Column names to read.

    Returns
    -------
    AlignedSeries

    Raises
    ------
    SeriesLoadError
        If the file is missing, unreadable, or lacks a requested column.
    """
    table = read_table(path, text_columns=[date_column])
    _require_columns(table, [date_column, price_column, indicator_column], path)

    raw_dates = table.column(date_column).to_pylist()
    raw_prices = _float_column(table, price_column, path)
    raw_indicator = _float_column(table, indicator_column, path)

    series = AlignedSeries()
    for date, price, ind in zip(raw_dates, raw_prices, raw_indicator):
        if not (_is_finite(price) and _is_finite(ind)):
            series.dropped_rows += 1
            continue
        series.dates.append(_label(date))
        series.prices.append(price)
        series.indicator.append(ind)

    logger.info(
        "series_loaded",
        path=str(path),
        rows=len(series),
        dropped_rows=series.dropped_rows,
    )
    return series


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------


def _require_columns(table: pa.Table, columns: list[str], path) -> None:
    missing = [c for c in columns if c not in table.column_names]
    if missing:
        raise SeriesLoadError(
            f"{path} is missing column(s) {missing}; "
            f"available: {table.column_names}"
        )


def _float_column(table: pa.Table, column: str, path) -> list:
    try:
        return table.column(column).cast(pa.float64()).to_pylist()
    except (pa.ArrowInvalid, pa.ArrowNotImplementedError) as exc:
        raise SeriesLoadError(
            f"Column {column!r} in {path} is not numeric: {exc}"
        ) from exc


def _is_finite(value) -> bool:
    return value is not None and math.isfinite(value)


def _label(value) -> str:
    if value is None:
        return ""
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)
