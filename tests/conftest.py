"""Shared test fixtures for the divscan test suite."""

from pathlib import Path

import pyarrow as pa
import pyarrow.csv as pacsv
import pytest
import structlog


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Undo any structlog configuration a CLI invocation applied."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def bearish_series() -> dict:
    """Price makes higher highs at 1 -> 3 while the indicator peaks fall."""
    return {
        "prices": [100.0, 102.0, 101.0, 105.0, 103.0, 108.0, 104.0],
        "indicator": [50.0, 55.0, 52.0, 53.0, 51.0, 50.0, 49.0],
        "dates": [f"2024-01-0{i + 1}" for i in range(7)],
    }


@pytest.fixture
def bullish_series() -> dict:
    """Price makes lower lows at 1 -> 3 -> 5 while the indicator lows rise."""
    return {
        "prices": [100.0, 98.0, 99.0, 95.0, 97.0, 92.0, 96.0],
        "indicator": [50.0, 40.0, 48.0, 44.0, 49.0, 47.0, 50.0],
        "dates": [f"2024-02-0{i + 1}" for i in range(7)],
    }


@pytest.fixture
def write_series_csv(tmp_path: Path):
    """Factory writing date/close/rsi columns to a CSV under tmp_path."""

    def _write(series: dict, name: str = "series.csv") -> Path:
        path = tmp_path / name
        table = pa.table(
            {
                "date": series["dates"],
                "close": series["prices"],
                "rsi": series["indicator"],
            }
        )
        pacsv.write_csv(table, path)
        return path

    return _write
