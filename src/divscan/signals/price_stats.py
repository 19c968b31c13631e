"""Where the latest price sits relative to the series' extremes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np


@dataclass(frozen=True)
class PriceStats:
    """Distance of the current price from the all-time high and low.

    Attributes
    ----------
    current_price : float
        Last finite sample of the series.
    all_time_high, all_time_low : float
        Maximum and minimum over the series.
    distance_from_high, distance_from_low : float
        ``current_price`` minus the high (<= 0) and minus the low (>= 0).
    distance_from_high_percent, distance_from_low_percent : float
        The same distances as a percentage of the high and the low.
    """

    current_price: float
    all_time_high: float
    all_time_low: float
    distance_from_high: float
    distance_from_low: float
    distance_from_high_percent: float
    distance_from_low_percent: float


def calculate_price_stats(prices: Sequence[float] | np.ndarray) -> PriceStats:
    """Summarize a price series.

    Non-finite samples (NaN gaps, infinities) are dropped first, so the
    current price is the last finite sample and every field is finite.
    Raises ValueError when no finite sample remains.
    """
    arr = np.asarray(prices, dtype=np.float64)
    arr = arr[np.isfinite(arr)]
    if arr.size == 0:
        raise ValueError("Cannot compute price statistics of an empty series")

    current = float(arr[-1])
    high = float(arr.max())
    low = float(arr.min())

    return PriceStats(
        current_price=current,
        all_time_high=high,
        all_time_low=low,
        distance_from_high=current - high,
        distance_from_low=current - low,
        distance_from_high_percent=_percent(current - high, high),
        distance_from_low_percent=_percent(current - low, low),
    )


def _percent(delta: float, base: float) -> float:
    if base == 0:
        return 0.0
    return delta / base * 100.0
