"""Local extremum detection under a symmetric neighborhood test.

An index ``i`` is a peak of order ``k`` when the sample there is strictly
greater than every sample within ``k`` steps on either side, and a trough
when it is strictly smaller. Ties disqualify, so flat tops and flat bottoms
are never reported. Only indices with a full neighborhood on both sides,
``k <= i < len - k``, are candidates.

NaN samples compare false against everything, so a NaN is never an extremum
and disqualifies any candidate it neighbors.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
from scipy.signal import argrelextrema

from divscan.signals.divergence.errors import ScanParameterError, check_positive_int
from divscan.signals.divergence.types import ExtremumKind, PeakLowData

_COMPARATORS = {
    "peak": np.greater,
    "trough": np.less,
}


def find_extrema(
    series: Sequence[float] | np.ndarray,
    order: int,
    kind: ExtremumKind,
) -> list[int]:
    """Return the ascending indices of strict local peaks or troughs.

    Parameters
    ----------
    series : Sequence[float] | np.ndarray
        Samples in time order.
    order : int
        Half-width of the comparison window; must be a positive integer.
    kind : str
        "peak" or "trough".

    Returns
    -------
    list[int]
        Empty when ``len(series) <= 2 * order``.
    """
    order = check_positive_int("order", order)
    try:
        comparator = _COMPARATORS[kind]
    except KeyError:
        raise ScanParameterError("kind", kind, "'peak' or 'trough'") from None

    data = np.asarray(series, dtype=np.float64)
    n = len(data)
    if n <= 2 * order:
        return []

    # argrelextrema also scores edge samples against clipped neighbors;
    # keep only indices whose full window lies inside the series.
    (indices,) = argrelextrema(data, comparator, order=order)
    return [int(i) for i in indices if order <= i < n - order]


def identify_peaks_lows(
    prices: Sequence[float] | np.ndarray,
    order: int = 5,
) -> PeakLowData:
    """Find peaks and lows together with the prices at each.

    Used for chart overlays where the marker position and its value are
    drawn side by side.
    """
    data = np.asarray(prices, dtype=np.float64)
    peaks = find_extrema(data, order, "peak")
    lows = find_extrema(data, order, "trough")
    return PeakLowData(
        peaks=peaks,
        lows=lows,
        peak_values=[float(data[i]) for i in peaks],
        low_values=[float(data[i]) for i in lows],
    )
