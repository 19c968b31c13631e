"""Divergence scanner: pairs consecutive price extrema with indicator extrema.

Two families are scanned with the same procedure:

  - bearish: consecutive price peaks make a higher high while the matched
    indicator peaks make a lower high.
  - bullish: consecutive price troughs make a lower low while the matched
    indicator troughs make a higher low.

For each adjacent pair of price extrema, both ends are matched to the nearest
indicator extremum of the same kind within ``window_size`` samples. A pair is
either emitted as a complete DivergencePattern or discarded; unmatched pairs,
pairs failing the direction gate, and pairs below ``min_strength`` are all
dropped silently. Contract violations raise a DivergenceInputError subclass.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Sequence

import numpy as np
import structlog

from divscan.signals.divergence.errors import (
    DateAlignmentError,
    ScanParameterError,
    check_positive_int,
)
from divscan.signals.divergence.extrema import find_extrema
from divscan.signals.divergence.matching import NOT_FOUND, closest_extremum
from divscan.signals.divergence.scoring import (
    calculate_confidence,
    classify_strength,
    divergence_strength,
)
from divscan.signals.divergence.types import (
    DivergencePattern,
    DivergenceType,
    ExtremumKind,
)

logger = structlog.get_logger()

DEFAULT_ORDER = 3
DEFAULT_MIN_STRENGTH = 0.01
DEFAULT_WINDOW_SIZE = 5


@dataclass(frozen=True)
class _Family:
    type: DivergenceType
    kind: ExtremumKind
    gate: Callable[[float, float], bool]


_FAMILIES = (
    # price higher high, indicator lower high
    _Family("bearish", "peak", lambda dp, di: dp > 0 and di < 0),
    # price lower low, indicator higher low
    _Family("bullish", "trough", lambda dp, di: dp < 0 and di > 0),
)


def detect_divergences(
    prices: Sequence[float] | np.ndarray,
    indicator: Sequence[float] | np.ndarray,
    dates: Sequence[str],
    order: int = DEFAULT_ORDER,
    min_strength: float = DEFAULT_MIN_STRENGTH,
    window_size: int = DEFAULT_WINDOW_SIZE,
) -> list[DivergencePattern]:
    """Detect bullish and bearish divergences between price and an indicator.

    Parameters
    ----------
    prices : Sequence[float] | np.ndarray
        Price samples in time order.
    indicator : Sequence[float] | np.ndarray
        Indicator samples aligned index-for-index with ``prices``.
    dates : Sequence[str]
        Date labels aligned with ``prices``; must cover at least
        ``min(len(prices), len(indicator))`` samples.
    order : int
        Half-width of the extremum neighborhood (positive).
    min_strength : float
        A pattern is emitted only when its combined percentage move exceeds
        this value.
    window_size : int
        Maximum distance, exclusive, between a price extremum and its
        matched indicator extremum (positive). A tunable heuristic: widen it
        for sparse indicator extrema, narrow it for noisy ones.

    Returns
    -------
    list[DivergencePattern]
        Ordered by ascending ``start_index``. Empty when nothing qualifies.

    Raises
    ------
    ScanParameterError
        If ``order`` or ``window_size`` is not a positive integer, or
        ``min_strength`` is not finite.
    DateAlignmentError
        If ``dates`` is shorter than the scanned range.
    """
    order = check_positive_int("order", order)
    window_size = check_positive_int("window_size", window_size)
    if not math.isfinite(min_strength):
        raise ScanParameterError("min_strength", min_strength, "a finite number")

    price_arr = np.asarray(prices, dtype=np.float64)
    indicator_arr = np.asarray(indicator, dtype=np.float64)
    min_length = min(len(price_arr), len(indicator_arr))
    if len(dates) < min_length:
        raise DateAlignmentError(required=min_length, actual=len(dates))

    patterns: list[DivergencePattern] = []
    counts: dict[str, int] = {}
    for family in _FAMILIES:
        found = _scan_family(
            family,
            price_arr,
            indicator_arr,
            dates,
            min_length=min_length,
            order=order,
            min_strength=min_strength,
            window_size=window_size,
        )
        counts[family.type] = len(found)
        patterns.extend(found)

    patterns.sort(key=lambda p: p.start_index)

    logger.debug(
        "divergence_scan_complete",
        samples=min_length,
        order=order,
        window_size=window_size,
        **counts,
    )
    return patterns


def _scan_family(
    family: _Family,
    prices: np.ndarray,
    indicator: np.ndarray,
    dates: Sequence[str],
    *,
    min_length: int,
    order: int,
    min_strength: float,
    window_size: int,
) -> list[DivergencePattern]:
    """Emit the patterns of one family, in price-extremum order."""
    price_extrema = find_extrema(prices, order, family.kind)
    indicator_extrema = find_extrema(indicator, order, family.kind)

    found: list[DivergencePattern] = []
    for p1, p2 in zip(price_extrema, price_extrema[1:]):
        if p1 >= min_length or p2 >= min_length or p1 >= p2:
            continue

        m1 = closest_extremum(indicator_extrema, p1, window_size)
        m2 = closest_extremum(indicator_extrema, p2, window_size)
        if m1 == NOT_FOUND or m2 == NOT_FOUND:
            continue

        start_price = float(prices[p1])
        end_price = float(prices[p2])
        start_indicator = float(indicator[m1])
        end_indicator = float(indicator[m2])
        price_change = end_price - start_price
        indicator_change = end_indicator - start_indicator

        if not family.gate(price_change, indicator_change):
            continue

        strength = divergence_strength(
            price_change, indicator_change, start_price, start_indicator
        )
        # Negative indicator bases give a negative strength; gate on magnitude.
        if abs(strength) <= min_strength:
            continue

        found.append(
            DivergencePattern(
                start_index=p1,
                end_index=p2,
                type=family.type,
                start_date=dates[p1],
                end_date=dates[p2],
                start_price=start_price,
                end_price=end_price,
                start_indicator=start_indicator,
                end_indicator=end_indicator,
                strength=classify_strength(strength),
                confidence=calculate_confidence(price_change, indicator_change),
                price_change=price_change,
                indicator_change=indicator_change,
                duration=p2 - p1,
            )
        )

    return found
