"""Record types produced by the divergence engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

DivergenceType = Literal["bullish", "bearish"]
StrengthLabel = Literal["weak", "moderate", "strong"]
ExtremumKind = Literal["peak", "trough"]


@dataclass(frozen=True)
class DivergencePattern:
    """A single price/indicator divergence between two price extrema.

    Attributes
    ----------
    start_index, end_index : int
        Price-series indices of the two extrema, ``start_index < end_index``.
    type : str
        "bullish" (lower price low, higher indicator low) or "bearish"
        (higher price high, lower indicator high).
    start_date, end_date : str
        Date labels at ``start_index`` and ``end_index``.
    start_price, end_price : float
        Prices at the two price extrema.
    start_indicator, end_indicator : float
        Indicator values at the matched indicator extrema.
    strength : str
        "weak", "moderate" or "strong", derived from the combined
        percentage move.
    confidence : float
        Heuristic score in [0, 100].
    price_change, indicator_change : float
        Signed deltas, end minus start.
    duration : int
        ``end_index - start_index`` in samples.
    """

    start_index: int
    end_index: int
    type: DivergenceType
    start_date: str
    end_date: str
    start_price: float
    end_price: float
    start_indicator: float
    end_indicator: float
    strength: StrengthLabel
    confidence: float
    price_change: float
    indicator_change: float
    duration: int

    def to_dict(self) -> dict:
        """Return the record keyed the way chart and report consumers expect."""
        return {
            "startIndex": self.start_index,
            "endIndex": self.end_index,
            "type": self.type,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "startPrice": self.start_price,
            "endPrice": self.end_price,
            "startIndicator": self.start_indicator,
            "endIndicator": self.end_indicator,
            "strength": self.strength,
            "confidence": self.confidence,
            "priceChange": self.price_change,
            "indicatorChange": self.indicator_change,
            "duration": self.duration,
        }


@dataclass(frozen=True)
class PeakLowData:
    """Peaks and lows of one series with the values found at them."""

    peaks: list[int]
    lows: list[int]
    peak_values: list[float]
    low_values: list[float]


@dataclass(frozen=True)
class DivergenceSummary:
    """Counts by divergence type and strength for a batch of patterns."""

    total: int
    bullish: int
    bearish: int
    strong: int
    moderate: int
    weak: int
