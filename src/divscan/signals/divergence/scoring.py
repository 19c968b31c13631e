"""Strength and confidence scoring for detected divergences.

Two independent measures are attached to every pattern:

  - strength: the price move as a fraction of the starting price plus the
    indicator move as a fraction of the starting indicator value, bucketed
    into weak / moderate / strong at fixed breakpoints.
  - confidence: a cruder 0-100 heuristic on the raw move sizes, each scaled
    by 100 and capped at 100, then averaged.

The breakpoints are part of the output contract; downstream consumers bucket
and count on the labels, so they are constants and not configuration.
"""

from __future__ import annotations

import math

from divscan.signals.divergence.types import StrengthLabel

# ---------------------------------------------------------------------------
# Fixed thresholds
# ---------------------------------------------------------------------------

STRONG_THRESHOLD = 0.05     # strength > this = strong
MODERATE_THRESHOLD = 0.02   # strength > this = moderate

CONFIDENCE_SCALE = 100.0
CONFIDENCE_CAP = 100.0


def divergence_strength(
    price_change: float,
    indicator_change: float,
    base_price: float,
    base_indicator: float,
) -> float:
    """Combined percentage move of price and indicator.

    A zero base makes its ratio infinite, which classifies as strong. A
    negative base (e.g. a MACD trough below zero) yields a negative ratio;
    the scanner gates on the magnitude of the result.
    """
    return _ratio(abs(price_change), base_price) + _ratio(
        abs(indicator_change), base_indicator
    )


def classify_strength(strength: float) -> StrengthLabel:
    """Bucket a strength value: > 0.05 strong, > 0.02 moderate, else weak."""
    if strength > STRONG_THRESHOLD:
        return "strong"
    if strength > MODERATE_THRESHOLD:
        return "moderate"
    return "weak"


def calculate_confidence(price_change: float, indicator_change: float) -> float:
    """Average of the capped, 100-scaled price and indicator magnitudes.

    Sign-insensitive, so passing signed deltas or their absolute values gives
    the same result. Always in [0, 100] for finite inputs.
    """
    normalized_price = min(abs(price_change) * CONFIDENCE_SCALE, CONFIDENCE_CAP)
    normalized_indicator = min(
        abs(indicator_change) * CONFIDENCE_SCALE, CONFIDENCE_CAP
    )
    return (normalized_price + normalized_indicator) / 2.0


def _ratio(magnitude: float, base: float) -> float:
    if base == 0:
        return math.inf if magnitude > 0 else 0.0
    return magnitude / base
