"""Divergence detector: price vs. indicator divergences at paired extrema.

Public API:
  - detect_divergences: scan price and indicator series for bullish/bearish divergences
  - DivergencePattern: frozen record describing one divergence
  - find_extrema / identify_peaks_lows: strict local peak and trough detection
  - closest_extremum: nearest extremum within a window
  - classify_strength / calculate_confidence: pattern scoring
  - summarize_divergences: counts by type and strength
"""

from divscan.signals.divergence.errors import (
    DateAlignmentError,
    DivergenceInputError,
    ScanParameterError,
)
from divscan.signals.divergence.extrema import find_extrema, identify_peaks_lows
from divscan.signals.divergence.matching import NOT_FOUND, closest_extremum
from divscan.signals.divergence.scanner import detect_divergences
from divscan.signals.divergence.scoring import (
    calculate_confidence,
    classify_strength,
    divergence_strength,
)
from divscan.signals.divergence.summary import summarize_divergences
from divscan.signals.divergence.types import (
    DivergencePattern,
    DivergenceSummary,
    PeakLowData,
)

__all__ = [
    "DateAlignmentError",
    "DivergenceInputError",
    "DivergencePattern",
    "DivergenceSummary",
    "NOT_FOUND",
    "PeakLowData",
    "ScanParameterError",
    "calculate_confidence",
    "classify_strength",
    "closest_extremum",
    "detect_divergences",
    "divergence_strength",
    "find_extrema",
    "identify_peaks_lows",
    "summarize_divergences",
]
