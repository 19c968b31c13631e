"""Aggregate counts over a batch of detected divergences."""

from __future__ import annotations

from collections import Counter
from typing import Iterable

from divscan.signals.divergence.types import DivergencePattern, DivergenceSummary


def summarize_divergences(patterns: Iterable[DivergencePattern]) -> DivergenceSummary:
    """Count patterns by type and by strength label."""
    patterns = list(patterns)
    by_type = Counter(p.type for p in patterns)
    by_strength = Counter(p.strength for p in patterns)
    return DivergenceSummary(
        total=len(patterns),
        bullish=by_type["bullish"],
        bearish=by_type["bearish"],
        strong=by_strength["strong"],
        moderate=by_strength["moderate"],
        weak=by_strength["weak"],
    )
