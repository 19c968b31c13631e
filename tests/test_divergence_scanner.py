"""Tests for the divergence scanner: price vs. indicator divergences.

Covers both families (bearish higher-high / lower-high, bullish lower-low /
higher-low), the matching window, the strength threshold, output ordering,
the immutable record type, and the error taxonomy: benign inputs give an
empty result, contract violations raise.
"""

from __future__ import annotations

import dataclasses

import numpy as np
import pytest

from divscan.signals.divergence import (
    DateAlignmentError,
    DivergenceInputError,
    DivergencePattern,
    ScanParameterError,
    calculate_confidence,
    detect_divergences,
    divergence_strength,
)


def _random_walk(seed: int, n: int = 300) -> tuple[list, list, list]:
    rng = np.random.default_rng(seed)
    prices = 100.0 + np.cumsum(rng.normal(0.0, 0.5, n))
    indicator = 50.0 + rng.normal(0.0, 5.0, n)
    dates = [f"bar-{i}" for i in range(n)]
    return prices.tolist(), indicator.tolist(), dates


# ---------------------------------------------------------------------------
# 1. Bearish divergence
# ---------------------------------------------------------------------------


def test_bearish_divergence_detected(bearish_series):
    """Higher price high with a lower indicator high -> one bearish record."""
    result = detect_divergences(**bearish_series, order=1)

    assert len(result) == 1
    pattern = result[0]
    assert pattern.type == "bearish"
    assert pattern.price_change > 0
    assert pattern.indicator_change < 0


def test_bearish_record_fields(bearish_series):
    """Every field of the bearish record is populated from the series."""
    pattern = detect_divergences(**bearish_series, order=1)[0]

    assert pattern.start_index == 1
    assert pattern.end_index == 3
    assert pattern.start_date == "2024-01-02"
    assert pattern.end_date == "2024-01-04"
    assert pattern.start_price == 102.0
    assert pattern.end_price == 105.0
    assert pattern.start_indicator == 55.0
    assert pattern.end_indicator == 53.0
    assert pattern.price_change == pytest.approx(3.0)
    assert pattern.indicator_change == pytest.approx(-2.0)
    assert pattern.duration == 2
    assert pattern.strength == "strong"        # 3/102 + 2/55 ~ 0.066
    assert pattern.confidence == pytest.approx(100.0)


# ---------------------------------------------------------------------------
# 2. Bullish divergence
# ---------------------------------------------------------------------------


def test_bullish_divergences_detected(bullish_series):
    """Lower price lows with higher indicator lows -> bullish records."""
    result = detect_divergences(**bullish_series, order=1)

    assert [p.type for p in result] == ["bullish", "bullish"]
    assert [(p.start_index, p.end_index) for p in result] == [(1, 3), (3, 5)]
    for p in result:
        assert p.price_change < 0
        assert p.indicator_change > 0


def test_bullish_strength_uses_starting_values(bullish_series):
    first = detect_divergences(**bullish_series, order=1)[0]
    # 3 / 98 + 4 / 40 ~ 0.13
    assert first.strength == "strong"
    assert first.start_indicator == 40.0
    assert first.end_indicator == 44.0


# ---------------------------------------------------------------------------
# 3. Gating and thresholds
# ---------------------------------------------------------------------------


def test_min_strength_filters_patterns(bearish_series):
    assert detect_divergences(**bearish_series, order=1, min_strength=1.0) == []


def test_min_strength_is_strict(bearish_series):
    """A pattern whose strength equals the threshold is not emitted."""
    exact = divergence_strength(3.0, -2.0, 102.0, 55.0)
    assert detect_divergences(**bearish_series, order=1, min_strength=exact) == []


def test_no_indicator_extrema_gives_nothing(bearish_series):
    """Without indicator extrema to match, every pair is discarded."""
    bearish_series["indicator"] = [70.0, 65.0, 60.0, 55.0, 50.0, 45.0, 40.0]
    assert detect_divergences(**bearish_series, order=1) == []


def test_confirming_indicator_gives_nothing():
    """Price and indicator making higher highs together is not a divergence."""
    prices = [100.0, 102.0, 101.0, 105.0, 103.0]
    indicator = [50.0, 55.0, 52.0, 58.0, 51.0]
    dates = ["a", "b", "c", "d", "e"]
    assert detect_divergences(prices, indicator, dates, order=1) == []


def test_window_size_limits_matching():
    """Indicator peaks just outside the window are not matched."""
    # price peaks at 1 and 8
    prices = [1.0, 5.0, 2.0, 2.1, 2.2, 2.3, 2.4, 2.5, 8.0, 3.0, 2.9, 2.8, 2.7]
    # indicator peaks at 3 and 10, two bars after each price peak
    indicator = [9.0, 9.1, 9.2, 12.0, 9.0, 8.9, 8.8, 8.7, 8.6, 9.5, 10.0, 9.0, 8.0]
    dates = [str(i) for i in range(len(prices))]

    matched = detect_divergences(prices, indicator, dates, order=1, window_size=3)
    assert [(p.start_index, p.end_index) for p in matched] == [(1, 8)]
    assert detect_divergences(prices, indicator, dates, order=1, window_size=2) == []


def test_negative_indicator_base_gates_on_magnitude():
    """Troughs below zero give a negative strength; the gate uses |strength|."""
    prices = [10.0, 9.0, 9.5, 8.0, 9.0]
    indicator = [0.0, -2.0, -1.0, -1.5, 0.0]
    dates = ["a", "b", "c", "d", "e"]

    result = detect_divergences(prices, indicator, dates, order=1)
    assert len(result) == 1
    assert result[0].type == "bullish"
    assert result[0].strength == "weak"


# ---------------------------------------------------------------------------
# 4. Ordering, invariants and idempotence
# ---------------------------------------------------------------------------


def test_random_walk_invariants():
    """Every record on a noisy series satisfies the record invariants."""
    prices, indicator, dates = _random_walk(seed=7)
    result = detect_divergences(prices, indicator, dates)

    assert len(result) > 0
    starts = [p.start_index for p in result]
    assert starts == sorted(starts)
    for p in result:
        assert p.start_index < p.end_index
        assert p.duration == p.end_index - p.start_index
        assert p.start_date == dates[p.start_index]
        assert p.end_date == dates[p.end_index]
        assert p.strength in ("weak", "moderate", "strong")
        assert 0.0 <= p.confidence <= 100.0
        if p.type == "bearish":
            assert p.price_change > 0 and p.indicator_change < 0
        else:
            assert p.type == "bullish"
            assert p.price_change < 0 and p.indicator_change > 0


def test_scan_is_idempotent():
    """Identical inputs give identical, identically ordered output."""
    prices, indicator, dates = _random_walk(seed=11)
    assert detect_divergences(prices, indicator, dates) == detect_divergences(
        prices, indicator, dates
    )


def test_confidence_matches_absolute_deltas():
    """Records of both families agree with confidence on absolute deltas."""
    prices, indicator, dates = _random_walk(seed=5)
    for p in detect_divergences(prices, indicator, dates):
        assert p.confidence == calculate_confidence(
            abs(p.price_change), abs(p.indicator_change)
        )


def test_numpy_inputs_match_lists(bullish_series):
    as_arrays = detect_divergences(
        np.array(bullish_series["prices"]),
        np.array(bullish_series["indicator"]),
        bullish_series["dates"],
        order=1,
    )
    assert as_arrays == detect_divergences(**bullish_series, order=1)


# ---------------------------------------------------------------------------
# 5. Record type
# ---------------------------------------------------------------------------


def test_pattern_is_frozen(bearish_series):
    pattern = detect_divergences(**bearish_series, order=1)[0]
    assert isinstance(pattern, DivergencePattern)
    with pytest.raises(dataclasses.FrozenInstanceError):
        pattern.strength = "weak"


def test_to_dict_uses_consumer_keys(bearish_series):
    record = detect_divergences(**bearish_series, order=1)[0].to_dict()
    assert set(record) == {
        "startIndex", "endIndex", "type", "startDate", "endDate",
        "startPrice", "endPrice", "startIndicator", "endIndicator",
        "strength", "confidence", "priceChange", "indicatorChange", "duration",
    }
    assert record["startIndex"] == 1
    assert record["type"] == "bearish"


# ---------------------------------------------------------------------------
# 6. Benign inputs and contract violations
# ---------------------------------------------------------------------------


def test_empty_series_gives_empty_result():
    assert detect_divergences([], [], []) == []


def test_short_series_gives_empty_result():
    """Five samples at order 3 cannot hold an extremum."""
    assert detect_divergences([1.0, 2.0, 9.0, 2.0, 1.0], [5.0] * 5, list("abcde")) == []


def test_scan_limited_to_shorter_series(bearish_series):
    """Price extrema beyond the indicator length are skipped, not errors."""
    bearish_series["prices"] = bearish_series["prices"] + [110.0, 100.0]
    result = detect_divergences(**bearish_series, order=1)
    assert [(p.start_index, p.end_index) for p in result] == [(1, 3)]


def test_longer_dates_are_accepted(bearish_series):
    bearish_series["dates"] = bearish_series["dates"] + ["extra"]
    assert len(detect_divergences(**bearish_series, order=1)) == 1


def test_short_dates_raise(bearish_series):
    bearish_series["dates"] = bearish_series["dates"][:5]
    with pytest.raises(DateAlignmentError) as excinfo:
        detect_divergences(**bearish_series, order=1)
    assert excinfo.value.required == 7
    assert excinfo.value.actual == 5


@pytest.mark.parametrize(
    "kwargs",
    [
        {"order": 0},
        {"order": -2},
        {"window_size": 0},
        {"order": True},
        {"min_strength": float("nan")},
    ],
)
def test_invalid_parameters_raise(bearish_series, kwargs):
    with pytest.raises(ScanParameterError):
        detect_divergences(**bearish_series, **kwargs)


def test_errors_are_value_errors(bearish_series):
    """Contract violations can be caught as ValueError by callers."""
    with pytest.raises(ValueError):
        detect_divergences(**bearish_series, order=0)
    assert issubclass(ScanParameterError, DivergenceInputError)
    assert issubclass(DateAlignmentError, DivergenceInputError)
