"""Nearest-extremum matching between price and indicator series."""

from __future__ import annotations

from typing import Sequence

NOT_FOUND = -1


def closest_extremum(candidates: Sequence[int], target: int, window: int) -> int:
    """Return the candidate index nearest to ``target``.

    Only candidates strictly closer than ``window`` qualify. When two
    candidates are equally close, the first one in ``candidates`` wins, so
    for an ascending list the earlier index is preferred.

    Returns ``NOT_FOUND`` (-1) when no candidate qualifies.
    """
    closest = NOT_FOUND
    min_distance = window

    for candidate in candidates:
        distance = abs(candidate - target)
        if distance < min_distance:
            min_distance = distance
            closest = candidate

    return closest
