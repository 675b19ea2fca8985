"""
Shared scoring utilities.

This module contains small, reusable helpers used across factor scorers:
- `usable_number`: the single "is this raw value usable" predicate (None / non-numeric / NaN / inf -> None)
- `round_half_up`: deterministic rounding (Python's `round` is banker's rounding)
- `clamp_int`: keep sub-scores inside [0, max_score]
- band lookups over the `(threshold, score)` tables defined in `defaults.yaml`
"""

from __future__ import annotations

import math
from typing import Any, Iterable, Sequence


def usable_number(value: Any) -> float | None:
    """Return `value` as a finite float, or None when it cannot be scored."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def round_half_up(x: float) -> int:
    """Round to the nearest integer, with .5 always rounding up."""
    return int(math.floor(x + 0.5))


def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def clamp_int(x: float, lo: int, hi: int) -> int:
    """Round half-up, then clamp into [lo, hi]."""
    return int(clamp(round_half_up(x), lo, hi))


def score_at_most(value: float, bands: Iterable[tuple[float, int]], floor: int) -> int:
    """First band whose threshold satisfies `value <= threshold`, else `floor`."""
    for threshold, score in bands:
        if value <= threshold:
            return int(score)
    return int(floor)


def score_below(value: float, bands: Iterable[tuple[float, int]], floor: int) -> int:
    """First band whose threshold satisfies `value < threshold`, else `floor`."""
    for threshold, score in bands:
        if value < threshold:
            return int(score)
    return int(floor)


def score_at_least(value: float, bands: Iterable[tuple[float, int]], floor: int) -> int:
    """First band whose threshold satisfies `value >= threshold`, else `floor`."""
    for threshold, score in bands:
        if value >= threshold:
            return int(score)
    return int(floor)


def interpolate(x: float, start: tuple[float, float], points: Sequence[tuple[float, float]]) -> float:
    """Piecewise-linear interpolation from `start` through `points` (x ascending)."""
    x0, y0 = start
    for x1, y1 in points:
        if x <= x1:
            if x1 == x0:
                return float(y1)
            return y0 + (y1 - y0) * (x - x0) / (x1 - x0)
        x0, y0 = x1, y1
    return float(y0)
