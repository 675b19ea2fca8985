"""
Pressure trend feature.

Only the endpoint delta of the pre-dawn series matters (last minus first reading):
- a moderate fall is a clearing front: breaking cloud and the most dramatic skies
- a large fall is storm onset
- slight fall, stable and rising pressure score progressively toward "stable but unremarkable"
"""

from __future__ import annotations

from typing import Sequence

from sunrisescore.config.settings import Settings
from sunrisescore.domain.models import FactorResult
from sunrisescore.scoring.composite import clamp_int, usable_number


def pressure_delta(series: Sequence[float | None] | None) -> float | None:
    """Endpoint delta in hPa (rounded to 0.1), or None when the series is not usable."""
    if not series:
        return None
    usable = [p for p in (usable_number(v) for v in series) if p is not None]
    if len(usable) < 2:
        return None
    start = usable_number(series[0])
    end = usable_number(series[-1])
    if start is None or end is None:
        return None
    return round(end - start, 1)


def _classify(delta: float, *, settings: Settings) -> tuple[int, str]:
    cfg = settings.scoring.pressure_trend
    if delta < -cfg.storm_fall_hpa:
        return cfg.storm_score, "storm"
    if delta < -cfg.front_fall_hpa:
        return cfg.front_score, "clearing_front"
    if delta < -cfg.slight_fall_hpa:
        return cfg.slight_fall_score, "slight_fall"
    if delta <= cfg.stable_band_hpa:
        return cfg.stable_score, "stable"
    if delta <= cfg.rise_hpa:
        return cfg.rising_score, "rising"
    return cfg.strong_rise_score, "strong_rise"


def score_pressure_trend(series: Sequence[float | None] | None, *, settings: Settings) -> FactorResult:
    cfg = settings.scoring.pressure_trend

    delta = pressure_delta(series)
    if delta is None:
        return FactorResult(
            value=None,
            score=cfg.neutral_score,
            max_score=cfg.max_score,
            available=False,
            details={"trend": "unknown"},
        )

    score, trend = _classify(delta, settings=settings)
    return FactorResult(
        value=delta,
        score=clamp_int(score, 0, cfg.max_score),
        max_score=cfg.max_score,
        details={"trend": trend, "points": len(series or ())},
    )
