"""
Wind feature.

Which curve is "right" is a calibration decision, not a law of nature, so the shape is a
named, swappable table (`scoring.wind.curve`):
- `calm_is_best`: monotonic, calm air holds cloud structure and allows long exposures
- `moderate_breeze`: peaked, dead calm traps boundary-layer haze and strong wind blurs structure
"""

from __future__ import annotations

from sunrisescore.config.settings import Settings
from sunrisescore.domain.models import FactorResult
from sunrisescore.scoring.composite import clamp_int, score_at_most, usable_number


def score_wind(wind_speed_kmh: float | None, *, settings: Settings) -> FactorResult:
    cfg = settings.scoring.wind

    speed = usable_number(wind_speed_kmh)
    if speed is None or speed < 0:
        return FactorResult(
            value=None,
            score=cfg.neutral_score,
            max_score=cfg.max_score,
            available=False,
            details={"curve": cfg.curve},
        )

    curve = cfg.active_curve
    score = score_at_most(speed, curve.bands, curve.floor_score)
    return FactorResult(
        value=speed,
        score=clamp_int(score, 0, cfg.max_score),
        max_score=cfg.max_score,
        details={"curve": cfg.curve},
    )
