"""
Humidity feature.

Monotonic step table (`scoring.humidity.bands`, upper bound inclusive). Coastal pre-dawn
humidity commonly sits at 80-95%, so that range keeps a graduated mid score; only
fog-adjacent humidity drops to the floor.
"""

from __future__ import annotations

from sunrisescore.config.settings import Settings
from sunrisescore.domain.models import FactorResult
from sunrisescore.scoring.composite import clamp, clamp_int, score_at_most, usable_number


def score_humidity(relative_humidity_pct: float | None, *, settings: Settings) -> FactorResult:
    cfg = settings.scoring.humidity

    humidity = usable_number(relative_humidity_pct)
    if humidity is None:
        return FactorResult(value=None, score=cfg.neutral_score, max_score=cfg.max_score, available=False)

    humidity = clamp(humidity, 0.0, 100.0)
    score = score_at_most(humidity, cfg.bands, cfg.floor_score)
    return FactorResult(value=humidity, score=clamp_int(score, 0, cfg.max_score), max_score=cfg.max_score)
