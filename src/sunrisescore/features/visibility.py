"""
Visibility feature.

Coarse monotonic mapping (`scoring.visibility.bands`, lower bound inclusive). Weighted
low on purpose: visibility correlates with AOD, and AOD is the better-grounded signal.
"""

from __future__ import annotations

from sunrisescore.config.settings import Settings
from sunrisescore.domain.models import FactorResult
from sunrisescore.scoring.composite import clamp_int, score_at_least, usable_number


def score_visibility(visibility_km: float | None, *, settings: Settings) -> FactorResult:
    cfg = settings.scoring.visibility

    visibility = usable_number(visibility_km)
    if visibility is None or visibility < 0:
        return FactorResult(value=None, score=cfg.neutral_score, max_score=cfg.max_score, available=False)

    score = score_at_least(visibility, cfg.bands, cfg.floor_score)
    return FactorResult(
        value=visibility,
        score=clamp_int(score, 0, cfg.max_score),
        max_score=cfg.max_score,
    )
