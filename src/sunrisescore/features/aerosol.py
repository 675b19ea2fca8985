# src/sunrisescore/features/aerosol.py
"""
Aerosol Optical Depth (AOD) feature.

AOD is the most direct proxy for particulate scattering, the mechanism behind color
intensity at dawn. The curve is a Goldilocks shape, not a monotonic one:
- near-zero AOD (air so clean it under-scatters) scores slightly below the peak
- a narrow low-but-nonzero band scores the maximum
- beyond that, scores decline monotonically through haze down to dust-event levels

Null, negative or non-finite AOD is invalid and gets the neutral score.
"""

from __future__ import annotations

from sunrisescore.config.settings import Settings
from sunrisescore.domain.models import FactorResult
from sunrisescore.scoring.composite import clamp_int, score_below, usable_number


def score_aod(aerosol_optical_depth: float | None, *, settings: Settings) -> FactorResult:
    cfg = settings.scoring.aod

    aod = usable_number(aerosol_optical_depth)
    if aod is None or aod < 0:
        return FactorResult(value=None, score=cfg.neutral_score, max_score=cfg.max_score, available=False)

    score = score_below(aod, cfg.bands, cfg.floor_score)
    return FactorResult(value=aod, score=clamp_int(score, 0, cfg.max_score), max_score=cfg.max_score)
