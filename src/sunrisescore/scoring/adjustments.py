"""
Adjustment layer: small additive corrections applied after the base score.

Both sit outside the base weight budget on purpose. They represent rare bonus conditions on
top of a saturating scale, and the final clamp absorbs any overshoot.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime

from sunrisescore.config.settings import Settings
from sunrisescore.core.time import local_day_of_year
from sunrisescore.domain.models import RawSample
from sunrisescore.scoring.composite import usable_number


@dataclass(frozen=True)
class PostRainResult:
    bonus: int
    is_post_rain: bool
    detection: str


def post_rain_bonus(
    sample: RawSample, night_rain_hours: float | None, *, settings: Settings
) -> PostRainResult:
    """Reward the washed-air signature of overnight rain followed by clearing.

    Primary detection uses the explicit night-rain signal. The data-signature heuristic
    (high visibility + mid-band cloud + moderately elevated humidity) is only consulted when
    that signal is absent. Neither path fires while rain is still likely.
    """
    cfg = settings.scoring.post_rain

    precip = usable_number(sample.precip_probability_pct)
    if precip is None or precip > cfg.max_precip_probability_pct:
        return PostRainResult(0, False, "rain_still_likely" if precip is not None else "unknown_precip")

    hours = usable_number(night_rain_hours)
    if hours is not None:
        if hours >= cfg.min_night_rain_hours:
            return PostRainResult(cfg.bonus, True, "night_rain")
        return PostRainResult(0, False, "no_night_rain")

    visibility = usable_number(sample.visibility_km)
    cover = usable_number(sample.cloud_cover_pct)
    humidity = usable_number(sample.relative_humidity_pct)
    if visibility is None or cover is None or humidity is None:
        return PostRainResult(0, False, "insufficient_data")

    cloud_lo, cloud_hi = cfg.signature_cloud_range_pct
    humid_lo, humid_hi = cfg.signature_humidity_range_pct
    if (
        visibility >= cfg.signature_min_visibility_km
        and cloud_lo <= cover <= cloud_hi
        and humid_lo < humidity < humid_hi
    ):
        return PostRainResult(cfg.bonus, True, "signature")
    return PostRainResult(0, False, "no_signature")


def solar_declination_deg(day_of_year: int, *, axial_tilt_deg: float = 23.44) -> float:
    """Approximate solar declination; negative around the December solstice."""
    return -axial_tilt_deg * math.cos(2 * math.pi / 365 * (day_of_year + 10))


def solar_angle_bonus(
    sample_timestamp: datetime | None, latitude_deg: float | None = None, *, settings: Settings
) -> int:
    """Seasonal bonus: a low winter sun has a longer atmospheric path and richer color."""
    cfg = settings.scoring.solar
    if sample_timestamp is None:
        return 0

    day = local_day_of_year(sample_timestamp, settings.app.timezone)
    declination = solar_declination_deg(day, axial_tilt_deg=cfg.axial_tilt_deg)
    latitude = usable_number(latitude_deg)
    if latitude is not None and latitude < 0:
        declination = -declination

    step = max(cfg.bound // 2, 1)
    if declination <= -cfg.deep_season_deg:
        bonus = cfg.bound
    elif declination <= -cfg.shoulder_season_deg:
        bonus = step
    elif declination < cfg.shoulder_season_deg:
        bonus = 0
    elif declination < cfg.deep_season_deg:
        bonus = -step
    else:
        bonus = -cfg.bound
    return int(bonus)
