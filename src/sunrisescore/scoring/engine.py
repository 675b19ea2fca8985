from __future__ import annotations

# This module is the assembler for a single (location, day) evaluation.
# Data flow:
# - RawSample + ExtendedSignals (already normalized)
# - eight independent factor scorers (features/*)
# - synergy term over raw values (scoring/synergy.py)
# - adjustment layer: post-rain + solar angle (scoring/adjustments.py)
# - clamp, verdict/recommendation tiers, qualitative labels
#
# Everything here is a pure function of its inputs and the settings object.

import logging

from sunrisescore.config.settings import Settings, get_settings
from sunrisescore.domain.models import ExtendedSignals, RawSample, ScoreBreakdown, SunriseResult
from sunrisescore.features.aerosol import score_aod
from sunrisescore.features.clouds import score_cloud_cover, score_multi_level_cloud
from sunrisescore.features.conditions import score_weather_conditions
from sunrisescore.features.humidity import score_humidity
from sunrisescore.features.pressure import score_pressure_trend
from sunrisescore.features.visibility import score_visibility
from sunrisescore.features.wind import score_wind
from sunrisescore.scoring.adjustments import post_rain_bonus, solar_angle_bonus
from sunrisescore.scoring.composite import clamp_int
from sunrisescore.scoring.explain import build_labels, one_line_summary
from sunrisescore.scoring.synergy import compute_synergy
from sunrisescore.scoring.verdict import get_recommendation, get_verdict

logger = logging.getLogger(__name__)

_NO_SIGNALS = ExtendedSignals()


def calculate_breakdown(
    sample: RawSample, signals: ExtendedSignals | None = None, *, settings: Settings
) -> ScoreBreakdown:
    """Run every scorer and the adjustment layer; return the full explainable breakdown."""
    signals = signals or _NO_SIGNALS
    scoring = settings.scoring

    factors = {
        "cloud_cover": score_cloud_cover(sample.cloud_cover_pct, settings=settings),
        "multi_level_cloud": score_multi_level_cloud(
            signals.multi_level_cloud,
            cloud_ceiling_m=signals.cloud_ceiling_m,
            cloud_cover_pct=sample.cloud_cover_pct,
            settings=settings,
        ),
        "humidity": score_humidity(sample.relative_humidity_pct, settings=settings),
        "pressure_trend": score_pressure_trend(signals.pressure_series_hpa, settings=settings),
        "aod": score_aod(signals.aerosol_optical_depth, settings=settings),
        "visibility": score_visibility(sample.visibility_km, settings=settings),
        "weather": score_weather_conditions(
            sample.precip_probability_pct,
            sample.has_active_precipitation,
            sample.weather_description,
            settings=settings,
        ),
        "wind": score_wind(sample.wind_speed_kmh, settings=settings),
    }

    synergy = compute_synergy(
        sample.cloud_cover_pct,
        sample.relative_humidity_pct,
        sample.visibility_km,
        signals.multi_level_cloud,
        settings=settings,
    )
    base_score = sum(f.score for f in factors.values()) + synergy.adjustment

    post_rain = post_rain_bonus(sample, signals.night_rain_hours, settings=settings)
    solar = solar_angle_bonus(sample.sample_timestamp, sample.latitude_deg, settings=settings)

    ceiling = scoring.score_ceiling
    if synergy.score_ceiling is not None:
        # Fog or grey murk stays capped whatever the bonuses add.
        ceiling = min(ceiling, synergy.score_ceiling)
    final_score = clamp_int(base_score + post_rain.bonus + solar, scoring.score_floor, ceiling)

    return ScoreBreakdown(
        **factors,
        synergy=synergy.adjustment,
        synergy_rule=synergy.rule,
        post_rain_bonus=post_rain.bonus,
        is_post_rain=post_rain.is_post_rain,
        post_rain_detection=post_rain.detection,
        solar_bonus=solar,
        base_score=base_score,
        score_ceiling=ceiling,
        final_score=final_score,
    )


def score_sunrise(
    sample: RawSample,
    signals: ExtendedSignals | None = None,
    *,
    settings: Settings | None = None,
) -> SunriseResult:
    """Score one pre-dawn observation on the 0-100 scale.

    Missing or invalid inputs never raise: each affected factor falls back to its neutral
    score and is marked unavailable in the breakdown and labels.
    """
    settings = settings or get_settings()
    breakdown = calculate_breakdown(sample, signals, settings=settings)
    score = breakdown.final_score

    unavailable = [name for name, factor in breakdown.factors().items() if not factor.available]
    if unavailable:
        logger.debug("Scored with neutral fallbacks for: %s", ", ".join(unavailable))
    logger.debug("Sunrise breakdown: %s", one_line_summary(breakdown))

    return SunriseResult(
        score=score,
        breakdown=breakdown,
        verdict=get_verdict(score),
        recommendation=get_recommendation(score),
        labels=build_labels(breakdown),
    )
