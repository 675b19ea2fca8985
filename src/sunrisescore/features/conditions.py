# src/sunrisescore/features/conditions.py
"""
Weather-condition gate.

This is a penalty gate, not a quality gradient:
- start at the maximum
- subtract for rising precipitation probability and for active precipitation
- subtract for adverse description categories (storm, fog/mist, haze)
- add a small credit for an explicitly clear/sunny description
- clamp into [0, max_score]

With no precipitation probability, no description and no active precipitation there is
nothing to gate on, so the neutral score applies.
"""

from __future__ import annotations

from sunrisescore.config.settings import Settings
from sunrisescore.domain.models import FactorResult
from sunrisescore.scoring.composite import clamp_int, usable_number


def _precip_penalty(precip_probability_pct: float | None, *, settings: Settings) -> int:
    if precip_probability_pct is None:
        return 0
    for threshold, penalty in settings.scoring.weather.precip_penalties:
        if precip_probability_pct > threshold:
            return int(penalty)
    return 0


def score_weather_conditions(
    precip_probability_pct: float | None,
    has_active_precipitation: bool,
    weather_description: str | None,
    *,
    settings: Settings,
) -> FactorResult:
    cfg = settings.scoring.weather

    precip = usable_number(precip_probability_pct)
    description = (weather_description or "").strip().lower()

    if precip is None and not description and not has_active_precipitation:
        return FactorResult(
            value=None,
            score=cfg.neutral_score,
            max_score=cfg.max_score,
            available=False,
            details={
                "description": "",
                "has_active_precipitation": False,
                "penalties": {},
                "clear_credit": 0,
            },
        )

    score = cfg.max_score
    # `penalties` is kept for explainability (label generator, debugging).
    penalties: dict[str, int] = {}

    precip_penalty = _precip_penalty(precip, settings=settings)
    if precip_penalty:
        penalties["precip_probability"] = precip_penalty
    if has_active_precipitation:
        penalties["active_precipitation"] = cfg.active_precip_penalty

    for rule in cfg.keyword_penalties:
        hit = next((kw for kw in rule.keywords if kw in description), None)
        if hit is not None:
            penalties[hit] = rule.penalty

    score -= sum(penalties.values())

    clear_credit = 0
    if any(kw in description for kw in cfg.clear_keywords):
        clear_credit = cfg.clear_credit
        score += clear_credit

    return FactorResult(
        value=precip,
        score=clamp_int(score, 0, cfg.max_score),
        max_score=cfg.max_score,
        available=True,
        details={
            "description": weather_description or "",
            "has_active_precipitation": bool(has_active_precipitation),
            "penalties": penalties,
            "clear_credit": clear_credit,
        },
    )
