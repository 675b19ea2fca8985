"""
Explainability: qualitative labels and context sentences.

Everything here reads an already-computed `ScoreBreakdown`; nothing re-scores. Narrative and
UI collaborators consume the output. Any factor scored from its neutral fallback gets an
explicit "N/A" rating instead of a guess.

The rating tables below are presentation thresholds, not scoring constants.
"""

from __future__ import annotations

from sunrisescore.domain.models import AtmosphericLabels, FactorLabel, FactorResult, ScoreBreakdown

NOT_AVAILABLE = "N/A"

HUMIDITY_RATINGS: tuple[tuple[float, str], ...] = (
    (55, "Excellent"),
    (65, "Very Good"),
    (75, "Good"),
    (82, "Decent"),
    (88, "Normal"),
    (93, "High"),
)
AOD_RATINGS: tuple[tuple[float, str], ...] = (
    (0.1, "Crystal Clear"),
    (0.2, "Very Clean"),
    (0.4, "Clean"),
    (0.7, "Hazy"),
    (1.0, "Very Hazy"),
)
VISIBILITY_RATINGS: tuple[tuple[float, str], ...] = (
    (18, "Exceptional"),
    (12, "Excellent"),
    (8, "Good"),
    (5, "Fair"),
)
WIND_RATINGS: tuple[tuple[float, str], ...] = (
    (10, "Calm"),
    (20, "Light"),
    (30, "Moderate"),
)
CEILING_RATINGS: tuple[tuple[float, str], ...] = (
    (6000, "High Ceiling"),
    (2000, "Mid Ceiling"),
)

LAYER_PATTERN_RATINGS = {
    "high_canvas": "High Canvas",
    "mixed": "Mixed",
    "blocked": "Blocked",
    "low_blanket": "Blocked",
    "heavy_low": "Heavy Low",
    "mid_canvas": "Mid Canvas",
    "limited": "Limited",
    "low_stratus": "Low Stratus",
    "sparse": "Sparse Cloud",
}

PRESSURE_RATINGS = {
    "storm": "Storm Risk",
    "clearing_front": "Clearing Front",
    "slight_fall": "Slight Fall",
    "stable": "Stable",
    "rising": "Rising",
    "strong_rise": "Strong Rise",
}


def _unavailable(what: str) -> FactorLabel:
    return FactorLabel(
        rating=NOT_AVAILABLE,
        context=f"{what} data not available; a neutral score was used.",
        available=False,
    )


def _rate_at_most(value: float, table: tuple[tuple[float, str], ...], fallback: str) -> str:
    for threshold, label in table:
        if value <= threshold:
            return label
    return fallback


def _rate_below(value: float, table: tuple[tuple[float, str], ...], fallback: str) -> str:
    for threshold, label in table:
        if value < threshold:
            return label
    return fallback


def _rate_at_least(value: float, table: tuple[tuple[float, str], ...], fallback: str) -> str:
    for threshold, label in table:
        if value >= threshold:
            return label
    return fallback


def _cloud_cover_label(factor: FactorResult, *, low_stratus: bool) -> FactorLabel:
    if not factor.available:
        return _unavailable("Cloud cover")
    cover = float(factor.value)
    regime = factor.details.get("regime")
    if regime == "optimal" and low_stratus:
        return FactorLabel(
            rating="Low Stratus",
            context=(
                f"At {cover:.0f}%, the cloud amount looks ideal on paper, but it is almost all low stratus. "
                "A flat grey deck is a lid, not a reflective canvas."
            ),
        )
    if regime == "optimal":
        return FactorLabel(
            rating="Optimal",
            context=f"At {cover:.0f}%, clouds act as a canvas for orange and red light from below the horizon.",
        )
    if regime in ("clear", "approaching"):
        return FactorLabel(
            rating="Too Clear",
            context=f"With only {cover:.0f}% cloud cover there is little canvas; expect pale yellows and blues.",
        )
    if regime == "partly_overcast":
        return FactorLabel(
            rating="Partly Overcast",
            context=f"At {cover:.0f}%, cover is heavier than ideal; gaps may let patchy, muted color through.",
        )
    return FactorLabel(
        rating="Overcast",
        context=f"At {cover:.0f}%, dense cloud will block most direct light and color.",
    )


def _cloud_layers_label(factor: FactorResult) -> FactorLabel:
    if not factor.available:
        return _unavailable("Cloud layer")
    pattern = factor.details.get("pattern")
    value = factor.value or {}

    if pattern == "ceiling":
        ceiling = float(value.get("ceiling_m", 0.0))
        rating = _rate_at_least(ceiling, CEILING_RATINGS, "Low Ceiling")
        return FactorLabel(
            rating=rating,
            context=f"Layer data unavailable; estimated from a {ceiling:.0f} m cloud base. Higher bases catch light earlier.",
        )
    if pattern == "sparse":
        return FactorLabel(
            rating=LAYER_PATTERN_RATINGS["sparse"],
            context="Too little cloud for the cloud base to matter.",
        )

    high = value.get("high", 0.0)
    mid = value.get("mid", 0.0)
    low = value.get("low", 0.0)
    rating = LAYER_PATTERN_RATINGS.get(str(pattern), "Limited")
    if pattern == "high_canvas":
        context = f"High cloud at {high:.0f}% over a clear horizon (low {low:.0f}%) makes an excellent color canvas."
        if mid >= 30:
            context += f" Mid-level cloud at {mid:.0f}% may mute part of it."
    elif pattern == "mixed":
        context = f"High cloud at {high:.0f}% will catch color, but low cloud at {low:.0f}% partly blocks the horizon."
    elif pattern in ("blocked", "low_blanket"):
        context = f"Low cloud at {low:.0f}% blankets the horizon; little light will reach any canvas above."
    elif pattern == "heavy_low":
        context = f"Low cloud at {low:.0f}% reduces horizon visibility, with little high cloud ({high:.0f}%) above."
    elif pattern == "low_stratus":
        context = f"Almost all cloud is low stratus ({low:.0f}%), with no elevated canvas to light up."
    elif pattern == "mid_canvas":
        context = f"No real high cloud, but mid-level cloud at {mid:.0f}% offers some canvas."
    else:
        context = f"Little cloud structure aloft (high {high:.0f}%, mid {mid:.0f}%); the sky will be plain."
    return FactorLabel(rating=rating, context=context)


def _humidity_label(factor: FactorResult) -> FactorLabel:
    if not factor.available:
        return _unavailable("Humidity")
    humidity = float(factor.value)
    rating = _rate_at_most(humidity, HUMIDITY_RATINGS, "Very High")
    if humidity <= 55:
        context = f"At {humidity:.0f}% the air is dry; colors will be crisp and saturated."
    elif humidity <= 70:
        context = f"At {humidity:.0f}% moisture slightly softens the light; warm pastels rather than fire."
    elif humidity <= 82:
        context = f"At {humidity:.0f}% moderate moisture mutes colors and adds a warm haze."
    elif humidity <= 90:
        context = f"At {humidity:.0f}%, typical coastal dawn moisture softens colors; the horizon may look hazy."
    else:
        context = f"At {humidity:.0f}% heavy moisture scatters light; colors will look washed out and milky."
    return FactorLabel(rating=rating, context=context)


def _pressure_label(factor: FactorResult) -> FactorLabel:
    if not factor.available:
        return _unavailable("Pressure trend")
    delta = float(factor.value)
    trend = str(factor.details.get("trend"))
    contexts = {
        "storm": f"Pressure is dropping fast ({delta:+.1f} hPa): a weather system is arriving with heavy cloud.",
        "clearing_front": f"Falling pressure ({delta:+.1f} hPa) signals a clearing front; breaking cloud gives dramatic skies.",
        "slight_fall": f"A slight fall ({delta:+.1f} hPa) may add some texture without heavy weather.",
        "stable": f"Stable pressure ({delta:+.1f} hPa): predictable and calm, but unlikely to be dramatic.",
        "rising": f"Rising pressure ({delta:+.1f} hPa): settling conditions with gentle color.",
        "strong_rise": f"Strongly rising pressure ({delta:+.1f} hPa): high pressure building, clear but plain skies.",
    }
    return FactorLabel(rating=PRESSURE_RATINGS.get(trend, "Stable"), context=contexts.get(trend, contexts["stable"]))


def _aod_label(factor: FactorResult, *, is_post_rain: bool) -> FactorLabel:
    if not factor.available:
        return _unavailable("Aerosol (AOD)")
    aod = float(factor.value)
    rating = _rate_below(aod, AOD_RATINGS, "Polluted")
    if aod < 0.1:
        context = f"Exceptionally clean air (AOD {aod:.2f}); colors will be sharp and saturated."
    elif aod < 0.2:
        context = f"Very clean air (AOD {aod:.2f}); vivid color with a sharp horizon."
    elif aod < 0.4:
        context = f"Mild aerosol presence (AOD {aod:.2f}); colors slightly softened but still vibrant."
    elif aod < 0.7:
        context = f"Noticeable haze (AOD {aod:.2f}); reds and oranges will fade toward dull amber."
    else:
        context = f"Heavy aerosol load (AOD {aod:.2f}); expect a pale disc behind grey-brown haze."
        if is_post_rain:
            context += " Unusual after rain; worth re-checking closer to dawn."
    return FactorLabel(rating=rating, context=context)


def _visibility_label(factor: FactorResult) -> FactorLabel:
    if not factor.available:
        return _unavailable("Visibility")
    visibility = float(factor.value)
    rating = _rate_at_least(visibility, VISIBILITY_RATINGS, "Poor")
    if visibility >= 10:
        context = f"{visibility:.1f} km visibility: a sharp horizon with strong color contrast."
    elif visibility >= 8:
        context = f"{visibility:.1f} km visibility: good clarity with a slight warm haze."
    else:
        context = f"{visibility:.1f} km visibility: haze or mist will soften the horizon and mute color."
    return FactorLabel(rating=rating, context=context)


def _weather_label(factor: FactorResult) -> FactorLabel:
    if not factor.available:
        return _unavailable("Weather condition")
    penalties: dict = factor.details.get("penalties") or {}
    if factor.score >= factor.max_score:
        rating = "Clear"
    elif factor.score >= factor.max_score - 2:
        rating = "Fair"
    elif factor.score > 0:
        rating = "Unsettled"
    else:
        rating = "Wet"
    if penalties:
        context = "Held back by: " + ", ".join(sorted(k.replace("_", " ") for k in penalties)) + "."
    else:
        context = "No precipitation or adverse conditions expected."
    return FactorLabel(rating=rating, context=context)


def _wind_label(factor: FactorResult) -> FactorLabel:
    if not factor.available:
        return _unavailable("Wind")
    speed = float(factor.value)
    rating = _rate_at_most(speed, WIND_RATINGS, "Strong")
    if speed <= 10:
        context = f"Calm at {speed:.0f} km/h; cloud formations hold their shape and long exposures are easy."
    elif speed <= 20:
        context = f"Light wind at {speed:.0f} km/h will gently move cloud formations."
    else:
        context = f"Wind at {speed:.0f} km/h keeps clouds moving and the sea choppy."
    return FactorLabel(rating=rating, context=context)


def _synergy_context(breakdown: ScoreBreakdown) -> str:
    contexts = {
        "fog": "Fog: visibility is too low for any color to show, whatever the other factors say.",
        "mist": "Mist is likely to swallow most of the color near the horizon.",
        "mist_and_overcast": "Mist under a saturated, near-total overcast: a grey murk with no color to show.",
        "clear_and_dry": "Dry air but an empty sky: vivid light with nothing to paint.",
        "humid_and_sparse": "Humid air and little cloud: washed out, with no color and no structure.",
        "humid_and_optimal": "Good cloud amount, but humidity will mute the colors.",
        "humid_and_overcast": "Humid and overcast: a grey, damp dawn.",
        "optimal_combination": "Cloud amount and humidity work together for strong color.",
        "low_stratus": "The cloud amount is right but it is all low stratus, so it will not light up.",
    }
    return contexts.get(breakdown.synergy_rule, "No notable interaction between factors.")


def _solar_context(bonus: int) -> str:
    if bonus > 1:
        return "Low winter sun: the long light path through the atmosphere deepens reds and oranges."
    if bonus > 0:
        return "Sun angle is fairly low this time of year, a small boost to color."
    if bonus < -1:
        return "High summer sun: a shorter light path gives less scattering and paler color."
    if bonus < 0:
        return "Sun angle is fairly high this time of year, a small drag on color."
    return "Transitional season: sun angle has little effect."


def build_labels(breakdown: ScoreBreakdown) -> AtmosphericLabels:
    """Produce per-factor ratings and context sentences from a computed breakdown."""
    low_stratus = bool(breakdown.multi_level_cloud.details.get("low_stratus"))
    return AtmosphericLabels(
        cloud_cover=_cloud_cover_label(breakdown.cloud_cover, low_stratus=low_stratus),
        multi_level_cloud=_cloud_layers_label(breakdown.multi_level_cloud),
        humidity=_humidity_label(breakdown.humidity),
        pressure_trend=_pressure_label(breakdown.pressure_trend),
        aod=_aod_label(breakdown.aod, is_post_rain=breakdown.is_post_rain),
        visibility=_visibility_label(breakdown.visibility),
        weather=_weather_label(breakdown.weather),
        wind=_wind_label(breakdown.wind),
        synergy=_synergy_context(breakdown),
        post_rain=(
            "Recent rain washed aerosols out of the air; expect extra-vivid color."
            if breakdown.is_post_rain
            else "No post-rain clearing detected."
        ),
        solar=_solar_context(breakdown.solar_bonus),
    )


def one_line_summary(breakdown: ScoreBreakdown) -> str:
    """Render a compact single-line summary for a score breakdown."""
    parts = [f"total={breakdown.final_score}"]
    for name, factor in breakdown.factors().items():
        marker = "" if factor.available else "*"
        parts.append(f"{name}={factor.score}/{factor.max_score}{marker}")
    parts.append(f"synergy={breakdown.synergy:+d}")
    if breakdown.post_rain_bonus:
        parts.append(f"post_rain=+{breakdown.post_rain_bonus}")
    parts.append(f"solar={breakdown.solar_bonus:+d}")
    return " | ".join(parts)
