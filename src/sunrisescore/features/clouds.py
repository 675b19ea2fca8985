# src/sunrisescore/features/clouds.py
"""
Cloud features: total cover and altitude distribution.

Why two scorers?
- Total cover answers "is there a canvas at all, and is the light blocked?". A clear sky has
  nothing to reflect pre-dawn color; full overcast blocks the sun. The curve peaks in an
  optimal band and decays (gently, then steeply) toward total overcast.
- Layer distribution answers "where is the canvas?". High cloud lit from below the horizon
  glows; a low stratus deck at the same total percentage is a grey lid. Composition, not the
  percentage alone, gates the top layer scores (the low-stratus discount).

Both scorers are total: any missing or non-finite input routes to a named neutral score.
"""

from __future__ import annotations

from sunrisescore.config.settings import Settings
from sunrisescore.domain.models import FactorResult, MultiLevelCloud
from sunrisescore.scoring.composite import clamp, clamp_int, interpolate, score_at_least, usable_number


def _percent(value: float | None) -> float | None:
    number = usable_number(value)
    if number is None:
        return None
    return clamp(number, 0.0, 100.0)


def in_optimal_band(cloud_cover_pct: float | None, *, settings: Settings) -> bool:
    """True when total cover sits inside the configured optimal band (inclusive)."""
    cover = _percent(cloud_cover_pct)
    if cover is None:
        return False
    cfg = settings.scoring.cloud_cover
    return cfg.optimal_low_pct <= cover <= cfg.optimal_high_pct


def is_low_stratus(
    cloud_cover_pct: float | None, layers: MultiLevelCloud | None, *, settings: Settings
) -> bool:
    """Nominally optimal total cover made almost entirely of low cloud (no elevated canvas)."""
    if layers is None or not in_optimal_band(cloud_cover_pct, settings=settings):
        return False
    high, mid, low = _layer_values(layers)
    if high is None and mid is None and low is None:
        return False
    cfg = settings.scoring.multi_level_cloud.low_stratus
    return (high or 0.0) + (mid or 0.0) < cfg.max_elevated_pct and (low or 0.0) >= cfg.min_low_pct


def _layer_values(layers: MultiLevelCloud) -> tuple[float | None, float | None, float | None]:
    return _percent(layers.high_pct), _percent(layers.mid_pct), _percent(layers.low_pct)


def score_cloud_cover(cloud_cover_pct: float | None, *, settings: Settings) -> FactorResult:
    cfg = settings.scoring.cloud_cover

    cover = _percent(cloud_cover_pct)
    if cover is None:
        return FactorResult(
            value=None,
            score=cfg.neutral_score,
            max_score=cfg.max_score,
            available=False,
            details={"regime": "unknown"},
        )

    band_low = cfg.optimal_low_pct
    band_high = cfg.optimal_high_pct
    clear_start, clear_end = cfg.clear_sky_scores

    if band_low <= cover <= band_high:
        distance = abs(cover - cfg.optimal_center_pct)
        if distance <= cfg.plateau_half_width_pct:
            raw = float(cfg.max_score)
        else:
            # Linear slide from the plateau edge down to `band_edge_score` at the band edge.
            span = max(cfg.optimal_half_width_pct - cfg.plateau_half_width_pct, 0.1)
            raw = cfg.max_score - (distance - cfg.plateau_half_width_pct) / span * (
                cfg.max_score - cfg.band_edge_score
            )
        regime = "optimal"
    elif cover < cfg.clear_sky_limit_pct:
        raw = clear_start + (clear_end - clear_start) * cover / max(cfg.clear_sky_limit_pct, 0.1)
        regime = "clear"
    elif cover < band_low:
        # Quadratic approach: thin scattered cloud adds little until the band is close.
        frac = (cover - cfg.clear_sky_limit_pct) / max(band_low - cfg.clear_sky_limit_pct, 0.1)
        raw = clear_end + (cfg.band_edge_score - clear_end) * frac**2
        regime = "approaching"
    else:
        raw = interpolate(cover, (band_high, cfg.band_edge_score), cfg.decay_points)
        first_decay_limit = cfg.decay_points[0][0] if cfg.decay_points else 100.0
        regime = "partly_overcast" if cover <= first_decay_limit else "overcast"

    return FactorResult(
        value=cover,
        score=clamp_int(raw, 0, cfg.max_score),
        max_score=cfg.max_score,
        details={"regime": regime},
    )


def _score_layers(
    high: float, mid: float, low: float, *, low_stratus: bool, settings: Settings
) -> tuple[int, str]:
    cfg = settings.scoring.multi_level_cloud

    if low_stratus:
        return cfg.low_stratus.score, "low_stratus"

    if high >= cfg.high_canvas_min_pct:
        if low < cfg.clear_horizon_max_low_pct:
            # Lit canvas aloft over a clear horizon; mid cloud can only get in the way.
            if mid < cfg.light_mid_max_pct:
                return cfg.canvas_score, "high_canvas"
            if mid < cfg.heavy_mid_min_pct:
                return cfg.canvas_some_mid_score, "high_canvas"
            return cfg.canvas_heavy_mid_score, "high_canvas"
        if low < cfg.mixed_max_low_pct:
            return cfg.mixed_score, "mixed"
        return cfg.blocked_score, "blocked"

    if low >= cfg.low_blanket_min_pct:
        return cfg.low_blanket_score, "low_blanket"
    if low >= cfg.heavy_low_min_pct:
        return cfg.heavy_low_score, "heavy_low"
    if mid >= cfg.mid_canvas_min_pct:
        return cfg.mid_canvas_score, "mid_canvas"
    return cfg.limited_score, "limited"


def score_multi_level_cloud(
    layers: MultiLevelCloud | None,
    *,
    cloud_ceiling_m: float | None,
    cloud_cover_pct: float | None,
    settings: Settings,
) -> FactorResult:
    """Score cloud altitude distribution, falling back to ceiling height, then to neutral."""
    cfg = settings.scoring.multi_level_cloud

    if layers is not None:
        high, mid, low = _layer_values(layers)
        if not (high is None and mid is None and low is None):
            # A provider that reports some layers but not others means "none observed" for the rest.
            high, mid, low = high or 0.0, mid or 0.0, low or 0.0
            low_stratus = is_low_stratus(cloud_cover_pct, layers, settings=settings)
            score, pattern = _score_layers(high, mid, low, low_stratus=low_stratus, settings=settings)
            return FactorResult(
                value={"high": high, "mid": mid, "low": low},
                score=clamp_int(score, 0, cfg.max_score),
                max_score=cfg.max_score,
                details={"source": "layers", "pattern": pattern, "low_stratus": low_stratus},
            )

    ceiling = usable_number(cloud_ceiling_m)
    if ceiling is not None and ceiling >= 0:
        cover = _percent(cloud_cover_pct)
        fallback = cfg.ceiling
        if cover is not None and cover >= fallback.min_total_cover_pct:
            score = score_at_least(ceiling, fallback.bands, fallback.floor_score)
            pattern = "ceiling"
        else:
            # Ceiling of a near-clear sky says nothing about the canvas.
            score = cfg.neutral_score
            pattern = "sparse"
        return FactorResult(
            value={"ceiling_m": ceiling},
            score=clamp_int(score, 0, cfg.max_score),
            max_score=cfg.max_score,
            details={"source": "ceiling", "pattern": pattern, "low_stratus": False},
        )

    return FactorResult(
        value=None,
        score=cfg.neutral_score,
        max_score=cfg.max_score,
        available=False,
        details={"source": "neutral", "pattern": "unknown", "low_stratus": False},
    )
