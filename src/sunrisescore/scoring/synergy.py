# src/sunrisescore/scoring/synergy.py
"""
Synergy adjustment (bounded by `scoring.synergy.bound`).

Independent factor scorers cannot see interactions, so this term is computed from the
raw cloud/humidity/visibility/layer values, never from the factor scores:

- Hard override: visibility below the fog threshold forces the most negative value and arms
  the fog score ceiling; below the mist threshold forces a fixed strong negative. Both
  short-circuit every other rule. Mist under near-total, saturated overcast also arms the
  lower murk ceiling.
- Penalties: clear and dry ("vivid but no canvas"), humid and sparse ("washed out"),
  humid with optimal cloud ("muted"), humid and overcast ("grey and damp").
- Reward: optimal cloud with low-to-moderate humidity.
- Layer awareness: an all-low-stratus sky never collects the optimal-cloud reward.
"""

from __future__ import annotations

from dataclasses import dataclass

from sunrisescore.config.settings import Settings
from sunrisescore.domain.models import MultiLevelCloud
from sunrisescore.features.clouds import in_optimal_band, is_low_stratus
from sunrisescore.scoring.composite import clamp, clamp_int, score_at_most, usable_number


@dataclass(frozen=True)
class SynergyResult:
    adjustment: int
    rule: str
    fog_override: bool = False
    # Upper limit the assembler applies to the final score, when a hard override fired.
    score_ceiling: int | None = None


def _percent(value: float | None) -> float | None:
    number = usable_number(value)
    return None if number is None else clamp(number, 0.0, 100.0)


def compute_synergy(
    cloud_cover_pct: float | None,
    relative_humidity_pct: float | None,
    visibility_km: float | None,
    layers: MultiLevelCloud | None = None,
    *,
    settings: Settings,
) -> SynergyResult:
    cfg = settings.scoring.synergy
    bound = cfg.bound

    cover = _percent(cloud_cover_pct)
    humidity = _percent(relative_humidity_pct)
    visibility = usable_number(visibility_km)

    if visibility is not None and visibility >= 0 and visibility < cfg.mist_visibility_km:
        murk = (
            cover is not None
            and humidity is not None
            and cover >= cfg.murk_min_cover_pct
            and humidity >= cfg.murk_min_humidity_pct
        )
        ceiling = cfg.murk_score_ceiling if murk else None
        if visibility < cfg.fog_visibility_km:
            fog_ceiling = cfg.fog_score_ceiling if ceiling is None else min(ceiling, cfg.fog_score_ceiling)
            return SynergyResult(
                clamp_int(cfg.fog_adjustment, -bound, bound), "fog", fog_override=True, score_ceiling=fog_ceiling
            )
        return SynergyResult(
            clamp_int(cfg.mist_adjustment, -bound, bound),
            "mist_and_overcast" if murk else "mist",
            score_ceiling=ceiling,
        )

    if cover is None or humidity is None:
        return SynergyResult(0, "insufficient_data")

    optimal = in_optimal_band(cover, settings=settings)
    band_high = settings.scoring.cloud_cover.optimal_high_pct

    if cover < cfg.clear_sky_max_cover_pct and humidity <= cfg.dry_max_humidity_pct:
        adjustment, rule = cfg.boring_penalty, "clear_and_dry"
    elif humidity >= cfg.humid_min_pct:
        if cover < cfg.washed_out_max_cover_pct:
            adjustment, rule = cfg.washed_out_penalty, "humid_and_sparse"
        elif optimal:
            adjustment, rule = cfg.muted_penalty, "humid_and_optimal"
        elif cover > band_high:
            adjustment, rule = cfg.damp_overcast_penalty, "humid_and_overcast"
        else:
            adjustment, rule = 0, "neutral"
    elif optimal:
        adjustment = score_at_most(humidity, cfg.rewards, cfg.baseline_reward)
        rule = "optimal_combination"
        if is_low_stratus(cover, layers, settings=settings):
            adjustment, rule = cfg.low_stratus_adjustment, "low_stratus"
    else:
        adjustment, rule = 0, "neutral"

    return SynergyResult(clamp_int(adjustment, -bound, bound), rule)
