from __future__ import annotations

# Multi-location orchestration: score every location for the same morning, then rank.
# Each location is scored independently; ranking only orders the results and picks the best.

import logging
from datetime import datetime
from typing import Any, Iterable
from zoneinfo import ZoneInfo

from sunrisescore.config.overrides import apply_settings_overrides
from sunrisescore.config.settings import Settings, get_settings
from sunrisescore.domain.models import LocationInput, RankedLocation, RankingResult
from sunrisescore.scoring.engine import score_sunrise

logger = logging.getLogger(__name__)


def rank_locations(
    inputs: Iterable[LocationInput],
    *,
    settings: Settings | None = None,
    settings_overrides: dict[str, Any] | None = None,
) -> RankingResult:
    """Score each location and return them best-first (score desc, then key asc)."""
    settings = settings or get_settings()
    # Per-call recalibration never touches the cached settings object.
    settings = apply_settings_overrides(settings, settings_overrides)

    scored = [(location, score_sunrise(location.sample, location.signals, settings=settings)) for location in inputs]
    scored.sort(key=lambda pair: (-pair[1].score, pair[0].key))

    results = [
        RankedLocation(rank=i, key=location.key, name=location.name, result=result)
        for i, (location, result) in enumerate(scored, start=1)
    ]

    average = round(sum(r.result.score for r in results) / len(results), 1) if results else None
    best = results[0] if results else None
    if best is not None:
        logger.info(
            "Ranked %d locations: best=%s score=%d average=%.1f",
            len(results),
            best.key,
            best.result.score,
            average,
        )
    else:
        logger.info("Ranked 0 locations")

    return RankingResult(
        generated_at=datetime.now(ZoneInfo(settings.app.timezone)),
        results=results,
        best=best,
        average_score=average,
        meta={
            "location_count": len(results),
            "wind_curve": settings.scoring.wind.curve,
            "settings_overrides_applied": bool(settings_overrides),
        },
    )
