"""
Domain models (Pydantic).

These types represent the stable "contract" between the engine and its collaborators:
- inputs built once per (location, day) by the fetching collaborator (`RawSample`, `ExtendedSignals`)
- the explainable scoring output (`FactorResult`, `ScoreBreakdown`, `SunriseResult`)
- multi-location ranking output (`RankingResult`)

Input records are frozen: the engine receives them by value and never mutates them.
Numeric input fields are deliberately unconstrained (no ge/le) and nullable. Out-of-range,
non-finite or missing values are routed to each factor's neutral default by the scorers
instead of failing validation, because a partially-informed score beats a failed request.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

Verdict = Literal["EXCELLENT", "VERY GOOD", "GOOD", "FAIR", "POOR", "UNFAVORABLE"]
Recommendation = Literal["GO", "MAYBE", "SKIP", "NO"]

FactorName = Literal[
    "cloud_cover",
    "multi_level_cloud",
    "humidity",
    "pressure_trend",
    "aod",
    "visibility",
    "weather",
    "wind",
]

FACTOR_NAMES: tuple[FactorName, ...] = (
    "cloud_cover",
    "multi_level_cloud",
    "humidity",
    "pressure_trend",
    "aod",
    "visibility",
    "weather",
    "wind",
)


class RawSample(BaseModel):
    """Required pre-dawn observation, already in canonical units (%, km, km/h)."""

    model_config = ConfigDict(frozen=True)

    cloud_cover_pct: float | None = None
    relative_humidity_pct: float | None = None
    precip_probability_pct: float | None = None
    has_active_precipitation: bool = False
    wind_speed_kmh: float | None = None
    visibility_km: float | None = None
    weather_description: str = ""
    sample_timestamp: datetime | None = None
    latitude_deg: float | None = None


class MultiLevelCloud(BaseModel):
    """Cloud fraction per altitude band (low < 2 km, mid 2-6 km, high > 6 km)."""

    model_config = ConfigDict(frozen=True)

    high_pct: float | None = None
    mid_pct: float | None = None
    low_pct: float | None = None


class ExtendedSignals(BaseModel):
    """Optional signals; each field may independently be missing."""

    model_config = ConfigDict(frozen=True)

    multi_level_cloud: MultiLevelCloud | None = None
    cloud_ceiling_m: float | None = None
    pressure_series_hpa: tuple[float | None, ...] | None = None
    aerosol_optical_depth: float | None = None
    night_rain_hours: float | None = None


class FactorResult(BaseModel):
    """One factor's sub-score plus the normalized input it was computed from."""

    value: Any = None
    score: int
    max_score: int = Field(..., ge=0)
    available: bool = True
    details: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _validate_bounds(self) -> "FactorResult":
        if not 0 <= self.score <= self.max_score:
            raise ValueError(f"score {self.score} outside [0, {self.max_score}]")
        return self


class ScoreBreakdown(BaseModel):
    """Explainable breakdown: eight factors, the synergy term and the adjustment layer."""

    cloud_cover: FactorResult
    multi_level_cloud: FactorResult
    humidity: FactorResult
    pressure_trend: FactorResult
    aod: FactorResult
    visibility: FactorResult
    weather: FactorResult
    wind: FactorResult
    synergy: int
    synergy_rule: str = "neutral"
    post_rain_bonus: int = Field(..., ge=0)
    is_post_rain: bool
    post_rain_detection: str = "none"
    solar_bonus: int
    base_score: int
    score_ceiling: int = Field(100, ge=0, le=100)
    final_score: int = Field(..., ge=0, le=100)

    def factors(self) -> dict[str, FactorResult]:
        return {name: getattr(self, name) for name in FACTOR_NAMES}


class FactorLabel(BaseModel):
    """Short qualitative rating and a longer explanatory sentence for one factor."""

    rating: str
    context: str
    available: bool = True


class AtmosphericLabels(BaseModel):
    cloud_cover: FactorLabel
    multi_level_cloud: FactorLabel
    humidity: FactorLabel
    pressure_trend: FactorLabel
    aod: FactorLabel
    visibility: FactorLabel
    weather: FactorLabel
    wind: FactorLabel
    synergy: str
    post_rain: str
    solar: str


class SunriseResult(BaseModel):
    """Output contract for one (location, day) evaluation."""

    score: int = Field(..., ge=0, le=100)
    breakdown: ScoreBreakdown
    verdict: Verdict
    recommendation: Recommendation
    labels: AtmosphericLabels


class LocationInput(BaseModel):
    """One location to evaluate in a multi-location run."""

    key: str
    name: str
    sample: RawSample
    signals: ExtendedSignals | None = None


class RankedLocation(BaseModel):
    rank: int = Field(..., ge=1)
    key: str
    name: str
    result: SunriseResult


class RankingResult(BaseModel):
    """Locations ranked best-first, plus the best pick and the average score."""

    generated_at: datetime
    results: list[RankedLocation]
    best: RankedLocation | None = None
    average_score: float | None = None
    meta: dict[str, Any] = Field(default_factory=dict)
