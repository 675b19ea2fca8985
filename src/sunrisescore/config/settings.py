# src/sunrisescore/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/sunrisescore/config/defaults.yaml`, then optionally overridden by:
- environment variables (e.g., `SUNRISESCORE_LOG_LEVEL`)
- an external YAML file via `SUNRISESCORE_CONFIG_PATH`

Design rule:
- Every factor weight, band boundary and bonus constant lives in YAML, not in scorer code.
  Recalibrating the engine is a data change.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, model_validator

from sunrisescore.core.env import load_dotenv_if_present, resolve_project_path

# (threshold, score) pairs. Each scorer documents whether the threshold is an upper or lower bound.
ScoreBands = list[tuple[float, int]]


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `sunrisescore.config`."""
    text = resources.files("sunrisescore.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "SunriseScore"
    timezone: str = "Asia/Kolkata"
    log_level: str = "INFO"


class CloudCoverSettings(BaseModel):
    max_score: int = 25
    neutral_score: int = 12
    optimal_center_pct: float = 45
    optimal_half_width_pct: float = 15
    plateau_half_width_pct: float = 5
    band_edge_score: int = 22
    clear_sky_limit_pct: float = 15
    # Score at 0% cover and at `clear_sky_limit_pct`.
    clear_sky_scores: tuple[int, int] = (8, 11)
    # Piecewise-linear decay above the optimal band: (cover %, score) points.
    decay_points: list[tuple[float, float]] = Field(
        default_factory=lambda: [(75, 15), (90, 5), (100, 0)]
    )

    @property
    def optimal_low_pct(self) -> float:
        return self.optimal_center_pct - self.optimal_half_width_pct

    @property
    def optimal_high_pct(self) -> float:
        return self.optimal_center_pct + self.optimal_half_width_pct


class LowStratusSettings(BaseModel):
    max_elevated_pct: float = 15
    min_low_pct: float = 25
    score: int = 2


class CeilingFallbackSettings(BaseModel):
    min_total_cover_pct: float = 20
    # Lower-bound inclusive: ceiling >= threshold -> score.
    bands: ScoreBands = Field(default_factory=lambda: [(6000, 13), (4000, 11), (2000, 8), (1000, 4)])
    floor_score: int = 2


class MultiLevelCloudSettings(BaseModel):
    max_score: int = 15
    neutral_score: int = 8
    high_canvas_min_pct: float = 30
    clear_horizon_max_low_pct: float = 40
    mixed_max_low_pct: float = 70
    light_mid_max_pct: float = 30
    heavy_mid_min_pct: float = 50
    canvas_score: int = 15
    canvas_some_mid_score: int = 13
    canvas_heavy_mid_score: int = 11
    mixed_score: int = 9
    blocked_score: int = 6
    low_blanket_min_pct: float = 75
    low_blanket_score: int = 1
    heavy_low_min_pct: float = 50
    heavy_low_score: int = 3
    mid_canvas_min_pct: float = 50
    mid_canvas_score: int = 5
    limited_score: int = 4
    low_stratus: LowStratusSettings = Field(default_factory=LowStratusSettings)
    ceiling: CeilingFallbackSettings = Field(default_factory=CeilingFallbackSettings)


class HumiditySettings(BaseModel):
    max_score: int = 20
    neutral_score: int = 10
    # Upper-bound inclusive: humidity <= threshold -> score.
    bands: ScoreBands = Field(
        default_factory=lambda: [(55, 20), (65, 17), (75, 14), (82, 11), (88, 9), (93, 6), (97, 3)]
    )
    floor_score: int = 1


class PressureTrendSettings(BaseModel):
    max_score: int = 10
    neutral_score: int = 5
    storm_fall_hpa: float = 5
    front_fall_hpa: float = 2
    slight_fall_hpa: float = 0.5
    stable_band_hpa: float = 0.5
    rise_hpa: float = 2
    storm_score: int = 2
    front_score: int = 10
    slight_fall_score: int = 7
    stable_score: int = 5
    rising_score: int = 4
    strong_rise_score: int = 3


class AodSettings(BaseModel):
    max_score: int = 8
    neutral_score: int = 4
    # Upper-bound exclusive: aod < threshold -> score.
    bands: ScoreBands = Field(
        default_factory=lambda: [
            (0.02, 7),
            (0.10, 8),
            (0.20, 7),
            (0.30, 6),
            (0.40, 5),
            (0.60, 3),
            (0.80, 2),
            (1.00, 1),
        ]
    )
    floor_score: int = 0


class VisibilitySettings(BaseModel):
    max_score: int = 10
    neutral_score: int = 5
    # Lower-bound inclusive: visibility >= threshold -> score.
    bands: ScoreBands = Field(
        default_factory=lambda: [(18, 10), (15, 8), (12, 7), (10, 6), (8, 5), (5, 4), (3, 2), (1, 1)]
    )
    floor_score: int = 0


class KeywordPenalty(BaseModel):
    keywords: list[str]
    penalty: int = Field(..., ge=0)


class WeatherGateSettings(BaseModel):
    max_score: int = 5
    neutral_score: int = 3
    # Strictly-greater: precipitation probability > threshold -> penalty.
    precip_penalties: ScoreBands = Field(default_factory=lambda: [(70, 4), (50, 3), (30, 2), (15, 1)])
    active_precip_penalty: int = 2
    keyword_penalties: list[KeywordPenalty] = Field(
        default_factory=lambda: [
            KeywordPenalty(keywords=["thunder", "storm"], penalty=3),
            KeywordPenalty(keywords=["fog", "mist"], penalty=2),
            KeywordPenalty(keywords=["haze", "smoke", "dust"], penalty=1),
        ]
    )
    clear_keywords: list[str] = Field(default_factory=lambda: ["clear", "sunny"])
    clear_credit: int = 1


class WindCurve(BaseModel):
    description: str = ""
    # Upper-bound inclusive: wind <= threshold -> score.
    bands: ScoreBands
    floor_score: int = 0


class WindSettings(BaseModel):
    max_score: int = 3
    neutral_score: int = 2
    curve: str = "calm_is_best"
    curves: dict[str, WindCurve] = Field(
        default_factory=lambda: {
            "calm_is_best": WindCurve(bands=[(10, 3), (20, 2), (30, 1)]),
            "moderate_breeze": WindCurve(bands=[(2, 2), (15, 3), (25, 2), (35, 1)]),
        }
    )

    @model_validator(mode="after")
    def _validate_curve(self) -> "WindSettings":
        if self.curve not in self.curves:
            raise ValueError(f"Unknown wind curve '{self.curve}'; expected one of {sorted(self.curves)}")
        return self

    @property
    def active_curve(self) -> WindCurve:
        return self.curves[self.curve]


class SynergySettings(BaseModel):
    bound: int = 4
    fog_visibility_km: float = 3
    fog_adjustment: int = -4
    mist_visibility_km: float = 5
    mist_adjustment: int = -3
    fog_score_ceiling: int = 40
    # Mist over humid, near-total overcast: grey murk, capped like fog.
    murk_min_cover_pct: float = 90
    murk_min_humidity_pct: float = 90
    murk_score_ceiling: int = 24
    clear_sky_max_cover_pct: float = 20
    dry_max_humidity_pct: float = 65
    boring_penalty: int = -2
    humid_min_pct: float = 85
    washed_out_max_cover_pct: float = 30
    washed_out_penalty: int = -3
    muted_penalty: int = -1
    damp_overcast_penalty: int = -2
    # Upper-bound inclusive humidity -> reward when cloud sits in the optimal band.
    rewards: ScoreBands = Field(default_factory=lambda: [(65, 4), (78, 2)])
    baseline_reward: int = 1
    low_stratus_adjustment: int = -1


class PostRainSettings(BaseModel):
    bonus: int = 5
    max_precip_probability_pct: float = 20
    min_night_rain_hours: float = 1
    signature_min_visibility_km: float = 15
    signature_cloud_range_pct: tuple[float, float] = (20, 70)
    # Exclusive on both ends.
    signature_humidity_range_pct: tuple[float, float] = (60, 85)


class SolarSettings(BaseModel):
    bound: int = 2
    axial_tilt_deg: float = 23.44
    deep_season_deg: float = 18
    shoulder_season_deg: float = 8


class ScoringSettings(BaseModel):
    base_budget: int = 100
    score_floor: int = 0
    score_ceiling: int = 100
    cloud_cover: CloudCoverSettings = Field(default_factory=CloudCoverSettings)
    multi_level_cloud: MultiLevelCloudSettings = Field(default_factory=MultiLevelCloudSettings)
    humidity: HumiditySettings = Field(default_factory=HumiditySettings)
    pressure_trend: PressureTrendSettings = Field(default_factory=PressureTrendSettings)
    aod: AodSettings = Field(default_factory=AodSettings)
    visibility: VisibilitySettings = Field(default_factory=VisibilitySettings)
    weather: WeatherGateSettings = Field(default_factory=WeatherGateSettings)
    wind: WindSettings = Field(default_factory=WindSettings)
    synergy: SynergySettings = Field(default_factory=SynergySettings)
    post_rain: PostRainSettings = Field(default_factory=PostRainSettings)
    solar: SolarSettings = Field(default_factory=SolarSettings)

    def factor_max_scores(self) -> dict[str, int]:
        return {
            "cloud_cover": self.cloud_cover.max_score,
            "multi_level_cloud": self.multi_level_cloud.max_score,
            "humidity": self.humidity.max_score,
            "pressure_trend": self.pressure_trend.max_score,
            "aod": self.aod.max_score,
            "visibility": self.visibility.max_score,
            "weather": self.weather.max_score,
            "wind": self.wind.max_score,
        }

    @model_validator(mode="after")
    def _validate_budget(self) -> "ScoringSettings":
        total = sum(self.factor_max_scores().values()) + self.synergy.bound
        if total != self.base_budget:
            raise ValueError(
                f"Factor max scores plus synergy bound sum to {total}; expected base_budget={self.base_budget}"
            )
        return self


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    scoring: ScoringSettings = Field(default_factory=ScoringSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload."""
    load_dotenv_if_present()
    data = dict(data)

    log_level = os.getenv("SUNRISESCORE_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    timezone = os.getenv("SUNRISESCORE_TIMEZONE")
    if timezone:
        data.setdefault("app", {})["timezone"] = timezone

    wind_curve = os.getenv("SUNRISESCORE_WIND_CURVE")
    if wind_curve:
        data.setdefault("scoring", {}).setdefault("wind", {})["curve"] = wind_curve

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("SUNRISESCORE_CONFIG_PATH")
    raw = _read_yaml_file(resolve_project_path(config_path)) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
