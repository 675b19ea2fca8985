"""
Provider payload -> engine inputs.

`normalize_observation` maps one provider-shaped hourly forecast entry (the pre-dawn hour)
plus an optional extras mapping into the engine's `(RawSample, ExtendedSignals)` pair.

Forecast keys read:
- `CloudCover`, `RelativeHumidity`, `PrecipitationProbability` (percent)
- `HasPrecipitation` (bool), `IconPhrase` (text), `DateTime` (ISO-8601)
- `Wind.Speed{Value,Unit}`, `Visibility{Value,Unit}`, `Ceiling{Value,Unit}`

Extras keys read (every one optional):
- `air_quality.aod`
- `cloud_layers{high,mid,low}`
- `pressure_msl` (hourly series in hPa, earliest first)
- `night_hours_of_rain`
- `latitude`

A missing value stays missing (None). Nothing is defaulted here; defaults belong to the
scorers so the breakdown can report them as unavailable.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from sunrisescore.config.settings import Settings, get_settings
from sunrisescore.core.time import parse_datetime
from sunrisescore.domain.models import ExtendedSignals, MultiLevelCloud, RawSample
from sunrisescore.ingestion.units import to_hpa, to_kmh, to_km, to_meters
from sunrisescore.scoring.composite import usable_number

logger = logging.getLogger(__name__)


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _number(payload: Mapping[str, Any], key: str) -> float | None:
    raw = payload.get(key)
    number = usable_number(raw)
    if number is None and raw is not None:
        logger.warning("Dropping non-numeric %s value: %r", key, raw)
    return number


def _flag(payload: Mapping[str, Any], key: str) -> bool:
    raw = payload.get(key)
    if raw is None:
        return False
    if not isinstance(raw, bool):
        logger.warning("Dropping non-boolean %s value: %r", key, raw)
        return False
    return raw


def _measurement(payload: Mapping[str, Any], key: str) -> tuple[Any, str | None]:
    node = _mapping(payload.get(key))
    return node.get("Value"), node.get("Unit")


def _cloud_layers(extras: Mapping[str, Any]) -> MultiLevelCloud | None:
    layers = _mapping(extras.get("cloud_layers"))
    if not layers:
        return None
    parsed = MultiLevelCloud(
        high_pct=_number(layers, "high"),
        mid_pct=_number(layers, "mid"),
        low_pct=_number(layers, "low"),
    )
    if parsed.high_pct is None and parsed.mid_pct is None and parsed.low_pct is None:
        return None
    return parsed


def _pressure_series(extras: Mapping[str, Any]) -> tuple[float | None, ...] | None:
    raw = extras.get("pressure_msl")
    if raw is None:
        return None
    if isinstance(raw, (str, bytes)) or not hasattr(raw, "__iter__"):
        logger.warning("Dropping pressure_msl: expected a series, got %r", raw)
        return None
    unit = extras.get("pressure_unit")
    return tuple(to_hpa(v, unit) if v is not None else None for v in raw)


def normalize_observation(
    forecast: Mapping[str, Any],
    extras: Mapping[str, Any] | None = None,
    *,
    settings: Settings | None = None,
) -> tuple[RawSample, ExtendedSignals]:
    """Convert one pre-dawn forecast entry plus extras into engine inputs."""
    settings = settings or get_settings()
    extras = extras or {}

    wind_node = _mapping(forecast.get("Wind"))
    wind_value, wind_unit = _measurement(wind_node, "Speed")
    visibility_value, visibility_unit = _measurement(forecast, "Visibility")
    ceiling_value, ceiling_unit = _measurement(forecast, "Ceiling")

    timestamp = None
    raw_time = forecast.get("DateTime")
    if raw_time:
        try:
            timestamp = parse_datetime(str(raw_time), settings.app.timezone)
        except ValueError:
            logger.warning("Dropping unparseable DateTime: %r", raw_time)

    description = forecast.get("IconPhrase")
    sample = RawSample(
        cloud_cover_pct=_number(forecast, "CloudCover"),
        relative_humidity_pct=_number(forecast, "RelativeHumidity"),
        precip_probability_pct=_number(forecast, "PrecipitationProbability"),
        has_active_precipitation=_flag(forecast, "HasPrecipitation"),
        wind_speed_kmh=to_kmh(wind_value, wind_unit),
        visibility_km=to_km(visibility_value, visibility_unit),
        weather_description=str(description) if description else "",
        sample_timestamp=timestamp,
        latitude_deg=_number(extras, "latitude"),
    )

    signals = ExtendedSignals(
        multi_level_cloud=_cloud_layers(extras),
        cloud_ceiling_m=to_meters(ceiling_value, ceiling_unit),
        pressure_series_hpa=_pressure_series(extras),
        aerosol_optical_depth=_number(_mapping(extras.get("air_quality")), "aod"),
        night_rain_hours=_number(extras, "night_hours_of_rain"),
    )
    return sample, signals
