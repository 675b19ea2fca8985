"""
Unit conversion for provider values.

Providers report visibility in km or miles, ceilings in metres or feet, wind in km/h, m/s,
mph or knots, and pressure in hPa or its aliases. Everything is converted once at the
ingestion boundary so scorers only ever see canonical units (km, m, km/h, hPa).

Unknown units and non-numeric values return `None` with a warning; they never raise. `None`
then routes the affected factor to its neutral default.
"""

from __future__ import annotations

import logging
from typing import Any

from sunrisescore.scoring.composite import usable_number

logger = logging.getLogger(__name__)

KM_FACTORS = {"km": 1.0, "m": 0.001, "mi": 1.609344}
METER_FACTORS = {"m": 1.0, "km": 1000.0, "ft": 0.3048, "mi": 1609.344}
KMH_FACTORS = {"km/h": 1.0, "m/s": 3.6, "mph": 1.609344, "kt": 1.852}
HPA_FACTORS = {"hpa": 1.0, "mb": 1.0, "pa": 0.01, "kpa": 10.0, "inhg": 33.8639}

_ALIASES = {
    "kmh": "km/h",
    "kph": "km/h",
    "km/hr": "km/h",
    "ms": "m/s",
    "mps": "m/s",
    "mi/h": "mph",
    "kn": "kt",
    "kts": "kt",
    "knots": "kt",
    "mbar": "mb",
    "millibars": "mb",
    "miles": "mi",
    "feet": "ft",
}


def _canonical_unit(unit: str | None, default: str) -> str:
    if unit is None or not str(unit).strip():
        return default
    key = str(unit).strip().lower()
    return _ALIASES.get(key, key)


def _convert(value: Any, unit: str | None, *, factors: dict[str, float], default: str, quantity: str) -> float | None:
    number = usable_number(value)
    if number is None:
        if value is not None:
            logger.warning("Dropping non-numeric %s value: %r", quantity, value)
        return None
    key = _canonical_unit(unit, default)
    factor = factors.get(key)
    if factor is None:
        logger.warning("Dropping %s value with unknown unit %r", quantity, unit)
        return None
    return number * factor


def to_km(value: Any, unit: str | None = "km") -> float | None:
    return _convert(value, unit, factors=KM_FACTORS, default="km", quantity="distance")


def to_meters(value: Any, unit: str | None = "m") -> float | None:
    return _convert(value, unit, factors=METER_FACTORS, default="m", quantity="height")


def to_kmh(value: Any, unit: str | None = "km/h") -> float | None:
    return _convert(value, unit, factors=KMH_FACTORS, default="km/h", quantity="speed")


def to_hpa(value: Any, unit: str | None = "hPa") -> float | None:
    return _convert(value, unit, factors=HPA_FACTORS, default="hpa", quantity="pressure")
