import logging

import pytest

from sunrisescore.ingestion.normalize import normalize_observation
from sunrisescore.ingestion.units import to_hpa, to_km, to_kmh, to_meters


def _forecast(**overrides):
    forecast = {
        "CloudCover": 45,
        "RelativeHumidity": 65,
        "PrecipitationProbability": 5,
        "HasPrecipitation": False,
        "Wind": {"Speed": {"Value": 8}},
        "Visibility": {"Value": 15, "Unit": "km"},
        "IconPhrase": "Partly Cloudy",
        "DateTime": "2024-12-15T06:00:00+05:30",
    }
    forecast.update(overrides)
    return forecast


@pytest.mark.parametrize(
    "fn,value,unit,expected",
    [
        (to_km, 10, "mi", 16.09344),
        (to_km, 800, "m", 0.8),
        (to_km, 12, None, 12.0),
        (to_meters, 1000, "ft", 304.8),
        (to_meters, 2, "km", 2000.0),
        (to_kmh, 5, "m/s", 18.0),
        (to_kmh, 10, "kt", 18.52),
        (to_kmh, 10, "MPH", 16.09344),
        (to_kmh, 12, "km/h", 12.0),
        (to_hpa, 101325, "Pa", 1013.25),
        (to_hpa, 1012, "mb", 1012.0),
        (to_hpa, 29.92, "inHg", 1013.208),
    ],
)
def test_unit_conversions(fn, value, unit, expected):
    assert fn(value, unit) == pytest.approx(expected, rel=1e-4)


def test_unknown_unit_is_dropped_with_warning(caplog):
    with caplog.at_level(logging.WARNING, logger="sunrisescore.ingestion.units"):
        assert to_km(3, "furlong") is None
    assert "unknown unit" in caplog.text


def test_non_numeric_value_is_dropped_with_warning(caplog):
    with caplog.at_level(logging.WARNING, logger="sunrisescore.ingestion.units"):
        assert to_kmh("calm", "km/h") is None
    assert "non-numeric" in caplog.text


def test_missing_value_is_dropped_silently(caplog):
    with caplog.at_level(logging.WARNING):
        assert to_meters(None, None) is None
    assert caplog.text == ""


def test_normalize_observation_maps_provider_payload(settings):
    extras = {
        "air_quality": {"aod": 0.05},
        "cloud_layers": {"high": 50, "mid": 10, "low": 10},
        "pressure_msl": [1013, 1012, 1010, 1009],
        "night_hours_of_rain": 3,
        "latitude": 13.08,
    }
    sample, signals = normalize_observation(
        _forecast(Ceiling={"Value": 3000, "Unit": "ft"}), extras, settings=settings
    )

    assert sample.cloud_cover_pct == 45
    assert sample.relative_humidity_pct == 65
    assert sample.precip_probability_pct == 5
    assert sample.has_active_precipitation is False
    assert sample.wind_speed_kmh == 8
    assert sample.visibility_km == 15
    assert sample.weather_description == "Partly Cloudy"
    assert sample.sample_timestamp.utcoffset().total_seconds() == 5.5 * 3600
    assert sample.latitude_deg == pytest.approx(13.08)

    assert signals.multi_level_cloud.high_pct == 50
    assert signals.cloud_ceiling_m == pytest.approx(914.4)
    assert signals.pressure_series_hpa == (1013, 1012, 1010, 1009)
    assert signals.aerosol_optical_depth == 0.05
    assert signals.night_rain_hours == 3


def test_normalize_observation_converts_units(settings):
    sample, signals = normalize_observation(
        _forecast(
            Wind={"Speed": {"Value": 10, "Unit": "mi/h"}},
            Visibility={"Value": 10, "Unit": "mi"},
        ),
        {"pressure_msl": [101300, 101000], "pressure_unit": "Pa"},
        settings=settings,
    )
    assert sample.wind_speed_kmh == pytest.approx(16.09344)
    assert sample.visibility_km == pytest.approx(16.09344)
    assert signals.pressure_series_hpa == pytest.approx((1013.0, 1010.0))


def test_normalize_observation_without_extras_leaves_signals_missing(settings):
    sample, signals = normalize_observation({"CloudCover": 30}, settings=settings)

    assert sample.cloud_cover_pct == 30
    assert sample.relative_humidity_pct is None
    assert sample.visibility_km is None
    assert sample.sample_timestamp is None
    assert signals.multi_level_cloud is None
    assert signals.cloud_ceiling_m is None
    assert signals.pressure_series_hpa is None
    assert signals.aerosol_optical_depth is None


def test_normalize_observation_drops_garbage_with_warnings(settings, caplog):
    with caplog.at_level(logging.WARNING, logger="sunrisescore.ingestion"):
        sample, signals = normalize_observation(
            _forecast(CloudCover="n/a", DateTime="not-a-date"),
            {"pressure_msl": "1013", "cloud_layers": {"high": None}},
            settings=settings,
        )

    assert sample.cloud_cover_pct is None
    assert sample.sample_timestamp is None
    assert signals.pressure_series_hpa is None
    assert signals.multi_level_cloud is None
    assert "CloudCover" in caplog.text
    assert "DateTime" in caplog.text
    assert "pressure_msl" in caplog.text


def test_naive_timestamps_get_configured_timezone(settings):
    sample, _ = normalize_observation(_forecast(DateTime="2024-12-15T06:00:00"), settings=settings)
    assert sample.sample_timestamp.tzinfo is not None
    assert str(sample.sample_timestamp.tzinfo) == settings.app.timezone


@pytest.mark.parametrize("raw", ["false", "true", 1, 0])
def test_non_boolean_precipitation_flag_is_dropped_with_warning(settings, caplog, raw):
    with caplog.at_level(logging.WARNING, logger="sunrisescore.ingestion"):
        sample, _ = normalize_observation(_forecast(HasPrecipitation=raw), settings=settings)

    assert sample.has_active_precipitation is False
    assert "HasPrecipitation" in caplog.text


def test_boolean_precipitation_flag_passes_through(settings):
    wet, _ = normalize_observation(_forecast(HasPrecipitation=True), settings=settings)
    missing, _ = normalize_observation(_forecast(HasPrecipitation=None), settings=settings)

    assert wet.has_active_precipitation is True
    assert missing.has_active_precipitation is False
