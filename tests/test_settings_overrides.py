from __future__ import annotations

import logging

# We use pytest because the repository already standardizes on it for automated checks.
import pytest

from sunrisescore.config.overrides import apply_settings_overrides
from sunrisescore.config.settings import ScoringSettings, Settings, get_logging_config, get_settings
from sunrisescore.core.logging import configure_logging


@pytest.fixture
def fresh_settings_cache():
    # get_settings() is lru_cached; env-dependent tests must not leak into each other.
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_default_weights_sum_to_base_budget():
    scoring = get_settings().scoring
    assert sum(scoring.factor_max_scores().values()) + scoring.synergy.bound == scoring.base_budget == 100
    assert scoring.factor_max_scores()["cloud_cover"] == 25


def test_budget_mismatch_is_rejected_on_load():
    with pytest.raises(ValueError, match=r"expected base_budget=100"):
        ScoringSettings.model_validate({"humidity": {"max_score": 30}})


def test_unknown_wind_curve_is_rejected():
    with pytest.raises(ValueError, match=r"Unknown wind curve 'gusty'"):
        Settings.model_validate({"scoring": {"wind": {"curve": "gusty"}}})


def test_wind_curve_can_be_selected_from_env(monkeypatch, fresh_settings_cache):
    monkeypatch.setenv("SUNRISESCORE_WIND_CURVE", "moderate_breeze")
    assert get_settings().scoring.wind.curve == "moderate_breeze"


def test_external_config_file_replaces_packaged_defaults(monkeypatch, tmp_path, fresh_settings_cache):
    config = tmp_path / "winter.yaml"
    config.write_text("app:\n  timezone: Europe/Lisbon\nscoring:\n  post_rain:\n    bonus: 3\n", encoding="utf-8")
    monkeypatch.setenv("SUNRISESCORE_CONFIG_PATH", str(config))

    settings = get_settings()

    assert settings.app.timezone == "Europe/Lisbon"
    assert settings.scoring.post_rain.bonus == 3
    # Keys absent from the file fall back to model defaults.
    assert settings.scoring.cloud_cover.max_score == 25


def test_external_config_file_must_be_a_mapping(monkeypatch, tmp_path, fresh_settings_cache):
    config = tmp_path / "broken.yaml"
    config.write_text("- just\n- a list\n", encoding="utf-8")
    monkeypatch.setenv("SUNRISESCORE_CONFIG_PATH", str(config))

    with pytest.raises(ValueError, match=r"expected a mapping"):
        get_settings()


def test_apply_settings_overrides_returns_same_object_when_none():
    settings = get_settings()
    assert apply_settings_overrides(settings, None) is settings


def test_apply_settings_overrides_can_recalibrate_scoring_knobs():
    settings = get_settings()

    out = apply_settings_overrides(settings, {"scoring": {"post_rain": {"bonus": 2}}})

    assert out.scoring.post_rain.bonus == 2
    # Sibling keys survive the deep merge.
    assert out.scoring.post_rain.max_precip_probability_pct == settings.scoring.post_rain.max_precip_probability_pct
    # The shared cached settings stay unchanged.
    assert settings.scoring.post_rain.bonus == 5


def test_apply_settings_overrides_rejects_app_level_keys_with_clear_path():
    with pytest.raises(ValueError, match=r"disallowed key: 'app'"):
        apply_settings_overrides(get_settings(), {"app": {"timezone": "UTC"}})


def test_apply_settings_overrides_revalidates_the_weight_budget():
    with pytest.raises(ValueError, match=r"base_budget"):
        apply_settings_overrides(get_settings(), {"scoring": {"wind": {"max_score": 10}}})


def test_configure_logging_applies_level_from_env(monkeypatch, fresh_settings_cache):
    monkeypatch.setenv("SUNRISESCORE_LOG_LEVEL", "debug")

    configure_logging()

    assert logging.getLogger("sunrisescore").level == logging.DEBUG
    # The cached packaged config is copied, not mutated.
    assert get_logging_config()["root"]["level"] == "INFO"
