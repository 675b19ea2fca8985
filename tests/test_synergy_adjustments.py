from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from sunrisescore.domain.models import MultiLevelCloud, RawSample
from sunrisescore.scoring.adjustments import post_rain_bonus, solar_angle_bonus
from sunrisescore.scoring.synergy import compute_synergy

IST = ZoneInfo("Asia/Kolkata")


def test_fog_overrides_every_other_rule(settings):
    # Optimal cloud + dry air would otherwise earn the maximum reward.
    result = compute_synergy(45, 55, 2.0, settings=settings)
    assert result.adjustment == -4
    assert result.rule == "fog"
    assert result.fog_override is True


@pytest.mark.parametrize("cover", [None, 0, 45, 100])
@pytest.mark.parametrize("humidity", [None, 30, 70, 99])
def test_fog_threshold_ignores_cloud_and_humidity(settings, cover, humidity):
    assert compute_synergy(cover, humidity, 2.9, settings=settings).adjustment == -4


def test_mist_is_a_strong_but_not_maximal_penalty(settings):
    result = compute_synergy(45, 55, 4.0, settings=settings)
    assert result.adjustment == -3
    assert result.fog_override is False
    assert result.score_ceiling is None


def test_mist_under_saturated_overcast_arms_the_murk_ceiling(settings):
    result = compute_synergy(95, 95, 4.0, settings=settings)
    assert result.adjustment == -3
    assert result.rule == "mist_and_overcast"
    assert result.score_ceiling == 24


def test_fog_under_saturated_overcast_takes_the_lower_ceiling(settings):
    assert compute_synergy(45, 55, 2.0, settings=settings).score_ceiling == 40
    assert compute_synergy(95, 95, 2.0, settings=settings).score_ceiling == 24


def test_murk_needs_both_cover_and_humidity(settings):
    assert compute_synergy(95, 80, 4.0, settings=settings).score_ceiling is None
    assert compute_synergy(80, 95, 4.0, settings=settings).score_ceiling is None
    assert compute_synergy(None, 95, 4.0, settings=settings).score_ceiling is None


@pytest.mark.parametrize(
    "cover,humidity,expected,rule",
    [
        (10, 50, -2, "clear_and_dry"),
        (20, 90, -3, "humid_and_sparse"),
        (45, 90, -1, "humid_and_optimal"),
        (80, 90, -2, "humid_and_overcast"),
        (45, 60, 4, "optimal_combination"),
        (45, 70, 2, "optimal_combination"),
        (45, 80, 1, "optimal_combination"),
        (70, 60, 0, "neutral"),
    ],
)
def test_synergy_interactions(settings, cover, humidity, expected, rule):
    result = compute_synergy(cover, humidity, 20, settings=settings)
    assert result.adjustment == expected
    assert result.rule == rule


def test_low_stratus_never_collects_optimal_reward(settings):
    stratus = MultiLevelCloud(high_pct=0, mid_pct=0, low_pct=45)
    result = compute_synergy(45, 60, 20, stratus, settings=settings)
    assert result.adjustment == -1
    assert result.rule == "low_stratus"


def test_synergy_missing_inputs_are_neutral(settings):
    assert compute_synergy(None, 60, 20, settings=settings).adjustment == 0
    assert compute_synergy(45, None, 20, settings=settings).adjustment == 0
    # Missing visibility just skips the fog/mist check.
    assert compute_synergy(45, 60, None, settings=settings).adjustment == 4


def test_synergy_is_always_within_bound(settings):
    for cover in range(0, 101, 5):
        for humidity in range(0, 101, 5):
            for visibility in (0.5, 4, 10, 30):
                adjustment = compute_synergy(cover, humidity, visibility, settings=settings).adjustment
                assert -4 <= adjustment <= 4


def _sample(**overrides) -> RawSample:
    base = dict(
        cloud_cover_pct=40,
        relative_humidity_pct=75,
        precip_probability_pct=5,
        visibility_km=16,
        wind_speed_kmh=8,
    )
    base.update(overrides)
    return RawSample(**base)


def test_post_rain_from_night_rain_signal(settings):
    result = post_rain_bonus(_sample(precip_probability_pct=10), 3, settings=settings)
    assert result.bonus == 5
    assert result.is_post_rain
    assert result.detection == "night_rain"


def test_post_rain_not_awarded_while_rain_still_likely(settings):
    result = post_rain_bonus(_sample(precip_probability_pct=40), 3, settings=settings)
    assert result.bonus == 0
    assert result.detection == "rain_still_likely"


def test_post_rain_signature_used_only_without_explicit_signal(settings):
    assert post_rain_bonus(_sample(), None, settings=settings).detection == "signature"
    assert post_rain_bonus(_sample(), None, settings=settings).bonus == 5
    # An explicit "no rain overnight" wins over the heuristic.
    assert post_rain_bonus(_sample(), 0, settings=settings).bonus == 0


def test_post_rain_signature_humidity_range_is_exclusive(settings):
    assert post_rain_bonus(_sample(relative_humidity_pct=85), None, settings=settings).bonus == 0
    assert post_rain_bonus(_sample(relative_humidity_pct=60), None, settings=settings).bonus == 0


def test_post_rain_unknown_precip_gets_no_bonus(settings):
    result = post_rain_bonus(_sample(precip_probability_pct=None), 5, settings=settings)
    assert result.bonus == 0
    assert result.detection == "unknown_precip"


@pytest.mark.parametrize(
    "when,latitude,expected",
    [
        (datetime(2024, 12, 15, 6, 0, tzinfo=IST), 13.0, 2),
        (datetime(2024, 11, 1, 6, 0, tzinfo=IST), 13.0, 1),
        (datetime(2024, 3, 20, 6, 0, tzinfo=IST), 13.0, 0),
        (datetime(2024, 6, 21, 6, 0, tzinfo=IST), 13.0, -2),
        (datetime(2024, 12, 15, 6, 0, tzinfo=IST), None, 2),
        (datetime(2024, 12, 15, 6, 0, tzinfo=IST), -33.9, -2),
        (datetime(2024, 6, 21, 6, 0, tzinfo=IST), -33.9, 2),
    ],
)
def test_solar_angle_bonus(settings, when, latitude, expected):
    assert solar_angle_bonus(when, latitude, settings=settings) == expected


def test_solar_angle_bonus_without_timestamp(settings):
    assert solar_angle_bonus(None, settings=settings) == 0


def test_solar_angle_bonus_reads_the_samples_own_date(settings):
    # Naive timestamps are read in the configured timezone; aware ones keep their own offset.
    naive = datetime(2024, 6, 21, 6, 0)
    aware = datetime.fromisoformat("2024-12-31T23:30:00+00:00")
    assert solar_angle_bonus(naive, settings=settings) == -2
    assert solar_angle_bonus(aware, settings=settings) == 2
