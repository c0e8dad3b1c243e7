from pollen_risk import AllergyProfile, PollenType, WeatherType, calculate_risk
from pollen_risk.scenarios import (
    BEIJING_MID_MARCH_WEEK,
    REGIONAL_POLLEN_DATA,
    assess_regions,
    create_measurements,
    find_region,
    find_scenario,
    generate_march_scenarios,
)

CEDAR = AllergyProfile(allergy_types={PollenType.CEDAR_CYPRESS})


def test_create_measurements_covers_every_pollen_in_order() -> None:
    measurements = create_measurements(1, 2, 3, 4, 5, 6, 7, 8)
    assert [m.type for m in measurements] == list(PollenType)
    assert [m.count for m in measurements] == [1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0, 8.0]


def test_beijing_week_sunday_is_thunderstorm_asthma() -> None:
    assert [s.name for s in BEIJING_MID_MARCH_WEEK] == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    sunday = find_scenario("sun")
    assert sunday.environment.weather_visual == WeatherType.THUNDERSTORM
    assert calculate_risk(sunday.environment, CEDAR).is_thunderstorm_asthma_risk is True
    assert calculate_risk(find_scenario("Thu").environment, CEDAR).is_thunderstorm_asthma_risk is False


def test_find_scenario_unknown_returns_none() -> None:
    assert find_scenario("Funday") is None
    assert find_region("Atlantis") is None


def test_march_generation_is_seeded() -> None:
    first = generate_march_scenarios(seed=7)
    second = generate_march_scenarios(seed=7)
    assert len(first) == 31
    assert first[0].name.endswith(" 1")
    assert first[-1].name.endswith(" 31")
    assert [s.environment for s in first] == [s.environment for s in second]


def test_march_generation_shifts_from_cedar_to_birch() -> None:
    for scenario in generate_march_scenarios(seed=3):
        env = scenario.environment
        assert len(env.measurements) == 8
        assert env.count_for(PollenType.RAGWEED) == 0
        if env.weather_visual == WeatherType.RAINY:
            assert 70 <= env.humidity <= 90
        else:
            assert 20 <= env.humidity <= 50
            assert env.is_thunderstorm is False


def test_regional_assessments_cover_all_cities() -> None:
    results = assess_regions(CEDAR)
    assert set(results) == {r.name for r in REGIONAL_POLLEN_DATA}
    assert len(results) == 12
    # Guangzhou wind is exactly 15 and Shenzhen humidity exactly 80: neither qualifies
    assert results["Guangzhou"].is_thunderstorm_asthma_risk is False
    assert results["Shenzhen"].is_thunderstorm_asthma_risk is False
    assert results["Beijing"].normalized_score > results["Shenzhen"].normalized_score


def test_harbin_is_birch_dominant() -> None:
    profile = AllergyProfile(allergy_types=set(PollenType))
    harbin = find_region("harbin")
    assert calculate_risk(harbin.environment, profile).dominant_allergen == PollenType.BIRCH
