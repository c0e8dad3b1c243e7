"""
Synthetic environment provider.

Only hard-coded and generated data: a Beijing mid-March week, a month of
March with a seasonal cedar-to-birch shift, and a regional snapshot of major
Chinese cities for the map view.
"""

from __future__ import annotations

import calendar
from datetime import date
from typing import Dict, List, Optional, Sequence

import numpy as np

from .models import (
    AllergyProfile,
    EnvironmentalData,
    PollenMeasurement,
    PollenType,
    RegionalPollenData,
    RiskAssessment,
    Scenario,
    WeatherType,
)
from .risk_engine import RiskEngine


def create_measurements(
    cedar: float,
    birch: float,
    oak: float,
    other: float,
    grass: float,
    ragweed: float,
    mugwort: float,
    pigweed: float,
) -> List[PollenMeasurement]:
    """One measurement per tracked pollen, in canonical order."""
    counts = (cedar, birch, oak, other, grass, ragweed, mugwort, pigweed)
    return [
        PollenMeasurement(type=pollen, count=float(count))
        for pollen, count in zip(PollenType, counts)
    ]


def _env(
    counts: Sequence[float],
    humidity: float,
    wind: float,
    storm: bool = False,
    visual: WeatherType = WeatherType.CLEAR,
) -> EnvironmentalData:
    return EnvironmentalData(
        measurements=create_measurements(*counts),
        humidity=humidity,
        wind_speed=wind,
        is_thunderstorm=storm,
        weather_visual=visual,
    )


BEIJING_MID_MARCH_WEEK: List[Scenario] = [
    Scenario("Mon", _env((350, 40, 10, 50, 2, 0, 0, 0), 30, 10)),
    Scenario("Tue", _env((500, 120, 25, 80, 5, 0, 0, 0), 25, 15, visual=WeatherType.WINDY)),
    Scenario("Wed", _env((850, 300, 40, 120, 10, 0, 0, 0), 20, 22, visual=WeatherType.WINDY)),
    Scenario("Thu", _env((45, 10, 2, 15, 0, 0, 0, 0), 75, 6, visual=WeatherType.RAINY)),
    Scenario("Fri", _env((200, 80, 30, 60, 5, 0, 0, 0), 45, 8)),
    Scenario("Sat", _env((400, 250, 100, 90, 15, 0, 0, 0), 40, 12)),
    Scenario(
        "Sun",
        _env((450, 350, 150, 110, 45, 2, 5, 2), 85, 18, True, WeatherType.THUNDERSTORM),
    ),
]

REGIONAL_POLLEN_DATA: List[RegionalPollenData] = [
    # North China
    RegionalPollenData("Beijing", 39.9042, 116.4074, _env((600, 200, 50, 100, 10, 0, 0, 0), 30, 12)),
    RegionalPollenData("Tianjin", 39.1255, 117.1901, _env((450, 150, 40, 80, 8, 0, 0, 0), 35, 14)),
    # East China
    RegionalPollenData("Shanghai", 31.2304, 121.4737, _env((100, 50, 200, 150, 80, 10, 5, 5), 65, 10)),
    RegionalPollenData(
        "Hangzhou", 30.2741, 120.1551,
        _env((80, 40, 180, 120, 100, 15, 8, 8), 70, 8, visual=WeatherType.RAINY),
    ),
    RegionalPollenData("Nanjing", 32.0603, 118.7969, _env((120, 60, 220, 140, 70, 12, 6, 6), 60, 12)),
    # South China
    RegionalPollenData(
        "Guangzhou", 23.1291, 113.2644,
        _env((50, 20, 100, 300, 150, 30, 20, 20), 85, 15, True, WeatherType.THUNDERSTORM),
    ),
    RegionalPollenData(
        "Shenzhen", 22.5431, 114.0579,
        _env((40, 15, 90, 280, 140, 25, 18, 18), 80, 18, True, WeatherType.THUNDERSTORM),
    ),
    # Central China
    RegionalPollenData("Wuhan", 30.5928, 114.3055, _env((200, 100, 150, 180, 60, 20, 15, 15), 55, 10)),
    # Southwest China
    RegionalPollenData("Chengdu", 30.5728, 104.0668, _env((150, 80, 120, 200, 90, 10, 10, 10), 75, 5)),
    RegionalPollenData("Chongqing", 29.5630, 106.5516, _env((130, 70, 110, 190, 85, 8, 8, 8), 80, 6)),
    # Northwest China
    RegionalPollenData(
        "Xi'an", 34.3416, 108.9398,
        _env((400, 180, 60, 90, 30, 5, 5, 5), 30, 15, visual=WeatherType.WINDY),
    ),
    # Northeast China
    RegionalPollenData(
        "Harbin", 45.8038, 126.5350,
        _env((50, 600, 40, 100, 10, 0, 0, 0), 40, 18, visual=WeatherType.WINDY),
    ),
]


def generate_march_scenarios(seed: Optional[int] = None, year: int = 2026) -> List[Scenario]:
    """
    A month of daily scenarios. Early March is cedar-heavy, late March shifts
    to birch and oak; about one day in five rains, which washes most pollen out.
    """
    rng = np.random.default_rng(seed)
    days_in_month = calendar.monthrange(year, 3)[1]
    scenarios: List[Scenario] = []

    for day in range(1, days_in_month + 1):
        day_name = date(year, 3, day).strftime("%a")
        progress = day / 31.0
        cedar_base = 800.0 * (1.0 - progress * 0.5)
        birch_base = 600.0 * progress
        oak_base = 200.0 * progress

        random_factor = float(rng.uniform(0.7, 1.3))
        is_rainy = bool(rng.random() < 0.2)
        is_windy = not is_rainy and bool(rng.random() < 0.3)
        washout = 0.1 if is_rainy else random_factor

        measurements = create_measurements(
            cedar=cedar_base * washout,
            birch=birch_base * washout,
            oak=oak_base * washout,
            other=100.0 * random_factor,
            grass=20.0 * progress * random_factor,
            ragweed=0,
            mugwort=0,
            pigweed=0,
        )
        if is_rainy:
            visual = WeatherType.RAINY
            humidity = float(rng.uniform(70, 90))
        else:
            visual = WeatherType.WINDY if is_windy else WeatherType.CLEAR
            humidity = float(rng.uniform(20, 50))
        wind = float(rng.uniform(15, 25) if is_windy else rng.uniform(5, 12))
        storm = is_rainy and bool(rng.random() < 0.3)

        scenarios.append(
            Scenario(
                name=f"{day_name} {day}",
                environment=EnvironmentalData(
                    measurements=measurements,
                    humidity=humidity,
                    wind_speed=wind,
                    is_thunderstorm=storm,
                    weather_visual=visual,
                ),
            )
        )
    return scenarios


def find_scenario(name: str, scenarios: Optional[Sequence[Scenario]] = None) -> Optional[Scenario]:
    """Case-insensitive lookup by scenario name; defaults to the Beijing week."""
    key = (name or "").strip().lower()
    for scenario in scenarios if scenarios is not None else BEIJING_MID_MARCH_WEEK:
        if scenario.name.lower() == key:
            return scenario
    return None


def find_region(name: str) -> Optional[RegionalPollenData]:
    key = (name or "").strip().lower()
    for region in REGIONAL_POLLEN_DATA:
        if region.name.lower() == key:
            return region
    return None


def assess_regions(
    profile: AllergyProfile, regions: Optional[Sequence[RegionalPollenData]] = None
) -> Dict[str, RiskAssessment]:
    """Score every region for one profile, keyed by region name (map data)."""
    return {
        region.name: RiskEngine.calculate_risk(region.environment, profile)
        for region in (regions if regions is not None else REGIONAL_POLLEN_DATA)
    }
