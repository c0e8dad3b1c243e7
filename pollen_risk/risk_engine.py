"""
Central risk engine: weighs the pollen a user is allergic to, personalizes it
by their sensitivity, adjusts for weather, and compresses the result into a
0-100 score.

Key stages:
- potency-weight every relevant measurement and find the dominant allergen
- scale total exposure by the severity recorded for the dominant allergen
- apply either the thunderstorm-asthma override or wind/humidity modifiers
- amplify nonlinear spikes when any raw count is very high
- log-compress against a calibration ceiling and clamp to [0, 100]
"""

from __future__ import annotations

import logging
import math
from typing import Optional

from .models import (
    AllergyProfile,
    EnvironmentalData,
    PollenType,
    RiskAssessment,
    RiskLevel,
    Severity,
)
from .pollen_types import potency_weight

log = logging.getLogger(__name__)


class RiskEngine:
    """
    Stateless scorer. All methods are static so callers can use the class
    directly or through the module-level calculate_risk helper.
    """

    E_MAX = 5000.0
    # Thunderstorm asthma needs this much potency-weighted exposure.
    MODERATE_EXPOSURE_THRESHOLD = 250.0
    # Compared against raw grain counts, not exposure.
    VERY_HIGH_COUNT_THRESHOLD = 1000.0
    SPIKE_AMPLIFICATION = 1.2

    SENSITIVITY_MULTIPLIERS = {
        Severity.MILD: 0.6,
        Severity.MODERATE: 1.0,
        Severity.SEVERE: 1.8,
        Severity.UNKNOWN: 1.0,
    }

    @classmethod
    def calculate_risk(
        cls, environment: EnvironmentalData, profile: AllergyProfile
    ) -> RiskAssessment:
        """
        Score the environment for this profile. Never raises; out-of-range
        inputs flow through the arithmetic and end up clamped.
        """
        sensitized = frozenset(profile.allergy_types)
        total_base_exposure = 0.0
        max_individual_exposure = 0.0
        dominant_allergen: Optional[PollenType] = None
        has_very_high_concentration = False

        for measurement in environment.measurements:
            if not profile.is_allergic_to(measurement.type):
                continue
            exposure = measurement.count * potency_weight(measurement.type)
            total_base_exposure += exposure

            if measurement.count > cls.VERY_HIGH_COUNT_THRESHOLD:
                has_very_high_concentration = True

            # Strict comparison keeps the first-seen maximum on ties
            if exposure > max_individual_exposure:
                max_individual_exposure = exposure
                dominant_allergen = measurement.type

        if total_base_exposure == 0 or dominant_allergen is None:
            return RiskAssessment(
                normalized_score=0.0,
                risk_level=RiskLevel.LOW,
                dominant_allergen=None,
                is_thunderstorm_asthma_risk=False,
                user_sensitized_allergens=sensitized,
            )

        highest_severity = profile.severity_for(dominant_allergen)
        personalized_exposure = total_base_exposure * cls.sensitivity_multiplier(
            highest_severity
        )

        is_thunderstorm_risk = cls.is_thunderstorm_asthma(environment, total_base_exposure)
        if is_thunderstorm_risk:
            weather_multiplier = 1.7 if highest_severity == Severity.SEVERE else 1.5
        else:
            weather_multiplier = cls.wind_modifier(
                environment.wind_speed
            ) * cls.humidity_modifier(environment.humidity)

        adjusted_exposure = personalized_exposure * weather_multiplier
        if has_very_high_concentration:
            adjusted_exposure *= cls.SPIKE_AMPLIFICATION

        score = cls.normalize(adjusted_exposure)
        log.debug(
            "Risk %.2f (dominant=%s, base=%.1f, adjusted=%.1f, storm=%s)",
            score,
            dominant_allergen.value,
            total_base_exposure,
            adjusted_exposure,
            is_thunderstorm_risk,
        )
        return RiskAssessment(
            normalized_score=score,
            risk_level=RiskLevel.from_score(score),
            dominant_allergen=dominant_allergen,
            is_thunderstorm_asthma_risk=is_thunderstorm_risk,
            user_sensitized_allergens=sensitized,
        )

    @classmethod
    def is_thunderstorm_asthma(
        cls, environment: EnvironmentalData, total_base_exposure: float
    ) -> bool:
        return (
            environment.is_thunderstorm
            and environment.humidity > 80.0
            and environment.wind_speed > 15.0
            and total_base_exposure > cls.MODERATE_EXPOSURE_THRESHOLD
        )

    @classmethod
    def sensitivity_multiplier(cls, severity: Severity) -> float:
        return cls.SENSITIVITY_MULTIPLIERS.get(severity, 1.0)

    @staticmethod
    def wind_modifier(speed: float) -> float:
        if speed < 5.0:
            return 0.9
        if speed <= 15.0:
            return 1.0
        return 1.2

    @staticmethod
    def humidity_modifier(humidity: float) -> float:
        if humidity < 40.0:
            return 0.9
        if humidity <= 80.0:
            return 1.0
        return 1.1

    @classmethod
    def normalize(cls, adjusted_exposure: float) -> float:
        """
        Logarithmic compression so very large exposures saturate near 100
        instead of growing linearly. Exposures at or below -1 have no log and
        score 0.
        """
        if adjusted_exposure <= -1.0:
            return 0.0
        raw_score = 100.0 * (math.log1p(adjusted_exposure) / math.log1p(cls.E_MAX))
        return min(max(raw_score, 0.0), 100.0)


def calculate_risk(environment: EnvironmentalData, profile: AllergyProfile) -> RiskAssessment:
    return RiskEngine.calculate_risk(environment, profile)
