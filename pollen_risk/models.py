"""
Shared domain models used by the pollen risk engine.

- PollenType / Severity / TestStatus: closed vocabularies for the user profile.
- PollenMeasurement / EnvironmentalData: one observation of the air outside.
- AllergyProfile: what the user reacts to and how strongly.
- RiskAssessment / RecommendationSet: scored output and the advice derived from it.
- SymptomLog: one journal entry with the risk snapshot captured at write time.
- Scenario / RegionalPollenData: synthetic inputs from the scenario provider.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum, IntEnum
from typing import Dict, FrozenSet, List, Mapping, Optional, Set


class PollenType(str, Enum):
    CEDAR_CYPRESS = "Cedar/Cypress"
    BIRCH = "Birch"
    OAK = "Oak"
    OTHER_TREE = "Other Trees"
    GRASS = "Grass"
    RAGWEED = "Ragweed"
    MUGWORT = "Mugwort"
    PIGWEED = "Pigweed"


class Severity(str, Enum):
    MILD = "Mild"
    MODERATE = "Moderate"
    SEVERE = "Severe"
    UNKNOWN = "I don't know"


class TestStatus(str, Enum):
    # Keeps pytest from collecting the enum when tests import it.
    __test__ = False

    YES = "Yes"
    NO = "No"
    NOT_SURE = "Not Sure"


class WeatherType(str, Enum):
    CLEAR = "clear"
    WINDY = "windy"
    RAINY = "rainy"
    THUNDERSTORM = "thunderstorm"
    SNOWY = "snowy"


class SymptomSeverity(IntEnum):
    NONE = 0
    MILD = 1
    MODERATE = 2
    SEVERE = 3


class RiskLevel(str, Enum):
    LOW = "Low Risk"
    MODERATE = "Moderate"
    HIGH = "High Risk"
    SEVERE = "Severe"

    @classmethod
    def from_score(cls, score: float) -> "RiskLevel":
        """
        Step function over the 0-100 score with closed upper bounds at 25/50/75.
        """
        if score <= 25.0:
            return cls.LOW
        if score <= 50.0:
            return cls.MODERATE
        if score <= 75.0:
            return cls.HIGH
        return cls.SEVERE


@dataclass(frozen=True)
class PollenMeasurement:
    type: PollenType
    count: float  # grain concentration, arbitrary units


@dataclass(frozen=True)
class EnvironmentalData:
    """
    One observation: per-pollen counts plus the weather that shapes exposure.
    weather_visual is display-only; scoring reads is_thunderstorm instead.
    """

    measurements: List[PollenMeasurement]
    humidity: float  # percent
    wind_speed: float  # mph
    is_thunderstorm: bool = False
    weather_visual: WeatherType = WeatherType.CLEAR

    def count_for(self, pollen: PollenType) -> float:
        return sum(m.count for m in self.measurements if m.type == pollen)


@dataclass
class AllergyProfile:
    """
    Captures which pollens the user reacts to and how strongly.
    severity_mapping is only meaningful for types present in allergy_types.
    """

    allergy_types: Set[PollenType] = field(default_factory=set)
    severity_mapping: Dict[PollenType, Severity] = field(default_factory=dict)
    has_tested_before: TestStatus = TestStatus.NOT_SURE

    def is_allergic_to(self, pollen: PollenType) -> bool:
        return pollen in self.allergy_types

    def severity_for(self, pollen: Optional[PollenType]) -> Severity:
        if pollen is None:
            return Severity.UNKNOWN
        return self.severity_mapping.get(pollen, Severity.UNKNOWN)

    @property
    def is_learning(self) -> bool:
        return self.has_tested_before == TestStatus.NOT_SURE

    def with_severities(self, updates: Mapping[PollenType, Severity]) -> "AllergyProfile":
        """Return a copy with the given severities merged over the current mapping."""
        merged = dict(self.severity_mapping)
        merged.update(updates)
        return replace(self, allergy_types=set(self.allergy_types), severity_mapping=merged)

    def to_dict(self) -> dict:
        return {
            "allergy_types": sorted(p.value for p in self.allergy_types),
            "severity_mapping": {
                p.value: s.value
                for p, s in sorted(self.severity_mapping.items(), key=lambda kv: kv[0].value)
            },
            "has_tested_before": self.has_tested_before.value,
        }

    @classmethod
    def from_dict(cls, payload: Mapping) -> "AllergyProfile":
        return cls(
            allergy_types={PollenType(v) for v in payload.get("allergy_types", [])},
            severity_mapping={
                PollenType(k): Severity(v)
                for k, v in (payload.get("severity_mapping") or {}).items()
            },
            has_tested_before=TestStatus(
                payload.get("has_tested_before", TestStatus.NOT_SURE.value)
            ),
        )


@dataclass(frozen=True)
class RiskAssessment:
    normalized_score: float
    risk_level: RiskLevel
    dominant_allergen: Optional[PollenType]
    is_thunderstorm_asthma_risk: bool
    user_sensitized_allergens: FrozenSet[PollenType]

    def to_dict(self) -> dict:
        return {
            "normalized_score": self.normalized_score,
            "risk_level": self.risk_level.value,
            "dominant_allergen": (
                self.dominant_allergen.value if self.dominant_allergen else None
            ),
            "is_thunderstorm_asthma_risk": self.is_thunderstorm_asthma_risk,
            "user_sensitized_allergens": sorted(
                p.value for p in self.user_sensitized_allergens
            ),
        }


MASK_ADVICE = "Wearing a mask is highly recommended today."


@dataclass
class RecommendationSet:
    outdoor_advice: str
    requires_mask: bool
    medication_reminder: str
    food_suggestion: str

    def advice_lines(self) -> List[str]:
        """Flatten the set into the ordered list shown on the dashboard."""
        lines = [self.outdoor_advice]
        if self.requires_mask:
            lines.append(MASK_ADVICE)
        lines.append(self.medication_reminder)
        lines.append(self.food_suggestion)
        return lines

    def to_dict(self) -> dict:
        return {
            "outdoor_advice": self.outdoor_advice,
            "requires_mask": self.requires_mask,
            "medication_reminder": self.medication_reminder,
            "food_suggestion": self.food_suggestion,
        }


@dataclass
class SymptomLog:
    """
    One journal entry. The historical_* fields are the snapshot in effect when
    the entry was written and are never recomputed.
    """

    date: datetime
    sneezing: int = 0
    itchy_eyes: int = 0
    congestion: int = 0
    notes: str = ""
    historical_risk_score: Optional[float] = None
    historical_dominant_allergen: Optional[PollenType] = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def total_severity(self) -> int:
        return self.sneezing + self.itchy_eyes + self.congestion


@dataclass(frozen=True)
class Scenario:
    name: str
    environment: EnvironmentalData


@dataclass(frozen=True)
class RegionalPollenData:
    name: str
    latitude: float
    longitude: float
    environment: EnvironmentalData
