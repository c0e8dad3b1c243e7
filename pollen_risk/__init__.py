"""
Pollen risk package: scores pollen exposure for a user allergy profile,
turns the score into advice, and learns sensitivities from a symptom journal.

Expose the main classes so consumers can import directly from the package.
"""

from .models import (
    AllergyProfile,
    EnvironmentalData,
    PollenMeasurement,
    PollenType,
    RecommendationSet,
    RegionalPollenData,
    RiskAssessment,
    RiskLevel,
    Scenario,
    Severity,
    SymptomLog,
    SymptomSeverity,
    TestStatus,
    WeatherType,
)
from .dashboard import DashboardController, DashboardState
from .journal import CsvSymptomJournal, InMemorySymptomJournal, SymptomJournal
from .pollen_types import pollen_label, resolve_pollen_type
from .profile_learner import LearningResult, ProfileLearner, learn_from_logs
from .profile_store import InMemoryProfileStore, JsonFileProfileStore, ProfileStore
from .recommendations import RecommendationEngine, generate_recommendations
from .risk_engine import RiskEngine, calculate_risk

__all__ = [
    "AllergyProfile",
    "CsvSymptomJournal",
    "DashboardController",
    "DashboardState",
    "EnvironmentalData",
    "InMemoryProfileStore",
    "InMemorySymptomJournal",
    "JsonFileProfileStore",
    "LearningResult",
    "PollenMeasurement",
    "PollenType",
    "ProfileLearner",
    "ProfileStore",
    "RecommendationEngine",
    "RecommendationSet",
    "RegionalPollenData",
    "RiskAssessment",
    "RiskEngine",
    "RiskLevel",
    "Scenario",
    "Severity",
    "SymptomJournal",
    "SymptomLog",
    "SymptomSeverity",
    "TestStatus",
    "WeatherType",
    "calculate_risk",
    "generate_recommendations",
    "learn_from_logs",
    "pollen_label",
    "resolve_pollen_type",
]
