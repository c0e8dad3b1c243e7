"""
Dashboard controller: owns the mutable application state (current scenario,
profile, journal) and pushes freshly computed results to subscribers.

The scoring modules stay pure; this is the only place that persists the
profile or re-runs learning after journal writes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from .journal import SymptomJournal
from .models import (
    AllergyProfile,
    RecommendationSet,
    RiskAssessment,
    RiskLevel,
    Scenario,
    SymptomLog,
)
from .profile_learner import LearningResult, ProfileLearner
from .profile_store import ProfileStore
from .recommendations import RecommendationEngine
from .risk_engine import RiskEngine
from .scenarios import BEIJING_MID_MARCH_WEEK


@dataclass(frozen=True)
class DashboardState:
    scenario: Scenario
    profile: AllergyProfile
    assessment: RiskAssessment
    recommendations: RecommendationSet

    @property
    def advice(self) -> List[str]:
        return self.recommendations.advice_lines()


Listener = Callable[[DashboardState], None]


def forecast_message(assessment: RiskAssessment) -> Tuple[str, str]:
    """(title, body) of the daily forecast alert for this assessment."""
    if assessment.is_thunderstorm_asthma_risk:
        return (
            "🚨 THUNDERSTORM ASTHMA WARNING",
            "Extreme risk conditions detected! Strong winds and high humidity are "
            "aerosolizing pollen. Stay indoors immediately.",
        )
    if assessment.risk_level in (RiskLevel.HIGH, RiskLevel.SEVERE):
        dominant = assessment.dominant_allergen.value if assessment.dominant_allergen else "Unknown"
        body = (
            f"⚠️ High pollen today! Dominant: {dominant}. "
            "Take precautions and wear a mask."
        )
    else:
        body = (
            f"Pollen levels are {assessment.risk_level.value.lower()}. "
            "Enjoy the outdoors safely!"
        )
    return "Daily Pollen Forecast", body


class DashboardController:
    def __init__(
        self,
        profile_store: ProfileStore,
        journal: SymptomJournal,
        scenario: Optional[Scenario] = None,
    ):
        self.profile_store = profile_store
        self.journal = journal
        self.scenario = scenario or BEIJING_MID_MARCH_WEEK[0]
        self.profile = profile_store.load()
        self._listeners: List[Listener] = []
        self.log = logging.getLogger(self.__class__.__name__)
        self.state = self._compute()

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def refresh(self) -> DashboardState:
        self.state = self._compute()
        for listener in list(self._listeners):
            listener(self.state)
        return self.state

    def select_scenario(self, scenario: Scenario) -> DashboardState:
        self.scenario = scenario
        return self.refresh()

    def update_profile(self, profile: AllergyProfile) -> DashboardState:
        self.profile = profile
        self.profile_store.save(profile)
        return self.refresh()

    def forecast_message(self) -> Tuple[str, str]:
        return forecast_message(self.state.assessment)

    def log_symptoms(
        self,
        sneezing: int = 0,
        itchy_eyes: int = 0,
        congestion: int = 0,
        notes: str = "",
        date: Optional[datetime] = None,
    ) -> SymptomLog:
        """
        Write a journal entry carrying the live risk snapshot, then re-learn
        from the full persisted history.
        """
        assessment = self.state.assessment
        entry = SymptomLog(
            date=date or datetime.now(),
            sneezing=sneezing,
            itchy_eyes=itchy_eyes,
            congestion=congestion,
            notes=notes,
            historical_risk_score=assessment.normalized_score,
            historical_dominant_allergen=assessment.dominant_allergen,
        )
        self.journal.add(entry)
        self.learn()
        return entry

    def edit_log(
        self,
        log_id: str,
        sneezing: Optional[int] = None,
        itchy_eyes: Optional[int] = None,
        congestion: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> SymptomLog:
        entry = self.journal.update(
            log_id,
            sneezing=sneezing,
            itchy_eyes=itchy_eyes,
            congestion=congestion,
            notes=notes,
        )
        self.learn()
        return entry

    def delete_log(self, log_id: str) -> None:
        self.journal.delete(log_id)
        self.learn()

    def learn(self) -> LearningResult:
        result = ProfileLearner.learn_from_logs(self.profile, self.journal.list_logs())
        if result.changed:
            self.update_profile(result.profile)
        return result

    def _compute(self) -> DashboardState:
        assessment = RiskEngine.calculate_risk(self.scenario.environment, self.profile)
        recommendations = RecommendationEngine.generate_recommendations(assessment)
        self.log.debug(
            "Scenario %s scored %.1f (%s)",
            self.scenario.name,
            assessment.normalized_score,
            assessment.risk_level.value,
        )
        return DashboardState(
            scenario=self.scenario,
            profile=self.profile,
            assessment=assessment,
            recommendations=recommendations,
        )
