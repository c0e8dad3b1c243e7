"""
Learning mode: infer per-pollen severity from the symptom journal.

Each qualifying journal entry attributes its total symptom severity to the
dominant allergen captured when it was written. Totals are accumulated over
the complete history (no decay, no per-entry normalization) and bucketed
into Mild / Moderate / Severe. Only runs for users who are not sure of their
test results.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable

from .models import AllergyProfile, PollenType, Severity, SymptomLog

log = logging.getLogger(__name__)

SEVERE_IMPACT_THRESHOLD = 15
MODERATE_IMPACT_THRESHOLD = 5


@dataclass
class LearningResult:
    profile: AllergyProfile
    updates: Dict[PollenType, Severity] = field(default_factory=dict)
    changed: bool = False
    skipped: bool = False


def accumulate_impact(logs: Iterable[SymptomLog]) -> Dict[PollenType, int]:
    """Sum total symptom severity per historical dominant allergen."""
    impact: Dict[PollenType, int] = {}
    for entry in logs:
        total = entry.total_severity()
        # No symptoms or no allergen to attribute them to
        if total <= 0 or entry.historical_dominant_allergen is None:
            continue
        pollen = entry.historical_dominant_allergen
        impact[pollen] = impact.get(pollen, 0) + total
    return impact


def bucket_severity(impact: int) -> Severity:
    if impact > SEVERE_IMPACT_THRESHOLD:
        return Severity.SEVERE
    if impact > MODERATE_IMPACT_THRESHOLD:
        return Severity.MODERATE
    return Severity.MILD


class ProfileLearner:
    @staticmethod
    def learn_from_logs(
        profile: AllergyProfile, logs: Iterable[SymptomLog]
    ) -> LearningResult:
        """
        Re-derive learned severities from the full log history. The input
        profile is never mutated; a tested profile comes back unchanged with
        skipped=True.
        """
        if not profile.is_learning:
            return LearningResult(profile=profile, skipped=True)

        updates = {
            pollen: bucket_severity(total)
            for pollen, total in accumulate_impact(logs).items()
            if total > 0
        }
        if not updates:
            return LearningResult(profile=profile)

        learned = profile.with_severities(updates)
        changed = learned.severity_mapping != profile.severity_mapping
        if changed:
            log.info(
                "Learned severities from journal: %s",
                ", ".join(f"{p.value}={s.value}" for p, s in sorted(
                    updates.items(), key=lambda kv: kv[0].value
                )),
            )
            return LearningResult(profile=learned, updates=updates, changed=True)
        return LearningResult(profile=profile, updates=updates)


def learn_from_logs(profile: AllergyProfile, logs: Iterable[SymptomLog]) -> LearningResult:
    return ProfileLearner.learn_from_logs(profile, logs)
