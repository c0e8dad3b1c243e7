"""
Turns a RiskAssessment into human-readable guidance.

Thunderstorm asthma overrides the level-based templates entirely. When the
dominant allergen is one the user is sensitized to and it has known food
cross-reactivity, an Oral Allergy Syndrome warning is appended to the food
suggestion.
"""

from __future__ import annotations

from typing import Dict, Tuple

from .models import RecommendationSet, RiskAssessment, RiskLevel
from .pollen_types import cross_reactive_foods

# outdoor advice, mask required, medication reminder, food suggestion
Template = Tuple[str, bool, str, str]

THUNDERSTORM_TEMPLATE: Template = (
    "DANGER: Thunderstorm Asthma conditions detected. Stay indoors with windows closed.",
    True,
    "CRITICAL: Keep rescue inhalers on your person immediately.",
    "Focus on warm anti-inflammatory liquids like ginger or turmeric tea.",
)

LEVEL_TEMPLATES: Dict[RiskLevel, Template] = {
    RiskLevel.LOW: (
        "Perfect day to be outside. Enjoy the fresh air!",
        False,
        "No preventative medication needed.",
        "Maintain a normal, balanced diet.",
    ),
    RiskLevel.MODERATE: (
        "Safe for most activities. Limit prolonged intense exercise.",
        False,
        "Keep non-drowsy antihistamines handy.",
        "Incorporate Vitamin C-rich foods.",
    ),
    RiskLevel.HIGH: (
        "Limit outdoor time. Keep windows closed.",
        True,
        "Take your daily preventative antihistamine.",
        "Eat foods high in Omega-3s to manage inflammation.",
    ),
    RiskLevel.SEVERE: (
        "Stay indoors as much as possible.",
        True,
        "Take preventative medication now.",
        "Focus on quercetin-rich foods (apples, onions).",
    ),
}

OAS_WARNING = (
    "\n\n⚠️ Note: High {pollen} pollen may trigger Oral Allergy Syndrome. "
    "Be cautious with raw {foods}."
)


class RecommendationEngine:
    @staticmethod
    def generate_recommendations(assessment: RiskAssessment) -> RecommendationSet:
        if assessment.is_thunderstorm_asthma_risk:
            template = THUNDERSTORM_TEMPLATE
        else:
            template = LEVEL_TEMPLATES[assessment.risk_level]
        recs = RecommendationSet(*template)

        dominant = assessment.dominant_allergen
        if dominant is not None and dominant in assessment.user_sensitized_allergens:
            foods = cross_reactive_foods(dominant)
            if foods:
                recs.food_suggestion += OAS_WARNING.format(
                    pollen=dominant.value, foods=", ".join(foods)
                )
        return recs


def generate_recommendations(assessment: RiskAssessment) -> RecommendationSet:
    return RecommendationEngine.generate_recommendations(assessment)
