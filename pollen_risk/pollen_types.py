"""
Pollen metadata and helpers.

Defines the eight tracked pollen species with English and Simplified Chinese
labels, their potency weights, the Oral Allergy Syndrome food table, and
utilities to resolve free-form inputs to canonical PollenType members.
"""

from __future__ import annotations

import unicodedata
from typing import Dict, List, Optional

from .models import PollenType, Severity, TestStatus

# Per-species metadata: display labels, aliases accepted from users, relative
# allergenic potency, and raw foods that share proteins with the pollen.
POLLEN_METADATA: Dict[PollenType, Dict[str, object]] = {
    PollenType.CEDAR_CYPRESS: {
        "en": "Cedar / Cypress",
        "zh": "柏树",
        "aliases": ["cedar", "cypress", "cedar cypress", "juniper", "cedar_cypress"],
        "potency": 1.8,
        "cross_reactive_foods": [],
    },
    PollenType.BIRCH: {
        "en": "Birch",
        "zh": "桦树",
        "aliases": ["birch", "betula"],
        "potency": 1.8,
        "cross_reactive_foods": ["apple", "pear", "peach", "carrot", "almond"],
    },
    PollenType.OAK: {
        "en": "Oak",
        "zh": "栎树",
        "aliases": ["oak", "quercus"],
        "potency": 1.3,
        "cross_reactive_foods": [],
    },
    PollenType.OTHER_TREE: {
        "en": "Other trees",
        "zh": "其他树木",
        "aliases": ["other tree", "other trees", "trees", "tree", "other_tree"],
        "potency": 1.0,
        "cross_reactive_foods": [],
    },
    PollenType.GRASS: {
        "en": "Grass",
        "zh": "禾本科草",
        "aliases": ["grass", "grasses", "timothy"],
        "potency": 1.6,
        "cross_reactive_foods": ["melon", "tomato", "orange"],
    },
    PollenType.RAGWEED: {
        "en": "Ragweed",
        "zh": "豚草",
        "aliases": ["ragweed", "ambrosia"],
        "potency": 1.9,
        "cross_reactive_foods": ["melon", "banana", "cucumber", "zucchini"],
    },
    PollenType.MUGWORT: {
        "en": "Mugwort",
        "zh": "蒿草",
        "aliases": ["mugwort", "artemisia", "wormwood"],
        "potency": 1.8,
        "cross_reactive_foods": ["celery", "carrot", "parsley"],
    },
    PollenType.PIGWEED: {
        "en": "Pigweed",
        "zh": "藜草",
        "aliases": ["pigweed", "amaranth", "amaranthus"],
        "potency": 1.5,
        "cross_reactive_foods": [],
    },
}


def potency_weight(pollen: PollenType) -> float:
    """Relative allergenic potency of one grain of this species."""
    return float(POLLEN_METADATA[pollen]["potency"])


def cross_reactive_foods(pollen: PollenType) -> List[str]:
    """Raw foods that may trigger Oral Allergy Syndrome for this pollen (may be empty)."""
    return list(POLLEN_METADATA[pollen]["cross_reactive_foods"])


def _normalize(text: str) -> str:
    """Lowercase, strip accents, and collapse separators."""
    decomposed = unicodedata.normalize("NFKD", text or "")
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    for sep in ("/", "-", "_"):
        stripped = stripped.replace(sep, " ")
    return " ".join(stripped.lower().split())


def _build_synonym_mapping(metadata: Dict[PollenType, Dict[str, object]]) -> Dict[str, PollenType]:
    """Map any synonym (enum name, display value, label, alias) to the pollen type."""
    mapping: Dict[str, PollenType] = {}
    for pollen, meta in metadata.items():
        mapping[_normalize(pollen.name)] = pollen
        mapping[_normalize(pollen.value)] = pollen
        for key in ("en", "zh"):
            mapping[_normalize(str(meta[key]))] = pollen
        for alias in meta.get("aliases", []):
            mapping[_normalize(alias)] = pollen
    return mapping


# Any normalized synonym -> canonical PollenType
SYNONYM_TO_POLLEN: Dict[str, PollenType] = _build_synonym_mapping(POLLEN_METADATA)


def resolve_pollen_type(user_input: str) -> Optional[PollenType]:
    """
    Resolve free-form pollen text (any supported language) to a PollenType.
    Falls back to None if we cannot map it.
    """
    return SYNONYM_TO_POLLEN.get(_normalize(user_input))


def pollen_label(pollen: Optional[PollenType], lang: str = "en") -> str:
    """
    Return a human-friendly pollen label in the requested language, defaulting to English.
    """
    if pollen is None:
        return ""
    meta = POLLEN_METADATA[pollen]
    return str(meta.get(lang) or meta.get("en") or pollen.value)


_SEVERITY_ALIASES: Dict[str, Severity] = {
    "mild": Severity.MILD,
    "low": Severity.MILD,
    "moderate": Severity.MODERATE,
    "medium": Severity.MODERATE,
    "severe": Severity.SEVERE,
    "high": Severity.SEVERE,
    "unknown": Severity.UNKNOWN,
    "i don't know": Severity.UNKNOWN,
    "?": Severity.UNKNOWN,
}

_TEST_STATUS_ALIASES: Dict[str, TestStatus] = {
    "yes": TestStatus.YES,
    "y": TestStatus.YES,
    "no": TestStatus.NO,
    "n": TestStatus.NO,
    "not sure": TestStatus.NOT_SURE,
    "unsure": TestStatus.NOT_SURE,
    "not_sure": TestStatus.NOT_SURE,
}


def resolve_severity(user_input: str) -> Optional[Severity]:
    return _SEVERITY_ALIASES.get((user_input or "").strip().lower())


def resolve_test_status(user_input: str) -> Optional[TestStatus]:
    return _TEST_STATUS_ALIASES.get((user_input or "").strip().lower())
