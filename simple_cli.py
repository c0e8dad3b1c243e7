"""
Interactive helper to run the pollen dashboard without remembering flags.
Workflow:
- Ask language first so all prompts/output localize correctly.
- If no profile is stored yet, pick pollens from a numbered list, their
  severities, and whether the user has been tested.
- Pick a day of the Beijing week, show the dashboard, then optionally log
  today's symptoms into the CSV journal and report what learning inferred.

Usage:
    python simple_cli.py
"""
import logging
from typing import List

from pollen_risk import (
    CsvSymptomJournal,
    DashboardController,
    JsonFileProfileStore,
    PollenType,
    Severity,
    SymptomSeverity,
    TestStatus,
    pollen_label,
)
from pollen_risk.config import load_settings
from pollen_risk.journal import severity_by_allergen, top_allergen
from pollen_risk.models import AllergyProfile
from pollen_risk.scenarios import BEIJING_MID_MARCH_WEEK
from main import SYMPTOM_SEVERITY_LABELS, _t, render_text_result


def prompt_bool(label: str, default: bool = False) -> bool:
    suffix = "[Y/n]" if default else "[y/N]"
    resp = input(f"{label} {suffix}: ").strip().lower()
    if not resp:
        return default
    return resp.startswith("y")


def prompt_choice(label: str, options: List[str], default: int = 1, lang: str = "en") -> int:
    """Show numbered options and return the chosen 1-based index."""
    print("\n" + label)
    for idx, option in enumerate(options, start=1):
        print(f"  {idx:2d}. {option}")
    while True:
        raw = input(f"{_t('prompt_choice', lang)} [{default}]: ").strip()
        if not raw:
            return default
        if raw.isdigit() and 1 <= int(raw) <= len(options):
            return int(raw)
        print(_t("prompt_range", lang).format(count=len(options)))


def prompt_pollens(lang: str = "en") -> List[PollenType]:
    """
    Console-friendly "dropdown": show the 8 pollens and let the user pick by number.
    """
    options = list(PollenType)
    print("\n" + _t("prompt_pollens", lang))
    for idx, pollen in enumerate(options, start=1):
        print(f"  {idx:2d}. {pollen_label(pollen, lang)}")

    while True:
        raw = input(f"{_t('prompt_selection', lang)}: ").strip()
        if not raw:
            print(_t("prompt_select_one", lang))
            continue
        try:
            indices = [int(token) for token in raw.replace(" ", "").split(",") if token.strip()]
        except ValueError:
            print(_t("prompt_use_numbers", lang))
            continue
        invalid = [i for i in indices if i < 1 or i > len(options)]
        if invalid:
            print(_t("prompt_out_of_range", lang).format(invalid=invalid))
            continue
        return [options[i - 1] for i in indices]


def prompt_profile(lang: str = "en") -> AllergyProfile:
    statuses = list(TestStatus)
    tested = statuses[
        prompt_choice(_t("prompt_tested", lang), [s.value for s in statuses], default=3, lang=lang)
        - 1
    ]
    pollens = prompt_pollens(lang)
    mapping = {}
    severities = list(Severity)
    for pollen in pollens:
        choice = prompt_choice(
            _t("prompt_reaction", lang).format(pollen=pollen_label(pollen, lang)),
            [s.value for s in severities],
            default=2,
            lang=lang,
        )
        mapping[pollen] = severities[choice - 1]
    return AllergyProfile(
        allergy_types=set(pollens), severity_mapping=mapping, has_tested_before=tested
    )


def prompt_symptom(key: str, lang: str = "en") -> int:
    labels = SYMPTOM_SEVERITY_LABELS.get(lang, SYMPTOM_SEVERITY_LABELS["en"])
    options = [labels[s] for s in SymptomSeverity]
    return prompt_choice(_t(key, lang), options, default=1, lang=lang) - 1


def main() -> None:
    settings = load_settings()
    logging.basicConfig(level=getattr(logging, settings.log_level, logging.WARNING))
    lang = input(f"{_t('prompt_language', settings.lang)} [{settings.lang}]: ").strip() or settings.lang

    store = JsonFileProfileStore(settings.profile_path)
    journal = CsvSymptomJournal(settings.journal_path)
    if not settings.profile_path.exists():
        store.save(prompt_profile(lang))

    day = prompt_choice(
        _t("prompt_day", lang), [s.name for s in BEIJING_MID_MARCH_WEEK], default=1, lang=lang
    )
    controller = DashboardController(store, journal, scenario=BEIJING_MID_MARCH_WEEK[day - 1])
    state = controller.state

    print()
    print(render_text_result(state.scenario, state.profile, state.assessment, state.recommendations, lang=lang))

    if not prompt_bool("\n" + _t("prompt_log_today", lang), default=False):
        return

    before = dict(controller.profile.severity_mapping)
    controller.log_symptoms(
        sneezing=prompt_symptom("sneezing", lang),
        itchy_eyes=prompt_symptom("itchy_eyes", lang),
        congestion=prompt_symptom("congestion", lang),
        notes=input(f"{_t('prompt_notes', lang)}: ").strip(),
    )

    logs = journal.list_logs()
    print("\n" + _t("severity_by_allergen", lang))
    for pollen, total in severity_by_allergen(logs):
        print(f"  - {pollen_label(pollen, lang)}: {total}")
    top = top_allergen(logs)
    if top:
        print(_t("insight", lang).format(pollen=pollen_label(top, lang)))

    learned = {
        p: s for p, s in controller.profile.severity_mapping.items() if before.get(p) != s
    }
    if learned:
        print("\n" + _t("learned", lang))
        for pollen, severity in learned.items():
            print(f"  - {pollen_label(pollen, lang)}: {severity.value}")
        print(f"{_t('total_risk', lang)}: {controller.state.assessment.normalized_score:.1f}/100")


if __name__ == "__main__":
    main()
