"""
CLI entrypoint to compute a personalized pollen risk for one scenario.

Flow:
- Parse user inputs (pollens, severities, scenario, weather overrides, output format).
- Resolve pollen names to canonical types, or load the stored profile.
- Pick a synthetic scenario (Beijing week day, region, or generated March day).
- Run the RiskEngine and RecommendationEngine.
- Render either a text dashboard or JSON payload.
"""

import argparse
import dataclasses
import json
import logging
import sys
from typing import Dict, List, Optional, Tuple

from pollen_risk import (
    AllergyProfile,
    JsonFileProfileStore,
    PollenType,
    RecommendationEngine,
    RiskEngine,
    Scenario,
    Severity,
    pollen_label,
    resolve_pollen_type,
)
from pollen_risk.config import load_settings
from pollen_risk.dashboard import forecast_message
from pollen_risk.pollen_types import potency_weight, resolve_severity, resolve_test_status
from pollen_risk.scenarios import (
    BEIJING_MID_MARCH_WEEK,
    find_region,
    find_scenario,
    generate_march_scenarios,
)

# Simple i18n table for CLI output (extendable with more locales).
TRANSLATIONS = {
    "en": {
        "quick_view": "=== Today's pollen ===",
        "details": "=== Details ===",
        "per_pollen_breakdown": "Per-pollen exposure:",
        "total_risk": "Risk score",
        "dominant": "Dominant allergen",
        "none": "none",
        "thunderstorm": "THUNDERSTORM ASTHMA RISK",
        "recommendations": "Recommendations",
        "weather": "Weather",
        "not_allergic": "not in profile",
        "scenario_not_found": "Scenario not found: {name}",
        "unknown_pollen": "Unknown pollen type: {name}",
        "unknown_severity": "Unknown severity in '{item}' (use mild, moderate, severe, unknown)",
        "unknown_test_status": "Unknown test status: {value} (use yes, no, not sure)",
        "prompt_language": "Preferred language (e.g. en, zh)",
        "prompt_choice": "Your choice",
        "prompt_range": "Use a number between 1 and {count}.",
        "prompt_pollens": "Select pollens you react to (comma-separated numbers):",
        "prompt_selection": "Your selection",
        "prompt_select_one": "Please select at least one pollen.",
        "prompt_use_numbers": "Use numbers from the list (e.g. 1,3,5).",
        "prompt_out_of_range": "Choices out of range: {invalid}. Try again.",
        "prompt_tested": "Have you had an allergy test?",
        "prompt_reaction": "How strongly do you react to {pollen}?",
        "prompt_day": "Which day of the week?",
        "prompt_log_today": "Log today's symptoms?",
        "prompt_notes": "Notes (optional)",
        "sneezing": "Sneezing",
        "itchy_eyes": "Itchy eyes",
        "congestion": "Congestion",
        "severity_by_allergen": "Severity by allergen:",
        "insight": "Your symptoms are most severe when {pollen} levels are high.",
        "learned": "Learned from your journal:",
    },
    "zh": {
        "quick_view": "=== 今日花粉 ===",
        "details": "=== 详情 ===",
        "per_pollen_breakdown": "各花粉暴露量:",
        "total_risk": "风险评分",
        "dominant": "主要过敏原",
        "none": "无",
        "thunderstorm": "雷暴哮喘风险",
        "recommendations": "建议",
        "weather": "天气",
        "not_allergic": "未过敏",
        "scenario_not_found": "未找到场景: {name}",
        "unknown_pollen": "未知花粉类型: {name}",
        "unknown_severity": "无法识别的严重程度 '{item}' (mild, moderate, severe, unknown)",
        "unknown_test_status": "无法识别的检测状态: {value} (yes, no, not sure)",
        "prompt_language": "首选语言 (如 en, zh)",
        "prompt_choice": "您的选择",
        "prompt_range": "请输入 1 到 {count} 之间的数字。",
        "prompt_pollens": "选择您过敏的花粉 (用逗号分隔编号):",
        "prompt_selection": "您的选择",
        "prompt_select_one": "请至少选择一种花粉。",
        "prompt_use_numbers": "请使用列表中的编号 (如 1,3,5)。",
        "prompt_out_of_range": "超出范围的选项: {invalid}。请重试。",
        "prompt_tested": "您做过过敏原检测吗?",
        "prompt_reaction": "您对{pollen}的反应有多强烈?",
        "prompt_day": "选择星期几?",
        "prompt_log_today": "记录今天的症状?",
        "prompt_notes": "备注 (可选)",
        "sneezing": "打喷嚏",
        "itchy_eyes": "眼睛发痒",
        "congestion": "鼻塞",
        "severity_by_allergen": "各过敏原的症状严重程度:",
        "insight": "当{pollen}花粉浓度高时,您的症状最严重。",
        "learned": "从您的日记中学习到:",
    },
}

SYMPTOM_SEVERITY_LABELS = {
    "en": ["None", "Mild", "Moderate", "Severe"],
    "zh": ["无", "轻度", "中度", "严重"],
}

RISK_LEVEL_LABELS = {
    "zh": {
        "Low Risk": "低风险",
        "Moderate": "中等",
        "High Risk": "高风险",
        "Severe": "严重",
    }
}


def _t(key: str, lang: str = "en") -> str:
    """Translate a key to the requested language with English fallback."""
    bundle = TRANSLATIONS.get(lang, TRANSLATIONS["en"])
    template = bundle.get(key) or TRANSLATIONS["en"].get(key, key)
    return template


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Configure and parse CLI arguments."""
    settings = load_settings()
    parser = argparse.ArgumentParser(
        description="Calculate personalized pollen risk for a synthetic scenario"
    )
    parser.add_argument(
        "--allergies",
        default=None,
        help="Comma-separated pollen types (e.g. birch,grass,ragweed). "
        "If omitted, the stored profile is used.",
    )
    parser.add_argument(
        "--severity",
        action="append",
        default=[],
        metavar="POLLEN=LEVEL",
        help="Severity for one pollen, repeatable (e.g. --severity birch=severe)",
    )
    parser.add_argument(
        "--tested",
        default="not sure",
        help="Whether the user has had an allergy test: yes, no, not sure (default)",
    )
    parser.add_argument(
        "--scenario",
        default=BEIJING_MID_MARCH_WEEK[0].name,
        help="Beijing week day (Mon..Sun), region name (e.g. Harbin) or march:N",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for march:N scenarios")
    parser.add_argument("--humidity", type=float, default=None, help="Override humidity (%%)")
    parser.add_argument("--wind", type=float, default=None, help="Override wind speed (mph)")
    parser.add_argument(
        "--thunderstorm",
        action="store_true",
        default=False,
        help="Force a thunderstorm in the chosen scenario",
    )
    parser.add_argument(
        "--profile",
        default=str(settings.profile_path),
        help="Profile JSON used when --allergies is omitted",
    )
    parser.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )
    parser.add_argument(
        "--lang",
        default=settings.lang,
        help="Language for output labels (en, zh). Defaults to en.",
    )
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    return parser.parse_args(argv)


def build_profile(
    allergies: str, severities: List[str], tested: str, lang: str = "en"
) -> AllergyProfile:
    """Build a profile from CLI tokens; raises ValueError on unknown names."""
    types = set()
    for token in [t.strip() for t in allergies.split(",") if t.strip()]:
        pollen = resolve_pollen_type(token)
        if pollen is None:
            raise ValueError(_t("unknown_pollen", lang).format(name=token))
        types.add(pollen)

    mapping: Dict[PollenType, Severity] = {}
    for item in severities:
        name, _, level = item.partition("=")
        pollen = resolve_pollen_type(name)
        if pollen is None:
            raise ValueError(_t("unknown_pollen", lang).format(name=name))
        severity = resolve_severity(level)
        if severity is None:
            raise ValueError(_t("unknown_severity", lang).format(item=item))
        mapping[pollen] = severity

    status = resolve_test_status(tested)
    if status is None:
        raise ValueError(_t("unknown_test_status", lang).format(value=tested))

    return AllergyProfile(
        allergy_types=types,
        severity_mapping=mapping,
        has_tested_before=status,
    )


def resolve_scenario(name: str, seed: Optional[int] = None) -> Optional[Scenario]:
    """Resolve a week day, a region name, or march:N to a Scenario."""
    if name.lower().startswith("march:"):
        try:
            day = int(name.split(":", 1)[1])
        except ValueError:
            return None
        month = generate_march_scenarios(seed=seed)
        if 1 <= day <= len(month):
            return month[day - 1]
        return None
    scenario = find_scenario(name)
    if scenario:
        return scenario
    region = find_region(name)
    if region:
        return Scenario(name=region.name, environment=region.environment)
    return None


def apply_overrides(
    scenario: Scenario,
    humidity: Optional[float],
    wind: Optional[float],
    thunderstorm: bool,
) -> Scenario:
    env = scenario.environment
    changes = {}
    if humidity is not None:
        changes["humidity"] = humidity
    if wind is not None:
        changes["wind_speed"] = wind
    if thunderstorm:
        changes["is_thunderstorm"] = True
    if not changes:
        return scenario
    return dataclasses.replace(scenario, environment=dataclasses.replace(env, **changes))


def render_bar(score: float, width: int = 30) -> str:
    """ASCII bar to visualize a 0-100 score."""
    filled = int((score / 100.0) * width)
    return f"[{'#' * filled}{'.' * (width - filled)}]"


def _level_label(level_value: str, lang: str) -> str:
    return RISK_LEVEL_LABELS.get(lang, {}).get(level_value, level_value)


def render_text_result(
    scenario: Scenario, profile: AllergyProfile, assessment, recommendations, lang: str = "en"
) -> str:
    """Pretty-print the assessment in a text-first dashboard layout."""
    lines = []
    env = scenario.environment

    # Quick view (what users see first)
    lines.append(_t("quick_view", lang))
    lines.append(
        f"{scenario.name} · {_t('weather', lang)}: {env.weather_visual.value}, "
        f"{env.humidity:.0f}% RH, {env.wind_speed:.0f} mph"
    )
    lines.append(
        f"{_t('total_risk', lang)}: {assessment.normalized_score:.1f}/100 "
        f"({_level_label(assessment.risk_level.value, lang)}) "
        f"{render_bar(assessment.normalized_score)}"
    )
    dominant = (
        pollen_label(assessment.dominant_allergen, lang)
        if assessment.dominant_allergen
        else _t("none", lang)
    )
    lines.append(f"{_t('dominant', lang)}: {dominant}")
    if assessment.is_thunderstorm_asthma_risk:
        lines.append(f"!!! {_t('thunderstorm', lang)} !!!")

    lines.append(f"\n{_t('recommendations', lang)}:")
    for advice in recommendations.advice_lines():
        lines.append(f"  - {advice}")

    # Detailed breakdown for expert users
    lines.append("\n" + _t("details", lang))
    lines.append(_t("per_pollen_breakdown", lang))
    for pollen, count, exposure in _sorted_exposures(env, profile):
        suffix = "" if profile.is_allergic_to(pollen) else f" ({_t('not_allergic', lang)})"
        lines.append(
            f"  - {pollen_label(pollen, lang)}: count={count:.0f} exposure={exposure:.1f}{suffix}"
        )
    return "\n".join(lines)


def _sorted_exposures(env, profile: AllergyProfile) -> List[Tuple[PollenType, float, float]]:
    """Allergic pollens first, then by descending exposure for deterministic output."""
    rows = [(m.type, m.count, m.count * potency_weight(m.type)) for m in env.measurements]
    return sorted(rows, key=lambda r: (not profile.is_allergic_to(r[0]), -r[2], r[0].value))


def main(argv: Optional[List[str]] = None) -> int:
    """Entrypoint: build the profile, pick a scenario, score it, render output."""
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, str(args.log_level).upper(), logging.WARNING))

    try:
        if args.allergies is not None:
            profile = build_profile(args.allergies, args.severity, args.tested, args.lang)
        else:
            profile = JsonFileProfileStore(args.profile).load()
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    scenario = resolve_scenario(args.scenario, seed=args.seed)
    if scenario is None:
        print(_t("scenario_not_found", args.lang).format(name=args.scenario), file=sys.stderr)
        return 2
    scenario = apply_overrides(scenario, args.humidity, args.wind, args.thunderstorm)

    assessment = RiskEngine.calculate_risk(scenario.environment, profile)
    recommendations = RecommendationEngine.generate_recommendations(assessment)

    if args.format == "json":
        title, body = forecast_message(assessment)
        output = {
            "scenario": scenario.name,
            "profile": profile.to_dict(),
            "assessment": assessment.to_dict(),
            "recommendations": recommendations.to_dict(),
            "forecast": {"title": title, "body": body},
        }
        print(json.dumps(output, indent=2, ensure_ascii=False))
    else:
        print(render_text_result(scenario, profile, assessment, recommendations, lang=args.lang))
    return 0


if __name__ == "__main__":
    sys.exit(main())
