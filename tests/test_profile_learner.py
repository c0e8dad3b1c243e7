from datetime import datetime, timedelta

import pytest

from pollen_risk import (
    AllergyProfile,
    PollenType,
    ProfileLearner,
    Severity,
    SymptomLog,
    TestStatus,
    learn_from_logs,
)
from pollen_risk.profile_learner import accumulate_impact, bucket_severity

START = datetime(2026, 3, 10, 9, 0)


def _log(day, sneezing, itchy_eyes, congestion, dominant=PollenType.BIRCH):
    return SymptomLog(
        date=START + timedelta(days=day),
        sneezing=sneezing,
        itchy_eyes=itchy_eyes,
        congestion=congestion,
        historical_risk_score=55.0,
        historical_dominant_allergen=dominant,
    )


def _learning_profile(mapping=None):
    return AllergyProfile(
        allergy_types={PollenType.BIRCH, PollenType.GRASS},
        severity_mapping=dict(mapping or {}),
        has_tested_before=TestStatus.NOT_SURE,
    )


@pytest.mark.parametrize("status", [TestStatus.YES, TestStatus.NO])
def test_tested_profiles_are_skipped(status) -> None:
    profile = AllergyProfile(allergy_types={PollenType.BIRCH}, has_tested_before=status)
    result = learn_from_logs(profile, [_log(0, 3, 3, 3), _log(1, 3, 3, 3)])
    assert result.skipped is True
    assert result.changed is False
    assert result.updates == {}
    assert result.profile == profile


@pytest.mark.parametrize(
    "logs, expected",
    [
        ([(3, 3, 3), (3, 2, 2)], Severity.SEVERE),  # 16
        ([(3, 3, 3), (2, 2, 2)], Severity.MODERATE),  # 15
        ([(3, 3, 0)], Severity.MODERATE),  # 6
        ([(2, 2, 1)], Severity.MILD),  # 5
        ([(1, 0, 0)], Severity.MILD),  # 1
    ],
)
def test_impact_buckets(logs, expected) -> None:
    entries = [_log(i, *values) for i, values in enumerate(logs)]
    result = ProfileLearner.learn_from_logs(_learning_profile(), entries)
    assert result.profile.severity_mapping[PollenType.BIRCH] == expected
    assert result.updates == {PollenType.BIRCH: expected}
    assert result.changed is True


def test_entries_without_signal_or_label_are_ignored() -> None:
    entries = [
        _log(0, 0, 0, 0),
        _log(1, 3, 3, 3, dominant=None),
    ]
    assert accumulate_impact(entries) == {}
    result = learn_from_logs(_learning_profile(), entries)
    assert result.changed is False
    assert result.updates == {}
    assert result.profile.severity_mapping == {}


def test_allergens_without_signal_keep_prior_values() -> None:
    profile = _learning_profile()
    profile.severity_mapping[PollenType.GRASS] = Severity.SEVERE
    result = learn_from_logs(profile, [_log(0, 1, 1, 0)])
    assert result.profile.severity_mapping == {
        PollenType.GRASS: Severity.SEVERE,
        PollenType.BIRCH: Severity.MILD,
    }


def test_input_profile_is_not_mutated() -> None:
    profile = _learning_profile()
    learn_from_logs(profile, [_log(0, 3, 3, 3)])
    assert profile.severity_mapping == {}


def test_unchanged_mapping_reports_no_change() -> None:
    profile = _learning_profile()
    profile.severity_mapping[PollenType.BIRCH] = Severity.MODERATE
    result = learn_from_logs(profile, [_log(0, 3, 3, 3)])
    assert result.updates == {PollenType.BIRCH: Severity.MODERATE}
    assert result.changed is False
    assert result.profile is profile


def test_learning_rederives_from_full_history() -> None:
    entries = [_log(0, 3, 3, 3), _log(1, 3, 3, 3, dominant=PollenType.GRASS)]
    first = learn_from_logs(_learning_profile(), entries)
    second = learn_from_logs(first.profile, entries)
    assert first.profile.severity_mapping == second.profile.severity_mapping
    assert second.changed is False
    assert accumulate_impact(entries) == {PollenType.BIRCH: 9, PollenType.GRASS: 9}


def test_learning_can_lower_a_previous_severity() -> None:
    profile = _learning_profile()
    profile.severity_mapping[PollenType.BIRCH] = Severity.SEVERE
    result = learn_from_logs(profile, [_log(0, 1, 0, 0)])
    assert result.profile.severity_mapping[PollenType.BIRCH] == Severity.MILD


@pytest.mark.parametrize(
    "impact, severity",
    [(1, Severity.MILD), (5, Severity.MILD), (6, Severity.MODERATE), (15, Severity.MODERATE), (16, Severity.SEVERE)],
)
def test_bucket_severity(impact, severity) -> None:
    assert bucket_severity(impact) == severity


def test_test_status_is_not_collected_as_a_test_class() -> None:
    assert TestStatus.__test__ is False
    assert [s.value for s in TestStatus] == ["Yes", "No", "Not Sure"]
