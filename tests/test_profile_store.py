import json

from pollen_risk import (
    AllergyProfile,
    InMemoryProfileStore,
    JsonFileProfileStore,
    PollenType,
    Severity,
    TestStatus,
)


def _profile():
    return AllergyProfile(
        allergy_types={PollenType.BIRCH, PollenType.RAGWEED},
        severity_mapping={PollenType.BIRCH: Severity.SEVERE},
        has_tested_before=TestStatus.YES,
    )


def test_json_store_round_trip(tmp_path) -> None:
    store = JsonFileProfileStore(tmp_path / "settings.json")
    store.save(_profile())
    assert store.load() == _profile()


def test_json_store_uses_named_key_and_keeps_other_settings(tmp_path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"appearance": "dark"}), encoding="utf-8")
    JsonFileProfileStore(path).save(_profile())

    document = json.loads(path.read_text(encoding="utf-8"))
    assert document["appearance"] == "dark"
    assert document["userAllergyProfile"]["allergy_types"] == ["Birch", "Ragweed"]
    assert document["userAllergyProfile"]["has_tested_before"] == "Yes"


def test_missing_or_corrupt_documents_load_default(tmp_path) -> None:
    assert JsonFileProfileStore(tmp_path / "missing.json").load() == AllergyProfile()

    corrupt = tmp_path / "corrupt.json"
    corrupt.write_text("{not json", encoding="utf-8")
    assert JsonFileProfileStore(corrupt).load() == AllergyProfile()

    bad_value = tmp_path / "bad.json"
    bad_value.write_text(
        json.dumps({"userAllergyProfile": {"allergy_types": ["Dandelion"]}}), encoding="utf-8"
    )
    assert JsonFileProfileStore(bad_value).load() == AllergyProfile()


def test_in_memory_store_returns_copies() -> None:
    store = InMemoryProfileStore(_profile())
    loaded = store.load()
    loaded.allergy_types.add(PollenType.OAK)
    assert PollenType.OAK not in store.load().allergy_types
    assert InMemoryProfileStore().load().has_tested_before == TestStatus.NOT_SURE
