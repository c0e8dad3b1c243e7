from fastapi.testclient import TestClient

from api_server import app

client = TestClient(app)

RAGWEED_SEVERE = {
    "allergy_types": ["ragweed"],
    "severity_mapping": {"ragweed": "severe"},
    "has_tested_before": "yes",
}


def test_health() -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_scenarios_lists_week_and_regions() -> None:
    payload = client.get("/scenarios").json()
    assert payload["week"][0] == "Mon"
    assert "Harbin" in payload["regions"]


def test_risk_with_explicit_environment() -> None:
    response = client.post(
        "/risk",
        json={
            "profile": RAGWEED_SEVERE,
            "environment": {"counts": {"ragweed": 2000, "grass": 0}, "humidity": 30, "wind_speed": 10},
        },
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["assessment"]["normalized_score"] == 100.0
    assert payload["assessment"]["risk_level"] == "Severe"
    assert payload["assessment"]["dominant_allergen"] == "Ragweed"
    assert payload["recommendations"]["requires_mask"] is True
    assert "Oral Allergy Syndrome" in payload["recommendations"]["food_suggestion"]


def test_risk_with_named_scenario() -> None:
    response = client.post(
        "/risk", json={"profile": {"allergy_types": ["cedar"]}, "scenario": "Sun"}
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["assessment"]["is_thunderstorm_asthma_risk"] is True
    assert payload["forecast"]["title"] == "🚨 THUNDERSTORM ASTHMA WARNING"


def test_risk_rejects_unknown_inputs() -> None:
    unknown_pollen = client.post(
        "/risk", json={"profile": {"allergy_types": ["dandelion"]}, "scenario": "Mon"}
    )
    assert unknown_pollen.status_code == 422

    unknown_scenario = client.post(
        "/risk", json={"profile": {"allergy_types": ["birch"]}, "scenario": "Atlantis"}
    )
    assert unknown_scenario.status_code == 404

    missing = client.post("/risk", json={"profile": {"allergy_types": ["birch"]}})
    assert missing.status_code == 422


def test_learn_endpoint() -> None:
    logs = [
        {"date": "2026-03-16T08:00:00", "sneezing": 3, "itchy_eyes": 3, "congestion": 3,
         "historical_dominant_allergen": "Birch"},
        {"date": "2026-03-17T08:00:00", "sneezing": 3, "itchy_eyes": 2, "congestion": 2,
         "historical_dominant_allergen": "birch"},
    ]
    response = client.post(
        "/learn", json={"profile": {"allergy_types": ["birch"]}, "logs": logs}
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["changed"] is True
    assert payload["updates"] == {"Birch": "Severe"}
    assert payload["profile"]["severity_mapping"] == {"Birch": "Severe"}

    skipped = client.post("/learn", json={"profile": RAGWEED_SEVERE, "logs": logs}).json()
    assert skipped["skipped"] is True
    assert skipped["changed"] is False


def test_learn_rejects_out_of_range_symptoms() -> None:
    response = client.post(
        "/learn",
        json={"profile": {"allergy_types": ["birch"]},
              "logs": [{"date": "2026-03-16T08:00:00", "sneezing": 4}]},
    )
    assert response.status_code == 422


def test_regions_endpoint() -> None:
    response = client.post("/regions", json={"allergy_types": ["birch"]})
    assert response.status_code == 200
    regions = {r["name"]: r for r in response.json()["regions"]}
    assert len(regions) == 12
    assert regions["Harbin"]["assessment"]["dominant_allergen"] == "Birch"


def test_unknown_test_status_is_rejected() -> None:
    logs = [{"date": "2026-03-16T08:00:00", "sneezing": 3, "itchy_eyes": 3, "congestion": 3,
             "historical_dominant_allergen": "birch"}]
    response = client.post(
        "/learn",
        json={"profile": {"allergy_types": ["birch"], "has_tested_before": "tested"}, "logs": logs},
    )
    assert response.status_code == 422
    assert "Unknown test status" in response.json()["detail"]

    risk = client.post(
        "/risk",
        json={"profile": {"allergy_types": ["birch"], "has_tested_before": "maybe"}, "scenario": "Mon"},
    )
    assert risk.status_code == 422


def test_post_endpoints_declare_response_models() -> None:
    paths = app.openapi()["paths"]
    for path, model in (("/risk", "RiskResponse"), ("/learn", "LearnResponse"), ("/regions", "RegionsResponse")):
        schema = paths[path]["post"]["responses"]["200"]["content"]["application/json"]["schema"]
        assert schema["$ref"].endswith(model)
