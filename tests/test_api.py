"""Tests for the HTTP API."""

import pytest
import yaml
from fastapi.testclient import TestClient

import main as api
from tests._helpers import make_changed_file, make_diff_result


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(api, "latest_results", None)
    return TestClient(api.app)


def _payload(**extra):
    diff = make_diff_result(make_changed_file(
        "app.yaml",
        {"cluster": "prod-cluster", "region": "prod-east", "version": "2.0.0"},
        {"cluster": "uat-cluster", "region": "uat-east", "version": "1.5.0"},
    ))
    payload = {"diff_result": diff.model_dump(by_alias=True)}
    payload.update(extra)
    return payload


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["has_results"] is False


def test_api_info_lists_endpoints(client):
    body = client.get("/api/info").json()

    assert body["endpoints"]["suggest"] == "POST /api/suggest"
    assert "confidence_threshold" in body["defaults"]


def test_latest_results_empty(client):
    assert client.get("/api/latest-results").status_code == 404


def test_suggest_returns_ranked_suggestions(client):
    response = client.post("/api/suggest", json=_payload(confidence_threshold=0.3))

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "success"
    transforms = body["result"]["transforms"]["**/*.yaml"]
    assert [(t["find"], t["replace"], t["confidence"]) for t in transforms] == [("uat", "prod", 0.35)]
    rule_types = [s["rule"]["type"] for s in body["result"]["stopRules"]["**/*.yaml"]]
    assert rule_types == ["versionFormat", "semverDowngrade", "semverMajorUpgrade"]

    latest = client.get("/api/latest-results")
    assert latest.status_code == 200
    assert latest.json()["result"] == body["result"]


def test_suggest_honours_existing_config(client):
    payload = _payload(config={"transforms": {"**/*.yaml": {"content": [{"find": "uat", "replace": "prod"}]}}})

    body = client.post("/api/suggest", json=payload).json()

    assert body["result"]["transforms"]["**/*.yaml"] == []


def test_suggest_yaml_returns_config_text(client):
    response = client.post("/api/suggest/yaml", json=_payload(confidence_threshold=0.3))

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    parsed = yaml.safe_load(response.text)
    assert parsed["transforms"]["**/*.yaml"]["content"] == [{"find": "uat", "replace": "prod"}]


def test_threshold_out_of_range_is_rejected(client):
    response = client.post("/api/suggest", json=_payload(confidence_threshold=1.5))

    assert response.status_code == 422


def test_engine_failure_maps_to_500(client, monkeypatch):
    def explode(*args, **kwargs):
        raise api.SuggestionEngineError("Failed to analyze file differences")

    monkeypatch.setattr(api, "analyze_differences_for_suggestions", explode)

    response = client.post("/api/suggest", json=_payload())

    assert response.status_code == 500
    assert "Failed to analyze file differences" in response.json()["detail"]
