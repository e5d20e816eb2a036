from resilience.core.config import settings
from resilience.core.metrics import get_counters


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["instrument"] == {"id": "RAG", "version": "1.0"}
    assert "X-Correlation-ID" in response.headers


def test_correlation_id_is_echoed(client):
    response = client.get("/", headers={"X-Correlation-ID": "req-123"})
    assert response.headers["X-Correlation-ID"] == "req-123"


def test_analysis_endpoint(client, survey_rows, config_payload, clean_metrics):
    response = client.post("/analysis", json={"survey_rows": survey_rows, "config": config_payload})
    assert response.status_code == 200
    body = response.json()

    assert body["total_respondents"] == 2
    assert body["overall_resilience"] == 50.67
    assert body["warnings"] == ["Maybe"]
    assert list(body["dimensions"]) == ["Response", "Monitor", "Anticipate", "Learn"]
    assert body["dimensions"]["Monitor"]["score"] == 64.0
    assert body["dimensions"]["Monitor"]["questions"][0]["stats"]["n"] == 2
    assert body["summary"]["level"] == "Basic Assurance"
    assert body["summary"]["strengths"] == ["Response"]
    assert get_counters()["analysis.runs"] == 1


def test_analysis_accepts_potential_alias_and_lowercase_tags(client, survey_rows, config_payload):
    config_payload["questions"] = [
        {"potential": question["dimension"].lower(), "focus": question["focus"]}
        for question in config_payload["questions"]
    ]
    config_payload["colors"] = {"learn": "#000000"}
    response = client.post("/analysis", json={"survey_rows": survey_rows, "config": config_payload})
    assert response.status_code == 200
    assert response.json()["dimensions"]["Learn"]["color"] == "#000000"


def test_analysis_rejects_unknown_dimension(client, survey_rows, config_payload):
    config_payload["questions"][0]["dimension"] = "Plan"
    response = client.post("/analysis", json={"survey_rows": survey_rows, "config": config_payload})
    assert response.status_code == 422
    body = response.json()
    assert body["error"] == "survey_config_invalid"
    assert body["detail"]["section"] == "Question_Mapping"
    assert "Plan" in body["detail"]["message"]


def test_analysis_rejects_insufficient_columns(client, config_payload):
    rows = [["Respondent", "Q1", "Q2"], ["R1", "Agree", "Agree"]]
    response = client.post("/analysis", json={"survey_rows": rows, "config": config_payload})
    assert response.status_code == 422
    body = response.json()
    assert body["error"] == "survey_shape_mismatch"
    assert body["detail"]["columns"] == 3
    assert body["detail"]["required_columns"] == 13


def test_analysis_rejects_empty_likert_map(client, survey_rows, config_payload):
    config_payload["likert_map"] = {}
    response = client.post("/analysis", json={"survey_rows": survey_rows, "config": config_payload})
    assert response.status_code == 422
    assert response.json()["detail"]["section"] == "Likert_Mapping"


def test_analysis_rejects_oversized_payload(client, survey_rows, config_payload, monkeypatch):
    monkeypatch.setattr(settings, "max_survey_rows", 2)
    response = client.post("/analysis", json={"survey_rows": survey_rows, "config": config_payload})
    assert response.status_code == 413
    assert response.json()["error"] == "payload_too_large"


def test_analysis_rejects_malformed_body(client):
    response = client.post("/analysis", json={"survey_rows": "not rows"})
    assert response.status_code == 422


def test_workbook_endpoint(client, survey_rows, config_sheets):
    config_sheets["Colors"] = [["Dimension", "Color"], ["Response", "#abcdef"]]
    response = client.post("/analysis/workbook", json={"survey_rows": survey_rows, "config_sheets": config_sheets})
    assert response.status_code == 200
    body = response.json()
    assert body["overall_resilience"] == 50.67
    assert body["dimensions"]["Response"]["color"] == "#abcdef"


def test_workbook_endpoint_missing_sheet(client, survey_rows, config_sheets):
    del config_sheets["Likert_Mapping"]
    response = client.post("/analysis/workbook", json={"survey_rows": survey_rows, "config_sheets": config_sheets})
    assert response.status_code == 422
    assert response.json()["detail"]["missing_sheets"] == ["Likert_Mapping"]


def test_metrics_endpoint(client, survey_rows, config_payload, clean_metrics):
    client.post("/analysis", json={"survey_rows": survey_rows, "config": config_payload})
    body = client.get("/analysis/metrics").json()
    assert body["counters"]["analysis.runs"] == 1
    assert "analysis.aggregate" in body["timings"]
    assert "analysis.aggregate" in body["last_runs"]
