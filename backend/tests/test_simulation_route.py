"""Tests for the HTTP surface — health and POST /api/simulations/run."""
from fastapi.testclient import TestClient

from lever.main import app

client = TestClient(app)

_SAMPLE_PLAN = {
    "envelopes": [
        {"name": "Checking", "category": "Cash", "growth": "None", "rate": 0, "account_type": "regular"},
        {"name": "Loan", "category": "Debt", "growth": "None", "rate": 0, "account_type": "regular"},
    ],
    "events": [
        {
            "id": 1,
            "type": "declare_accounts",
            "parameters": [
                {"type": "start_time", "value": 0},
                {"type": "account_1", "value": "Checking"},
                {"type": "account_1_balance", "value": 1000},
                {"type": "account_2", "value": "Loan"},
                {"type": "account_2_balance", "value": -200},
            ],
        },
        {
            "id": 2,
            "type": "payment_schedule",
            "parameters": [
                {"type": "start_time", "value": 10},
                {"type": "end_time", "value": 400},
                {"type": "amount", "value": 150},
                {"type": "source_envelope", "value": "Checking"},
                {"type": "to_key", "value": "Loan"},
                {"type": "frequency_days", "value": 30},
            ],
        },
    ],
}


def test_health_returns_200():
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert "buy_house" in data["event_types"]


def test_run_returns_one_datum_per_day():
    response = client.post("/api/simulations/run", json={"plan": _SAMPLE_PLAN, "start_day": 0, "end_day": 60})
    assert response.status_code == 200
    data = response.json()
    assert len(data["datums"]) == 61
    assert data["datums"][0]["value"] == 800
    last = data["datums"][-1]
    assert last["parts"] == {"Checking": 800, "Loan": 0}
    assert data["parameter_updates"] == [{"event_id": 2, "parameter_name": "end_time", "value": 40}]
    assert data["issues"] == []
    assert "computed_at" in data


def test_run_accepts_schema_and_interval():
    response = client.post("/api/simulations/run", json={
        "plan": _SAMPLE_PLAN,
        "schema": {"events": [{"type": "declare_accounts"}, {"type": "payment_schedule"}]},
        "start_day": 0,
        "end_day": 60,
        "snapshot_interval": 30,
    })
    assert response.status_code == 200
    assert [d["date"] for d in response.json()["datums"]] == [0, 30, 60]


def test_run_reports_issues_but_still_simulates():
    plan = dict(_SAMPLE_PLAN, envelopes=_SAMPLE_PLAN["envelopes"] + [_SAMPLE_PLAN["envelopes"][0]])
    response = client.post("/api/simulations/run", json={"plan": plan, "start_day": 0, "end_day": 5})
    assert response.status_code == 200
    data = response.json()
    assert any("duplicate envelope" in i["message"] for i in data["issues"])
    assert len(data["datums"]) == 6


def test_run_reports_negative_balance_warnings():
    plan = {
        "envelopes": [{"name": "Checking", "category": "Cash"}],
        "events": [{"id": 1, "type": "outflow", "parameters": [
            {"type": "start_time", "value": 2}, {"type": "amount", "value": 10}, {"type": "from_key", "value": "Checking"},
        ]}],
    }
    response = client.post("/api/simulations/run", json={"plan": plan, "start_day": 0, "end_day": 3})
    warnings = response.json()["warnings"]
    assert [(w["envelope_name"], w["date"]) for w in warnings] == [("Checking", 2), ("Checking", 3)]


def test_run_rejects_inverted_range():
    response = client.post("/api/simulations/run", json={"plan": _SAMPLE_PLAN, "start_day": 10, "end_day": 5})
    assert response.status_code == 422


def test_run_rejects_oversized_range():
    response = client.post("/api/simulations/run", json={"plan": _SAMPLE_PLAN, "start_day": 0, "end_day": 10**7})
    assert response.status_code == 422


def test_run_no_body_returns_422():
    response = client.post("/api/simulations/run")
    assert response.status_code == 422
