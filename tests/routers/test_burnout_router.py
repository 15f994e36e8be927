from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.routers import burnout as burnout_module
from src.routers.burnout import router as burnout_router

app = FastAPI()
app.include_router(burnout_router, prefix="/api/v1")

client = TestClient(app)


def test_low_risk():
    response = client.post("/api/v1/burnout-detection", json={"emotionalState": "steady", "motivationLevel": 8})

    assert response.status_code == 200
    body = response.json()
    assert body["level"] == "low"
    assert body["referralNeeded"] is False
    assert "detectedAt" in body and "lastUpdated" in body


def test_critical_risk_with_all_signals():
    payload = {
        "emotionalState": "I feel exhausted and hopeless",
        "motivationLevel": 2,
        "recentReflections": [{"motivationLevel": 2}, {"motivationLevel": 3}, {"motivationLevel": "1"}],
        "shiftContext": {
            "shiftType": "night",
            "department": "ICU",
            "workloadIntensity": "critical",
            "criticalIncidentOccurred": True,
        },
    }
    response = client.post("/api/v1/burnout-detection", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert body["level"] == "critical"
    assert body["referralNeeded"] is True
    assert body["recommendations"][0] == "Immediate professional support recommended"
    assert "Critical incident occurred" in body["indicators"]


def test_shift_context_alone_gives_moderate():
    payload = {
        "shiftContext": {"shiftType": "day", "department": "ER", "workloadIntensity": "critical"},
    }
    body = client.post("/api/v1/burnout-detection", json=payload).json()

    assert body["level"] == "moderate"
    assert body["indicators"] == ["Critical workload intensity"]


def test_empty_request_is_low():
    response = client.post("/api/v1/burnout-detection", json={})
    assert response.status_code == 200
    assert response.json()["level"] == "low"


def test_detector_failure_still_answers_200(mocker):
    mocker.patch(
        "services.assessment_engine.burnout.evaluate_burnout_risk",
        side_effect=RuntimeError("unexpected"),
    )

    response = client.post("/api/v1/burnout-detection", json={"motivationLevel": 1})

    assert response.status_code == 200
    body = response.json()
    assert body["level"] == "low"
    assert body["recommendations"] == ["Continue monitoring your emotional wellbeing"]


def test_detector_is_called_with_parsed_request(mocker):
    spy = mocker.spy(burnout_module, "detect_burnout_risk")

    client.post("/api/v1/burnout-detection", json={"emotionalState": "fine", "motivationLevel": 6})

    kwargs = spy.call_args.kwargs
    assert kwargs["emotional_state"] == "fine"
    assert kwargs["motivation_level"] == 6
    assert kwargs["shift_context"] is None


def test_invalid_motivation_type_is_422():
    response = client.post("/api/v1/burnout-detection", json={"motivationLevel": "very low"})
    assert response.status_code == 422


def test_partial_shift_context_is_accepted():
    payload = {"emotionalState": "fine", "motivationLevel": 5, "shiftContext": {"criticalIncidentOccurred": True}}

    response = client.post("/api/v1/burnout-detection", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert body["level"] == "moderate"
    assert body["indicators"] == ["Critical incident occurred"]


def test_free_form_shift_values_are_accepted():
    payload = {"shiftContext": {"shiftType": "rotating", "department": "Maternity", "workloadIntensity": "critical"}}

    response = client.post("/api/v1/burnout-detection", json=payload)

    assert response.status_code == 200
    assert response.json()["indicators"] == ["Critical workload intensity"]


def test_null_reflections_are_accepted():
    payload = {"emotionalState": "fine", "motivationLevel": 5, "recentReflections": None, "shiftContext": None}

    response = client.post("/api/v1/burnout-detection", json=payload)

    assert response.status_code == 200
    assert response.json()["level"] == "low"
