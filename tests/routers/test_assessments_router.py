import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from unittest.mock import MagicMock

from src.core.dependencies import get_assessment_engine
from src.routers.assessments import router as assessments_router
from services.assessment_engine.engine import AssessmentEngine
from services.assessment_engine.models import InvalidSubmissionError, UnknownAssessmentToolError

app = FastAPI()
app.include_router(assessments_router, prefix="/api/v1")

client = TestClient(app)

PARTIAL_ANSWERS = {"0": 5, "1": 1, "2": 5, "3": 1, "4": 5}


@pytest.fixture
def real_engine(question_bank):
    app.dependency_overrides[get_assessment_engine] = lambda: AssessmentEngine(question_bank)
    yield
    app.dependency_overrides.clear()


def test_submit_teique_sf(real_engine):
    response = client.post("/api/v1/assessments", json={"tool": "TEIQue-SF", "answers": PARTIAL_ANSWERS})

    assert response.status_code == 200
    result = response.json()
    assert result["tool"] == "TEIQue-SF"
    assert result["baselineScore"] == pytest.approx(27.5)
    assert result["domainScores"] == {
        "selfAwareness": 20.0,
        "selfManagement": 20.0,
        "socialAwareness": 50.0,
        "relationshipManagement": 20.0,
    }
    assert result["strengths"] == ["socialAwareness", "selfAwareness"]
    assert result["gaps"] == ["selfManagement", "relationshipManagement"]
    assert result["id"]
    assert "assessmentDate" in result and "completedAt" in result


def test_submit_empty_answers_is_neutral(real_engine):
    response = client.post("/api/v1/assessments", json={"tool": "TEIQue-SF", "answers": {}})
    assert response.status_code == 200
    assert response.json()["baselineScore"] == 50.0


def test_submit_placeholder_tool(real_engine):
    response = client.post("/api/v1/assessments", json={"tool": "HEIT", "answers": {}})
    assert response.status_code == 200
    assert response.json()["domainScores"]["selfManagement"] == 55.0


def test_submit_unknown_tool(real_engine):
    response = client.post("/api/v1/assessments", json={"tool": "MSCEIT", "answers": {}})
    assert response.status_code == 400
    assert "Invalid assessment tool 'MSCEIT'" in response.json()["detail"]
    assert response.json()["detail"].endswith("Supported tools: TEIQue-SF, SSEIT, HEIT, Nurse-EI")


def test_submit_out_of_scale_value(real_engine):
    response = client.post("/api/v1/assessments", json={"tool": "TEIQue-SF", "answers": {"0": 7}})
    assert response.status_code == 400
    assert "outside the 1-5 scale" in response.json()["detail"]


def test_submit_non_numeric_answer_is_422(real_engine):
    response = client.post("/api/v1/assessments", json={"tool": "TEIQue-SF", "answers": {"0": "often"}})
    assert response.status_code == 422


def test_submit_engine_errors_mapped():
    mock_engine = MagicMock(spec=AssessmentEngine)
    app.dependency_overrides[get_assessment_engine] = lambda: mock_engine

    mock_engine.score.side_effect = UnknownAssessmentToolError("nope")
    assert client.post("/api/v1/assessments", json={"tool": "x"}).status_code == 400

    mock_engine.score.side_effect = InvalidSubmissionError("bad value")
    assert client.post("/api/v1/assessments", json={"tool": "x"}).status_code == 400

    mock_engine.score.side_effect = Exception("disk on fire")
    response = client.post("/api/v1/assessments", json={"tool": "x"})
    app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json()["detail"] == "Internal Server Error"


def test_get_questions(real_engine):
    response = client.get("/api/v1/assessments/TEIQue-SF/questions")

    assert response.status_code == 200
    body = response.json()
    assert body["likertMin"] == 1 and body["likertMax"] == 5
    assert len(body["questions"]) == 10
    assert body["questions"][0] == {
        "position": 0,
        "id": 1,
        "text": "I usually find it difficult to regulate my emotions.",
        "domain": "selfManagement",
        "reverse": True,
    }


def test_get_questions_unknown_tool(real_engine):
    response = client.get("/api/v1/assessments/SSEIT/questions")
    assert response.status_code == 404
