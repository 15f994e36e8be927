from fastapi import FastAPI
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, MagicMock

from src.agents.errors import AgentInputError
from src.agents.support_agent import SupportAgent
from src.core.dependencies import get_support_agent
from src.llm.errors import GenerationConfigError
from src.routers.ai_tools import router as ai_tools_router
from src.schemas.ai_tools import (
    CounterFrameResponse,
    DiaryAnalysis,
    EmotionalAnalysis,
    ReappraisalResponse,
    ReframeResponse,
)

app = FastAPI()
app.include_router(ai_tools_router, prefix="/api/v1")

client = TestClient(app)

ANALYSIS = DiaryAnalysis(
    mood="anxious",
    emotional_state="uneasy",
    current_challenges="night shifts",
    motivation_level="4",
    insights=["i"],
    suggestions=["s"],
    using_fallback=False,
    model="gemini-test",
)


def _override(**methods):
    agent = MagicMock(spec=SupportAgent)
    for name, mock in methods.items():
        setattr(agent, name, mock)
    app.dependency_overrides[get_support_agent] = lambda: agent
    return agent


def test_diary_conversion():
    agent = _override(convert_diary=AsyncMock(return_value=ANALYSIS))

    response = client.post(
        "/api/v1/ai-tools/diary-conversion",
        json={"diaryText": "Couldn't sleep after the shift", "nurseProfile": {"name": "Ash"}},
    )
    app.dependency_overrides.clear()

    assert response.status_code == 200
    body = response.json()
    assert body["motivationLevel"] == "4"
    assert body["emotionalState"] == "uneasy"
    assert body["usingFallback"] is False
    text, profile = agent.convert_diary.await_args.args
    assert text == "Couldn't sleep after the shift"
    assert profile.name == "Ash"


def test_diary_conversion_empty_text_is_400():
    _override(convert_diary=AsyncMock(side_effect=AgentInputError("Diary text is required")))

    response = client.post("/api/v1/ai-tools/diary-conversion", json={})
    app.dependency_overrides.clear()

    assert response.status_code == 400
    assert response.json()["detail"] == "Diary text is required"


def test_diary_conversion_without_credentials_is_503():
    _override(convert_diary=AsyncMock(side_effect=GenerationConfigError("Gemini API key not configured")))

    response = client.post("/api/v1/ai-tools/diary-conversion", json={"diaryText": "x"})
    app.dependency_overrides.clear()

    assert response.status_code == 503
    assert response.json()["success"] is False


def test_diary_conversion_unexpected_error_is_500():
    _override(convert_diary=AsyncMock(side_effect=RuntimeError("boom")))

    response = client.post("/api/v1/ai-tools/diary-conversion", json={"diaryText": "x"})
    app.dependency_overrides.clear()

    assert response.status_code == 500


def test_reframe():
    agent = _override(reframe_thought=AsyncMock(return_value=ReframeResponse(
        emotion="anxious", validation="v", perspective="p", reflection_prompt="r", using_fallback=True,
    )))

    response = client.post("/api/v1/ai-tools/reframe", json={"thought": "I will mess this up"})
    app.dependency_overrides.clear()

    assert response.status_code == 200
    assert response.json() == {
        "emotion": "anxious",
        "validation": "v",
        "perspective": "p",
        "reflectionPrompt": "r",
        "usingFallback": True,
    }
    agent.reframe_thought.assert_awaited_once_with("I will mess this up")


def test_reframe_empty_thought_is_400():
    _override(reframe_thought=AsyncMock(side_effect=AgentInputError("Thought is required")))

    response = client.post("/api/v1/ai-tools/reframe", json={"thought": ""})
    app.dependency_overrides.clear()

    assert response.status_code == 400


def test_reframe_without_credentials_is_503():
    _override(reframe_thought=AsyncMock(side_effect=GenerationConfigError("missing key")))

    response = client.post("/api/v1/ai-tools/reframe", json={"thought": "help"})
    app.dependency_overrides.clear()

    assert response.status_code == 503
    assert response.json()["error"] == "missing key"


def test_emotional_analysis():
    agent = _override(analyze_emotions=AsyncMock(return_value=EmotionalAnalysis(
        mood="content", emotional_state="settled", motivation_level=7, insights=["i"], suggestions=["s"],
        model="gemini-test",
    )))

    response = client.post(
        "/api/v1/emotional-analysis", json={"text": "Good handover today", "nurseProfile": {"name": "Jo"}}
    )
    app.dependency_overrides.clear()

    assert response.status_code == 200
    body = response.json()
    assert body["motivationLevel"] == 7
    assert body["emotionalState"] == "settled"
    text, profile = agent.analyze_emotions.await_args.args
    assert text == "Good handover today"
    assert profile.name == "Jo"


def test_emotional_analysis_without_text_is_400():
    _override(analyze_emotions=AsyncMock(side_effect=AgentInputError("Text is required")))

    response = client.post("/api/v1/emotional-analysis", json={})
    app.dependency_overrides.clear()

    assert response.status_code == 400
    assert response.json()["detail"] == "Text is required"


def test_assumptions_lab():
    agent = _override(counter_frame=AsyncMock(return_value=CounterFrameResponse(counter_frame="What else is true?")))

    response = client.post(
        "/api/v1/ai-tools/assumptions-lab", json={"action": "counter-frame", "assumption": "I always fail"}
    )
    app.dependency_overrides.clear()

    assert response.status_code == 200
    assert response.json() == {"counterFrame": "What else is true?", "usingFallback": False}
    agent.counter_frame.assert_awaited_once_with("counter-frame", "I always fail")


def test_assumptions_lab_invalid_action_is_400():
    _override(counter_frame=AsyncMock(side_effect=AgentInputError("Invalid action")))

    response = client.post("/api/v1/ai-tools/assumptions-lab", json={"action": "explain", "assumption": "x"})
    app.dependency_overrides.clear()

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid action"


def test_change_companion():
    agent = _override(reappraise=AsyncMock(return_value=ReappraisalResponse(
        reappraisal="They may be stretched too.", suggested_action="Say good morning.", using_fallback=True,
    )))

    response = client.post(
        "/api/v1/ai-tools/change-companion", json={"action": "reappraise", "concern": "My colleague ignores me"}
    )
    app.dependency_overrides.clear()

    assert response.status_code == 200
    assert response.json()["suggestedAction"] == "Say good morning."
    agent.reappraise.assert_awaited_once_with("reappraise", "My colleague ignores me")


def test_change_companion_without_credentials_is_503():
    _override(reappraise=AsyncMock(side_effect=GenerationConfigError("missing key")))

    response = client.post("/api/v1/ai-tools/change-companion", json={"action": "reappraise", "concern": "x"})
    app.dependency_overrides.clear()

    assert response.status_code == 503
