import json

import pytest

from src.agents.errors import AgentInputError
from src.agents.fallbacks import (
    COUNTER_FRAME_FALLBACK,
    EMOTIONAL_ANALYSIS_FALLBACK,
    REAPPRAISAL_FALLBACK,
    REFRAME_FALLBACK,
)
from src.agents.support_agent import SupportAgent, cap_motivation_level, keyword_diary_analysis
from src.llm.errors import GenerationConfigError, GenerationError, TransientGenerationError
from src.schemas.training import NurseProfile

PAINFUL_DIARY = "My body is not supporting me, my ankle is swollen and I feel so much pain. I want to give up."


@pytest.fixture
def agent(mock_generation_client):
    return SupportAgent(mock_generation_client)


@pytest.mark.parametrize("text, level, expected", [
    (PAINFUL_DIARY, "8", "3"),
    ("hopeless and disappointed", "7", "4"),
    ("hopeless and disappointed", "5", "5"),
    ("a calm day", "9", "9"),
    (PAINFUL_DIARY, "unknown", "unknown"),
])
def test_cap_motivation_level(text, level, expected):
    assert cap_motivation_level(text, level) == expected


@pytest.mark.parametrize("text, mood, level", [
    ("I feel hopeless and betrayed", "heartbroken", "2"),
    ("A sad and terrible day", "sad", "3"),
    ("Worried about tomorrow", "anxious", "4"),
    ("What a great and happy shift", "content", "7"),
    ("Went to work. Came home.", "reflective", "5"),
])
def test_keyword_diary_analysis(text, mood, level):
    analysis = keyword_diary_analysis(text)
    assert (analysis.mood, analysis.motivation_level) == (mood, level)
    assert analysis.using_fallback is True


@pytest.mark.asyncio
async def test_convert_diary_uses_model_reply(agent, mock_generation_client):
    mock_generation_client.generate_with_retry.return_value = json.dumps({
        "mood": "overwhelmed",
        "emotionalState": "Carrying a lot right now",
        "currentChallenges": "Physical pain after long shifts",
        "motivationLevel": 8,
        "insights": ["You notice your body"],
        "suggestions": ["Rest"],
    })

    analysis = await agent.convert_diary(PAINFUL_DIARY, NurseProfile(name="Lee", streak=4))

    assert analysis.using_fallback is False
    assert analysis.model == "gemini-test"
    assert analysis.mood == "overwhelmed"
    assert analysis.motivation_level == "3"
    assert analysis.insights == ["You notice your body"]
    prompt = mock_generation_client.generate_with_retry.await_args.args[0]
    assert "Name: Lee" in prompt
    assert "Current emotional streak: 4 days" in prompt


@pytest.mark.asyncio
async def test_convert_diary_fills_missing_fields(agent, mock_generation_client):
    mock_generation_client.generate_with_retry.return_value = '{"mood": "calm", "insights": "not a list"}'

    analysis = await agent.convert_diary("quiet day")

    assert analysis.motivation_level == "5"
    assert len(analysis.insights) == 1
    assert analysis.emotional_state


@pytest.mark.asyncio
@pytest.mark.parametrize("failure", [TransientGenerationError("timeout"), GenerationError("HTTP 400")])
async def test_convert_diary_falls_back_to_keywords(agent, mock_generation_client, failure):
    mock_generation_client.generate_with_retry.side_effect = failure

    analysis = await agent.convert_diary("Worried and anxious about the audit")

    assert analysis.using_fallback is True
    assert analysis.mood == "anxious"


@pytest.mark.asyncio
async def test_convert_diary_unparseable_reply_falls_back(agent, mock_generation_client):
    mock_generation_client.generate_with_retry.return_value = "I'm sorry to hear that."
    assert (await agent.convert_diary("a sad day and a bad night")).using_fallback is True


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["", "   "])
async def test_convert_diary_requires_text(agent, mock_generation_client, text):
    with pytest.raises(AgentInputError):
        await agent.convert_diary(text)
    mock_generation_client.generate_with_retry.assert_not_awaited()


@pytest.mark.asyncio
async def test_convert_diary_config_error_propagates(agent, mock_generation_client):
    mock_generation_client.generate_with_retry.side_effect = GenerationConfigError("no key")
    with pytest.raises(GenerationConfigError):
        await agent.convert_diary("text")


@pytest.mark.asyncio
async def test_reframe_thought(agent, mock_generation_client):
    mock_generation_client.generate_with_retry.return_value = (
        '```json\n{"emotion": "frustrated", "validation": "That sounds hard.", '
        '"perspective": "One shift is not the whole story.", "reflectionPrompt": "Drink some water."}\n```'
    )

    response = await agent.reframe_thought("I failed my patient today")

    assert response.using_fallback is False
    assert response.emotion == "frustrated"
    assert response.reflection_prompt == "Drink some water."
    assert "I failed my patient today" in mock_generation_client.generate_with_retry.await_args.args[0]


@pytest.mark.asyncio
async def test_reframe_missing_field_falls_back(agent, mock_generation_client):
    mock_generation_client.generate_with_retry.return_value = '{"emotion": "sad", "validation": "ok"}'

    response = await agent.reframe_thought("nothing works")

    assert response.using_fallback is True
    assert response.emotion == REFRAME_FALLBACK["emotion"]
    assert response.reflection_prompt == REFRAME_FALLBACK["reflection_prompt"]


@pytest.mark.asyncio
async def test_reframe_generation_failure_falls_back(agent, mock_generation_client):
    mock_generation_client.generate_with_retry.side_effect = TransientGenerationError("429")
    assert (await agent.reframe_thought("everything is too much")).using_fallback is True


@pytest.mark.asyncio
async def test_reframe_requires_thought(agent):
    with pytest.raises(AgentInputError, match="Thought is required"):
        await agent.reframe_thought("  ")


@pytest.mark.asyncio
async def test_analyze_emotions(agent, mock_generation_client):
    mock_generation_client.generate_with_retry.return_value = json.dumps({
        "mood": "stressed",
        "emotionalState": "Stretched thin",
        "motivationLevel": "4",
        "insights": ["You name the pressure clearly"],
        "suggestions": ["Take your break"],
    })

    analysis = await agent.analyze_emotions("Three admissions in an hour", NurseProfile(name="Kai", streak=2))

    assert (analysis.mood, analysis.motivation_level) == ("stressed", 4)
    assert analysis.using_fallback is False
    assert analysis.model == "gemini-test"
    prompt = mock_generation_client.generate_with_retry.await_args.args[0]
    assert "Three admissions in an hour" in prompt
    assert "Name: Kai" in prompt


@pytest.mark.asyncio
@pytest.mark.parametrize("level, expected", [(42, 10), (-3, 1), ("high", 6), (None, 6), (1e999, 6)])
async def test_analyze_emotions_clamps_motivation(agent, mock_generation_client, level, expected):
    mock_generation_client.generate_with_retry.return_value = json.dumps({"motivationLevel": level})

    analysis = await agent.analyze_emotions("a note")

    assert analysis.motivation_level == expected
    assert analysis.mood == EMOTIONAL_ANALYSIS_FALLBACK["mood"]
    assert analysis.insights == EMOTIONAL_ANALYSIS_FALLBACK["insights"]


@pytest.mark.asyncio
async def test_analyze_emotions_falls_back(agent, mock_generation_client):
    mock_generation_client.generate_with_retry.side_effect = GenerationError("HTTP 400")

    analysis = await agent.analyze_emotions("a note")

    assert analysis.using_fallback is True
    assert analysis.emotional_state == EMOTIONAL_ANALYSIS_FALLBACK["emotional_state"]


@pytest.mark.asyncio
async def test_analyze_emotions_requires_text(agent, mock_generation_client):
    with pytest.raises(AgentInputError, match="Text is required"):
        await agent.analyze_emotions(" ")
    mock_generation_client.generate_with_retry.assert_not_awaited()


@pytest.mark.asyncio
async def test_counter_frame(agent, mock_generation_client):
    mock_generation_client.generate_with_retry.return_value = "  Maybe one mistake is not a pattern. What else is true?\n"

    response = await agent.counter_frame("counter-frame", "I'm not cut out for ICU")

    assert response.counter_frame == "Maybe one mistake is not a pattern. What else is true?"
    assert response.using_fallback is False
    assert "I'm not cut out for ICU" in mock_generation_client.generate_with_retry.await_args.args[0]


@pytest.mark.asyncio
@pytest.mark.parametrize("reply, failure", [("   ", None), (None, TransientGenerationError("timeout"))])
async def test_counter_frame_falls_back(agent, mock_generation_client, reply, failure):
    mock_generation_client.generate_with_retry.return_value = reply
    mock_generation_client.generate_with_retry.side_effect = failure

    response = await agent.counter_frame("counter-frame", "Nobody values my work")

    assert response.counter_frame == COUNTER_FRAME_FALLBACK
    assert response.using_fallback is True


@pytest.mark.asyncio
@pytest.mark.parametrize("method, action, text, message", [
    ("counter_frame", "reappraise", "belief", "Invalid action"),
    ("counter_frame", "counter-frame", "", "Assumption is required"),
    ("reappraise", "counter-frame", "concern", "Invalid action"),
    ("reappraise", "reappraise", "  ", "Concern is required"),
])
async def test_ai_tool_input_validation(agent, mock_generation_client, method, action, text, message):
    with pytest.raises(AgentInputError, match=message):
        await getattr(agent, method)(action, text)
    mock_generation_client.generate_with_retry.assert_not_awaited()


@pytest.mark.asyncio
async def test_reappraise(agent, mock_generation_client):
    mock_generation_client.generate_with_retry.return_value = (
        '```json\n{"reappraisal": "They may be short-staffed too.", "suggestedAction": "Ask how their day is."}\n```'
    )

    response = await agent.reappraise("reappraise", "My preceptor ignores my questions")

    assert response.reappraisal == "They may be short-staffed too."
    assert response.suggested_action == "Ask how their day is."
    assert response.using_fallback is False


@pytest.mark.asyncio
@pytest.mark.parametrize("reply", ['{"reappraisal": "Only half"}', "Not JSON at all"])
async def test_reappraise_incomplete_reply_falls_back(agent, mock_generation_client, reply):
    mock_generation_client.generate_with_retry.return_value = reply

    response = await agent.reappraise("reappraise", "My manager dismissed my concern")

    assert response.using_fallback is True
    assert response.suggested_action == REAPPRAISAL_FALLBACK["suggested_action"]
