# src/agents/support_agent.py
# Diary-to-reflection conversion, emotional analysis and the AI tools
# (reframe, assumptions lab, change companion).

import logging
from typing import Any, Optional

from src.agents.coercion import as_int, as_text
from src.agents.errors import AgentInputError
from src.agents.fallbacks import (
    COUNTER_FRAME_FALLBACK,
    DIARY_ANXIOUS_WORDS,
    DIARY_FALLBACK_INSIGHTS,
    DIARY_FALLBACK_SUGGESTIONS,
    DIARY_NEGATIVE_WORDS,
    DIARY_POSITIVE_WORDS,
    DIARY_SEVERE_DISTRESS_WORDS,
    EMOTIONAL_ANALYSIS_FALLBACK,
    REAPPRAISAL_FALLBACK,
    REFRAME_FALLBACK,
)
from src.llm.client import GenerationClient
from src.llm.errors import GenerationError, JSONExtractionError
from src.llm.json_utils import parse_json_response
from src.schemas.ai_tools import (
    CounterFrameResponse,
    DiaryAnalysis,
    EmotionalAnalysis,
    ReappraisalResponse,
    ReframeResponse,
)
from src.schemas.training import NurseProfile

logger = logging.getLogger(__name__)

# Phrases that cap the model's motivation estimate
MOTIVATION_CAP_INDICATORS = [
    "physical pain", "swollen", "pain", "hurt", "suffering", "can't take it", "hopeless", "give up",
    "end up in sorrow", "body is not supporting", "so much pain", "heart feels heavy", "disappointed", "let down",
]

DEFAULT_MOTIVATION_LEVEL = "5"

DIARY_PROMPT_GUIDELINES = """IMPORTANT GUIDELINES:
1. Be extremely accurate with motivation levels - if someone is in deep pain, struggling, or experiencing physical symptoms from emotional distress, their motivation should be LOW (1-4)
2. If someone mentions physical pain, swollen areas, or body symptoms from emotional stress, this indicates SEVERE emotional distress
3. Relationship turmoil, repeated disappointment, and emotional rollercoasters should result in LOW motivation scores
4. Only give high motivation (7-10) if there's genuine optimism, energy, and forward momentum
5. Be empathetic but realistic about their current state

MOTIVATION SCALE:
- 1-2: Severe depression, hopelessness, physical symptoms from emotional pain
- 3-4: Struggling significantly, low energy, repeated disappointments
- 5-6: Neutral to slightly positive, managing but not thriving
- 7-8: Good energy, optimistic, making progress
- 9-10: Excellent state, highly motivated, thriving

Return ONLY a valid JSON object with this structure:
{
  "mood": "happy|sad|anxious|excited|neutral|frustrated|content|overwhelmed|motivated|stressed|reflective|heartbroken|disappointed",
  "emotionalState": "Detailed, empathetic description of their current emotional state that acknowledges their pain",
  "currentChallenges": "Specific challenges identified from the diary entry - be detailed and accurate",
  "motivationLevel": "1-4 for severe struggles, 5-6 for neutral, 7-10 for genuinely positive states",
  "insights": ["Meaningful insight about their emotional patterns", "Another supportive observation"],
  "suggestions": ["Gentle, practical suggestion for their current state", "Another helpful recommendation"]
}

Be deeply empathetic and accurate. Don't sugarcoat severe emotional distress with high motivation scores."""

REFRAME_PROMPT_INSTRUCTIONS = """Provide FOUR things in JSON format:

1. "emotion": Detect the primary emotion (ONE word, lowercase). Common ones: frustrated, anxious, sad, overwhelmed, angry, disappointed, worried, stressed

2. "validation": Validate their feeling in 1-2 sentences. Be warm, not clinical. Don't minimize or dismiss.

3. "perspective": Offer ONE gentle alternative perspective in 2 sentences max. Don't give advice. Don't be preachy. Just offer a different lens.

4. "reflectionPrompt": A tiny, actionable micro-reflection for the next hour or so. One sentence. Start with an action verb.

Keep everything SHORT and WARM. This is emotional first aid, not analysis.

Respond ONLY with valid JSON, no markdown:
{"emotion": "...", "validation": "...", "perspective": "...", "reflectionPrompt": "..."}"""

EMOTIONAL_ANALYSIS_PROMPT_FORMAT = """Return ONLY a valid JSON object with this structure:
{
  "mood": "happy|sad|anxious|excited|neutral|frustrated|content|overwhelmed|motivated|stressed",
  "emotionalState": "Brief description of the person's emotional state",
  "motivationLevel": 7,
  "insights": ["Key insight about their emotional patterns", "Another meaningful observation"],
  "suggestions": ["Actionable suggestion for emotional wellbeing", "Another helpful recommendation"]
}

Focus on being supportive, constructive, and encouraging in your analysis."""

COUNTER_FRAME_INSTRUCTIONS = """Your task:
1. Acknowledge the assumption without dismissing it
2. Offer ONE powerful counter-frame or alternative perspective
3. Keep it concise (2-3 sentences max)
4. Make it specific to their assumption, not generic
5. End with a thought-provoking question or observation

Do NOT:
- Give advice
- Be preachy or condescending
- Use bullet points
- Be overly positive or dismissive of their concern

Respond with just the counter-frame text, nothing else."""

REAPPRAISAL_INSTRUCTIONS = """Provide TWO things in JSON format:

1. "reappraisal": A cognitive reappraisal that validates their emotional experience without dismissing it,
   offers an alternative interpretation of the other person's behavior and separates facts from
   interpretations. Warm, supportive, non-preachy, 2-3 sentences max.

2. "suggestedAction": A small, concrete, non-confrontational next step that focuses on their own response,
   not on changing the other person, and is actionable within the next interaction. 1-2 sentences max.

Respond ONLY with valid JSON, no markdown:
{"reappraisal": "...", "suggestedAction": "..."}"""

# Motivation is reported on a 1-10 scale
MOTIVATION_RANGE = (1, 10)


def _parse_level(value: Any) -> Optional[int]:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def cap_motivation_level(diary_text: str, motivation_level: str) -> str:
    """Lowers an optimistic motivation estimate when the diary shows several distress indicators."""
    text = diary_text.lower()
    severe_count = sum(1 for indicator in MOTIVATION_CAP_INDICATORS if indicator in text)
    level = _parse_level(motivation_level)
    if level is None:
        return motivation_level
    if severe_count >= 3 and level > 4:
        return "3"
    if severe_count >= 2 and level > 5:
        return "4"
    return motivation_level


def keyword_diary_analysis(diary_text: str) -> DiaryAnalysis:
    """Keyword-count analysis used when the model cannot be used."""
    text = diary_text.lower()
    severe = sum(1 for w in DIARY_SEVERE_DISTRESS_WORDS if w in text)
    positive = sum(1 for w in DIARY_POSITIVE_WORDS if w in text)
    negative = sum(1 for w in DIARY_NEGATIVE_WORDS if w in text)
    anxious = sum(1 for w in DIARY_ANXIOUS_WORDS if w in text)

    if severe >= 2:
        mood, level = "heartbroken", "2"
        state = "experiencing severe emotional distress with physical manifestations"
        challenges = "managing intense emotional pain and its physical effects on the body"
    elif negative > positive and negative >= 2:
        mood, level = "sad", "3"
        state = "working through significant emotional difficulties"
        challenges = "navigating relationship challenges and emotional instability"
    elif anxious > 0:
        mood, level = "anxious", "4"
        state = "feeling stress and uncertainty about the future"
        challenges = "managing anxiety and finding emotional stability"
    elif positive > negative and positive > 0:
        mood, level = "content", "7"
        state = "experiencing positive emotions and optimism"
        challenges = "maintaining positive momentum and continued growth"
    else:
        mood, level = "reflective", DEFAULT_MOTIVATION_LEVEL
        state = "processing thoughts and experiences"
        challenges = "general life navigation and personal growth"

    return DiaryAnalysis(
        mood=mood,
        emotional_state=state,
        current_challenges=challenges,
        motivation_level=level,
        insights=list(DIARY_FALLBACK_INSIGHTS),
        suggestions=list(DIARY_FALLBACK_SUGGESTIONS),
        using_fallback=True,
    )


class SupportAgent:
    def __init__(self, client: GenerationClient):
        self.client = client

    async def convert_diary(self, diary_text: str, nurse_profile: Optional[NurseProfile] = None) -> DiaryAnalysis:
        """
        Turns a free-text diary entry into a structured reflection.

        Raises:
            AgentInputError: the diary text is empty.
            GenerationConfigError: the generation service has no credentials.
        """
        if not diary_text or not diary_text.strip():
            raise AgentInputError("Diary text is required")

        prompt = self._diary_prompt(diary_text, nurse_profile)
        try:
            text = await self.client.generate_with_retry(prompt)
            analysis = parse_json_response(text)
        except (GenerationError, JSONExtractionError) as e:
            logger.warning(f"Diary conversion falling back to keyword analysis: {e}")
            return keyword_diary_analysis(diary_text)

        motivation = str(analysis.get("motivationLevel") or analysis.get("motivation_level") or DEFAULT_MOTIVATION_LEVEL)
        insights = analysis.get("insights")
        if not isinstance(insights, list):
            insights = ["Your awareness of the mind-body connection shows deep self-understanding."]
        suggestions = analysis.get("suggestions")
        if not isinstance(suggestions, list):
            suggestions = ["Consider gentle self-care practices and professional support if physical symptoms persist."]

        logger.info("Parsed diary analysis from model reply")
        return DiaryAnalysis(
            mood=str(analysis.get("mood") or "sad"),
            emotional_state=str(analysis.get("emotionalState") or "processing difficult emotions and physical symptoms"),
            current_challenges=str(analysis.get("currentChallenges") or "navigating emotional and physical pain"),
            motivation_level=cap_motivation_level(diary_text, motivation),
            insights=[str(i) for i in insights],
            suggestions=[str(s) for s in suggestions],
            using_fallback=False,
            model=self.client.model,
        )

    @staticmethod
    def _diary_prompt(diary_text: str, nurse_profile: Optional[NurseProfile]) -> str:
        profile_section = ""
        if nurse_profile is not None:
            profile_section = (
                f"\nPLAYER CONTEXT:\n- Name: {nurse_profile.name}\n- Level: {nurse_profile.display_level}\n"
                f"- Current emotional streak: {nurse_profile.streak or 0} days\n"
                f"- Recent progress: {nurse_profile.completed_quests or 0} quests completed\n"
            )
        return (
            "Analyze this diary entry with deep emotional intelligence and provide accurate insights:\n\n"
            f'DIARY ENTRY:\n"{diary_text}"\n{profile_section}\n{DIARY_PROMPT_GUIDELINES}'
        )

    async def reframe_thought(self, thought: str) -> ReframeResponse:
        """
        Rapid emotional first aid for a single troubling thought.

        Raises:
            AgentInputError: the thought is empty.
            GenerationConfigError: the generation service has no credentials.
        """
        if not thought or not thought.strip():
            raise AgentInputError("Thought is required")

        prompt = (
            "You are providing rapid emotional first aid to a healthcare professional. "
            "This is NOT deep therapy - it's quick, warm support.\n\n"
            f'The user expressed: "{thought}"\n\n{REFRAME_PROMPT_INSTRUCTIONS}'
        )
        try:
            text = await self.client.generate_with_retry(prompt)
            parsed = parse_json_response(text)
            values = {
                "emotion": parsed.get("emotion"),
                "validation": parsed.get("validation"),
                "perspective": parsed.get("perspective"),
                "reflection_prompt": parsed.get("reflectionPrompt") or parsed.get("reflection_prompt"),
            }
            missing = [k for k, v in values.items() if not isinstance(v, str) or not v.strip()]
            if missing:
                raise JSONExtractionError(f"Reframe reply missing fields: {', '.join(missing)}")
        except (GenerationError, JSONExtractionError) as e:
            logger.warning(f"Reframe falling back to default response: {e}")
            return ReframeResponse(**REFRAME_FALLBACK, using_fallback=True)

        return ReframeResponse(**values, using_fallback=False)

    async def analyze_emotions(self, text: str, nurse_profile: Optional[NurseProfile] = None) -> EmotionalAnalysis:
        """
        Short emotional read of any free text (a note, a message, a reflection).

        Fields missing from the model reply take the fallback values and the
        motivation level is clamped to 1-10.

        Raises:
            AgentInputError: the text is empty.
            GenerationConfigError: the generation service has no credentials.
        """
        if not text or not text.strip():
            raise AgentInputError("Text is required")

        profile_section = ""
        if nurse_profile is not None:
            profile_section = (
                f"\nPLAYER CONTEXT:\n- Name: {nurse_profile.name}\n- Level: {nurse_profile.display_level}\n"
                f"- Current emotional streak: {nurse_profile.streak or 0} days\n"
            )
        prompt = (
            "Analyze the emotional content of this text and provide insights:\n\n"
            f'TEXT TO ANALYZE:\n"{text}"\n{profile_section}\n{EMOTIONAL_ANALYSIS_PROMPT_FORMAT}'
        )
        try:
            reply = await self.client.generate_with_retry(prompt)
            parsed = parse_json_response(reply)
        except (GenerationError, JSONExtractionError) as e:
            logger.warning(f"Emotional analysis falling back to default response: {e}")
            return EmotionalAnalysis(**EMOTIONAL_ANALYSIS_FALLBACK, using_fallback=True)

        fallback = EMOTIONAL_ANALYSIS_FALLBACK
        low, high = MOTIVATION_RANGE
        motivation = as_int(
            parsed.get("motivationLevel", parsed.get("motivation_level")), fallback["motivation_level"]
        )
        insights = parsed.get("insights")
        suggestions = parsed.get("suggestions")
        return EmotionalAnalysis(
            mood=as_text(parsed.get("mood"), fallback["mood"]),
            emotional_state=as_text(parsed.get("emotionalState"), fallback["emotional_state"]),
            motivation_level=max(low, min(high, motivation)),
            insights=[str(i) for i in insights] if isinstance(insights, list) else list(fallback["insights"]),
            suggestions=(
                [str(s) for s in suggestions] if isinstance(suggestions, list) else list(fallback["suggestions"])
            ),
            using_fallback=False,
            model=self.client.model,
        )

    async def counter_frame(self, action: str, assumption: str) -> CounterFrameResponse:
        """Assumptions lab: one CBT-style counter-frame for a limiting belief."""
        if action != "counter-frame":
            raise AgentInputError("Invalid action")
        if not assumption or not assumption.strip():
            raise AgentInputError("Assumption is required")

        prompt = (
            "You are a cognitive behavioral therapy expert helping a healthcare professional challenge a "
            f'limiting belief or assumption.\n\nThe user\'s assumption: "{assumption}"\n\n{COUNTER_FRAME_INSTRUCTIONS}'
        )
        try:
            reply = (await self.client.generate_with_retry(prompt)).strip()
        except GenerationError as e:
            logger.warning(f"Counter-frame falling back to default response: {e}")
            return CounterFrameResponse(counter_frame=COUNTER_FRAME_FALLBACK, using_fallback=True)
        if not reply:
            return CounterFrameResponse(counter_frame=COUNTER_FRAME_FALLBACK, using_fallback=True)
        return CounterFrameResponse(counter_frame=reply, using_fallback=False)

    async def reappraise(self, action: str, concern: str) -> ReappraisalResponse:
        """Change companion: reappraisal of an interpersonal concern plus one next step."""
        if action != "reappraise":
            raise AgentInputError("Invalid action")
        if not concern or not concern.strip():
            raise AgentInputError("Concern is required")

        prompt = (
            "You are a supportive cognitive reappraisal coach for healthcare professionals dealing with "
            f'interpersonal workplace challenges.\n\nThe user\'s interpersonal concern: "{concern}"\n\n'
            f"{REAPPRAISAL_INSTRUCTIONS}"
        )
        try:
            parsed = parse_json_response(await self.client.generate_with_retry(prompt))
            reappraisal = parsed.get("reappraisal")
            suggested = parsed.get("suggestedAction") or parsed.get("suggested_action")
            if not isinstance(reappraisal, str) or not isinstance(suggested, str) \
                    or not reappraisal.strip() or not suggested.strip():
                raise JSONExtractionError("Reappraisal reply missing fields")
        except (GenerationError, JSONExtractionError) as e:
            logger.warning(f"Reappraisal falling back to default response: {e}")
            return ReappraisalResponse(**REAPPRAISAL_FALLBACK, using_fallback=True)

        return ReappraisalResponse(reappraisal=reappraisal, suggested_action=suggested, using_fallback=False)
