# src/agents/quest_agent.py
import logging
import uuid
from typing import Any, List, Optional

from pydantic import ValidationError

from src.agents.coercion import as_boosts, as_int, as_text, first_present
from src.agents.errors import InvalidAgentResponseError
from src.agents.fallbacks import (
    DIARY_FALLBACK_QUESTS,
    FALLBACK_SUGGESTIONS,
    GENERAL_FALLBACK_QUESTS,
    reflection_fallback_quests,
)
from src.llm.client import GenerationClient
from src.llm.errors import GenerationError, JSONExtractionError
from src.llm.json_utils import parse_json_response
from src.schemas.training import (
    DiaryEntry,
    NurseProfile,
    PersonalReflection,
    ProgramContext,
    QuestGenerationRequest,
    QuestGenerationResult,
    QuestSuggestions,
    TrainingModule,
)

logger = logging.getLogger(__name__)

DEFAULT_MODULE_TITLE = "EI Development Module"
DEFAULT_MODULE_DESCRIPTION = "A training module to enhance your emotional intelligence competencies"
DEFAULT_MODULE_TYPE = "Training Module"
DEFAULT_MODULE_DIFFICULTY = "Intermediate"
DEFAULT_MODULE_POINTS = 35
DEFAULT_MODULE_DOMAIN = "Self-Awareness & Recognition"
DEFAULT_COMPETENCY_BOOSTS = {"Self-Awareness": 1, "Self-Management": 1}

MAX_DIARY_ENTRIES_IN_PROMPT = 3

PROMPT_INTRO = (
    "You are an AI training module generator for SoloLvlUp, a digital EI (Emotional Intelligence) "
    "development platform for frontline nurses."
)

DIARY_RESPONSE_FORMAT = """Return ONLY a valid JSON object with this EXACT structure:
{
  "quests": [
    {
      "title": "Reflective Module Title",
      "description": "Detailed description focusing on reflection and emotional processing",
      "type": "Reflective Practice|Emotional Processing|Pattern Recognition",
      "difficulty": "Beginner|Intermediate|Advanced",
      "eiPoints": 40,
      "eiDomain": "Self-Awareness & Recognition|Emotional Regulation",
      "competencyBoosts": {"Self-Awareness": 2, "Self-Management": 1, "Resilience": 1}
    }
  ],
  "suggestions": {
    "focusArea": "EI domain based on emotional patterns",
    "motivation": "Personalized message acknowledging their reflective journey",
    "emotionalGuidance": "Supportive guidance based on diary themes"
  }
}"""

REFLECTION_RESPONSE_FORMAT = """Return ONLY a valid JSON object with this EXACT structure:
{
  "quests": [
    {
      "title": "Action-Oriented Module Title",
      "description": "Detailed, actionable description with concrete steps",
      "type": "Training Module|Stress Management|Coping Strategy",
      "difficulty": "Beginner|Intermediate|Advanced",
      "eiPoints": 35,
      "eiDomain": "Self-Management|Stress Management|Emotional Regulation",
      "competencyBoosts": {"Self-Management": 2, "Resilience": 2}
    }
  ],
  "suggestions": {
    "focusArea": "EI domain based on current challenges",
    "motivation": "Personalized motivational message",
    "emotionalGuidance": "Supportive guidance for immediate challenges"
  }
}"""

GENERAL_RESPONSE_FORMAT = """Return ONLY a valid JSON object with this EXACT structure:
{
  "quests": [
    {
      "title": "Specific Module Title",
      "description": "Detailed, actionable description with clear steps",
      "type": "Daily Reflection|Training Module|Weekly Challenge",
      "difficulty": "Beginner|Intermediate|Advanced",
      "eiPoints": 35,
      "eiDomain": "Self-Awareness & Recognition|Emotional Regulation|Empathy & Patient Care|Team Communication|Stress Management",
      "competencyBoosts": {"Self-Awareness": 1, "Social Awareness": 2, "Resilience": 1}
    }
  ],
  "suggestions": {
    "focusArea": "Specific EI domain to focus on",
    "motivation": "Personalized motivational message",
    "emotionalGuidance": "Emotional support and guidance"
  }
}"""


def _competency_line(profile: NurseProfile, names: List[str]) -> str:
    return ", ".join(f"{name} {profile.competency(name)}" for name in names)


class QuestAgent:
    """
    Generates individual training modules ("quests") from a diary, a
    structured reflection or the nurse's profile alone.
    """

    def __init__(self, client: GenerationClient):
        self.client = client

    async def generate_quests(self, request: QuestGenerationRequest) -> QuestGenerationResult:
        """
        Asks the model for 3-4 modules and normalises them. Transient
        failures are retried by the client; exhausted retries, rejected
        requests and unparseable replies all fall back to curated modules.

        Raises:
            GenerationConfigError: the generation service has no credentials.
        """
        prompt = self.build_prompt(request)
        try:
            text = await self.client.generate_with_retry(prompt)
            logger.debug(f"Quest generation response received: {text[:200]}...")
            parsed = parse_json_response(text)

            raw_quests = parsed.get("quests")
            if not isinstance(raw_quests, list):
                raise InvalidAgentResponseError("Invalid quest format received")

            quests = self.normalize_quests(raw_quests, request)
            suggestions = self._parse_suggestions(parsed.get("suggestions"), request.nurse_profile)
        except (GenerationError, JSONExtractionError, InvalidAgentResponseError, ValidationError) as e:
            logger.warning(f"Quest generation falling back to curated modules ({request.source}): {e}")
            return self.fallback_response(request)

        logger.info(f"Successfully generated {len(quests)} quests from {request.source}")
        return QuestGenerationResult(
            quests=quests,
            suggestions=suggestions,
            using_fallback=False,
            model=self.client.model,
        )

    def build_prompt(self, request: QuestGenerationRequest) -> str:
        if request.source == "diary" and request.diary_entries:
            return self._diary_prompt(request.nurse_profile, request.diary_entries)
        if request.source == "reflection" and request.reflection is not None:
            return self._reflection_prompt(request.nurse_profile, request.reflection)
        return self._general_prompt(request.nurse_profile, request.program_context)

    def _diary_prompt(self, profile: NurseProfile, diary_entries: List[DiaryEntry]) -> str:
        diary_content = "\n\n".join(
            f'Entry {index + 1}: "{entry.content}"'
            for index, entry in enumerate(diary_entries[:MAX_DIARY_ENTRIES_IN_PROMPT])
        )
        competencies = _competency_line(
            profile,
            ["Self-Awareness", "Self-Management", "Social Awareness", "Relationship Management", "Resilience"],
        )
        return f"""{PROMPT_INTRO} Generate 3-4 personalized training modules based on DIARY ENTRY ANALYSIS for this nurse:

NURSE PROFILE:
- Name: {profile.name}
- Level: {profile.display_level}
- Current EI Competencies: {competencies}

DIARY ENTRIES (Narrative Analysis):
{diary_content}

INSTRUCTIONS:
1. Create training modules that address the EMOTIONAL PATTERNS and THEMES identified in the diary entries
2. Focus on REFLECTIVE PRACTICES, SELF-AWARENESS, and EMOTIONAL PROCESSING
3. Make modules that help nurses UNDERSTAND and WORK THROUGH the experiences described
4. EI Development Points: Beginner (20-35), Intermediate (40-65), Advanced (70-100)

{DIARY_RESPONSE_FORMAT}"""

    def _reflection_prompt(self, profile: NurseProfile, reflection: PersonalReflection) -> str:
        competencies = _competency_line(profile, ["Self-Awareness", "Self-Management"])
        return f"""{PROMPT_INTRO} Generate 3-4 personalized training modules based on STRUCTURED PERSONAL REFLECTION for this nurse:

NURSE PROFILE:
- Name: {profile.name}
- Level: {profile.display_level}
- Current EI Competencies: {competencies}

STRUCTURED PERSONAL REFLECTION:
- Current Mood: {reflection.mood}
- Emotional State: {reflection.emotional_state}
- Motivation Level: {reflection.motivation_level}/10
- Current Challenges: {reflection.current_challenges or 'None specified'}

INSTRUCTIONS:
1. Create training modules that directly address the IMMEDIATE CHALLENGES and EMOTIONAL STATE
2. Focus on PRACTICAL TOOLS and ACTIONABLE STRATEGIES for current situations
3. Adjust difficulty based on MOTIVATION LEVEL (lower motivation = more supportive modules)
4. EI Development Points: Beginner (15-30), Intermediate (35-60), Advanced (65-100)

{REFLECTION_RESPONSE_FORMAT}"""

    def _general_prompt(self, profile: NurseProfile, program_context: Optional[ProgramContext] = None) -> str:
        competencies = _competency_line(
            profile, ["Self-Awareness", "Self-Management", "Social Awareness", "Relationship Management"]
        )
        program_section = ""
        if program_context is not None:
            program_section = (
                f"\nPROGRAM CONTEXT:\n- Program: {program_context.program_id}\n"
                f"- Week: {program_context.current_week}\n- Focus Area: {program_context.focus_area}\n"
            )
        return f"""{PROMPT_INTRO} Generate 3-4 personalized training modules for this nurse:

NURSE PROFILE:
- Name: {profile.name}
- Level: {profile.display_level}
- Current EI Competencies: {competencies}
{program_section}
INSTRUCTIONS:
1. Create training modules that enhance the four EI domains: Self-Awareness, Self-Management, Social Awareness, Relationship Management
2. Focus on practical healthcare/nursing scenarios: patient interactions, team dynamics, stress management
3. Make modules achievable within a shift or day (1-3 hours)
4. EI Development Points: Beginner (15-30), Intermediate (35-60), Advanced (65-100)

{GENERAL_RESPONSE_FORMAT}"""

    def normalize_quests(self, raw_quests: List[Any], request: QuestGenerationRequest) -> List[TrainingModule]:
        """Fills defaults for missing fields and attaches program context when present."""
        program_context = request.program_context
        batch = uuid.uuid4().hex[:8]
        quests = []
        for index, raw in enumerate(raw_quests):
            if not isinstance(raw, dict):
                logger.debug(f"Skipping non-object quest at index {index}")
                continue
            points = as_int(first_present(raw, "eiPoints", "ei_points", "xp"), DEFAULT_MODULE_POINTS)
            boosts = first_present(raw, "competencyBoosts", "competency_boosts", "statBoosts")
            quests.append(TrainingModule(
                id=str(raw.get("id") or f"ai-module-{batch}-{index}"),
                title=raw.get("title") or DEFAULT_MODULE_TITLE,
                description=raw.get("description") or DEFAULT_MODULE_DESCRIPTION,
                type=raw.get("type") or DEFAULT_MODULE_TYPE,
                difficulty=raw.get("difficulty") or DEFAULT_MODULE_DIFFICULTY,
                ei_points=points,
                ei_domain=as_text(first_present(raw, "eiDomain", "ei_domain", "realm"), DEFAULT_MODULE_DOMAIN),
                competency_boosts=as_boosts(boosts, DEFAULT_COMPETENCY_BOOSTS),
                program_id=program_context.program_id if program_context else None,
                week=program_context.current_week if program_context else None,
            ))
        return quests

    def _parse_suggestions(self, raw: Any, profile: NurseProfile) -> QuestSuggestions:
        if isinstance(raw, dict):
            focus_area = first_present(raw, "focusArea", "focus_area")
            motivation = raw.get("motivation")
            guidance = first_present(raw, "emotionalGuidance", "emotional_guidance")
            if focus_area and motivation and guidance:
                return QuestSuggestions(focus_area=focus_area, motivation=motivation, emotional_guidance=guidance)
        return QuestSuggestions(
            focus_area="Balanced EI Development",
            motivation=f"Great progress, {profile.name}! Complete these modules to enhance your emotional intelligence.",
            emotional_guidance="Stay consistent with your daily reflections and celebrate your growth as a "
                               "healthcare professional.",
        )

    def fallback_response(self, request: QuestGenerationRequest) -> QuestGenerationResult:
        if request.source == "diary" and request.diary_entries:
            templates = DIARY_FALLBACK_QUESTS
            suggestions = FALLBACK_SUGGESTIONS["diary"]
        elif request.source == "reflection" and request.reflection is not None:
            templates = reflection_fallback_quests(request.reflection.current_challenges)
            suggestions = FALLBACK_SUGGESTIONS["reflection"]
        else:
            templates = GENERAL_FALLBACK_QUESTS
            suggestions = FALLBACK_SUGGESTIONS["general"]

        program_context = request.program_context
        batch = uuid.uuid4().hex[:8]
        quests = [
            TrainingModule(
                **{**template, "id": f"{template['id']}-{batch}-{index}"},
                program_id=program_context.program_id if program_context else None,
                week=program_context.current_week if program_context else None,
            )
            for index, template in enumerate(templates)
        ]
        return QuestGenerationResult(
            quests=quests,
            suggestions=QuestSuggestions(**suggestions),
            using_fallback=True,
        )
