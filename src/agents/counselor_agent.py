# src/agents/counselor_agent.py
# Conversational support: the plain counselor chat and the profile-aware
# coach that can suggest AI tools and turn a practice request into a module.

import logging
import re
import uuid
from typing import Any, Dict, List, Optional, Sequence, Tuple

from src.agents.coercion import as_int
from src.agents.errors import AgentInputError
from src.agents.fallbacks import CHAT_FALLBACK_REPLY, COUNSELOR_FALLBACK_REPLY, COUNSELOR_TOOL_NUDGE
from src.llm.client import ChatTurn, GenerationClient
from src.llm.errors import GenerationError
from src.schemas.counselor import (
    AiTool,
    ChatMessage,
    ChatResponse,
    CounselorRequest,
    CounselorResponse,
    QuestOffer,
    RecentQuest,
)
from src.schemas.training import NurseProfile, TrainingModule

logger = logging.getLogger(__name__)

# Older turns are dropped so long conversations stay within the model's context
MAX_HISTORY_TURNS = 20

CHAT_GENERATION_CONFIG = {"temperature": 0.7, "maxOutputTokens": 1000}
COUNSELOR_GENERATION_CONFIG = {"temperature": 0.8, "maxOutputTokens": 1500}

AI_TOOLS: Dict[str, Dict[str, Any]] = {
    "assumptions-lab": {
        "name": "Assumptions Lab",
        "description": "Deep cognitive belief challenge - helps identify and reframe limiting assumptions",
        "route": "/ai-tools/assumptions-lab",
        "keywords": ["assumption", "belief", "cognitive", "thinking pattern", "mindset", "negative thought"],
    },
    "control-influence-map": {
        "name": "Control & Influence Map",
        "description": "Agency restoration under stress - categorize concerns into what you can control, "
                       "influence, or accept",
        "route": "/ai-tools/control-influence-map",
        "keywords": ["control", "stress", "overwhelm", "agency", "powerless", "can't change", "out of control"],
    },
    "change-companion": {
        "name": "Change Companion",
        "description": "Interpersonal reappraisal & relational resilience - navigate difficult relationships",
        "route": "/ai-tools/change-companion",
        "keywords": ["relationship", "colleague", "conflict", "interpersonal", "team", "communication",
                     "difficult person"],
    },
    "reframe": {
        "name": "Reframe",
        "description": "Emotional first aid - rapid regulation for immediate distress",
        "route": "/ai-tools/reframe",
        "keywords": ["upset", "anxious", "angry", "sad", "frustrated", "overwhelmed", "emotional", "distressed",
                     "panic"],
    },
    "breathing-exercise": {
        "name": "Breathing Exercise",
        "description": "Physiological regulation & grounding - calming breathing techniques",
        "route": "/ai-tools/breathing-exercise",
        "keywords": ["breathing", "calm", "relax", "grounding", "anxiety", "panic", "stress relief", "tension"],
    },
}

QUEST_DOMAIN_KEYWORDS: Dict[str, List[str]] = {
    "Self-Awareness": ["awareness", "recognize", "identify", "notice", "reflect", "understand myself"],
    "Self-Management": ["regulate", "control", "manage", "cope", "calm", "respond"],
    "Social Awareness": ["empathy", "understand others", "perspective", "listen", "observe"],
    "Relationship Management": ["communicate", "collaborate", "conflict", "relationship", "team"],
    "Resilience": ["stress", "bounce back", "adapt", "recover", "challenge"],
}
DEFAULT_QUEST_DOMAIN = "Self-Awareness"

SUGGEST_TOOL_MARKER = re.compile(r"\[SUGGEST_TOOL:([^\]]+)\]")
OFFER_QUEST_MARKER = re.compile(r"\[OFFER_QUEST:([^\]]+)\]")

CHAT_SYSTEM_PROMPT = """You are a compassionate AI counselor specializing in emotional intelligence support for frontline nurses. Your role is to:
1. Provide empathetic, judgment-free emotional support
2. Help nurses process difficult emotions from their shifts
3. Guide them through EI skill development (self-awareness, self-regulation, motivation, empathy, social skills)
4. Offer evidence-based coping strategies for stress, burnout, and compassion fatigue
5. Validate their experiences while encouraging growth

Guidelines:
- Be warm, understanding, and non-judgmental
- Ask open-ended questions to encourage reflection
- Normalize the emotional challenges of nursing
- Suggest practical, actionable strategies
- Know when to recommend professional mental health support for serious issues
- Respect confidentiality and privacy
- Use trauma-informed language

Remember: You're a supportive guide, not a replacement for therapy or medical advice."""

COUNSELOR_PROMPT_GUIDELINES = """## Response Guidelines
- Be warm, personal, and use their name naturally
- Reference their actual progress when relevant (celebrate streaks, acknowledge level, etc.)
- When they express a need that matches an AI tool, naturally suggest it
- If they want to practice a skill, offer to generate a training module
- Use conversational language, not clinical jargon
- Keep responses focused and actionable

## Action Triggers
When you detect these needs, include special markers in your response:
1. Immediate emotional regulation: [SUGGEST_TOOL:reframe] or [SUGGEST_TOOL:breathing-exercise]
2. Negative thought patterns: [SUGGEST_TOOL:assumptions-lab]
3. Feeling overwhelmed or out of control: [SUGGEST_TOOL:control-influence-map]
4. Relationship or interpersonal challenges: [SUGGEST_TOOL:change-companion]
5. Wanting to practice or learn something specific: [OFFER_QUEST:description of what they want to practice]

Only include ONE action marker per response, and only when truly relevant."""


def tool_info(tool_id: str) -> Optional[AiTool]:
    tool = AI_TOOLS.get(tool_id)
    if tool is None:
        return None
    return AiTool(id=tool_id, name=tool["name"], description=tool["description"], route=tool["route"])


def suggest_tool_for_text(text: str) -> Optional[AiTool]:
    """Catalog tool whose keywords appear most often in ``text``; earlier tools win ties."""
    lowered = text.lower()
    best_id, best_count = None, 0
    for tool_id, tool in AI_TOOLS.items():
        count = sum(1 for keyword in tool["keywords"] if keyword in lowered)
        if count > best_count:
            best_id, best_count = tool_id, count
    return tool_info(best_id) if best_id else None


def extract_action(reply: str) -> Tuple[str, Optional[Tuple[str, str]]]:
    """
    Strips an action marker from a model reply.

    Returns the cleaned text and ``(kind, payload)`` where kind is
    ``"suggest_tool"`` or ``"offer_quest"``. A quest offer wins over a tool
    suggestion when the reply carries both.
    """
    clean = reply
    action = None
    tool_match = SUGGEST_TOOL_MARKER.search(reply)
    if tool_match:
        clean = clean.replace(tool_match.group(0), "").strip()
        action = ("suggest_tool", tool_match.group(1).strip())
    quest_match = OFFER_QUEST_MARKER.search(reply)
    if quest_match:
        clean = clean.replace(quest_match.group(0), "").strip()
        action = ("offer_quest", quest_match.group(1).strip())
    return clean, action


def quest_domain_for(description: str) -> str:
    lowered = description.lower()
    best, best_count = DEFAULT_QUEST_DOMAIN, 0
    for domain, keywords in QUEST_DOMAIN_KEYWORDS.items():
        count = sum(1 for keyword in keywords if keyword in lowered)
        if count > best_count:
            best, best_count = domain, count
    return best


def quest_from_description(description: str, profile: NurseProfile) -> TrainingModule:
    """One-day practice module for something the nurse asked to work on."""
    domain = quest_domain_for(description)
    level = as_int(profile.display_level, 1)
    if level < 3:
        difficulty, points = "Beginner", 20
    elif level < 6:
        difficulty, points = "Intermediate", 35
    else:
        difficulty, points = "Advanced", 50
    title = description[:50] + ("..." if len(description) > 50 else "")
    return TrainingModule(
        id=f"counselor-module-{uuid.uuid4().hex[:8]}",
        title=f"Practice: {title}",
        description=description,
        type="Daily Practice",
        difficulty=difficulty,
        ei_points=points,
        ei_domain=domain,
        competency_boosts={domain: 1 if difficulty == "Beginner" else 2},
    )


def to_history(messages: Sequence[ChatMessage]) -> List[ChatTurn]:
    """All but the latest message, capped to the most recent turns."""
    earlier = list(messages[:-1])[-MAX_HISTORY_TURNS:]
    return [{"role": "user" if m.role == "user" else "model", "text": m.content} for m in earlier]


def latest_message(messages: Sequence[ChatMessage]) -> str:
    if not messages or not messages[-1].content.strip():
        raise AgentInputError("Messages are required")
    return messages[-1].content


def counselor_system_prompt(profile: NurseProfile, recent_quests: Sequence[RecentQuest]) -> str:
    competencies = ", ".join(f"{k}: {v}" for k, v in {**profile.competencies, **profile.stats}.items())
    recent = "\n".join(
        f"- {q.title} ({q.ei_domain or 'General'}) - {'Completed' if q.completed else 'Active'}"
        for q in recent_quests[:5]
    )
    tools = "\n".join(f"   - {t['name']}: {t['description']}" for t in AI_TOOLS.values())
    return (
        f"You are ARIA (Adaptive Resilience & Insight Assistant), a compassionate AI counselor and personal "
        f"coach for {profile.name}, a nurse developing their emotional intelligence.\n\n"
        f"## Nurse Profile\n- Name: {profile.name}\n- Level: {profile.display_level}\n"
        f"- Learning Streak: {profile.streak or 0} days\n"
        f"- EI Competencies: {competencies or 'not assessed yet'}\n"
        f"- Completed Modules: {profile.completed_quests or 0}\n\n"
        f"## Recent Module Activity\n{recent or 'No recent modules'}\n\n"
        f"## AI Tools You Can Suggest\n{tools}\n\n{COUNSELOR_PROMPT_GUIDELINES}"
    )


class CounselorAgent:
    """
    Chat-style emotional support over the shared generation client.

    ``chat`` is the plain counselor; ``respond`` adds the nurse's profile to
    the system prompt and understands a few direct actions. Both fall back to
    a canned reply when generation fails; a missing API key propagates.
    """

    def __init__(self, client: GenerationClient):
        self.client = client

    async def chat(self, messages: Sequence[ChatMessage]) -> ChatResponse:
        prompt = latest_message(messages)
        try:
            reply = await self.client.generate_with_retry(
                prompt,
                history=to_history(messages),
                system_instruction=CHAT_SYSTEM_PROMPT,
                generation_config=CHAT_GENERATION_CONFIG,
            )
        except GenerationError as e:
            logger.warning(f"Counselor chat falling back to canned reply: {e}")
            return ChatResponse(message=CHAT_FALLBACK_REPLY, using_fallback=True)
        return ChatResponse(message=reply.strip(), using_fallback=False, model=self.client.model)

    async def respond(self, request: CounselorRequest) -> CounselorResponse:
        """
        Handles one counselor turn.

        ``generate_quest`` and ``open_tool`` with a ``tool_id`` are answered
        without calling the model. An unknown tool id falls through to a
        normal chat turn.

        Raises:
            AgentInputError: a chat turn without a non-blank latest message.
            GenerationConfigError: the generation service has no credentials.
        """
        profile = request.user_context
        if request.action == "generate_quest" and request.tool_id:
            quest = quest_from_description(request.tool_id, profile)
            logger.info(f"Counselor created module {quest.id} in {quest.ei_domain}")
            return CounselorResponse(
                type="quest_generated",
                quest=quest,
                message=f'I\'ve created a training module for you: "{quest.title}". '
                        f"It's been added to your module list!",
            )
        if request.action == "open_tool" and request.tool_id:
            tool = tool_info(request.tool_id)
            if tool is not None:
                return CounselorResponse(
                    type="open_tool", tool_id=tool.id, route=tool.route, message=f"Opening {tool.name}...",
                )
            logger.info(f"Unknown tool '{request.tool_id}' requested; continuing as chat")

        prompt = latest_message(request.messages)
        try:
            reply = await self.client.generate_with_retry(
                prompt,
                history=to_history(request.messages),
                system_instruction=counselor_system_prompt(profile, request.recent_quests),
                generation_config=COUNSELOR_GENERATION_CONFIG,
            )
        except GenerationError as e:
            logger.warning(f"Counselor falling back to canned reply: {e}")
            return self._fallback_response(prompt, profile)

        clean, action = extract_action(reply)
        response = CounselorResponse(message=clean, using_fallback=False, model=self.client.model)
        if action is not None:
            kind, payload = action
            if kind == "suggest_tool":
                response.suggested_tool = tool_info(payload)
            else:
                response.quest_offer = QuestOffer(description=payload)
        return response

    @staticmethod
    def _fallback_response(prompt: str, profile: NurseProfile) -> CounselorResponse:
        message = COUNSELOR_FALLBACK_REPLY.format(name=profile.name)
        tool = suggest_tool_for_text(prompt)
        if tool is not None:
            message += COUNSELOR_TOOL_NUDGE.format(tool=tool.name)
        return CounselorResponse(message=message, suggested_tool=tool, using_fallback=True)
