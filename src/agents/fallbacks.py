# src/agents/fallbacks.py
# Hand-authored content served when the generation service cannot be used.

from typing import Dict, Any, List, Optional

from services.assessment_engine.models import Domain

GENERAL_FALLBACK_QUESTS: List[Dict[str, Any]] = [
    {
        "id": "fallback-1",
        "title": "Morning Emotional Check-In",
        "description": "Take 10 minutes to reflect on your emotional state before your shift. "
                       "Identify your current feelings and any stressors.",
        "type": "Daily Reflection",
        "difficulty": "Beginner",
        "ei_points": 25,
        "ei_domain": "Self-Awareness & Recognition",
        "competency_boosts": {"Self-Awareness": 2, "Self-Management": 1, "Social Awareness": 0},
    },
    {
        "id": "fallback-2",
        "title": "Patient Empathy Practice",
        "description": "During patient interactions today, practice active listening and acknowledge "
                       "patient emotions before responding.",
        "type": "Training Module",
        "difficulty": "Intermediate",
        "ei_points": 50,
        "ei_domain": "Empathy & Patient Care",
        "competency_boosts": {"Social Awareness": 3, "Relationship Management": 1, "Self-Awareness": 0},
    },
    {
        "id": "fallback-3",
        "title": "Stress Relief Breathing",
        "description": "Practice 4-7-8 breathing technique (inhale 4s, hold 7s, exhale 8s) three times "
                       "during high-stress moments.",
        "type": "Daily Reflection",
        "difficulty": "Beginner",
        "ei_points": 30,
        "ei_domain": "Stress Management",
        "competency_boosts": {"Resilience": 2, "Self-Management": 2, "Self-Awareness": 0},
    },
    {
        "id": "fallback-4",
        "title": "Team Communication Exercise",
        "description": "Have a brief check-in with a colleague today. Ask how they're feeling and offer "
                       "support if needed.",
        "type": "Training Module",
        "difficulty": "Intermediate",
        "ei_points": 40,
        "ei_domain": "Team Communication",
        "competency_boosts": {"Relationship Management": 2, "Social Awareness": 2, "Self-Awareness": 0},
    },
]

DIARY_FALLBACK_QUESTS: List[Dict[str, Any]] = [
    {
        "id": "diary-fallback-1",
        "title": "Pattern Recognition Exercise",
        "description": "Review your recent diary entries and identify recurring emotional patterns. "
                       "Write about one pattern you notice and how it affects your work.",
        "type": "Reflective Practice",
        "difficulty": "Beginner",
        "ei_points": 30,
        "ei_domain": "Self-Awareness & Recognition",
        "competency_boosts": {"Self-Awareness": 3, "Self-Management": 1, "Social Awareness": 0},
    },
    {
        "id": "diary-fallback-2",
        "title": "Emotional Processing Journal",
        "description": "Take time to process the emotions expressed in your diary entries. Write about "
                       "how you can work through these feelings constructively.",
        "type": "Emotional Processing",
        "difficulty": "Intermediate",
        "ei_points": 45,
        "ei_domain": "Emotional Regulation",
        "competency_boosts": {"Self-Awareness": 2, "Self-Management": 2, "Resilience": 1},
    },
]


def reflection_fallback_quests(current_challenges: Optional[str]) -> List[Dict[str, Any]]:
    """Reflection fallbacks quote the nurse's own challenges back to them."""
    return [
        {
            "id": "reflection-fallback-1",
            "title": "Immediate Stress Management",
            "description": f"Based on your current challenges ({current_challenges or 'work stress'}), "
                           f"practice one stress management technique today during your shift.",
            "type": "Training Module",
            "difficulty": "Beginner",
            "ei_points": 25,
            "ei_domain": "Stress Management",
            "competency_boosts": {"Self-Management": 3, "Resilience": 2, "Self-Awareness": 0},
        },
        {
            "id": "reflection-fallback-2",
            "title": "Challenge Response Strategy",
            "description": f"Develop a concrete action plan to address your current challenge: "
                           f"{current_challenges or 'work stressors'}. Write down 3 specific steps you can take.",
            "type": "Training Module",
            "difficulty": "Intermediate",
            "ei_points": 40,
            "ei_domain": "Self-Management",
            "competency_boosts": {"Self-Management": 2, "Self-Awareness": 1, "Resilience": 2},
        },
    ]


FALLBACK_SUGGESTIONS: Dict[str, Dict[str, str]] = {
    "diary": {
        "focus_area": "Emotional Patterns & Self-Discovery",
        "motivation": "Using reflective training modules based on your diary entries.",
        "emotional_guidance": "These reflective modules will help you understand and process emotional patterns.",
    },
    "reflection": {
        "focus_area": "Immediate Challenges & Coping",
        "motivation": "Using action-oriented modules based on your current reflection.",
        "emotional_guidance": "These practical modules will help you address your current challenges.",
    },
    "general": {
        "focus_area": "General Growth",
        "motivation": "Using curated training modules.",
        "emotional_guidance": "These foundational modules will help you develop your emotional "
                              "intelligence competencies.",
    },
}

# Used when orchestration itself fails, not just generation
ERROR_QUEST_SUGGESTIONS = {
    "focus_area": "General Growth",
    "motivation": "An error occurred, but you can still continue your EI development journey.",
    "emotional_guidance": "Take a moment to reflect on your current state and try again.",
}

ERROR_ROADMAP_SUMMARY = {
    "focus_areas": [],
    "strengths": [],
    "timeline": "4-6 weeks",
    "message": "An error occurred during program generation.",
}

# One roadmap module per development gap
ROADMAP_GAP_MODULES: Dict[Domain, Dict[str, Any]] = {
    Domain.SELF_AWARENESS: {
        "title": "Emotional Self-Awareness Practice",
        "description": "Spend 15 minutes each day identifying and labeling your emotions. Keep a brief "
                       "journal of emotional triggers during your shift.",
        "type": "Training Module",
        "difficulty": "Beginner",
        "ei_points": 30,
        "ei_domain": "Self-Awareness & Recognition",
        "competency_boosts": {"Self-Awareness": 3, "Self-Management": 1},
    },
    Domain.SELF_MANAGEMENT: {
        "title": "Stress Response Regulation",
        "description": "Practice the 4-7-8 breathing technique during high-stress moments. Identify three "
                       "stress triggers and develop coping strategies.",
        "type": "Training Module",
        "difficulty": "Intermediate",
        "ei_points": 45,
        "ei_domain": "Stress Management",
        "competency_boosts": {"Self-Management": 3, "Self-Awareness": 1, "Resilience": 2},
    },
    Domain.SOCIAL_AWARENESS: {
        "title": "Patient Empathy Deepening",
        "description": "During patient interactions, practice perspective-taking. After each shift, reflect "
                       "on one patient's emotional experience.",
        "type": "Training Module",
        "difficulty": "Intermediate",
        "ei_points": 40,
        "ei_domain": "Empathy & Patient Care",
        "competency_boosts": {"Social Awareness": 3, "Relationship Management": 1},
    },
    Domain.RELATIONSHIP_MANAGEMENT: {
        "title": "Team Communication Enhancement",
        "description": "Practice active listening with colleagues. Initiate one supportive check-in "
                       "conversation per shift with a team member.",
        "type": "Training Module",
        "difficulty": "Intermediate",
        "ei_points": 50,
        "ei_domain": "Team Communication",
        "competency_boosts": {"Relationship Management": 3, "Social Awareness": 2},
    },
}

ROADMAP_BALANCED_MODULES: List[Dict[str, Any]] = [
    {
        "id": "roadmap-balanced-1",
        "title": "Comprehensive EI Development",
        "description": "Complete a daily reflection combining all four EI domains. Focus on one specific "
                       "interaction where you applied emotional intelligence.",
        "type": "Training Module",
        "difficulty": "Intermediate",
        "ei_points": 35,
        "ei_domain": "Self-Awareness & Recognition",
        "competency_boosts": {
            "Self-Awareness": 1, "Self-Management": 1, "Social Awareness": 1, "Relationship Management": 1,
        },
        "week": 1,
        "day": 1,
    },
    {
        "id": "roadmap-balanced-2",
        "title": "Weekly EI Growth Challenge",
        "description": "Set one specific EI goal for the week. Track your progress daily and reflect on "
                       "improvements at week's end.",
        "type": "Weekly Challenge",
        "difficulty": "Advanced",
        "ei_points": 60,
        "ei_domain": "Emotional Regulation",
        "competency_boosts": {
            "Self-Awareness": 2, "Self-Management": 2, "Social Awareness": 1, "Relationship Management": 1,
        },
        "week": 2,
        "day": 1,
    },
]

# Keyword analysis used when a diary cannot be analysed by the model
DIARY_SEVERE_DISTRESS_WORDS = [
    "physical pain", "swollen", "hurt", "suffering", "can't take it", "hopeless", "give up",
    "body is not supporting", "so much pain", "heart feels heavy", "end up in sorrow",
    "disappointed", "let down", "betrayed", "abandoned",
]
DIARY_POSITIVE_WORDS = ["happy", "good", "great", "excited", "love", "amazing", "wonderful", "fantastic", "hope"]
DIARY_NEGATIVE_WORDS = ["sad", "bad", "terrible", "hate", "awful", "horrible", "depressed", "angry", "sorrow"]
DIARY_ANXIOUS_WORDS = ["worried", "anxious", "nervous", "stressed", "overwhelmed", "panic"]

DIARY_FALLBACK_INSIGHTS = [
    "Your awareness of the mind-body connection shows deep emotional intelligence.",
    "Recognizing patterns in relationships demonstrates significant self-awareness.",
]
DIARY_FALLBACK_SUGGESTIONS = [
    "Consider gentle self-care practices to support both emotional and physical healing.",
    "Professional support may be helpful for processing complex relationship dynamics.",
]

REFRAME_FALLBACK = {
    "emotion": "stressed",
    "validation": "It makes complete sense that you're feeling this way. These feelings are valid responses "
                  "to a challenging situation.",
    "perspective": "Consider that this moment, as difficult as it is, is temporary. You've navigated hard "
                   "moments before, and you have more resources than you might realize right now.",
    "reflection_prompt": "In the next hour, notice one small thing that goes well, even if it's minor.",
}

EMOTIONAL_ANALYSIS_FALLBACK = {
    "mood": "reflective",
    "emotional_state": "processing thoughts and experiences",
    "motivation_level": 6,
    "insights": ["Your willingness to reflect shows emotional intelligence and self-awareness."],
    "suggestions": ["Continue this practice of self-reflection to better understand your emotional patterns."],
}

COUNTER_FRAME_FALLBACK = (
    "That assumption may be protecting you from a real risk, and it is worth taking seriously. "
    "It is also possible that it describes one difficult moment rather than the whole picture. "
    "What would you notice on a shift where this belief turned out to be only partly true?"
)

REAPPRAISAL_FALLBACK = {
    "reappraisal": "It sounds like you're navigating a challenging interpersonal dynamic. Consider that the "
                   "other person may be operating under their own pressures that you might not be fully aware "
                   "of. Their behavior might be less about you personally and more about their own situation.",
    "suggested_action": "Before your next interaction, take a moment to consider one positive intention the "
                        "other person might have, even if their delivery was imperfect.",
}

CHAT_FALLBACK_REPLY = (
    "Thank you for sharing that with me. I'm having trouble putting together a full reply right now, "
    "but what you're feeling matters. Take a slow breath, and when you're ready, tell me a little more "
    "about what is weighing on you. If you're struggling to cope, please reach out to someone you trust "
    "or a mental health professional."
)

COUNSELOR_FALLBACK_REPLY = (
    "Thank you for telling me this, {name}. I can't give you a full answer right now, but your feelings "
    "make sense and you don't have to work through them alone."
)
COUNSELOR_TOOL_NUDGE = " The {tool} tool might help you in the meantime."
