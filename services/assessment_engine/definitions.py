# services/assessment_engine/definitions.py
# Static reference tables shared by the scorer, the planner and the agents.

from typing import Dict

from .models import Domain

TEIQUE_SF = "TEIQue-SF"
SSEIT = "SSEIT"
HEIT = "HEIT"
NURSE_EI = "Nurse-EI"

NEUTRAL_DOMAIN_SCORE = 50.0

# Tools without a scoring routine yet return these fixed domain profiles.
PLACEHOLDER_TOOL_PROFILES: Dict[str, Dict[Domain, float]] = {
    SSEIT: {
        Domain.SELF_AWARENESS: 52.0,
        Domain.SELF_MANAGEMENT: 58.0,
        Domain.SOCIAL_AWARENESS: 55.0,
        Domain.RELATIONSHIP_MANAGEMENT: 54.0,
    },
    HEIT: {
        Domain.SELF_AWARENESS: 51.0,
        Domain.SELF_MANAGEMENT: 55.0,
        Domain.SOCIAL_AWARENESS: 54.0,
        Domain.RELATIONSHIP_MANAGEMENT: 52.0,
    },
    NURSE_EI: {
        Domain.SELF_AWARENESS: 54.0,
        Domain.SELF_MANAGEMENT: 58.0,
        Domain.SOCIAL_AWARENESS: 57.0,
        Domain.RELATIONSHIP_MANAGEMENT: 55.0,
    },
}

SUPPORTED_TOOLS = (TEIQUE_SF,) + tuple(PLACEHOLDER_TOOL_PROFILES)

# Assessment domain -> training focus area
DOMAIN_FOCUS_AREAS: Dict[Domain, str] = {
    Domain.SELF_AWARENESS: "Self-Awareness & Recognition",
    Domain.SELF_MANAGEMENT: "Emotional Regulation",
    Domain.SOCIAL_AWARENESS: "Empathy & Patient Care",
    Domain.RELATIONSHIP_MANAGEMENT: "Team Communication",
}

# Human-readable labels used in prompts and rationales
DOMAIN_LABELS: Dict[Domain, str] = {
    Domain.SELF_AWARENESS: "Self-Awareness",
    Domain.SELF_MANAGEMENT: "Self-Management",
    Domain.SOCIAL_AWARENESS: "Social Awareness",
    Domain.RELATIONSHIP_MANAGEMENT: "Relationship Management",
}
