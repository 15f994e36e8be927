# services/assessment_engine/burnout.py
# Rule-based burnout risk detection from motivation, language and shift context.

import logging
from datetime import datetime, timezone
from typing import Dict, Any, List, Optional, Sequence

logger = logging.getLogger(__name__)

RISK_LEVELS = ["low", "moderate", "high", "critical"]

BURNOUT_KEYWORDS = [
    "exhausted",
    "burnout",
    "depleted",
    "overwhelmed",
    "cynical",
    "detached",
    "ineffective",
    "hopeless",
]

LOW_REFLECTION_MOTIVATION = 3
SUSTAINED_LOW_REFLECTIONS = 3
DEFAULT_REFLECTION_MOTIVATION = 5

RECOMMENDATIONS: Dict[str, List[str]] = {
    "critical": [
        "Immediate professional support recommended",
        "Consider speaking with a counselor or mental health professional",
        "Take time off if possible",
    ],
    "high": [
        "Schedule a wellness check-in",
        "Practice daily grounding exercises",
        "Consider reducing workload if possible",
    ],
    "moderate": [
        "Increase self-care activities",
        "Practice stress management techniques",
        "Monitor your emotional state",
    ],
    "low": [
        "Continue current self-care practices",
        "Maintain awareness of your emotional wellbeing",
    ],
}

SAFE_DEFAULT_RECOMMENDATIONS = ["Continue monitoring your emotional wellbeing"]


def escalate(current: str, target: str) -> str:
    """Returns the more severe of two levels; risk never goes down."""
    return max(current, target, key=RISK_LEVELS.index)


def _reflection_motivation(reflection: Any) -> Optional[int]:
    if isinstance(reflection, dict):
        raw = reflection.get("motivationLevel", reflection.get("motivation_level"))
    else:
        raw = getattr(reflection, "motivation_level", None)
    if raw is None or raw == "":
        return DEFAULT_REFLECTION_MOTIVATION
    text = str(raw).strip()
    try:
        return int(text)
    except ValueError:
        pass
    # "2.5" counts as 2
    try:
        return int(float(text))
    except (ValueError, OverflowError):
        return None


def _shift_value(shift_context: Any, key: str, attr: str) -> Any:
    if isinstance(shift_context, dict):
        return shift_context.get(key, shift_context.get(attr))
    return getattr(shift_context, attr, None)


def evaluate_burnout_risk(
    emotional_state: Optional[str],
    motivation_level: Optional[int],
    recent_reflections: Optional[Sequence[Any]] = None,
    shift_context: Optional[Any] = None,
) -> Dict[str, Any]:
    """
    Applies the escalation rules in order and derives recommendations.

    Raises on malformed input; ``detect_burnout_risk`` is the non-raising
    entry point.
    """
    indicators: List[str] = []
    level = "low"

    if motivation_level is not None:
        if motivation_level <= 2:
            indicators.append("Very low motivation (1-2)")
            level = escalate(level, "critical")
        elif motivation_level <= 4:
            indicators.append("Low motivation (3-4)")
            level = escalate(level, "high")

    state_text = (emotional_state or "").lower()
    if any(keyword in state_text for keyword in BURNOUT_KEYWORDS):
        indicators.append("Burnout-related language detected")
        # Two-step escalation: low -> moderate -> high
        if level == "low":
            level = "moderate"
        if level == "moderate":
            level = "high"

    if recent_reflections:
        low_count = 0
        for reflection in recent_reflections:
            motivation = _reflection_motivation(reflection)
            if motivation is not None and motivation <= LOW_REFLECTION_MOTIVATION:
                low_count += 1
        if low_count >= SUSTAINED_LOW_REFLECTIONS:
            indicators.append("Sustained low motivation over multiple days")
            level = escalate(level, "high")

    if shift_context:
        if _shift_value(shift_context, "workloadIntensity", "workload_intensity") == "critical":
            indicators.append("Critical workload intensity")
            if level == "low":
                level = "moderate"
        if _shift_value(shift_context, "criticalIncidentOccurred", "critical_incident_occurred"):
            indicators.append("Critical incident occurred")
            if level == "low":
                level = "moderate"

    now = datetime.now(timezone.utc)
    return {
        "level": level,
        "indicators": indicators,
        "recommendations": list(RECOMMENDATIONS[level]),
        "referral_needed": level in ("high", "critical"),
        "detected_at": now,
        "last_updated": now,
    }


def safe_default_risk() -> Dict[str, Any]:
    now = datetime.now(timezone.utc)
    return {
        "level": "low",
        "indicators": [],
        "recommendations": list(SAFE_DEFAULT_RECOMMENDATIONS),
        "referral_needed": False,
        "detected_at": now,
        "last_updated": now,
    }


def detect_burnout_risk(
    emotional_state: Optional[str],
    motivation_level: Optional[int],
    recent_reflections: Optional[Sequence[Any]] = None,
    shift_context: Optional[Any] = None,
) -> Dict[str, Any]:
    """
    Best-effort burnout risk. Never raises: internal errors are logged and
    answered with a 'low' risk default so the caller can always respond.
    """
    try:
        return evaluate_burnout_risk(emotional_state, motivation_level, recent_reflections, shift_context)
    except Exception as e:
        logger.error(f"Burnout detection failed, returning safe default: {e}", exc_info=True)
        return safe_default_risk()
