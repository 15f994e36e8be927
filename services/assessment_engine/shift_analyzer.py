# services/assessment_engine/shift_analyzer.py
# Context adjustments for EI scores recorded after a shift.

import logging
from typing import Dict, Any, List, Mapping

logger = logging.getLogger(__name__)

CORE_COMPETENCIES = [
    "Self-Awareness",
    "Self-Management",
    "Social Awareness",
    "Relationship Management",
]
CLINICAL_COMPETENCE = "Clinical Competence"

SHIFT_TYPE_FACTORS = {
    "day": 1.0,
    "night": 0.85,   # circadian disruption
    "ICU": 0.75,
    "emergency": 0.7,
    "other": 1.0,
}

WORKLOAD_FACTORS = {
    "low": 1.1,
    "moderate": 1.0,
    "high": 0.9,
    "critical": 0.8,
}

DEPARTMENT_FACTORS = {
    "ICU": 0.8,
    "Pediatrics": 0.9,
    "ER": 0.75,
    "Oncology": 0.85,
    "General": 1.0,
    "Other": 1.0,
}

CRITICAL_INCIDENT_FACTOR = 0.9

DEPARTMENT_MODULES = {
    "ICU": ["ICU-specific stress management", "Compassion fatigue prevention"],
    "Pediatrics": ["Pediatric empathy scenarios", "Family communication skills"],
    "ER": ["Trauma response training", "Crisis communication"],
}


def _context_value(shift_context: Any, key: str) -> Any:
    if isinstance(shift_context, Mapping):
        return shift_context.get(key)
    return getattr(shift_context, key, None)


def _context_factor(shift_context: Any) -> float:
    shift_type = _context_value(shift_context, "shift_type")
    workload = _context_value(shift_context, "workload_intensity")
    department = _context_value(shift_context, "department")

    factor = SHIFT_TYPE_FACTORS.get(shift_type, 1.0)
    factor *= WORKLOAD_FACTORS.get(workload, 1.0)
    factor *= DEPARTMENT_FACTORS.get(department, 1.0)
    if _context_value(shift_context, "critical_incident_occurred"):
        factor *= CRITICAL_INCIDENT_FACTOR
    return factor


def _recommended_modules(shift_context: Any, fatigue_adjustment: float) -> List[str]:
    if fatigue_adjustment > 1.3:
        modules = ["Quick 5-minute breathing exercise", "Gentle self-reflection"]
    elif fatigue_adjustment > 1.1:
        modules = ["Short stress management module", "Brief empathy practice"]
    else:
        modules = ["Full training module", "Comprehensive reflection"]

    modules.extend(DEPARTMENT_MODULES.get(_context_value(shift_context, "department"), []))

    if _context_value(shift_context, "critical_incident_occurred"):
        modules.extend(["Post-critical incident reflection", "Trauma processing support"])
    return modules


def _context_notes(shift_context: Any, normalized_score: float, fatigue_adjustment: float) -> str:
    notes = []
    if _context_value(shift_context, "shift_type") == "night":
        notes.append("Night shifts can naturally lower emotional awareness due to circadian rhythms.")
    if _context_value(shift_context, "workload_intensity") == "critical":
        notes.append("High workload intensity may temporarily impact EI scores. This is normal and expected.")
    if _context_value(shift_context, "critical_incident_occurred"):
        notes.append(
            "A critical incident occurred during this shift. Your EI scores may be temporarily affected. "
            "Please take time to process."
        )
    if fatigue_adjustment > 1.2:
        notes.append(
            "You're experiencing higher fatigue levels. Consider lighter training modules and prioritize rest."
        )
    if normalized_score < 30:
        notes.append(
            "Your normalized EI score is lower than usual. This may be due to shift context. "
            "Consider support resources."
        )
    return " ".join(notes)


def analyze_shift_context(shift_context: Any, competencies: Mapping[str, float]) -> Dict[str, Any]:
    """
    Normalises the nurse's EI score for the demands of the shift.

    Args:
        shift_context: ShiftContext model or dict with snake_case keys
                       (shift_type, department, workload_intensity,
                       critical_incident_occurred).
        competencies: Competency name -> score. The four core competencies
                      are required; missing ones count as 0.

    Returns:
        Dict with the context echo, ``normalized_ei_score``,
        ``fatigue_adjustment``, ``recommended_modules`` and ``context_notes``.
    """
    base_score = sum(float(competencies.get(name, 0.0)) for name in CORE_COMPETENCIES) / len(CORE_COMPETENCIES)
    factor = _context_factor(shift_context)
    normalized_score = base_score * factor
    fatigue_adjustment = 1 / factor

    logger.debug(f"Shift context factor {factor:.4f} (base EI {base_score:.1f} -> {normalized_score:.1f})")

    return {
        "shift_type": _context_value(shift_context, "shift_type"),
        "department": _context_value(shift_context, "department"),
        "workload_intensity": _context_value(shift_context, "workload_intensity"),
        "normalized_ei_score": normalized_score,
        "fatigue_adjustment": fatigue_adjustment,
        "recommended_modules": _recommended_modules(shift_context, fatigue_adjustment),
        "context_notes": _context_notes(shift_context, normalized_score, fatigue_adjustment),
    }


def normalize_ei_by_context(competencies: Mapping[str, float], shift_context: Any) -> Dict[str, float]:
    """Scales every competency except Clinical Competence by the shift's context factor."""
    fatigue_adjustment = 1 / _context_factor(shift_context)
    normalized = {}
    for name, score in competencies.items():
        if name == CLINICAL_COMPETENCE:
            normalized[name] = score
        else:
            normalized[name] = score / fatigue_adjustment
    return normalized
