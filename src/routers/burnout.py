from fastapi import APIRouter
import logging

from src.schemas.burnout import BurnoutDetectionRequest, BurnoutRisk
from services.assessment_engine.burnout import detect_burnout_risk

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/burnout-detection", response_model=BurnoutRisk)
async def burnout_detection(request: BurnoutDetectionRequest):
    """
    Always answers 200: detection errors degrade to a 'low' risk default.
    """
    risk = detect_burnout_risk(
        emotional_state=request.emotional_state,
        motivation_level=request.motivation_level,
        recent_reflections=request.recent_reflections,
        shift_context=request.shift_context,
    )
    if risk["referral_needed"]:
        logger.warning(f"Burnout risk '{risk['level']}' detected: {', '.join(risk['indicators'])}")
    else:
        logger.info(f"Burnout risk '{risk['level']}'")
    return BurnoutRisk(**risk)
