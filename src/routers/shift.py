from fastapi import APIRouter, HTTPException
import logging

from src.schemas.shift import ShiftAnalysis, ShiftAnalysisRequest
from services.assessment_engine.shift_analyzer import analyze_shift_context, normalize_ei_by_context

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/shift/analyze", response_model=ShiftAnalysis)
async def analyze_shift(request: ShiftAnalysisRequest):
    try:
        analysis = analyze_shift_context(request.shift_context, request.competencies)
        analysis["normalized_competencies"] = normalize_ei_by_context(request.competencies, request.shift_context)
        return ShiftAnalysis(**analysis)
    except Exception as e:
        logger.exception(f"Unexpected error during shift analysis: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")
