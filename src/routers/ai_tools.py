from fastapi import APIRouter, HTTPException, Depends
import logging

from src.agents.errors import AgentInputError
from src.agents.support_agent import SupportAgent
from src.core.dependencies import get_support_agent
from src.core.errors import generation_unavailable_response
from src.llm.errors import GenerationConfigError
from src.schemas.ai_tools import (
    CounterFrameRequest,
    CounterFrameResponse,
    DiaryAnalysis,
    DiaryConversionRequest,
    EmotionalAnalysis,
    EmotionalAnalysisRequest,
    ReappraisalRequest,
    ReappraisalResponse,
    ReframeRequest,
    ReframeResponse,
)

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/ai-tools/diary-conversion", response_model=DiaryAnalysis)
async def diary_conversion(
    request: DiaryConversionRequest,
    support_agent: SupportAgent = Depends(get_support_agent),
):
    try:
        return await support_agent.convert_diary(request.diary_text, request.nurse_profile)
    except AgentInputError as e:
        logger.error(f"Invalid diary conversion request: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except GenerationConfigError as e:
        logger.error(f"Generation service not configured: {e}")
        return generation_unavailable_response(e)
    except Exception as e:
        logger.exception(f"Unexpected error in diary conversion: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.post("/ai-tools/reframe", response_model=ReframeResponse)
async def reframe(
    request: ReframeRequest,
    support_agent: SupportAgent = Depends(get_support_agent),
):
    try:
        return await support_agent.reframe_thought(request.thought)
    except AgentInputError as e:
        logger.error(f"Invalid reframe request: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except GenerationConfigError as e:
        logger.error(f"Generation service not configured: {e}")
        return generation_unavailable_response(e)
    except Exception as e:
        logger.exception(f"Unexpected error in reframe: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.post("/emotional-analysis", response_model=EmotionalAnalysis)
async def emotional_analysis(
    request: EmotionalAnalysisRequest,
    support_agent: SupportAgent = Depends(get_support_agent),
):
    try:
        return await support_agent.analyze_emotions(request.text, request.nurse_profile)
    except AgentInputError as e:
        logger.error(f"Invalid emotional analysis request: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except GenerationConfigError as e:
        logger.error(f"Generation service not configured: {e}")
        return generation_unavailable_response(e)
    except Exception as e:
        logger.exception(f"Unexpected error in emotional analysis: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.post("/ai-tools/assumptions-lab", response_model=CounterFrameResponse)
async def assumptions_lab(
    request: CounterFrameRequest,
    support_agent: SupportAgent = Depends(get_support_agent),
):
    try:
        return await support_agent.counter_frame(request.action, request.assumption)
    except AgentInputError as e:
        logger.error(f"Invalid assumptions lab request: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except GenerationConfigError as e:
        logger.error(f"Generation service not configured: {e}")
        return generation_unavailable_response(e)
    except Exception as e:
        logger.exception(f"Unexpected error in assumptions lab: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.post("/ai-tools/change-companion", response_model=ReappraisalResponse)
async def change_companion(
    request: ReappraisalRequest,
    support_agent: SupportAgent = Depends(get_support_agent),
):
    try:
        return await support_agent.reappraise(request.action, request.concern)
    except AgentInputError as e:
        logger.error(f"Invalid change companion request: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except GenerationConfigError as e:
        logger.error(f"Generation service not configured: {e}")
        return generation_unavailable_response(e)
    except Exception as e:
        logger.exception(f"Unexpected error in change companion: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")
