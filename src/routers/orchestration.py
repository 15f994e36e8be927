from fastapi import APIRouter, HTTPException, Depends
import logging

from src.agents.parent_agent import ParentAgent
from src.core.dependencies import get_parent_agent
from src.core.errors import generation_unavailable_response, orchestration_failed_response
from src.llm.errors import GenerationConfigError
from src.schemas.orchestration import (
    AgentHealth,
    AssessmentToProgramRequest,
    AssessmentToProgramResponse,
    ReflectionToQuestRequest,
    ReflectionToQuestResponse,
)

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/quests", response_model=ReflectionToQuestResponse)
async def generate_quests(
    request: ReflectionToQuestRequest,
    parent_agent: ParentAgent = Depends(get_parent_agent),
):
    """
    Reflection-to-quest orchestration. Uses the diary entries when present,
    otherwise the structured reflection.
    """
    logger.info(
        f"Quest request: reflection={request.reflection is not None}, diary_entries={len(request.diary_entries)}"
    )
    try:
        response = await parent_agent.orchestrate(request)
    except GenerationConfigError as e:
        logger.error(f"Generation service not configured: {e}")
        return generation_unavailable_response(e)
    except Exception as e:
        logger.exception(f"Unexpected error in quest orchestration: {e}")
        return orchestration_failed_response(str(e))

    if not response.success:
        return orchestration_failed_response(response.error or "Failed to generate quests")
    return response


@router.post("/roadmap", response_model=AssessmentToProgramResponse)
async def generate_roadmap(
    request: AssessmentToProgramRequest,
    parent_agent: ParentAgent = Depends(get_parent_agent),
):
    """
    Assessment-to-program orchestration: selects a program and generates its roadmap.
    """
    if request.assessment is None:
        logger.error("Roadmap request without assessment results")
        raise HTTPException(status_code=400, detail="Assessment results are required")

    try:
        response = await parent_agent.orchestrate(request)
    except GenerationConfigError as e:
        logger.error(f"Generation service not configured: {e}")
        return generation_unavailable_response(e)
    except Exception as e:
        logger.exception(f"Unexpected error in roadmap orchestration: {e}")
        return orchestration_failed_response(str(e))

    if not response.success:
        return orchestration_failed_response(response.error or "Failed to generate roadmap")
    return response


@router.get("/agents/health", response_model=AgentHealth)
async def agents_health(parent_agent: ParentAgent = Depends(get_parent_agent)):
    return await parent_agent.health_check()
