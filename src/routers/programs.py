from typing import List

from fastapi import APIRouter, HTTPException, Depends
import logging

from src.agents.parent_agent import ParentAgent
from src.core.dependencies import get_parent_agent, get_program_planner
from src.core.errors import generation_unavailable_response
from src.llm.errors import GenerationConfigError
from src.schemas.orchestration import ProgramQuestsRequest, ProgramQuestsResponse
from src.schemas.program import ProgramRecommendation, ProgramRecommendationRequest
from services.assessment_engine.models import EIProgram, ProgramNotFoundError, ProgramWeekNotFoundError
from services.assessment_engine.program_planner import ProgramPlanner

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/programs", response_model=List[EIProgram])
async def list_programs(planner: ProgramPlanner = Depends(get_program_planner)):
    return planner.get_available_programs()


@router.post("/programs/recommendation", response_model=ProgramRecommendation)
async def recommend_program(
    request: ProgramRecommendationRequest,
    parent_agent: ParentAgent = Depends(get_parent_agent),
):
    try:
        return await parent_agent.get_program_recommendation(request.assessment)
    except Exception as e:
        logger.exception(f"Unexpected error during program recommendation: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.post("/programs/{program_id}/weeks/{week}/quests", response_model=ProgramQuestsResponse)
async def generate_program_quests(
    program_id: str,
    week: int,
    request: ProgramQuestsRequest,
    parent_agent: ParentAgent = Depends(get_parent_agent),
):
    """
    Generates additional modules for one week of a program.
    """
    try:
        _, week_structure = parent_agent.planner.get_week(program_id, week)
        result = await parent_agent.generate_program_quests(request.nurse_profile, program_id, week)
        return ProgramQuestsResponse(
            program_id=program_id,
            week=week,
            theme=week_structure.theme,
            focus_area=week_structure.focus_area,
            quests=result.quests,
            fallback_used=result.using_fallback,
        )
    except (ProgramNotFoundError, ProgramWeekNotFoundError) as e:
        logger.error(f"Program quest request for unknown program or week: {e}")
        raise HTTPException(status_code=404, detail=str(e))
    except GenerationConfigError as e:
        logger.error(f"Generation service not configured: {e}")
        return generation_unavailable_response(e)
    except Exception as e:
        logger.exception(f"Unexpected error generating program quests: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")
