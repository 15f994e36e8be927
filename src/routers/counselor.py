from fastapi import APIRouter, HTTPException, Depends
import logging

from src.agents.counselor_agent import CounselorAgent
from src.agents.errors import AgentInputError
from src.core.dependencies import get_counselor_agent
from src.core.errors import generation_unavailable_response
from src.llm.errors import GenerationConfigError
from src.schemas.counselor import ChatRequest, ChatResponse, CounselorRequest, CounselorResponse

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/chat", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    counselor_agent: CounselorAgent = Depends(get_counselor_agent),
):
    try:
        return await counselor_agent.chat(request.messages)
    except AgentInputError as e:
        logger.error(f"Invalid chat request: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except GenerationConfigError as e:
        logger.error(f"Generation service not configured: {e}")
        return generation_unavailable_response(e)
    except Exception as e:
        logger.exception(f"Unexpected error in chat: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.post("/counselor", response_model=CounselorResponse, response_model_exclude_none=True)
async def counselor(
    request: CounselorRequest,
    counselor_agent: CounselorAgent = Depends(get_counselor_agent),
):
    """
    One turn with the profile-aware counselor.

    ``generate_quest`` and ``open_tool`` actions are answered locally and work
    without generation credentials.
    """
    try:
        return await counselor_agent.respond(request)
    except AgentInputError as e:
        logger.error(f"Invalid counselor request: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except GenerationConfigError as e:
        logger.error(f"Generation service not configured: {e}")
        return generation_unavailable_response(e)
    except Exception as e:
        logger.exception(f"Unexpected error in counselor: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")
