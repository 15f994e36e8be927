import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from config.settings import get_app_settings, get_gemini_settings
from src.core.logging_config import setup_logging

app_settings = get_app_settings()
setup_logging(app_settings.log_level, json_logs=app_settings.json_logs)

from services.assessment_engine.engine import AssessmentEngine
from services.assessment_engine.program_planner import ProgramPlanner
from src.agents.counselor_agent import CounselorAgent
from src.agents.parent_agent import ParentAgent
from src.agents.quest_agent import QuestAgent
from src.agents.roadmap_agent import RoadmapAgent
from src.agents.support_agent import SupportAgent
from src.llm.client import GenerationClient
from src.routers import ai_tools as ai_tools_router
from src.routers import assessments as assessments_router
from src.routers import burnout as burnout_router
from src.routers import counselor as counselor_router
from src.routers import orchestration as orchestration_router
from src.routers import programs as programs_router
from src.routers import shift as shift_router

logger = logging.getLogger(__name__)


def build_services(app: FastAPI, generation_client: GenerationClient) -> None:
    """Wires the scorer, planner and agents onto ``app.state``."""
    planner = ProgramPlanner()
    app.state.generation_client = generation_client
    app.state.assessment_engine = AssessmentEngine()
    app.state.program_planner = planner
    app.state.parent_agent = ParentAgent(
        planner=planner,
        quest_agent=QuestAgent(generation_client),
        roadmap_agent=RoadmapAgent(generation_client, planner),
        client=generation_client,
    )
    app.state.support_agent = SupportAgent(generation_client)
    app.state.counselor_agent = CounselorAgent(generation_client)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Nurse EI Engine starting up...")
    gemini_settings = get_gemini_settings()
    generation_client = GenerationClient(gemini_settings)
    if not generation_client.is_available():
        logger.warning("GEMINI_API_KEY not configured; generation endpoints will answer 503")

    build_services(app, generation_client)
    logger.info(f"Services ready (model: {gemini_settings.model})")

    yield

    logger.info("Nurse EI Engine shutting down...")
    await generation_client.aclose()


app = FastAPI(title="Nurse EI Engine - Main API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=app_settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Include Routers ---
app.include_router(assessments_router.router, prefix="/api/v1", tags=["assessments"])
app.include_router(burnout_router.router, prefix="/api/v1", tags=["burnout"])
app.include_router(shift_router.router, prefix="/api/v1", tags=["shift"])
app.include_router(programs_router.router, prefix="/api/v1", tags=["programs"])
app.include_router(orchestration_router.router, prefix="/api/v1", tags=["orchestration"])
app.include_router(ai_tools_router.router, prefix="/api/v1", tags=["ai-tools"])
app.include_router(counselor_router.router, prefix="/api/v1", tags=["counselor"])


@app.get("/", tags=["Health Check"])
async def read_root():
    """
    Root endpoint for basic liveness check.
    """
    return {"status": "ok", "message": "Nurse EI Engine is running."}


@app.get("/health", tags=["Health Check"])
async def health_check(request: Request):
    """
    Liveness plus the agent health report.
    """
    parent_agent = getattr(request.app.state, "parent_agent", None)
    agents = await parent_agent.health_check() if parent_agent else None
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "agents": agents.model_dump(by_alias=True) if agents else None,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=False)
