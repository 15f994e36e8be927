# src/agents/parent_agent.py
import logging
import time
from typing import Dict, Any, Optional

from services.assessment_engine.program_planner import ProgramPlanner
from src.agents.errors import AgentInputError
from src.agents.fallbacks import ERROR_QUEST_SUGGESTIONS, ERROR_ROADMAP_SUMMARY
from src.agents.quest_agent import QuestAgent
from src.agents.roadmap_agent import RoadmapAgent
from src.llm.client import GenerationClient
from src.llm.errors import GenerationConfigError
from src.schemas.assessment import AssessmentResult
from src.schemas.orchestration import (
    AgentHealth,
    AssessmentToProgramRequest,
    AssessmentToProgramResponse,
    OrchestrationRequest,
    OrchestrationResponse,
    ReflectionToQuestRequest,
    ReflectionToQuestResponse,
)
from src.schemas.program import ProgramRecommendation
from src.schemas.training import (
    NurseProfile,
    ProgramContext,
    QuestGenerationRequest,
    QuestGenerationResult,
    QuestSuggestions,
    RoadmapSummary,
)

logger = logging.getLogger(__name__)


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000.0


class ParentAgent:
    """
    Routes orchestration requests to the program planner, the roadmap agent
    and the quest agent.

    Flows:
        assessment-to-program: program selection -> roadmap generation.
        reflection-to-quest: quest generation from a diary or a reflection.
    """

    def __init__(
        self,
        planner: ProgramPlanner,
        quest_agent: QuestAgent,
        roadmap_agent: RoadmapAgent,
        client: Optional[GenerationClient] = None,
    ):
        self.planner = planner
        self.quest_agent = quest_agent
        self.roadmap_agent = roadmap_agent
        self.client = client

    async def orchestrate(self, request: OrchestrationRequest) -> OrchestrationResponse:
        """
        Dispatches on ``request.type`` and times the flow.

        Unexpected errors become a ``success=False`` response with
        ``fallback_used=True``. A missing generation credential is not
        recoverable here and propagates as GenerationConfigError.
        """
        started = time.perf_counter()
        try:
            if request.type == "assessment-to-program":
                response = await self._handle_assessment_flow(request)
            else:
                response = await self._handle_reflection_flow(request)
        except GenerationConfigError:
            raise
        except Exception as e:
            logger.error(f"Parent agent orchestration error ({request.type}): {e}", exc_info=True)
            response = self._error_response(request, str(e))

        response.processing_time = _elapsed_ms(started)
        return response

    async def _handle_assessment_flow(self, request: AssessmentToProgramRequest) -> AssessmentToProgramResponse:
        if request.assessment is None:
            raise AgentInputError("Assessment is required for assessment-to-program orchestration")

        logger.info("[Parent Agent] Starting assessment-to-program flow")
        recommendation = await self.get_program_recommendation(request.assessment)
        program = recommendation.program
        logger.info(
            f"[Parent Agent] Program selected: {program.name} "
            f"({program.duration} weeks, focus: {', '.join(program.focus_domains)})"
        )

        roadmap = await self.roadmap_agent.generate_roadmap(request.assessment, program, request.nurse_profile)
        logger.info(
            f"[Parent Agent] Roadmap generated: {len(roadmap.modules)} modules, fallback={roadmap.using_fallback}"
        )

        return AssessmentToProgramResponse(
            success=True,
            program=program,
            program_recommendation=recommendation,
            modules=roadmap.modules,
            roadmap=roadmap.roadmap,
            fallback_used=roadmap.using_fallback,
        )

    async def _handle_reflection_flow(self, request: ReflectionToQuestRequest) -> ReflectionToQuestResponse:
        source = "diary" if request.diary_entries else "reflection"
        logger.info(f"[Parent Agent] Starting reflection-to-quest flow from {source}")

        # Individual modules: no program context here
        result = await self.quest_agent.generate_quests(QuestGenerationRequest(
            source=source,
            nurse_profile=request.nurse_profile,
            reflection=request.reflection,
            diary_entries=request.diary_entries,
        ))
        logger.info(f"[Parent Agent] Quests generated: {len(result.quests)}, fallback={result.using_fallback}")

        return ReflectionToQuestResponse(
            success=True,
            quests=result.quests,
            suggestions=result.suggestions,
            fallback_used=result.using_fallback,
        )

    @staticmethod
    def _error_response(request: OrchestrationRequest, error: str) -> OrchestrationResponse:
        if request.type == "assessment-to-program":
            return AssessmentToProgramResponse(
                success=False,
                roadmap=RoadmapSummary(**ERROR_ROADMAP_SUMMARY),
                fallback_used=True,
                error=error,
            )
        return ReflectionToQuestResponse(
            success=False,
            suggestions=QuestSuggestions(**ERROR_QUEST_SUGGESTIONS),
            fallback_used=True,
            error=error,
        )

    async def get_program_recommendation(self, assessment: AssessmentResult) -> ProgramRecommendation:
        """Program selection only, without generating a roadmap."""
        return ProgramRecommendation.model_validate(self.planner.select_program(assessment.domain_scores))

    async def generate_program_quests(
        self,
        nurse_profile: NurseProfile,
        program_id: str,
        week: int,
    ) -> QuestGenerationResult:
        """
        Extra modules for one week of an active program.

        Raises:
            ProgramNotFoundError: unknown program id.
            ProgramWeekNotFoundError: the program has no such week.
        """
        program, week_structure = self.planner.get_week(program_id, week)
        logger.info(
            f"[Parent Agent] Generating quests for {program.name} week {week}: "
            f"{week_structure.theme} ({week_structure.focus_area})"
        )
        return await self.quest_agent.generate_quests(QuestGenerationRequest(
            source="general",
            nurse_profile=nurse_profile,
            program_context=ProgramContext(
                program_id=program_id,
                current_week=week,
                focus_area=week_structure.focus_area,
            ),
        ))

    async def health_check(self) -> AgentHealth:
        try:
            planner_healthy = len(self.planner.get_available_programs()) > 0
            generation_configured = bool(self.client and self.client.is_available())
            # Roadmap and quest agents always have fallbacks
            agents: Dict[str, Any] = {
                "programPlanner": planner_healthy,
                "roadmapAgent": True,
                "questAgent": True,
            }
            healthy = all(agents.values())
            return AgentHealth(
                status="healthy" if healthy else "degraded",
                agents=agents,
                generation_configured=generation_configured,
                message="All agents operational" if healthy else "Some agents may be using fallback mode",
            )
        except Exception as e:
            logger.error(f"Agent health check failed: {e}", exc_info=True)
            return AgentHealth(
                status="unhealthy",
                agents={"programPlanner": False, "roadmapAgent": False, "questAgent": False},
                generation_configured=False,
                message=str(e) or "Health check failed",
            )
