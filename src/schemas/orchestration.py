from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import Field

from services.assessment_engine.models import EIProgram
from src.schemas.assessment import AssessmentResult
from src.schemas.common import CamelModel
from src.schemas.program import ProgramRecommendation
from src.schemas.training import (
    DiaryEntry,
    NurseProfile,
    PersonalReflection,
    QuestSuggestions,
    RoadmapSummary,
    TrainingModule,
)


class ReflectionToQuestRequest(CamelModel):
    type: Literal["reflection-to-quest"] = "reflection-to-quest"
    reflection: Optional[PersonalReflection] = None
    nurse_profile: NurseProfile = Field(default_factory=NurseProfile)
    diary_entries: List[DiaryEntry] = Field(default_factory=list)


class AssessmentToProgramRequest(CamelModel):
    type: Literal["assessment-to-program"] = "assessment-to-program"
    # Optional so the router can answer 400 (not 422) when it is missing.
    assessment: Optional[AssessmentResult] = None
    nurse_profile: Optional[NurseProfile] = None


OrchestrationRequest = Annotated[
    Union[ReflectionToQuestRequest, AssessmentToProgramRequest],
    Field(discriminator="type"),
]


class ReflectionToQuestResponse(CamelModel):
    success: bool
    quests: List[TrainingModule] = Field(default_factory=list)
    suggestions: QuestSuggestions
    fallback_used: bool
    processing_time: float = 0.0  # milliseconds
    error: Optional[str] = None


class AssessmentToProgramResponse(CamelModel):
    success: bool
    program: Optional[EIProgram] = None
    program_recommendation: Optional[ProgramRecommendation] = None
    modules: List[TrainingModule] = Field(default_factory=list)
    roadmap: RoadmapSummary
    fallback_used: bool
    processing_time: float = 0.0  # milliseconds
    error: Optional[str] = None


OrchestrationResponse = Union[ReflectionToQuestResponse, AssessmentToProgramResponse]


class ProgramQuestsRequest(CamelModel):
    nurse_profile: NurseProfile = Field(default_factory=NurseProfile)


class ProgramQuestsResponse(CamelModel):
    program_id: str
    week: int
    theme: str
    focus_area: str
    quests: List[TrainingModule]
    fallback_used: bool


class AgentHealth(CamelModel):
    status: Literal["healthy", "degraded", "unhealthy"]
    agents: Dict[str, bool]
    generation_configured: bool
    message: str
