from datetime import datetime, timezone
from typing import Dict, List, Literal, Optional, Union

from pydantic import ConfigDict, Field

from src.schemas.common import CamelModel

QuestSource = Literal["diary", "reflection", "general"]


class NurseProfile(CamelModel):
    """Free-form profile sent by the client; unknown fields are kept."""
    model_config = ConfigDict(extra="allow")

    name: str = "Nurse"
    level: Optional[Union[int, str]] = None
    competency_level: Optional[Union[int, str]] = None
    stats: Dict[str, float] = Field(default_factory=dict)
    competencies: Dict[str, float] = Field(default_factory=dict)
    streak: Optional[int] = None
    completed_quests: Optional[int] = None

    def competency(self, name: str) -> Optional[float]:
        if name in self.stats:
            return self.stats[name]
        return self.competencies.get(name)

    @property
    def display_level(self) -> Union[int, str]:
        return self.level or self.competency_level or 1


class PersonalReflection(CamelModel):
    model_config = ConfigDict(extra="allow")

    mood: Optional[str] = None
    emotional_state: Optional[str] = None
    motivation_level: Optional[Union[int, str]] = None
    current_challenges: Optional[str] = None


class DiaryEntry(CamelModel):
    model_config = ConfigDict(extra="allow")

    content: str
    created_at: Optional[datetime] = None


class ProgramContext(CamelModel):
    program_id: str
    current_week: int
    focus_area: str


class TrainingModule(CamelModel):
    id: str
    title: str
    description: str
    type: str
    difficulty: str
    ei_points: int
    ei_domain: str
    completed: bool = False
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    competency_boosts: Dict[str, float] = Field(default_factory=dict)
    program_id: Optional[str] = None
    week: Optional[int] = None
    day: Optional[int] = None


class QuestSuggestions(CamelModel):
    focus_area: str
    motivation: str
    emotional_guidance: str


class RoadmapSummary(CamelModel):
    focus_areas: List[str]
    strengths: List[str]
    timeline: str
    message: str


class QuestGenerationRequest(CamelModel):
    source: QuestSource = "general"
    nurse_profile: NurseProfile = Field(default_factory=NurseProfile)
    reflection: Optional[PersonalReflection] = None
    diary_entries: List[DiaryEntry] = Field(default_factory=list)
    program_context: Optional[ProgramContext] = None


class QuestGenerationResult(CamelModel):
    quests: List[TrainingModule]
    suggestions: QuestSuggestions
    using_fallback: bool
    model: Optional[str] = None


class RoadmapGenerationResult(CamelModel):
    modules: List[TrainingModule]
    roadmap: RoadmapSummary
    using_fallback: bool
