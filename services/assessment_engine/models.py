from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Literal


class Domain(str, Enum):
    """The four EI domains, in canonical order (used for tie-breaking)."""
    SELF_AWARENESS = "selfAwareness"
    SELF_MANAGEMENT = "selfManagement"
    SOCIAL_AWARENESS = "socialAwareness"
    RELATIONSHIP_MANAGEMENT = "relationshipManagement"


CANONICAL_DOMAINS: List[Domain] = list(Domain)

FocusArea = Literal[
    "Self-Awareness & Recognition",
    "Emotional Regulation",
    "Empathy & Patient Care",
    "Team Communication",
    "Stress Management",
]


class Question(BaseModel):
    id: int
    text: str
    domain: Domain
    reverse: bool = False

    model_config = {"frozen": True}


class QuestionBank(BaseModel):
    version: str
    tool: str
    likert_min: int = 1
    likert_max: int = 5
    questions: List[Question]


# Program reference data is read from snake_case YAML and served as camelCase JSON.
class _ProgramModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ScoreRange(_ProgramModel):
    min: float
    max: float


class WeeklyStructure(_ProgramModel):
    week: int
    theme: str
    focus_area: FocusArea
    module_count: int
    target_competencies: List[str]
    milestones: List[str]


class EIProgram(_ProgramModel):
    id: str
    name: str
    description: str
    duration: int  # weeks
    focus_domains: List[FocusArea]
    target_score_range: ScoreRange
    total_modules: int
    estimated_hours: int
    weekly_structure: List[WeeklyStructure]


class PlannerThresholds(BaseModel):
    intensive: float = 40
    focused: float = 70
    maintenance: float = 100
    gap_domain_cutoff: float = 50


class ProgramCatalog(BaseModel):
    version: str
    thresholds: PlannerThresholds = Field(default_factory=PlannerThresholds)
    programs: List[EIProgram]


# Custom Error Classes
class UnknownAssessmentToolError(ValueError):
    """Raised when a submission names an assessment tool we cannot score."""
    pass


class InvalidSubmissionError(ValueError):
    """Custom exception for invalid submission data (e.g., Likert value out of range)."""
    pass


class ProgramNotFoundError(LookupError):
    pass


class ProgramWeekNotFoundError(LookupError):
    pass
