from typing import List

from services.assessment_engine.models import EIProgram, FocusArea
from src.schemas.assessment import AssessmentResult
from src.schemas.common import CamelModel


class EstimatedOutcome(CamelModel):
    domain: FocusArea
    expected_improvement: int


class ProgramRecommendation(CamelModel):
    program: EIProgram
    rationale: str
    priority_domains: List[FocusArea]
    estimated_outcomes: List[EstimatedOutcome]


class ProgramRecommendationRequest(CamelModel):
    assessment: AssessmentResult
