from datetime import datetime
from typing import Dict, List

from pydantic import Field, model_validator

from services.assessment_engine.models import CANONICAL_DOMAINS, Domain
from src.schemas.common import CamelModel


class AssessmentSubmission(CamelModel):
    tool: str
    # Zero-based question POSITION in the tool's question list -> Likert value (1-5).
    # JSON object keys arrive as strings and are coerced to int.
    answers: Dict[int, int] = Field(default_factory=dict)


class AssessmentResult(CamelModel):
    id: str
    tool: str
    baseline_score: float
    domain_scores: Dict[Domain, float]
    strengths: List[Domain]
    gaps: List[Domain]
    assessment_date: datetime
    completed_at: datetime

    @model_validator(mode='after')
    def check_domain_scores(self) -> 'AssessmentResult':
        """Every canonical domain is scored, each within 0-100."""
        missing = [d.value for d in CANONICAL_DOMAINS if d not in self.domain_scores]
        if missing:
            raise ValueError(f"Domain scores missing for: {', '.join(missing)}")
        out_of_range = [d.value for d, score in self.domain_scores.items() if not 0 <= score <= 100]
        if out_of_range:
            raise ValueError(f"Domain scores outside 0-100 for: {', '.join(out_of_range)}")
        return self


class QuestionItem(CamelModel):
    position: int
    id: int
    text: str
    domain: Domain
    reverse: bool


class QuestionBankResponse(CamelModel):
    tool: str
    version: str
    likert_min: int
    likert_max: int
    questions: List[QuestionItem]
