from fastapi import APIRouter, HTTPException, Depends
import logging

from src.core.dependencies import get_assessment_engine
from src.schemas.assessment import AssessmentResult, AssessmentSubmission, QuestionBankResponse
from services.assessment_engine.engine import AssessmentEngine
from services.assessment_engine.models import InvalidSubmissionError, UnknownAssessmentToolError

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/assessments/{tool}/questions", response_model=QuestionBankResponse)
async def get_assessment_questions(tool: str, engine: AssessmentEngine = Depends(get_assessment_engine)):
    """
    Returns the question bank for a tool. Answers are submitted keyed by each
    question's zero-based ``position``, not by its ``id``.
    """
    try:
        questions = engine.get_questions(tool)
    except UnknownAssessmentToolError as e:
        logger.error(f"Question bank requested for unknown tool: {e}")
        raise HTTPException(status_code=404, detail=str(e))

    bank = engine.question_bank
    return QuestionBankResponse(
        tool=bank.tool,
        version=bank.version,
        likert_min=bank.likert_min,
        likert_max=bank.likert_max,
        questions=questions,
    )


@router.post("/assessments", response_model=AssessmentResult)
async def submit_assessment(
    submission: AssessmentSubmission,
    engine: AssessmentEngine = Depends(get_assessment_engine),
):
    """
    Scores an assessment submission and returns the assessment record.
    """
    try:
        result = engine.score(submission.tool, submission.answers)
        assessment = AssessmentResult(**result)
        logger.info(
            f"Assessment scored: tool={assessment.tool}, baseline={assessment.baseline_score:.1f}, "
            f"answers={len(submission.answers)}"
        )
        return assessment
    except UnknownAssessmentToolError as e:
        logger.error(f"Unknown assessment tool: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except InvalidSubmissionError as e:
        logger.error(f"Invalid submission: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception(f"Unexpected error during assessment scoring: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")
