import logging
from typing import Dict, List, Any, Mapping, Optional

from .definitions import PLACEHOLDER_TOOL_PROFILES, SUPPORTED_TOOLS, TEIQUE_SF
from .loader import get_teique_sf_question_bank
from .models import QuestionBank, UnknownAssessmentToolError
from .scorer import build_assessment_record, score_teique_sf

logger = logging.getLogger(__name__)


class AssessmentEngine:
    """
    Dispatches assessment submissions to the scoring routine for their tool.
    """
    def __init__(self, question_bank: Optional[QuestionBank] = None):
        """
        Args:
            question_bank: TEIQue-SF reference questions. Defaults to the
                           bundled ``assets/teique_sf_questions.yml``.
        """
        self.question_bank = question_bank or get_teique_sf_question_bank()

    @property
    def supported_tools(self) -> List[str]:
        return list(SUPPORTED_TOOLS)

    def get_questions(self, tool: str) -> List[Dict[str, Any]]:
        """
        Returns the questions for a tool with their answer position.
        Only TEIQue-SF ships a question bank.
        """
        if tool != TEIQUE_SF:
            raise UnknownAssessmentToolError(f"No question bank available for assessment tool '{tool}'")
        return [
            {"position": index, "id": q.id, "text": q.text, "domain": q.domain, "reverse": q.reverse}
            for index, q in enumerate(self.question_bank.questions)
        ]

    def score(self, tool: str, answers: Mapping[int, int]) -> Dict[str, Any]:
        """
        Scores a submission for ``tool``.

        Raises:
            UnknownAssessmentToolError: the tool name is not recognised.
            InvalidSubmissionError: an answer value is outside the Likert scale.
        """
        if tool == TEIQUE_SF:
            bank = self.question_bank
            return score_teique_sf(bank.questions, answers, bank.likert_min, bank.likert_max)

        profile = PLACEHOLDER_TOOL_PROFILES.get(tool)
        if profile is None:
            raise UnknownAssessmentToolError(
                f"Invalid assessment tool '{tool}'. Supported tools: {', '.join(self.supported_tools)}"
            )

        logger.info(f"Assessment tool '{tool}' has no scoring routine; returning its fixed profile")
        return build_assessment_record(tool, profile)
