import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

from config.settings import GeminiSettings
from services.assessment_engine.loader import get_program_catalog, get_teique_sf_question_bank
from services.assessment_engine.models import Domain
from services.assessment_engine.program_planner import ProgramPlanner
from src.llm.client import GenerationClient
from src.schemas.assessment import AssessmentResult


@pytest.fixture(scope="session")
def question_bank():
    """The bundled TEIQue-SF question bank."""
    return get_teique_sf_question_bank()


@pytest.fixture(scope="session")
def program_catalog():
    return get_program_catalog()


@pytest.fixture
def planner(program_catalog):
    return ProgramPlanner(program_catalog)


@pytest.fixture
def gemini_settings():
    return GeminiSettings(api_key="test-key", model="gemini-test", max_retries=2, base_delay_seconds=1.0)


@pytest.fixture
def mock_generation_client():
    """GenerationClient double; set ``generate_with_retry`` per test."""
    client = MagicMock(spec=GenerationClient)
    client.model = "gemini-test"
    client.is_available.return_value = True
    client.generate_with_retry = AsyncMock()
    return client


def make_assessment(scores, strengths=None, gaps=None, tool="TEIQue-SF"):
    """Builds an AssessmentResult from a domain -> score mapping."""
    ranked = sorted(list(Domain), key=lambda d: scores[d], reverse=True)
    now = datetime.now(timezone.utc)
    return AssessmentResult(
        id="assessment-1",
        tool=tool,
        baseline_score=sum(scores.values()) / len(scores),
        domain_scores=scores,
        strengths=strengths if strengths is not None else ranked[:2],
        gaps=gaps if gaps is not None else ranked[-2:],
        assessment_date=now,
        completed_at=now,
    )


@pytest.fixture
def low_self_management_assessment():
    return make_assessment({
        Domain.SELF_AWARENESS: 60.0,
        Domain.SELF_MANAGEMENT: 30.0,
        Domain.SOCIAL_AWARENESS: 65.0,
        Domain.RELATIONSHIP_MANAGEMENT: 62.0,
    })


@pytest.fixture
def strong_assessment():
    return make_assessment({
        Domain.SELF_AWARENESS: 80.0,
        Domain.SELF_MANAGEMENT: 82.0,
        Domain.SOCIAL_AWARENESS: 78.0,
        Domain.RELATIONSHIP_MANAGEMENT: 85.0,
    })


@pytest.fixture
def assessment_factory():
    return make_assessment
