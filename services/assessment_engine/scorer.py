# services/assessment_engine/scorer.py
# Scoring for the TEIQue-SF emotional intelligence questionnaire.

import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, Any, List, Mapping, Sequence, Tuple

from .definitions import NEUTRAL_DOMAIN_SCORE, TEIQUE_SF
from .models import CANONICAL_DOMAINS, Domain, Question, InvalidSubmissionError

logger = logging.getLogger(__name__)

# Defaults; a question bank may declare its own range
LIKERT_MIN = 1
LIKERT_MAX = 5


def adjust_for_reverse(
    question: Question,
    value: int,
    likert_min: int = LIKERT_MIN,
    likert_max: int = LIKERT_MAX,
) -> int:
    """Reverse-scored items are mirrored on the scale (1<->5, 2<->4, 3 fixed on 1..5)."""
    if question.reverse:
        return (likert_min + likert_max) - value
    return value


def collect_domain_values(
    questions: Sequence[Question],
    answers: Mapping[int, int],
    likert_min: int = LIKERT_MIN,
    likert_max: int = LIKERT_MAX,
) -> Dict[Domain, List[int]]:
    """
    Groups adjusted answer values by domain.

    Answers are addressed by zero-based POSITION in ``questions``, not by
    question id. Positions with no matching question are skipped.
    """
    values: Dict[Domain, List[int]] = {domain: [] for domain in CANONICAL_DOMAINS}

    for position, raw_value in answers.items():
        position = int(position)
        if position < 0 or position >= len(questions):
            logger.debug(f"Skipping answer for unknown question position {position}")
            continue

        value = int(raw_value)
        if value < likert_min or value > likert_max:
            raise InvalidSubmissionError(
                f"Answer {value} for question position {position} is outside the {likert_min}-{likert_max} scale"
            )

        question = questions[position]
        values[question.domain].append(adjust_for_reverse(question, value, likert_min, likert_max))

    return values


def calculate_domain_scores(
    domain_values: Mapping[Domain, List[int]],
    likert_max: int = LIKERT_MAX,
) -> Dict[Domain, float]:
    """Mean Likert value as a percentage of the scale maximum; domains without answers stay neutral (50)."""
    scores: Dict[Domain, float] = {}
    for domain in CANONICAL_DOMAINS:
        values = domain_values.get(domain) or []
        if values:
            scores[domain] = sum(values) * 100 / (len(values) * likert_max)
        else:
            scores[domain] = NEUTRAL_DOMAIN_SCORE
    return scores


def calculate_baseline(domain_scores: Mapping[Domain, float]) -> float:
    return sum(domain_scores[d] for d in CANONICAL_DOMAINS) / len(CANONICAL_DOMAINS)


def rank_domains(domain_scores: Mapping[Domain, float]) -> Tuple[List[Domain], List[Domain]]:
    """
    Returns (strengths, gaps): the two highest and the two lowest domains.

    Ties keep the canonical domain order (sorted() is stable).
    """
    ranked = sorted(CANONICAL_DOMAINS, key=lambda d: domain_scores[d], reverse=True)
    return ranked[:2], ranked[-2:]


def build_assessment_record(tool: str, domain_scores: Mapping[Domain, float]) -> Dict[str, Any]:
    """Assembles the assessment dict shared by every scoring tool."""
    strengths, gaps = rank_domains(domain_scores)
    now = datetime.now(timezone.utc)
    return {
        "id": uuid.uuid4().hex,
        "tool": tool,
        "baseline_score": calculate_baseline(domain_scores),
        "domain_scores": {d: float(domain_scores[d]) for d in CANONICAL_DOMAINS},
        "strengths": strengths,
        "gaps": gaps,
        "assessment_date": now,
        "completed_at": now,
    }


def score_teique_sf(
    questions: Sequence[Question],
    answers: Mapping[int, int],
    likert_min: int = LIKERT_MIN,
    likert_max: int = LIKERT_MAX,
) -> Dict[str, Any]:
    """
    Scores a TEIQue-SF submission.

    Args:
        questions: The reference question list, in presentation order.
        answers: Zero-based question position -> Likert value.
                 Partial and empty answer sets are accepted.
        likert_min: Lowest value on the answer scale.
        likert_max: Highest value on the answer scale.

    Returns:
        An assessment dict (see ``build_assessment_record``).
    """
    domain_values = collect_domain_values(questions, answers, likert_min, likert_max)
    domain_scores = calculate_domain_scores(domain_values, likert_max)
    logger.debug(f"TEIQue-SF domain scores: {domain_scores}")
    return build_assessment_record(TEIQUE_SF, domain_scores)
