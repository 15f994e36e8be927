import pytest

from services.assessment_engine.definitions import TEIQUE_SF
from services.assessment_engine.models import Domain, InvalidSubmissionError, Question
from services.assessment_engine.scorer import (
    adjust_for_reverse,
    calculate_baseline,
    calculate_domain_scores,
    collect_domain_values,
    rank_domains,
    score_teique_sf,
)


def test_adjust_for_reverse_inverts_reverse_items():
    question = Question(id=1, text="q", domain=Domain.SELF_MANAGEMENT, reverse=True)
    assert [adjust_for_reverse(question, v) for v in range(1, 6)] == [5, 4, 3, 2, 1]


def test_adjust_for_reverse_leaves_forward_items():
    question = Question(id=2, text="q", domain=Domain.SELF_MANAGEMENT, reverse=False)
    assert adjust_for_reverse(question, 2) == 2


def test_partial_submission_scores_answered_domains(question_bank):
    """Positions 0-4 answered with alternating extremes; social awareness unanswered."""
    result = score_teique_sf(question_bank.questions, {0: 5, 1: 1, 2: 5, 3: 1, 4: 5})

    scores = result["domain_scores"]
    assert scores[Domain.SELF_AWARENESS] == pytest.approx(20.0)
    assert scores[Domain.SELF_MANAGEMENT] == pytest.approx(20.0)
    assert scores[Domain.SOCIAL_AWARENESS] == pytest.approx(50.0)
    assert scores[Domain.RELATIONSHIP_MANAGEMENT] == pytest.approx(20.0)
    assert result["baseline_score"] == pytest.approx(27.5)
    assert result["tool"] == TEIQUE_SF
    assert result["strengths"] == [Domain.SOCIAL_AWARENESS, Domain.SELF_AWARENESS]
    assert result["gaps"] == [Domain.SELF_MANAGEMENT, Domain.RELATIONSHIP_MANAGEMENT]


def test_all_neutral_answers_score_sixty(question_bank):
    answers = {position: 3 for position in range(len(question_bank.questions))}
    result = score_teique_sf(question_bank.questions, answers)

    assert all(score == pytest.approx(60.0) for score in result["domain_scores"].values())
    assert result["baseline_score"] == pytest.approx(60.0)


def test_empty_submission_is_neutral(question_bank):
    result = score_teique_sf(question_bank.questions, {})

    assert all(score == 50.0 for score in result["domain_scores"].values())
    assert result["baseline_score"] == 50.0
    # All tied: canonical order decides
    assert result["strengths"] == [Domain.SELF_AWARENESS, Domain.SELF_MANAGEMENT]
    assert result["gaps"] == [Domain.SOCIAL_AWARENESS, Domain.RELATIONSHIP_MANAGEMENT]


def test_all_fives_respect_reverse_items(question_bank):
    answers = {position: 5 for position in range(len(question_bank.questions))}
    scores = score_teique_sf(question_bank.questions, answers)["domain_scores"]

    assert scores[Domain.SELF_MANAGEMENT] == pytest.approx(20.0)
    assert scores[Domain.SOCIAL_AWARENESS] == pytest.approx(60.0)
    assert scores[Domain.SELF_AWARENESS] == pytest.approx(220 / 3)
    assert scores[Domain.RELATIONSHIP_MANAGEMENT] == pytest.approx(220 / 3)


def test_answers_are_addressed_by_position_not_id(question_bank):
    # Position 0 is question id 1 (self-management, reversed)
    values = collect_domain_values(question_bank.questions, {0: 1})
    assert values[Domain.SELF_MANAGEMENT] == [5]
    assert values[Domain.RELATIONSHIP_MANAGEMENT] == []


def test_out_of_range_positions_are_ignored(question_bank):
    values = collect_domain_values(question_bank.questions, {-1: 3, 99: 3})
    assert all(v == [] for v in values.values())


@pytest.mark.parametrize("bad_value", [0, 6, -2])
def test_out_of_scale_answer_is_rejected(question_bank, bad_value):
    with pytest.raises(InvalidSubmissionError, match="outside the 1-5 scale"):
        score_teique_sf(question_bank.questions, {1: bad_value})


def test_string_positions_are_accepted(question_bank):
    result = score_teique_sf(question_bank.questions, {"1": 4})
    assert result["domain_scores"][Domain.RELATIONSHIP_MANAGEMENT] == pytest.approx(80.0)


def test_calculate_domain_scores_and_baseline():
    scores = calculate_domain_scores({Domain.SELF_AWARENESS: [4, 5], Domain.SELF_MANAGEMENT: [2]})
    assert scores == {
        Domain.SELF_AWARENESS: 90.0,
        Domain.SELF_MANAGEMENT: 40.0,
        Domain.SOCIAL_AWARENESS: 50.0,
        Domain.RELATIONSHIP_MANAGEMENT: 50.0,
    }
    assert calculate_baseline(scores) == pytest.approx(57.5)


def test_rank_domains_breaks_ties_in_canonical_order():
    scores = {
        Domain.SELF_AWARENESS: 40.0,
        Domain.SELF_MANAGEMENT: 70.0,
        Domain.SOCIAL_AWARENESS: 40.0,
        Domain.RELATIONSHIP_MANAGEMENT: 70.0,
    }
    strengths, gaps = rank_domains(scores)
    assert strengths == [Domain.SELF_MANAGEMENT, Domain.RELATIONSHIP_MANAGEMENT]
    assert gaps == [Domain.SELF_AWARENESS, Domain.SOCIAL_AWARENESS]


def test_assessment_record_has_fresh_id_and_timestamps(question_bank):
    first = score_teique_sf(question_bank.questions, {0: 3})
    second = score_teique_sf(question_bank.questions, {0: 3})

    assert first["id"] != second["id"]
    assert first["assessment_date"] == first["completed_at"]
    assert first["assessment_date"].tzinfo is not None


def test_mirrored_answers_yield_identical_aggregates(question_bank):
    # Position 2 is reverse-scored, position 3 is forward; both self-awareness
    reversed_high = score_teique_sf(question_bank.questions, {2: 5, 3: 1})
    forward_low = score_teique_sf(question_bank.questions, {2: 1, 3: 5})

    assert reversed_high["domain_scores"][Domain.SELF_AWARENESS] == pytest.approx(20.0)
    assert forward_low["domain_scores"][Domain.SELF_AWARENESS] == pytest.approx(100.0)
    assert score_teique_sf(question_bank.questions, {2: 4})["domain_scores"] == \
        score_teique_sf(question_bank.questions, {3: 2})["domain_scores"]


def test_strengths_and_gaps_partition_domains(question_bank):
    answers = {0: 2, 1: 4, 2: 1, 3: 5, 5: 3, 6: 2}
    result = score_teique_sf(question_bank.questions, answers)

    assert set(result["strengths"]).isdisjoint(result["gaps"])
    assert set(result["strengths"]) | set(result["gaps"]) == set(Domain)
