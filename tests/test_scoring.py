from itertools import product

import pytest

from exam_app.core.scoring import normalize_answers, score_question, score_submission

T, F = True, False


@pytest.mark.parametrize(
    ("correct", "answer", "expected"),
    [
        ([T, T, T, T], [T, T, T, T], 1.0),
        ([T, F, T, F], [T, F, F, F], 0.6),
        ([T, F, T, F], [F, T, T, F], 0.2),
        ([T, F, T, F], [F, T, T, T], 0.0),
        ([T, T, T, T], [F, F, F, F], 0.0),
    ],
)
def test_score_question_partial_credit_curve(correct, answer, expected):
    assert score_question(correct, answer) == expected


def test_score_question_values_and_negation_symmetry():
    for correct, answer in product(product([T, F], repeat=4), repeat=2):
        score = score_question(list(correct), list(answer))
        assert score in {0.0, 0.2, 0.6, 1.0}

        negated_correct = [not value for value in correct]
        negated_answer = [not value for value in answer]
        assert score_question(negated_correct, negated_answer) == score


def test_negating_only_one_side_changes_the_score():
    assert score_question([T, F, T, F], [T, F, T, F]) == 1.0
    assert score_question([F, T, F, T], [T, F, T, F]) == 0.0
    assert score_question([T, F, T, F], [F, T, F, T]) == 0.0


def test_unanswered_and_non_boolean_slots_never_match():
    assert score_question([F, F, F, F], [None, None, None, None]) == 0.0
    assert score_question([F, F, F, F], [0, 0, 0, 0]) == 0.0
    assert score_question([T, T, T, T], [T, T, None, "true"]) == 0.2


def test_malformed_inputs_score_zero():
    assert score_question(None, [T, T, T, T]) == 0.0
    assert score_question([T, T, T, T], None) == 0.0
    assert score_question([T, T, T, T], "TTTT") == 0.0
    assert score_question([T, T, T, T], [T, T, T]) == 0.6


def test_key_uses_truthiness_of_stored_values():
    assert score_question([1, 0, 1, 0], [T, F, T, F]) == 1.0


def test_zero_question_exam_scores_zero(make_exam):
    exam = make_exam(part_sizes=(0, 0))

    score = score_submission(exam, [[[T, T, T, T]], [[F, F, F, F]]])

    assert score.total == 0
    assert score.parts == [0, 0]
    assert score.per_question == []


def test_submission_scores_parts_in_order(make_exam):
    exam = make_exam(part_sizes=(2, 2))
    answers = [
        [[T, F, T, F], [T, F, F, F]],
        [[F, T, T, F], [F, T, F, T]],
    ]

    score = score_submission(exam, answers)

    assert score.parts == pytest.approx([1.6, 0.2])
    assert score.total == pytest.approx(1.8)
    assert score.per_question == [1.0, 0.6, 0.2, 0.0]


def test_mismatched_shapes_never_fail(make_exam):
    exam = make_exam(part_sizes=(3, 2))

    score = score_submission(exam, [[[T, F, T, F]]])

    assert score.per_question == [1.0, 0.0, 0.0, 0.0, 0.0]
    assert score.parts == [1.0, 0.0]
    assert score.total == 1.0


def test_extra_answers_are_ignored(make_exam):
    exam = make_exam(part_sizes=(1, 0))

    score = score_submission(exam, [[[T, F, T, F], [T, F, T, F]], [[T, F, T, F]], []])

    assert score.per_question == [1.0]
    assert score.total == 1.0


def test_exam_with_missing_part_still_scores(make_exam):
    exam = make_exam(part_sizes=(2,))

    score = score_submission(exam, None)

    assert score.parts == [0.0, 0.0]
    assert score.per_question == [0.0, 0.0]


def test_fifty_partial_scores_sum_to_an_exact_boundary(make_exam):
    exam = make_exam(part_sizes=(50, 0))
    two_matches = [F, T, T, F]

    score = score_submission(exam, [[two_matches] * 50])

    assert score.total == 10.0


def test_normalize_answers_coerces_to_exam_shape(make_exam):
    exam = make_exam(part_sizes=(3, 1))
    raw = [
        [[T, F, T, F, T], "broken", [1, None, F]],
        None,
    ]

    normalized = normalize_answers(exam, raw)

    assert normalized == [
        [[T, F, T, F], [None] * 4, [None, None, F, None]],
        [[None] * 4],
    ]
