"""Scoring rules for four-statement true/false questions.

Each question awards partial credit on a deliberately non-linear curve: all
four statements right is worth a full point, three right is worth 0.6, two
right 0.2 and anything less nothing. Scores are always derived from the raw
answers and the exam's current correct key, so changing the key re-scores
every historical submission on the next computation.
"""

from __future__ import annotations

from collections.abc import Sequence
import math

from exam_app.constants.exam_constants import (
    PART_COUNT,
    PARTIAL_CREDIT,
    STATEMENTS_PER_QUESTION,
)
from exam_app.core.models import Exam, Score


def score_question(correct: object, answer: object) -> float:
    """Return the score for one answered question.

    A slot matches only when the student's value is the boolean equal to the
    truthiness of the key slot; unanswered slots never match.
    """
    if not _is_sequence(correct) or not _is_sequence(answer):
        return 0.0

    matches = 0
    for index in range(STATEMENTS_PER_QUESTION):
        expected = bool(correct[index]) if index < len(correct) else False
        given = answer[index] if index < len(answer) else None
        if isinstance(given, bool) and given == expected:
            matches += 1
    return PARTIAL_CREDIT.get(matches, 0.0)


def score_submission(exam: Exam, answer_parts: object) -> Score:
    """Score a submission's answers against the exam's current question set.

    Mismatched shapes never fail: a question without a usable answer scores as
    unanswered and answers without a question are ignored.
    """
    part_scores: list[list[float]] = [[] for _ in range(PART_COUNT)]
    per_question: list[float] = []

    for part_index in range(PART_COUNT):
        if part_index >= len(exam.parts):
            continue
        answers = _item_at(answer_parts, part_index)
        if not _is_sequence(answers):
            answers = []
        for question_index, question in enumerate(exam.parts[part_index].questions):
            score = score_question(question.correct, _item_at(answers, question_index))
            part_scores[part_index].append(score)
            per_question.append(score)

    subtotals = [math.fsum(scores) for scores in part_scores]
    return Score(total=math.fsum(subtotals), parts=subtotals, per_question=per_question)


def normalize_answers(exam: Exam, answer_parts: object) -> list[list[list[bool | None]]]:
    """Coerce raw submitted answers to the exam's shape.

    Every question gets exactly four slots; anything that is not a boolean
    becomes ``None``. Nothing here raises, so a partially broken payload still
    records an honest partial score.
    """
    normalized: list[list[list[bool | None]]] = []
    for part_index in range(PART_COUNT):
        questions = exam.parts[part_index].questions if part_index < len(exam.parts) else []
        answers = _item_at(answer_parts, part_index)
        if not _is_sequence(answers):
            answers = []
        part_answers: list[list[bool | None]] = []
        for question_index in range(len(questions)):
            raw = _item_at(answers, question_index)
            slots = list(raw[:STATEMENTS_PER_QUESTION]) if _is_sequence(raw) else []
            part_answers.append(
                [
                    slots[slot] if slot < len(slots) and isinstance(slots[slot], bool) else None
                    for slot in range(STATEMENTS_PER_QUESTION)
                ]
            )
        normalized.append(part_answers)
    return normalized


def _is_sequence(value: object) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _item_at(container: object, index: int) -> object:
    if _is_sequence(container) and 0 <= index < len(container):
        return container[index]
    return None
