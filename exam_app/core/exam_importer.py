"""Validation of question-set imports.

Payload shape (JSON):

    {
      "parts": [
        {"name": "Part A", "questions": [
          {"statements": ["s1", "s2", "s3", "s4"], "correct": [true, false, true, false]},
          ... exactly 50 questions ...
        ]},
        {"name": "Part B", "questions": [... exactly 50 questions ...]}
      ]
    }

A payload is either accepted as a whole or rejected with the first problem
found, so an exam never ends up with a partially imported question set.
"""

from __future__ import annotations

import json
from pathlib import Path

from exam_app.constants.exam_constants import (
    DEFAULT_PART_NAMES,
    PART_COUNT,
    QUESTIONS_PER_PART,
    STATEMENTS_PER_QUESTION,
)
from exam_app.core.errors import InvalidInputError
from exam_app.core.models import ExamPart, ExamQuestion


class QuestionImportError(InvalidInputError):
    """Raised when a question set cannot be imported."""


def parse_question_set(payload: object) -> list[ExamPart]:
    """Validate an import payload and return the two parts it describes."""
    if not isinstance(payload, dict):
        raise QuestionImportError(f"Invalid payload. Expect parts[{PART_COUNT}].")
    raw_parts = payload.get("parts")
    if not isinstance(raw_parts, list) or len(raw_parts) != PART_COUNT:
        raise QuestionImportError(f"Invalid payload. Expect parts[{PART_COUNT}].")

    return [_parse_part(index, raw_part) for index, raw_part in enumerate(raw_parts)]


def load_question_set_from_file(file_path: Path) -> list[ExamPart]:
    """Read and validate a question set stored as a JSON document."""
    try:
        payload = json.loads(file_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise QuestionImportError(f"Question file is not valid JSON: {exc.msg}.") from exc
    return parse_question_set(payload)


def _parse_part(index: int, raw_part: object) -> ExamPart:
    questions = raw_part.get("questions") if isinstance(raw_part, dict) else None
    if not isinstance(questions, list) or len(questions) != QUESTIONS_PER_PART:
        raise QuestionImportError(
            f"Part {index + 1} must have exactly {QUESTIONS_PER_PART} questions."
        )

    name = raw_part.get("name")
    if not isinstance(name, str) or not name.strip():
        name = DEFAULT_PART_NAMES[index]
    return ExamPart(name=name.strip(), questions=[_parse_question(q) for q in questions])


def _parse_question(raw_question: object) -> ExamQuestion:
    if not isinstance(raw_question, dict):
        raise QuestionImportError(
            f"Each question must have {STATEMENTS_PER_QUESTION} statements."
        )
    statements = raw_question.get("statements")
    if not isinstance(statements, list) or len(statements) != STATEMENTS_PER_QUESTION:
        raise QuestionImportError(
            f"Each question must have {STATEMENTS_PER_QUESTION} statements."
        )
    correct = raw_question.get("correct")
    if not isinstance(correct, list) or len(correct) != STATEMENTS_PER_QUESTION:
        raise QuestionImportError(
            f"Each question must have {STATEMENTS_PER_QUESTION} correct booleans."
        )

    return ExamQuestion(
        statements=[_sanitize_statement(statement) for statement in statements],
        correct=[bool(value) for value in correct],
    )


def _sanitize_statement(statement: object) -> str:
    if statement is None:
        return ""
    return str(statement).strip()
