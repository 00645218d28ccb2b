"""Conversion between domain models and the JSON documents kept by the store."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from exam_app.core.models import Exam, ExamPart, ExamQuestion, Student, Submission
from exam_app.core.time_window import as_utc


def exam_to_record(exam: Exam) -> dict[str, Any]:
    return {
        "id": exam.id,
        "title": exam.title,
        "start_time": format_timestamp(exam.start_time),
        "duration_minutes": exam.duration_minutes,
        "parts": [
            {
                "name": part.name,
                "questions": [
                    {"statements": list(question.statements), "correct": list(question.correct)}
                    for question in part.questions
                ],
            }
            for part in exam.parts
        ],
    }


def exam_from_record(record: dict[str, Any]) -> Exam:
    parts = []
    for raw_part in record.get("parts") or []:
        raw_part = raw_part if isinstance(raw_part, dict) else {}
        questions = [
            ExamQuestion(
                statements=list(raw_question.get("statements") or []),
                correct=[bool(value) for value in raw_question.get("correct") or []],
            )
            for raw_question in raw_part.get("questions") or []
            if isinstance(raw_question, dict)
        ]
        parts.append(ExamPart(name=str(raw_part.get("name") or ""), questions=questions))

    return Exam(
        id=str(record["id"]),
        title=record.get("title"),
        start_time=parse_timestamp(record.get("start_time")),
        duration_minutes=record.get("duration_minutes"),
        parts=parts,
    )


def submission_to_record(submission: Submission) -> dict[str, Any]:
    return {
        "student": {"id": submission.student.id, "name": submission.student.name},
        "parts": [[list(answer) for answer in part] for part in submission.parts],
        "submitted_at": format_timestamp(submission.submitted_at),
    }


def submission_from_record(record: dict[str, Any]) -> Submission:
    # Answers are kept raw; the scorer treats anything malformed as unanswered.
    student = record.get("student") or {}
    return Submission(
        student=Student(id=str(student.get("id")), name=student.get("name")),
        parts=record.get("parts") or [],
        submitted_at=parse_timestamp(record.get("submitted_at")),
    )


def parse_timestamp(value: object) -> datetime | None:
    """Parse an ISO-8601 timestamp; unusable values yield ``None``."""
    if isinstance(value, datetime):
        return as_utc(value)
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return as_utc(datetime.fromisoformat(_normalize_zulu(value.strip())))
    except ValueError:
        return None


def _normalize_zulu(value: str) -> str:
    # fromisoformat only accepts a trailing "Z" from Python 3.11 on.
    if value[-1:] in ("Z", "z"):
        return value[:-1] + "+00:00"
    return value


def format_timestamp(value: datetime | None) -> str | None:
    if value is None:
        return None
    return as_utc(value).isoformat()
