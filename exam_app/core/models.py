"""Domain models for the exam application."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

# One statement slot of a student's answer: True, False or None (unanswered).
AnswerSlot = bool | None


@dataclass(slots=True)
class ExamQuestion:
    """Question with four true/false statements and the matching correct key."""

    statements: list[str]
    correct: list[bool]


@dataclass(slots=True)
class ExamPart:
    """One of the two fixed sections of an exam."""

    name: str
    questions: list[ExamQuestion] = field(default_factory=list)


@dataclass(slots=True)
class Exam:
    """Scheduled exam definition as stored by the organizer."""

    id: str
    title: str | None
    start_time: datetime | None
    duration_minutes: object = None  # Raw value; non-numeric means zero minutes
    parts: list[ExamPart] = field(default_factory=list)

    def question_count(self) -> int:
        return sum(len(part.questions) for part in self.parts)


@dataclass(slots=True)
class Student:
    """Student identity attached to a submission."""

    id: str
    name: str | None = None


@dataclass(slots=True)
class Submission:
    """Latest answers a student submitted for an exam."""

    student: Student
    parts: list[list[list[AnswerSlot]]]
    submitted_at: datetime


@dataclass(slots=True)
class Score:
    """Derived score of a submission. Never persisted."""

    total: float
    parts: list[float]
    per_question: list[float]


@dataclass(slots=True)
class ExamWindow:
    """View-eligibility descriptor handed to students with the exam content."""

    start: datetime | None
    end: datetime | None
    open: bool
    seconds_remaining: int
    server_now: datetime


@dataclass(slots=True)
class RankingEntry:
    """Immutable snapshot of one student's standing."""

    student_id: str
    name: str | None
    total: float
    parts: list[float]
    submitted_at: datetime


@dataclass(slots=True)
class ScoreBucket:
    start: int
    end: int
    label: str
    count: int = 0


@dataclass(slots=True)
class ExamStats:
    """Cohort statistics recomputed from every stored submission."""

    rankings: list[RankingEntry]
    total_participants: int
    average_total: float
    part_averages: list[float]
    per_question_avg: list[float]
    score_distribution: list[ScoreBucket]
