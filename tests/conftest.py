from __future__ import annotations

from datetime import datetime, timezone

import pytest

from exam_app.core.exam_manager import ExamManager
from exam_app.core.models import Exam, ExamPart, ExamQuestion
from exam_app.core.services.exam_store import InMemoryExamStore

START = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)
KEY = [True, False, True, False]


class FakeClock:
    """Callable clock the tests move around the exam window."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(START)


@pytest.fixture
def store() -> InMemoryExamStore:
    return InMemoryExamStore()


@pytest.fixture
def manager(store: InMemoryExamStore, clock: FakeClock) -> ExamManager:
    return ExamManager(store=store, clock=clock)


@pytest.fixture
def question_set():
    """Build an import payload; every question shares the same correct key."""

    def build(correct=KEY, questions_per_part: int = 50) -> dict:
        return {
            "parts": [
                {
                    "name": name,
                    "questions": [
                        {
                            "statements": [f"{name} Q{q + 1} statement {s + 1}" for s in range(4)],
                            "correct": list(correct),
                        }
                        for q in range(questions_per_part)
                    ],
                }
                for name in ("Part A", "Part B")
            ]
        }

    return build


@pytest.fixture
def make_exam():
    """Build an in-memory exam with the given number of questions per part."""

    def build(part_sizes=(50, 50), correct=KEY, duration_minutes: object = 60) -> Exam:
        return Exam(
            id="exam-1",
            title="Midterm",
            start_time=START,
            duration_minutes=duration_minutes,
            parts=[
                ExamPart(
                    name=f"Part {index}",
                    questions=[
                        ExamQuestion(statements=["a", "b", "c", "d"], correct=list(correct))
                        for _ in range(size)
                    ],
                )
                for index, size in enumerate(part_sizes)
            ],
        )

    return build
