"""Business logic behind the organizer and student operations."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
import logging
from pathlib import Path

from exam_app.constants.exam_constants import DEFAULT_PART_NAMES
from exam_app.core.errors import (
    ExamConflictError,
    ExamNotFoundError,
    InvalidInputError,
    WindowClosedError,
)
from exam_app.core.exam_importer import load_question_set_from_file, parse_question_set
from exam_app.core.models import Exam, ExamPart, ExamStats, ExamWindow, Score, Student, Submission
from exam_app.core.records import (
    exam_from_record,
    exam_to_record,
    parse_timestamp,
    submission_from_record,
    submission_to_record,
)
from exam_app.core.scoring import normalize_answers, score_submission
from exam_app.core.services.exam_store import ExamStore
from exam_app.core.services.stats_engine import compute_exam_stats
from exam_app.core.time_window import as_utc, is_submission_open, view_window

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = ("title", "start_time", "duration_minutes")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class StudentExamView:
    """Exam content handed to a student together with the view window."""

    exam: Exam
    window: ExamWindow


class ExamManager:
    """Facade over the exam store, scorer, time window gate and stats engine.

    Nothing derived is cached: every call reads the stored documents and
    recomputes scores from the raw answers.
    """

    def __init__(
        self,
        store: ExamStore,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._clock = clock

    @property
    def store(self) -> ExamStore:
        return self._store

    # --- Organizer operations ---

    def create_exam(
        self,
        exam_id: str | int,
        title: str | None = None,
        start_time: datetime | str | None = None,
        duration_minutes: object = None,
    ) -> Exam:
        if exam_id is None or not str(exam_id).strip():
            raise InvalidInputError("id required")
        exam = Exam(
            id=str(exam_id),
            title=title,
            start_time=parse_timestamp(start_time),
            duration_minutes=duration_minutes,
            parts=[ExamPart(name=name) for name in DEFAULT_PART_NAMES],
        )
        if not self._store.insert_exam(exam.id, exam_to_record(exam)):
            raise ExamConflictError(exam.id)
        logger.info("Created exam %s starting %s", exam.id, exam.start_time)
        return exam

    def get_exam(self, exam_id: str) -> Exam:
        record = self._store.get_exam(exam_id)
        if record is None:
            raise ExamNotFoundError(exam_id)
        return exam_from_record(record)

    def update_exam(self, exam_id: str, changes: dict[str, object]) -> Exam:
        """Merge the provided schedule fields into the exam; others are ignored."""
        exam = self.get_exam(exam_id)
        for key in _UPDATABLE_FIELDS:
            if key not in changes:
                continue
            value = changes[key]
            if key == "start_time":
                value = parse_timestamp(value)
            setattr(exam, key, value)
        self._store.put_exam(exam.id, exam_to_record(exam))
        return exam

    def import_questions(self, exam_id: str, payload: object) -> Exam:
        """Replace both parts of the exam with a validated question set."""
        exam = self.get_exam(exam_id)
        exam.parts = parse_question_set(payload)
        self._store.put_exam(exam.id, exam_to_record(exam))
        logger.info("Imported %d questions into exam %s", exam.question_count(), exam.id)
        return exam

    def import_questions_from_file(self, exam_id: str, file_path: Path) -> Exam:
        exam = self.get_exam(exam_id)
        exam.parts = load_question_set_from_file(file_path)
        self._store.put_exam(exam.id, exam_to_record(exam))
        logger.info("Imported questions for exam %s from %s", exam.id, file_path)
        return exam

    def get_results(self, exam_id: str) -> ExamStats:
        exam = self.get_exam(exam_id)
        submissions = [
            submission_from_record(record)
            for record in self._store.get_submissions(exam_id).values()
        ]
        return compute_exam_stats(exam, submissions)

    # --- Student operations ---

    def get_exam_for_student(self, exam_id: str) -> StudentExamView:
        exam = self.get_exam(exam_id)
        return StudentExamView(exam=exam, window=view_window(exam, self._clock()))

    def submit_answers(
        self,
        exam_id: str,
        student_id: object,
        student_name: str | None,
        answer_parts: object,
    ) -> Score:
        """Store a student's answers and return the freshly computed score."""
        exam = self.get_exam(exam_id)
        now = self._clock()
        if not is_submission_open(exam, now):
            logger.warning("Rejected submission for exam %s outside its window", exam_id)
            raise WindowClosedError("Submission not within allowed window")
        if student_id is None or not str(student_id).strip():
            raise InvalidInputError("student.id required")

        submission = Submission(
            student=Student(id=str(student_id), name=student_name),
            parts=normalize_answers(exam, answer_parts),
            submitted_at=as_utc(now),
        )
        self._store.upsert_submission(
            exam.id, submission.student.id, submission_to_record(submission)
        )
        logger.info("Accepted submission from %s for exam %s", submission.student.id, exam.id)
        return score_submission(exam, submission.parts)
