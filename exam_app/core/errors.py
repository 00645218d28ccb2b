"""Exceptions raised by exam operations and translated by the API layer."""

from __future__ import annotations


class ExamError(Exception):
    """Base class for failures reported back to the caller."""


class ExamNotFoundError(ExamError):
    """Raised when no exam exists for the requested id."""

    def __init__(self, exam_id: str) -> None:
        super().__init__(f"Exam '{exam_id}' not found.")
        self.exam_id = exam_id


class ExamConflictError(ExamError):
    """Raised when creating an exam whose id is already taken."""

    def __init__(self, exam_id: str) -> None:
        super().__init__(f"Exam '{exam_id}' already exists.")
        self.exam_id = exam_id


class InvalidInputError(ExamError):
    """Raised for malformed organizer payloads or a missing student id."""


class WindowClosedError(ExamError):
    """Raised when a submission arrives outside the exam window."""
