"""Storage collaborators holding exam and submission documents.

Both stores speak plain JSON-ready dictionaries; conversion to domain models
happens in :mod:`exam_app.core.records`. The file-backed store keeps the same
documents in two JSON files that are rewritten after every write.
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from threading import Lock
from typing import Any, Protocol

from exam_app.constants.storage_constants import EXAMS_FILE_NAME, SUBMISSIONS_FILE_NAME

logger = logging.getLogger(__name__)

Document = dict[str, Any]


class ExamStore(Protocol):
    """Narrow document-store seam the exam manager depends on."""

    def open(self) -> None: ...

    def close(self) -> None: ...

    def get_exam(self, exam_id: str) -> Document | None: ...

    def insert_exam(self, exam_id: str, record: Document) -> bool: ...

    def put_exam(self, exam_id: str, record: Document) -> None: ...

    def get_submissions(self, exam_id: str) -> dict[str, Document]: ...

    def upsert_submission(self, exam_id: str, student_id: str, record: Document) -> None: ...


class InMemoryExamStore:
    """Keeps exams and submissions in process memory."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._exams: dict[str, Document] = {}
        self._submissions: dict[str, dict[str, Document]] = {}

    def open(self) -> None:
        """Prepare the store for use. Nothing to do for memory."""

    def close(self) -> None:
        """Release resources held by the store."""

    def get_exam(self, exam_id: str) -> Document | None:
        with self._lock:
            record = self._exams.get(exam_id)
            return copy.deepcopy(record) if record is not None else None

    def insert_exam(self, exam_id: str, record: Document) -> bool:
        """Store a new exam. Returns False if the id is already taken."""
        with self._lock:
            if exam_id in self._exams:
                return False
            self._exams[exam_id] = copy.deepcopy(record)
            self._flush_exams()
            return True

    def put_exam(self, exam_id: str, record: Document) -> None:
        with self._lock:
            self._exams[exam_id] = copy.deepcopy(record)
            self._flush_exams()

    def get_submissions(self, exam_id: str) -> dict[str, Document]:
        """Return the student id -> submission mapping in arrival order."""
        with self._lock:
            return copy.deepcopy(self._submissions.get(exam_id, {}))

    def upsert_submission(self, exam_id: str, student_id: str, record: Document) -> None:
        """Store a student's submission, replacing any earlier one."""
        with self._lock:
            self._submissions.setdefault(exam_id, {})[student_id] = copy.deepcopy(record)
            self._flush_submissions()

    def _flush_exams(self) -> None:
        """Hook for persistent subclasses; called with the lock held."""

    def _flush_submissions(self) -> None:
        """Hook for persistent subclasses; called with the lock held."""


class JsonFileExamStore(InMemoryExamStore):
    """Persists the in-memory documents to ``exams.json`` and ``submissions.json``."""

    def __init__(self, data_dir: Path) -> None:
        super().__init__()
        self._data_dir = Path(data_dir)
        self._exams_path = self._data_dir / EXAMS_FILE_NAME
        self._submissions_path = self._data_dir / SUBMISSIONS_FILE_NAME

    def open(self) -> None:
        """Create missing data files and load their contents."""
        with self._lock:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            if not self._exams_path.exists():
                _write_json(self._exams_path, {"exams": {}})
            if not self._submissions_path.exists():
                _write_json(self._submissions_path, {"submissions": {}})
            self._exams = _read_json(self._exams_path).get("exams", {})
            self._submissions = _read_json(self._submissions_path).get("submissions", {})
        logger.info(
            "Opened exam store at %s (%d exam(s))", self._data_dir, len(self._exams)
        )

    def _flush_exams(self) -> None:
        _write_json(self._exams_path, {"exams": self._exams})

    def _flush_submissions(self) -> None:
        _write_json(self._submissions_path, {"submissions": self._submissions})


def _read_json(file_path: Path) -> Document:
    return json.loads(file_path.read_text(encoding="utf-8"))


def _write_json(file_path: Path, document: Document) -> None:
    # Write to a sibling file first so a crash never leaves half a document.
    tmp_path = file_path.with_suffix(file_path.suffix + ".tmp")
    tmp_path.write_text(json.dumps(document, indent=2), encoding="utf-8")
    tmp_path.replace(file_path)
