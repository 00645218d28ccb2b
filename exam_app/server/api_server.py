"""FastAPI server exposing the organizer and student endpoints."""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Body, Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
import uvicorn

from exam_app.constants.about import APP_DESCRIPTION, APP_NAME, APP_VERSION
from exam_app.constants.network_constants import API_PREFIX, DEFAULT_HOST, DEFAULT_PORT
from exam_app.core.errors import (
    ExamConflictError,
    ExamError,
    ExamNotFoundError,
    InvalidInputError,
    WindowClosedError,
)
from exam_app.core.exam_manager import ExamManager
from exam_app.core.markdown_math_renderer import renderer
from exam_app.core.models import Exam, ExamStats, ExamWindow
from exam_app.core.records import format_timestamp

_STATUS_BY_ERROR: dict[type[ExamError], int] = {
    ExamNotFoundError: 404,
    ExamConflictError: 409,
    InvalidInputError: 400,
    WindowClosedError: 400,
}


class ExamCreatePayload(BaseModel):
    """Payload schema for creating an exam.

    Schedule fields are loosely typed; the manager coerces an unusable start
    to "never open" and a non-numeric duration to zero minutes.
    """

    id: str | int | None = None
    title: str | None = None
    start_time: datetime | str | None = None
    duration_minutes: Any = None


class ExamUpdatePayload(BaseModel):
    """Partial update; only fields present in the request are applied."""

    title: str | None = None
    start_time: datetime | str | None = None
    duration_minutes: Any = None


class StudentPayload(BaseModel):
    id: str | int | None = None
    name: str | None = None


class SubmissionPayload(BaseModel):
    """Payload schema for submitted answers.

    ``parts`` is deliberately untyped: malformed answers are normalized to
    unanswered by the manager instead of being rejected here.
    """

    student: StudentPayload | None = None
    parts: Any = None


def _http_error(exc: ExamError) -> HTTPException:
    for error_type, status_code in _STATUS_BY_ERROR.items():
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(status_code=400, detail=str(exc))


def _exam_payload(exam: Exam, include_key: bool = True) -> dict[str, object]:
    parts = []
    for part in exam.parts:
        questions = []
        for question in part.questions:
            entry: dict[str, object] = {"statements": list(question.statements)}
            if include_key:
                entry["correct"] = list(question.correct)
            else:
                entry["statements_html"] = renderer.render_statements(question.statements)
            questions.append(entry)
        parts.append({"name": part.name, "questions": questions})
    return {
        "id": exam.id,
        "title": exam.title,
        "start_time": format_timestamp(exam.start_time),
        "duration_minutes": exam.duration_minutes,
        "parts": parts,
    }


def _window_payload(window: ExamWindow) -> dict[str, object]:
    return {
        "start": format_timestamp(window.start),
        "end": format_timestamp(window.end),
        "open": window.open,
        "seconds_remaining": window.seconds_remaining,
        "server_now": int(window.server_now.timestamp() * 1000),
    }


def _stats_payload(stats: ExamStats) -> dict[str, object]:
    return {
        "rankings": [
            {**asdict(entry), "submitted_at": format_timestamp(entry.submitted_at)}
            for entry in stats.rankings
        ],
        "stats": {
            "total_participants": stats.total_participants,
            "average_total": stats.average_total,
            "part_averages": stats.part_averages,
            "score_distribution": [asdict(bucket) for bucket in stats.score_distribution],
            "per_question_avg": stats.per_question_avg,
        },
    }


def _get_exam_manager_dependency(exam_manager: ExamManager):
    def dependency() -> ExamManager:
        return exam_manager

    return dependency


def create_api_app(exam_manager: ExamManager) -> FastAPI:
    """Create a FastAPI application wired to the provided exam manager.

    The manager's store is opened when the app starts and closed on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        exam_manager.store.open()
        yield
        exam_manager.store.close()

    app = FastAPI(
        title=f"{APP_NAME} API",
        description=APP_DESCRIPTION,
        version=APP_VERSION,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    manager_dep = _get_exam_manager_dependency(exam_manager)
    router = APIRouter(prefix=f"{API_PREFIX}/exams", tags=["exams"])

    @app.get("/")
    def root() -> dict[str, object]:
        return {"message": f"{APP_NAME} API is working", "docs": "/docs"}

    @router.post("")
    def create_exam(
        payload: ExamCreatePayload,
        manager: ExamManager = Depends(manager_dep),
    ) -> dict[str, object]:
        try:
            exam = manager.create_exam(
                "" if payload.id is None else payload.id,
                title=payload.title,
                start_time=payload.start_time,
                duration_minutes=payload.duration_minutes,
            )
        except ExamError as exc:
            raise _http_error(exc) from exc
        return _exam_payload(exam)

    @router.get("/{exam_id}")
    def get_exam(exam_id: str, manager: ExamManager = Depends(manager_dep)) -> dict[str, object]:
        try:
            return _exam_payload(manager.get_exam(exam_id))
        except ExamError as exc:
            raise _http_error(exc) from exc

    @router.put("/{exam_id}")
    def update_exam(
        exam_id: str,
        payload: ExamUpdatePayload,
        manager: ExamManager = Depends(manager_dep),
    ) -> dict[str, object]:
        try:
            exam = manager.update_exam(exam_id, payload.model_dump(exclude_unset=True))
        except ExamError as exc:
            raise _http_error(exc) from exc
        return _exam_payload(exam)

    @router.post("/{exam_id}/questions/import")
    def import_questions(
        exam_id: str,
        payload: dict[str, Any] = Body(...),
        manager: ExamManager = Depends(manager_dep),
    ) -> dict[str, object]:
        try:
            exam = manager.import_questions(exam_id, payload)
        except ExamError as exc:
            raise _http_error(exc) from exc
        return _exam_payload(exam)

    @router.get("/{exam_id}/for-student")
    def get_exam_for_student(
        exam_id: str,
        manager: ExamManager = Depends(manager_dep),
    ) -> dict[str, object]:
        try:
            view = manager.get_exam_for_student(exam_id)
        except ExamError as exc:
            raise _http_error(exc) from exc
        exam = _exam_payload(view.exam, include_key=False)
        return {
            "exam": {"id": exam["id"], "title": exam["title"], "parts": exam["parts"]},
            "window": _window_payload(view.window),
        }

    @router.post("/{exam_id}/submissions")
    def submit_answers(
        exam_id: str,
        payload: SubmissionPayload,
        manager: ExamManager = Depends(manager_dep),
    ) -> dict[str, object]:
        student = payload.student or StudentPayload()
        try:
            score = manager.submit_answers(exam_id, student.id, student.name, payload.parts)
        except ExamError as exc:
            raise _http_error(exc) from exc
        return {"ok": True, "score": asdict(score)}

    @router.get("/{exam_id}/results")
    def get_results(exam_id: str, manager: ExamManager = Depends(manager_dep)) -> dict[str, object]:
        try:
            stats = manager.get_results(exam_id)
        except ExamError as exc:
            raise _http_error(exc) from exc
        return _stats_payload(stats)

    app.include_router(router)
    return app


def run_api_server(
    exam_manager: ExamManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    log_level: str = "info",
) -> None:
    """Serve the API in the foreground until interrupted."""
    app = create_api_app(exam_manager)
    config = uvicorn.Config(app=app, host=host, port=port, log_level=log_level)
    uvicorn.Server(config).run()
