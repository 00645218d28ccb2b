"""Schedule arithmetic deciding when an exam may be viewed or submitted.

Viewing is open on ``[start, end)`` while submission is accepted on
``[start, end]``: an answer sheet arriving exactly at the closing instant still
counts, but the exam content is no longer served at that instant.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
import math

from exam_app.core.models import Exam, ExamWindow

_ONE_SECOND = timedelta(seconds=1)


def as_utc(value: datetime) -> datetime:
    """Interpret naive timestamps as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def duration_of(exam: Exam) -> timedelta:
    """Return the exam duration, treating absent or non-numeric values as zero."""
    minutes = exam.duration_minutes
    if isinstance(minutes, bool):
        return timedelta(0)
    if isinstance(minutes, str):
        try:
            minutes = float(minutes)
        except ValueError:
            return timedelta(0)
    if not isinstance(minutes, (int, float)) or not math.isfinite(minutes):
        return timedelta(0)
    return timedelta(minutes=minutes)


def window_bounds(exam: Exam) -> tuple[datetime, datetime] | None:
    """Return ``(start, end)`` or ``None`` when the exam has no usable start."""
    if exam.start_time is None:
        return None
    start = as_utc(exam.start_time)
    return start, start + duration_of(exam)


def view_window(exam: Exam, now: datetime) -> ExamWindow:
    """Describe view eligibility, including a countdown for client sync."""
    now = as_utc(now)
    bounds = window_bounds(exam)
    if bounds is None:
        return ExamWindow(start=None, end=None, open=False, seconds_remaining=0, server_now=now)

    start, end = bounds
    return ExamWindow(
        start=start,
        end=end,
        open=start <= now < end,
        seconds_remaining=max(0, (end - now) // _ONE_SECOND),
        server_now=now,
    )


def is_submission_open(exam: Exam, now: datetime) -> bool:
    bounds = window_bounds(exam)
    if bounds is None:
        return False
    start, end = bounds
    return start <= as_utc(now) <= end
