from datetime import datetime, timedelta, timezone

from exam_app.core.time_window import duration_of, is_submission_open, view_window

from conftest import START


def test_view_window_is_half_open(make_exam):
    exam = make_exam(duration_minutes=60)

    assert view_window(exam, START).open is True
    assert view_window(exam, START + timedelta(minutes=59, seconds=59)).open is True
    assert view_window(exam, START + timedelta(minutes=60)).open is False
    assert view_window(exam, START - timedelta(milliseconds=1)).open is False


def test_submission_window_includes_closing_instant(make_exam):
    exam = make_exam(duration_minutes=60)

    assert is_submission_open(exam, START) is True
    assert is_submission_open(exam, START + timedelta(minutes=60)) is True
    assert is_submission_open(exam, START + timedelta(minutes=60, milliseconds=1)) is False
    assert is_submission_open(exam, START - timedelta(milliseconds=1)) is False


def test_view_window_reports_countdown_and_server_time(make_exam):
    exam = make_exam(duration_minutes=60)
    now = START + timedelta(minutes=59, seconds=59, milliseconds=500)

    window = view_window(exam, now)

    assert window.start == START
    assert window.end == START + timedelta(hours=1)
    assert window.seconds_remaining == 0
    assert window.server_now == now
    assert view_window(exam, START).seconds_remaining == 3600
    assert view_window(exam, START + timedelta(seconds=0.4)).seconds_remaining == 3599


def test_seconds_remaining_clamps_at_zero(make_exam):
    exam = make_exam(duration_minutes=60)

    window = view_window(exam, START + timedelta(hours=3))

    assert window.open is False
    assert window.seconds_remaining == 0


def test_missing_or_non_numeric_duration_collapses_window(make_exam):
    for duration in (None, "soon", [], float("nan")):
        exam = make_exam(duration_minutes=duration)
        assert duration_of(exam) == timedelta(0)
        assert view_window(exam, START).open is False
        assert is_submission_open(exam, START) is True
        assert is_submission_open(exam, START + timedelta(microseconds=1)) is False


def test_numeric_string_duration_is_accepted(make_exam):
    exam = make_exam(duration_minutes="30")

    assert duration_of(exam) == timedelta(minutes=30)


def test_naive_timestamps_are_treated_as_utc(make_exam):
    exam = make_exam()
    exam.start_time = datetime(2026, 3, 2, 9, 0)

    assert view_window(exam, datetime(2026, 3, 2, 9, 30)).open is True
    assert view_window(exam, START + timedelta(minutes=30)).open is True


def test_exam_without_start_is_never_open(make_exam):
    exam = make_exam()
    exam.start_time = None
    now = datetime.now(timezone.utc)

    window = view_window(exam, now)

    assert window.start is None
    assert window.end is None
    assert window.open is False
    assert window.seconds_remaining == 0
    assert is_submission_open(exam, now) is False
