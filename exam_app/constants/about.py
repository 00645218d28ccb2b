"""Static metadata describing TimedExam."""

APP_NAME = "TimedExam"
APP_VERSION = "0.1"
APP_DESCRIPTION = (
    "TimedExam runs scheduled two-part true/false exams. Organizers import a fixed "
    "question set, students answer while the window is open, and results are "
    "re-scored from the raw answers on every request."
)
