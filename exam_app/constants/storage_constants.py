"""Storage defaults for the file-backed exam store."""

DEFAULT_DATA_DIR: str = "data"
EXAMS_FILE_NAME: str = "exams.json"
SUBMISSIONS_FILE_NAME: str = "submissions.json"
