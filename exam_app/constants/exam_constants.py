"""Exam shape and scoring constants shared across core and server layers."""

PART_COUNT: int = 2
QUESTIONS_PER_PART: int = 50
STATEMENTS_PER_QUESTION: int = 4
DEFAULT_PART_NAMES: tuple[str, ...] = ("Part A", "Part B")

# Matched slots -> question score. Anything below two matches scores zero.
PARTIAL_CREDIT: dict[int, float] = {4: 1.0, 3: 0.6, 2: 0.2}

MIN_BUCKET_WIDTH: int = 5
TARGET_BUCKET_COUNT: int = 10
