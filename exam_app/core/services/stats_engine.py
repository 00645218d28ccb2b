"""Service deriving rankings and cohort statistics for an exam."""

from __future__ import annotations

from collections.abc import Iterable
import math

from exam_app.constants.exam_constants import MIN_BUCKET_WIDTH, PART_COUNT, TARGET_BUCKET_COUNT
from exam_app.core.models import Exam, ExamStats, RankingEntry, ScoreBucket, Submission
from exam_app.core.scoring import score_submission


def compute_exam_stats(exam: Exam, submissions: Iterable[Submission]) -> ExamStats:
    """Re-score every submission and aggregate the results.

    Submissions are expected in arrival order; ties on the total keep that
    order because the ranking sort is stable.
    """
    question_count = exam.question_count()
    question_totals = [0.0] * question_count
    question_counts = [0] * question_count
    entries: list[RankingEntry] = []

    for submission in submissions:
        score = score_submission(exam, submission.parts)
        entries.append(
            RankingEntry(
                student_id=submission.student.id,
                name=submission.student.name,
                total=score.total,
                parts=list(score.parts),
                submitted_at=submission.submitted_at,
            )
        )
        for index, value in enumerate(score.per_question[:question_count]):
            question_totals[index] += value
            question_counts[index] += 1

    rankings = sorted(entries, key=lambda entry: entry.total, reverse=True)
    participants = len(rankings)

    return ExamStats(
        rankings=rankings,
        total_participants=participants,
        average_total=_mean([entry.total for entry in rankings]),
        part_averages=[
            _mean([entry.parts[index] for entry in rankings]) for index in range(PART_COUNT)
        ],
        per_question_avg=[
            total / count if count else 0.0
            for total, count in zip(question_totals, question_counts)
        ],
        score_distribution=build_score_distribution(
            question_count, [entry.total for entry in rankings]
        ),
    )


def bucket_width(max_score: int) -> int:
    return max(MIN_BUCKET_WIDTH, math.ceil(max_score / TARGET_BUCKET_COUNT))


def build_score_distribution(max_score: int, totals: Iterable[float]) -> list[ScoreBucket]:
    """Bin totals into half-open buckets, closing the last one at ``max_score``.

    A total equal to a bucket boundary lands in the bucket that starts there;
    only ``max_score`` itself falls into the final bucket's closed end.
    """
    width = bucket_width(max_score)
    buckets: list[ScoreBucket] = []
    start = 0
    while start < max_score + width:
        end = min(max_score, start + width)
        buckets.append(ScoreBucket(start=start, end=end, label=f"{start}-{end}"))
        if end == max_score:
            break
        start += width

    for total in totals:
        bucket = _find_bucket(buckets, max_score, total)
        if bucket is not None:
            bucket.count += 1
    return buckets


def _find_bucket(buckets: list[ScoreBucket], max_score: int, total: float) -> ScoreBucket | None:
    for bucket in buckets:
        if bucket.start <= total < bucket.end:
            return bucket
        if bucket.end == max_score and total == max_score:
            return bucket
    return None


def _mean(values: list[float]) -> float:
    if not values:
        return 0.0
    return math.fsum(values) / len(values)
