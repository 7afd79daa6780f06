# routes/grading.py
"""
Score banding and aggregate statistics shared by the student and teacher views.

Scores are percentages computed by the backend at submission time. Nothing here
recomputes a score; it only derives display data from the scores it is given.
"""
import math
from typing import Iterable, List, Optional

from models.assignment import StudentAssignment
from models.gradebook import GradebookRecord

# Lower bound (inclusive), letter, color tier; best to worst.
GRADE_BANDS = [
    (90, "A", "green"),
    (80, "B", "blue"),
    (70, "C", "yellow"),
    (60, "D", "orange"),
    (0, "F", "red"),
]

PERFORMANCE_MESSAGES = {
    "A": ("Excellent work! Keep it up!", "yellow"),
    "B": ("Great job! You're doing well!", "blue"),
    "C": ("Good progress! Room for improvement.", "yellow"),
    "D": ("Keep working hard!", "orange"),
    "F": ("Don't give up! Ask for help if needed.", "red"),
}


def _band(score: float):
    for lower, letter, color in GRADE_BANDS:
        if score >= lower:
            return letter, color
    # Below zero never comes from the backend; treat it as the lowest band.
    return GRADE_BANDS[-1][1], GRADE_BANDS[-1][2]


def letter_grade(score: float) -> str:
    return _band(score)[0]


def grade_color(score: float) -> str:
    return _band(score)[1]


def grade_badge(score: float) -> dict:
    letter, color = _band(score)
    return {"text": letter, "color": color}


def performance_message(average: float) -> dict:
    message, color = PERFORMANCE_MESSAGES[letter_grade(average)]
    return {"message": message, "color": color}


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def average(scores: Iterable[float]) -> int:
    """Rounded arithmetic mean; 0 for an empty collection."""
    scores = list(scores)
    if not scores:
        return 0
    return round_half_up(sum(scores) / len(scores))


def score_stats(scores: Iterable[float]) -> dict:
    scores = list(scores)
    if not scores:
        return {"count": 0, "average": 0, "highest": 0, "lowest": 0}
    return {
        "count": len(scores),
        "average": average(scores),
        "highest": max(scores),
        "lowest": min(scores),
    }


def graded(assignments: Iterable[StudentAssignment]) -> List[StudentAssignment]:
    """Completed assignments that carry a score."""
    return [a for a in assignments if a.completed and a.score is not None]


def student_stats(assignments: List[StudentAssignment]) -> dict:
    completed = [a for a in assignments if a.completed]
    scores = [a.score for a in graded(assignments)]
    return {
        "total_assignments": len(assignments),
        "completed_assignments": len(completed),
        "pending_assignments": len(assignments) - len(completed),
        "average_grade": average(scores),
    }


def record_average(record: GradebookRecord) -> int:
    return average(e.score for e in record.assignments if e.score is not None)


def gradebook_stats(records: List[GradebookRecord]) -> dict:
    total_submissions = 0
    scores = []
    for record in records:
        total_submissions += len(record.assignments)
        scores.extend(e.score for e in record.assignments if e.score is not None)
    return {
        "total_students": len(records),
        "total_submissions": total_submissions,
        "average_grade": average(scores),
        "completion_rate": completion_rate(len(scores), total_submissions),
    }


def completion_rate(graded_count: int, total: int) -> int:
    if total <= 0:
        return 0
    return round_half_up(graded_count / total * 100)


def describe_score(score: Optional[float]) -> Optional[dict]:
    """Rounded percentage with its letter and color, or None when ungraded."""
    if score is None:
        return None
    letter, color = _band(score)
    return {"score": round_half_up(score), "letter": letter, "color": color}
