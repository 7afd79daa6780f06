# routes/student_grades.py
from fastapi import APIRouter, Depends
import logging

from .auth import require_student
from .backend import BackendClient, BackendError, get_backend, to_http_exception
from .student_assignments import matches_search
from . import grading

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/portal/student", tags=["student"])

@router.get("/grades")
async def student_grades(search: str = "",
                         current_user: dict = Depends(require_student),
                         backend: BackendClient = Depends(get_backend)):
    try:
        assignments = await backend.get_student_assignments()
    except BackendError as e:
        raise to_http_exception(e)

    completed = grading.graded(assignments)
    stats = grading.score_stats(a.score for a in completed)

    visible = [a for a in completed if matches_search(a, search, fields=("title", "subject"))]
    visible.sort(key=lambda a: a.submitted_at.timestamp() if a.submitted_at else 0, reverse=True)

    return {
        "stats": {
            "total_completed": stats["count"],
            "average_grade": stats["average"],
            "highest_grade": stats["highest"],
            "lowest_grade": stats["lowest"],
        },
        "performance": grading.performance_message(stats["average"]) if stats["count"] else None,
        "grades": [
            {
                "student_assignment_id": a.student_assignment_id,
                "title": a.assignment.title,
                "subject": a.assignment.subject,
                "topic": a.assignment.topic,
                "submitted_at": a.submitted_at,
                "score": grading.round_half_up(a.score),
                "badge": grading.grade_badge(a.score),
            }
            for a in visible
        ],
    }
