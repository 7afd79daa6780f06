# routes/teacher_overview.py
from fastapi import APIRouter, Depends
from typing import List
import logging

from models.gradebook import GradebookRecord
from .auth import require_teacher
from .backend import BackendClient, BackendError, get_backend, to_http_exception
from . import grading

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/portal/teacher", tags=["teacher"])

RECENT_ACTIVITY_LIMIT = 5

def recent_activity(gradebook: List[GradebookRecord], limit: int = RECENT_ACTIVITY_LIMIT) -> List[dict]:
    """Most recent submissions across all students."""
    activities = []
    for record in gradebook:
        for entry in record.assignments:
            if entry.submitted_at is None:
                continue
            activities.append({
                "id": f"{record.student.id}-{entry.assignment_title}",
                "type": "submission",
                "student": record.student.full_name,
                "assignment": entry.assignment_title,
                "score": entry.score,
                "grade": grading.describe_score(entry.score),
                "timestamp": entry.submitted_at,
            })
    activities.sort(key=lambda a: a["timestamp"], reverse=True)
    return activities[:limit]

@router.get("/overview")
async def teacher_overview(current_user: dict = Depends(require_teacher),
                           backend: BackendClient = Depends(get_backend)):
    try:
        students = await backend.get_students()
        assignments = await backend.get_assignments()
        gradebook = await backend.get_gradebook()
    except BackendError as e:
        raise to_http_exception(e)

    class_stats = grading.gradebook_stats(gradebook)
    return {
        "stats": {
            "total_students": len(students),
            "total_assignments": len(assignments),
            "completed_assignments": class_stats["total_submissions"],
            "average_grade": class_stats["average_grade"],
        },
        "recent_activity": recent_activity(gradebook),
    }
