# routes/gradebook.py
from fastapi import APIRouter, Depends
from typing import List
import logging

from models.gradebook import GradebookRecord
from .auth import require_teacher
from .backend import BackendClient, BackendError, get_backend, to_http_exception
from . import grading

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/portal/teacher", tags=["gradebook"])

def filter_records(records: List[GradebookRecord], search: str = "") -> List[GradebookRecord]:
    term = search.lower()
    return [r for r in records if term in r.student.full_name.lower()]

@router.get("/gradebook")
async def get_gradebook(search: str = "",
                        current_user: dict = Depends(require_teacher),
                        backend: BackendClient = Depends(get_backend)):
    try:
        records = await backend.get_gradebook()
    except BackendError as e:
        raise to_http_exception(e)

    # Class statistics cover every student, not only the search matches.
    stats = grading.gradebook_stats(records)
    return {
        "stats": stats,
        "students": [
            {
                "student": r.student.model_dump(),
                "average": grading.record_average(r),
                "assignments": [
                    {
                        **entry.model_dump(mode="json"),
                        "badge": grading.grade_badge(entry.score) if entry.score is not None else None,
                    }
                    for entry in r.assignments
                ],
            }
            for r in filter_records(records, search)
        ],
    }
