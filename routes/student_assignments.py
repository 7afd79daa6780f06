# routes/student_assignments.py
"""
Student dashboard: overview, assignment list and the assignment player.

Draft answers live in the draft store until submission. After a successful
submit the assignment list is fetched again and the refreshed record is
returned, so the score shown always comes from the backend.
"""
from fastapi import APIRouter, HTTPException, Depends
from typing import List, Optional
import logging

from models.answer import AnswerChange
from models.assignment import StudentAssignment
from .answer_sheet import DraftStore, SubmissionError, get_drafts, validate_submission
from .auth import require_student
from .backend import BackendClient, BackendError, get_backend, to_http_exception
from . import grading

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/portal/student", tags=["student"])

ASSIGNMENT_LIST_VIEW = "/student/assignments"
STATUS_FILTERS = {"all", "pending", "completed"}


def matches_search(assignment: StudentAssignment, search: str, fields=("title", "subject", "topic")) -> bool:
    term = search.lower()
    return any(term in getattr(assignment.assignment, field).lower() for field in fields)


def filter_assignments(assignments: List[StudentAssignment], search: str = "", status: str = "all"):
    """Search and status filter; pending first, then most recently assigned."""
    result = [a for a in assignments if matches_search(a, search)]
    if status == "pending":
        result = [a for a in result if not a.completed]
    elif status == "completed":
        result = [a for a in result if a.completed]
    result.sort(key=lambda a: a.assigned_at, reverse=True)
    result.sort(key=lambda a: a.completed)
    return result


def find_assignment(assignments: List[StudentAssignment], student_assignment_id: str) -> Optional[StudentAssignment]:
    return next((a for a in assignments if a.student_assignment_id == student_assignment_id), None)


def assignment_view(assignment: StudentAssignment, answers: Optional[dict] = None) -> dict:
    data = assignment.model_dump(mode="json")
    if not assignment.completed:
        # Correct answers are only revealed once the assignment is graded.
        for question in data["assignment"]["questions"]:
            question.pop("correct_answer", None)
    data["grade"] = grading.describe_score(assignment.score) if assignment.completed else None
    data["answers"] = {str(k): v for k, v in (answers or {}).items()}
    data["answered_count"] = len(answers or {})
    data["total_questions"] = len(assignment.assignment.questions)
    return data


async def load_assignment(backend: BackendClient, student_assignment_id: str) -> StudentAssignment:
    try:
        assignments = await backend.get_student_assignments()
    except BackendError as e:
        raise to_http_exception(e, redirect=ASSIGNMENT_LIST_VIEW)
    assignment = find_assignment(assignments, student_assignment_id)
    if assignment is None:
        logger.warning(f"Student assignment {student_assignment_id} not found")
        raise HTTPException(status_code=404, detail="Assignment not found",
                            headers={"X-Redirect": ASSIGNMENT_LIST_VIEW})
    return assignment


@router.get("/overview")
async def student_overview(current_user: dict = Depends(require_student),
                           backend: BackendClient = Depends(get_backend)):
    try:
        assignments = await backend.get_student_assignments()
    except BackendError as e:
        raise to_http_exception(e)
    stats = grading.student_stats(assignments)
    stats["average_grade_display"] = f"{stats['average_grade']}%" if stats["average_grade"] > 0 else "N/A"
    return {
        "stats": stats,
        "assignments": [assignment_view(a) for a in filter_assignments(assignments)],
    }


@router.get("/assignments")
async def list_assignments(search: str = "", status: str = "all",
                           current_user: dict = Depends(require_student),
                           backend: BackendClient = Depends(get_backend)):
    if status not in STATUS_FILTERS:
        raise HTTPException(400, f"Invalid status. Must be one of {', '.join(sorted(STATUS_FILTERS))}")
    try:
        assignments = await backend.get_student_assignments()
    except BackendError as e:
        raise to_http_exception(e)
    return [assignment_view(a) for a in filter_assignments(assignments, search, status)]


@router.get("/assignments/{student_assignment_id}")
async def get_assignment(student_assignment_id: str,
                         current_user: dict = Depends(require_student),
                         backend: BackendClient = Depends(get_backend),
                         drafts: DraftStore = Depends(get_drafts)):
    assignment = await load_assignment(backend, student_assignment_id)
    answers = {} if assignment.completed else drafts.peek(current_user["id"], student_assignment_id)
    return assignment_view(assignment, answers)


@router.put("/assignments/{student_assignment_id}/answers")
async def change_answer(student_assignment_id: str, change: AnswerChange,
                        current_user: dict = Depends(require_student),
                        backend: BackendClient = Depends(get_backend),
                        drafts: DraftStore = Depends(get_drafts)):
    assignment = await load_assignment(backend, student_assignment_id)
    if assignment.completed:
        logger.warning(f"Answer change rejected for completed {student_assignment_id}")
        raise HTTPException(409, "Assignment already completed")
    sheet = drafts.get(current_user["id"], student_assignment_id)
    try:
        sheet.set_answer(change.question_index, change.option_index)
    except SubmissionError as e:
        logger.warning(f"Answer change rejected for {student_assignment_id}: {e.detail}")
        raise HTTPException(409, e.detail)
    return {
        "answers": {str(k): v for k, v in sheet.answers.items()},
        "answered_count": sheet.answered_count,
        "total_questions": len(assignment.assignment.questions),
    }


@router.post("/assignments/{student_assignment_id}/submit")
async def submit_assignment(student_assignment_id: str,
                            current_user: dict = Depends(require_student),
                            backend: BackendClient = Depends(get_backend),
                            drafts: DraftStore = Depends(get_drafts)):
    assignment = await load_assignment(backend, student_assignment_id)
    if assignment.completed:
        raise HTTPException(409, "Assignment already completed")

    answers = drafts.peek(current_user["id"], student_assignment_id)
    try:
        ordered = validate_submission(answers, len(assignment.assignment.questions))
    except SubmissionError as e:
        logger.warning(f"Submission rejected for {student_assignment_id}: {e.detail}")
        raise HTTPException(400, e.detail)

    # No answer changes while the submission is in flight.
    sheet = drafts.get(current_user["id"], student_assignment_id)
    sheet.lock()
    try:
        result = await backend.submit_assignment(student_assignment_id, ordered)
    except BackendError as e:
        sheet.unlock()
        raise to_http_exception(e)
    logger.info(f"Student {current_user['id']} submitted {student_assignment_id}")
    drafts.discard(current_user["id"], student_assignment_id)

    refreshed = await load_assignment(backend, student_assignment_id)
    return {
        "message": f"Assignment submitted! Score: {grading.round_half_up(result.score)}%",
        "score": result.score,
        "assignment": assignment_view(refreshed),
    }
