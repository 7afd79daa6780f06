# routes/assignments.py
from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel
from typing import List
import logging

from models.generation import GRADE_LEVELS, SUBJECTS, GenerateRequest
from .auth import require_teacher
from .backend import BackendClient, BackendError, get_backend, to_http_exception

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/portal/teacher/assignments", tags=["assignments"])

class AssignSelection(BaseModel):
    assignment_id: str
    student_ids: List[str] = []

def check_generate_form(form: GenerateRequest) -> None:
    """Shared by the assignment and lesson plan generators."""
    if not form.is_complete():
        raise HTTPException(400, "Please fill in all fields")
    if form.subject not in SUBJECTS:
        raise HTTPException(400, f"Invalid subject. Must be one of {', '.join(SUBJECTS)}")
    if form.grade_level not in GRADE_LEVELS:
        raise HTTPException(400, f"Invalid grade level. Must be one of {', '.join(GRADE_LEVELS)}")

@router.get("")
async def get_assignments(current_user: dict = Depends(require_teacher),
                          backend: BackendClient = Depends(get_backend)):
    try:
        assignments = await backend.get_assignments()
        students = await backend.get_students()
    except BackendError as e:
        raise to_http_exception(e)
    return {
        "assignments": assignments,
        "students": students,
        "subjects": SUBJECTS,
        "grade_levels": GRADE_LEVELS,
    }

@router.post("/generate")
async def generate_assignment(form: GenerateRequest,
                              current_user: dict = Depends(require_teacher),
                              backend: BackendClient = Depends(get_backend)):
    check_generate_form(form)
    logger.info(f"Generating assignment: {form.subject}, {form.grade_level}, {form.topic}")
    try:
        assignment = await backend.generate_assignment(form)
        assignments = await backend.get_assignments()
    except BackendError as e:
        raise to_http_exception(e)
    return {
        "message": "Assignment generated successfully!",
        "assignment": assignment,
        "assignments": assignments,
    }

@router.post("/assign")
async def assign_assignment(selection: AssignSelection,
                            current_user: dict = Depends(require_teacher),
                            backend: BackendClient = Depends(get_backend)):
    # Toggling a student twice in the picker must not assign twice.
    student_ids = list(dict.fromkeys(selection.student_ids))
    if not student_ids:
        raise HTTPException(400, "Please select at least one student")
    try:
        await backend.assign_assignment(selection.assignment_id, student_ids)
    except BackendError as e:
        raise to_http_exception(e)
    logger.info(f"Assigned {selection.assignment_id} to {len(student_ids)} student(s)")
    return {"message": f"Assignment assigned to {len(student_ids)} student(s)"}
