# routes/students.py
from fastapi import APIRouter, HTTPException, Depends
from typing import List
import logging

from models.student import Student, StudentCreate
from .auth import require_teacher
from .backend import BackendClient, BackendError, get_backend, to_http_exception

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/portal/teacher", tags=["students"])

def filter_students(students: List[Student], search: str = "") -> List[Student]:
    term = search.lower()
    return [s for s in students if term in f"{s.first_name} {s.last_name} {s.username}".lower()]

@router.get("/students")
async def get_students(search: str = "",
                       current_user: dict = Depends(require_teacher),
                       backend: BackendClient = Depends(get_backend)):
    try:
        students = await backend.get_students()
    except BackendError as e:
        raise to_http_exception(e)
    return {"students": filter_students(students, search), "total": len(students)}

@router.post("/students")
async def add_student(student: StudentCreate,
                      current_user: dict = Depends(require_teacher),
                      backend: BackendClient = Depends(get_backend)):
    if not all(v.strip() for v in (student.first_name, student.last_name, student.username, student.password)):
        raise HTTPException(400, "Please fill in all fields")
    logger.info(f"Teacher {current_user['id']} adding student {student.username}")
    try:
        created = await backend.create_student(student)
        students = await backend.get_students()
    except BackendError as e:
        raise to_http_exception(e)
    return {"message": "Student added successfully!", "student": created, "students": students}

@router.delete("/students/{student_id}")
async def delete_student(student_id: str,
                         current_user: dict = Depends(require_teacher),
                         backend: BackendClient = Depends(get_backend)):
    logger.info(f"Teacher {current_user['id']} deleting student {student_id}")
    try:
        await backend.delete_student(student_id)
        students = await backend.get_students()
    except BackendError as e:
        raise to_http_exception(e)
    return {"message": "Student deleted successfully", "students": students}
