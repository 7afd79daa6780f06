# routes/lesson_plans.py
from fastapi import APIRouter, Depends
import logging

from models.generation import GRADE_LEVELS, SUBJECTS, GenerateRequest
from .assignments import check_generate_form
from .auth import require_teacher
from .backend import BackendClient, BackendError, get_backend, to_http_exception

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/portal/teacher/lesson-plans", tags=["lesson-plans"])

@router.get("")
async def get_lesson_plans(current_user: dict = Depends(require_teacher),
                           backend: BackendClient = Depends(get_backend)):
    try:
        lesson_plans = await backend.get_lesson_plans()
    except BackendError as e:
        raise to_http_exception(e)
    return {"lesson_plans": lesson_plans, "subjects": SUBJECTS, "grade_levels": GRADE_LEVELS}

@router.post("/generate")
async def generate_lesson_plan(form: GenerateRequest,
                               current_user: dict = Depends(require_teacher),
                               backend: BackendClient = Depends(get_backend)):
    check_generate_form(form)
    logger.info(f"Generating lesson plan: {form.subject}, {form.grade_level}, {form.topic}")
    try:
        lesson_plan = await backend.generate_lesson_plan(form)
        lesson_plans = await backend.get_lesson_plans()
    except BackendError as e:
        raise to_http_exception(e)
    return {
        "message": "Lesson plan generated successfully!",
        "lesson_plan": lesson_plan,
        "lesson_plans": lesson_plans,
        "expanded_plan": lesson_plan.id,
    }
