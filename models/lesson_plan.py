# models/lesson_plan.py
from pydantic import BaseModel, field_validator
from datetime import datetime
from typing import Optional
from models.timestamps import as_utc

class LessonPlan(BaseModel):
    id: str
    title: str
    subject: str
    grade_level: str
    topic: str
    content: str
    created_at: Optional[datetime] = None

    _utc_created_at = field_validator("created_at")(as_utc)
