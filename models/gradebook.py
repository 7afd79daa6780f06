# models/gradebook.py
from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import List, Optional
from models.timestamps import as_utc
from models.student import Student

class GradebookEntry(BaseModel):
    assignment_title: str
    subject: str
    score: Optional[float] = Field(None, ge=0, le=100)
    submitted_at: Optional[datetime] = None

    _utc_submitted_at = field_validator("submitted_at")(as_utc)

class GradebookRecord(BaseModel):
    student: Student
    assignments: List[GradebookEntry] = []
