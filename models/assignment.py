# models/assignment.py
from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import List, Optional
from models.timestamps import as_utc

class Question(BaseModel):
    question: str
    options: List[str]
    correct_answer: int

class Assignment(BaseModel):
    id: str
    title: str
    subject: str
    grade_level: str
    topic: str
    reading_passage: Optional[str] = None
    questions: List[Question] = []
    created_at: Optional[datetime] = None

    _utc_created_at = field_validator("created_at")(as_utc)

class StudentAssignment(BaseModel):
    student_assignment_id: str
    assignment: Assignment
    completed: bool = False
    score: Optional[float] = Field(None, ge=0, le=100)
    submitted_at: Optional[datetime] = None
    assigned_at: datetime

    _utc_timestamps = field_validator("submitted_at", "assigned_at")(as_utc)

class SubmitRequest(BaseModel):
    student_assignment_id: str
    answers: List[int]

class SubmitResult(BaseModel):
    score: float = Field(..., ge=0, le=100)

class AssignRequest(BaseModel):
    assignment_id: str
    student_ids: List[str]
