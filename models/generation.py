# models/generation.py
from pydantic import BaseModel, field_validator

SUBJECTS = ["Math", "Reading", "Science", "History", "English"]

GRADE_LEVELS = [
    "1st Grade",
    "2nd Grade",
    "3rd Grade",
    "4th Grade",
    "5th Grade",
    "6th Grade",
    "7th Grade",
    "8th Grade",
]

class GenerateRequest(BaseModel):
    """Form shared by the assignment and lesson plan generators."""
    subject: str = ""
    grade_level: str = ""
    topic: str = ""

    @field_validator("topic")
    @classmethod
    def strip_topic(cls, value: str) -> str:
        return value.strip()

    def is_complete(self) -> bool:
        return bool(self.subject and self.grade_level and self.topic)
