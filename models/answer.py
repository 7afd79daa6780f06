# models/answer.py
from pydantic import BaseModel, Field

class AnswerChange(BaseModel):
    question_index: int
    option_index: int = Field(..., ge=0)
