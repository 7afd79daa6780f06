# models/student.py
from pydantic import BaseModel

class Student(BaseModel):
    id: str
    first_name: str
    last_name: str
    username: str

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

class StudentCreate(BaseModel):
    first_name: str
    last_name: str
    username: str
    password: str
