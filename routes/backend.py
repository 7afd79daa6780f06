# routes/backend.py
"""
Client for the classroom REST backend.

Every call forwards the caller's bearer token and validates the response
against the schemas in ``models``. Failures are raised as ``BackendError``
subclasses carrying the backend's own ``detail`` text when it sends one.
"""
import logging
import os
from typing import Any, List, Optional

import httpx
from dotenv import load_dotenv
from fastapi import Depends, HTTPException
from pydantic import TypeAdapter, ValidationError

from models.assignment import Assignment, AssignRequest, StudentAssignment, SubmitRequest, SubmitResult
from models.generation import GenerateRequest
from models.gradebook import GradebookRecord
from models.lesson_plan import LessonPlan
from models.message import Conversation, Message, MessageCreate
from models.student import Student, StudentCreate
from .auth import get_current_user

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

load_dotenv()
BACKEND_URL = os.getenv("BACKEND_URL", "http://localhost:8001")
BACKEND_TIMEOUT = float(os.getenv("BACKEND_TIMEOUT", "30"))


class BackendError(Exception):
    status_code = 500

    def __init__(self, detail: str, status_code: Optional[int] = None):
        super().__init__(detail)
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code


class BackendUnavailableError(BackendError):
    status_code = 502


class BackendNotFoundError(BackendError):
    status_code = 404


class BackendValidationError(BackendError):
    status_code = 400


def _error_detail(response: httpx.Response, default: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return default
    detail = body.get("detail") if isinstance(body, dict) else None
    if not detail:
        return default
    return detail if isinstance(detail, str) else str(detail)


class BackendClient:
    def __init__(self, token: str, base_url: str = BACKEND_URL,
                 transport: Optional[httpx.AsyncBaseTransport] = None,
                 timeout: float = BACKEND_TIMEOUT):
        self.token = token
        self.base_url = base_url.rstrip("/") + "/api"
        self.transport = transport
        self.timeout = timeout

    async def _request(self, method: str, path: str, failure: str, json: Any = None) -> Any:
        url = f"{self.base_url}{path}"
        logger.info(f"{method} {path}")
        try:
            async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
                response = await client.request(
                    method, url, json=json,
                    headers={"Authorization": f"Bearer {self.token}"},
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            detail = _error_detail(e.response, failure)
            logger.error(f"Backend error on {method} {path}: {status} {detail}")
            if status == 404:
                raise BackendNotFoundError(detail)
            if 400 <= status < 500:
                raise BackendValidationError(detail, status)
            raise BackendUnavailableError(detail)
        except httpx.RequestError as e:
            logger.error(f"Backend request error on {method} {path}: {str(e)}")
            raise BackendUnavailableError(failure)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            logger.error(f"Backend sent a non-JSON body on {method} {path}")
            raise BackendUnavailableError(failure)

    def _parse(self, schema, data: Any, failure: str):
        try:
            return TypeAdapter(schema).validate_python(data)
        except ValidationError as e:
            logger.error(f"Unexpected backend payload: {str(e)}")
            raise BackendUnavailableError(failure)

    # Student

    async def get_student_assignments(self) -> List[StudentAssignment]:
        failure = "Failed to load assignments"
        data = await self._request("GET", "/student/assignments", failure)
        return self._parse(List[StudentAssignment], data, failure)

    async def submit_assignment(self, student_assignment_id: str, answers: List[int]) -> SubmitResult:
        failure = "Failed to submit assignment"
        body = SubmitRequest(student_assignment_id=student_assignment_id, answers=answers)
        data = await self._request("POST", "/student/assignments/submit", failure, json=body.model_dump())
        return self._parse(SubmitResult, data, failure)

    # Teacher

    async def get_assignments(self) -> List[Assignment]:
        failure = "Failed to load assignments"
        data = await self._request("GET", "/assignments", failure)
        return self._parse(List[Assignment], data, failure)

    async def generate_assignment(self, form: GenerateRequest) -> Assignment:
        failure = "Failed to generate assignment"
        data = await self._request("POST", "/assignments/generate", failure, json=form.model_dump())
        return self._parse(Assignment, data, failure)

    async def assign_assignment(self, assignment_id: str, student_ids: List[str]) -> Any:
        body = AssignRequest(assignment_id=assignment_id, student_ids=student_ids)
        return await self._request("POST", "/assignments/assign", "Failed to assign assignment",
                                   json=body.model_dump())

    async def get_students(self) -> List[Student]:
        failure = "Failed to load students"
        data = await self._request("GET", "/students", failure)
        return self._parse(List[Student], data, failure)

    async def create_student(self, student: StudentCreate) -> Student:
        failure = "Failed to add student"
        data = await self._request("POST", "/students", failure, json=student.model_dump())
        return self._parse(Student, data, failure)

    async def delete_student(self, student_id: str) -> None:
        await self._request("DELETE", f"/students/{student_id}", "Failed to delete student")

    async def get_gradebook(self) -> List[GradebookRecord]:
        failure = "Failed to load gradebook"
        data = await self._request("GET", "/gradebook", failure)
        return self._parse(List[GradebookRecord], data, failure)

    async def get_lesson_plans(self) -> List[LessonPlan]:
        failure = "Failed to load lesson plans"
        data = await self._request("GET", "/lesson-plans", failure)
        return self._parse(List[LessonPlan], data, failure)

    async def generate_lesson_plan(self, form: GenerateRequest) -> LessonPlan:
        failure = "Failed to generate lesson plan"
        data = await self._request("POST", "/lesson-plans/generate", failure, json=form.model_dump())
        return self._parse(LessonPlan, data, failure)

    # Messaging

    async def get_conversations(self) -> List[Conversation]:
        failure = "Failed to load conversations"
        data = await self._request("GET", "/messages", failure)
        return self._parse(List[Conversation], data, failure)

    async def get_messages(self, contact_id: str) -> List[Message]:
        failure = "Failed to load messages"
        data = await self._request("GET", f"/messages/{contact_id}", failure)
        return self._parse(List[Message], data, failure)

    async def send_message(self, message: MessageCreate) -> Any:
        return await self._request("POST", "/messages", "Failed to send message", json=message.model_dump())


async def get_backend(current_user: dict = Depends(get_current_user)) -> BackendClient:
    return BackendClient(current_user["token"])


def to_http_exception(error: BackendError, redirect: Optional[str] = None) -> HTTPException:
    """Turn a backend failure into the notification returned to the browser."""
    headers = {"X-Redirect": redirect} if redirect else None
    return HTTPException(status_code=error.status_code, detail=error.detail, headers=headers)
