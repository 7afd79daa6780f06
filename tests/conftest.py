"""
Shared fixtures for the portal tests.
The classroom backend is replaced by an in-memory fake served through
httpx.MockTransport, so no test touches the network.
"""
import copy
import json
import uuid

import httpx
import pytest
from fastapi.testclient import TestClient
from jose import jwt

from main import app
from routes.answer_sheet import DraftStore, get_drafts
from routes.auth import JWT_ALGORITHM, JWT_SECRET
from routes.backend import BackendClient, get_backend

QUESTIONS = [
    {"question": "What is 1/2 + 1/4?", "options": ["1/6", "3/4", "2/6"], "correct_answer": 1},
    {"question": "Which is larger?", "options": ["2/3", "1/3"], "correct_answer": 0},
    {"question": "Simplify 4/8", "options": ["2/3", "1/4", "1/2"], "correct_answer": 2},
]

STUDENT_ASSIGNMENTS = [
    {
        "student_assignment_id": "sa1",
        "assignment": {
            "id": "a1", "title": "Fractions Practice", "subject": "Math",
            "grade_level": "4th Grade", "topic": "Fractions", "questions": QUESTIONS,
        },
        "completed": False,
        "score": None,
        "submitted_at": None,
        "assigned_at": "2024-05-01T09:00:00",
    },
    {
        "student_assignment_id": "sa2",
        "assignment": {
            "id": "a2", "title": "Reading Comprehension", "subject": "Reading",
            "grade_level": "4th Grade", "topic": "Main Idea",
            "reading_passage": "The fox ran across the field.",
            "questions": [{"question": "Who ran?", "options": ["fox", "dog"], "correct_answer": 0}],
        },
        "completed": True,
        "score": 85,
        "submitted_at": "2024-04-20T10:00:00",
        "assigned_at": "2024-04-15T09:00:00",
    },
    {
        "student_assignment_id": "sa3",
        "assignment": {
            "id": "a3", "title": "Plant Cells", "subject": "Science",
            "grade_level": "4th Grade", "topic": "Cells",
            "questions": [{"question": "Plants have?", "options": ["walls", "none"], "correct_answer": 0}],
        },
        "completed": True,
        "score": 62.5,
        "submitted_at": "2024-04-25T10:00:00",
        "assigned_at": "2024-04-10T09:00:00",
    },
]

STUDENTS = [
    {"id": "alice", "first_name": "Alice", "last_name": "Johnson", "username": "ajohnson"},
    {"id": "ben", "first_name": "Ben", "last_name": "Carter", "username": "bcarter"},
    {"id": "cara", "first_name": "Cara", "last_name": "Diaz", "username": "cdiaz"},
]

GRADEBOOK = [
    {
        "student": STUDENTS[0],
        "assignments": [
            {"assignment_title": "Fractions Practice", "subject": "Math", "score": 90,
             "submitted_at": "2024-05-02T10:00:00"},
            {"assignment_title": "Plant Cells", "subject": "Science", "score": 70,
             "submitted_at": "2024-05-03T10:00:00"},
            {"assignment_title": "Reading Comprehension", "subject": "Reading", "score": None,
             "submitted_at": None},
        ],
    },
    {
        "student": STUDENTS[1],
        "assignments": [
            {"assignment_title": "Fractions Practice", "subject": "Math", "score": 55,
             "submitted_at": "2024-05-04T10:00:00"},
        ],
    },
    {"student": STUDENTS[2], "assignments": []},
]

LESSON_PLANS = [
    {"id": "lp1", "title": "Intro to Fractions", "subject": "Math", "grade_level": "3rd Grade",
     "topic": "Fractions", "content": "Warm up...", "created_at": "2024-04-01T08:00:00"},
]


class FakeBackend:
    """Minimal stand-in for the classroom REST backend."""

    def __init__(self, user_id="t1", user_name="Ms. Rivera"):
        self.user_id = user_id
        self.user_name = user_name
        self.student_assignments = copy.deepcopy(STUDENT_ASSIGNMENTS)
        self.students = copy.deepcopy(STUDENTS)
        self.gradebook = copy.deepcopy(GRADEBOOK)
        self.lesson_plans = copy.deepcopy(LESSON_PLANS)
        self.assignments = [sa["assignment"] for sa in copy.deepcopy(STUDENT_ASSIGNMENTS)]
        self.messages = []
        self.contacts = {s["id"]: f"{s['first_name']} {s['last_name']}" for s in STUDENTS}
        self.contacts["t1"] = "Ms. Rivera"
        self.requests = []
        self.failures = {}
        self.down = False

    def fail(self, method, path, status, detail=None):
        self.failures[(method, path)] = (status, {"detail": detail} if detail else {})

    def handle(self, request: httpx.Request) -> httpx.Response:
        method, path = request.method, request.url.path
        body = json.loads(request.content) if request.content else None
        self.requests.append((method, path, body))
        if self.down:
            raise httpx.ConnectError("Connection refused", request=request)
        if (method, path) in self.failures:
            status, payload = self.failures[(method, path)]
            return httpx.Response(status, json=payload)

        if path == "/api/student/assignments" and method == "GET":
            return httpx.Response(200, json=self.student_assignments)
        if path == "/api/student/assignments/submit" and method == "POST":
            return self._submit(body)
        if path == "/api/assignments" and method == "GET":
            return httpx.Response(200, json=self.assignments)
        if path == "/api/assignments/generate" and method == "POST":
            assignment = {"id": f"a{len(self.assignments) + 1}", "title": f"{body['topic']} Practice",
                          "questions": QUESTIONS, **body}
            self.assignments.insert(0, assignment)
            return httpx.Response(200, json=assignment)
        if path == "/api/assignments/assign" and method == "POST":
            return httpx.Response(200, json={"message": "Assignment assigned"})
        if path == "/api/students" and method == "GET":
            return httpx.Response(200, json=self.students)
        if path == "/api/students" and method == "POST":
            if any(s["username"] == body["username"] for s in self.students):
                return httpx.Response(400, json={"detail": "Username already exists"})
            student = {k: v for k, v in body.items() if k != "password"}
            student["id"] = str(uuid.uuid4())
            self.students.append(student)
            return httpx.Response(200, json=student)
        if path.startswith("/api/students/") and method == "DELETE":
            student_id = path.rsplit("/", 1)[1]
            if not any(s["id"] == student_id for s in self.students):
                return httpx.Response(404, json={"detail": "Student not found"})
            self.students = [s for s in self.students if s["id"] != student_id]
            return httpx.Response(200, json={"message": "Student deleted"})
        if path == "/api/gradebook" and method == "GET":
            return httpx.Response(200, json=self.gradebook)
        if path == "/api/lesson-plans" and method == "GET":
            return httpx.Response(200, json=self.lesson_plans)
        if path == "/api/lesson-plans/generate" and method == "POST":
            plan = {"id": f"lp{len(self.lesson_plans) + 1}", "title": f"{body['topic']} Lesson",
                    "content": "Objectives...", "created_at": "2024-05-10T08:00:00", **body}
            self.lesson_plans.insert(0, plan)
            return httpx.Response(200, json=plan)
        if path == "/api/messages" and method == "GET":
            return httpx.Response(200, json=self._conversations())
        if path == "/api/messages" and method == "POST":
            self.messages.append({
                "id": f"m{len(self.messages) + 1}",
                "sender_id": self.user_id,
                "recipient_id": body["recipient_id"],
                "content": body["content"],
                "sent_at": f"2024-05-10T12:{len(self.messages):02d}:00",
            })
            return httpx.Response(200, json={"message": "Message sent"})
        if path.startswith("/api/messages/") and method == "GET":
            contact_id = path.rsplit("/", 1)[1]
            thread = [m for m in self.messages if contact_id in (m["sender_id"], m["recipient_id"])]
            return httpx.Response(200, json=thread)
        return httpx.Response(404, json={"detail": "Not Found"})

    def _submit(self, body):
        record = next((sa for sa in self.student_assignments
                       if sa["student_assignment_id"] == body["student_assignment_id"]), None)
        if record is None:
            return httpx.Response(404, json={"detail": "Assignment not found"})
        if record["completed"]:
            return httpx.Response(400, json={"detail": "Assignment already completed"})
        questions = record["assignment"]["questions"]
        correct = sum(1 for q, a in zip(questions, body["answers"]) if q["correct_answer"] == a)
        record["completed"] = True
        record["score"] = correct / len(questions) * 100
        record["submitted_at"] = "2024-05-05T11:00:00"
        return httpx.Response(200, json={"score": record["score"]})

    def _conversations(self):
        latest = {}
        for m in self.messages:
            other = m["recipient_id"] if m["sender_id"] == self.user_id else m["sender_id"]
            if other not in latest or m["sent_at"] > latest[other]["sent_at"]:
                latest[other] = m
        return [
            {"contact": {"id": cid, "name": self.contacts.get(cid, cid)}, "last_message": m}
            for cid, m in latest.items()
        ]


def make_token(user_id, role, name=""):
    return jwt.encode({"id": user_id, "role": role, "name": name}, JWT_SECRET, algorithm=JWT_ALGORITHM)


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def drafts():
    return DraftStore()


@pytest.fixture
def client(backend, drafts):
    """TestClient wired to the fake backend with a fresh draft store."""
    app.dependency_overrides[get_backend] = lambda: BackendClient(
        "test-token", base_url="http://backend", transport=httpx.MockTransport(backend.handle)
    )
    app.dependency_overrides[get_drafts] = lambda: drafts
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def student_headers():
    return {"Authorization": f"Bearer {make_token('s1', 'student', 'Alice Johnson')}"}


@pytest.fixture
def teacher_headers():
    return {"Authorization": f"Bearer {make_token('t1', 'teacher', 'Ms. Rivera')}"}
