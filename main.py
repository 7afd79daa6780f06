# main.py
import os
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from routes import student_assignments, student_grades, teacher_overview, students, assignments, lesson_plans, gradebook, messaging
from dotenv import load_dotenv

load_dotenv()

app = FastAPI(title="Classroom Portal")

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ORIGINS", "http://localhost:3000").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Redirect"],
)

app.include_router(student_assignments.router)
app.include_router(student_grades.router)
app.include_router(teacher_overview.router)
app.include_router(students.router)
app.include_router(assignments.router)
app.include_router(lesson_plans.router)
app.include_router(gradebook.router)
app.include_router(messaging.router)


@app.get("/health")
async def health():
    return {"status": "ok"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="127.0.0.1", port=8000, reload=True)
