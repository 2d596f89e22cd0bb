"""Primary API router definition."""

from fastapi import APIRouter

from . import courses, enrollments, faculty, students

api_router = APIRouter()

api_router.include_router(students.router)
api_router.include_router(faculty.router)
api_router.include_router(courses.router)
api_router.include_router(enrollments.router)


@api_router.get("/health", tags=["health"])
async def healthcheck() -> dict[str, str]:
    """Basic health probe endpoint."""
    return {"status": "ok"}
