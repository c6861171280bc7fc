"""Student registration, login selection and profile routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from .deps import get_students
from .errors import NotAuthenticated
from .schemas import ProfileUpdate, StudentIn
from .services import StudentDirectory
from .utils.responses import ok

router = APIRouter(prefix="/api", tags=["students"])


@router.post("/students")
async def register_student(
    payload: StudentIn, students: StudentDirectory = Depends(get_students)
) -> dict:
    student = students.register(payload.name, payload.email, payload.id, payload.balance)
    return ok(student.to_store())


@router.get("/students")
async def list_students(students: StudentDirectory = Depends(get_students)) -> dict:
    return ok([s.to_store() for s in students.list_all()])


@router.get("/me")
async def who_am_i(students: StudentDirectory = Depends(get_students)) -> dict:
    """Return the current student, selecting the first one when unset."""

    student = students.auto_select()
    if student is None:
        raise NotAuthenticated()
    return ok(student.to_store())


@router.patch("/me")
async def update_profile(
    payload: ProfileUpdate, students: StudentDirectory = Depends(get_students)
) -> dict:
    current = students.require_current()
    student = students.update_profile(current.id, payload.name, payload.email)
    return ok(student.to_store())


@router.post("/login/{student_id}")
async def login(student_id: str, students: StudentDirectory = Depends(get_students)) -> dict:
    return ok(students.login(student_id).to_store())


@router.post("/logout")
async def logout(students: StudentDirectory = Depends(get_students)) -> dict:
    students.logout()
    return ok({"loggedOut": True})
