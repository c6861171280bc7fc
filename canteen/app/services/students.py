"""Student directory and current-user selection."""

from __future__ import annotations

import logging
import uuid

from ..errors import DuplicateStudent, NotAuthenticated, StudentNotFound
from ..events import STUDENT_UPDATED, EventBus
from ..schemas import Student
from ..storage import CURRENT_USER, STUDENTS, KeyValueStore

logger = logging.getLogger("canteen.students")

DEMO_STUDENTS: list[dict] = [
    {"id": "MEC2024001", "name": "Arun Kumar", "email": "arun@mec.edu", "balance": 500, "points": 50},
    {"id": "MEC2024002", "name": "Priya Sharma", "email": "priya@mec.edu", "balance": 750, "points": 120},
    {"id": "MEC2024003", "name": "Karthik Raja", "email": "karthik@mec.edu", "balance": 300, "points": 20},
]


class StudentDirectory:
    def __init__(self, store: KeyValueStore, bus: EventBus, default_balance: float = 500) -> None:
        self.store = store
        self.bus = bus
        self.default_balance = default_balance

    def list_all(self) -> list[Student]:
        return [Student.model_validate(raw) for raw in self.store.get(STUDENTS, [])]

    def find(self, student_id: str) -> Student | None:
        return next((s for s in self.list_all() if s.id == student_id), None)

    def get(self, student_id: str) -> Student:
        student = self.find(student_id)
        if student is None:
            raise StudentNotFound(f"Student {student_id} not found")
        return student

    def save(self, student: Student) -> Student:
        """Insert or replace ``student`` by id."""

        students = self.list_all()
        for idx, existing in enumerate(students):
            if existing.id == student.id:
                students[idx] = student
                break
        else:
            students.append(student)
        self.store.set(STUDENTS, [s.to_store() for s in students])
        self.bus.emit(STUDENT_UPDATED, {"studentId": student.id})
        return student

    def register(
        self,
        name: str,
        email: str,
        student_id: str | None = None,
        balance: float | None = None,
    ) -> Student:
        student_id = student_id or f"STU{uuid.uuid4().hex[:8].upper()}"
        if self.find(student_id):
            raise DuplicateStudent(f"Student {student_id} already registered")
        student = Student(
            id=student_id,
            name=name,
            email=email,
            balance=self.default_balance if balance is None else balance,
            points=0,
        )
        logger.info("registered student %s", student_id)
        return self.save(student)

    def seed_demo(self) -> list[Student]:
        """Write the demo students when the directory is empty."""

        if not self.list_all():
            self.store.set(STUDENTS, DEMO_STUDENTS)
            logger.info("seeded %d demo students", len(DEMO_STUDENTS))
        return self.list_all()

    def update_profile(
        self, student_id: str, name: str | None = None, email: str | None = None
    ) -> Student:
        student = self.get(student_id)
        changes = {k: v for k, v in {"name": name, "email": email}.items() if v is not None}
        return self.save(student.model_copy(update=changes))

    def current(self) -> Student | None:
        current_id = self.store.get(CURRENT_USER)
        return self.find(current_id) if current_id else None

    def auto_select(self) -> Student | None:
        """Return the current user, selecting the first student if unset."""

        student = self.current()
        if student is not None:
            return student
        students = self.list_all()
        if not students:
            return None
        self.store.set(CURRENT_USER, students[0].id)
        return students[0]

    def require_current(self) -> Student:
        student = self.current()
        if student is None:
            raise NotAuthenticated()
        return student

    def login(self, student_id: str) -> Student:
        student = self.get(student_id)
        self.store.set(CURRENT_USER, student.id)
        return student

    def logout(self) -> None:
        self.store.delete(CURRENT_USER)
