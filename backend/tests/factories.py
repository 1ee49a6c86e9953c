"""Test factories — fixed clock and record builders shared across test packages."""

from datetime import datetime, timedelta, timezone

from app.core.domain_types import Student

BASE_TIME = datetime(2026, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock: each call advances one second from BASE_TIME."""

    def __init__(self, start: datetime = BASE_TIME):
        self.current = start

    def __call__(self) -> datetime:
        now = self.current
        self.current += timedelta(seconds=1)
        return now


def make_student(
    student_id: str, name: str = "Student", age: int = 20,
    course: str = "Physics", created_at: datetime = BASE_TIME,
) -> Student:
    return Student(
        id=student_id, name=name, age=age, course=course,
        created_at=created_at, updated_at=created_at,
    )
