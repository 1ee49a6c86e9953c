"""Student Queries Service — read side: list, lookup, count, courses.

Invariants:
    - Reads never take the writer lock; they see the last atomically renamed file
    - limit is capped at max_limit; the query engine handles out-of-range values
    - A missing id is a successful lookup of None, not an error
    - Public methods never raise: they return an Outcome
"""

from app.core.domain_types import Student
from app.core.outcome import Outcome
from app.core.query_students import (
    StudentQuery,
    count_students,
    distinct_courses,
    find_index,
    query_students,
)
from app.core.repository_protocols import RecordStore
from app.services.error_reporter import report_failure


class StudentQueries:
    def __init__(self, store: RecordStore, default_limit: int = 10, max_limit: int = 100):
        self._store = store
        self.default_limit = default_limit
        self.max_limit = max_limit

    async def students(
        self,
        limit: int | None = None,
        offset: int = 0,
        search: str | None = None,
        course: str | None = None,
    ) -> Outcome[list[Student]]:
        if limit is None:
            limit = self.default_limit
        query = StudentQuery(
            search=search, course=course,
            offset=offset, limit=min(limit, self.max_limit),
        )
        try:
            records = await self._store.load()
        except Exception as e:
            return Outcome.failure(report_failure(e, "students"))
        return Outcome.success(query_students(records, query))

    async def student(self, student_id: str) -> Outcome[Student | None]:
        try:
            records = await self._store.load()
        except Exception as e:
            return Outcome.failure(
                report_failure(e, "student", student_id=student_id),
            )
        index = find_index(records, student_id)
        return Outcome.success(records[index] if index != -1 else None)

    async def student_count(self) -> Outcome[int]:
        try:
            records = await self._store.load()
        except Exception as e:
            return Outcome.failure(report_failure(e, "student_count"))
        return Outcome.success(count_students(records))

    async def courses(self) -> Outcome[list[str]]:
        try:
            records = await self._store.load()
        except Exception as e:
            return Outcome.failure(report_failure(e, "courses"))
        return Outcome.success(distinct_courses(records))
