"""Student Queries — search, filter, paginate, and project a record set.

Invariants:
    - Read-only: no function mutates its input sequence or records
    - search: case-insensitive substring over name OR course
    - course: exact, case-sensitive match; composes with search via AND
    - Pagination slices the FILTERED set, preserving its order;
      out-of-range offset/limit yield a shorter or empty list, never an error

Design Decisions:
    - Negative offset/limit clamp to 0 so Python's negative slicing never wraps
    - Empty search or course string behaves as "not provided"
"""

from collections.abc import Sequence
from dataclasses import dataclass

from app.core.domain_types import Student


@dataclass(frozen=True)
class StudentQuery:
    search: str | None = None
    course: str | None = None
    offset: int = 0
    limit: int = 10


def matches_search(student: Student, search: str) -> bool:
    needle = search.casefold()
    return needle in student.name.casefold() or needle in student.course.casefold()


def filter_students(
    students: Sequence[Student],
    search: str | None = None,
    course: str | None = None,
) -> list[Student]:
    """Apply search and course filters, keeping the input order."""
    result = list(students)
    if search:
        result = [s for s in result if matches_search(s, search)]
    if course:
        result = [s for s in result if s.course == course]
    return result


def paginate(students: Sequence[Student], offset: int, limit: int) -> list[Student]:
    start = max(offset, 0)
    size = max(limit, 0)
    return list(students[start:start + size])


def query_students(students: Sequence[Student], query: StudentQuery) -> list[Student]:
    filtered = filter_students(students, query.search, query.course)
    return paginate(filtered, query.offset, query.limit)


def distinct_courses(students: Sequence[Student]) -> list[str]:
    """Each course once, lexicographically sorted."""
    return sorted({s.course for s in students})


def count_students(students: Sequence[Student]) -> int:
    return len(students)


def find_index(students: Sequence[Student], student_id: str) -> int:
    """Position of the record with `student_id`, -1 when absent."""
    for index, student in enumerate(students):
        if student.id == student_id:
            return index
    return -1
