"""Mutation Pipeline — validate → load → locate → apply → persist, one record at a time.

Invariants:
    - Validation runs before any IO; a rejected input never loads or writes
    - Every load → edit → replace cycle runs under one asyncio.Lock
      (single-flight writer), so concurrent mutations never lose updates
    - Only supplied fields change on update; updated_at is refreshed, created_at kept
    - Bulk calls run the full cycle per item; a failure stops the batch, keeps
      earlier items committed, and reports them as committed_ids
    - Public methods never raise: they return an Outcome

Design Decisions:
    - Writer lock lives here, not in the store: the critical section is the
      whole read-modify-write, which only the pipeline sees
    - Lock taken per item in bulk calls: a bulk call does not starve other writers
    - MISSING marks omitted update fields so an explicit null is validated as absent
"""

import asyncio
import logging
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any, Callable

from app.core.allocate_ids import next_id
from app.core.domain_types import Student, utc_now
from app.core.errors import RecordValidationError, StudentNotFoundError
from app.core.outcome import Outcome
from app.core.query_students import find_index
from app.core.repository_protocols import RecordStore
from app.core.validate_fields import (
    DEFAULT_BOUNDS,
    MISSING,
    ValidationBounds,
    normalize_text,
    validate_student_fields,
)
from app.services.error_reporter import report_failure

logger = logging.getLogger(__name__)


class StudentMutations:
    """Write side of the registry. One instance per backing file."""

    def __init__(
        self,
        store: RecordStore,
        bounds: ValidationBounds = DEFAULT_BOUNDS,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._store = store
        self._bounds = bounds
        self._clock = clock
        self._write_lock = asyncio.Lock()

    # ─── Public operations ───────────────────────────────────────

    async def add_student(self, name: Any, age: Any, course: Any) -> Outcome[Student]:
        try:
            student = await self._add(name, age, course)
        except Exception as e:
            return Outcome.failure(report_failure(e, "add_student"))
        return Outcome.success(student)

    async def update_student(
        self,
        student_id: str,
        name: Any = MISSING,
        age: Any = MISSING,
        course: Any = MISSING,
    ) -> Outcome[Student]:
        try:
            student = await self._update(student_id, name, age, course)
        except Exception as e:
            return Outcome.failure(
                report_failure(e, "update_student", student_id=student_id),
            )
        return Outcome.success(student)

    async def delete_student(self, student_id: str) -> Outcome[bool]:
        try:
            await self._delete(student_id)
        except Exception as e:
            return Outcome.failure(
                report_failure(e, "delete_student", student_id=student_id),
            )
        return Outcome.success(True)

    async def bulk_add_students(
        self, items: Iterable[Mapping[str, Any]],
    ) -> Outcome[list[Student]]:
        """Add each item in order; stop at the first failure."""
        added: list[Student] = []
        try:
            for item in items:
                added.append(await self._add(
                    item.get("name"), item.get("age"), item.get("course"),
                ))
        except Exception as e:
            return Outcome.failure(report_failure(
                e, "bulk_add_students", committed_ids=[s.id for s in added],
            ))
        return Outcome.success(added)

    async def bulk_delete_students(self, student_ids: Iterable[str]) -> Outcome[bool]:
        """Delete each id in order; stop at the first failure."""
        deleted: list[str] = []
        try:
            for student_id in student_ids:
                await self._delete(student_id)
                deleted.append(student_id)
        except Exception as e:
            return Outcome.failure(report_failure(
                e, "bulk_delete_students", committed_ids=deleted,
            ))
        return Outcome.success(True)

    # ─── Pipeline steps ──────────────────────────────────────────

    def _require_valid(self, **fields: Any) -> None:
        violations = validate_student_fields(**fields, bounds=self._bounds)
        if violations:
            raise RecordValidationError(violations)

    async def _add(self, name: Any, age: Any, course: Any) -> Student:
        self._require_valid(name=name, age=age, course=course)
        async with self._write_lock:
            students = await self._store.load()
            now = self._clock()
            student = Student(
                id=next_id(students),
                name=normalize_text(name),
                age=age,
                course=normalize_text(course),
                created_at=now,
                updated_at=now,
            )
            await self._store.replace([*students, student])
        logger.info(
            "Student added",
            extra={"operation": "add_student", "student_id": student.id},
        )
        return student

    async def _update(
        self, student_id: str, name: Any, age: Any, course: Any,
    ) -> Student:
        self._require_valid(name=name, age=age, course=course)
        changes: dict[str, Any] = {}
        if name is not MISSING:
            changes["name"] = normalize_text(name)
        if age is not MISSING:
            changes["age"] = age
        if course is not MISSING:
            changes["course"] = normalize_text(course)

        async with self._write_lock:
            students = await self._store.load()
            index = find_index(students, student_id)
            if index == -1:
                raise StudentNotFoundError(student_id)
            current = students[index]
            changes["updated_at"] = max(self._clock(), current.created_at)
            updated = current.model_copy(update=changes)
            students[index] = updated
            await self._store.replace(students)
        logger.info(
            "Student updated",
            extra={"operation": "update_student", "student_id": student_id},
        )
        return updated

    async def _delete(self, student_id: str) -> None:
        async with self._write_lock:
            students = await self._store.load()
            index = find_index(students, student_id)
            if index == -1:
                raise StudentNotFoundError(student_id)
            del students[index]
            await self._store.replace(students)
        logger.info(
            "Student deleted",
            extra={"operation": "delete_student", "student_id": student_id},
        )
