"""Students Routes — HTTP surface for the record queries and mutations.

Invariants:
    - Routes hold no business logic: they call StudentQueries / StudentMutations
    - A failed Outcome becomes {"error": {...}} with the kind's HTTP status
    - Records are rendered in their camelCase document form
    - /count and /courses are registered before /{student_id}

Design Decisions:
    - Services injected with Depends(get_queries / get_mutations) so tests can override them
    - limit above max_page_limit is capped by the service, not rejected
"""

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from app.core.errors import ErrorReport, StudentNotFoundError
from app.infrastructure.storage import get_mutations, get_queries
from app.schemas.student import (
    BulkAddRequest,
    BulkDeleteRequest,
    StudentCreate,
    StudentUpdate,
)
from app.services.student_mutations import StudentMutations
from app.services.student_queries import StudentQueries

router = APIRouter(prefix="/api/v1/students", tags=["students"])


def error_response(report: ErrorReport) -> JSONResponse:
    return JSONResponse(status_code=report.http_status, content=report.to_response())


@router.get("")
async def list_students(
    limit: int | None = Query(None, ge=0),
    offset: int = Query(0, ge=0),
    search: str | None = Query(None),
    course: str | None = Query(None),
    queries: StudentQueries = Depends(get_queries),
):
    """List students, filtered then paginated."""
    outcome = await queries.students(
        limit=limit, offset=offset, search=search, course=course,
    )
    if not outcome.ok:
        return error_response(outcome.error)
    return [s.to_document() for s in outcome.value]


@router.get("/count")
async def student_count(queries: StudentQueries = Depends(get_queries)):
    outcome = await queries.student_count()
    if not outcome.ok:
        return error_response(outcome.error)
    return {"count": outcome.value}


@router.get("/courses")
async def list_courses(queries: StudentQueries = Depends(get_queries)):
    """Distinct courses, sorted."""
    outcome = await queries.courses()
    if not outcome.ok:
        return error_response(outcome.error)
    return outcome.value


@router.get("/{student_id}")
async def get_student(
    student_id: str, queries: StudentQueries = Depends(get_queries),
):
    outcome = await queries.student(student_id)
    if not outcome.ok:
        return error_response(outcome.error)
    if outcome.value is None:
        return error_response(StudentNotFoundError(student_id).to_report())
    return outcome.value.to_document()


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_student(
    body: StudentCreate, mutations: StudentMutations = Depends(get_mutations),
):
    outcome = await mutations.add_student(body.name, body.age, body.course)
    if not outcome.ok:
        return error_response(outcome.error)
    return outcome.value.to_document()


@router.patch("/{student_id}")
async def update_student(
    student_id: str,
    body: StudentUpdate,
    mutations: StudentMutations = Depends(get_mutations),
):
    """Partial update: only fields present in the body change."""
    outcome = await mutations.update_student(student_id, **body.supplied_fields())
    if not outcome.ok:
        return error_response(outcome.error)
    return outcome.value.to_document()


@router.delete("/{student_id}")
async def delete_student(
    student_id: str, mutations: StudentMutations = Depends(get_mutations),
):
    outcome = await mutations.delete_student(student_id)
    if not outcome.ok:
        return error_response(outcome.error)
    return {"deleted": outcome.value}


@router.post("/bulk", status_code=status.HTTP_201_CREATED)
async def bulk_add_students(
    body: BulkAddRequest, mutations: StudentMutations = Depends(get_mutations),
):
    """Add many; on failure, earlier items stay committed (see committed_ids)."""
    outcome = await mutations.bulk_add_students(
        [item.model_dump() for item in body.students],
    )
    if not outcome.ok:
        return error_response(outcome.error)
    return [s.to_document() for s in outcome.value]


@router.post("/bulk-delete")
async def bulk_delete_students(
    body: BulkDeleteRequest, mutations: StudentMutations = Depends(get_mutations),
):
    outcome = await mutations.bulk_delete_students(body.ids)
    if not outcome.ok:
        return error_response(outcome.error)
    return {"deleted": outcome.value}
