"""Student Schemas — request bodies for the students API.

Invariants:
    - Schemas check shape and type only; field constraints (required, length,
      age bounds) are enforced by core/validate_fields so every violation is reported together
    - age is StrictInt: JSON true or "20" is rejected, never coerced to an integer
    - StudentUpdate distinguishes omitted fields (model_fields_set) from explicit nulls

Design Decisions:
    - Optional fields on StudentCreate: a missing name reaches the validator and
      yields "Name is required" alongside any other violations
"""

from pydantic import BaseModel, Field, StrictInt


class StudentCreate(BaseModel):
    """Body for POST /students and each bulk item."""
    name: str | None = None
    age: StrictInt | None = None
    course: str | None = None


class StudentUpdate(BaseModel):
    """Body for PATCH /students/{id} — only sent fields change."""
    name: str | None = None
    age: StrictInt | None = None
    course: str | None = None

    def supplied_fields(self) -> dict:
        return self.model_dump(exclude_unset=True)


class BulkAddRequest(BaseModel):
    students: list[StudentCreate] = Field(default_factory=list)


class BulkDeleteRequest(BaseModel):
    ids: list[str] = Field(default_factory=list)
