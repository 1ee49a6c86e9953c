"""Domain Types — the Student record and the value types around it.

Invariants:
    - Student.id is assigned once by the id allocator and never changes
    - created_at <= updated_at for every record at rest
    - Timestamps are timezone-aware UTC; serialized as ISO-8601 millis + "Z"
    - On disk and on the wire, timestamps use camelCase keys (createdAt, updatedAt)

Design Decisions:
    - pydantic BaseModel over dataclass: the same model parses the backing file
      and renders API responses (alias_generator keeps both in camelCase)
    - Records are treated as values: edits produce copies via model_copy()
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, field_serializer, model_validator
from pydantic.alias_generators import to_camel


# ─── Timestamps ──────────────────────────────────────────────────

def utc_now() -> datetime:
    """Current time, truncated to the millisecond precision stored on disk."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def format_timestamp(value: datetime) -> str:
    """Render as 2026-01-01T00:00:00.000Z."""
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


# ─── Record ──────────────────────────────────────────────────────

class Student(BaseModel):
    """A single student record — the sole persisted entity."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True,
    )

    id: str
    name: str
    age: int
    course: str
    created_at: datetime
    updated_at: datetime

    @model_validator(mode="before")
    @classmethod
    def default_updated_at(cls, data):
        # Files written before updatedAt existed carry createdAt only
        if isinstance(data, dict):
            has_updated = "updatedAt" in data or "updated_at" in data
            created = data.get("createdAt", data.get("created_at"))
            if not has_updated and created is not None:
                data = {**data, "updatedAt": created}
        return data

    @model_validator(mode="after")
    def check_timestamp_order(self):
        if self.updated_at < self.created_at:
            raise ValueError("updatedAt must not precede createdAt")
        return self

    @field_serializer("created_at", "updated_at")
    def serialize_timestamp(self, value: datetime) -> str:
        return format_timestamp(value)

    def to_document(self) -> dict:
        """Serializable camelCase dict, as written to the backing file."""
        return self.model_dump(by_alias=True)


# ─── Seed ────────────────────────────────────────────────────────

# Written once when the backing file does not exist yet
DEFAULT_STUDENTS: tuple[dict, ...] = (
    {"id": "1", "name": "Vasan", "age": 22, "course": "Computer Science"},
    {"id": "2", "name": "Aditi", "age": 21, "course": "Mathematics"},
)


def build_default_students(now: datetime) -> list[Student]:
    """Materialize the fixed seed records stamped with `now`."""
    return [
        Student(**seed, created_at=now, updated_at=now)
        for seed in DEFAULT_STUDENTS
    ]
