"""Field Validation — pure checks for name, age, and course.

Invariants:
    - Every rule runs independently; all violations are collected, never short-circuited
    - Partial updates validate only supplied fields (MISSING = not supplied)
    - Pure: returns violations, raises nothing, performs no IO

Design Decisions:
    - Bounds injected as a frozen ValidationBounds: core never reads settings
    - bool rejected as age: Python treats True as int 1
"""

from dataclasses import dataclass
from typing import Any

from app.core.errors import FieldViolation


class _Missing:
    """Sentinel for fields not supplied in a partial update."""

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


@dataclass(frozen=True)
class ValidationBounds:
    max_name_length: int = 100
    min_age: int = 1
    max_age: int = 120
    max_course_length: int = 200


DEFAULT_BOUNDS = ValidationBounds()


def _check_text(
    field: str, value: Any, max_length: int,
) -> list[FieldViolation]:
    label = field.capitalize()
    if value is None or not isinstance(value, str) or not value.strip():
        return [FieldViolation(field, f"{label} is required")]
    if len(value.strip()) > max_length:
        return [FieldViolation(
            field, f"{label} must be at most {max_length} characters",
        )]
    return []


def check_name(value: Any, bounds: ValidationBounds = DEFAULT_BOUNDS) -> list[FieldViolation]:
    return _check_text("name", value, bounds.max_name_length)


def check_course(value: Any, bounds: ValidationBounds = DEFAULT_BOUNDS) -> list[FieldViolation]:
    return _check_text("course", value, bounds.max_course_length)


def check_age(value: Any, bounds: ValidationBounds = DEFAULT_BOUNDS) -> list[FieldViolation]:
    if value is None:
        return [FieldViolation("age", "Age is required")]
    if isinstance(value, bool) or not isinstance(value, int):
        return [FieldViolation("age", "Age must be an integer")]
    if not bounds.min_age <= value <= bounds.max_age:
        return [FieldViolation(
            "age", f"Age must be between {bounds.min_age} and {bounds.max_age}",
        )]
    return []


def validate_student_fields(
    name: Any = MISSING,
    age: Any = MISSING,
    course: Any = MISSING,
    bounds: ValidationBounds = DEFAULT_BOUNDS,
) -> list[FieldViolation]:
    """Check every supplied field. Empty list means valid.

    For creates, pass all three fields (None counts as supplied-but-absent).
    For updates, leave omitted fields as MISSING.
    """
    violations: list[FieldViolation] = []
    if name is not MISSING:
        violations.extend(check_name(name, bounds))
    if age is not MISSING:
        violations.extend(check_age(age, bounds))
    if course is not MISSING:
        violations.extend(check_course(course, bounds))
    return violations


def normalize_text(value: str) -> str:
    """Stored form of name/course: surrounding whitespace removed."""
    return value.strip()
