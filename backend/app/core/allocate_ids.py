"""ID Allocation — next identifier derived from the current record set.

Invariants:
    - next_id = max(numeric ids, 0) + 1, stringified
    - Non-numeric ids count as 0 (never raise)
    - Pure: monotonic only within a serialized sequence of mutations;
      the mutation pipeline's writer lock supplies that serialization
"""

from collections.abc import Iterable

from app.core.domain_types import Student


def numeric_id(raw: str) -> int:
    """Integer value of an id, 0 when it is not a plain integer."""
    try:
        return int(raw)
    except (TypeError, ValueError):
        return 0


def next_id(students: Iterable[Student]) -> str:
    highest = max((numeric_id(s.id) for s in students), default=0)
    return str(max(highest, 0) + 1)
