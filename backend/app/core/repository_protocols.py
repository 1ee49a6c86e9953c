"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, tests pass in-memory fakes
    - Async in Protocol: boundary methods are async because implementations do IO
"""

from pathlib import Path
from typing import Protocol

from app.core.domain_types import Student


class RecordStore(Protocol):
    """Owns the backing file: whole-set load and whole-set replace."""
    async def load(self) -> list[Student]: ...
    async def replace(self, students: list[Student]) -> bool: ...


class BackupManager(Protocol):
    """Snapshots the backing file before it is overwritten."""
    async def snapshot(self, current_file: Path) -> Path | None: ...
