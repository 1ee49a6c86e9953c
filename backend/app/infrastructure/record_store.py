"""JSON Record Store — owns the backing file: whole-set load and atomic replace.

Invariants:
    - load() on a missing file seeds the fixed default records exactly once
    - load() raises StorageError when the file is unreadable or not a list of
      valid Student documents (including duplicate ids)
    - replace() snapshots first, then writes temp file → fsync → os.replace;
      the backing file is never observed half-written
    - A failed backup is logged as a warning and never blocks the write
    - Directories are created lazily and idempotently on first write

Design Decisions:
    - Blocking IO in asyncio.to_thread: load/replace are the suspension points
    - Seeding guarded by an asyncio.Lock with a re-check, so concurrent first
      loads in one process write the seed once
    - Pretty-printed JSON (indent=2): the file is meant to be human-readable
"""

import asyncio
import json
import logging
import os
import stat
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Callable

from pydantic import ValidationError

from app.core.domain_types import Student, build_default_students, utc_now
from app.core.errors import StorageError
from app.core.repository_protocols import BackupManager

logger = logging.getLogger(__name__)


def serialize_students(students: list[Student]) -> str:
    return json.dumps(
        [s.to_document() for s in students], indent=2, ensure_ascii=False,
    )


def parse_students(raw: str) -> list[Student]:
    """Parse backing-file text. Raises ValueError on any structural problem."""
    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError("expected a JSON array of students")
    students = [Student.model_validate(item) for item in data]
    seen: set[str] = set()
    for s in students:
        if s.id in seen:
            raise ValueError(f"duplicate student id {s.id!r}")
        seen.add(s.id)
    return students


def _target_mode(path: Path) -> int:
    """Mode the rewritten file should carry: the existing file's, else 0o666 minus umask."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def atomic_write_text(path: Path, content: str) -> None:
    """Write `content` to `path` via a temp file in the same directory + rename.

    mkstemp creates the temp file 0600; it is chmod-ed to the target mode first
    so the rename does not narrow the backing file's permissions.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    mode = _target_mode(path)
    fd, tmp_path = tempfile.mkstemp(
        dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp",
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as tmp_handle:
            tmp_handle.write(content)
            tmp_handle.flush()
            os.fsync(tmp_handle.fileno())
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, str(path))
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


class JsonRecordStore:
    """File-backed record set with pre-write snapshots."""

    def __init__(
        self,
        file_path: str | Path,
        backups: BackupManager,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.file_path = Path(file_path)
        self._backups = backups
        self._clock = clock
        self._seed_lock = asyncio.Lock()

    def _read(self) -> str | None:
        try:
            return self.file_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    async def load(self) -> list[Student]:
        raw = await self._read_or_raise()
        if raw is None:
            return await self._seed()
        return self._parse_or_raise(raw)

    async def _read_or_raise(self) -> str | None:
        try:
            return await asyncio.to_thread(self._read)
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(str(e), "read") from e

    def _parse_or_raise(self, raw: str) -> list[Student]:
        try:
            return parse_students(raw)
        except (ValueError, ValidationError) as e:
            # json.JSONDecodeError subclasses ValueError
            raise StorageError(f"{self.file_path}: {e}", "parse") from e

    async def _seed(self) -> list[Student]:
        async with self._seed_lock:
            raw = await self._read_or_raise()
            if raw is not None:
                return self._parse_or_raise(raw)
            students = build_default_students(self._clock())
            await self.replace(students)
            logger.info(
                "Seeded default student records",
                extra={"operation": "seed", "record_count": len(students)},
            )
            return students

    async def replace(self, students: list[Student]) -> bool:
        """Snapshot the current file, then atomically overwrite it."""
        try:
            await self._backups.snapshot(self.file_path)
        except StorageError as e:
            logger.warning(
                f"Backup creation failed: {e.message}",
                extra={"operation": "backup", "error_kind": e.kind.value},
            )

        content = serialize_students(students)
        try:
            await asyncio.to_thread(atomic_write_text, self.file_path, content)
        except OSError as e:
            raise StorageError(str(e), "write") from e
        return True

    async def check_readable(self) -> int:
        """Records currently on disk, without seeding; 0 when the file is absent.

        Raises StorageError exactly where load() would.
        """
        raw = await self._read_or_raise()
        if raw is None:
            return 0
        return len(self._parse_or_raise(raw))
