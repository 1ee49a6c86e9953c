"""Backup Manager — timestamped snapshot of the backing file before each overwrite.

Invariants:
    - No backing file yet → no-op (returns None)
    - Snapshot is a verbatim byte copy named <stem>-<timestamp><suffix>,
      with ':' and '.' in the timestamp replaced by '-'
    - Each call produces at most one new file; same-millisecond collisions get -1, -2, ...
    - Snapshots are never read back or deleted by the running service

Design Decisions:
    - Blocking copy runs in asyncio.to_thread: snapshot is a suspension point
    - Raises StorageError; the record store decides that backup failure is non-fatal
    - Retention is unbounded; no eviction policy exists
"""

import asyncio
import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import Callable

from app.core.domain_types import format_timestamp, utc_now
from app.core.errors import StorageError

logger = logging.getLogger(__name__)


def backup_timestamp(moment: datetime) -> str:
    """2026-01-01T00:00:00.000Z → 2026-01-01T00-00-00-000Z."""
    return format_timestamp(moment).replace(":", "-").replace(".", "-")


class FileBackupManager:
    """Copies the current backing file into the backup directory."""

    def __init__(self, backup_dir: str | Path, clock: Callable[[], datetime] = utc_now):
        self.backup_dir = Path(backup_dir)
        self._clock = clock

    def backup_path_for(self, current_file: Path, moment: datetime) -> Path:
        stem = f"{current_file.stem}-{backup_timestamp(moment)}"
        candidate = self.backup_dir / f"{stem}{current_file.suffix}"
        counter = 1
        while candidate.exists():
            candidate = self.backup_dir / f"{stem}-{counter}{current_file.suffix}"
            counter += 1
        return candidate

    def _copy(self, current_file: Path) -> Path | None:
        if not current_file.exists():
            return None
        self.backup_dir.mkdir(parents=True, exist_ok=True)
        target = self.backup_path_for(current_file, self._clock())
        shutil.copyfile(current_file, target)
        return target

    async def snapshot(self, current_file: Path) -> Path | None:
        """Copy `current_file` into the backup directory. None when nothing to copy."""
        try:
            target = await asyncio.to_thread(self._copy, Path(current_file))
        except OSError as e:
            raise StorageError(str(e), "backup") from e
        if target is not None:
            logger.debug(
                "Backup written",
                extra={"operation": "backup", "backup_file": target.name},
            )
        return target
