"""Storage Manager — wires record store, backups, and services for one backing file.

Invariants:
    - Exactly one StudentMutations per process: its lock is the single-flight writer
    - All file paths come from settings; nothing is hardcoded here
    - health_check() never raises

Design Decisions:
    - Singleton storage_manager initialized on startup: FastAPI lifespan manages lifecycle
      (no global import side effects)
    - FastAPI dependencies (get_mutations / get_queries) read the singleton so tests
      can override them or swap the manager
"""

import asyncio
import logging
import os

from app.core.validate_fields import DEFAULT_BOUNDS, ValidationBounds
from app.infrastructure.backup_manager import FileBackupManager
from app.infrastructure.record_store import JsonRecordStore
from app.services.student_mutations import StudentMutations
from app.services.student_queries import StudentQueries

logger = logging.getLogger(__name__)


class StorageManager:
    """Owns the store and the services built on it."""

    def __init__(
        self,
        file_path: str,
        backup_path: str,
        bounds: ValidationBounds = DEFAULT_BOUNDS,
        default_limit: int = 10,
        max_limit: int = 100,
    ):
        self.backups = FileBackupManager(backup_path)
        self.store = JsonRecordStore(file_path, self.backups)
        self.mutations = StudentMutations(self.store, bounds)
        self.queries = StudentQueries(self.store, default_limit, max_limit)

    def _probe(self) -> bool:
        # Nearest existing ancestor: the store creates the rest on first write
        directory = self.store.file_path.parent
        while not directory.exists() and directory != directory.parent:
            directory = directory.parent
        return os.access(directory, os.W_OK)

    async def health_check(self) -> bool:
        """Backing directory writable and current file parseable (readiness probe).

        Read-only: never seeds, writes, or creates directories.
        """
        try:
            if not await asyncio.to_thread(self._probe):
                return False
            await self.store.check_readable()
            return True
        except Exception as e:
            logger.error(f"Storage health check failed: {e}")
            return False


# Singleton (initialized on startup)
storage_manager: StorageManager | None = None


def init_storage(file_path: str, backup_path: str, **kwargs) -> StorageManager:
    global storage_manager
    storage_manager = StorageManager(file_path, backup_path, **kwargs)
    return storage_manager


def _require_manager() -> StorageManager:
    if not storage_manager:
        raise RuntimeError("Storage not initialized")
    return storage_manager


def get_mutations() -> StudentMutations:
    """FastAPI dependency for the write side."""
    return _require_manager().mutations


def get_queries() -> StudentQueries:
    """FastAPI dependency for the read side."""
    return _require_manager().queries
