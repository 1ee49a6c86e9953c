"""Root conftest — shared test configuration and record-store fixtures."""

import os

import pytest

# Keep test runs from writing log files or touching ./data
os.environ.setdefault("LOG_DIR", "")
os.environ.setdefault("DB_FILE_PATH", "./.test-data/students.json")
os.environ.setdefault("DB_BACKUP_PATH", "./.test-data/backup/")

from app.infrastructure.backup_manager import FileBackupManager  # noqa: E402
from app.infrastructure.record_store import JsonRecordStore  # noqa: E402
from app.services.student_mutations import StudentMutations  # noqa: E402
from app.services.student_queries import StudentQueries  # noqa: E402
from tests.factories import FakeClock  # noqa: E402


@pytest.fixture
def data_file(tmp_path):
    return tmp_path / "data" / "students.json"


@pytest.fixture
def backup_dir(tmp_path):
    return tmp_path / "data" / "backup"


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def backups(backup_dir):
    return FileBackupManager(backup_dir)


@pytest.fixture
def store(data_file, backups):
    """Store over a file that does not exist yet (first load seeds)."""
    return JsonRecordStore(data_file, backups)


@pytest.fixture
def empty_store(data_file, backups):
    """Store over an existing, empty record set."""
    data_file.parent.mkdir(parents=True, exist_ok=True)
    data_file.write_text("[]", encoding="utf-8")
    return JsonRecordStore(data_file, backups)


@pytest.fixture
def mutations(empty_store, clock):
    return StudentMutations(empty_store, clock=clock)


@pytest.fixture
def queries(empty_store):
    return StudentQueries(empty_store)


@pytest.fixture
def backup_count(backup_dir):
    """Number of snapshot files currently in the backup directory."""
    def _count() -> int:
        if not backup_dir.exists():
            return 0
        return len(list(backup_dir.iterdir()))
    return _count
