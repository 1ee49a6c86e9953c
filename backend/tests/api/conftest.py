"""API test fixtures — FastAPI client over a temporary backing file.

Invariants:
    - Every test gets its own empty students.json and backup directory
    - The storage_manager singleton is swapped in and restored afterwards

Design Decisions:
    - ASGITransport skips lifespan, so the fixture initializes storage itself
"""

import pytest
from httpx import ASGITransport, AsyncClient

import app.infrastructure.storage as storage_module
from app.main import app


@pytest.fixture
async def client(data_file, backup_dir):
    data_file.parent.mkdir(parents=True, exist_ok=True)
    data_file.write_text("[]", encoding="utf-8")

    original_manager = storage_module.storage_manager
    storage_module.init_storage(str(data_file), str(backup_dir))

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    storage_module.storage_manager = original_manager
