"""Service test fixtures — in-memory stores and pipelines over them."""

import pytest

from app.services.student_mutations import StudentMutations
from tests.factories import FakeClock
from tests.services.fake_stores import MemoryStore


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def memory_mutations(memory_store):
    return StudentMutations(memory_store, clock=FakeClock())
