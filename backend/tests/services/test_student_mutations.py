"""Mutation Pipeline — add, update, delete, and bulk variants over the file store.

Invariants:
    - Validation failures perform no IO (no write, no backup)
    - Not-found leaves the record set unchanged
    - Every successful mutation produces exactly one new backup
    - Update changes only supplied fields and refreshes updatedAt
    - Bulk failures keep earlier items and report them as committed_ids
"""

from app.core.errors import ErrorKind
from app.services.student_mutations import StudentMutations
from tests.factories import BASE_TIME


async def _ids(queries):
    outcome = await queries.students(limit=100)
    return [s.id for s in outcome.value]


# ─── end-to-end ──────────────────────────────────────────────────

async def test_add_filter_delete_scenario(mutations, queries):
    alice = await mutations.add_student("Alice", 20, "Physics")
    assert alice.ok
    assert (alice.value.id, alice.value.name, alice.value.age, alice.value.course) == (
        "1", "Alice", 20, "Physics",
    )

    bob = await mutations.add_student("Bob", 30, "Physics")
    assert bob.value.id == "2"

    physics = await queries.students(course="Physics")
    assert [s.name for s in physics.value] == ["Alice", "Bob"]

    deleted = await mutations.delete_student("1")
    assert deleted.ok and deleted.value is True

    remaining = await queries.students()
    assert [s.name for s in remaining.value] == ["Bob"]


async def test_empty_name_rejected_without_side_effects(
    mutations, queries, backup_count,
):
    outcome = await mutations.add_student("", 20, "Math")

    assert not outcome.ok
    assert outcome.error.kind == ErrorKind.VALIDATION
    assert "Name is required" in outcome.error.message
    assert (await queries.student_count()).value == 0
    assert backup_count() == 0


# ─── add ─────────────────────────────────────────────────────────

async def test_add_sets_timestamps(mutations):
    outcome = await mutations.add_student("Alice", 20, "Physics")
    assert outcome.value.created_at == BASE_TIME
    assert outcome.value.updated_at == BASE_TIME


async def test_add_trims_text_fields(mutations):
    outcome = await mutations.add_student("  Alice ", 20, " Physics  ")
    assert outcome.value.name == "Alice"
    assert outcome.value.course == "Physics"


async def test_add_reports_every_violation(mutations):
    outcome = await mutations.add_student("", 0, "")
    assert [v.field for v in outcome.error.violations] == ["name", "age", "course"]


async def test_sequential_adds_get_distinct_ids(mutations):
    ids = []
    for n in range(12):
        outcome = await mutations.add_student(f"S{n}", 20, "Physics")
        ids.append(outcome.value.id)
    assert ids == [str(n) for n in range(1, 13)]


async def test_id_follows_current_maximum_after_delete(mutations):
    await mutations.add_student("A", 20, "X")
    await mutations.add_student("B", 20, "X")
    await mutations.delete_student("2")
    outcome = await mutations.add_student("C", 20, "X")
    assert outcome.value.id == "2"


async def test_add_on_first_run_follows_seed(store, clock, backup_dir, backup_count):
    pipeline = StudentMutations(store, clock=clock)
    outcome = await pipeline.add_student("Alice", 20, "Physics")
    assert outcome.value.id == "3"

    # The seed write takes no snapshot; the add then snapshots the seeded file
    assert backup_count() == 1
    [snapshot] = backup_dir.iterdir()
    assert '"Vasan"' in snapshot.read_text(encoding="utf-8")


# ─── update ──────────────────────────────────────────────────────

async def test_update_merges_supplied_fields_only(mutations):
    created = (await mutations.add_student("Alice", 20, "Physics")).value

    outcome = await mutations.update_student("1", age=21)

    updated = outcome.value
    assert (updated.name, updated.age, updated.course) == ("Alice", 21, "Physics")
    assert updated.created_at == created.created_at
    assert updated.updated_at > created.updated_at


async def test_update_persists(mutations, queries):
    await mutations.add_student("Alice", 20, "Physics")
    await mutations.update_student("1", name="Alicia", course="Chemistry")
    stored = (await queries.student("1")).value
    assert (stored.name, stored.course) == ("Alicia", "Chemistry")


async def test_update_with_invalid_field_does_not_write(mutations, queries, backup_count):
    await mutations.add_student("Alice", 20, "Physics")
    before = backup_count()

    outcome = await mutations.update_student("1", age=500, name="Ok")

    assert outcome.error.kind == ErrorKind.VALIDATION
    assert [v.field for v in outcome.error.violations] == ["age"]
    assert backup_count() == before
    assert (await queries.student("1")).value.age == 20


async def test_update_explicit_none_is_invalid(mutations):
    await mutations.add_student("Alice", 20, "Physics")
    outcome = await mutations.update_student("1", name=None)
    assert outcome.error.message == "Validation failed: Name is required"


async def test_update_missing_id_is_not_found(mutations, queries):
    await mutations.add_student("Alice", 20, "Physics")
    before = (await queries.students()).value

    outcome = await mutations.update_student("99", name="Ghost")

    assert outcome.error.kind == ErrorKind.NOT_FOUND
    assert outcome.error.code == "STUDENT_NOT_FOUND"
    assert (await queries.students()).value == before


# ─── delete ──────────────────────────────────────────────────────

async def test_delete_missing_id_is_not_found(mutations, queries, backup_count):
    await mutations.add_student("Alice", 20, "Physics")
    before = backup_count()

    outcome = await mutations.delete_student("99")

    assert outcome.error.kind == ErrorKind.NOT_FOUND
    assert await _ids(queries) == ["1"]
    assert backup_count() == before


# ─── backups ─────────────────────────────────────────────────────

async def test_each_successful_mutation_adds_one_backup(mutations, backup_count):
    await mutations.add_student("Alice", 20, "Physics")
    assert backup_count() == 1
    await mutations.update_student("1", age=22)
    assert backup_count() == 2
    await mutations.delete_student("1")
    assert backup_count() == 3


# ─── storage failures ────────────────────────────────────────────

async def test_corrupt_file_is_storage_error(mutations, data_file):
    data_file.write_text("{ not json", encoding="utf-8")

    outcome = await mutations.add_student("Alice", 20, "Physics")

    assert outcome.error.kind == ErrorKind.STORAGE
    assert outcome.error.message == "Database operation failed"
    assert str(data_file) not in str(outcome.error.to_response())


# ─── bulk ────────────────────────────────────────────────────────

async def test_bulk_add_returns_all_records(mutations, backup_count):
    outcome = await mutations.bulk_add_students([
        {"name": "Alice", "age": 20, "course": "Physics"},
        {"name": "Bob", "age": 30, "course": "Math"},
    ])
    assert [s.id for s in outcome.value] == ["1", "2"]
    assert backup_count() == 2


async def test_bulk_add_empty_is_noop(mutations, backup_count):
    outcome = await mutations.bulk_add_students([])
    assert outcome.ok and outcome.value == []
    assert backup_count() == 0


async def test_bulk_add_stops_at_first_invalid_item(mutations, queries):
    outcome = await mutations.bulk_add_students([
        {"name": "Alice", "age": 20, "course": "Physics"},
        {"name": "", "age": 20, "course": "Physics"},
        {"name": "Carol", "age": 25, "course": "Physics"},
    ])

    assert outcome.error.kind == ErrorKind.VALIDATION
    assert outcome.error.committed_ids == ["1"]
    assert outcome.error.partial is True
    assert await _ids(queries) == ["1"]


async def test_bulk_add_missing_keys_are_required(mutations):
    outcome = await mutations.bulk_add_students([{"name": "Alice"}])
    assert [v.field for v in outcome.error.violations] == ["age", "course"]
    assert outcome.error.committed_ids == []


async def test_bulk_delete_removes_all(mutations, queries):
    for name in ("A", "B", "C"):
        await mutations.add_student(name, 20, "X")

    outcome = await mutations.bulk_delete_students(["1", "3"])

    assert outcome.ok and outcome.value is True
    assert await _ids(queries) == ["2"]


async def test_bulk_delete_keeps_earlier_deletions_on_failure(mutations, queries):
    for name in ("A", "B"):
        await mutations.add_student(name, 20, "X")

    outcome = await mutations.bulk_delete_students(["1", "99", "2"])

    assert outcome.error.kind == ErrorKind.NOT_FOUND
    assert outcome.error.committed_ids == ["1"]
    assert await _ids(queries) == ["2"]
