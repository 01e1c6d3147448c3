"""Consistency Rules Engine — cross-entity invariants and check ordering.

Tests cover:
    - driver number uniqueness (create, update excluding self)
    - team reference existence, never a partially-created driver
    - team name uniqueness and delete gating on assigned drivers
    - fixed check order: shape → uniqueness → team existence → mutation
    - NotFoundError precedence on update/delete
    - createdAt stability and updatedAt monotonicity across updates
    - the end-to-end team/driver lifecycle scenario
    - uniqueness races lost to a concurrent writer still report ConflictError
"""

import pytest
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError

from app.core.errors import (
    ConflictError, DatabaseError, NotFoundError, ValidationError,
)
from app.models.driver import Driver
from app.services.consistency_rules import ConsistencyRules
from app.services.record_store import RecordStore
from tests.services.factories import driver_fields, team_fields


class RecordingStore:
    """Proxy that records which store methods the rules engine calls."""

    def __init__(self, inner):
        self.inner = inner
        self.calls: list[str] = []

    def __getattr__(self, name):
        method = getattr(self.inner, name)

        async def wrapper(*args, **kwargs):
            self.calls.append(name)
            return await method(*args, **kwargs)

        return wrapper


async def _driver_count(db) -> int:
    result = await db.execute(select(func.count()).select_from(Driver))
    return result.scalar_one()


# --- Scenarios ----------------------------------------------------------------

async def test_team_and_driver_lifecycle_scenario(rules):
    team = await rules.create_team(team_fields())
    assert team.id == 1

    driver = await rules.create_driver(driver_fields(driver_number=44, team_id=1))
    assert driver.team_name == "Speedster Racing"
    driver_id = driver.id

    with pytest.raises(ConflictError):
        await rules.create_driver(
            driver_fields(first_name="Bob", last_name="Bit", driver_number=44),
        )

    with pytest.raises(ConflictError, match="active drivers"):
        await rules.delete_team(1)

    await rules.delete_driver(driver_id)
    await rules.delete_team(1)

    with pytest.raises(NotFoundError):
        await rules.get_team(1)


async def test_out_of_range_number_fails_before_any_lookup(test_db, store):
    recording = RecordingStore(store)
    rules = ConsistencyRules(test_db, store=recording)

    with pytest.raises(ValidationError) as exc_info:
        await rules.create_driver(driver_fields(driver_number=150, team_id=99))

    assert exc_info.value.field == "driver_number"
    assert recording.calls == []


# --- Driver creation ----------------------------------------------------------

async def test_created_numbers_are_unique_across_listing(rules):
    for number in (1, 5, 33, 99):
        await rules.create_driver(driver_fields(driver_number=number))

    numbers = [d.driver_number for d in await rules.list_drivers()]
    assert sorted(numbers) == [1, 5, 33, 99]
    assert len(numbers) == len(set(numbers))


async def test_duplicate_number_conflicts_regardless_of_other_fields(rules, seed_team):
    await rules.create_driver(driver_fields(driver_number=16))

    with pytest.raises(ConflictError, match="Driver number 16 is already taken"):
        await rules.create_driver(driver_fields(
            first_name="Other", last_name="Person", nationality="Monegasque",
            driver_number=16, team_id=seed_team.id,
        ))


async def test_number_conflict_reported_before_missing_team(rules):
    await rules.create_driver(driver_fields(driver_number=16))

    with pytest.raises(ConflictError):
        await rules.create_driver(driver_fields(driver_number=16, team_id=404))


async def test_missing_team_fails_validation_without_creating_driver(rules, test_db):
    with pytest.raises(ValidationError) as exc_info:
        await rules.create_driver(driver_fields(team_id=404))

    assert exc_info.value.field == "team_id"
    assert "404" in exc_info.value.message
    assert await _driver_count(test_db) == 0


async def test_first_failing_field_is_reported(rules):
    with pytest.raises(ValidationError) as exc_info:
        await rules.create_driver(driver_fields(
            last_name="", nationality="", driver_number=0,
        ))
    assert exc_info.value.field == "last_name"


async def test_create_driver_returns_timestamps(rules):
    driver = await rules.create_driver(driver_fields())
    assert driver.created_at == driver.updated_at


# --- Driver update / delete ---------------------------------------------------

async def test_update_keeps_own_number_without_conflict(rules):
    driver = await rules.create_driver(driver_fields(driver_number=44))

    updated = await rules.update_driver(
        driver.id, driver_fields(driver_number=44, nationality="Canadian"),
    )
    assert updated.driver_number == 44
    assert updated.nationality == "Canadian"


async def test_update_to_taken_number_conflicts(rules):
    await rules.create_driver(driver_fields(driver_number=1))
    driver = await rules.create_driver(driver_fields(driver_number=2))
    driver_id = driver.id

    with pytest.raises(ConflictError):
        await rules.update_driver(driver_id, driver_fields(driver_number=1))

    assert (await rules.get_driver(driver_id)).driver_number == 2


async def test_update_missing_driver_reports_not_found_before_validation(rules):
    with pytest.raises(NotFoundError, match="Driver with ID 77 not found"):
        await rules.update_driver(77, driver_fields(first_name="", driver_number=500))


async def test_update_to_missing_team_fails_validation(rules):
    driver = await rules.create_driver(driver_fields())
    driver_id = driver.id

    with pytest.raises(ValidationError):
        await rules.update_driver(driver_id, driver_fields(team_id=404))

    assert (await rules.get_driver(driver_id)).team_id is None


async def test_created_at_stable_and_updated_at_monotonic(rules):
    driver = await rules.create_driver(driver_fields())
    created_at = driver.created_at
    previous = driver.updated_at

    for number in (45, 46, 47):
        updated = await rules.update_driver(driver.id, driver_fields(driver_number=number))
        assert updated.created_at == created_at
        assert updated.updated_at >= previous
        previous = updated.updated_at


async def test_delete_missing_driver_not_found(rules):
    with pytest.raises(NotFoundError):
        await rules.delete_driver(5)


async def test_get_missing_driver_not_found(rules):
    with pytest.raises(NotFoundError):
        await rules.get_driver(5)


# --- Teams --------------------------------------------------------------------

async def test_duplicate_team_name_conflicts(rules, seed_team):
    with pytest.raises(ConflictError, match="Speedster Racing"):
        await rules.create_team(team_fields(constructor="Other"))


async def test_update_team_keeps_own_name(rules, seed_team):
    updated = await rules.update_team(
        seed_team.id, team_fields(championships_won=2),
    )
    assert updated.name == "Speedster Racing"
    assert updated.championships_won == 2


async def test_update_team_to_taken_name_conflicts(rules, seed_team):
    other = await rules.create_team(team_fields(name="Apex Motorsport"))

    with pytest.raises(ConflictError):
        await rules.update_team(other.id, team_fields(name="Speedster Racing"))


async def test_team_shape_checked_before_name_uniqueness(rules, seed_team):
    with pytest.raises(ValidationError) as exc_info:
        await rules.create_team(team_fields(founded_year=1900))
    assert exc_info.value.field == "founded_year"


async def test_update_missing_team_not_found(rules):
    with pytest.raises(NotFoundError, match="Team with ID 3 not found"):
        await rules.update_team(3, team_fields())


async def test_team_deletable_after_drivers_reassigned(rules, seed_team):
    team_id = seed_team.id
    other_id = (await rules.create_team(team_fields(name="Apex Motorsport"))).id
    driver_id = (await rules.create_driver(driver_fields(team_id=team_id))).id

    with pytest.raises(ConflictError):
        await rules.delete_team(team_id)

    await rules.update_driver(driver_id, driver_fields(team_id=other_id))
    await rules.delete_team(team_id)

    assert {t.id for t in await rules.list_teams()} == {other_id}


async def test_team_deletable_after_drivers_cleared(rules, seed_team):
    driver = await rules.create_driver(driver_fields(team_id=seed_team.id))
    await rules.update_driver(driver.id, driver_fields(team_id=None))

    await rules.delete_team(seed_team.id)
    assert (await rules.get_driver(driver.id)).team_id is None


async def test_list_team_drivers(rules, seed_team):
    a = await rules.create_driver(driver_fields(driver_number=3, team_id=seed_team.id))
    await rules.create_driver(driver_fields(driver_number=4))

    drivers = await rules.list_team_drivers(seed_team.id)
    assert [d.id for d in drivers] == [a.id]

    with pytest.raises(NotFoundError):
        await rules.list_team_drivers(seed_team.id + 1)


# --- Concurrent writers -------------------------------------------------------

class StaleReadStore(RecordStore):
    """Lookups miss rows a concurrent transaction committed after our read."""

    async def find_driver_by_number(self, number, exclude_id=None):
        return None

    async def find_team_by_name(self, name, exclude_id=None):
        return None


@pytest.fixture
def stale_rules(test_db, fake_clock):
    return ConsistencyRules(test_db, store=StaleReadStore(test_db, clock=fake_clock))


async def test_number_race_lost_at_flush_is_conflict(rules, stale_rules, test_db):
    await rules.create_driver(driver_fields(driver_number=44))

    with pytest.raises(ConflictError, match="Driver number 44 is already taken"):
        await stale_rules.create_driver(
            driver_fields(first_name="Bob", last_name="Bit", driver_number=44),
        )

    assert await _driver_count(test_db) == 1


async def test_number_race_on_update_is_conflict(rules, stale_rules):
    await rules.create_driver(driver_fields(driver_number=1))
    driver_id = (await rules.create_driver(driver_fields(driver_number=2))).id

    with pytest.raises(ConflictError, match="Driver number 1 is already taken"):
        await stale_rules.update_driver(driver_id, driver_fields(driver_number=1))

    assert (await rules.get_driver(driver_id)).driver_number == 2


async def test_team_name_race_lost_at_flush_is_conflict(stale_rules, seed_team):
    with pytest.raises(ConflictError) as exc_info:
        await stale_rules.create_team(team_fields(constructor="Other"))

    assert exc_info.value.message == "Team with name 'Speedster Racing' already exists"
    assert exc_info.value.http_status == 409


async def test_missing_team_at_storage_is_still_database_error(test_db, fake_clock):
    """Only the number/name constraints map to conflicts; an FK miss stays a storage failure."""

    class NoTeamCheckStore(RecordStore):
        async def team_exists(self, team_id):
            return True

    rules = ConsistencyRules(test_db, store=NoTeamCheckStore(test_db, clock=fake_clock))

    with pytest.raises(DatabaseError):
        await rules.create_driver(driver_fields(team_id=404))


class _Team:
    id = 1
    name = "Speedster Racing"


class _CommitRaceSession:
    """Session whose commit loses a unique race after a clean flush."""

    def __init__(self, message):
        self.message = message
        self.rolled_back = False

    async def commit(self):
        raise IntegrityError("INSERT INTO teams", {}, Exception(self.message))

    async def rollback(self):
        self.rolled_back = True


class _AcceptingStore:
    async def find_team_by_name(self, name, exclude_id=None):
        return None

    async def insert_team(self, fields):
        return _Team()


async def test_unique_violation_at_commit_is_conflict():
    db = _CommitRaceSession("UNIQUE constraint failed: teams.name")
    rules = ConsistencyRules(db, store=_AcceptingStore())

    with pytest.raises(ConflictError, match="Speedster Racing"):
        await rules.create_team(team_fields())

    assert db.rolled_back is True


async def test_other_integrity_error_at_commit_is_database_error():
    db = _CommitRaceSession("CHECK constraint failed: teams")
    rules = ConsistencyRules(db, store=_AcceptingStore())

    with pytest.raises(DatabaseError) as exc_info:
        await rules.create_team(team_fields())

    assert exc_info.value.operation == "create_team"
    assert db.rolled_back is True
