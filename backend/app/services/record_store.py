"""Record Store — atomic CRUD primitives and lookups for drivers and teams.

Invariants:
    - Never commits: every method flushes inside the caller's transaction
    - insert_* stamps created_at and updated_at from the same clock reading;
      update_* refreshes updated_at only; callers never supply timestamps
    - An IntegrityError on flush rolls the transaction back, so no partial record
      is ever written
    - A unique violation on driver number or team name surfaces as ConflictError;
      any other constraint violation (e.g. FK to a missing team) as DatabaseError
    - Does NOT enforce cross-entity rules; that is services/consistency_rules.py

Design Decisions:
    - Clock injected (default utc_now) so timestamp behaviour is testable
    - Driver reads use populate_existing so team_name reflects the current team_id
      after an update in the same session
    - Unique constraints are matched by name (asyncpg) or by table.column (SQLite,
      which does not report constraint names)
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Mapping

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import DriverFields, DriverId, TeamFields, TeamId
from app.core.enforce_drivers import number_taken
from app.core.enforce_teams import name_taken
from app.core.errors import ConflictError, DatabaseError
from app.models.driver import Driver, DRIVER_NUMBER_CONSTRAINT
from app.models.team import Team, TEAM_NAME_CONSTRAINT

logger = logging.getLogger(__name__)

UNIQUE_CONSTRAINT_COLUMNS = {
    DRIVER_NUMBER_CONSTRAINT: "drivers.driver_number",
    TEAM_NAME_CONSTRAINT: "teams.name",
}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def violated_unique_constraint(error: IntegrityError) -> str | None:
    """Name of the driver/team unique constraint behind `error`, or None."""
    cause = getattr(error.orig, "__cause__", None)
    name = getattr(cause, "constraint_name", None)
    if name in UNIQUE_CONSTRAINT_COLUMNS:
        return name
    message = str(error.orig)
    for constraint, column in UNIQUE_CONSTRAINT_COLUMNS.items():
        if constraint in message or f"UNIQUE constraint failed: {column}" in message:
            return constraint
    return None


def driver_conflicts(fields: DriverFields) -> dict[str, ConflictError]:
    return {DRIVER_NUMBER_CONSTRAINT: number_taken(fields.driver_number)}


def team_conflicts(fields: TeamFields) -> dict[str, ConflictError]:
    return {TEAM_NAME_CONSTRAINT: name_taken(fields.name)}


class RecordStore:
    """SQLAlchemy-backed implementation of RecordStoreLike."""

    def __init__(self, db: AsyncSession, clock: Callable[[], datetime] = utc_now):
        self.db = db
        self.clock = clock

    # ─── Drivers ─────────────────────────────────────────────────

    async def list_drivers(self) -> list[Driver]:
        result = await self.db.execute(
            select(Driver).execution_options(populate_existing=True),
        )
        return list(result.scalars().all())

    async def get_driver(self, driver_id: DriverId) -> Driver | None:
        result = await self.db.execute(
            select(Driver)
            .where(Driver.id == driver_id)
            .execution_options(populate_existing=True),
        )
        return result.scalar_one_or_none()

    async def insert_driver(self, fields: DriverFields) -> Driver:
        """Persist a new driver; id assigned by the database."""
        now = self.clock()
        driver = Driver(
            first_name=fields.first_name,
            last_name=fields.last_name,
            nationality=fields.nationality,
            date_of_birth=fields.date_of_birth,
            driver_number=fields.driver_number,
            team_id=fields.team_id,
            created_at=now,
            updated_at=now,
        )
        self.db.add(driver)
        await self._flush("insert_driver", driver_conflicts(fields))
        return await self.get_driver(DriverId(driver.id))

    async def update_driver(
        self, driver_id: DriverId, fields: DriverFields,
    ) -> Driver | None:
        """Replace all mutable fields. Returns None if the driver does not exist."""
        driver = await self.get_driver(driver_id)
        if driver is None:
            return None
        driver.first_name = fields.first_name
        driver.last_name = fields.last_name
        driver.nationality = fields.nationality
        driver.date_of_birth = fields.date_of_birth
        driver.driver_number = fields.driver_number
        driver.team_id = fields.team_id
        driver.updated_at = self.clock()
        await self._flush("update_driver", driver_conflicts(fields))
        return await self.get_driver(driver_id)

    async def delete_driver(self, driver_id: DriverId) -> bool:
        driver = await self.get_driver(driver_id)
        if driver is None:
            return False
        await self.db.delete(driver)
        await self._flush("delete_driver")
        return True

    # ─── Teams ───────────────────────────────────────────────────

    async def list_teams(self) -> list[Team]:
        result = await self.db.execute(select(Team))
        return list(result.scalars().all())

    async def get_team(self, team_id: TeamId) -> Team | None:
        result = await self.db.execute(select(Team).where(Team.id == team_id))
        return result.scalar_one_or_none()

    async def insert_team(self, fields: TeamFields) -> Team:
        now = self.clock()
        team = Team(
            name=fields.name,
            constructor=fields.constructor,
            founded_year=fields.founded_year,
            base_location=fields.base_location,
            championships_won=fields.championships_won,
            created_at=now,
            updated_at=now,
        )
        self.db.add(team)
        await self._flush("insert_team", team_conflicts(fields))
        return team

    async def update_team(self, team_id: TeamId, fields: TeamFields) -> Team | None:
        team = await self.get_team(team_id)
        if team is None:
            return None
        team.name = fields.name
        team.constructor = fields.constructor
        team.founded_year = fields.founded_year
        team.base_location = fields.base_location
        team.championships_won = fields.championships_won
        team.updated_at = self.clock()
        await self._flush("update_team", team_conflicts(fields))
        return team

    async def delete_team(self, team_id: TeamId) -> bool:
        team = await self.get_team(team_id)
        if team is None:
            return False
        await self.db.delete(team)
        await self._flush("delete_team")
        return True

    # ─── Lookups ─────────────────────────────────────────────────

    async def driver_count_for_team(self, team_id: TeamId) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(Driver).where(Driver.team_id == team_id),
        )
        return result.scalar_one()

    async def list_drivers_for_team(self, team_id: TeamId) -> list[Driver]:
        result = await self.db.execute(
            select(Driver)
            .where(Driver.team_id == team_id)
            .execution_options(populate_existing=True),
        )
        return list(result.scalars().all())

    async def find_driver_by_number(
        self, number: int, exclude_id: DriverId | None = None,
    ) -> Driver | None:
        """Driver holding `number`, ignoring `exclude_id` (the record being updated)."""
        query = select(Driver).where(Driver.driver_number == number)
        if exclude_id is not None:
            query = query.where(Driver.id != exclude_id)
        result = await self.db.execute(query)
        return result.scalars().first()

    async def find_team_by_name(
        self, name: str, exclude_id: TeamId | None = None,
    ) -> Team | None:
        query = select(Team).where(Team.name == name)
        if exclude_id is not None:
            query = query.where(Team.id != exclude_id)
        result = await self.db.execute(query)
        return result.scalars().first()

    async def team_exists(self, team_id: TeamId) -> bool:
        result = await self.db.execute(select(Team.id).where(Team.id == team_id))
        return result.scalar_one_or_none() is not None

    # ─── Helpers ─────────────────────────────────────────────────

    async def _flush(
        self, operation: str,
        conflicts: Mapping[str, ConflictError] | None = None,
    ) -> None:
        """Flush pending changes; roll back everything on a constraint violation."""
        try:
            await self.db.flush()
        except IntegrityError as e:
            await self.db.rollback()
            constraint = violated_unique_constraint(e)
            if conflicts and constraint in conflicts:
                logger.warning(
                    f"Storage rejected {operation}: {constraint} violated",
                    extra={"operation": operation, "error_code": "CONFLICT"},
                )
                raise conflicts[constraint] from e
            logger.error(
                f"Storage rejected {operation}: {e.orig}",
                extra={"operation": operation},
            )
            raise DatabaseError("Integrity constraint violated", operation) from e
