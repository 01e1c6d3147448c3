"""Consistency Rules Engine — gatekeeper between callers and the Record Store.

Invariants:
    - Each public mutation is one transaction: commit on success, rollback on any failure
    - Check order is fixed: shape (first failing field wins) → uniqueness →
      team existence → store mutation
    - update_* and delete_* report NotFoundError before any other check
    - A team with assigned drivers is never deleted
    - Only the first failure is raised
    - A uniqueness race lost at flush or commit is still a ConflictError, never a
      storage failure

Design Decisions:
    - Pure predicates live in core/enforce_*; this module performs the lookups they
      need and raises what they return
    - Store injected (RecordStoreLike) so the rules can run against any backend
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Mapping, Sequence

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import DriverFields, DriverId, TeamFields, TeamId
from app.core.enforce_drivers import (
    DRIVER_FIELD_CHECKS, check_number_available, check_team_reference,
)
from app.core.enforce_fields import first_violation
from app.core.enforce_teams import (
    TEAM_FIELD_CHECKS, check_name_available, check_team_deletable,
)
from app.core.errors import (
    F1SimError, ConflictError, DatabaseError, NotFoundError, ErrorSeverity,
)
from app.core.repository_protocols import DriverLike, RecordStoreLike, TeamLike
from app.infrastructure.observability import record_context
from app.services.record_store import (
    RecordStore, driver_conflicts, team_conflicts, violated_unique_constraint,
)

logger = logging.getLogger(__name__)


def _raise_if(error: F1SimError | None) -> None:
    if error is not None:
        raise error


class ConsistencyRules:
    """Validates and applies driver/team mutations as single transactions."""

    def __init__(self, db: AsyncSession, store: RecordStoreLike | None = None):
        self.db = db
        self.store = store or RecordStore(db)

    # ─── Drivers ─────────────────────────────────────────────────

    async def list_drivers(self) -> Sequence[DriverLike]:
        return await self.store.list_drivers()

    async def get_driver(self, driver_id: DriverId) -> DriverLike:
        driver = await self.store.get_driver(driver_id)
        if driver is None:
            raise NotFoundError("Driver", driver_id)
        return driver

    async def create_driver(self, fields: DriverFields) -> DriverLike:
        async with self._unit_of_work("create_driver", driver_conflicts(fields)):
            await self._check_driver_fields(fields, exclude_id=None)
            driver = await self.store.insert_driver(fields)
        logger.info(
            f"Driver #{driver.driver_number} created",
            extra=record_context(driver),
        )
        return driver

    async def update_driver(self, driver_id: DriverId, fields: DriverFields) -> DriverLike:
        async with self._unit_of_work("update_driver", driver_conflicts(fields)):
            if await self.store.get_driver(driver_id) is None:
                raise NotFoundError("Driver", driver_id)
            await self._check_driver_fields(fields, exclude_id=driver_id)
            driver = await self.store.update_driver(driver_id, fields)
            if driver is None:
                raise NotFoundError("Driver", driver_id)
        logger.info(
            f"Driver #{driver.driver_number} updated",
            extra=record_context(driver),
        )
        return driver

    async def delete_driver(self, driver_id: DriverId) -> None:
        async with self._unit_of_work("delete_driver"):
            if not await self.store.delete_driver(driver_id):
                raise NotFoundError("Driver", driver_id)
        logger.info("Driver deleted", extra={"driver_id": driver_id})

    # ─── Teams ───────────────────────────────────────────────────

    async def list_teams(self) -> Sequence[TeamLike]:
        return await self.store.list_teams()

    async def get_team(self, team_id: TeamId) -> TeamLike:
        team = await self.store.get_team(team_id)
        if team is None:
            raise NotFoundError("Team", team_id)
        return team

    async def list_team_drivers(self, team_id: TeamId) -> Sequence[DriverLike]:
        if not await self.store.team_exists(team_id):
            raise NotFoundError("Team", team_id)
        return await self.store.list_drivers_for_team(team_id)

    async def create_team(self, fields: TeamFields) -> TeamLike:
        async with self._unit_of_work("create_team", team_conflicts(fields)):
            await self._check_team_fields(fields, exclude_id=None)
            team = await self.store.insert_team(fields)
        logger.info(f"Team '{team.name}' created", extra=record_context(team))
        return team

    async def update_team(self, team_id: TeamId, fields: TeamFields) -> TeamLike:
        async with self._unit_of_work("update_team", team_conflicts(fields)):
            if not await self.store.team_exists(team_id):
                raise NotFoundError("Team", team_id)
            await self._check_team_fields(fields, exclude_id=team_id)
            team = await self.store.update_team(team_id, fields)
            if team is None:
                raise NotFoundError("Team", team_id)
        logger.info(f"Team '{team.name}' updated", extra=record_context(team))
        return team

    async def delete_team(self, team_id: TeamId) -> None:
        async with self._unit_of_work("delete_team"):
            if not await self.store.team_exists(team_id):
                raise NotFoundError("Team", team_id)
            _raise_if(check_team_deletable(
                await self.store.driver_count_for_team(team_id),
            ))
            await self.store.delete_team(team_id)
        logger.info("Team deleted", extra={"team_id": team_id})

    # ─── Checks ──────────────────────────────────────────────────

    async def _check_driver_fields(
        self, fields: DriverFields, exclude_id: DriverId | None,
    ) -> None:
        _raise_if(first_violation(DRIVER_FIELD_CHECKS, fields))
        holder = await self.store.find_driver_by_number(
            fields.driver_number, exclude_id=exclude_id,
        )
        _raise_if(check_number_available(fields.driver_number, holder))
        if fields.team_id is not None:
            _raise_if(check_team_reference(
                fields.team_id, await self.store.team_exists(fields.team_id),
            ))

    async def _check_team_fields(
        self, fields: TeamFields, exclude_id: TeamId | None,
    ) -> None:
        _raise_if(first_violation(TEAM_FIELD_CHECKS, fields))
        holder = await self.store.find_team_by_name(fields.name, exclude_id=exclude_id)
        _raise_if(check_name_available(fields.name, holder))

    @asynccontextmanager
    async def _unit_of_work(
        self, operation: str,
        conflicts: Mapping[str, ConflictError] | None = None,
    ) -> AsyncIterator[None]:
        """Commit if the body succeeds, roll back and re-raise otherwise.

        A unique violation at commit time (a concurrent writer took the number or
        name after the lookup) is reported as the matching ConflictError.
        """
        try:
            yield
            try:
                await self.db.commit()
            except IntegrityError as e:
                constraint = violated_unique_constraint(e)
                if conflicts and constraint in conflicts:
                    raise conflicts[constraint] from e
                raise
        except F1SimError as e:
            await self.db.rollback()
            level = (
                logging.ERROR if e.severity == ErrorSeverity.CRITICAL
                else logging.WARNING
            )
            logger.log(
                level, f"{operation} rejected: {e.message}",
                extra={"error_code": e.code, "operation": operation},
            )
            raise
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                f"{operation} failed in storage: {e}",
                extra={"operation": operation},
            )
            raise DatabaseError("Transaction failed", operation) from e
