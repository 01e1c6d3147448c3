"""Boundary Protocols — the Record Store contract between core and shell.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - The store never commits; the caller owns the transaction
    - insert_*/update_* stamp created_at/updated_at themselves; field sets carry no timestamps

Design Decisions:
    - Protocol over ABC: structural subtyping, tests can pass any object with these methods
    - Async in Protocol: implementations do IO, the enforce_* functions that use
      their results are never async themselves
"""

from datetime import date, datetime
from typing import Protocol, Sequence

from app.core.domain_types import DriverFields, DriverId, TeamFields, TeamId


class TeamLike(Protocol):
    """Structural contract for persisted Team records."""
    id: int
    name: str
    constructor: str
    founded_year: int
    base_location: str
    championships_won: int
    created_at: datetime
    updated_at: datetime


class DriverLike(Protocol):
    """Structural contract for persisted Driver records."""
    id: int
    first_name: str
    last_name: str
    nationality: str
    date_of_birth: date
    driver_number: int
    team_id: int | None
    created_at: datetime
    updated_at: datetime

    @property
    def team_name(self) -> str | None: ...


class RecordStoreLike(Protocol):
    """Contract for driver/team persistence, implemented by services/record_store.py."""
    async def list_drivers(self) -> Sequence[DriverLike]: ...
    async def get_driver(self, driver_id: DriverId) -> DriverLike | None: ...
    async def insert_driver(self, fields: DriverFields) -> DriverLike: ...
    async def update_driver(
        self, driver_id: DriverId, fields: DriverFields,
    ) -> DriverLike | None: ...
    async def delete_driver(self, driver_id: DriverId) -> bool: ...

    async def list_teams(self) -> Sequence[TeamLike]: ...
    async def get_team(self, team_id: TeamId) -> TeamLike | None: ...
    async def insert_team(self, fields: TeamFields) -> TeamLike: ...
    async def update_team(
        self, team_id: TeamId, fields: TeamFields,
    ) -> TeamLike | None: ...
    async def delete_team(self, team_id: TeamId) -> bool: ...

    async def driver_count_for_team(self, team_id: TeamId) -> int: ...
    async def list_drivers_for_team(self, team_id: TeamId) -> Sequence[DriverLike]: ...
    async def find_driver_by_number(
        self, number: int, exclude_id: DriverId | None = None,
    ) -> DriverLike | None: ...
    async def find_team_by_name(
        self, name: str, exclude_id: TeamId | None = None,
    ) -> TeamLike | None: ...
    async def team_exists(self, team_id: TeamId) -> bool: ...
