"""Domain Types — identity types, field sets and bounds shared by core and shell.

Invariants:
    - DriverId, TeamId wrap ints; the store assigns them, callers never invent them
    - DriverFields/TeamFields hold only caller-supplied values (no id, no timestamps)
    - All numeric/length bounds live here; enforce_* modules read them, never hardcode

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - Frozen dataclasses for field sets: a validated field set cannot be mutated
      between the rules check and the store write
"""

from dataclasses import dataclass
from datetime import date
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

DriverId = NewType("DriverId", int)
TeamId = NewType("TeamId", int)


# ─── Bounds ──────────────────────────────────────────────────────

DRIVER_NAME_MAX_LENGTH = 50
DRIVER_NUMBER_MIN = 1
DRIVER_NUMBER_MAX = 99

TEAM_TEXT_MAX_LENGTH = 100
FOUNDED_YEAR_MIN = 1950
FOUNDED_YEAR_MAX = 2099


# ─── Field Sets ──────────────────────────────────────────────────

@dataclass(frozen=True)
class DriverFields:
    """Mutable fields of a driver, as supplied by the caller."""
    first_name: str
    last_name: str
    nationality: str
    date_of_birth: date
    driver_number: int
    team_id: TeamId | None = None


@dataclass(frozen=True)
class TeamFields:
    """Mutable fields of a team, as supplied by the caller."""
    name: str
    constructor: str
    founded_year: int
    base_location: str
    championships_won: int = 0
