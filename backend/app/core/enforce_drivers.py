"""Driver Enforcement — shape predicates and cross-entity rules for drivers.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - DRIVER_FIELD_CHECKS order is the reporting order: first name, last name,
      nationality, driver number
    - Uniqueness and team-reference rules take lookup results as arguments;
      the shell performs the lookups

Design Decisions:
    - Separate from enforce_teams: each entity's rules readable in one file
"""

from app.core.domain_types import (
    DriverFields,
    DRIVER_NAME_MAX_LENGTH, DRIVER_NUMBER_MIN, DRIVER_NUMBER_MAX,
)
from app.core.enforce_fields import check_required_text, check_int_range
from app.core.errors import ConflictError, ValidationError


# --- Shape predicates ---------------------------------------------------------

def check_first_name(fields: DriverFields) -> ValidationError | None:
    return check_required_text(fields.first_name, "first_name", DRIVER_NAME_MAX_LENGTH)


def check_last_name(fields: DriverFields) -> ValidationError | None:
    return check_required_text(fields.last_name, "last_name", DRIVER_NAME_MAX_LENGTH)


def check_nationality(fields: DriverFields) -> ValidationError | None:
    return check_required_text(fields.nationality, "nationality", DRIVER_NAME_MAX_LENGTH)


def check_driver_number(fields: DriverFields) -> ValidationError | None:
    return check_int_range(
        fields.driver_number, "driver_number", DRIVER_NUMBER_MIN, DRIVER_NUMBER_MAX,
    )


DRIVER_FIELD_CHECKS = (
    check_first_name,
    check_last_name,
    check_nationality,
    check_driver_number,
)


# --- Cross-entity rules -------------------------------------------------------

def number_taken(number: int) -> ConflictError:
    return ConflictError(f"Driver number {number} is already taken")


def check_number_available(number: int, holder: object | None) -> ConflictError | None:
    """holder is the other driver already using the number, if any."""
    if holder is not None:
        return number_taken(number)
    return None


def check_team_reference(team_id: int | None, team_exists: bool) -> ValidationError | None:
    """A supplied team id must resolve to an existing team."""
    if team_id is not None and not team_exists:
        return ValidationError(f"Team with ID {team_id} does not exist", "team_id")
    return None
