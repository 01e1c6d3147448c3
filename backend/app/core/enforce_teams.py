"""Team Enforcement — shape predicates and cross-entity rules for teams.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - TEAM_FIELD_CHECKS order: name, constructor, base location, founded year,
      championships won
    - A team with one or more assigned drivers is never deletable
"""

from app.core.domain_types import (
    TeamFields, TEAM_TEXT_MAX_LENGTH, FOUNDED_YEAR_MIN, FOUNDED_YEAR_MAX,
)
from app.core.enforce_fields import check_required_text, check_int_range
from app.core.errors import ConflictError, ValidationError


# --- Shape predicates ---------------------------------------------------------

def check_name(fields: TeamFields) -> ValidationError | None:
    return check_required_text(fields.name, "name", TEAM_TEXT_MAX_LENGTH)


def check_constructor(fields: TeamFields) -> ValidationError | None:
    return check_required_text(fields.constructor, "constructor", TEAM_TEXT_MAX_LENGTH)


def check_base_location(fields: TeamFields) -> ValidationError | None:
    return check_required_text(fields.base_location, "base_location", TEAM_TEXT_MAX_LENGTH)


def check_founded_year(fields: TeamFields) -> ValidationError | None:
    return check_int_range(
        fields.founded_year, "founded_year", FOUNDED_YEAR_MIN, FOUNDED_YEAR_MAX,
    )


def check_championships_won(fields: TeamFields) -> ValidationError | None:
    if fields.championships_won < 0:
        return ValidationError(
            "championships_won must be zero or greater", "championships_won",
        )
    return None


TEAM_FIELD_CHECKS = (
    check_name,
    check_constructor,
    check_base_location,
    check_founded_year,
    check_championships_won,
)


# --- Cross-entity rules -------------------------------------------------------

def name_taken(name: str) -> ConflictError:
    return ConflictError(f"Team with name '{name}' already exists")


def check_name_available(name: str, holder: object | None) -> ConflictError | None:
    if holder is not None:
        return name_taken(name)
    return None


def check_team_deletable(driver_count: int) -> ConflictError | None:
    """Deletion is blocked while any driver references the team."""
    if driver_count > 0:
        return ConflictError(
            "Cannot delete team with active drivers. "
            "Remove or reassign drivers first.",
        )
    return None
