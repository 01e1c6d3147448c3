"""Field Shape Enforcement — reusable predicates and the ordered evaluator.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Predicates return an error instance on violation, None on success (never raise)
    - first_violation evaluates checks strictly in the given order and stops at the first failure
"""

from typing import Callable, Sequence, TypeVar

from app.core.errors import F1SimError, ValidationError

F = TypeVar("F")
FieldCheck = Callable[[F], F1SimError | None]


def check_required_text(value: str | None, field: str, max_length: int) -> ValidationError | None:
    """Non-blank and at most max_length characters."""
    if value is None or not value.strip() or len(value) > max_length:
        return ValidationError(
            f"{field} is required and must be {max_length} characters or less",
            field,
        )
    return None


def check_int_range(value: int, field: str, low: int, high: int) -> ValidationError | None:
    """Inclusive range check."""
    if value < low or value > high:
        return ValidationError(f"{field} must be between {low} and {high}", field)
    return None


def first_violation(checks: Sequence[FieldCheck], fields: F) -> F1SimError | None:
    """Run checks in order, return the first error (or None if all pass)."""
    for check in checks:
        error = check(fields)
        if error is not None:
            return error
    return None
