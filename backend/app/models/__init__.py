"""ORM Models — SQLAlchemy declarative models for drivers and teams.

Invariants:
    - All models inherit from Base (db/base.py)
    - Models carry no validation logic; rules live in core/enforce_*

Design Decisions:
    - One file per entity
    - All models imported here so string-based relationship() references
      resolve before any query runs
"""

from app.models.team import Team  # noqa: F401
from app.models.driver import Driver  # noqa: F401
