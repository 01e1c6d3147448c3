"""Team ORM — persists an organization record.

Invariants:
    - id is an autoincrement integer primary key
    - name is unique (constraint uq_teams_name), at most 100 chars
    - created_at/updated_at have no ORM defaults: the record store stamps them

Design Decisions:
    - No drivers collection: Driver.team_id is the only side of the relationship,
      team membership is derived by query (record_store.list_drivers_for_team)
"""

from datetime import datetime

from sqlalchemy import String, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.db.types import UTCDateTime

TEAM_NAME_CONSTRAINT = "uq_teams_name"


class Team(Base):
    """Team entity — a constructor organization that drivers may belong to."""
    __tablename__ = "teams"
    __table_args__ = (UniqueConstraint("name", name=TEAM_NAME_CONSTRAINT),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    constructor: Mapped[str] = mapped_column(String(100), nullable=False)
    founded_year: Mapped[int] = mapped_column(Integer, nullable=False)
    base_location: Mapped[str] = mapped_column(String(100), nullable=False)
    championships_won: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False,
    )
