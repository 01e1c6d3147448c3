"""Driver ORM — persists a competitor record.

Invariants:
    - id is an autoincrement integer primary key
    - driver_number is unique across all drivers (constraint uq_drivers_driver_number)
    - team_id is nullable; FK to teams.id, ON DELETE SET NULL
    - created_at/updated_at have no ORM defaults: the record store stamps them

Design Decisions:
    - team relationship is many-to-one only, eager-joined so team_name resolves
      inside async sessions without lazy IO
"""

from datetime import date, datetime
from typing import Optional

from sqlalchemy import String, Integer, Date, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.db.types import UTCDateTime

DRIVER_NUMBER_CONSTRAINT = "uq_drivers_driver_number"


class Driver(Base):
    """Driver entity — a competitor with a unique car number."""
    __tablename__ = "drivers"
    __table_args__ = (
        UniqueConstraint("driver_number", name=DRIVER_NUMBER_CONSTRAINT),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column(String(50), nullable=False)
    last_name: Mapped[str] = mapped_column(String(50), nullable=False)
    nationality: Mapped[str] = mapped_column(String(50), nullable=False)
    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)
    driver_number: Mapped[int] = mapped_column(Integer, nullable=False)
    team_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("teams.id", ondelete="SET NULL"),
        nullable=True, index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False,
    )

    team: Mapped[Optional["Team"]] = relationship("Team", lazy="joined")

    @property
    def team_name(self) -> str | None:
        return self.team.name if self.team is not None else None
