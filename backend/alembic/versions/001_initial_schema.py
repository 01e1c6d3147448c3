"""Initial schema — teams and drivers.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "teams",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("constructor", sa.String(100), nullable=False),
        sa.Column("founded_year", sa.Integer, nullable=False),
        sa.Column("base_location", sa.String(100), nullable=False),
        sa.Column("championships_won", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("name", name="uq_teams_name"),
    )

    op.create_table(
        "drivers",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("first_name", sa.String(50), nullable=False),
        sa.Column("last_name", sa.String(50), nullable=False),
        sa.Column("nationality", sa.String(50), nullable=False),
        sa.Column("date_of_birth", sa.Date, nullable=False),
        sa.Column("driver_number", sa.Integer, nullable=False),
        sa.Column(
            "team_id", sa.Integer,
            sa.ForeignKey("teams.id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("driver_number", name="uq_drivers_driver_number"),
    )
    op.create_index("ix_drivers_team_id", "drivers", ["team_id"])


def downgrade() -> None:
    op.drop_index("ix_drivers_team_id", table_name="drivers")
    op.drop_table("drivers")
    op.drop_table("teams")
