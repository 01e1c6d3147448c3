"""Driver Schemas — request parsing and response rendering for /drivers.

Invariants:
    - DriverInput carries exactly the caller-supplied fields (no id, no timestamps)
    - DriverResponse exposes team_name resolved from the assigned team, or None
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict

from app.core.domain_types import DriverFields, TeamId


class DriverInput(BaseModel):
    """Body for POST (create) and PUT (full replace) of a driver."""
    first_name: str
    last_name: str
    nationality: str
    date_of_birth: date
    driver_number: int
    team_id: int | None = None

    def to_fields(self) -> DriverFields:
        return DriverFields(
            first_name=self.first_name,
            last_name=self.last_name,
            nationality=self.nationality,
            date_of_birth=self.date_of_birth,
            driver_number=self.driver_number,
            team_id=TeamId(self.team_id) if self.team_id is not None else None,
        )


class DriverResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    nationality: str
    date_of_birth: date
    driver_number: int
    team_id: int | None = None
    team_name: str | None = None
    created_at: datetime
    updated_at: datetime
