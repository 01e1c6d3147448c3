"""Team Schemas — request parsing and response rendering for /teams."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from app.core.domain_types import TeamFields


class TeamInput(BaseModel):
    """Body for POST (create) and PUT (full replace) of a team."""
    name: str
    constructor: str
    founded_year: int
    base_location: str
    championships_won: int = 0

    def to_fields(self) -> TeamFields:
        return TeamFields(
            name=self.name,
            constructor=self.constructor,
            founded_year=self.founded_year,
            base_location=self.base_location,
            championships_won=self.championships_won,
        )


class TeamResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    constructor: str
    founded_year: int
    base_location: str
    championships_won: int
    created_at: datetime
    updated_at: datetime
