"""Team Routes — CRUD endpoints for /api/v1/teams plus the team's driver list."""

from fastapi import APIRouter, Depends, Response, status

from app.api.dependencies import get_rules
from app.core.domain_types import TeamId
from app.schemas.driver import DriverResponse
from app.schemas.team import TeamInput, TeamResponse
from app.services.consistency_rules import ConsistencyRules

router = APIRouter(prefix="/api/v1/teams", tags=["teams"])


@router.get("", response_model=list[TeamResponse])
async def list_teams(rules: ConsistencyRules = Depends(get_rules)):
    return await rules.list_teams()


@router.get("/{team_id}", response_model=TeamResponse)
async def get_team(team_id: int, rules: ConsistencyRules = Depends(get_rules)):
    return await rules.get_team(TeamId(team_id))


@router.get("/{team_id}/drivers", response_model=list[DriverResponse])
async def list_team_drivers(team_id: int, rules: ConsistencyRules = Depends(get_rules)):
    return await rules.list_team_drivers(TeamId(team_id))


@router.post("", response_model=TeamResponse, status_code=status.HTTP_201_CREATED)
async def create_team(
    body: TeamInput, response: Response,
    rules: ConsistencyRules = Depends(get_rules),
):
    team = await rules.create_team(body.to_fields())
    response.headers["Location"] = f"{router.prefix}/{team.id}"
    return team


@router.put("/{team_id}", response_model=TeamResponse)
async def update_team(
    team_id: int, body: TeamInput,
    rules: ConsistencyRules = Depends(get_rules),
):
    return await rules.update_team(TeamId(team_id), body.to_fields())


@router.delete("/{team_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_team(team_id: int, rules: ConsistencyRules = Depends(get_rules)):
    await rules.delete_team(TeamId(team_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
