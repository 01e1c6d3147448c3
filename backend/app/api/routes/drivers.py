"""Driver Routes — CRUD endpoints for /api/v1/drivers.

Invariants:
    - Handlers only translate between HTTP and ConsistencyRules calls
    - F1SimError subclasses propagate to the global handler (api/error_handlers.py)
"""

from fastapi import APIRouter, Depends, Response, status

from app.api.dependencies import get_rules
from app.core.domain_types import DriverId
from app.schemas.driver import DriverInput, DriverResponse
from app.services.consistency_rules import ConsistencyRules

router = APIRouter(prefix="/api/v1/drivers", tags=["drivers"])


@router.get("", response_model=list[DriverResponse])
async def list_drivers(rules: ConsistencyRules = Depends(get_rules)):
    return await rules.list_drivers()


@router.get("/{driver_id}", response_model=DriverResponse)
async def get_driver(driver_id: int, rules: ConsistencyRules = Depends(get_rules)):
    return await rules.get_driver(DriverId(driver_id))


@router.post(
    "", response_model=DriverResponse, status_code=status.HTTP_201_CREATED,
)
async def create_driver(
    body: DriverInput, response: Response,
    rules: ConsistencyRules = Depends(get_rules),
):
    driver = await rules.create_driver(body.to_fields())
    response.headers["Location"] = f"{router.prefix}/{driver.id}"
    return driver


@router.put("/{driver_id}", response_model=DriverResponse)
async def update_driver(
    driver_id: int, body: DriverInput,
    rules: ConsistencyRules = Depends(get_rules),
):
    return await rules.update_driver(DriverId(driver_id), body.to_fields())


@router.delete("/{driver_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_driver(driver_id: int, rules: ConsistencyRules = Depends(get_rules)):
    await rules.delete_driver(DriverId(driver_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
