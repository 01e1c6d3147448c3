"""Request-scoped dependencies shared by the route modules."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.database import get_db
from app.services.consistency_rules import ConsistencyRules


def get_rules(db: AsyncSession = Depends(get_db)) -> ConsistencyRules:
    """One rules engine (and record store) per request session."""
    return ConsistencyRules(db)
