import structlog
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from daycare.config import settings
from daycare.database import get_db
from daycare.schemas.health import HealthCheck

router = APIRouter()
logger = structlog.get_logger()


async def database_reachable(db: AsyncSession) -> bool:
    try:
        return (await db.execute(text("SELECT 1"))).scalar() == 1
    except SQLAlchemyError as e:
        logger.error("Health probe could not reach the database", error=str(e))
        return False


@router.get("", response_model=HealthCheck)
async def health_check(response: Response, db: AsyncSession = Depends(get_db)) -> HealthCheck:
    """The API is up; the database probe decides whether it can serve requests.

    Answers 503 while the database is unreachable so load balancers stop routing.
    """
    if await database_reachable(db):
        return HealthCheck(
            status="healthy", database_status="healthy", environment=settings.ENVIRONMENT
        )

    response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return HealthCheck(
        status="unhealthy", database_status="unhealthy", environment=settings.ENVIRONMENT
    )
