import structlog
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from daycare.database import get_db
from daycare.exceptions import NotFoundError
from daycare.schemas.report_basket import (
    PinnedObservation,
    PinRequest,
    ReorderRequest,
    ReportBasketResponse,
)
from daycare.services.kv_store import SQLKeyValueStore
from daycare.services.observations import get_observation
from daycare.services.report_basket import ReportBasket

router = APIRouter()
logger = structlog.get_logger()


async def _basket_response(db: AsyncSession, items: list[dict]) -> ReportBasketResponse:
    pinned = []
    for item in items:
        observation = await get_observation(db, item["id"])
        # Observations deleted elsewhere simply drop out of the basket view.
        if observation is not None:
            pinned.append(PinnedObservation(order=item["order"], observation=observation))
    return ReportBasketResponse(items=pinned)


async def _set_linked(db: AsyncSession, observation_id: int, linked: bool) -> None:
    await db.execute(
        text("""
            UPDATE observations
            SET linked_to_report = :linked, updated_at = CURRENT_TIMESTAMP
            WHERE id = :id
        """),
        {"linked": linked, "id": observation_id},
    )


@router.get("", response_model=ReportBasketResponse)
async def get_report_basket(db: AsyncSession = Depends(get_db)):
    """Pinned observations in report order"""
    return await _basket_response(db, await ReportBasket(SQLKeyValueStore(db)).items())


@router.post("", response_model=ReportBasketResponse)
async def pin_observation(payload: PinRequest, db: AsyncSession = Depends(get_db)):
    if await get_observation(db, payload.observation_id) is None:
        raise NotFoundError("Observation not found", "OBSERVATION_NOT_FOUND")

    items = await ReportBasket(SQLKeyValueStore(db)).pin(payload.observation_id)
    await _set_linked(db, payload.observation_id, True)
    await db.commit()
    logger.info("Observation pinned", observation_id=payload.observation_id)
    return await _basket_response(db, items)


@router.delete("/{observation_id}", response_model=ReportBasketResponse)
async def unpin_observation(observation_id: int, db: AsyncSession = Depends(get_db)):
    items = await ReportBasket(SQLKeyValueStore(db)).unpin(observation_id)
    await _set_linked(db, observation_id, False)
    await db.commit()
    return await _basket_response(db, items)


@router.put("/order", response_model=ReportBasketResponse)
async def reorder_basket(payload: ReorderRequest, db: AsyncSession = Depends(get_db)):
    """Move one pinned item; every item's order becomes its position"""
    items = await ReportBasket(SQLKeyValueStore(db)).move(payload.from_index, payload.to_index)
    await db.commit()
    return await _basket_response(db, items)
